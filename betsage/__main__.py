"""
Entry point: ``python -m betsage`` starts the API server.
"""

import logging

import uvicorn

from betsage.core.config import settings


def main() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    logging.getLogger(__name__).info(f"Sports Prediction Agent running on port {settings.PORT}")
    uvicorn.run("betsage.api.app:app", host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
