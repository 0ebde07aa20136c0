"""
FastAPI Application for BetSage.

REST API for:
    - LLM game predictions (POST /predictions)
    - Historical prediction aggregates (GET /performance)
    - Health checks (GET /health)

Every route is also served under /api for the bundled web client.

Security features:
    - Fixed-window rate limiting per client (10 requests/hour)
    - Input validation with Pydantic
"""

from datetime import datetime, timezone
from pathlib import Path
import logging
import time

from dotenv import load_dotenv
from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from betsage.api.dependencies import state
from betsage.api.endpoints import performance, predictions
from betsage.core.config import settings
from betsage.core.database.connection import create_engine
from betsage.core.errors import BetSageError, RateLimitExceededError
from betsage.monitoring.prediction_recorder import PredictionRecorder

# Load environment variables from .env file
load_dotenv()


logger = logging.getLogger(__name__)


# ============================================================================
# API Models
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    timestamp: str


# ============================================================================
# Error Handling
# ============================================================================

async def betsage_error_handler(request: Request, exc: BetSageError) -> JSONResponse:
    """Render any pipeline error as {"error": message} with its mapped status."""
    headers = {}
    if isinstance(exc, RateLimitExceededError):
        headers["Retry-After"] = str(exc.retry_after_minutes * 60)
    elif exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers=headers
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"{request.method} {request.url.path} crashed: {exc}")
    return JSONResponse(status_code=500, content={"error": str(exc) or "Internal server error"})


# ============================================================================
# Info Endpoints
# ============================================================================

info_router = APIRouter(tags=["Info"])


@info_router.get("/health", response_model=HealthResponse)
async def health_check():
    """Liveness probe."""
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    )


# ============================================================================
# Application
# ============================================================================

app = FastAPI(
    title=settings.APP_NAME,
    description="Sports betting predictions from live odds and Claude",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_exception_handler(BetSageError, betsage_error_handler)
app.add_exception_handler(Exception, unhandled_error_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add X-Process-Time header for performance monitoring."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(round(process_time * 1000, 2)) + "ms"
    return response


for prefix in ("", "/api"):
    app.include_router(info_router, prefix=prefix)
    app.include_router(predictions.router, prefix=prefix)
    app.include_router(performance.router, prefix=prefix)


# Static front end, mounted last so API routes take precedence
_static_dir = Path(settings.STATIC_DIR)
if _static_dir.is_dir():
    app.mount("/", StaticFiles(directory=str(_static_dir), html=True), name="static")


# ============================================================================
# Startup / Shutdown
# ============================================================================


@app.on_event("startup")
async def startup_event():
    """Report configuration and connect optional storage."""
    logger.info(f"{settings.APP_NAME} starting up ({settings.ENVIRONMENT})")
    logger.info(f"Anthropic API key found: {'YES' if settings.ANTHROPIC_API_KEY else 'NO'}")
    logger.info(f"Odds API key found: {'YES' if settings.ODDS_API_KEY else 'NO'}")

    if not settings.ASYNC_DATABASE_URL:
        logger.info("DATABASE_URL not set - predictions will not be stored")
    elif state.recorder is None:
        try:
            engine = create_engine(
                settings.ASYNC_DATABASE_URL,
                production=settings.is_production,
                echo=settings.DEBUG,
            )
            recorder = PredictionRecorder(engine)
            await recorder.create_tables()
            state.set_recorder(recorder)
        except Exception as e:
            logger.error(f"Prediction storage unavailable, continuing without it: {e}")


@app.on_event("shutdown")
async def shutdown_event():
    """Clean up resources on shutdown."""
    logger.info(f"{settings.APP_NAME} shutting down...")
    if state.recorder is not None:
        await state.recorder.close()
        state.set_recorder(None)
