"""HTTP API for BetSage."""
