"""
FastAPI main application for the portfolio tracker.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from src.api.schemas.api_models import ErrorResponse
from src.core.config import get_settings
from src.core.exceptions.tracker import (
    ConfigurationError,
    DataError,
    PortfolioError,
    PositionNotFoundError,
    TrackerException,
    ValidationError,
)
from src.core.utils.logging_setup import setup_logging

from .routers import portfolio, transactions

setup_logging(get_settings().LOG_LEVEL)

app = FastAPI(
    title="Portfolio Tracker API",
    version="1.0.0",
    description="API for mutual-fund holdings, returns and XIRR",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",  # Development frontend
        "http://localhost:8080",
    ],
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Accept", "Origin"],
)

app.include_router(portfolio.router, prefix="/api/portfolio", tags=["portfolio"])
app.include_router(transactions.router, prefix="/api/transactions", tags=["transactions"])

# Most specific first; the first isinstance match wins.
_STATUS_CODES: tuple[tuple[type[TrackerException], int], ...] = (
    (PositionNotFoundError, 404),
    (DataError, 502),
    (ValidationError, 422),
    (ConfigurationError, 503),
    (PortfolioError, 409),
)


@app.exception_handler(TrackerException)
async def tracker_exception_handler(request: Request, exc: TrackerException) -> JSONResponse:
    """Translate domain errors into JSON error responses."""
    status_code = next(
        (code for exc_type, code in _STATUS_CODES if isinstance(exc, exc_type)), 500
    )
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=type(exc).__name__, message=str(exc)).model_dump(),
    )


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint returning API information."""
    return {"message": "Portfolio Tracker API", "version": "1.0.0", "status": "running"}


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
