"""
FastAPI dependency providers.
"""

from functools import lru_cache

from src.core.calculations.classification import ReturnClassifier
from src.core.config import get_settings
from src.core.services.portfolio_service import PortfolioService
from src.infrastructure.data import CSVTransactionSource, MFAPIPriceSource, SheetLedger


@lru_cache
def get_portfolio_service() -> PortfolioService:
    """Process-wide portfolio service wired from settings."""
    settings = get_settings()
    ledger = (
        SheetLedger(settings.LEDGER_URL, timeout=settings.HTTP_TIMEOUT_SECONDS)
        if settings.LEDGER_URL
        else None
    )
    return PortfolioService(
        transaction_source=CSVTransactionSource(settings.TRANSACTIONS_CSV_URL),
        price_source=MFAPIPriceSource(
            base_url=settings.PRICE_API_BASE_URL,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            cache_size=settings.PRICE_CACHE_SIZE,
            cache_ttl=settings.PRICE_CACHE_TTL_SECONDS,
        ),
        ledger=ledger,
    )


@lru_cache
def get_classifier() -> ReturnClassifier:
    return ReturnClassifier(get_settings().return_bands)
