"""
Mutual-fund NAV price source.

Fetches scheme NAV histories from an mfapi.in compatible endpoint:

    GET {base_url}/{scheme_code}
    {"meta": {"scheme_name": ...}, "data": [{"date": "DD-MM-YYYY", "nav": "..."}, ...]}

Records are published newest first. Responses are memoised in a bounded
TTL cache so a refresh that touches the same scheme twice, or two
refreshes in quick succession, hit the network once.
"""

import threading
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

import requests
from cachetools import TTLCache
from loguru import logger

from src.core.constants import (
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_PRICE_CACHE_SIZE,
    DEFAULT_PRICE_CACHE_TTL_SECONDS,
    PRICE_API_DATE_FORMAT,
)
from src.core.exceptions.tracker import DataSourceError, ValidationError
from src.core.interfaces.data import IPriceSource
from src.core.models.price_series import PriceHistory
from src.core.types.financial import to_float
from src.core.utils.validation import validate_instrument_id


def parse_price_payload(instrument_id: str, payload: Any) -> PriceHistory:
    """Build a PriceHistory from an mfapi response body.

    Records with an unparseable date or a non-positive NAV are skipped.
    When a date appears twice the first (newest-listed) record wins.

    Raises:
        DataSourceError: If the payload does not have the expected shape
    """
    if not isinstance(payload, Mapping) or not isinstance(payload.get("data", []), list):
        raise DataSourceError("price API", f"unexpected payload for {instrument_id}")

    meta = payload.get("meta") or {}
    name = str(meta.get("scheme_name") or "").strip() if isinstance(meta, Mapping) else ""

    prices: dict[date, float] = {}
    skipped = 0
    for record in payload.get("data", []):
        try:
            on_date = datetime.strptime(str(record["date"]), PRICE_API_DATE_FORMAT).date()
            nav = to_float(record["nav"])
        except (KeyError, TypeError, ValueError):
            skipped += 1
            continue
        if nav <= 0:
            skipped += 1
            continue
        prices.setdefault(on_date, nav)

    if skipped:
        logger.debug(f"Skipped {skipped} malformed NAV records for {instrument_id}")
    return PriceHistory(instrument_id=instrument_id, name=name, prices=prices)


class MFAPIPriceSource(IPriceSource):
    """Price source for Indian mutual-fund schemes keyed by scheme code."""

    def __init__(
        self,
        base_url: str = "https://api.mfapi.in/mf",
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        cache_size: int = DEFAULT_PRICE_CACHE_SIZE,
        cache_ttl: int = DEFAULT_PRICE_CACHE_TTL_SECONDS,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        self._cache: TTLCache[str, PriceHistory] = TTLCache(maxsize=cache_size, ttl=cache_ttl)
        # Fetches run on executor threads; TTLCache itself is not thread-safe.
        self._lock = threading.RLock()

    def fetch_price_series(self, instrument_id: str) -> PriceHistory:
        """Fetch (or reuse a cached) NAV history for one scheme.

        Raises:
            DataSourceError: On HTTP, network or payload errors
        """
        try:
            instrument_id = validate_instrument_id(instrument_id)
        except ValidationError as e:
            raise DataSourceError("price API", str(e)) from e

        with self._lock:
            cached = self._cache.get(instrument_id)
        if cached is not None:
            logger.debug(f"Price cache hit: {instrument_id}")
            return cached

        history = parse_price_payload(instrument_id, self._get_json(instrument_id))
        logger.debug(f"Fetched {len(history.prices)} NAV records for {instrument_id}")

        with self._lock:
            self._cache[instrument_id] = history
        return history

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def _get_json(self, instrument_id: str) -> Any:
        url = f"{self.base_url}/{instrument_id}"
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except ValueError as e:
            logger.error(f"Price API returned invalid JSON for {instrument_id}: {e}")
            raise DataSourceError("price API", f"invalid JSON for {instrument_id}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Price request failed for {instrument_id}: {e}")
            raise DataSourceError("price API", f"request for {instrument_id} failed: {e}") from e
