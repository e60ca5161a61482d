"""
Spreadsheet-backed transaction ledger.

Appends purchase rows by POSTing JSON to a web-app endpoint that writes to
the sheet. The endpoint gives no confirmation contract: a handed-off
request is reported as accepted, and the row shows up in the CSV export
once the sheet republishes.
"""

import requests
from loguru import logger

from src.core.constants import DEFAULT_HTTP_TIMEOUT_SECONDS
from src.core.exceptions.tracker import ConfigurationError
from src.core.interfaces.data import ITransactionLedger
from src.core.models.transaction import RawTransaction


class SheetLedger(ITransactionLedger):
    """Fire-and-forget ledger writer."""

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ):
        if not url or not url.strip():
            raise ConfigurationError("Ledger URL is not configured")
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def submit_transaction(self, transaction: RawTransaction) -> bool:
        """Send one purchase row to the ledger.

        Returns:
            True if the endpoint accepted the request, False otherwise
        """
        payload = transaction.to_ledger_row()
        try:
            response = self.session.post(self.url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Ledger submission failed for {transaction.instrument_id}: {e}")
            return False

        if not response.ok:
            logger.error(
                f"Ledger rejected {transaction.instrument_id}: HTTP {response.status_code}"
            )
            return False

        logger.info(
            f"Submitted {transaction.units} units of {transaction.instrument_id} "
            f"dated {transaction.date.isoformat()}"
        )
        return True
