"""
Data source infrastructure.

Concrete collaborators for the portfolio core: the CSV transaction feed,
the mutual-fund NAV price source, and the spreadsheet ledger writer.
"""

from .csv_transactions import CSVTransactionSource
from .mfapi_price_source import MFAPIPriceSource
from .sheet_ledger import SheetLedger

__all__ = ["CSVTransactionSource", "MFAPIPriceSource", "SheetLedger"]
