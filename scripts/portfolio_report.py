#!/usr/bin/env python3
"""
Portfolio Report

Loads the purchase ledger, fetches NAV histories, and prints the holdings
table with absolute and annualized returns.

Run from the repository root:
    python -m scripts.portfolio_report --csv transactions.csv --sort annualized_return
"""

import argparse
import asyncio
import sys

from loguru import logger

from src.core.calculations.classification import ReturnClassifier, gain_or_loss
from src.core.config import get_settings
from src.core.enums import SortKey
from src.core.exceptions.tracker import TrackerException
from src.core.models.xirr_result import XirrResult
from src.core.services.portfolio_service import PortfolioService
from src.core.utils.logging_setup import setup_logging
from src.infrastructure.data import CSVTransactionSource, MFAPIPriceSource

HEADER = (
    f"{'Scheme':<40} {'Invested':>12} {'Value':>12} {'Return':>12} "
    f"{'Return %':>9} {'XIRR %':>9}  Band"
)


def format_xirr(result: XirrResult, classifier: ReturnClassifier) -> tuple[str, str]:
    """Render an XIRR result as (value, band) cells."""
    if result.value is None:
        return "n/a", result.status.value
    band = classifier.classify(result.value)
    suffix = "" if result.is_resolved else "~"
    return f"{result.value:.2f}{suffix}", band.label if band else ""


def print_report(
    service: PortfolioService, sort_key: SortKey, classifier: ReturnClassifier
) -> None:
    view = service.view
    if view is None:
        return

    print(HEADER)
    print("-" * len(HEADER))
    for position in service.sorted_positions(sort_key):
        xirr, band = format_xirr(view.return_for(position.instrument_id), classifier)
        print(
            f"{position.display_name[:40]:<40} {position.invested_capital:>12,.2f} "
            f"{position.current_value:>12,.2f} {position.absolute_return:>12,.2f} "
            f"{position.absolute_return_pct:>9.2f} {xirr:>9}  {band}"
        )

    totals = view.totals
    xirr, band = format_xirr(view.total_return, classifier)
    print("-" * len(HEADER))
    print(
        f"{'Total (' + gain_or_loss(totals.absolute_return).value + ')':<40} "
        f"{totals.invested_capital:>12,.2f} {totals.current_value:>12,.2f} "
        f"{totals.absolute_return:>12,.2f} {totals.absolute_return_pct:>9.2f} {xirr:>9}  {band}"
    )

    for skipped in view.report.skipped:
        logger.warning(
            f"Skipped {skipped.transaction.instrument_id} on "
            f"{skipped.transaction.date.isoformat()}: {skipped.reason}"
        )


def main():
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Print mutual-fund holdings with absolute and annualized returns",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Use the configured sheet export
  python -m scripts.portfolio_report

  # Local ledger, best performers first
  python -m scripts.portfolio_report --csv data/transactions.csv --sort annualized_return
        """,
    )

    parser.add_argument(
        "--csv",
        type=str,
        default=settings.TRANSACTIONS_CSV_URL,
        help="Ledger CSV path or URL (default: TRACKER_TRANSACTIONS_CSV_URL)",
    )

    parser.add_argument(
        "--sort",
        type=str,
        default=SortKey.NAME.value,
        help="Sort key: name, invested, absolute_return, annualized_return (default: name)",
    )

    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    setup_logging("DEBUG" if args.debug else settings.LOG_LEVEL)

    try:
        sort_key = SortKey.from_string(args.sort)
    except ValueError as e:
        logger.error(str(e))
        return 1

    try:
        service = PortfolioService(
            transaction_source=CSVTransactionSource(args.csv),
            price_source=MFAPIPriceSource(
                base_url=settings.PRICE_API_BASE_URL,
                timeout=settings.HTTP_TIMEOUT_SECONDS,
            ),
        )
        classifier = ReturnClassifier(settings.return_bands)
        asyncio.run(service.refresh())
    except TrackerException as e:
        logger.error(f"Report failed: {e}")
        return 1

    print_report(service, sort_key, classifier)
    return 0


if __name__ == "__main__":
    sys.exit(main())
