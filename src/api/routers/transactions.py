"""
Transaction API endpoints.
"""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_portfolio_service
from src.api.schemas.api_models import ErrorResponse, TransactionRequest, TransactionResponse
from src.core.models.transaction import RawTransaction
from src.core.services.portfolio_service import PortfolioService

router = APIRouter(
    responses={503: {"model": ErrorResponse, "description": "Ledger not configured"}}
)


@router.post("", response_model=TransactionResponse, status_code=status.HTTP_202_ACCEPTED)
async def submit_transaction(
    request: TransactionRequest,
    service: PortfolioService = Depends(get_portfolio_service),
) -> TransactionResponse:
    """Append a purchase to the ledger.

    The ledger publishes new rows asynchronously, so the purchase shows up
    in the portfolio after a later refresh.
    """
    transaction = RawTransaction(
        date=request.date, instrument_id=request.instrument_id, units=request.units
    )
    accepted = await service.submit_transaction(transaction)
    message = "Transaction forwarded to ledger" if accepted else "Ledger rejected transaction"
    return TransactionResponse(accepted=accepted, message=message)
