"""
Portfolio API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from src.api.dependencies import get_classifier, get_portfolio_service
from src.api.schemas.api_models import (
    ErrorResponse,
    PortfolioResponse,
    PositionModel,
    RefreshResponse,
    SkippedTransactionModel,
    TotalsModel,
)
from src.core.calculations.classification import ReturnClassifier
from src.core.enums import SortKey
from src.core.services.portfolio_service import PortfolioService

router = APIRouter(
    responses={
        409: {"model": ErrorResponse, "description": "Portfolio not loaded"},
        502: {"model": ErrorResponse, "description": "Data source failed"},
        503: {"model": ErrorResponse, "description": "Data source not configured"},
    }
)


@router.get("", response_model=PortfolioResponse)
async def get_portfolio(
    sort: str = Query(SortKey.NAME.value, description="Sort key for the holdings table"),
    service: PortfolioService = Depends(get_portfolio_service),
    classifier: ReturnClassifier = Depends(get_classifier),
) -> PortfolioResponse:
    """Get the holdings table, refreshing first if nothing is loaded yet."""
    try:
        sort_key = SortKey.from_string(sort)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    view = await service.current_view()
    positions = service.sorted_positions(sort_key)
    return PortfolioResponse(
        as_of=view.as_of,
        refreshed_at=view.refreshed_at,
        sort=sort_key,
        positions=[
            PositionModel.from_position(
                position, view.return_for(position.instrument_id), classifier
            )
            for position in positions
        ],
        totals=TotalsModel.from_totals(view.totals, view.total_return, classifier),
        skipped=[SkippedTransactionModel.from_skipped(s) for s in view.report.skipped],
    )


@router.get(
    "/positions/{instrument_id}",
    response_model=PositionModel,
    responses={404: {"model": ErrorResponse, "description": "Instrument not held"}},
)
async def get_position(
    instrument_id: str,
    service: PortfolioService = Depends(get_portfolio_service),
    classifier: ReturnClassifier = Depends(get_classifier),
) -> PositionModel:
    """Get one holding by instrument id."""
    view = await service.current_view()
    position = view.position(instrument_id.strip())
    return PositionModel.from_position(
        position, view.return_for(position.instrument_id), classifier
    )


@router.post("/refresh", response_model=RefreshResponse)
async def refresh_portfolio(
    service: PortfolioService = Depends(get_portfolio_service),
) -> RefreshResponse:
    """Reload transactions and prices and recompute the portfolio."""
    view = await service.refresh()
    return RefreshResponse(
        refreshed_at=view.refreshed_at,
        positions=len(view.positions),
        purchases=view.report.accepted_count,
        skipped=len(view.report.skipped),
    )
