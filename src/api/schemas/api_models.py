"""
Pydantic schemas for API request/response models.
"""

from datetime import date, datetime
from typing import Annotated

from pydantic import BaseModel, Field, field_validator

from src.core.calculations.aggregator import SkippedTransaction
from src.core.calculations.classification import ReturnClassifier, gain_or_loss
from src.core.constants import MAX_INSTRUMENT_ID_LENGTH
from src.core.enums import ReturnTone, SolverStatus, SortKey
from src.core.models.portfolio import PortfolioTotals
from src.core.models.position import Position
from src.core.models.xirr_result import XirrResult
from src.core.types.financial import round_amount, round_percentage, round_price, round_units


class XirrModel(BaseModel):
    """Annualized return of a position or the whole portfolio."""

    status: SolverStatus
    value: float | None = Field(None, description="Annualized return in percent")
    is_resolved: bool
    iterations: int
    reason: str | None = None
    band: str | None = Field(None, description="Display band for the return")

    @classmethod
    def from_result(cls, result: XirrResult, classifier: ReturnClassifier) -> "XirrModel":
        band = classifier.classify(result.value) if result.status.has_estimate else None
        return cls(
            status=result.status,
            value=round_percentage(result.value) if result.value is not None else None,
            is_resolved=result.is_resolved,
            iterations=result.iterations,
            reason=result.reason,
            band=band.label if band else None,
        )


class PositionModel(BaseModel):
    """One holding row."""

    instrument_id: str
    display_name: str
    units_held: float
    invested_capital: float
    current_price: float
    current_value: float
    average_cost: float
    absolute_return: float
    absolute_return_pct: float
    tone: ReturnTone
    purchases: int
    xirr: XirrModel

    @classmethod
    def from_position(
        cls, position: Position, result: XirrResult, classifier: ReturnClassifier
    ) -> "PositionModel":
        return cls(
            instrument_id=position.instrument_id,
            display_name=position.display_name,
            units_held=round_units(position.units_held),
            invested_capital=round_amount(position.invested_capital),
            current_price=round_price(position.current_price),
            current_value=round_amount(position.current_value),
            average_cost=round_price(position.average_cost),
            absolute_return=round_amount(position.absolute_return),
            absolute_return_pct=round_percentage(position.absolute_return_pct),
            tone=gain_or_loss(position.absolute_return),
            purchases=len(position.cash_flows),
            xirr=XirrModel.from_result(result, classifier),
        )


class TotalsModel(BaseModel):
    """Whole-portfolio figures."""

    position_count: int
    invested_capital: float
    current_value: float
    absolute_return: float
    absolute_return_pct: float
    tone: ReturnTone
    xirr: XirrModel

    @classmethod
    def from_totals(
        cls, totals: PortfolioTotals, result: XirrResult, classifier: ReturnClassifier
    ) -> "TotalsModel":
        return cls(
            position_count=totals.position_count,
            invested_capital=round_amount(totals.invested_capital),
            current_value=round_amount(totals.current_value),
            absolute_return=round_amount(totals.absolute_return),
            absolute_return_pct=round_percentage(totals.absolute_return_pct),
            tone=gain_or_loss(totals.absolute_return),
            xirr=XirrModel.from_result(result, classifier),
        )


class SkippedTransactionModel(BaseModel):
    """Ledger row that could not be priced."""

    date: date
    instrument_id: str
    units: float
    reason: str

    @classmethod
    def from_skipped(cls, skipped: SkippedTransaction) -> "SkippedTransactionModel":
        return cls(
            date=skipped.transaction.date,
            instrument_id=skipped.transaction.instrument_id,
            units=skipped.transaction.units,
            reason=skipped.reason,
        )


class PortfolioResponse(BaseModel):
    """Response model for the holdings table."""

    as_of: datetime
    refreshed_at: datetime
    sort: SortKey
    positions: list[PositionModel]
    totals: TotalsModel
    skipped: list[SkippedTransactionModel]


class RefreshResponse(BaseModel):
    """Response model for a completed refresh."""

    refreshed_at: datetime
    positions: int
    purchases: int
    skipped: int


class TransactionRequest(BaseModel):
    """Request model for appending a purchase to the ledger."""

    date: Annotated[date, Field(description="Purchase date")]
    instrument_id: str = Field(
        ..., min_length=1, max_length=MAX_INSTRUMENT_ID_LENGTH, description="Scheme code"
    )
    units: float = Field(..., gt=0, description="Units allotted")

    @field_validator("date")
    @classmethod
    def validate_not_in_future(cls, v: date) -> date:
        """Purchases cannot be dated after today."""
        if v > date.today():
            raise ValueError("date cannot be in the future")
        return v

    @field_validator("instrument_id")
    @classmethod
    def validate_instrument_id(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("instrument_id cannot be blank")
        return stripped


class TransactionResponse(BaseModel):
    """Response model for a ledger submission."""

    accepted: bool
    message: str


class ErrorResponse(BaseModel):
    """Response model for errors."""

    error: str = Field(..., description="Exception type")
    message: str
