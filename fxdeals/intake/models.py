from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

AMOUNT_QUANTUM = Decimal("0.0001")


def to_utc_naive(value: datetime) -> datetime:
    """Normalize a datetime to naive UTC. Naive inputs are taken as UTC already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class DealRequest(BaseModel):
    """Raw deal submission. Every field is optional here; the admission
    service reports the first missing one with its own message."""

    deal_unique_id: Optional[str] = Field(default=None, description="Caller-supplied business key")
    from_currency: Optional[str] = Field(default=None, description="Ordering currency, ISO 4217")
    to_currency: Optional[str] = Field(default=None, description="Target currency, ISO 4217")
    deal_timestamp: Optional[datetime] = None
    deal_amount: Optional[Decimal] = Field(
        default=None, description="Amount in the ordering currency, up to 4 decimal places"
    )


class ValidatedDeal(BaseModel):
    """Normalized, immutable deal ready to be committed to a store."""

    deal_unique_id: str
    from_currency: str
    to_currency: str
    deal_timestamp: datetime
    deal_amount: Decimal

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_request(cls, request: DealRequest) -> ValidatedDeal:
        """Build the canonical record. Only call on a request that passed validation."""
        missing = [name for name, value in request if value is None]
        if missing:
            raise ValueError(f"Cannot build a deal with missing fields: {missing}")
        return cls(
            deal_unique_id=request.deal_unique_id,
            from_currency=request.from_currency.upper(),
            to_currency=request.to_currency.upper(),
            deal_timestamp=to_utc_naive(request.deal_timestamp),
            deal_amount=request.deal_amount.quantize(AMOUNT_QUANTUM),
        )


class Deal(BaseModel):
    """Persisted deal. ``id`` and ``created_at`` are assigned by the store."""

    id: int
    deal_unique_id: str
    from_currency: str
    to_currency: str
    deal_timestamp: datetime
    deal_amount: Decimal
    created_at: datetime

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_validated(cls, deal: ValidatedDeal, id: int, created_at: datetime) -> Deal:
        return cls(id=id, created_at=created_at, **deal.model_dump())
