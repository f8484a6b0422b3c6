from __future__ import annotations

import logging
import re
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from fxdeals.currency.catalog import CurrencyLookup
from fxdeals.errors import DealValidationError
from fxdeals.intake.models import DealRequest, ValidatedDeal, to_utc_naive, utc_now

logger = logging.getLogger(__name__)

MAX_DEAL_UNIQUE_ID_LENGTH = 100
MAX_AMOUNT_INTEGER_DIGITS = 15
MAX_AMOUNT_DECIMAL_PLACES = 4

REQUIRED_FIELDS = (
    "deal_unique_id",
    "from_currency",
    "to_currency",
    "deal_timestamp",
    "deal_amount",
)

_CURRENCY_PATTERN = re.compile(r"^[A-Za-z]{3}$")


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def check_currency_code(code: str, currencies: CurrencyLookup) -> str:
    """Validate one currency code and return it upper-cased."""
    if code is None or code.strip() == "":
        raise DealValidationError("Currency code cannot be null or empty")
    if len(code) != 3:
        raise DealValidationError(f"Currency code must be exactly 3 characters: {code}")
    if not _CURRENCY_PATTERN.match(code):
        raise DealValidationError(f"Invalid currency code: {code}")
    upper = code.upper()
    if not currencies.is_valid_currency_code(upper):
        raise DealValidationError(f"Invalid currency code: {code}")
    return upper


def _check_required(request: DealRequest) -> None:
    for field in REQUIRED_FIELDS:
        value = getattr(request, field)
        if value is None or (isinstance(value, str) and value.strip() == ""):
            raise DealValidationError(f"{field} is required")


def _check_unique_id_length(request: DealRequest) -> None:
    length = len(request.deal_unique_id)
    if length < 1 or length > MAX_DEAL_UNIQUE_ID_LENGTH:
        raise DealValidationError(
            f"deal_unique_id must be between 1 and {MAX_DEAL_UNIQUE_ID_LENGTH} characters"
        )


def _check_currencies(request: DealRequest, currencies: CurrencyLookup) -> None:
    check_currency_code(request.from_currency, currencies)
    check_currency_code(request.to_currency, currencies)


def _check_distinct_currencies(request: DealRequest) -> None:
    if request.from_currency.upper() == request.to_currency.upper():
        raise DealValidationError("From currency and to currency cannot be the same")


def _check_amount(request: DealRequest) -> None:
    amount: Decimal = request.deal_amount
    if not amount.is_finite():
        raise DealValidationError("Deal amount must be a finite number")
    if amount <= 0:
        raise DealValidationError("Deal amount must be greater than 0")

    _sign, digits, exponent = amount.normalize().as_tuple()
    decimal_places = max(0, -exponent)
    integer_digits = max(0, len(digits) + exponent)
    if (
        integer_digits > MAX_AMOUNT_INTEGER_DIGITS
        or decimal_places > MAX_AMOUNT_DECIMAL_PLACES
    ):
        raise DealValidationError(
            f"Deal amount must have at most {MAX_AMOUNT_INTEGER_DIGITS} integer digits "
            f"and {MAX_AMOUNT_DECIMAL_PLACES} decimal places"
        )


def _check_timestamp_in_range(request: DealRequest) -> None:
    try:
        to_utc_naive(request.deal_timestamp)
    except OverflowError:
        raise DealValidationError("Deal timestamp out of range") from None


def _check_not_in_future(request: DealRequest, now: datetime) -> None:
    if to_utc_naive(request.deal_timestamp) > now:
        raise DealValidationError("Deal timestamp cannot be in the future")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_request(
    request: DealRequest,
    currencies: CurrencyLookup,
    reject_future_timestamps: bool = False,
    clock: Callable[[], datetime] = utc_now,
) -> ValidatedDeal:
    """Run all admission rules in order, fail-fast, and return the canonical deal.

    The first failing rule raises DealValidationError; nothing after it runs.
    """
    _check_required(request)
    _check_unique_id_length(request)
    _check_currencies(request, currencies)
    _check_distinct_currencies(request)
    _check_amount(request)
    _check_timestamp_in_range(request)
    if reject_future_timestamps:
        _check_not_in_future(request, clock())

    logger.debug("Deal request validation passed for deal ID: %s", request.deal_unique_id)
    return ValidatedDeal.from_request(request)


def validate_time_range(start: datetime, end: datetime) -> tuple[datetime, datetime]:
    """Return both bounds as naive UTC, rejecting an inverted range."""
    try:
        start, end = to_utc_naive(start), to_utc_naive(end)
    except OverflowError:
        raise DealValidationError("Time range bounds out of range") from None
    if start > end:
        raise DealValidationError("Start time cannot be after end time")
    return start, end


def validate_limit(limit: Optional[int]) -> int:
    if limit is None or limit <= 0:
        raise DealValidationError("Limit must be greater than 0")
    return limit
