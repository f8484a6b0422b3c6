from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from fxdeals.currency.catalog import CurrencyLookup
from fxdeals.errors import DealValidationError, DuplicateDealError
from fxdeals.intake.models import Deal, DealRequest, utc_now
from fxdeals.intake.validation import (
    check_currency_code,
    validate_limit,
    validate_request,
    validate_time_range,
)
from fxdeals.store.base import DealStore

logger = logging.getLogger(__name__)


class DealAdmissionService:
    """Admission pipeline (validate -> duplicate check -> commit) plus read queries.

    Holds no mutable state of its own; uniqueness is guaranteed by the
    store's insert_if_absent, the existence pre-check only gives an early,
    cheaper DuplicateDealError.
    """

    def __init__(
        self,
        store: DealStore,
        currencies: CurrencyLookup,
        reject_future_timestamps: bool = False,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.currencies = currencies
        self.reject_future_timestamps = reject_future_timestamps
        self.clock = clock

    # -----------------------------------------------------------------------
    # Write path
    # -----------------------------------------------------------------------

    def submit_deal(self, request: DealRequest) -> Deal:
        logger.info("Submitting new deal with ID: %s", request.deal_unique_id)

        try:
            validated = validate_request(
                request,
                self.currencies,
                reject_future_timestamps=self.reject_future_timestamps,
                clock=self.clock,
            )
        except DealValidationError as exc:
            logger.warning(
                "Deal %s rejected by validation: %s", request.deal_unique_id, exc.message
            )
            raise

        if self.store.exists_by_unique_id(validated.deal_unique_id):
            logger.warning("Duplicate deal submission attempt: %s", validated.deal_unique_id)
            raise DuplicateDealError(validated.deal_unique_id)

        try:
            saved = self.store.insert_if_absent(validated)
        except DuplicateDealError:
            logger.warning(
                "Deal %s was committed concurrently by another submission",
                validated.deal_unique_id,
            )
            raise

        logger.info(
            "Successfully saved deal with ID: %s and database ID: %s",
            saved.deal_unique_id,
            saved.id,
        )
        return saved

    # -----------------------------------------------------------------------
    # Read path
    # -----------------------------------------------------------------------

    def get_by_unique_id(self, deal_unique_id: str) -> Optional[Deal]:
        logger.debug("Fetching deal with unique ID: %s", deal_unique_id)
        return self.store.find_by_unique_id(deal_unique_id)

    def get_all(self) -> list[Deal]:
        logger.debug("Fetching all deals")
        return self.store.find_all()

    def get_by_currency_pair(self, from_currency: str, to_currency: str) -> list[Deal]:
        logger.debug("Fetching deals for currency pair: %s -> %s", from_currency, to_currency)
        from_upper = check_currency_code(from_currency, self.currencies)
        to_upper = check_currency_code(to_currency, self.currencies)
        return self.store.find_by_currency_pair(from_upper, to_upper)

    def get_in_time_range(self, start: datetime, end: datetime) -> list[Deal]:
        logger.debug("Fetching deals between %s and %s", start, end)
        start, end = validate_time_range(start, end)
        return self.store.find_by_timestamp_range(start, end)

    def get_recent(self, limit: int) -> list[Deal]:
        logger.debug("Fetching %s most recent deals", limit)
        return self.store.find_recent(validate_limit(limit))

    def count(self) -> int:
        return self.store.count()

    def exists(self, deal_unique_id: str) -> bool:
        return self.store.exists_by_unique_id(deal_unique_id)
