from __future__ import annotations

import functools
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

from fxdeals.db import database
from fxdeals.errors import StoreError
from fxdeals.intake.models import Deal, ValidatedDeal

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _translate_errors(method: Callable[..., T]) -> Callable[..., T]:
    """Re-raise raw sqlite3 failures as StoreError. DuplicateDealError passes through."""

    @functools.wraps(method)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return method(*args, **kwargs)
        except sqlite3.Error as exc:
            logger.error("Deal store operation %s failed: %s", method.__name__, exc)
            raise StoreError(f"Deal store operation failed: {exc}") from exc

    return wrapper


class SqliteDealStore:
    """DealStore backed by the SQLite functions in fxdeals.db.database.

    ``db_path=None`` resolves the path from FXDEALS_DB_PATH on every call.
    """

    def __init__(
        self,
        db_path: Optional[Path] = None,
        timeout: float = database.DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.db_path = db_path
        self.timeout = timeout

    @_translate_errors
    def init(self) -> None:
        database.init_db(self.db_path, self.timeout)

    @_translate_errors
    def exists_by_unique_id(self, deal_unique_id: str) -> bool:
        return database.deal_exists(deal_unique_id, self.db_path, self.timeout)

    @_translate_errors
    def find_by_unique_id(self, deal_unique_id: str) -> Optional[Deal]:
        return database.get_deal(deal_unique_id, self.db_path, self.timeout)

    @_translate_errors
    def insert_if_absent(self, deal: ValidatedDeal) -> Deal:
        return database.insert_deal(deal, self.db_path, self.timeout)

    @_translate_errors
    def find_all(self) -> list[Deal]:
        return database.get_all_deals(self.db_path, self.timeout)

    @_translate_errors
    def find_by_currency_pair(self, from_currency: str, to_currency: str) -> list[Deal]:
        return database.get_deals_by_currency_pair(
            from_currency, to_currency, self.db_path, self.timeout
        )

    @_translate_errors
    def find_by_timestamp_range(self, start: datetime, end: datetime) -> list[Deal]:
        return database.get_deals_by_timestamp_range(start, end, self.db_path, self.timeout)

    @_translate_errors
    def find_recent(self, limit: int) -> list[Deal]:
        return database.get_recent_deals(limit, self.db_path, self.timeout)

    @_translate_errors
    def count(self) -> int:
        return database.count_deals(self.db_path, self.timeout)
