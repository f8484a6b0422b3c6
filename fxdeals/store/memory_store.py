from __future__ import annotations

import itertools
import threading
from datetime import datetime
from typing import Optional

from fxdeals.errors import DuplicateDealError
from fxdeals.intake.models import Deal, ValidatedDeal, utc_now


class InMemoryDealStore:
    """Process-local DealStore. A single lock makes insert-if-absent atomic."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_unique_id: dict[str, Deal] = {}
        self._ids = itertools.count(1)

    def exists_by_unique_id(self, deal_unique_id: str) -> bool:
        with self._lock:
            return deal_unique_id in self._by_unique_id

    def find_by_unique_id(self, deal_unique_id: str) -> Optional[Deal]:
        with self._lock:
            return self._by_unique_id.get(deal_unique_id)

    def insert_if_absent(self, deal: ValidatedDeal) -> Deal:
        with self._lock:
            if deal.deal_unique_id in self._by_unique_id:
                raise DuplicateDealError(deal.deal_unique_id)
            stored = Deal.from_validated(deal, id=next(self._ids), created_at=utc_now())
            self._by_unique_id[deal.deal_unique_id] = stored
            return stored

    def _snapshot(self) -> list[Deal]:
        with self._lock:
            return list(self._by_unique_id.values())

    def find_all(self) -> list[Deal]:
        return sorted(self._snapshot(), key=lambda d: (d.created_at, d.id), reverse=True)

    def find_by_currency_pair(self, from_currency: str, to_currency: str) -> list[Deal]:
        matches = [
            d
            for d in self._snapshot()
            if d.from_currency == from_currency and d.to_currency == to_currency
        ]
        return sorted(matches, key=lambda d: (d.deal_timestamp, d.id), reverse=True)

    def find_by_timestamp_range(self, start: datetime, end: datetime) -> list[Deal]:
        matches = [d for d in self._snapshot() if start <= d.deal_timestamp <= end]
        return sorted(matches, key=lambda d: (d.deal_timestamp, d.id), reverse=True)

    def find_recent(self, limit: int) -> list[Deal]:
        return self.find_all()[:limit]

    def count(self) -> int:
        with self._lock:
            return len(self._by_unique_id)
