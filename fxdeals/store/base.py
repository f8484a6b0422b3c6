from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from fxdeals.intake.models import Deal, ValidatedDeal


class DealStore(Protocol):
    """Storage collaborator for the admission service.

    ``insert_if_absent`` is the authoritative uniqueness check: when two
    callers race on the same deal_unique_id exactly one insert succeeds and
    the other raises DuplicateDealError. Any other storage failure surfaces
    as StoreError.
    """

    def exists_by_unique_id(self, deal_unique_id: str) -> bool: ...

    def find_by_unique_id(self, deal_unique_id: str) -> Optional[Deal]: ...

    def insert_if_absent(self, deal: ValidatedDeal) -> Deal: ...

    def find_all(self) -> list[Deal]: ...

    def find_by_currency_pair(self, from_currency: str, to_currency: str) -> list[Deal]: ...

    def find_by_timestamp_range(self, start: datetime, end: datetime) -> list[Deal]: ...

    def find_recent(self, limit: int) -> list[Deal]: ...

    def count(self) -> int: ...
