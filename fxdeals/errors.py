from __future__ import annotations


class FxDealsError(Exception):
    """Base class for errors raised by the deal admission core.

    ``kind`` is a stable machine-readable tag the HTTP layer maps to a status.
    """

    kind: str = "internal"


class DealValidationError(FxDealsError):
    """Caller-fixable problem with a deal request or query parameter."""

    kind = "validation"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DuplicateDealError(FxDealsError):
    kind = "duplicate_deal"

    def __init__(self, deal_unique_id: str, message: str | None = None) -> None:
        super().__init__(
            message
            or f"Deal with unique ID '{deal_unique_id}' already exists in the system"
        )
        self.deal_unique_id = deal_unique_id


class DealNotFoundError(FxDealsError):
    kind = "not_found"

    def __init__(self, deal_unique_id: str) -> None:
        super().__init__(f"Deal {deal_unique_id} not found")
        self.deal_unique_id = deal_unique_id


class StoreError(FxDealsError):
    """Opaque failure of the storage collaborator."""

    kind = "store"
