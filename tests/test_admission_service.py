"""Unit tests for the deal admission service."""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional

import pytest

from fxdeals.currency.catalog import load_catalog
from fxdeals.errors import DealValidationError, DuplicateDealError
from fxdeals.intake.models import Deal, DealRequest, ValidatedDeal, utc_now
from fxdeals.service.admission import DealAdmissionService
from fxdeals.store.memory_store import InMemoryDealStore
from fxdeals.store.sqlite_store import SqliteDealStore

CATALOG = load_catalog()


def make_request(deal_unique_id: str = "D1", **overrides) -> DealRequest:
    fields = dict(
        deal_unique_id=deal_unique_id,
        from_currency="usd",
        to_currency="eur",
        deal_timestamp=utc_now() - timedelta(hours=1),
        deal_amount=Decimal("1000.50"),
    )
    fields.update(overrides)
    return DealRequest(**fields)


@pytest.fixture()
def store() -> InMemoryDealStore:
    return InMemoryDealStore()


@pytest.fixture()
def service(store) -> DealAdmissionService:
    return DealAdmissionService(store=store, currencies=CATALOG)


class BlindExistenceStore(InMemoryDealStore):
    """Store whose existence check always misses, as if a concurrent insert
    landed between the check and the insert."""

    def exists_by_unique_id(self, deal_unique_id: str) -> bool:
        return False


class RecordingStore(InMemoryDealStore):
    def __init__(self) -> None:
        super().__init__()
        self.calls: list[str] = []

    def exists_by_unique_id(self, deal_unique_id: str) -> bool:
        self.calls.append("exists")
        return super().exists_by_unique_id(deal_unique_id)

    def insert_if_absent(self, deal: ValidatedDeal) -> Deal:
        self.calls.append("insert")
        return super().insert_if_absent(deal)

    def find_by_currency_pair(self, from_currency: str, to_currency: str) -> list[Deal]:
        self.calls.append(f"pair:{from_currency}/{to_currency}")
        return super().find_by_currency_pair(from_currency, to_currency)


# ---------------------------------------------------------------------------
# submit_deal
# ---------------------------------------------------------------------------


class TestSubmitDeal:
    def test_valid_deal_stored_and_returned(self, service):
        deal = service.submit_deal(make_request())
        assert deal.deal_unique_id == "D1"
        assert deal.from_currency == "USD"
        assert deal.to_currency == "EUR"
        assert deal.deal_amount == Decimal("1000.50")
        assert deal.id is not None
        assert deal.created_at is not None

    def test_exists_and_lookup_after_submit(self, service):
        service.submit_deal(make_request("D7", from_currency="gBp", to_currency="JpY"))
        assert service.exists("D7") is True
        fetched = service.get_by_unique_id("D7")
        assert fetched.from_currency == "GBP"
        assert fetched.to_currency == "JPY"

    def test_distinct_ids_all_accepted(self, service):
        for i in range(10):
            service.submit_deal(make_request(f"D{i}"))
        assert service.count() == 10

    def test_duplicate_rejected(self, service, store):
        service.submit_deal(make_request("D1"))
        with pytest.raises(DuplicateDealError) as exc_info:
            service.submit_deal(make_request("D1", deal_amount=Decimal("5")))
        assert exc_info.value.deal_unique_id == "D1"
        assert "D1" in str(exc_info.value)
        assert store.count() == 1
        assert store.find_by_unique_id("D1").deal_amount == Decimal("1000.50")

    def test_same_currency_rejected(self, service):
        with pytest.raises(DealValidationError, match="cannot be the same"):
            service.submit_deal(make_request("D2", from_currency="USD", to_currency="USD"))

    def test_short_currency_rejected(self, service):
        with pytest.raises(DealValidationError, match="3 characters"):
            service.submit_deal(make_request("D3", from_currency="US"))

    def test_negative_amount_rejected(self, service):
        with pytest.raises(DealValidationError, match="greater than 0"):
            service.submit_deal(make_request("D4", deal_amount=Decimal("-5")))

    def test_rejected_deal_not_stored(self, service, store):
        with pytest.raises(DealValidationError):
            service.submit_deal(make_request("D5", to_currency="XYZ"))
        assert store.count() == 0

    def test_validation_reported_before_duplicate(self, service):
        service.submit_deal(make_request("D1"))
        with pytest.raises(DealValidationError):
            service.submit_deal(make_request("D1", from_currency="US"))

    def test_no_insert_after_duplicate_precheck(self):
        store = RecordingStore()
        service = DealAdmissionService(store=store, currencies=CATALOG)
        service.submit_deal(make_request("D1"))
        with pytest.raises(DuplicateDealError):
            service.submit_deal(make_request("D1"))
        assert store.calls == ["exists", "insert", "exists"]

    def test_store_closes_race_after_precheck(self):
        store = BlindExistenceStore()
        service = DealAdmissionService(store=store, currencies=CATALOG)
        service.submit_deal(make_request("D1"))
        with pytest.raises(DuplicateDealError):
            service.submit_deal(make_request("D1"))
        assert store.count() == 1


class TestFutureTimestamps:
    def test_future_allowed_by_default(self, service):
        deal = service.submit_deal(make_request(deal_timestamp=utc_now() + timedelta(days=1)))
        assert deal.deal_unique_id == "D1"

    def test_future_rejected_when_enabled(self, store):
        now = datetime(2024, 6, 1, 12, 0)
        service = DealAdmissionService(
            store=store, currencies=CATALOG, reject_future_timestamps=True, clock=lambda: now
        )
        with pytest.raises(DealValidationError, match="future"):
            service.submit_deal(make_request(deal_timestamp=now + timedelta(minutes=1)))
        assert service.submit_deal(make_request(deal_timestamp=now)).deal_timestamp == now

    def test_early_year_deal_readable_from_sqlite(self, tmp_path):
        store = SqliteDealStore(tmp_path / "early.db", timeout=5)
        store.init()
        service = DealAdmissionService(store=store, currencies=CATALOG)
        service.submit_deal(make_request("OLD", deal_timestamp=datetime(999, 1, 1)))
        service.submit_deal(make_request("NEW"))
        assert [d.deal_unique_id for d in service.get_all()] == ["NEW", "OLD"]
        assert service.get_by_unique_id("OLD").deal_timestamp == datetime(999, 1, 1)

    def test_timestamp_overflowing_utc_rejected(self, service, store):
        ts = datetime(1, 1, 1, tzinfo=timezone(timedelta(hours=1)))
        with pytest.raises(DealValidationError, match="out of range"):
            service.submit_deal(make_request(deal_timestamp=ts))
        assert store.count() == 0


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------


class TestQueries:
    def test_get_missing_returns_none(self, service):
        assert service.get_by_unique_id("nope") is None
        assert service.exists("nope") is False

    def test_repeated_reads_identical(self, service):
        service.submit_deal(make_request("D1"))
        first = service.get_by_unique_id("D1").model_dump_json()
        second = service.get_by_unique_id("D1").model_dump_json()
        assert first == second

    def test_get_all(self, service):
        for i in range(3):
            service.submit_deal(make_request(f"D{i}"))
        assert {d.deal_unique_id for d in service.get_all()} == {"D0", "D1", "D2"}

    def test_currency_pair_upper_cases_inputs(self):
        store = RecordingStore()
        service = DealAdmissionService(store=store, currencies=CATALOG)
        service.submit_deal(make_request("D1"))
        result = service.get_by_currency_pair("usd", "eur")
        assert [d.deal_unique_id for d in result] == ["D1"]
        assert "pair:USD/EUR" in store.calls

    def test_currency_pair_ordered_by_timestamp_desc(self, service):
        base = datetime(2024, 1, 1)
        for i, days in enumerate([3, 1, 2]):
            service.submit_deal(make_request(f"D{i}", deal_timestamp=base + timedelta(days=days)))
        result = service.get_by_currency_pair("USD", "EUR")
        assert [d.deal_unique_id for d in result] == ["D0", "D2", "D1"]

    def test_currency_pair_invalid_code(self, service):
        with pytest.raises(DealValidationError):
            service.get_by_currency_pair("US", "EUR")

    def test_time_range_inverted(self, service):
        with pytest.raises(DealValidationError, match="Start time cannot be after end time"):
            service.get_in_time_range(datetime(2024, 1, 2), datetime(2024, 1, 1))

    def test_time_range_equal_bounds_inclusive(self, service):
        instant = datetime(2024, 5, 5, 5, 5, 5)
        service.submit_deal(make_request("D1", deal_timestamp=instant))
        service.submit_deal(make_request("D2", deal_timestamp=instant + timedelta(seconds=1)))
        result = service.get_in_time_range(instant, instant)
        assert [d.deal_unique_id for d in result] == ["D1"]

    @pytest.mark.parametrize("limit", [0, -1])
    def test_recent_invalid_limit(self, service, limit):
        with pytest.raises(DealValidationError, match="Limit must be greater than 0"):
            service.get_recent(limit)

    def test_recent_newest_first(self, service):
        for i in range(5):
            service.submit_deal(make_request(f"D{i}"))
        recent = service.get_recent(3)
        assert [d.deal_unique_id for d in recent] == ["D4", "D3", "D2"]
        created = [d.created_at for d in recent]
        assert created == sorted(created, reverse=True)

    def test_recent_fewer_than_limit(self, service):
        service.submit_deal(make_request("D1"))
        assert len(service.get_recent(10)) == 1


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------


def _submit_same_id(service: DealAdmissionService, n: int) -> tuple[int, int]:
    def attempt(_: int) -> Optional[str]:
        try:
            service.submit_deal(make_request("RACE"))
        except DuplicateDealError:
            return "duplicate"
        return "ok"

    with ThreadPoolExecutor(max_workers=32) as pool:
        outcomes = list(pool.map(attempt, range(n)))
    return outcomes.count("ok"), outcomes.count("duplicate")


class TestConcurrentSubmissions:
    def test_in_memory_store_single_winner(self, service, store):
        assert _submit_same_id(service, 100) == (1, 99)
        assert store.count() == 1

    def test_sqlite_store_single_winner(self, tmp_path):
        store = SqliteDealStore(tmp_path / "race.db", timeout=30)
        store.init()
        service = DealAdmissionService(store=store, currencies=CATALOG)
        assert _submit_same_id(service, 100) == (1, 99)
        assert store.count() == 1

    def test_blind_precheck_still_single_winner(self):
        store = BlindExistenceStore()
        service = DealAdmissionService(store=store, currencies=CATALOG)
        assert _submit_same_id(service, 100) == (1, 99)
        assert store.count() == 1
