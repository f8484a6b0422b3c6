"""Unit tests for deal request and canonical deal models."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from fxdeals.intake.models import Deal, DealRequest, ValidatedDeal, to_utc_naive

VALID_REQUEST = dict(
    deal_unique_id="D1",
    from_currency="usd",
    to_currency="eur",
    deal_timestamp=datetime(2024, 1, 15, 10, 30),
    deal_amount=Decimal("1000.50"),
)


def make_request(**overrides) -> DealRequest:
    return DealRequest(**{**VALID_REQUEST, **overrides})


class TestDealRequest:
    def test_all_fields_optional(self):
        request = DealRequest()
        assert request.deal_unique_id is None
        assert request.deal_amount is None

    def test_amount_parsed_from_string(self):
        assert make_request(deal_amount="12.3456").deal_amount == Decimal("12.3456")

    def test_timestamp_parsed_from_iso_string(self):
        request = make_request(deal_timestamp="2024-01-15T10:30:00")
        assert request.deal_timestamp == datetime(2024, 1, 15, 10, 30)

    def test_non_numeric_amount_rejected(self):
        with pytest.raises(ValidationError):
            make_request(deal_amount="lots")

    def test_bad_timestamp_rejected(self):
        with pytest.raises(ValidationError):
            make_request(deal_timestamp="yesterday-ish")


class TestValidatedDeal:
    def test_currencies_upper_cased(self):
        deal = ValidatedDeal.from_request(make_request())
        assert deal.from_currency == "USD"
        assert deal.to_currency == "EUR"

    def test_amount_quantized_to_four_places(self):
        deal = ValidatedDeal.from_request(make_request())
        assert deal.deal_amount == Decimal("1000.50")
        assert str(deal.deal_amount) == "1000.5000"

    def test_aware_timestamp_normalized_to_utc(self):
        plus_two = timezone(timedelta(hours=2))
        deal = ValidatedDeal.from_request(
            make_request(deal_timestamp=datetime(2024, 1, 15, 12, 30, tzinfo=plus_two))
        )
        assert deal.deal_timestamp == datetime(2024, 1, 15, 10, 30)
        assert deal.deal_timestamp.tzinfo is None

    def test_missing_fields_refused(self):
        with pytest.raises(ValueError):
            ValidatedDeal.from_request(make_request(deal_amount=None))

    def test_is_frozen(self):
        deal = ValidatedDeal.from_request(make_request())
        with pytest.raises(ValidationError):
            deal.from_currency = "GBP"

    def test_request_not_mutated(self):
        request = make_request()
        ValidatedDeal.from_request(request)
        assert request.from_currency == "usd"


class TestDeal:
    def test_from_validated_carries_fields(self):
        validated = ValidatedDeal.from_request(make_request())
        created = datetime(2024, 2, 1)
        deal = Deal.from_validated(validated, id=7, created_at=created)
        assert deal.id == 7
        assert deal.created_at == created
        assert deal.deal_unique_id == "D1"
        assert deal.from_currency == "USD"

    def test_is_frozen(self):
        validated = ValidatedDeal.from_request(make_request())
        deal = Deal.from_validated(validated, id=1, created_at=datetime(2024, 2, 1))
        with pytest.raises(ValidationError):
            deal.deal_amount = Decimal("1")


def test_to_utc_naive_leaves_naive_untouched():
    value = datetime(2024, 1, 1, 8, 0)
    assert to_utc_naive(value) is value
