from __future__ import annotations

import logging
import random
import uuid
from datetime import timedelta
from decimal import Decimal

from fxdeals.errors import DealValidationError, DuplicateDealError
from fxdeals.intake.models import DealRequest, utc_now
from fxdeals.service.admission import DealAdmissionService

logger = logging.getLogger(__name__)

MAJOR_PAIRS = [
    ("EUR", "USD"),
    ("USD", "JPY"),
    ("GBP", "USD"),
    ("USD", "CHF"),
    ("AUD", "USD"),
    ("USD", "CAD"),
    ("NZD", "USD"),
    ("EUR", "GBP"),
    ("EUR", "JPY"),
    ("USD", "JOD"),
]

# Notional ranges by ticket size
AMOUNT_RANGES = [
    (1_000, 50_000),
    (50_000, 1_000_000),
    (1_000_000, 25_000_000),
]


def generate_random_request() -> DealRequest:
    """Generate a random but realistic FX deal request for demo purposes."""
    from_currency, to_currency = random.choice(MAJOR_PAIRS)
    if random.random() < 0.5:
        from_currency, to_currency = to_currency, from_currency

    low, high = random.choice(AMOUNT_RANGES)
    amount = Decimal(str(round(random.uniform(low, high), 4)))

    # Anywhere in the last 30 days, never in the future
    age = timedelta(seconds=random.randint(60, 30 * 24 * 3600))

    return DealRequest(
        deal_unique_id=f"FX-{uuid.uuid4().hex[:12].upper()}",
        from_currency=from_currency,
        to_currency=to_currency,
        deal_timestamp=utc_now() - age,
        deal_amount=amount,
    )


def seed_deals(service: DealAdmissionService, count: int = 50) -> list[str]:
    """Submit N random deals through the admission service. Returns accepted IDs."""
    deal_ids: list[str] = []
    for _ in range(count):
        request = generate_random_request()
        try:
            deal = service.submit_deal(request)
        except (DealValidationError, DuplicateDealError) as exc:
            logger.warning("Seed deal %s rejected: %s", request.deal_unique_id, exc)
            continue
        deal_ids.append(deal.deal_unique_id)
    return deal_ids
