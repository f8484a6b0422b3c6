from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from fxdeals.api.deps import get_config, get_service
from fxdeals.config import AppConfig
from fxdeals.errors import DealNotFoundError
from fxdeals.intake.models import Deal, DealRequest
from fxdeals.service.admission import DealAdmissionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/deals", tags=["deals"])


class CountResponse(BaseModel):
    total_deals: int


class ExistsResponse(BaseModel):
    deal_unique_id: str
    exists: bool


@router.post("", response_model=Deal, status_code=201)
async def submit_deal(
    request: DealRequest, service: DealAdmissionService = Depends(get_service)
) -> Deal:
    """Validate, de-duplicate and persist a new FX deal."""
    logger.info("Received deal submission request for deal ID: %s", request.deal_unique_id)
    return service.submit_deal(request)


@router.get("", response_model=list[Deal])
async def list_deals(service: DealAdmissionService = Depends(get_service)) -> list[Deal]:
    """All stored deals, newest first."""
    return service.get_all()


@router.get("/recent", response_model=list[Deal])
async def recent_deals(
    limit: Optional[int] = Query(default=None, description="Maximum number of deals"),
    service: DealAdmissionService = Depends(get_service),
    config: AppConfig = Depends(get_config),
) -> list[Deal]:
    return service.get_recent(config.default_recent_limit if limit is None else limit)


@router.get("/search/currency-pair", response_model=list[Deal])
async def deals_by_currency_pair(
    from_currency: str,
    to_currency: str,
    service: DealAdmissionService = Depends(get_service),
) -> list[Deal]:
    return service.get_by_currency_pair(from_currency, to_currency)


@router.get("/search/time-range", response_model=list[Deal])
async def deals_in_time_range(
    start_time: datetime,
    end_time: datetime,
    service: DealAdmissionService = Depends(get_service),
) -> list[Deal]:
    """Deals whose deal_timestamp falls within [start_time, end_time]."""
    return service.get_in_time_range(start_time, end_time)


@router.get("/stats/count", response_model=CountResponse)
async def deals_count(service: DealAdmissionService = Depends(get_service)) -> CountResponse:
    return CountResponse(total_deals=service.count())


@router.get("/exists/{deal_unique_id:path}", response_model=ExistsResponse)
async def deal_exists(
    deal_unique_id: str, service: DealAdmissionService = Depends(get_service)
) -> ExistsResponse:
    """Whether a deal ID is stored. Works for every ID, including ones that
    contain "/" or shadow a fixed route."""
    return ExistsResponse(deal_unique_id=deal_unique_id, exists=service.exists(deal_unique_id))


@router.get("/{deal_unique_id:path}", response_model=Deal)
async def get_deal(
    deal_unique_id: str, service: DealAdmissionService = Depends(get_service)
) -> Deal:
    """Single deal by ID. Declared last: IDs equal to a fixed route such as
    ``recent`` or ``stats/count`` resolve to that route instead."""
    deal = service.get_by_unique_id(deal_unique_id)
    if deal is None:
        raise DealNotFoundError(deal_unique_id)
    return deal
