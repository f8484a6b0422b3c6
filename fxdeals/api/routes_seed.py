from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from fxdeals.api.deps import get_service
from fxdeals.sample.seed import seed_deals
from fxdeals.service.admission import DealAdmissionService

router = APIRouter(tags=["seed"])


class SeedRequest(BaseModel):
    count: int = Field(default=50, ge=1, le=500)


class SeedResponse(BaseModel):
    generated: int
    deal_unique_ids: list[str]


@router.post("/seed", response_model=SeedResponse, status_code=201)
async def seed_data(
    request: SeedRequest, service: DealAdmissionService = Depends(get_service)
) -> SeedResponse:
    """Generate random FX deals for demo purposes."""
    ids = seed_deals(service, count=request.count)
    return SeedResponse(generated=len(ids), deal_unique_ids=ids)
