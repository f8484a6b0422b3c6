from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from fxdeals.api.errors import (
    deal_error_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from fxdeals.api.routes_deals import router as deals_router
from fxdeals.api.routes_seed import router as seed_router
from fxdeals.config import load_config
from fxdeals.errors import FxDealsError

config = load_config()
logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(
    title="FX Deals Warehouse",
    version="1.0.0",
    description=(
        "Accepts FX deal submissions, rejects invalid or duplicate deals, "
        "and exposes query access over the stored deals."
    ),
    contact={"name": "FX Deals Team"},
    license_info={"name": "Proprietary"},
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=config.cors_allow_credentials,
    max_age=3600,
)

app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(FxDealsError, deal_error_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)
app.include_router(deals_router)
app.include_router(seed_router)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}
