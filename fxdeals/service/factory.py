from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from fxdeals.config import AppConfig, load_config
from fxdeals.currency.catalog import CurrencyCatalog, load_catalog
from fxdeals.service.admission import DealAdmissionService
from fxdeals.store.sqlite_store import SqliteDealStore


@lru_cache(maxsize=8)
def _catalog(extra_codes: tuple[str, ...]) -> CurrencyCatalog:
    return load_catalog(extra_codes=extra_codes)


def build_service(
    config: Optional[AppConfig] = None, db_path: Optional[Path] = None
) -> DealAdmissionService:
    """Wire the admission service to SQLite and the ISO 4217 catalog."""
    config = config or load_config()
    store = SqliteDealStore(db_path=db_path, timeout=config.db_timeout_seconds)
    store.init()
    return DealAdmissionService(
        store=store,
        currencies=_catalog(tuple(config.extra_currency_codes)),
        reject_future_timestamps=config.reject_future_timestamps,
    )
