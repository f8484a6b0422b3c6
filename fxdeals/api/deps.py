from __future__ import annotations

from fxdeals.config import AppConfig, load_config
from fxdeals.service.admission import DealAdmissionService
from fxdeals.service.factory import build_service


def get_config() -> AppConfig:
    return load_config()


def get_service() -> DealAdmissionService:
    """Per-request admission service. Tests swap it via app.dependency_overrides."""
    return build_service(get_config())
