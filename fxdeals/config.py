from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "app.json"


class AppConfig(BaseModel):
    """Top-level config loaded from app.json."""

    reject_future_timestamps: bool = False
    default_recent_limit: int = Field(default=10, gt=0)
    cors_allowed_origins: list[str] = Field(default_factory=lambda: ["*"])
    db_timeout_seconds: float = Field(default=30.0, gt=0)
    extra_currency_codes: list[str] = Field(default_factory=list)
    log_level: str = "INFO"

    @field_validator("extra_currency_codes")
    @classmethod
    def codes_upper_case(cls, v: list[str]) -> list[str]:
        return [code.strip().upper() for code in v]

    @field_validator("log_level")
    @classmethod
    def log_level_upper_case(cls, v: str) -> str:
        return v.upper()

    @property
    def cors_allow_credentials(self) -> bool:
        """Credentials are only sent to explicitly listed origins, never to "*"."""
        return bool(self.cors_allowed_origins) and "*" not in self.cors_allowed_origins


def load_config(path: Optional[str | Path] = None) -> AppConfig:
    """Load app config from a JSON file. Falls back to built-in defaults."""
    if path is None:
        env = os.environ.get("FXDEALS_CONFIG_PATH")
        path = Path(env) if env else DEFAULT_CONFIG_PATH
    else:
        path = Path(path)

    if not path.exists():
        return AppConfig()

    with open(path) as f:
        raw = json.load(f)
    return AppConfig(**raw)
