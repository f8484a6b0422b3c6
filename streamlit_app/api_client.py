"""Thin HTTP client for the FX deals API."""

from __future__ import annotations

import os
from typing import Any

import httpx

BASE_URL = os.environ.get("FXDEALS_API_URL", "http://localhost:8000")
DEALS = "/api/v1/deals"


def _url(path: str) -> str:
    return f"{BASE_URL}{path}"


def error_detail(exc: Exception) -> str:
    """Pull the RFC 7807 ``detail`` out of an API error, if there is one."""
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            return exc.response.json().get("detail", str(exc))
        except ValueError:
            return exc.response.text
    return str(exc)


def submit_deal(payload: dict[str, Any]) -> dict[str, Any]:
    resp = httpx.post(_url(DEALS), json=payload, timeout=10)
    resp.raise_for_status()
    return resp.json()


def get_deal(deal_unique_id: str) -> dict[str, Any] | None:
    resp = httpx.get(_url(f"{DEALS}/{deal_unique_id}"), timeout=10)
    if resp.status_code == 404:
        return None
    resp.raise_for_status()
    return resp.json()


def list_deals() -> list[dict[str, Any]]:
    resp = httpx.get(_url(DEALS), timeout=10)
    resp.raise_for_status()
    return resp.json()


def recent_deals(limit: int = 10) -> list[dict[str, Any]]:
    resp = httpx.get(_url(f"{DEALS}/recent"), params={"limit": limit}, timeout=10)
    resp.raise_for_status()
    return resp.json()


def deals_by_currency_pair(from_currency: str, to_currency: str) -> list[dict[str, Any]]:
    resp = httpx.get(
        _url(f"{DEALS}/search/currency-pair"),
        params={"from_currency": from_currency, "to_currency": to_currency},
        timeout=10,
    )
    resp.raise_for_status()
    return resp.json()


def deals_in_time_range(start_time: str, end_time: str) -> list[dict[str, Any]]:
    resp = httpx.get(
        _url(f"{DEALS}/search/time-range"),
        params={"start_time": start_time, "end_time": end_time},
        timeout=10,
    )
    resp.raise_for_status()
    return resp.json()


def count_deals() -> int:
    resp = httpx.get(_url(f"{DEALS}/stats/count"), timeout=10)
    resp.raise_for_status()
    return resp.json()["total_deals"]


def seed_deals(count: int = 50) -> dict[str, Any]:
    resp = httpx.post(_url("/seed"), json={"count": count}, timeout=30)
    resp.raise_for_status()
    return resp.json()
