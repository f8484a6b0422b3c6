from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Iterable, Optional, Protocol

ISO4217_PATH = Path(__file__).resolve().parent / "iso4217.json"

_CODE_PATTERN = re.compile(r"^[A-Z]{3}$")


class CurrencyLookup(Protocol):
    """Read-only capability answering whether a code is a known currency."""

    def is_valid_currency_code(self, code: str) -> bool: ...


class CurrencyCatalog:
    """ISO 4217 code table, optionally extended with extra codes."""

    def __init__(self, currencies: dict[str, str]) -> None:
        self._currencies = {code.upper(): name for code, name in currencies.items()}

    def is_valid_currency_code(self, code: str) -> bool:
        upper = code.upper()
        return bool(_CODE_PATTERN.match(upper)) and upper in self._currencies

    def name_of(self, code: str) -> Optional[str]:
        return self._currencies.get(code.upper())

    def codes(self) -> list[str]:
        return sorted(self._currencies)

    def __len__(self) -> int:
        return len(self._currencies)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and self.is_valid_currency_code(code)


def load_catalog(
    path: Optional[str | Path] = None,
    extra_codes: Iterable[str] = (),
) -> CurrencyCatalog:
    """Load the ISO 4217 table from JSON and merge in any extra codes."""
    path = Path(path) if path is not None else ISO4217_PATH
    with open(path) as f:
        currencies: dict[str, str] = json.load(f)
    for code in extra_codes:
        currencies.setdefault(code.upper(), code.upper())
    return CurrencyCatalog(currencies)
