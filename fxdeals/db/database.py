from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Generator, Optional

from fxdeals.errors import DuplicateDealError
from fxdeals.intake.models import Deal, ValidatedDeal, utc_now

DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent.parent / "data" / "fxdeals.db"
DEFAULT_TIMEOUT_SECONDS = 30.0

SCHEMA = """
CREATE TABLE IF NOT EXISTS deals (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    deal_unique_id TEXT NOT NULL UNIQUE,
    from_currency TEXT NOT NULL,
    to_currency TEXT NOT NULL,
    deal_timestamp TEXT NOT NULL,
    deal_amount TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_deals_deal_timestamp ON deals (deal_timestamp);
CREATE INDEX IF NOT EXISTS idx_deals_created_at ON deals (created_at);
CREATE INDEX IF NOT EXISTS idx_deals_currency_pair ON deals (from_currency, to_currency);
"""

_COLUMNS = "id, deal_unique_id, from_currency, to_currency, deal_timestamp, deal_amount, created_at"


def _db_path() -> Path:
    env = os.environ.get("FXDEALS_DB_PATH")
    if env:
        return Path(env)
    return DEFAULT_DB_PATH


def format_timestamp(value: datetime) -> str:
    """Fixed-width ISO 8601 text, so SQL string comparison is chronological.

    isoformat pads the year to four digits and always writes microseconds.
    """
    return value.isoformat(timespec="microseconds")


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value)


@contextmanager
def get_conn(
    db_path: Path | None = None, timeout: float = DEFAULT_TIMEOUT_SECONDS
) -> Generator[sqlite3.Connection, None, None]:
    path = db_path or _db_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path), timeout=timeout)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(db_path: Path | None = None, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
    with get_conn(db_path, timeout) as conn:
        conn.execute("PRAGMA journal_mode=WAL")
        conn.executescript(SCHEMA)


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


def insert_deal(
    deal: ValidatedDeal,
    db_path: Path | None = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> Deal:
    """Insert a deal, relying on the UNIQUE constraint for duplicate detection.

    Raises DuplicateDealError if the deal_unique_id is already stored.
    """
    created_at = utc_now()
    try:
        with get_conn(db_path, timeout) as conn:
            cursor = conn.execute(
                """INSERT INTO deals
                   (deal_unique_id, from_currency, to_currency,
                    deal_timestamp, deal_amount, created_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (
                    deal.deal_unique_id,
                    deal.from_currency,
                    deal.to_currency,
                    format_timestamp(deal.deal_timestamp),
                    str(deal.deal_amount),
                    format_timestamp(created_at),
                ),
            )
            row_id = cursor.lastrowid
    except sqlite3.IntegrityError as exc:
        if "deal_unique_id" in str(exc):
            raise DuplicateDealError(deal.deal_unique_id) from exc
        raise
    return Deal.from_validated(deal, id=row_id, created_at=created_at)


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


def deal_exists(
    deal_unique_id: str,
    db_path: Path | None = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> bool:
    with get_conn(db_path, timeout) as conn:
        row = conn.execute(
            "SELECT 1 FROM deals WHERE deal_unique_id = ?", (deal_unique_id,)
        ).fetchone()
        return row is not None


def get_deal(
    deal_unique_id: str,
    db_path: Path | None = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> Optional[Deal]:
    with get_conn(db_path, timeout) as conn:
        row = conn.execute(
            f"SELECT {_COLUMNS} FROM deals WHERE deal_unique_id = ?",
            (deal_unique_id,),
        ).fetchone()
        if row is None:
            return None
        return _row_to_deal(row)


def get_all_deals(
    db_path: Path | None = None, timeout: float = DEFAULT_TIMEOUT_SECONDS
) -> list[Deal]:
    with get_conn(db_path, timeout) as conn:
        rows = conn.execute(
            f"SELECT {_COLUMNS} FROM deals ORDER BY created_at DESC, id DESC"
        ).fetchall()
        return [_row_to_deal(r) for r in rows]


def get_deals_by_currency_pair(
    from_currency: str,
    to_currency: str,
    db_path: Path | None = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> list[Deal]:
    with get_conn(db_path, timeout) as conn:
        rows = conn.execute(
            f"""SELECT {_COLUMNS} FROM deals
                WHERE from_currency = ? AND to_currency = ?
                ORDER BY deal_timestamp DESC, id DESC""",
            (from_currency, to_currency),
        ).fetchall()
        return [_row_to_deal(r) for r in rows]


def get_deals_by_timestamp_range(
    start: datetime,
    end: datetime,
    db_path: Path | None = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> list[Deal]:
    with get_conn(db_path, timeout) as conn:
        rows = conn.execute(
            f"""SELECT {_COLUMNS} FROM deals
                WHERE deal_timestamp BETWEEN ? AND ?
                ORDER BY deal_timestamp DESC, id DESC""",
            (format_timestamp(start), format_timestamp(end)),
        ).fetchall()
        return [_row_to_deal(r) for r in rows]


def get_recent_deals(
    limit: int,
    db_path: Path | None = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> list[Deal]:
    with get_conn(db_path, timeout) as conn:
        rows = conn.execute(
            f"SELECT {_COLUMNS} FROM deals ORDER BY created_at DESC, id DESC LIMIT ?",
            (limit,),
        ).fetchall()
        return [_row_to_deal(r) for r in rows]


def count_deals(
    db_path: Path | None = None, timeout: float = DEFAULT_TIMEOUT_SECONDS
) -> int:
    with get_conn(db_path, timeout) as conn:
        return conn.execute("SELECT COUNT(*) FROM deals").fetchone()[0]


def _row_to_deal(row: sqlite3.Row) -> Deal:
    return Deal(
        id=row["id"],
        deal_unique_id=row["deal_unique_id"],
        from_currency=row["from_currency"],
        to_currency=row["to_currency"],
        deal_timestamp=parse_timestamp(row["deal_timestamp"]),
        deal_amount=Decimal(row["deal_amount"]),
        created_at=parse_timestamp(row["created_at"]),
    )
