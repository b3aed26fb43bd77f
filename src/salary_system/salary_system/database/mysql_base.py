from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date, time, timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, TypeVar

import mysql.connector

from ..core.exceptions import StoreUnavailableError, ValidationError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

T = TypeVar("T")


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Read-mostly cursor; any connector error surfaces as StoreUnavailableError."""
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        raise StoreUnavailableError(f"Record store query failed: {e}") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def build_valid(rows: Iterable[Dict[str, Any]], build: Callable[[Dict[str, Any]], T], table: str) -> List[T]:
    """Map rows to entities, skipping (and logging) rows that fail validation."""
    out: List[T] = []
    for row in rows:
        try:
            out.append(build(row))
        except (ValidationError, ValueError, TypeError) as e:
            logger.warning("Skipping invalid %s row %r: %s", table, row, e)
    return out


def in_clause(values: Sequence[Any]) -> str:
    """Placeholders for ``IN (...)``; callers must not pass an empty sequence."""
    return ", ".join(["%s"] * len(values))


def day_bounds(start: date, end: date) -> tuple[str, str]:
    """DATETIME bounds covering whole calendar days from start to end."""
    return f"{start.isoformat()} 00:00:00", f"{(end + timedelta(days=1)).isoformat()} 00:00:00"


def as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Normalize MySQL TIME values across connector implementations.

    mysql-connector can return TIME as:
    - datetime.time
    - datetime.timedelta
    - string (e.g. '08:30:00')
    """

    if value is None:
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        seconds = total_seconds % 60
        return time(hour=hours, minute=minutes, second=seconds)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        hours = int(parts[0])
        minutes = int(parts[1])
        seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
        return time(hour=hours, minute=minutes, second=seconds)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")


def slot_text(value: Any) -> Optional[str]:
    """Scheduled slots are stored either as TIME or as free text ('8:00 AM')."""
    if value is None:
        return None
    if isinstance(value, (time, timedelta)):
        return normalize_mysql_time(value).strftime("%H:%M")
    text = str(value).strip()
    return text or None
