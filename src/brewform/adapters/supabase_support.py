"""Helpers shared by the Supabase repositories."""

from collections.abc import Callable
from datetime import datetime
from typing import Any, TypeVar

from supabase import PostgrestAPIError

from brewform.domain.errors import ConflictError, NotFoundError

UNIQUE_VIOLATION = "23505"
NO_DATA_FOUND = "P0002"

T = TypeVar("T")


def live(query: Any) -> Any:
    """Restrict a query to rows that are not soft-deleted."""
    return query.is_("deleted_at", "null")


def first_row(data: object) -> dict[str, Any] | None:
    """Normalize RPC and table payloads to a single row."""
    if isinstance(data, list):
        return data[0] if data else None
    if isinstance(data, dict):
        return data
    return None


def translate_conflicts(action: Callable[[], T], message: str) -> T:
    """Run a write, mapping unique violations to ConflictError.

    SQL functions raise NO_DATA_FOUND when their target row vanished
    mid-write; that surfaces as NotFoundError.
    """
    try:
        return action()
    except PostgrestAPIError as exc:
        if exc.code == UNIQUE_VIOLATION:
            raise ConflictError(message) from exc
        if exc.code == NO_DATA_FOUND:
            raise NotFoundError() from exc
        raise


def parse_datetime(value: object) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(str(value))
