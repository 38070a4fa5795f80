"""Offset/limit pagination over ordered result lists."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from symbols_mcp_server.domain.model import Page
from symbols_mcp_server.errors import PaginationValidationError


DEFAULT_LIMIT = 25
DEFAULT_MAX_LIMIT = 1000

T = TypeVar("T")


def validate_pagination(limit: int, offset: int, max_limit: int = DEFAULT_MAX_LIMIT) -> None:
    """Reject out-of-range pagination parameters.

    Raises:
        PaginationValidationError: if ``limit`` is not in ``[1, max_limit]``
            or ``offset`` is negative.
    """
    if limit <= 0:
        raise PaginationValidationError("limit must be positive")
    if offset < 0:
        raise PaginationValidationError("offset must be non-negative")
    if limit > max_limit:
        raise PaginationValidationError(f"limit cannot exceed {max_limit}")


def paginate(
    items: Sequence[T],
    limit: int,
    offset: int,
    max_limit: int = DEFAULT_MAX_LIMIT,
) -> Page[T]:
    """Slice ``items`` into a page.

    An offset at or past the end yields ``total=0``, not the size of the
    full result set; in-range pages report the full size.
    """
    validate_pagination(limit, offset, max_limit)

    total = len(items)
    if offset >= total:
        return Page(data=[], total=0)

    end = min(offset + limit, total)
    return Page(
        data=list(items[offset:end]),
        total=total,
        next=end if end < total else None,
    )
