"""Client-side pagination over the row set held by the grid."""

from collections.abc import Sequence
from typing import Any, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE: int = 10
DEFAULT_PAGE_SIZE_OPTIONS: tuple[int, ...] = (5, 10, 25, 50, 100)


def _check(page: int, page_size: int) -> None:
    if page < 0:
        raise ValueError(f"Page index must be non-negative, got {page}")
    if page_size <= 0:
        raise ValueError(f"Page size must be positive, got {page_size}")


def page_bounds(row_count: int, page: int, page_size: int) -> tuple[int, int]:
    """Return the ``[start, end)`` bounds of *page*.

    ``end`` is clamped to *row_count* but never falls below ``start``, so
    a page past the last one yields an empty range instead of an error::

        page_bounds(23, 2, 10)  # (20, 23)
        page_bounds(23, 5, 10)  # (50, 50)

    Raises:
        ValueError: If *page* is negative or *page_size* is not positive.
    """
    _check(page, page_size)
    start = page * page_size
    end = max(start, min(start + page_size, row_count))
    return start, end


def page_slice(rows: Sequence[T], page: int, page_size: int) -> list[T]:
    """Return the rows shown on *page*."""
    start, end = page_bounds(len(rows), page, page_size)
    return list(rows[start:end])


def page_count(row_count: int, page_size: int) -> int:
    """Number of pages needed for *row_count* rows (0 for no rows)."""
    _check(0, page_size)
    return -(-row_count // page_size)


def clamp_page(page: int, row_count: int, page_size: int) -> int:
    """Keep *page* when it still exists, otherwise move to the last page.

    Used when the row set changes for a reason other than a filter
    commit (e.g. a reload with unchanged filters).
    """
    last = max(page_count(row_count, page_size) - 1, 0)
    return min(max(page, 0), last)


def normalize_page_size(
    page_size: Any,
    options: Sequence[int],
    default: int = DEFAULT_PAGE_SIZE,
) -> int:
    """Return *page_size* as an int if it is one of *options*, else *default*.

    Strings coming from a ``<select>`` are accepted.
    """
    try:
        size = int(page_size)
    except (TypeError, ValueError):
        return default
    return size if size in options else default


def displayed_rows_label(row_count: int, page: int, page_size: int) -> str:
    """Human-readable range of the visible rows, e.g. ``"11–20 of 23"``."""
    start, end = page_bounds(row_count, page, page_size)
    if end <= start:
        return f"0–0 of {row_count}"
    return f"{start + 1}–{end} of {row_count}"
