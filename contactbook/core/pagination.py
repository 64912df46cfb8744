"""Sorted, paged view of the contact collection.

Pure functions only; the controller decides which page is current and these
helpers derive what to show for it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from contactbook.config import MAX_VISIBLE_PAGES, PAGE_SIZE
from contactbook.core.contracts import Contact

EMPTY_MESSAGE = "No contacts yet. Add your first contact above!"


@dataclass(frozen=True)
class PageView:
    items: tuple[Contact, ...]
    page: int
    total_pages: int
    total: int
    start_item: int
    end_item: int
    page_size: int

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    @property
    def show_controls(self) -> bool:
        return self.total_pages > 1

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def info_text(self) -> str:
        if self.is_empty:
            return EMPTY_MESSAGE
        return f"Showing {self.start_item}-{self.end_item} of {self.total} contacts"


def sort_contacts(contacts: Sequence[Contact]) -> list[Contact]:
    """Case-insensitive name order; ties keep insertion order."""
    return sorted(contacts, key=lambda c: c.name.casefold())


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    """Number of pages for ``count`` items; an empty list still has one page."""
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")
    return max(1, math.ceil(count / page_size))


def clamp_page(page: int, count: int, page_size: int = PAGE_SIZE) -> int:
    return min(max(1, int(page)), total_pages(count, page_size))


def paginate(contacts: Sequence[Contact], page: int, page_size: int = PAGE_SIZE) -> PageView:
    ordered = sort_contacts(contacts)
    count = len(ordered)
    pages = total_pages(count, page_size)
    current = clamp_page(page, count, page_size)

    start = (current - 1) * page_size
    end = min(current * page_size, count)
    items = tuple(ordered[start:end])

    return PageView(
        items=items,
        page=current,
        total_pages=pages,
        total=count,
        start_item=start + 1 if count else 0,
        end_item=end,
        page_size=page_size,
    )


# ---------------------------------------------------------------------------
# Page transitions after mutations
# ---------------------------------------------------------------------------


def page_after_create(count_after: int, page_size: int = PAGE_SIZE) -> int:
    """Jump to the last page.

    The list is sorted by name, so the new contact is not necessarily on
    that page.
    """
    return total_pages(count_after, page_size)


def page_after_delete(current: int, count_after: int, page_size: int = PAGE_SIZE) -> int:
    return min(current, total_pages(count_after, page_size))


def page_after_update(current: int) -> int:
    return current


def go_to_page(target: int, count: int, current: int, page_size: int = PAGE_SIZE) -> int:
    """Return ``target`` if it is a real page, else stay on ``current``."""
    if 1 <= target <= total_pages(count, page_size):
        return target
    return current


def page_window(current: int, pages: int, max_visible: int = MAX_VISIBLE_PAGES) -> list[int | None]:
    """Page numbers for the pagination strip; ``None`` marks an ellipsis.

    Shows up to ``max_visible`` pages centred on ``current`` and always links
    the first and last page.
    """
    start = max(1, current - max_visible // 2)
    end = min(pages, start + max_visible - 1)
    if end - start + 1 < max_visible:
        start = max(1, end - max_visible + 1)

    out: list[int | None] = []
    if start > 1:
        out.append(1)
        if start > 2:
            out.append(None)
    out.extend(range(start, end + 1))
    if end < pages:
        if end < pages - 1:
            out.append(None)
        out.append(pages)
    return out
