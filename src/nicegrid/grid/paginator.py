"""Page bookkeeping for the grid view."""

from __future__ import annotations

import math


def total_pages(total_rows: int, page_length: int) -> int:
    """Number of pages needed for ``total_rows``; never less than 1."""
    if page_length <= 0:
        raise ValueError(f"page_length must be > 0, got {page_length!r}")
    return max(1, math.ceil(max(0, total_rows) / page_length))


class Paginator:
    """Current page (1-based) over ``total_rows`` rows of ``page_length`` each.

    Moving past the first/last page is a no-op; the presentation layer shows
    the Previous/Next controls disabled at the bounds (see ``has_previous``
    and ``has_next``).
    """

    def __init__(self, total_rows: int = 0, page_length: int = 30) -> None:
        if page_length <= 0:
            raise ValueError(f"page_length must be > 0, got {page_length!r}")
        self.page_length = page_length
        self.total_rows = max(0, total_rows)
        self.current_page = 1

    @property
    def total_pages(self) -> int:
        return total_pages(self.total_rows, self.page_length)

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    def _clamp(self, page: int) -> int:
        return max(1, min(page, self.total_pages))

    def set_page(self, page: int) -> bool:
        """Go to ``page``, clamped to ``[1, total_pages]``. Returns True if the page changed."""
        new_page = self._clamp(int(page))
        if new_page == self.current_page:
            return False
        self.current_page = new_page
        return True

    def next_page(self) -> bool:
        if not self.has_next:
            return False
        return self.set_page(self.current_page + 1)

    def previous_page(self) -> bool:
        if not self.has_previous:
            return False
        return self.set_page(self.current_page - 1)

    def update_total_rows(self, total_rows: int) -> bool:
        """Adopt a new row total and re-clamp. Returns True if the current page moved."""
        self.total_rows = max(0, total_rows)
        new_page = self._clamp(self.current_page)
        if new_page == self.current_page:
            return False
        self.current_page = new_page
        return True

    def page_bounds(self) -> tuple[int, int]:
        """``[start, end)`` row indices of the current page."""
        start = (self.current_page - 1) * self.page_length
        end = min(self.total_rows, start + self.page_length)
        return start, max(start, end)
