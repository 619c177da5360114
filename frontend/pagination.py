"""
List pagination and filter state
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class PaginationState:
    """Limit/offset paging with optional filters

    Changing the page size or any filter goes back to the first page.
    """
    limit: int = 10
    offset: int = 0
    filters: Dict[str, Optional[str]] = field(default_factory=dict)

    def params(self) -> Dict[str, Any]:
        """Query parameters for the list request, without empty filters"""
        params: Dict[str, Any] = {"limit": self.limit, "offset": self.offset}
        params.update({k: v for k, v in self.filters.items() if v})
        return params

    def set_limit(self, limit: int) -> None:
        if limit < 1:
            raise ValueError("limit must be at least 1")
        self.limit = limit
        self.offset = 0

    def set_filter(self, name: str, value: Optional[str]) -> None:
        self.filters[name] = value or None
        self.offset = 0

    def clear_filters(self) -> None:
        self.filters.clear()
        self.offset = 0

    def has_previous(self) -> bool:
        return self.offset > 0

    def has_next(self, page_size: int) -> bool:
        """A page shorter than the limit is the last one"""
        return page_size >= self.limit

    def next_page(self) -> None:
        self.offset += self.limit

    def previous_page(self) -> None:
        self.offset = max(0, self.offset - self.limit)

    def showing_label(self, page_size: int) -> str:
        if page_size == 0:
            return "No results"
        return f"Showing {self.offset + 1} to {self.offset + page_size} of results"
