from __future__ import annotations

from enum import Enum
from typing import Optional


class SortMode(str, Enum):
    """Orderings offered on the list page."""

    DATE_OLD = "date_old"
    DATE_NEW = "date_new"
    RATING_HIGH = "rating_high"
    RATING_LOW = "rating_low"

    @classmethod
    def parse(cls, keyword: Optional[str]) -> "SortMode":
        """Resolve a client keyword; anything unrecognized falls back to newest first."""
        if keyword:
            try:
                return cls(keyword.strip())
            except ValueError:
                pass
        return cls.DATE_NEW

    @property
    def order_by(self) -> str:
        return _ORDER_BY[self]


DEFAULT_SORT = SortMode.DATE_NEW

_ORDER_BY = {
    SortMode.DATE_OLD: "date_read ASC",
    SortMode.DATE_NEW: "date_read DESC",
    SortMode.RATING_HIGH: "rating DESC, date_read DESC",
    SortMode.RATING_LOW: "rating ASC, date_read DESC",
}
