"""
Pagination helpers shared by every listing endpoint
"""
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from homesphere.config import settings

# Keeps offset = (page - 1) * limit inside a signed 64-bit integer
MAX_PAGE = 10 ** 12


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class PageResult:
    items: List[Any]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return page_count(self.total, self.limit)

    def to_dict(self, collection: str) -> Dict[str, Any]:
        return {
            collection: self.items,
            "total": self.total,
            "page": self.page,
            "pages": self.pages,
            "limit": self.limit,
        }


def _positive_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        number = int(str(value).strip())
    except ValueError:
        return None
    return number if number >= 1 else None


def parse_page_request(
    page: Optional[str],
    limit: Optional[str],
    default_limit: Optional[int] = None,
    max_limit: Optional[int] = None,
) -> PageRequest:
    """
    Lenient page/limit parsing.

    A missing, non-numeric or non-positive ``page`` means page 1; the same for
    ``limit`` means the endpoint default. ``limit`` is capped at ``max_limit``
    and ``page`` at ``MAX_PAGE``, which is always past the end.
    """
    default_limit = default_limit or settings.DEFAULT_PAGE_LIMIT
    max_limit = max_limit or settings.MAX_PAGE_LIMIT

    parsed_page = min(_positive_int(page) or 1, MAX_PAGE)
    parsed_limit = _positive_int(limit) or default_limit
    return PageRequest(page=parsed_page, limit=min(parsed_limit, max_limit))


def page_count(total: int, limit: int) -> int:
    if limit <= 0:
        return 0
    return math.ceil(total / limit)
