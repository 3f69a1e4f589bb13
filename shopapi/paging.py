"""Page arithmetic for list endpoints."""

from __future__ import annotations

import math
from dataclasses import dataclass

DEFAULT_PAGE_SIZE = 20


@dataclass(frozen=True)
class Pagination:
    """Where a page sits in a result set."""

    current_page: int
    total: int
    total_page: int
    limit: int
    skip: int


def paginate(page: int, page_size: int, total: int) -> Pagination:
    """Work out the page window for ``total`` items.

    Page sizes outside 1..DEFAULT_PAGE_SIZE fall back to the default; pages
    below 1, or any page of an empty result, become page 1.
    """
    limit = page_size if 0 < page_size <= DEFAULT_PAGE_SIZE else DEFAULT_PAGE_SIZE
    total_page = math.ceil(total / limit)
    if page < 1 or total_page == 0:
        page = 1
    return Pagination(
        current_page=page,
        total=total,
        total_page=total_page,
        limit=limit,
        skip=(page - 1) * limit,
    )