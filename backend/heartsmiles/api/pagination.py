"""Page slicing for list endpoints."""

from __future__ import annotations

import math
from typing import Any


def paginate(items: list[dict[str, Any]], key: str, page: int, limit: int) -> dict[str, Any]:
    """Slice `items` to one page and wrap it with pagination metadata."""
    start = (page - 1) * limit
    return {
        key: items[start:start + limit],
        "pagination": {
            "currentPage": page,
            "totalPages": math.ceil(len(items) / limit),
            "totalItems": len(items),
            "itemsPerPage": limit,
        },
    }
