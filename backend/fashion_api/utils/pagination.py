"""
Offset pagination helpers
"""
import math
from typing import Any, Dict, List, Tuple

from sqlalchemy.orm import Query


def pagination_meta(total: int, page: int, limit: int) -> Dict[str, int]:
    return {
        "total": total,
        "page": page,
        "limit": limit,
        "pages": math.ceil(total / limit) if limit else 0,
    }


def paginate(query: Query, page: int, limit: int) -> Tuple[List[Any], Dict[str, int]]:
    """Return one page of ``query`` and its pagination block."""
    # Get total count
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return items, pagination_meta(total, page, limit)
