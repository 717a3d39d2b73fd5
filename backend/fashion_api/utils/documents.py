"""
Helpers for JSON document columns.
"""
import copy
from typing import Any, Dict, Optional


def merge_document(current: Optional[Dict[str, Any]], changes: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge ``changes`` into a copy of ``current``.

    Returns a new dict so SQLAlchemy sees the JSON column as changed.
    """
    merged = copy.deepcopy(current) if current else {}
    for key, value in changes.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_document(merged[key], value)
        else:
            merged[key] = value
    return merged
