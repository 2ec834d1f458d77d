"""Presence-driven construction of optional nested configuration blocks."""

from typing import Any, Callable, Dict, List, Mapping, Optional


def compact(mapping: Mapping[str, Any]) -> Dict[str, Any]:
    """Drop fields whose value is None."""
    return {k: v for k, v in mapping.items() if v is not None}


def with_defaults(value: Optional[Mapping[str, Any]], defaults: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(defaults)
    for key, item in (value or {}).items():
        if item is not None:
            merged[key] = item
    return merged


def is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (list, tuple, dict, str)):
        return len(value) > 0
    return True


def optional_block(value: Any, build: Callable[[Any], Dict[str, Any]] = dict) -> List[Dict[str, Any]]:
    """Zero blocks for an absent value, exactly one for a present one."""
    if not is_present(value):
        return []
    return [build(value)]


def repeated_blocks(values: Any, build: Callable[[Any], Dict[str, Any]] = dict) -> List[Dict[str, Any]]:
    """One block per list element; absent or empty lists expand to nothing."""
    if not is_present(values):
        return []
    return [build(value) for value in values]


def first(blocks: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    return blocks[0] if blocks else None
