"""Helpers for reading untyped request payloads."""
from typing import Any, Dict, Iterable, Mapping


def is_present(value: Any) -> bool:
    """True when a payload value is neither missing nor blank."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, set, dict)):
        return bool(value)
    return True


def as_mapping(payload: Any) -> Mapping[str, Any]:
    """Treat anything that is not a mapping as an empty payload."""
    return payload if isinstance(payload, Mapping) else {}


def pick_fields(payload: Any, fields: Iterable[str]) -> Dict[str, str]:
    """Keep only whitelisted, present fields, as strings."""
    data = as_mapping(payload)
    picked = {}
    for field in fields:
        value = data.get(field)
        if is_present(value):
            picked[field] = value if isinstance(value, str) else str(value)
    return picked
