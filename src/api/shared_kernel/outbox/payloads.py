"""JSON payloads for dataclass domain events."""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import datetime
from typing import Any


def _jsonable(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        return event_payload(value)
    if isinstance(value, (tuple, list, frozenset, set)):
        return [_jsonable(item) for item in value]
    return value


def event_payload(event: Any) -> dict[str, Any]:
    """Flatten a frozen dataclass event into a dict ``json.dumps`` accepts.

    Timestamps become ISO-8601 strings and nested snapshots become dicts.
    """
    return {f.name: _jsonable(getattr(event, f.name)) for f in fields(event)}
