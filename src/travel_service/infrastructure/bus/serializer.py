"""Wire envelope for fan-out events: {"event": <type>, "data": {...}}."""
from __future__ import annotations

import json
from datetime import datetime
from enum import Enum
from typing import Any


def _default(o: object) -> Any:
    if isinstance(o, datetime):
        return o.isoformat()
    if isinstance(o, Enum):
        return o.value
    raise TypeError(f"{type(o).__name__} is not JSON serializable")


def serialize_event(event_type: str, payload: dict[str, Any]) -> str:
    return json.dumps({"event": str(event_type), "data": payload}, default=_default)


def deserialize_event(raw: str | bytes) -> tuple[str, dict[str, Any]]:
    """Raises ValueError for anything that is not a well-formed envelope."""
    envelope = json.loads(raw)
    if not isinstance(envelope, dict):
        raise ValueError("event envelope must be an object")
    event_type, data = envelope.get("event"), envelope.get("data")
    if not isinstance(event_type, str) or not isinstance(data, dict):
        raise ValueError("event envelope needs a string 'event' and an object 'data'")
    return event_type, data
