"""Shared utilities for schema validation."""

from datetime import datetime, timezone
from typing import Any


def parse_mongo_datetime(v: Any) -> Any:
    """Parse stored datetime representations into datetime, or return as-is.

    Accepted forms:
    - datetime (returned unchanged)
    - MongoDB Extended JSON: {'$date': '2024-11-01T08:00:00Z'}, as left by mongoimport
    - epoch milliseconds (int), the server-timestamp form of records imported
      from the previous realtime store
    """
    if isinstance(v, datetime):
        return v
    if isinstance(v, dict) and "$date" in v:
        return datetime.fromisoformat(v["$date"].replace("Z", "+00:00"))
    if isinstance(v, int) and not isinstance(v, bool):
        return datetime.fromtimestamp(v / 1000, timezone.utc)
    # Return as-is and let Pydantic handle validation
    return v
