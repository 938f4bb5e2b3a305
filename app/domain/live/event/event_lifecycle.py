"""Event lifecycle rules.

Status changes are not validated against a transition graph: any status may
follow any other, moving backward or skipping states included. The only
rule is that reaching a milestone records when it happened.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from app.schemas import EventStatus
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

# Timestamp field stamped when an event reaches the status
MILESTONE_FIELDS: dict[EventStatus, str] = {
    EventStatus.LIVE: "show_started_at",
    EventStatus.CLOSED: "show_ended_at",
}


def parse_status(value: Any) -> EventStatus:
    try:
        return EventStatus(value)
    except ValueError as e:
        raise AppError(
            errcode=AppErrorCode.E_INVALID_REQUEST,
            errmesg=f"Unknown event status: {value!r}",
            status_code=HttpStatusCode.BAD_REQUEST,
        ) from e


def stamp_status_change(data: Mapping[str, Any], now: datetime) -> dict[str, Any]:
    """Return the update payload with the milestone timestamp for its target status.

    Payloads without a status pass through unchanged.
    """
    update = dict(data)
    if update.get("status") is None:
        return update

    status = parse_status(update["status"])
    update["status"] = status
    milestone = MILESTONE_FIELDS.get(status)
    if milestone:
        update[milestone] = now
    return update


__all__ = ["MILESTONE_FIELDS", "parse_status", "stamp_status_change"]
