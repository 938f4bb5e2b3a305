"""Event ODM schema."""

from datetime import datetime
from typing import Any

from beanie import Document, Indexed
from pydantic import field_validator

from .event_status import EventStatus
from .schema_utils import parse_mongo_datetime

# Per-admin slugs, one per participant role that joins through a public URL
SLUG_FIELDS: tuple[str, ...] = ("fan_url", "host_url", "celebrity_url")


class Event(Document):
    """Event document model."""

    event_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    admin_id: Indexed(str)  # type: ignore[valid-type]

    # Descriptor fields
    name: str | None = None
    start_image: str | None = None
    end_image: str | None = None
    date_time_start: datetime | None = None
    date_time_end: datetime | None = None
    redirect_url: str | None = None

    # Public slugs, unique per admin
    fan_url: str | None = None
    host_url: str | None = None
    celebrity_url: str | None = None

    # Video platform sessions, assigned once at creation
    session_id: Indexed(str)  # type: ignore[valid-type]
    stage_session_id: str

    # Production settings
    status: EventStatus = EventStatus.NOT_STARTED
    archive_event: bool = False
    composed: bool = False
    archive_id: str | None = None
    rtmp_url: str = ""

    # Timestamps
    created_at: datetime
    updated_at: datetime
    show_started_at: datetime | None = None
    show_ended_at: datetime | None = None

    @field_validator(
        "created_at",
        "updated_at",
        "show_started_at",
        "show_ended_at",
        "date_time_start",
        "date_time_end",
        mode="before",
    )
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        """Parse MongoDB Extended JSON datetime format."""
        return parse_mongo_datetime(v)

    class Settings:
        name = "event"
        indexes = [
            [("event_id", 1)],  # unique handled by Indexed
            [("admin_id", 1), ("created_at", 1)],
            [("admin_id", 1), ("fan_url", 1)],
            [("admin_id", 1), ("host_url", 1)],
            [("admin_id", 1), ("celebrity_url", 1)],
        ]


# Every attribute an event write may carry (the Mongo _id and revision are excluded)
EVENT_FIELDS: frozenset[str] = frozenset(
    name for name in Event.model_fields if name not in {"id", "revision_id"}
)

# Attributes that stay fixed after creation
EVENT_IMMUTABLE_FIELDS: frozenset[str] = frozenset(
    {"event_id", "admin_id", "session_id", "stage_session_id", "created_at"}
)

# Attributes only the service writes: milestone timestamps, the archive id and the write stamp
EVENT_SERVICE_FIELDS: frozenset[str] = frozenset(
    {"show_started_at", "show_ended_at", "archive_id", "updated_at"}
)

EVENT_UPDATABLE_FIELDS: frozenset[str] = (
    EVENT_FIELDS - EVENT_IMMUTABLE_FIELDS - EVENT_SERVICE_FIELDS
)


__all__ = [
    "EVENT_FIELDS",
    "EVENT_IMMUTABLE_FIELDS",
    "EVENT_SERVICE_FIELDS",
    "EVENT_UPDATABLE_FIELDS",
    "Event",
    "SLUG_FIELDS",
]
