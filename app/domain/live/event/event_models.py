"""Event domain models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.schemas import EventStatus


class EventResponse(BaseModel):
    """Event response model."""

    event_id: str
    admin_id: str

    name: str | None = None
    start_image: str | None = None
    end_image: str | None = None
    date_time_start: datetime | None = None
    date_time_end: datetime | None = None
    redirect_url: str | None = None

    fan_url: str | None = None
    host_url: str | None = None
    celebrity_url: str | None = None

    session_id: str
    stage_session_id: str

    status: EventStatus
    archive_event: bool = False
    composed: bool = False
    archive_id: str | None = None
    rtmp_url: str = ""

    created_at: datetime
    updated_at: datetime
    show_started_at: datetime | None = None
    show_ended_at: datetime | None = None


class EventPublicResponse(BaseModel):
    """Restricted projection of an event served without authentication."""

    event_id: str
    admin_id: str
    name: str | None = None
    status: EventStatus
    fan_url: str | None = None
    host_url: str | None = None
    celebrity_url: str | None = None
    start_image: str | None = None
    end_image: str | None = None
    date_time_start: datetime | None = None
    date_time_end: datetime | None = None
    created_at: datetime


EVENT_PUBLIC_FIELDS: frozenset[str] = frozenset(EventPublicResponse.model_fields)


class EventCreateParams(BaseModel):
    """Parameters for creating an event.

    Unknown keys are accepted and dropped by the store whitelist.
    """

    model_config = ConfigDict(extra="allow")

    admin_id: str
    name: str | None = None
    fan_url: str | None = None
    host_url: str | None = None
    celebrity_url: str | None = None
    start_image: str | None = None
    end_image: str | None = None
    date_time_start: datetime | None = None
    date_time_end: datetime | None = None
    redirect_url: str | None = None
    archive_event: bool | None = None
    composed: bool | None = None
    status: EventStatus | None = None
    rtmp_url: str | None = None


class ProducerTokens(BaseModel):
    api_key: str | None = None
    event: EventResponse
    backstage_token: str
    stage_token: str


class FanTokens(BaseModel):
    api_key: str | None = None
    event: EventResponse
    backstage_token: str
    stage_token: str
    http_support: bool = False


class HostCelebToken(BaseModel):
    api_key: str | None = None
    event: EventResponse
    stage_token: str
    http_support: bool = False
