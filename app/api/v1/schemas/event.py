from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.schemas import EventStatus


class CreateEventIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="Event name")
    fan_url: str | None = Field(None, description="Fan slug, unique per admin")
    host_url: str | None = Field(None, description="Host slug, unique per admin")
    celebrity_url: str | None = Field(None, description="Celebrity slug, unique per admin")
    start_image: str | None = None
    end_image: str | None = None
    date_time_start: datetime | None = None
    date_time_end: datetime | None = None
    redirect_url: str | None = None
    archive_event: bool = False
    composed: bool = False


class UpdateEventIn(BaseModel):
    """Partial update. Fields the store does not accept are dropped."""

    model_config = ConfigDict(extra="allow")

    event_id: str


class ChangeStatusIn(BaseModel):
    event_id: str
    status: EventStatus


class EventIdIn(BaseModel):
    event_id: str


class StartArchiveOut(BaseModel):
    archive_id: str
