"""Event status enum."""

from enum import Enum


class EventStatus(str, Enum):
    """Event lifecycle states.

    State Flow:

    NOT_STARTED → PRESHOW → LIVE → CLOSED

    The flow is descriptive only: any status may be written at any time.
    Reaching LIVE stamps show_started_at, reaching CLOSED stamps show_ended_at.
    """

    NOT_STARTED = "notStarted"
    PRESHOW = "preshow"
    LIVE = "live"
    CLOSED = "closed"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def active_states(cls) -> list["EventStatus"]:
        """States an event can be joined in by hosts and celebrities, by priority."""
        return [EventStatus.LIVE, EventStatus.PRESHOW]


__all__ = ["EventStatus"]
