"""Event store - persistence and indexed lookup of Event documents."""

from collections.abc import Mapping
from typing import Any

from beanie.operators import In
from loguru import logger
from pydantic import ValidationError
from pymongo import ASCENDING

from app.domain.utils.idgen import new_event_id
from app.schemas import (
    EVENT_FIELDS,
    EVENT_SERVICE_FIELDS,
    EVENT_UPDATABLE_FIELDS,
    SLUG_FIELDS,
    Event,
    EventStatus,
)
from app.shared.utils import utc_now
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .event_models import EVENT_PUBLIC_FIELDS, EventPublicResponse

EVENT_DEFAULTS: dict[str, Any] = {
    "status": EventStatus.NOT_STARTED,
    "archive_event": False,
    "composed": False,
}

# Ascending creation order; _id breaks ties between events created in the same millisecond
CREATED_ORDER = (("created_at", ASCENDING), ("_id", ASCENDING))


def pick_fields(data: Mapping[str, Any], allowed: frozenset[str]) -> dict[str, Any]:
    """Keep only known attributes; anything else is dropped."""
    dropped = [key for key in data if key not in allowed]
    if dropped:
        logger.debug(f"Dropping unknown event fields: {dropped}")
    return {key: value for key, value in data.items() if key in allowed}


def apply_defaults(fields: dict[str, Any]) -> dict[str, Any]:
    for key, default in EVENT_DEFAULTS.items():
        if fields.get(key) is None:
            fields[key] = default
    return fields


class EventStore:
    """Event persistence. Lookups return None when nothing matches."""

    async def list_by_admin(self, admin_id: str) -> dict[str, Event]:
        """All events owned by an admin, keyed by event_id."""
        events = await Event.find(Event.admin_id == admin_id).to_list()
        return {event.event_id: event for event in events}

    async def list_public(self, admin_id: str) -> list[EventPublicResponse]:
        """Events of an admin that are not closed, oldest first, with public fields only."""
        events = (
            await Event.find(
                Event.admin_id == admin_id,
                Event.status != EventStatus.CLOSED,
            )
            .sort(*CREATED_ORDER)
            .to_list()
        )
        return [
            EventPublicResponse(**event.model_dump(include=set(EVENT_PUBLIC_FIELDS)))
            for event in events
        ]

    async def most_recent_active(self, admin_id: str) -> Event | None:
        """The oldest LIVE event of an admin, else its oldest PRESHOW event."""
        events = (
            await Event.find(
                Event.admin_id == admin_id,
                In(Event.status, EventStatus.active_states()),
            )
            .sort(*CREATED_ORDER)
            .to_list()
        )
        for status in EventStatus.active_states():
            match = next((event for event in events if event.status == status), None)
            if match:
                return match
        return None

    async def get_by_id(self, event_id: str) -> Event | None:
        return await Event.find_one(Event.event_id == event_id)

    async def get_by_session_id(self, session_id: str) -> Event | None:
        return await Event.find_one(Event.session_id == session_id)

    async def get_by_key(self, admin_id: str, slug: str, field: str = "fan_url") -> Event | None:
        """Resolve an event by one of its per-admin slugs."""
        if field not in SLUG_FIELDS:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg=f"Not a slug field: {field}",
                status_code=HttpStatusCode.BAD_REQUEST,
            )
        return await Event.find_one({"admin_id": admin_id, field: slug})

    async def _ensure_unique_slugs(
        self,
        admin_id: str,
        fields: Mapping[str, Any],
        event_id: str | None = None,
    ) -> None:
        for field in SLUG_FIELDS:
            slug = fields.get(field)
            if not slug:
                continue
            existing = await self.get_by_key(admin_id, slug, field)
            if existing and existing.event_id != event_id:
                raise AppError(
                    errcode=AppErrorCode.E_EVENT_SLUG_CONFLICT,
                    errmesg=f"{field} '{slug}' is already used by event {existing.event_id}",
                    status_code=HttpStatusCode.CONFLICT,
                )

    async def check_slugs_available(self, data: Mapping[str, Any]) -> None:
        """Raise if any slug in a creation payload is taken for its admin."""
        await self._ensure_unique_slugs(data["admin_id"], data)

    async def save(self, data: Mapping[str, Any]) -> Event:
        """Persist a new event and return the stored record."""
        fields = apply_defaults(pick_fields(data, EVENT_FIELDS))
        await self._ensure_unique_slugs(fields.get("admin_id", ""), fields)

        now = utc_now()
        fields.update(event_id=new_event_id(), created_at=now, updated_at=now)
        try:
            event = Event(**fields)
        except ValidationError as e:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg=f"Invalid event data: {e.error_count()} error(s)",
                status_code=HttpStatusCode.BAD_REQUEST,
            ) from e

        await event.insert()
        logger.info(f"Saved event {event.event_id} for admin {event.admin_id}")
        return await self.get_by_id(event.event_id)  # type: ignore[return-value]

    async def update(
        self,
        event_id: str,
        data: Mapping[str, Any],
        managed: Mapping[str, Any] | None = None,
    ) -> Event | None:
        """Merge whitelisted fields into an event and return the refreshed record.

        `data` may only touch caller-updatable fields. Milestone timestamps and
        the archive id are written through `managed`.
        """
        event = await self.get_by_id(event_id)
        if not event:
            return None

        updates = pick_fields(data, EVENT_UPDATABLE_FIELDS)
        await self._ensure_unique_slugs(event.admin_id, updates, event_id=event_id)
        updates.update(pick_fields(managed or {}, EVENT_SERVICE_FIELDS))
        updates["updated_at"] = utc_now()

        try:
            validated = Event.model_validate({**event.model_dump(), **updates})
        except ValidationError as e:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg=f"Invalid event data: {e.error_count()} error(s)",
                status_code=HttpStatusCode.BAD_REQUEST,
            ) from e

        await event.set({field: getattr(validated, field) for field in updates})
        logger.debug(f"Updated event {event_id}: {sorted(updates)}")
        return await self.get_by_id(event_id)

    async def remove(self, event_id: str) -> bool:
        await Event.find(Event.event_id == event_id).delete()
        logger.info(f"Removed event {event_id}")
        return True

    async def remove_all_by_admin(self, admin_id: str) -> bool:
        await Event.find(Event.admin_id == admin_id).delete()
        logger.info(f"Removed all events of admin {admin_id}")
        return True


__all__ = ["EventStore", "apply_defaults", "pick_fields"]
