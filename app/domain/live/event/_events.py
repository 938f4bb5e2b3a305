"""Event creation, status and record operations."""

from collections.abc import Mapping
from typing import Any

from loguru import logger

from app.schemas import EVENT_SERVICE_FIELDS, Admin, EventStatus
from app.shared.utils import utc_now
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ._base import BaseService
from .event_lifecycle import MILESTONE_FIELDS, stamp_status_change
from .event_models import EventPublicResponse, EventResponse


class EventOperations(BaseService):
    """Event-related operations."""

    async def _create_sessions(self, admin: Admin) -> dict[str, str]:
        """Provision the backstage and on-stage sessions of an event.

        The two sessions are created one after the other. When the second
        one fails the first is left behind on the platform.
        """
        try:
            session = await self.livekit.create_session(admin.api_key, admin.api_secret)
            stage_session = await self.livekit.create_session(admin.api_key, admin.api_secret)
        except Exception as e:
            logger.warning(f"Session creation failed for admin {admin.admin_id}: {e!s}")
            raise AppError(
                errcode=AppErrorCode.E_SESSION_CREATION_FAILED,
                errmesg=f"Error creating sessions: {e!s}",
                status_code=HttpStatusCode.BAD_GATEWAY,
            ) from e

        return {
            "session_id": session.session_id,
            "stage_session_id": stage_session.session_id,
        }

    async def create(self, data: Mapping[str, Any]) -> EventResponse:
        """
        Create an event with fresh backstage and on-stage sessions.

        Caller fields override the defaults (status NOT_STARTED, empty
        rtmp_url); the generated session ids override the caller.

        Raises AppError if the admin is unknown, a slug is taken or the
        sessions cannot be provisioned.
        """
        admin_id = data.get("admin_id")
        if not admin_id:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg="admin_id is required",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        admin = await self._get_admin_or_raise(admin_id)
        await self.store.check_slugs_available(data)
        sessions = await self._create_sessions(admin)

        defaults = {"status": EventStatus.NOT_STARTED, "rtmp_url": ""}
        caller_fields = {
            key: value
            for key, value in data.items()
            if value is not None and key not in EVENT_SERVICE_FIELDS
        }
        fields = stamp_status_change({**defaults, **caller_fields}, utc_now())
        event = await self.store.save({**fields, **sessions})
        logger.info(
            f"Created event {event.event_id} for admin {admin_id} "
            f"(session={event.session_id}, stage={event.stage_session_id})"
        )
        return self._to_response(event)

    async def update(self, event_id: str, data: Mapping[str, Any]) -> EventResponse:
        """Apply a caller edit.

        A status in the payload is stamped the same way as change_status;
        caller values for milestone timestamps or the archive id are ignored.
        """
        caller_fields = {key: value for key, value in data.items() if key not in EVENT_SERVICE_FIELDS}
        stamped = stamp_status_change(caller_fields, utc_now())
        milestones = {
            field: stamped.pop(field) for field in MILESTONE_FIELDS.values() if field in stamped
        }

        event = await self.store.update(event_id, stamped, managed=milestones)
        if not event:
            raise AppError(
                errcode=AppErrorCode.E_EVENT_NOT_FOUND,
                errmesg=f"Event not found: {event_id}",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return self._to_response(event)

    async def change_status(self, event_id: str, data: Mapping[str, Any]) -> EventResponse:
        """Write a new status, stamping show_started_at / show_ended_at on LIVE / CLOSED."""
        if data.get("status") is None:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg="status is required",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        result = await self.update(event_id, {"status": data["status"]})
        logger.info(f"Event {event_id} status changed to {result.status}")
        return result

    async def get_event(self, event_id: str) -> EventResponse | None:
        event = await self.store.get_by_id(event_id)
        return self._to_response(event) if event else None

    async def get_event_by_session_id(self, session_id: str) -> EventResponse | None:
        event = await self.store.get_by_session_id(session_id)
        return self._to_response(event) if event else None

    async def get_event_by_key(
        self, admin_id: str, slug: str, field: str = "fan_url"
    ) -> EventResponse | None:
        event = await self.store.get_by_key(admin_id, slug, field)
        return self._to_response(event) if event else None

    async def list_events(self, admin_id: str) -> dict[str, EventResponse]:
        events = await self.store.list_by_admin(admin_id)
        return {event_id: self._to_response(event) for event_id, event in events.items()}

    async def list_public_events(self, admin_id: str) -> list[EventPublicResponse]:
        return await self.store.list_public(admin_id)

    async def get_most_recent_event(self, admin_id: str) -> EventResponse | None:
        event = await self.store.most_recent_active(admin_id)
        return self._to_response(event) if event else None

    async def delete_event(self, event_id: str) -> bool:
        return await self.store.remove(event_id)

    async def delete_events_by_admin(self, admin_id: str) -> bool:
        return await self.store.remove_all_by_admin(admin_id)
