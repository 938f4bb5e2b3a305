"""Event domain service - lifecycle, sessions and tokens of broadcast events."""

from collections.abc import Mapping
from typing import Any

from app.domain.admin.admin_directory import AdminDirectory
from app.services.integrations.livekit_service import LivekitService

from ._archive import ArchiveOperations
from ._events import EventOperations
from ._store import EventStore
from ._tokens import TokenOperations
from .event_models import (
    EventPublicResponse,
    EventResponse,
    FanTokens,
    HostCelebToken,
    ProducerTokens,
)


class EventService:
    """Orchestrates the event store, the admin directory and the video platform."""

    def __init__(
        self,
        store: EventStore,
        admins: AdminDirectory,
        livekit: LivekitService,
    ):
        self._events = EventOperations(store, admins, livekit)
        self._archive = ArchiveOperations(store, admins, livekit)
        self._tokens = TokenOperations(store, admins, livekit)

    # ==================== EVENTS ====================

    async def create(self, data: Mapping[str, Any]) -> EventResponse:
        """Create an event with its backstage and on-stage sessions.

        Raises AppError if the admin is not found, a slug is already used by
        another event of the admin, or session provisioning fails
        (E_SESSION_CREATION_FAILED, chained to the platform error).
        """
        return await self._events.create(data)

    async def update(self, event_id: str, data: Mapping[str, Any]) -> EventResponse:
        """Merge whitelisted fields into an event.

        Raises AppError if the event is not found.
        """
        return await self._events.update(event_id, data)

    async def change_status(self, event_id: str, data: Mapping[str, Any]) -> EventResponse:
        """Change the status of an event.

        Any status is accepted from any status. LIVE stamps show_started_at,
        CLOSED stamps show_ended_at, in the same write.
        """
        return await self._events.change_status(event_id, data)

    async def get_event(self, event_id: str) -> EventResponse | None:
        return await self._events.get_event(event_id)

    async def get_event_by_session_id(self, session_id: str) -> EventResponse | None:
        return await self._events.get_event_by_session_id(session_id)

    async def get_event_by_key(
        self,
        admin_id: str,
        slug: str,
        field: str = "fan_url",
    ) -> EventResponse | None:
        return await self._events.get_event_by_key(admin_id, slug, field)

    async def list_events(self, admin_id: str) -> dict[str, EventResponse]:
        return await self._events.list_events(admin_id)

    async def list_public_events(self, admin_id: str) -> list[EventPublicResponse]:
        """Events that are not closed, oldest first, restricted to public fields."""
        return await self._events.list_public_events(admin_id)

    async def get_most_recent_event(self, admin_id: str) -> EventResponse | None:
        """The admin's LIVE event, else its PRESHOW event, else None."""
        return await self._events.get_most_recent_event(admin_id)

    async def delete_event(self, event_id: str) -> bool:
        return await self._events.delete_event(event_id)

    async def delete_events_by_admin(self, admin_id: str) -> bool:
        return await self._events.delete_events_by_admin(admin_id)

    # ==================== ARCHIVE ====================

    async def start_archive(self, event_id: str) -> str:
        """Start recording the on-stage session. Returns the archive id."""
        return await self._archive.start_archive(event_id)

    async def stop_archive(self, event_id: str) -> bool:
        """Stop the event's archive. The archive id stays on the event."""
        return await self._archive.stop_archive(event_id)

    # ==================== TOKENS ====================

    async def create_token_producer(self, event_id: str) -> ProducerTokens:
        return await self._tokens.create_token_producer(event_id)

    async def create_token_fan(self, admin_id: str, slug: str) -> FanTokens:
        return await self._tokens.create_token_fan(admin_id, slug)

    async def create_token_host_celeb(
        self,
        admin_id: str,
        slug: str,
        user_type: str,
    ) -> HostCelebToken:
        return await self._tokens.create_token_host_celeb(admin_id, slug, user_type)

    async def create_token_by_user_type(
        self,
        admin_id: str,
        user_type: str,
    ) -> HostCelebToken | None:
        return await self._tokens.create_token_by_user_type(admin_id, user_type)
