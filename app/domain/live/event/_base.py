"""Base service for event operations."""

from app.domain.admin.admin_directory import AdminDirectory
from app.schemas import Admin, Event
from app.services.integrations.livekit_service import LivekitService
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ._store import EventStore
from .event_models import EventResponse


class BaseService:
    """Base service with shared event operation methods."""

    def __init__(
        self,
        store: EventStore,
        admins: AdminDirectory,
        livekit: LivekitService,
    ):
        self.store = store
        self.admins = admins
        self.livekit = livekit

    async def _get_event_or_raise(self, event_id: str) -> Event:
        event = await self.store.get_by_id(event_id)
        if not event:
            raise AppError(
                errcode=AppErrorCode.E_EVENT_NOT_FOUND,
                errmesg=f"Event not found: {event_id}",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return event

    async def _get_event_by_key_or_raise(self, admin_id: str, slug: str, field: str) -> Event:
        event = await self.store.get_by_key(admin_id, slug, field)
        if not event:
            raise AppError(
                errcode=AppErrorCode.E_EVENT_NOT_FOUND,
                errmesg=f"Event not found for admin {admin_id} with {field}={slug}",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return event

    async def _get_admin_or_raise(self, admin_id: str) -> Admin:
        admin = await self.admins.get_admin(admin_id)
        if not admin:
            raise AppError(
                errcode=AppErrorCode.E_ADMIN_NOT_FOUND,
                errmesg=f"Admin not found: {admin_id}",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return admin

    @staticmethod
    def _to_response(event: Event) -> EventResponse:
        return EventResponse(**event.model_dump(exclude={"id", "revision_id"}))
