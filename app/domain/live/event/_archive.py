"""Event archive (recording) operations."""

from loguru import logger

from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ._base import BaseService


class ArchiveOperations(BaseService):
    """Start and stop recordings of the on-stage session."""

    async def start_archive(self, event_id: str) -> str:
        """Start recording the on-stage session and remember the archive id on the event.

        Returns:
            The archive id
        """
        event = await self._get_event_or_raise(event_id)
        admin = await self._get_admin_or_raise(event.admin_id)

        archive_id = await self.livekit.start_archive(
            admin.api_key,
            admin.api_secret,
            event.stage_session_id,
            event.name,
            event.composed,
        )
        await self.store.update(event_id, {}, managed={"archive_id": archive_id})
        logger.info(f"Started archive {archive_id} for event {event_id}")
        return archive_id

    async def stop_archive(self, event_id: str) -> bool:
        """Stop the archive referenced by the event.

        archive_id is left on the event; stopping is a platform-side action.
        """
        event = await self._get_event_or_raise(event_id)
        admin = await self._get_admin_or_raise(event.admin_id)

        if not event.archive_id:
            raise AppError(
                errcode=AppErrorCode.E_ARCHIVE_NOT_STARTED,
                errmesg=f"No archive started for event {event_id}",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        await self.livekit.stop_archive(admin.api_key, admin.api_secret, event.archive_id)
        logger.info(f"Stop requested for archive {event.archive_id} of event {event_id}")
        return True
