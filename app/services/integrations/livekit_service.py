"""LiveKit video platform gateway.

This module provides a thin wrapper around the `livekit-api` package. Every
call takes the API key/secret of the admin that owns the event, so one
service instance serves all admins against the shared LiveKit server.

Usage:
    service = LivekitService()

    session = await service.create_session(api_key, api_secret)
    token = await service.create_token(
        api_key,
        api_secret,
        session.session_id,
        role=TokenRole.PUBLISHER,
        data='{"userType": "fan"}',
    )
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from enum import Enum

import orjson
from livekit import api
from loguru import logger
from pydantic import BaseModel

from app.app_config import AppEnvironConfig, get_app_environ_config
from app.domain.utils.idgen import new_participant_identity, new_room_id
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


class TokenRole(str, Enum):
    """Participant roles a token can carry."""

    MODERATOR = "moderator"
    PUBLISHER = "publisher"

    def __str__(self) -> str:
        return self.value


class VideoSession(BaseModel):
    """Descriptor of a provisioned video session (a LiveKit room)."""

    session_id: str
    sid: str | None = None


def build_token_data(user_type: str) -> str:
    """Serialize the opaque token payload carried as participant metadata."""
    return orjson.dumps({"userType": user_type}).decode()


class LivekitService:
    """Service wrapper for LiveKit server SDK (livekit-api package).

    Failures from the platform propagate to the caller; nothing is retried.
    """

    def __init__(self, cfg: AppEnvironConfig | None = None) -> None:
        self._cfg = cfg or get_app_environ_config()
        self._demo_mode = bool(self._cfg.DEMO_MODE)
        logger.info("LivekitService initialized (demo_mode={})", self._demo_mode)

    @staticmethod
    def _require_credentials(api_key: str | None, api_secret: str | None) -> None:
        if not api_key or not api_secret:
            logger.error("Video platform credentials missing for admin")
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg="RTC provider credentials must be configured for the admin.",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

    @asynccontextmanager
    async def _get_api_client(self, api_key: str, api_secret: str) -> AsyncIterator[api.LiveKitAPI]:
        """Internal method to get a LiveKit API client bound to admin credentials.

        Yields:
            LiveKitAPI instance

        Raises:
            AppError: If LIVEKIT_URL is not configured
        """
        url = self._cfg.LIVEKIT_URL
        if not url:
            logger.error("LIVEKIT_URL not configured")
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg="RTC provider URL must be configured. Set it in env.local or environment variables.",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        self._require_credentials(api_key, api_secret)
        logger.debug(f"Creating LiveKit API client for URL={url}")
        async with api.LiveKitAPI(url, api_key, api_secret) as lkapi:
            yield lkapi

    async def create_session(self, api_key: str, api_secret: str) -> VideoSession:
        """Create a new video session.

        A session is a LiveKit room with a generated name; the room name is
        the session id tokens are scoped to.

        Returns:
            VideoSession with the new session id
        """
        room_name = new_room_id()
        if self._demo_mode:
            logger.info("LivekitService DEMO_MODE=true: create_session returns stub room")
            return VideoSession(session_id=room_name)

        logger.info(f"Creating LiveKit room: room_name={room_name}")
        async with self._get_api_client(api_key, api_secret) as lkapi:
            room = await lkapi.room.create_room(
                api.CreateRoomRequest(
                    name=room_name,
                    empty_timeout=self._cfg.LIVEKIT_ROOM_EMPTY_TIMEOUT,
                    max_participants=self._cfg.LIVEKIT_MAX_PARTICIPANTS,
                )
            )
        logger.debug(f"Successfully created LiveKit room: name={room.name}, sid={room.sid}")
        return VideoSession(session_id=room.name, sid=room.sid)

    async def create_token(
        self,
        api_key: str,
        api_secret: str,
        session_id: str,
        role: TokenRole,
        data: str,
    ) -> str:
        """Create a signed access token scoped to one session.

        Args:
            api_key: Admin API key
            api_secret: Admin API secret
            session_id: Session (room) the token grants access to
            role: MODERATOR can administer and record the room, PUBLISHER can publish and subscribe
            data: Opaque payload attached as participant metadata

        Returns:
            JWT token string
        """
        user_type = orjson.loads(data).get("userType", "participant") if data else "participant"
        identity = new_participant_identity(user_type)

        if self._demo_mode:
            # Demo-safe token: deterministic placeholder (NOT a real JWT).
            return f"DEMO_RTC_TOKEN::{role}::{identity}::{session_id}"

        self._require_credentials(api_key, api_secret)
        logger.info(f"Creating LiveKit access token for identity={identity}, room={session_id}, role={role}")

        is_moderator = role == TokenRole.MODERATOR
        grants = api.VideoGrants(
            room_join=True,
            room=session_id,
            room_admin=is_moderator,
            room_record=is_moderator,
            can_publish=True,
            can_subscribe=True,
            can_publish_data=True,
        )
        token = (
            api.AccessToken(api_key, api_secret)
            .with_identity(identity)
            .with_name(user_type)
            .with_grants(grants)
            .with_metadata(data)
        )
        return token.to_jwt()

    async def start_archive(
        self,
        api_key: str,
        api_secret: str,
        session_id: str,
        name: str | None,
        composed: bool,
    ) -> str:
        """Start recording a session to a file.

        Args:
            session_id: Session (room) to record
            name: Archive name, used in the output file path
            composed: True records the grid composition, False follows the active speaker

        Returns:
            Archive id (LiveKit egress id)
        """
        if self._demo_mode:
            logger.info("LivekitService DEMO_MODE=true: start_archive returns stub egress")
            return f"DEMO_EGRESS::{session_id}"

        archive_name = name or session_id
        filepath = f"{self._cfg.ARCHIVE_FILEPATH_PREFIX}/{archive_name}-{{time}}.mp4"
        request = api.RoomCompositeEgressRequest(
            room_name=session_id,
            layout="grid" if composed else "speaker",
            file_outputs=[
                api.EncodedFileOutput(
                    file_type=api.EncodedFileType.MP4,
                    filepath=filepath,
                )
            ],
        )

        logger.info(f"Starting archive for room={session_id}, filepath={filepath}, composed={composed}")
        async with self._get_api_client(api_key, api_secret) as lkapi:
            egress_info = await lkapi.egress.start_room_composite_egress(request)
        logger.debug(f"Successfully started archive: egress_id={egress_info.egress_id}")
        return egress_info.egress_id

    async def stop_archive(self, api_key: str, api_secret: str, archive_id: str) -> bool:
        """Stop an archive.

        An egress that already reached a terminal state (COMPLETE, FAILED,
        ABORTED, LIMIT_REACHED) is reported as stopped.

        Returns:
            True once the stop request has been acknowledged
        """
        if self._demo_mode:
            logger.info("LivekitService DEMO_MODE=true: stubbed stop_archive (no-op)")
            return True

        logger.info(f"Stopping archive: egress_id={archive_id}")
        async with self._get_api_client(api_key, api_secret) as lkapi:
            try:
                await lkapi.egress.stop_egress(api.StopEgressRequest(egress_id=archive_id))
                logger.debug(f"Successfully stopped archive: {archive_id}")
                return True
            except api.TwirpError as e:
                if e.code == "failed_precondition":
                    response = await lkapi.egress.list_egress(
                        api.ListEgressRequest(egress_id=archive_id)
                    )
                    terminal_statuses = (
                        api.EgressStatus.EGRESS_COMPLETE,
                        api.EgressStatus.EGRESS_FAILED,
                        api.EgressStatus.EGRESS_ABORTED,
                        api.EgressStatus.EGRESS_LIMIT_REACHED,
                    )
                    if response.items and response.items[0].status in terminal_statuses:
                        logger.info(
                            f"Archive already stopped: egress_id={archive_id}, "
                            f"status={api.EgressStatus.Name(response.items[0].status)}"
                        )
                        return True
                raise


__all__ = ["LivekitService", "TokenRole", "VideoSession", "build_token_data"]
