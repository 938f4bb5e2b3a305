"""Participant token issuance."""

from loguru import logger

from app.schemas import Admin, Event
from app.services.integrations.livekit_service import TokenRole, build_token_data
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ._base import BaseService
from .event_models import FanTokens, HostCelebToken, ProducerTokens

PRODUCER = "producer"
FAN = "fan"
HOST = "host"
CELEBRITY = "celebrity"


def slug_field_for(user_type: str) -> str:
    """Slug field hosts and celebrities join through."""
    return "host_url" if user_type == HOST else "celebrity_url"


class TokenOperations(BaseService):
    """Issue role-scoped tokens for the sessions of an event."""

    async def _session_pair_tokens(
        self,
        admin: Admin,
        event: Event,
        role: TokenRole,
        user_type: str,
    ) -> tuple[str, str]:
        data = build_token_data(user_type)
        backstage_token = await self.livekit.create_token(
            admin.api_key, admin.api_secret, event.session_id, role, data
        )
        stage_token = await self.livekit.create_token(
            admin.api_key, admin.api_secret, event.stage_session_id, role, data
        )
        return backstage_token, stage_token

    async def create_token_producer(self, event_id: str) -> ProducerTokens:
        """Moderator tokens for both sessions of an event."""
        event = await self._get_event_or_raise(event_id)
        admin = await self._get_admin_or_raise(event.admin_id)

        backstage_token, stage_token = await self._session_pair_tokens(
            admin, event, TokenRole.MODERATOR, PRODUCER
        )
        logger.info(f"Issued producer tokens for event {event_id}")
        return ProducerTokens(
            api_key=admin.api_key,
            event=self._to_response(event),
            backstage_token=backstage_token,
            stage_token=stage_token,
        )

    async def create_token_fan(self, admin_id: str, slug: str) -> FanTokens:
        """Publisher tokens for both sessions of the event behind a fan slug."""
        event = await self._get_event_by_key_or_raise(admin_id, slug, "fan_url")
        admin = await self._get_admin_or_raise(event.admin_id)

        backstage_token, stage_token = await self._session_pair_tokens(
            admin, event, TokenRole.PUBLISHER, FAN
        )
        logger.info(f"Issued fan tokens for event {event.event_id}")
        return FanTokens(
            api_key=admin.api_key,
            event=self._to_response(event),
            backstage_token=backstage_token,
            stage_token=stage_token,
            http_support=admin.http_support,
        )

    async def create_token_host_celeb(
        self,
        admin_id: str,
        slug: str,
        user_type: str,
    ) -> HostCelebToken:
        """On-stage publisher token for a host (host_url) or anyone else (celebrity_url)."""
        field = slug_field_for(user_type)
        event = await self._get_event_by_key_or_raise(admin_id, slug, field)
        admin = await self._get_admin_or_raise(event.admin_id)

        stage_token = await self.livekit.create_token(
            admin.api_key,
            admin.api_secret,
            event.stage_session_id,
            TokenRole.PUBLISHER,
            build_token_data(user_type),
        )
        logger.info(f"Issued {user_type} token for event {event.event_id}")
        return HostCelebToken(
            api_key=admin.api_key,
            event=self._to_response(event),
            stage_token=stage_token,
            http_support=admin.http_support,
        )

    async def create_token_by_user_type(
        self,
        admin_id: str,
        user_type: str,
    ) -> HostCelebToken | None:
        """Token for the admin's current LIVE (else PRESHOW) event, None when there is none."""
        event = await self.store.most_recent_active(admin_id)
        if not event:
            logger.info(f"No active event for admin {admin_id}")
            return None

        field = slug_field_for(user_type)
        slug = getattr(event, field)
        if not slug:
            raise AppError(
                errcode=AppErrorCode.E_EVENT_NOT_FOUND,
                errmesg=f"Event {event.event_id} has no {field}",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return await self.create_token_host_celeb(admin_id, slug, user_type)
