"""Tests for participant token issuance."""

from unittest.mock import AsyncMock

import orjson
import pytest

from app.domain.live.event._tokens import CELEBRITY, HOST, slug_field_for
from app.domain.live.event.event_domain import EventService
from app.schemas import Admin
from app.services.integrations.livekit_service import TokenRole
from app.utils.app_errors import AppError, AppErrorCode


def token_payloads(mock_livekit: AsyncMock) -> list[dict]:
    return [orjson.loads(call.args[4]) for call in mock_livekit.create_token.await_args_list]


@pytest.mark.usefixtures("clear_collections")
class TestProducerTokens:
    async def test_moderator_tokens_for_both_sessions(
        self,
        beanie_db,
        event_service: EventService,
        mock_livekit: AsyncMock,
        admin: Admin,
    ):
        created = await event_service.create({"admin_id": admin.admin_id})

        result = await event_service.create_token_producer(created.event_id)

        assert result.api_key == "key_123"
        assert result.event.event_id == created.event_id
        assert result.backstage_token == f"tok::{created.session_id}::moderator"
        assert result.stage_token == f"tok::{created.stage_session_id}::moderator"
        assert [call.args[3] for call in mock_livekit.create_token.await_args_list] == [
            TokenRole.MODERATOR,
            TokenRole.MODERATOR,
        ]
        assert token_payloads(mock_livekit) == [{"userType": "producer"}] * 2

    async def test_secret_is_not_returned(
        self,
        beanie_db,
        event_service: EventService,
        admin: Admin,
    ):
        created = await event_service.create({"admin_id": admin.admin_id})

        result = await event_service.create_token_producer(created.event_id)

        assert "secret_123" not in result.model_dump_json()

    async def test_missing_event_raises_not_found(
        self,
        beanie_db,
        clear_collections,
        event_service: EventService,
        mock_livekit: AsyncMock,
    ):
        with pytest.raises(AppError) as exc_info:
            await event_service.create_token_producer("ev_missing")

        assert exc_info.value.errcode == AppErrorCode.E_EVENT_NOT_FOUND.value
        mock_livekit.create_token.assert_not_awaited()

    async def test_deleted_admin_raises_not_found(
        self,
        beanie_db,
        event_service: EventService,
        mock_livekit: AsyncMock,
        admin: Admin,
        admin_directory,
    ):
        created = await event_service.create({"admin_id": admin.admin_id})
        await admin_directory.delete_admin(admin.admin_id)

        with pytest.raises(AppError) as exc_info:
            await event_service.create_token_producer(created.event_id)

        assert exc_info.value.errcode == AppErrorCode.E_ADMIN_NOT_FOUND.value
        mock_livekit.create_token.assert_not_awaited()


@pytest.mark.usefixtures("clear_collections")
class TestFanTokens:
    async def test_publisher_tokens_by_fan_slug(
        self,
        beanie_db,
        event_service: EventService,
        mock_livekit: AsyncMock,
        admin: Admin,
    ):
        created = await event_service.create({"admin_id": admin.admin_id, "fan_url": "alpha"})

        result = await event_service.create_token_fan(admin.admin_id, "alpha")

        assert result.event.event_id == created.event_id
        assert result.backstage_token == f"tok::{created.session_id}::publisher"
        assert result.stage_token == f"tok::{created.stage_session_id}::publisher"
        assert result.http_support is True
        assert result.api_key == "key_123"
        assert token_payloads(mock_livekit) == [{"userType": "fan"}] * 2

    async def test_unknown_slug_raises_before_gateway(
        self,
        beanie_db,
        event_service: EventService,
        mock_livekit: AsyncMock,
        admin: Admin,
    ):
        await event_service.create({"admin_id": admin.admin_id, "fan_url": "alpha"})

        with pytest.raises(AppError) as exc_info:
            await event_service.create_token_fan(admin.admin_id, "nope")

        assert exc_info.value.errcode == AppErrorCode.E_EVENT_NOT_FOUND.value
        assert exc_info.value.status_code == 404
        mock_livekit.create_token.assert_not_awaited()

    async def test_slug_of_other_admin_is_not_found(
        self,
        beanie_db,
        event_service: EventService,
        mock_livekit: AsyncMock,
        admin: Admin,
    ):
        await event_service.create({"admin_id": admin.admin_id, "fan_url": "alpha"})

        with pytest.raises(AppError):
            await event_service.create_token_fan("adm_other", "alpha")

        mock_livekit.create_token.assert_not_awaited()


@pytest.mark.usefixtures("clear_collections")
class TestHostCelebTokens:
    async def test_host_uses_host_slug(
        self,
        beanie_db,
        event_service: EventService,
        mock_livekit: AsyncMock,
        admin: Admin,
    ):
        created = await event_service.create(
            {"admin_id": admin.admin_id, "host_url": "h1", "celebrity_url": "c1"}
        )

        result = await event_service.create_token_host_celeb(admin.admin_id, "h1", HOST)

        assert result.event.event_id == created.event_id
        assert result.stage_token == f"tok::{created.stage_session_id}::publisher"
        assert result.http_support is True
        mock_livekit.create_token.assert_awaited_once()
        assert token_payloads(mock_livekit) == [{"userType": "host"}]

    async def test_celebrity_uses_celebrity_slug(
        self,
        beanie_db,
        event_service: EventService,
        mock_livekit: AsyncMock,
        admin: Admin,
    ):
        await event_service.create({"admin_id": admin.admin_id, "host_url": "h1", "celebrity_url": "c1"})

        result = await event_service.create_token_host_celeb(admin.admin_id, "c1", CELEBRITY)

        assert result.stage_token.endswith("::publisher")
        assert token_payloads(mock_livekit) == [{"userType": "celebrity"}]

        with pytest.raises(AppError):
            await event_service.create_token_host_celeb(admin.admin_id, "h1", CELEBRITY)

    def test_slug_field_for(self):
        assert slug_field_for("host") == "host_url"
        assert slug_field_for("celebrity") == "celebrity_url"
        assert slug_field_for("anything-else") == "celebrity_url"


@pytest.mark.usefixtures("clear_collections")
class TestTokenByUserType:
    async def test_uses_live_event(
        self,
        beanie_db,
        event_service: EventService,
        admin: Admin,
    ):
        live = await event_service.create({"admin_id": admin.admin_id, "host_url": "h1"})
        preshow = await event_service.create({"admin_id": admin.admin_id, "host_url": "h2"})
        await event_service.change_status(live.event_id, {"status": "live"})
        await event_service.change_status(preshow.event_id, {"status": "preshow"})

        result = await event_service.create_token_by_user_type(admin.admin_id, HOST)

        assert result.event.event_id == live.event_id

    async def test_falls_back_to_preshow(
        self,
        beanie_db,
        event_service: EventService,
        admin: Admin,
    ):
        preshow = await event_service.create({"admin_id": admin.admin_id, "celebrity_url": "c1"})
        await event_service.change_status(preshow.event_id, {"status": "preshow"})

        result = await event_service.create_token_by_user_type(admin.admin_id, CELEBRITY)

        assert result.event.event_id == preshow.event_id

    async def test_none_without_active_event(
        self,
        beanie_db,
        event_service: EventService,
        mock_livekit: AsyncMock,
        admin: Admin,
    ):
        await event_service.create({"admin_id": admin.admin_id, "host_url": "h1"})

        assert await event_service.create_token_by_user_type(admin.admin_id, HOST) is None
        mock_livekit.create_token.assert_not_awaited()

    async def test_active_event_without_slug_raises(
        self,
        beanie_db,
        event_service: EventService,
        mock_livekit: AsyncMock,
        admin: Admin,
    ):
        live = await event_service.create({"admin_id": admin.admin_id, "host_url": "h1"})
        await event_service.change_status(live.event_id, {"status": "live"})

        with pytest.raises(AppError) as exc_info:
            await event_service.create_token_by_user_type(admin.admin_id, CELEBRITY)

        assert exc_info.value.status_code == 404
        mock_livekit.create_token.assert_not_awaited()
