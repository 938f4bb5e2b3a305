"""Tests for event persistence and lookups."""

import pytest

from app.domain.live.event._store import EventStore, pick_fields
from app.schemas import EVENT_UPDATABLE_FIELDS, Event, EventStatus
from app.utils.app_errors import AppError, AppErrorCode


def event_data(admin_id: str = "a1", **overrides) -> dict:
    data = {
        "admin_id": admin_id,
        "name": "Launch Show",
        "session_id": f"sess_{overrides.get('fan_url', 'x')}_{admin_id}",
        "stage_session_id": f"stage_{overrides.get('fan_url', 'x')}_{admin_id}",
    }
    data.update(overrides)
    return data


@pytest.mark.usefixtures("clear_collections")
class TestSave:
    async def test_save_allocates_id_and_applies_defaults(self, beanie_db, event_store: EventStore):
        event = await event_store.save(event_data())

        assert event.event_id.startswith("ev_")
        assert event.status == EventStatus.NOT_STARTED
        assert event.archive_event is False
        assert event.composed is False
        assert event.created_at is not None
        assert event.updated_at is not None

    async def test_save_drops_unknown_fields(self, beanie_db, event_store: EventStore):
        event = await event_store.save(event_data(unknown_key="boom", nested={"a": 1}))

        raw = await Event.get_motor_collection().find_one({"event_id": event.event_id})
        assert "unknown_key" not in raw
        assert "nested" not in raw

    async def test_save_ignores_caller_event_id(self, beanie_db, event_store: EventStore):
        event = await event_store.save(event_data(event_id="ev_chosen_by_caller"))

        assert event.event_id != "ev_chosen_by_caller"

    async def test_save_keeps_caller_status(self, beanie_db, event_store: EventStore):
        event = await event_store.save(event_data(status=EventStatus.PRESHOW))

        assert event.status == EventStatus.PRESHOW

    async def test_save_rejects_taken_slug(self, beanie_db, event_store: EventStore):
        await event_store.save(event_data(fan_url="alpha"))

        with pytest.raises(AppError) as exc_info:
            await event_store.save(event_data(fan_url="alpha", session_id="s2", stage_session_id="t2"))

        assert exc_info.value.errcode == AppErrorCode.E_EVENT_SLUG_CONFLICT.value
        assert exc_info.value.status_code == 409

    async def test_same_slug_allowed_for_other_admin(self, beanie_db, event_store: EventStore):
        await event_store.save(event_data("a1", fan_url="alpha"))
        other = await event_store.save(event_data("a2", fan_url="alpha"))

        assert other.admin_id == "a2"

    async def test_save_without_sessions_is_invalid(self, beanie_db, event_store: EventStore):
        with pytest.raises(AppError) as exc_info:
            await event_store.save({"admin_id": "a1", "name": "No sessions"})

        assert exc_info.value.errcode == AppErrorCode.E_INVALID_REQUEST.value


@pytest.mark.usefixtures("clear_collections")
class TestLookups:
    async def test_get_by_id(self, beanie_db, event_store: EventStore):
        event = await event_store.save(event_data())

        found = await event_store.get_by_id(event.event_id)

        assert found is not None
        assert found.event_id == event.event_id
        assert await event_store.get_by_id("ev_missing") is None

    async def test_get_by_session_id(self, beanie_db, event_store: EventStore):
        event = await event_store.save(event_data(session_id="sess_unique"))

        found = await event_store.get_by_session_id("sess_unique")

        assert found is not None
        assert found.event_id == event.event_id
        assert await event_store.get_by_session_id(event.stage_session_id) is None

    async def test_get_by_key_is_scoped_to_admin(self, beanie_db, event_store: EventStore):
        event = await event_store.save(event_data("a1", fan_url="alpha"))

        found = await event_store.get_by_key("a1", "alpha")

        assert found is not None
        assert found.event_id == event.event_id
        assert await event_store.get_by_key("a2", "alpha") is None

    async def test_get_by_key_with_explicit_field(self, beanie_db, event_store: EventStore):
        event = await event_store.save(event_data(fan_url="f1", host_url="h1", celebrity_url="c1"))

        assert (await event_store.get_by_key("a1", "h1", "host_url")).event_id == event.event_id
        assert (await event_store.get_by_key("a1", "c1", "celebrity_url")).event_id == event.event_id
        assert await event_store.get_by_key("a1", "h1", "fan_url") is None

    async def test_get_by_key_rejects_non_slug_field(self, beanie_db, event_store: EventStore):
        with pytest.raises(AppError):
            await event_store.get_by_key("a1", "x", "api_secret")

    async def test_list_by_admin_is_keyed_by_event_id(self, beanie_db, event_store: EventStore):
        first = await event_store.save(event_data("a1", fan_url="one"))
        second = await event_store.save(event_data("a1", fan_url="two"))
        await event_store.save(event_data("a2", fan_url="three"))

        events = await event_store.list_by_admin("a1")

        assert set(events) == {first.event_id, second.event_id}
        assert await event_store.list_by_admin("nobody") == {}


@pytest.mark.usefixtures("clear_collections")
class TestListPublic:
    async def test_excludes_closed_and_orders_by_creation(self, beanie_db, event_store: EventStore):
        first = await event_store.save(event_data(fan_url="one", status=EventStatus.LIVE))
        await event_store.save(event_data(fan_url="two", status=EventStatus.CLOSED))
        third = await event_store.save(event_data(fan_url="three"))
        fourth = await event_store.save(event_data(fan_url="four", status=EventStatus.PRESHOW))

        public = await event_store.list_public("a1")

        assert [event.event_id for event in public] == [
            first.event_id,
            third.event_id,
            fourth.event_id,
        ]

    async def test_projection_hides_private_fields(self, beanie_db, event_store: EventStore):
        await event_store.save(event_data(fan_url="one", archive_id="arch_1", rtmp_url="rtmp://x"))

        [public] = await event_store.list_public("a1")
        dumped = public.model_dump()

        assert dumped["fan_url"] == "one"
        for private in ("session_id", "stage_session_id", "archive_id", "rtmp_url", "composed"):
            assert private not in dumped


@pytest.mark.usefixtures("clear_collections")
class TestMostRecentActive:
    async def test_prefers_live_over_later_preshow(self, beanie_db, event_store: EventStore):
        live = await event_store.save(event_data(fan_url="one", status=EventStatus.LIVE))
        await event_store.save(event_data(fan_url="two", status=EventStatus.PRESHOW))

        found = await event_store.most_recent_active("a1")

        assert found.event_id == live.event_id

    async def test_prefers_live_over_earlier_preshow(self, beanie_db, event_store: EventStore):
        await event_store.save(event_data(fan_url="one", status=EventStatus.PRESHOW))
        live = await event_store.save(event_data(fan_url="two", status=EventStatus.LIVE))

        found = await event_store.most_recent_active("a1")

        assert found.event_id == live.event_id

    async def test_falls_back_to_first_preshow(self, beanie_db, event_store: EventStore):
        await event_store.save(event_data(fan_url="one", status=EventStatus.CLOSED))
        preshow = await event_store.save(event_data(fan_url="two", status=EventStatus.PRESHOW))
        await event_store.save(event_data(fan_url="three", status=EventStatus.PRESHOW))

        found = await event_store.most_recent_active("a1")

        assert found.event_id == preshow.event_id

    async def test_none_without_active_events(self, beanie_db, event_store: EventStore):
        await event_store.save(event_data(fan_url="one"))
        await event_store.save(event_data(fan_url="two", status=EventStatus.CLOSED))

        assert await event_store.most_recent_active("a1") is None

    async def test_ignores_other_admins(self, beanie_db, event_store: EventStore):
        await event_store.save(event_data("a2", fan_url="one", status=EventStatus.LIVE))

        assert await event_store.most_recent_active("a1") is None


@pytest.mark.usefixtures("clear_collections")
class TestUpdate:
    async def test_update_merges_fields(self, beanie_db, event_store: EventStore):
        event = await event_store.save(event_data(fan_url="one"))

        updated = await event_store.update(event.event_id, {"name": "Renamed", "composed": True})

        assert updated.name == "Renamed"
        assert updated.composed is True
        assert updated.fan_url == "one"
        assert updated.updated_at >= event.updated_at

    async def test_update_keeps_immutable_fields(self, beanie_db, event_store: EventStore):
        event = await event_store.save(event_data(fan_url="one"))

        updated = await event_store.update(
            event.event_id,
            {
                "event_id": "ev_other",
                "admin_id": "a9",
                "session_id": "hijacked",
                "stage_session_id": "hijacked_too",
                "name": "Renamed",
            },
        )

        assert updated.event_id == event.event_id
        assert updated.admin_id == event.admin_id
        assert updated.session_id == event.session_id
        assert updated.stage_session_id == event.stage_session_id
        assert updated.name == "Renamed"

    async def test_update_drops_unknown_fields(self, beanie_db, event_store: EventStore):
        event = await event_store.save(event_data())

        await event_store.update(event.event_id, {"is_admin": True})

        raw = await Event.get_motor_collection().find_one({"event_id": event.event_id})
        assert "is_admin" not in raw

    async def test_update_rejects_slug_of_sibling(self, beanie_db, event_store: EventStore):
        await event_store.save(event_data(fan_url="one"))
        second = await event_store.save(event_data(fan_url="two"))

        with pytest.raises(AppError) as exc_info:
            await event_store.update(second.event_id, {"fan_url": "one"})

        assert exc_info.value.status_code == 409

    async def test_update_may_keep_own_slug(self, beanie_db, event_store: EventStore):
        event = await event_store.save(event_data(fan_url="one"))

        updated = await event_store.update(event.event_id, {"fan_url": "one", "name": "Same slug"})

        assert updated.fan_url == "one"

    async def test_update_missing_event_returns_none(self, beanie_db, event_store: EventStore):
        assert await event_store.update("ev_missing", {"name": "x"}) is None

    async def test_update_rejects_invalid_status(self, beanie_db, event_store: EventStore):
        event = await event_store.save(event_data())

        with pytest.raises(AppError):
            await event_store.update(event.event_id, {"status": "rehearsal"})

    async def test_update_ignores_service_fields_in_data(self, beanie_db, event_store: EventStore):
        event = await event_store.save(event_data())

        updated = await event_store.update(
            event.event_id,
            {"archive_id": "forged", "show_started_at": "2024-11-01T08:00:00Z", "name": "Renamed"},
        )

        assert updated.name == "Renamed"
        assert updated.archive_id is None
        assert updated.show_started_at is None

    async def test_update_writes_managed_fields(self, beanie_db, event_store: EventStore):
        event = await event_store.save(event_data())

        updated = await event_store.update(
            event.event_id, {}, managed={"archive_id": "arch_1", "session_id": "hijacked"}
        )

        assert updated.archive_id == "arch_1"
        assert updated.session_id == event.session_id


@pytest.mark.usefixtures("clear_collections")
class TestRemove:
    async def test_remove_one(self, beanie_db, event_store: EventStore):
        event = await event_store.save(event_data())

        assert await event_store.remove(event.event_id) is True
        assert await event_store.get_by_id(event.event_id) is None

    async def test_remove_missing_still_succeeds(self, beanie_db, event_store: EventStore):
        assert await event_store.remove("ev_missing") is True

    async def test_remove_all_by_admin(self, beanie_db, event_store: EventStore):
        await event_store.save(event_data("a1", fan_url="one"))
        await event_store.save(event_data("a1", fan_url="two"))
        kept = await event_store.save(event_data("a2", fan_url="three"))

        assert await event_store.remove_all_by_admin("a1") is True

        assert await event_store.list_by_admin("a1") == {}
        assert await event_store.get_by_id(kept.event_id) is not None


def test_pick_fields_keeps_only_allowed():
    picked = pick_fields({"name": "x", "session_id": "s", "bogus": 1}, EVENT_UPDATABLE_FIELDS)

    assert picked == {"name": "x"}
