from fastapi import APIRouter, Depends, Query

from app.api.v1.dependency import CurrentAdmin, ensure_can_manage, get_event_service
from app.api.v1.schemas.base import ApiOut
from app.api.v1.schemas.event import (
    ChangeStatusIn,
    CreateEventIn,
    EventIdIn,
    StartArchiveOut,
    UpdateEventIn,
)
from app.domain.live.event._tokens import CELEBRITY, HOST
from app.domain.live.event.event_domain import EventService
from app.domain.live.event.event_models import (
    EventPublicResponse,
    EventResponse,
    FanTokens,
    HostCelebToken,
    ProducerTokens,
)
from app.schemas import Admin
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

router = APIRouter(prefix="/event")


async def _get_owned_event(service: EventService, admin: Admin, event_id: str) -> EventResponse:
    event = await service.get_event(event_id)
    if not event:
        raise AppError(
            errcode=AppErrorCode.E_EVENT_NOT_FOUND,
            errmesg=f"Event not found: {event_id}",
            status_code=HttpStatusCode.NOT_FOUND,
        )
    ensure_can_manage(admin, event.admin_id)
    return event


# ==================== ADMIN ====================


@router.post("/create_event")
async def create_event(
    body: CreateEventIn,
    admin: CurrentAdmin,
    service: EventService = Depends(get_event_service),
) -> ApiOut[EventResponse]:
    """Create an event owned by the authenticated admin."""
    result = await service.create({**body.model_dump(), "admin_id": admin.admin_id})
    return ApiOut[EventResponse](results=result)


@router.post("/update_event")
async def update_event(
    body: UpdateEventIn,
    admin: CurrentAdmin,
    service: EventService = Depends(get_event_service),
) -> ApiOut[EventResponse]:
    await _get_owned_event(service, admin, body.event_id)
    data = body.model_dump(exclude={"event_id"})
    result = await service.update(body.event_id, data)
    return ApiOut[EventResponse](results=result)


@router.post("/change_status")
async def change_status(
    body: ChangeStatusIn,
    admin: CurrentAdmin,
    service: EventService = Depends(get_event_service),
) -> ApiOut[EventResponse]:
    await _get_owned_event(service, admin, body.event_id)
    result = await service.change_status(body.event_id, {"status": body.status})
    return ApiOut[EventResponse](results=result)


@router.post("/delete_event")
async def delete_event(
    body: EventIdIn,
    admin: CurrentAdmin,
    service: EventService = Depends(get_event_service),
) -> ApiOut[bool]:
    await _get_owned_event(service, admin, body.event_id)
    return ApiOut[bool](results=await service.delete_event(body.event_id))


@router.get("/list_events")
async def list_events(
    admin: CurrentAdmin,
    service: EventService = Depends(get_event_service),
    admin_id: str | None = Query(None, description="Owner to list, super admins only"),
) -> ApiOut[dict[str, EventResponse]]:
    owner_id = admin_id or admin.admin_id
    ensure_can_manage(admin, owner_id)
    return ApiOut[dict[str, EventResponse]](results=await service.list_events(owner_id))


@router.post("/start_archive")
async def start_archive(
    body: EventIdIn,
    admin: CurrentAdmin,
    service: EventService = Depends(get_event_service),
) -> ApiOut[StartArchiveOut]:
    await _get_owned_event(service, admin, body.event_id)
    archive_id = await service.start_archive(body.event_id)
    return ApiOut[StartArchiveOut](results=StartArchiveOut(archive_id=archive_id))


@router.post("/stop_archive")
async def stop_archive(
    body: EventIdIn,
    admin: CurrentAdmin,
    service: EventService = Depends(get_event_service),
) -> ApiOut[bool]:
    await _get_owned_event(service, admin, body.event_id)
    return ApiOut[bool](results=await service.stop_archive(body.event_id))


@router.post("/token/producer")
async def create_token_producer(
    body: EventIdIn,
    admin: CurrentAdmin,
    service: EventService = Depends(get_event_service),
) -> ApiOut[ProducerTokens]:
    await _get_owned_event(service, admin, body.event_id)
    return ApiOut[ProducerTokens](results=await service.create_token_producer(body.event_id))


# ==================== PUBLIC ====================


@router.get("/public/{admin_id}")
async def list_public_events(
    admin_id: str,
    service: EventService = Depends(get_event_service),
) -> ApiOut[list[EventPublicResponse]]:
    """Events of an admin that are not closed, for apps without a token."""
    return ApiOut[list[EventPublicResponse]](results=await service.list_public_events(admin_id))


@router.get("/token/fan/{admin_id}/{slug}")
async def create_token_fan(
    admin_id: str,
    slug: str,
    service: EventService = Depends(get_event_service),
) -> ApiOut[FanTokens]:
    return ApiOut[FanTokens](results=await service.create_token_fan(admin_id, slug))


@router.get("/token/host/{admin_id}/{slug}")
async def create_token_host(
    admin_id: str,
    slug: str,
    service: EventService = Depends(get_event_service),
) -> ApiOut[HostCelebToken]:
    return ApiOut[HostCelebToken](
        results=await service.create_token_host_celeb(admin_id, slug, HOST)
    )


@router.get("/token/celebrity/{admin_id}/{slug}")
async def create_token_celebrity(
    admin_id: str,
    slug: str,
    service: EventService = Depends(get_event_service),
) -> ApiOut[HostCelebToken]:
    return ApiOut[HostCelebToken](
        results=await service.create_token_host_celeb(admin_id, slug, CELEBRITY)
    )


@router.get("/token/current/{admin_id}")
async def create_token_current(
    admin_id: str,
    service: EventService = Depends(get_event_service),
    user_type: str = Query(HOST, pattern="^(host|celebrity)$"),
) -> ApiOut[HostCelebToken | None]:
    """Token for the admin's live (else preshow) event; null when none is running."""
    return ApiOut[HostCelebToken | None](
        results=await service.create_token_by_user_type(admin_id, user_type)
    )
