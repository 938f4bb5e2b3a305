from typing import Annotated

from fastapi import Depends, Request
from loguru import logger

from app.context import AppContext
from app.domain.admin.admin_domain import AdminService
from app.domain.live.event.event_domain import EventService
from app.schemas import Admin
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


def get_app_context(request: Request) -> AppContext:
    return request.app.state.context


def get_event_service(context: AppContext = Depends(get_app_context)) -> EventService:
    return context.events


def get_admin_service(context: AppContext = Depends(get_app_context)) -> AdminService:
    return context.admin_service


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("authorization") or ""
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


async def get_current_admin(
    request: Request,
    context: AppContext = Depends(get_app_context),
) -> Admin:
    # Do not log request headers here (they carry the id token).
    admin_id = context.identity.verify_id_token(_bearer_token(request))
    if not admin_id:
        raise AppError(
            errcode=AppErrorCode.E_BAD_TOKEN,
            errmesg="Invalid token",
            status_code=HttpStatusCode.UNAUTHORIZED,
        )

    admin = await context.admins.get_admin(admin_id)
    if not admin:
        raise AppError(
            errcode=AppErrorCode.E_BAD_TOKEN,
            errmesg="Unknown admin",
            status_code=HttpStatusCode.UNAUTHORIZED,
        )

    logger.debug("Authenticated admin_id: {}", admin_id)
    return admin


async def get_super_admin(admin: Admin = Depends(get_current_admin)) -> Admin:
    if not admin.super_admin:
        raise AppError(
            errcode=AppErrorCode.E_FORBIDDEN,
            errmesg="Super admin required",
            status_code=HttpStatusCode.FORBIDDEN,
        )
    return admin


def ensure_can_manage(admin: Admin, owner_id: str) -> None:
    """Admins manage their own resources; super admins manage everything."""
    if admin.super_admin or admin.admin_id == owner_id:
        return
    raise AppError(
        errcode=AppErrorCode.E_FORBIDDEN,
        errmesg="Not allowed for this admin",
        status_code=HttpStatusCode.FORBIDDEN,
    )


CurrentAdmin = Annotated[Admin, Depends(get_current_admin)]
SuperAdmin = Annotated[Admin, Depends(get_super_admin)]
