from typing import Any

from fastapi import APIRouter, Body, Depends

from app.api.v1.dependency import CurrentAdmin, SuperAdmin, ensure_can_manage, get_admin_service
from app.api.v1.schemas.base import ApiOut
from app.domain.admin.admin_domain import AdminService
from app.domain.admin.admin_models import AdminResponse, AdminUpdateParams
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

router = APIRouter(prefix="/admin")


@router.get("/me")
async def get_me(
    admin: CurrentAdmin,
    service: AdminService = Depends(get_admin_service),
) -> ApiOut[AdminResponse]:
    return ApiOut[AdminResponse](results=await service.get_admin(admin.admin_id))


@router.get("/list_admins")
async def list_admins(
    admin: SuperAdmin,
    service: AdminService = Depends(get_admin_service),
) -> ApiOut[list[AdminResponse]]:
    return ApiOut[list[AdminResponse]](results=await service.list_admins())


@router.post("/create_user")
async def create_user(
    admin: SuperAdmin,
    body: dict[str, Any] = Body(...),
    service: AdminService = Depends(get_admin_service),
) -> ApiOut[AdminResponse]:
    """Provision an identity user with its admin profile.

    The body is validated by the service so every field error is reported together.
    """
    return ApiOut[AdminResponse](results=await service.create_user(body))


@router.post("/update_admin/{admin_id}")
async def update_admin(
    admin_id: str,
    body: AdminUpdateParams,
    admin: CurrentAdmin,
    service: AdminService = Depends(get_admin_service),
) -> ApiOut[AdminResponse]:
    ensure_can_manage(admin, admin_id)
    if body.super_admin is not None and not admin.super_admin:
        raise AppError(
            errcode=AppErrorCode.E_FORBIDDEN,
            errmesg="Only super admins can change super_admin",
            status_code=HttpStatusCode.FORBIDDEN,
        )
    return ApiOut[AdminResponse](results=await service.update_admin(admin_id, body))


@router.post("/delete_user/{admin_id}")
async def delete_user(
    admin_id: str,
    admin: SuperAdmin,
    service: AdminService = Depends(get_admin_service),
) -> ApiOut[bool]:
    return ApiOut[bool](results=await service.delete_user(admin_id))
