"""Admin domain service - account provisioning paired with identity users."""

from collections.abc import Mapping
from typing import Any

from loguru import logger
from pydantic import ValidationError

from app.domain.live.event._store import EventStore
from app.services.integrations.identity_service import IdentityService
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .admin_directory import AdminDirectory
from .admin_models import AdminResponse, AdminUpdateParams, UserCreateParams


def _field_errors(error: ValidationError) -> list[dict[str, Any]]:
    return [
        {
            "field": ".".join(str(part) for part in item["loc"]),
            "message": item["msg"],
        }
        for item in error.errors()
    ]


def _to_response(admin) -> AdminResponse:
    return AdminResponse(**admin.model_dump(exclude={"id", "api_secret"}))


class AdminService:
    """Admin account lifecycle."""

    def __init__(
        self,
        directory: AdminDirectory,
        identity: IdentityService,
        events: EventStore,
    ):
        self._directory = directory
        self._identity = identity
        self._events = events

    async def get_admin(self, admin_id: str) -> AdminResponse:
        admin = await self._directory.get_admin(admin_id)
        if not admin:
            raise AppError(
                errcode=AppErrorCode.E_ADMIN_NOT_FOUND,
                errmesg=f"Admin not found: {admin_id}",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return _to_response(admin)

    async def list_admins(self) -> list[AdminResponse]:
        admins = await self._directory.list_admins()
        return [_to_response(admin) for admin in admins.values()]

    async def create_user(self, data: Mapping[str, Any]) -> AdminResponse:
        """Create an identity user and its admin profile.

        Every invalid field is reported at once, before anything is persisted.

        Raises:
            AppError: E_VALIDATION_FAILED with the list of field errors in details
        """
        try:
            params = UserCreateParams.model_validate(dict(data))
        except ValidationError as e:
            errors = _field_errors(e)
            raise AppError(
                errcode=AppErrorCode.E_VALIDATION_FAILED,
                errmesg=f"Invalid user data: {', '.join(err['field'] for err in errors)}",
                status_code=HttpStatusCode.BAD_REQUEST,
                details=errors,
            ) from e

        user = await self._identity.create_user(
            email=params.email,
            password=params.password,
            display_name=params.display_name,
        )
        admin = await self._directory.create_admin(
            user.uid,
            params.model_dump(exclude={"password"}),
        )
        return _to_response(admin)

    async def update_admin(self, admin_id: str, params: AdminUpdateParams) -> AdminResponse:
        """Update the identity user first, then the profile.

        An identity provider failure leaves the profile untouched.
        """
        updates = params.model_dump(exclude_unset=True)
        if not await self._directory.get_admin(admin_id):
            raise AppError(
                errcode=AppErrorCode.E_ADMIN_NOT_FOUND,
                errmesg=f"Admin not found: {admin_id}",
                status_code=HttpStatusCode.NOT_FOUND,
            )

        await self._identity.update_user(
            admin_id,
            email=updates.get("email"),
            display_name=updates.get("display_name"),
        )
        admin = await self._directory.update_admin(admin_id, updates)
        return _to_response(admin)

    async def delete_user(self, admin_id: str) -> bool:
        """Remove the identity user, the admin profile and every event it owns."""
        await self._identity.delete_user(admin_id)
        await self._directory.delete_admin(admin_id)
        await self._events.remove_all_by_admin(admin_id)
        logger.info(f"Removed admin {admin_id} with its events")
        return True
