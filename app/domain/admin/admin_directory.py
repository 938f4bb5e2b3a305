"""Admin directory - persistence of admin profiles."""

from collections.abc import Mapping
from typing import Any

from loguru import logger

from app.schemas.admin import ADMIN_FIELDS, ADMIN_FLAG_FIELDS, Admin
from app.shared.utils import utc_now


def _build_admin_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    picked = {key: value for key, value in data.items() if key in ADMIN_FIELDS}
    for flag in ADMIN_FLAG_FIELDS:
        if picked.get(flag) is None:
            picked[flag] = False
    return picked


class AdminDirectory:
    """Lookup and CRUD of admin profiles."""

    async def get_admin(self, admin_id: str) -> Admin | None:
        return await Admin.find_one(Admin.admin_id == admin_id)

    async def list_admins(self) -> dict[str, Admin]:
        admins = await Admin.find_all().to_list()
        return {admin.admin_id: admin for admin in admins}

    async def create_admin(self, admin_id: str, data: Mapping[str, Any]) -> Admin:
        now = utc_now()
        admin = Admin(
            admin_id=admin_id,
            created_at=now,
            updated_at=now,
            **_build_admin_fields(data),
        )
        await admin.insert()
        logger.info(f"Created admin {admin_id}")
        return admin

    async def update_admin(self, admin_id: str, data: Mapping[str, Any]) -> Admin | None:
        admin = await self.get_admin(admin_id)
        if not admin:
            return None

        updates = {key: value for key, value in data.items() if key in ADMIN_FIELDS}
        updates["updated_at"] = utc_now()
        await admin.set(updates)
        logger.info(f"Updated admin {admin_id}: {sorted(updates)}")
        return await self.get_admin(admin_id)

    async def delete_admin(self, admin_id: str) -> bool:
        await Admin.find(Admin.admin_id == admin_id).delete()
        logger.info(f"Deleted admin {admin_id}")
        return True
