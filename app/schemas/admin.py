"""Admin ODM schema."""

from datetime import datetime
from typing import Any

from beanie import Document, Indexed
from pydantic import field_validator

from .schema_utils import parse_mongo_datetime


class Admin(Document):
    """Admin (event organizer) document model.

    admin_id is the uid of the matching identity-provider user.
    """

    admin_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    display_name: str | None = None
    email: str | None = None

    # Video platform credentials used for every event the admin owns
    api_key: str | None = None
    api_secret: str | None = None

    # Flags
    super_admin: bool = False
    http_support: bool = False
    hls: bool = False

    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        """Parse MongoDB Extended JSON datetime format."""
        return parse_mongo_datetime(v)

    class Settings:
        name = "admin"
        indexes = [
            [("admin_id", 1)],  # unique handled by Indexed
        ]


ADMIN_FIELDS: frozenset[str] = frozenset(
    {"display_name", "email", "api_key", "api_secret", "super_admin", "http_support", "hls"}
)

# Flags that default to False when omitted on creation
ADMIN_FLAG_FIELDS: tuple[str, ...] = ("hls", "http_support", "super_admin")


__all__ = ["ADMIN_FIELDS", "ADMIN_FLAG_FIELDS", "Admin"]
