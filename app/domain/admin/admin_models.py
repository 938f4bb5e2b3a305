"""Admin domain models."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class AdminResponse(BaseModel):
    """Admin response model. Video platform secret is never exposed."""

    admin_id: str
    display_name: str | None = None
    email: str | None = None
    api_key: str | None = None
    super_admin: bool = False
    http_support: bool = False
    hls: bool = False
    created_at: datetime
    updated_at: datetime


class UserCreateParams(BaseModel):
    """Parameters for provisioning an admin account with its identity user."""

    display_name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)
    api_key: str | None = None
    api_secret: str | None = None
    super_admin: bool = False
    http_support: bool = False
    hls: bool = False


class AdminUpdateParams(BaseModel):
    """Parameters for updating an admin profile."""

    display_name: str | None = None
    email: EmailStr | None = None
    api_key: str | None = None
    api_secret: str | None = None
    super_admin: bool | None = None
    http_support: bool | None = None
    hls: bool | None = None
