"""Identity provider client.

Verifies ID tokens presented by admins and provisions the user records that
back admin accounts through the provider's REST API.
"""

import httpx
import jwt
from loguru import logger
from pydantic import BaseModel

from app.app_config import AppEnvironConfig, get_app_environ_config
from app.domain.utils.idgen import new_ulid
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


class IdentityUser(BaseModel):
    uid: str
    email: str | None = None
    display_name: str | None = None


class IdentityService:
    def __init__(
        self,
        cfg: AppEnvironConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._cfg = cfg or get_app_environ_config()
        self._demo_mode = bool(self._cfg.DEMO_MODE)
        self._transport = transport

    def verify_id_token(self, token: str | None) -> str | None:
        """Return the subject of a valid ID token, or None on any failure."""
        secret = self._cfg.IDENTITY_JWT_SECRET
        if not token or not secret:
            return None

        audience = self._cfg.IDENTITY_JWT_AUDIENCE
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=["HS256"],
                audience=audience,
                options={"require": ["sub", "exp"], "verify_aud": audience is not None},
            )
        except jwt.PyJWTError as e:
            logger.debug(f"ID token rejected: {e}")
            return None

        return payload.get("user_id") or payload.get("sub")

    def _build_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self._cfg.IDENTITY_API_KEY:
            headers["X-Api-Key"] = self._cfg.IDENTITY_API_KEY
        return headers

    def _url(self, path: str) -> str:
        base_url = self._cfg.IDENTITY_API_BASE_URL
        if not base_url:
            raise AppError(
                errcode=AppErrorCode.E_IDENTITY_PROVIDER,
                errmesg="Identity provider URL must be configured.",
                status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
            )
        return f"{base_url.rstrip('/')}{path}"

    async def create_user(self, email: str, password: str, display_name: str) -> IdentityUser:
        """Create a user record and return it with its uid."""
        if self._demo_mode:
            logger.info("IdentityService DEMO_MODE=true: returning stubbed user")
            return IdentityUser(uid=new_ulid("u_"), email=email, display_name=display_name)

        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.post(
                self._url("/users"),
                json={"email": email, "password": password, "displayName": display_name},
                headers=self._build_headers(),
                timeout=30,
            )
            response.raise_for_status()
            data = response.json()

        logger.info(f"Created identity user uid={data.get('uid')}")
        return IdentityUser(
            uid=data["uid"],
            email=data.get("email", email),
            display_name=data.get("displayName", display_name),
        )

    async def update_user(
        self,
        uid: str,
        email: str | None = None,
        display_name: str | None = None,
    ) -> None:
        """Update the email and/or display name of a user record."""
        body = {
            key: value
            for key, value in (("email", email), ("displayName", display_name))
            if value is not None
        }
        if not body:
            return
        if self._demo_mode:
            logger.info("IdentityService DEMO_MODE=true: stubbed update_user (no-op)")
            return

        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.patch(
                self._url(f"/users/{uid}"),
                json=body,
                headers=self._build_headers(),
                timeout=30,
            )
            response.raise_for_status()
        logger.info(f"Updated identity user uid={uid}: {sorted(body)}")

    async def delete_user(self, uid: str) -> None:
        if self._demo_mode:
            logger.info("IdentityService DEMO_MODE=true: stubbed delete_user (no-op)")
            return

        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.delete(
                self._url(f"/users/{uid}"),
                headers=self._build_headers(),
                timeout=30,
            )
            response.raise_for_status()
        logger.info(f"Deleted identity user uid={uid}")


__all__ = ["IdentityService", "IdentityUser"]
