from pydantic import BaseModel

from app.shared.config import config


class AppEnvironConfig(BaseModel):
    # Public demo switch: when enabled, external integrations should use stubs and avoid network calls.
    DEMO_MODE: bool = config.get("DEMO_MODE", "false").strip().lower() == "true"

    LOG_LEVEL: str = config.get("LOG_LEVEL", "INFO").strip().upper()
    DEBUG: bool = config.get("DEBUG", "false").strip().lower() == "true"

    # HTTP server
    API_HOST: str = config.get("API_HOST", "0.0.0.0").strip()
    API_PORT: int = int((config.get("API_PORT") or "").strip() or 8000)
    API_WORKERS: int = int((config.get("API_WORKERS") or "").strip() or 1)
    API_CORS_ORIGINS: list[str] = [
        origin.strip() for origin in config.get("API_CORS_ORIGINS", "*").split(",") if origin.strip()
    ]

    # MongoDB
    MONGO_LABEL: str = config.get("MONGO_LABEL", "backstage").strip()
    MONGO_DATABASE: str | None = (config.get("MONGO_DATABASE") or "").strip() or None

    # LiveKit configuration (credentials are per admin, the server is shared)
    LIVEKIT_URL: str | None = (config.get("LIVEKIT_URL") or "").strip() or None
    LIVEKIT_ROOM_EMPTY_TIMEOUT: int = int(
        (config.get("LIVEKIT_ROOM_EMPTY_TIMEOUT") or "").strip() or 300
    )
    LIVEKIT_MAX_PARTICIPANTS: int = int((config.get("LIVEKIT_MAX_PARTICIPANTS") or "").strip() or 0)

    # Archive (egress) output, relative to the egress storage configured on the LiveKit server
    ARCHIVE_FILEPATH_PREFIX: str = config.get("ARCHIVE_FILEPATH_PREFIX", "archives").strip()

    # Identity provider
    IDENTITY_API_BASE_URL: str | None = (config.get("IDENTITY_API_BASE_URL") or "").strip() or None
    IDENTITY_API_KEY: str | None = (config.get("IDENTITY_API_KEY") or "").strip() or None
    IDENTITY_JWT_SECRET: str | None = (config.get("IDENTITY_JWT_SECRET") or "").strip() or None
    IDENTITY_JWT_AUDIENCE: str | None = (config.get("IDENTITY_JWT_AUDIENCE") or "").strip() or None


_app_environ_config = AppEnvironConfig()


def get_app_environ_config() -> AppEnvironConfig:
    return _app_environ_config
