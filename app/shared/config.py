"""
Centralized environment configuration.

Values are read from the process environment, optionally seeded from
`env.local` / `.env` files in the project root (existing variables win).
"""

import os
from collections.abc import Iterator, Mapping
from pathlib import Path

from dotenv import dotenv_values
from loguru import logger

PROJECT_ROOT = Path(__file__).resolve().parents[2]
ENV_FILES = ("env.local", ".env")

DEFAULT_MONGO_URL = "mongodb://localhost:27017/backstage"


class Config(Mapping[str, str]):
    """Read-only view over environment variables and env files."""

    def __init__(self, root: Path = PROJECT_ROOT, env_files: tuple[str, ...] = ENV_FILES):
        self._values: dict[str, str] = {}
        for name in reversed(env_files):
            path = root / name
            if path.is_file():
                loaded = {k: v for k, v in dotenv_values(path).items() if v is not None}
                self._values.update(loaded)
                logger.debug("Loaded {} variables from {}", len(loaded), path)
        self._values.update(os.environ)

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def _get_int(self, key: str, default: int) -> int:
        raw = (self.get(key) or "").strip()
        try:
            return int(raw) if raw else default
        except ValueError:
            logger.warning("Invalid integer for {}: {!r}, using {}", key, raw, default)
            return default

    def get_mongo_url(self, label: str = "default") -> str:
        if label != "default":
            url = self.get(f"MONGO_URL_{label.upper()}")
            if url:
                return url
        return self.get("MONGO_URL_DEFAULT") or self.get("MONGO_URL") or DEFAULT_MONGO_URL

    def get_mongo_max_pool_size(self) -> int:
        return self._get_int("MONGO_MAX_POOL_SIZE", 5)

    def get_mongo_server_selection_timeout(self) -> int:
        return self._get_int("MONGO_SERVER_SELECTION_TIMEOUT_MS", 30000)

    def get_mongo_connect_timeout(self) -> int:
        return self._get_int("MONGO_CONNECT_TIMEOUT_MS", 30000)

    def get_mongo_socket_timeout(self) -> int:
        return self._get_int("MONGO_SOCKET_TIMEOUT_MS", 300000)


config = Config()


__all__ = ["Config", "config"]
