"""
MongoDB client manager that creates and tracks labelled clients.
"""

import threading
from typing import Dict

from loguru import logger
from motor.motor_asyncio import AsyncIOMotorClient

from ..config import Config, config as default_config


class MongoManager:
    """
    MongoDB client manager.

    Features:
    - Creates and tracks one MongoDB client per label
    - Resolves connection strings from configuration (MONGO_URL_<LABEL>, then defaults)
    - Configurable connection pool size and timeouts
    - Closes every client it opened on close_all()

    The owner (the application context) decides when the manager is closed;
    there is no process-global instance.
    """

    def __init__(self, config: Config | None = None):
        self._config = config or default_config
        self._clients: Dict[str, AsyncIOMotorClient] = {}
        self._lock = threading.Lock()

        self._max_pool_size = self._config.get_mongo_max_pool_size()
        self._server_selection_timeout = self._config.get_mongo_server_selection_timeout()
        self._connect_timeout = self._config.get_mongo_connect_timeout()
        self._socket_timeout = self._config.get_mongo_socket_timeout()
        logger.info(
            "Loaded MongoDB parameters: pool={} server_selection={}ms connect={}ms socket={}ms",
            self._max_pool_size,
            self._server_selection_timeout,
            self._connect_timeout,
            self._socket_timeout,
        )

    @staticmethod
    def hide_password(connection_string: str) -> str:
        """
        Hide password in MongoDB connection string for logging.

        Args:
            connection_string: Original connection string

        Returns:
            Connection string with password replaced by asterisks
        """
        if "://" not in connection_string:
            return connection_string

        protocol_part, rest = connection_string.split("://", 1)
        last_at_index = rest.rfind("@")
        if last_at_index == -1:
            return connection_string

        auth_part = rest[:last_at_index]
        host_part = rest[last_at_index + 1 :]
        if ":" not in auth_part:
            return connection_string

        username, password = auth_part.split(":", 1)
        if not username or not password:
            return connection_string
        return f"{protocol_part}://{username}:***@{host_part}"

    def _create_client(self, connection_string: str, label: str) -> AsyncIOMotorClient:
        logger.info(
            "Open MongoDB client for label '{}': {}", label, self.hide_password(connection_string)
        )
        return AsyncIOMotorClient(
            connection_string,
            serverSelectionTimeoutMS=self._server_selection_timeout,
            connectTimeoutMS=self._connect_timeout,
            socketTimeoutMS=self._socket_timeout,
            maxPoolSize=self._max_pool_size,
            tz_aware=True,
        )

    def get_client(self, label: str = "default") -> AsyncIOMotorClient:
        """
        Get (or lazily open) the MongoDB client for a label.

        Args:
            label: Client label (defaults to 'default')

        Returns:
            AsyncIOMotorClient instance
        """
        with self._lock:
            if label not in self._clients:
                connection_string = self._config.get_mongo_url(label)
                self._clients[label] = self._create_client(connection_string, label)
            return self._clients[label]

    def close_client(self, label: str) -> None:
        """Close specific client."""
        with self._lock:
            client = self._clients.pop(label, None)
        if client is not None:
            client.close()
            logger.info("Closed MongoDB client for label '{}'", label)

    def close_all(self) -> None:
        """Close all clients."""
        with self._lock:
            client_labels = list(self._clients.keys())

        for label in client_labels:
            self.close_client(label)


__all__ = ["MongoManager"]
