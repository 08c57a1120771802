"""
Qdrant Connection Manager

This module provides the shared asynchronous client handle used by every
operation in the package.

The client is created lazily, exactly once. The first caller starts the
initialization task; every other caller, concurrent or later, awaits that same
task instead of starting a new one (single-flight). No pooling is done beyond
this one handle; the configured timeout is the only cap on a remote call.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

from qdrant_client import AsyncQdrantClient

from config import ConnectionSettings
from connection_management.connection_exceptions import (
    ConnectionClosedError,
    ConnectionInitializationError,
)

# Logger setup
logger = logging.getLogger(__name__)

ClientFactory = Callable[[ConnectionSettings], Any]


def default_client_factory(settings: ConnectionSettings) -> AsyncQdrantClient:
    """Build an AsyncQdrantClient from connection settings."""
    if settings.api_key:
        return AsyncQdrantClient(url=settings.url, api_key=settings.api_key, timeout=settings.timeout)
    return AsyncQdrantClient(url=settings.url, timeout=settings.timeout)


class ConnectionManager:
    """
    Owner of the single shared Qdrant client.

    Example:
        >>> manager = ConnectionManager(ConnectionSettings(url="http://localhost:6333"))
        >>> client = await manager.get_client()
        >>> collections = await client.get_collections()
        >>> await manager.close()
    """

    def __init__(
        self,
        config: Optional[ConnectionSettings] = None,
        client_factory: Optional[ClientFactory] = None
    ):
        """
        Initialize the connection manager without connecting.

        Args:
            config: Connection settings. Defaults are loaded when None.
            client_factory: Callable building the client from settings;
                            defaults to AsyncQdrantClient.
        """
        self.config = config if config is not None else ConnectionSettings()
        self._client_factory = client_factory or default_client_factory
        self._init_task: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def is_initialized(self) -> bool:
        """Whether initialization has completed successfully."""
        return (
            self._init_task is not None
            and self._init_task.done()
            and not self._init_task.cancelled()
            and self._init_task.exception() is None
        )

    async def _initialize(self) -> Any:
        logger.info(f"Connecting to vector database at: {self.config.url}")
        try:
            client = self._client_factory(self.config)
        except Exception as e:
            logger.error(f"Failed to create Qdrant client for {self.config.url}: {e}")
            raise ConnectionInitializationError(f"Failed to create Qdrant client: {e}") from e
        logger.debug(f"Qdrant client ready (timeout={self.config.timeout}s)")
        return client

    async def get_client(self) -> Any:
        """
        Return the shared client, initializing it on first use.

        Concurrent callers await the same initialization task.

        Raises:
            ConnectionClosedError: If the manager has been closed
            ConnectionInitializationError: If the client could not be created
        """
        if self._closed:
            raise ConnectionClosedError("ConnectionManager has been closed")
        if self._init_task is None:
            self._init_task = asyncio.ensure_future(self._initialize())
        return await asyncio.shield(self._init_task)

    async def close(self) -> None:
        """
        Close the shared client and release its resources.

        This method is idempotent and can be called multiple times safely.
        """
        if self._closed:
            return
        self._closed = True

        if self._init_task is None:
            logger.info("ConnectionManager closed (client was never initialized)")
            return

        if not self._init_task.done():
            await asyncio.wait([self._init_task])

        if self.is_initialized:
            client = self._init_task.result()
            close = getattr(client, "close", None)
            if close is not None:
                await close()
        logger.info("ConnectionManager closed")
