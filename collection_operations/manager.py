"""
Collection Manager for Qdrant.

This module provides the CollectionManager class, which is responsible for
creating, probing, describing and dropping Qdrant collections.
"""

import asyncio
import logging
from typing import Dict, List, Optional

from connection_management import ConnectionManager
from config import IndexSettings
from qdrant_ops_exceptions import CollectionNotFoundError, SchemaError
from utils import RetryExecutor, is_terminal_error
from vocabulary import VocabularyRegistry

from .schema import (
    CollectionDescriptor,
    CollectionKind,
    CollectionOptions,
    build_create_collection_request,
    descriptor_from_info,
)

logger = logging.getLogger(__name__)


class CollectionManager:
    """
    Provides a high-level, asynchronous interface for managing Qdrant collections.

    Index defaults (HNSW, quantization, sparse index) are resolved from
    `IndexSettings` when the manager is constructed, not at call time.
    Create and drop calls go through the RetryExecutor; an "already exists"
    or "not found" response is terminal and raised on the first attempt.
    """

    def __init__(
        self,
        connection_manager: ConnectionManager,
        retry_executor: Optional[RetryExecutor] = None,
        vocabulary_registry: Optional[VocabularyRegistry] = None,
        index_settings: Optional[IndexSettings] = None
    ):
        """
        Initialize the CollectionManager.

        Args:
            connection_manager: Provides the shared Qdrant client
            retry_executor: Wraps remote calls with bounded retry
            vocabulary_registry: Vocabulary owner; handles are evicted on drop
            index_settings: Source of the default collection options
        """
        self._connection_manager = connection_manager
        self._retry = retry_executor or RetryExecutor()
        self._vocabulary_registry = vocabulary_registry
        self.default_options = CollectionOptions.from_settings(index_settings)
        self._locks: Dict[str, asyncio.Lock] = {}

    def _get_collection_lock(self, collection_name: str) -> asyncio.Lock:
        """
        Get a lock for a specific collection.

        Serializes create/drop of the same collection within this process.
        """
        lock = self._locks.get(collection_name)
        if lock is None:
            lock = self._locks[collection_name] = asyncio.Lock()
        return lock

    async def _create(
        self,
        collection_name: str,
        dimension: int,
        kind: CollectionKind,
        options: Optional[CollectionOptions]
    ) -> None:
        if not collection_name:
            raise SchemaError("Collection name must be a non-empty string")
        if not isinstance(dimension, int) or isinstance(dimension, bool) or dimension <= 0:
            raise SchemaError(f"Dimension must be a positive integer, got {dimension!r}")

        options = options or self.default_options
        request = build_create_collection_request(dimension, options, kind)
        client = await self._connection_manager.get_client()

        label = "hybrid collection" if kind == CollectionKind.HYBRID else "collection"
        async with self._get_collection_lock(collection_name):
            try:
                await self._retry.execute(
                    lambda: client.create_collection(collection_name=collection_name, **request),
                    f"Create {label} '{collection_name}'"
                )
            except Exception as e:
                logger.error(f"[create_collection] Failed to create {label} '{collection_name}': {e}")
                raise

        quantization = options.quantization.mode.value if options.quantization else "no"
        logger.info(
            f"Successfully created {label} '{collection_name}' "
            f"({dimension}D, HNSW m={options.hnsw.m}, {quantization} quantization)"
        )

    async def create_collection(
        self,
        collection_name: str,
        dimension: int,
        options: Optional[CollectionOptions] = None
    ) -> None:
        """
        Create a dense collection with a single unnamed vector space.

        Args:
            collection_name: The name for the new collection.
            dimension: Dense vector length.
            options: Index options; the manager's defaults when None.

        Raises:
            SchemaError: If the name or dimension is invalid (no remote call is made).
            Exception: The client's error, unchanged, once retries are exhausted
                       or immediately if the collection already exists.
        """
        await self._create(collection_name, dimension, CollectionKind.DENSE, options)

    async def create_hybrid_collection(
        self,
        collection_name: str,
        dimension: int,
        options: Optional[CollectionOptions] = None
    ) -> None:
        """
        Create a hybrid collection with a named "dense" space and a "sparse"
        lexical space (IDF modifier).

        Args:
            collection_name: The name for the new collection.
            dimension: Dense vector length.
            options: Index options; the manager's defaults when None.
        """
        await self._create(collection_name, dimension, CollectionKind.HYBRID, options)

    async def drop_collection(self, collection_name: str) -> None:
        """
        Drop a collection and evict its in-memory vocabulary handle.

        The on-disk vocabulary snapshot is kept.
        """
        client = await self._connection_manager.get_client()
        async with self._get_collection_lock(collection_name):
            try:
                await self._retry.execute(
                    lambda: client.delete_collection(collection_name=collection_name),
                    f"Drop collection '{collection_name}'"
                )
            except Exception as e:
                logger.error(f"[drop_collection] Failed to drop collection '{collection_name}': {e}")
                raise
            if self._vocabulary_registry is not None:
                self._vocabulary_registry.evict(collection_name)
            self._locks.pop(collection_name, None)
        logger.info(f"Successfully dropped collection '{collection_name}'")

    async def has_collection(self, collection_name: str) -> bool:
        """
        Check if a collection exists.

        The probe fetches the collection description; any failure, including a
        failure to obtain the client, yields False. This method never raises.
        """
        try:
            client = await self._connection_manager.get_client()
            await client.get_collection(collection_name=collection_name)
            return True
        except Exception as e:
            logger.debug(f"[has_collection] Collection '{collection_name}' not available: {e}")
            return False

    async def list_collections(self) -> List[str]:
        """Retrieve the names of all collections on the server."""
        client = await self._connection_manager.get_client()
        try:
            response = await client.get_collections()
        except Exception as e:
            logger.error(f"[list_collections] Error listing collections: {e}")
            raise
        return [collection.name for collection in response.collections]

    async def get_collection_info(self, collection_name: str):
        """
        Fetch the raw collection info from the server.

        Raises:
            CollectionNotFoundError: If the collection does not exist
        """
        client = await self._connection_manager.get_client()
        try:
            return await client.get_collection(collection_name=collection_name)
        except Exception as e:
            if is_terminal_error(e) or "doesn't exist" in str(e).lower():
                raise CollectionNotFoundError(f"Collection '{collection_name}' does not exist") from e
            logger.error(f"[describe_collection] Error describing collection '{collection_name}': {e}")
            raise

    async def describe_collection(self, collection_name: str) -> CollectionDescriptor:
        """
        Describe a collection as reported by the server.

        Returns:
            A CollectionDescriptor with dimension, layout and index settings.

        Raises:
            CollectionNotFoundError: If the collection does not exist
        """
        info = await self.get_collection_info(collection_name)
        return descriptor_from_info(collection_name, info)

    async def check_collection_limit(self) -> bool:
        """
        Check whether another collection can be created.

        Qdrant has no fixed per-deployment collection cap, so this is always True.
        """
        return True
