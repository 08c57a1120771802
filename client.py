"""
Qdrant Client

This module provides the main client interface for Qdrant operations,
integrating all the functionality from the submodules.
"""

from typing import Any, Dict, List, Optional, Sequence, Union
import logging
from pathlib import Path

from config import QdrantSettings, load_settings
from connection_management import ConnectionManager
from connection_management.connection_manager import ClientFactory
from collection_operations import CollectionManager, CollectionDescriptor, CollectionOptions
from data_management_operations import DataManager, Document, BatchOperationResult, SearchResult
from search_operations import (
    HybridSearchEngine,
    HybridSearchOptions,
    HybridSearchRequest,
    SearchOptions,
)
from qdrant_ops_exceptions import ConfigurationError
from utils import EventCallback, LoggingEventSink, RetryExecutor
from vocabulary import VocabularyRegistry

# Logger setup
logger = logging.getLogger(__name__)


class QdrantOpsClient:
    """
    Main client interface for Qdrant operations.

    This class wires settings into the connection, retry, vocabulary,
    collection, data and search components and exposes their operations.
    The Qdrant connection itself is opened lazily on the first remote call.

    Example:
        >>> async with QdrantOpsClient("config.yaml") as client:
        ...     await client.create_hybrid_collection("hybrid_code_chunks_1a2b3c4d", 768)
        ...     await client.insert_hybrid("hybrid_code_chunks_1a2b3c4d", documents)
        ...     results = await client.hybrid_search("hybrid_code_chunks_1a2b3c4d", requests)
    """

    def __init__(
        self,
        config: Optional[Union[QdrantSettings, str, Path]] = None,
        client_factory: Optional[ClientFactory] = None,
        event_callback: Optional[EventCallback] = None
    ):
        """
        Initialize the Qdrant client.

        Args:
            config: Either a QdrantSettings object or a path to a config YAML file.
                   If None, default configuration will be used.
            client_factory: Builds the underlying async client; AsyncQdrantClient by default
            event_callback: Receives retry events; logged by default
        """
        # Load configuration
        if config is None:
            self.config = load_settings()
        elif isinstance(config, (str, Path)):
            self.config = load_settings(str(config))
        elif isinstance(config, QdrantSettings):
            self.config = config
        else:
            raise ConfigurationError("Invalid configuration type. Expected QdrantSettings, str, Path, or None.")

        if event_callback is None and self.config.monitoring.emit_events:
            event_callback = LoggingEventSink(self.config.monitoring.event_log_level)

        self.connection = ConnectionManager(self.config.connection, client_factory=client_factory)
        self.retry = RetryExecutor(
            max_attempts=self.config.connection.retry_count,
            initial_delay=self.config.connection.retry_initial_delay,
            event_callback=event_callback if event_callback is not None else (lambda event: None),
        )
        self.vocabulary = VocabularyRegistry(self.config.vocabulary)
        self.collections = CollectionManager(
            self.connection, self.retry, self.vocabulary, self.config.index
        )
        self.data = DataManager(self.connection, self.collections, self.vocabulary, self.retry)
        self.search_engine = HybridSearchEngine(self.connection, self.vocabulary, self.config.search)

        logger.info("QdrantOpsClient initialized successfully")

    async def __aenter__(self) -> "QdrantOpsClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # Collections

    async def create_collection(self, collection_name: str, dimension: int,
                                options: Optional[CollectionOptions] = None) -> None:
        await self.collections.create_collection(collection_name, dimension, options)

    async def create_hybrid_collection(self, collection_name: str, dimension: int,
                                       options: Optional[CollectionOptions] = None) -> None:
        await self.collections.create_hybrid_collection(collection_name, dimension, options)

    async def drop_collection(self, collection_name: str) -> None:
        await self.collections.drop_collection(collection_name)

    async def has_collection(self, collection_name: str) -> bool:
        return await self.collections.has_collection(collection_name)

    async def list_collections(self) -> List[str]:
        return await self.collections.list_collections()

    async def describe_collection(self, collection_name: str) -> CollectionDescriptor:
        return await self.collections.describe_collection(collection_name)

    async def check_collection_limit(self) -> bool:
        return await self.collections.check_collection_limit()

    # Data

    async def insert(self, collection_name: str,
                     documents: Sequence[Union[Document, Dict[str, Any]]]) -> BatchOperationResult:
        return await self.data.insert(collection_name, documents)

    async def insert_hybrid(self, collection_name: str,
                            documents: Sequence[Union[Document, Dict[str, Any]]]) -> BatchOperationResult:
        return await self.data.insert_hybrid(collection_name, documents)

    async def delete(self, collection_name: str, ids: Sequence[Union[str, int]]) -> int:
        return await self.data.delete(collection_name, ids)

    async def query(self, collection_name: str, filter_expr: Optional[Dict[str, Any]] = None,
                    output_fields: Optional[List[str]] = None, limit: int = 100) -> List[Dict[str, Any]]:
        return await self.data.query(collection_name, filter_expr, output_fields, limit)

    # Search

    async def search(self, collection_name: str, query_vector: Sequence[float],
                     options: Optional[SearchOptions] = None) -> List[SearchResult]:
        return await self.search_engine.search(collection_name, query_vector, options)

    async def hybrid_search(self, collection_name: str,
                            requests: Sequence[Union[HybridSearchRequest, Dict[str, Any]]],
                            options: Optional[HybridSearchOptions] = None) -> List[SearchResult]:
        return await self.search_engine.hybrid_search(collection_name, requests, options)

    async def close(self) -> None:
        """Close the client and release all resources"""
        await self.connection.close()
        logger.info("QdrantOpsClient connection closed")
