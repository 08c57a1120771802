"""
Core Data Manager

Provides the primary interface for data operations in Qdrant collections:
dense and hybrid (dense + sparse) inserts, deletes by ID, and filtered
payload queries.

Typical usage from external projects:

    from data_management_operations import DataManager

    manager = DataManager(conn_mgr, coll_mgr, vocabulary_registry, retry_executor)

    result = await manager.insert_hybrid("hybrid_code_chunks_1a2b3c4d", docs)
    rows = await manager.query(
        "hybrid_code_chunks_1a2b3c4d",
        FilterBuilder.by_exact_path("src/app.py"),
        output_fields=["relativePath"],
    )
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from qdrant_client import models

from collection_operations import (
    CollectionManager,
    DENSE_VECTOR_NAME,
    SPARSE_VECTOR_NAME,
    dense_dimension,
    has_sparse_space,
)
from connection_management import ConnectionManager
from qdrant_ops_exceptions import CollectionNotFoundError
from search_operations.filters import FilterBuilder
from utils import RetryExecutor
from vocabulary import VocabularyRegistry

from data_management_operations.data_ops_exceptions import MissingSparseSpaceError
from data_management_operations.models.entities import (
    SPARSE_VECTOR_METADATA_KEY,
    BatchOperationResult,
    Document,
    OperationStatus,
    payload_row,
)
from data_management_operations.core.validator import DataValidator

logger = logging.getLogger(__name__)

# Upsert statuses after which the write is durable enough to persist the vocabulary
_ACCEPTED_STATUSES = {"acknowledged", "completed"}

DocumentInput = Union[Document, Dict[str, Any]]


class DataManager:
    """
    Provides a high-level, asynchronous interface for managing data in Qdrant collections.

    Validation failures (missing collection, missing sparse space, malformed
    vectors) are raised before any write is attempted and are never retried.
    Upserts and deletes go through the RetryExecutor.
    """

    def __init__(
        self,
        connection_manager: ConnectionManager,
        collection_manager: CollectionManager,
        vocabulary_registry: Optional[VocabularyRegistry] = None,
        retry_executor: Optional[RetryExecutor] = None
    ):
        """
        Initialize DataManager with injected dependencies.

        Args:
            connection_manager: Provides the shared Qdrant client
            collection_manager: Used for existence and layout checks
            vocabulary_registry: Owner of per-collection sparse encoders
            retry_executor: Wraps writes with bounded retry
        """
        self._connection_manager = connection_manager
        self._collection_manager = collection_manager
        self._vocabulary_registry = vocabulary_registry if vocabulary_registry is not None else VocabularyRegistry()
        self._retry = retry_executor or RetryExecutor()

    async def _require_collection(self, collection_name: str) -> Any:
        """Fetch collection info, raising CollectionNotFoundError if it is unavailable."""
        try:
            return await self._collection_manager.get_collection_info(collection_name)
        except CollectionNotFoundError:
            logger.error(f"Collection '{collection_name}' does not exist")
            raise
        except Exception as e:
            logger.error(f"Collection '{collection_name}' is not available: {e}")
            raise CollectionNotFoundError(f"Collection '{collection_name}' does not exist") from e

    async def _upsert(self, collection_name: str, points: List[models.PointStruct], label: str) -> Any:
        client = await self._connection_manager.get_client()
        try:
            return await self._retry.execute(
                lambda: client.upsert(collection_name=collection_name, points=points, wait=True),
                f"{label} {len(points)} documents into '{collection_name}'"
            )
        except Exception as e:
            logger.error(f"Failed to insert documents into '{collection_name}': {e}")
            raise

    @staticmethod
    def _status_of(response: Any) -> Optional[str]:
        status = getattr(response, "status", None)
        if status is None and isinstance(response, dict):
            status = response.get("status")
        if status is None:
            return None
        return str(getattr(status, "value", status)).lower()

    async def insert(self, collection_name: str, documents: Sequence[DocumentInput]) -> BatchOperationResult:
        """
        Insert documents with a plain dense vector.

        Args:
            collection_name: Target collection
            documents: Documents as models or dictionaries

        Returns:
            BatchOperationResult with the inserted IDs

        Raises:
            CollectionNotFoundError: If the collection does not exist
            DocumentValidationError: If any vector is malformed or has the wrong dimension
        """
        if not documents:
            return BatchOperationResult(status=OperationStatus.SUCCESS)

        info = await self._require_collection(collection_name)
        docs = DataValidator.validate_documents(documents, dense_dimension(info))

        points = [
            models.PointStruct(
                id=doc.id,
                vector=doc.vector,
                payload=doc.to_payload(exclude_metadata_keys=(SPARSE_VECTOR_METADATA_KEY,)),
            )
            for doc in docs
        ]

        response = await self._upsert(collection_name, points, "Insert")
        logger.info(f"Inserted {len(points)} documents into '{collection_name}'")
        return BatchOperationResult(
            status=OperationStatus.SUCCESS,
            successful_count=len(points),
            inserted_ids=[doc.id for doc in docs],
            operation_status=self._status_of(response),
        )

    async def insert_hybrid(self, collection_name: str, documents: Sequence[DocumentInput]) -> BatchOperationResult:
        """
        Insert documents with both a dense vector and a sparse (lexical) vector.

        Each document's content is encoded by the collection's SparseEncoder.
        After the server acknowledges the write, the vocabulary is saved.

        Raises:
            CollectionNotFoundError: If the collection does not exist
            MissingSparseSpaceError: If the collection has no "sparse" vector space
            DocumentValidationError: If any vector is malformed or has the wrong dimension
        """
        if not documents:
            return BatchOperationResult(status=OperationStatus.SUCCESS)

        info = await self._require_collection(collection_name)
        if not has_sparse_space(info):
            error_msg = (
                f"Collection '{collection_name}' does not support hybrid search: "
                f"no '{SPARSE_VECTOR_NAME}' sparse vector space"
            )
            logger.error(error_msg)
            raise MissingSparseSpaceError(error_msg)

        docs = DataValidator.validate_documents(documents, dense_dimension(info))
        encoder = self._vocabulary_registry.encoder_for(collection_name)

        points = []
        for doc in docs:
            sparse = encoder.encode(doc.content)
            points.append(models.PointStruct(
                id=doc.id,
                vector={
                    DENSE_VECTOR_NAME: doc.vector,
                    SPARSE_VECTOR_NAME: sparse.to_qdrant(),
                },
                payload=doc.to_payload(exclude_metadata_keys=(SPARSE_VECTOR_METADATA_KEY,)),
            ))

        response = await self._upsert(collection_name, points, "Hybrid insert")
        status = self._status_of(response)

        if status in _ACCEPTED_STATUSES:
            encoder.save()
        else:
            logger.warning(
                f"Hybrid insert into '{collection_name}' returned status {status!r}; "
                f"vocabulary not saved"
            )

        logger.info(
            f"Inserted {len(points)} hybrid documents into '{collection_name}' "
            f"(vocabulary size: {len(encoder.store)})"
        )
        return BatchOperationResult(
            status=OperationStatus.SUCCESS,
            successful_count=len(points),
            inserted_ids=[doc.id for doc in docs],
            operation_status=status,
        )

    async def delete(self, collection_name: str, ids: Sequence[Union[str, int]]) -> int:
        """
        Delete points by ID.

        Returns:
            Number of IDs submitted for deletion (0 for an empty list, with no remote call)
        """
        if not ids:
            return 0

        client = await self._connection_manager.get_client()
        selector = models.PointIdsList(points=list(ids))
        try:
            await self._retry.execute(
                lambda: client.delete(collection_name=collection_name, points_selector=selector, wait=True),
                f"Delete {len(ids)} points from '{collection_name}'"
            )
        except Exception as e:
            logger.error(f"Failed to delete documents from '{collection_name}': {e}")
            raise

        logger.info(f"Deleted {len(ids)} documents from '{collection_name}'")
        return len(ids)

    async def query(
        self,
        collection_name: str,
        filter_expr: Optional[Dict[str, Any]] = None,
        output_fields: Optional[List[str]] = None,
        limit: int = 100
    ) -> List[Dict[str, Any]]:
        """
        Scroll points matching a filter, without vectors.

        Args:
            collection_name: Collection to read
            filter_expr: Native filter predicate; empty or None reads unfiltered
            output_fields: Payload keys to return; all payload keys when None
            limit: Maximum number of rows

        Returns:
            Rows of `{id, **payload, metadata: <payload as JSON string>}`
        """
        client = await self._connection_manager.get_client()
        try:
            points, _ = await client.scroll(
                collection_name=collection_name,
                scroll_filter=FilterBuilder.to_qdrant_filter(filter_expr),
                limit=limit,
                with_payload=list(output_fields) if output_fields else True,
                with_vectors=False,
            )
        except Exception as e:
            logger.error(f"Failed to query collection '{collection_name}': {e}")
            raise

        return [payload_row(point.id, point.payload) for point in points]
