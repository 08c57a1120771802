"""Pytest fixtures and test utilities for the qdrant_ops test suite."""

from typing import Any, Dict, List, Optional, Tuple

import pytest
from qdrant_client import models
from qdrant_client.http import models as http_models

from config import QdrantSettings, VocabularySettings
from connection_management import ConnectionManager
from utils import RetryExecutor


# ============================================================================
# FAKE QDRANT CLIENT
# ============================================================================


class FakeAsyncQdrantClient:
    """
    In-memory stand-in for AsyncQdrantClient.

    Records every call as (method, kwargs). Failures can be queued per method
    with `fail_next(method, *exceptions)`; each call pops one exception.
    """

    def __init__(self):
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.collections: Dict[str, Dict[str, Any]] = {}
        self.points: Dict[str, Dict[Any, models.PointStruct]] = {}
        self.query_responses: List[List[models.ScoredPoint]] = []
        self.upsert_response: Optional[Any] = None
        self.closed = False
        self._failures: Dict[str, List[Exception]] = {}

    def fail_next(self, method: str, *exceptions: Exception) -> None:
        self._failures.setdefault(method, []).extend(exceptions)

    def calls_to(self, method: str) -> List[Dict[str, Any]]:
        return [kwargs for name, kwargs in self.calls if name == method]

    def _record(self, method: str, **kwargs) -> None:
        self.calls.append((method, kwargs))
        pending = self._failures.get(method)
        if pending:
            raise pending.pop(0)

    def add_collection(self, name: str, vectors: Any, sparse_vectors: Optional[Dict[str, Any]] = None) -> None:
        self.collections[name] = {
            "status": "green",
            "points_count": 0,
            "config": {"params": {"vectors": vectors, "sparse_vectors": sparse_vectors}},
        }
        self.points.setdefault(name, {})

    async def create_collection(self, collection_name, vectors_config=None, sparse_vectors_config=None, **kwargs):
        self._record("create_collection", collection_name=collection_name,
                     vectors_config=vectors_config, sparse_vectors_config=sparse_vectors_config, **kwargs)
        if collection_name in self.collections:
            raise Exception(f"Wrong input: Collection `{collection_name}` already exists!")
        self.add_collection(collection_name, vectors_config, sparse_vectors_config)
        return True

    async def delete_collection(self, collection_name, **kwargs):
        self._record("delete_collection", collection_name=collection_name)
        self.collections.pop(collection_name, None)
        self.points.pop(collection_name, None)
        return True

    async def get_collection(self, collection_name, **kwargs):
        self._record("get_collection", collection_name=collection_name)
        if collection_name not in self.collections:
            raise Exception(f"Not found: Collection `{collection_name}` doesn't exist!")
        return self.collections[collection_name]

    async def get_collections(self, **kwargs):
        self._record("get_collections")
        return models.CollectionsResponse(
            collections=[models.CollectionDescription(name=name) for name in self.collections]
        )

    async def upsert(self, collection_name, points, wait=True, **kwargs):
        self._record("upsert", collection_name=collection_name, points=points, wait=wait)
        for point in points:
            self.points.setdefault(collection_name, {})[point.id] = point
        if self.upsert_response is not None:
            return self.upsert_response
        return models.UpdateResult(operation_id=1, status=models.UpdateStatus.COMPLETED)

    async def delete(self, collection_name, points_selector, wait=True, **kwargs):
        self._record("delete", collection_name=collection_name, points_selector=points_selector, wait=wait)
        for point_id in points_selector.points:
            self.points.get(collection_name, {}).pop(point_id, None)
        return models.UpdateResult(operation_id=2, status=models.UpdateStatus.COMPLETED)

    async def scroll(self, collection_name, scroll_filter=None, limit=10, with_payload=True,
                     with_vectors=False, **kwargs):
        self._record("scroll", collection_name=collection_name, scroll_filter=scroll_filter,
                     limit=limit, with_payload=with_payload, with_vectors=with_vectors)
        records = [
            models.Record(id=point.id, payload=point.payload)
            for point in list(self.points.get(collection_name, {}).values())[:limit]
        ]
        return records, None

    async def query_points(self, collection_name, **kwargs):
        self._record("query_points", collection_name=collection_name, **kwargs)
        points = self.query_responses.pop(0) if self.query_responses else []
        return http_models.QueryResponse(points=points)

    async def close(self):
        self.closed = True


def scored_point(point_id: str, score: float, **payload) -> models.ScoredPoint:
    """Build a search hit with a document payload."""
    base = {
        "content": f"content of {point_id}",
        "relativePath": f"src/{point_id}.py",
        "startLine": 1,
        "endLine": 10,
        "fileExtension": ".py",
    }
    base.update(payload)
    return models.ScoredPoint(id=point_id, version=0, score=score, payload=base)


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def fake_client():
    """Provide a fresh in-memory Qdrant client."""
    return FakeAsyncQdrantClient()


@pytest.fixture
def connection_manager(fake_client):
    """Connection manager whose factory returns the fake client."""
    return ConnectionManager(client_factory=lambda settings: fake_client)


@pytest.fixture
def sleeps():
    """Recorded retry delays."""
    return []


@pytest.fixture
def retry_executor(sleeps):
    """
    Retry executor with a recording, non-blocking sleep.

    Yields:
        RetryExecutor using the default 3 attempts and 1s initial delay
    """
    async def fake_sleep(delay):
        sleeps.append(delay)

    return RetryExecutor(max_attempts=3, initial_delay=1.0, event_callback=lambda event: None, sleep=fake_sleep)


@pytest.fixture
def vocabulary_settings(tmp_path):
    """Vocabulary settings pointing at a temporary directory."""
    return VocabularySettings(directory=str(tmp_path / "vocabulary"))


@pytest.fixture
def settings(vocabulary_settings):
    """Full settings with the temporary vocabulary directory."""
    return QdrantSettings(vocabulary=vocabulary_settings)
