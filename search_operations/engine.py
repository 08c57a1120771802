"""
Hybrid Search Engine

Dense and hybrid (dense + lexical) retrieval against Qdrant collections.

A hybrid search runs several candidate retrieval stages (prefetches), one per
request, then fuses them into a single ranking with Reciprocal Rank Fusion.
By default the whole search is one `query_points` call and the engine fuses
server-side. With `search.local_fusion` enabled every stage runs as its own
query and the lists are fused client-side with `reciprocal_rank_fusion`.

Each stage over-fetches `max(limit * prefetch_multiplier, min_prefetch_limit)`
candidates so that fusion has enough overlap to work with.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from qdrant_client import models

from collection_operations import DENSE_VECTOR_NAME, SPARSE_VECTOR_NAME
from config import SearchSettings
from connection_management import ConnectionManager
from data_management_operations.models.entities import Document, SearchResult
from vocabulary import VocabularyRegistry

from .filters import FilterBuilder
from .fusion import reciprocal_rank_fusion
from .parameters import HybridSearchOptions, HybridSearchRequest, SearchOptions
from .search_ops_exceptions import InvalidSearchParametersError

logger = logging.getLogger(__name__)

RequestInput = Union[HybridSearchRequest, Dict[str, Any]]


class HybridSearchEngine:
    """
    Orchestrates dense and hybrid queries.

    Query text for lexical stages is encoded with the collection's
    SparseEncoder, so previously unseen query terms are added to the
    in-memory vocabulary (they are persisted with the next hybrid insert).

    Example:
        >>> engine = HybridSearchEngine(conn_mgr, vocabulary_registry)
        >>> results = await engine.hybrid_search(
        ...     "hybrid_code_chunks_1a2b3c4d",
        ...     [
        ...         {"data": query_embedding, "anns_field": "vector", "limit": 10},
        ...         {"data": "parse config file", "anns_field": "sparse", "limit": 10},
        ...     ],
        ...     HybridSearchOptions(limit=10),
        ... )
    """

    def __init__(
        self,
        connection_manager: ConnectionManager,
        vocabulary_registry: Optional[VocabularyRegistry] = None,
        settings: Optional[SearchSettings] = None
    ):
        self._connection_manager = connection_manager
        self._vocabulary_registry = vocabulary_registry if vocabulary_registry is not None else VocabularyRegistry()
        self.settings = settings or SearchSettings()

    def is_hybrid_collection(self, collection_name: str) -> bool:
        """Whether a collection name marks a hybrid (named dense + sparse) collection."""
        return collection_name.startswith(self.settings.hybrid_collection_prefix)

    def prefetch_limit(self, limit: int) -> int:
        """Candidate pool size for one retrieval stage."""
        return max(limit * self.settings.prefetch_multiplier, self.settings.min_prefetch_limit)

    @staticmethod
    def _to_result(point: Any) -> SearchResult:
        return SearchResult(
            document=Document.from_payload(point.id, point.payload),
            score=point.score or 0.0,
        )

    async def search(
        self,
        collection_name: str,
        query_vector: Sequence[float],
        options: Optional[SearchOptions] = None
    ) -> List[SearchResult]:
        """
        Run a single dense query.

        Args:
            collection_name: Collection to search
            query_vector: Dense query embedding
            options: Limit, filter and vector space selection

        Returns:
            Results in server order, vectors omitted
        """
        options = options or SearchOptions()
        limit = options.limit or self.settings.default_limit
        using = options.vector_name
        if using is None and self.is_hybrid_collection(collection_name):
            using = DENSE_VECTOR_NAME

        client = await self._connection_manager.get_client()
        try:
            response = await client.query_points(
                collection_name=collection_name,
                query=list(query_vector),
                using=using,
                query_filter=FilterBuilder.to_qdrant_filter(options.filter_expr),
                limit=limit,
                score_threshold=options.score_threshold,
                with_payload=True,
                with_vectors=False,
            )
        except Exception as e:
            logger.error(f"Failed to search collection '{collection_name}': {e}")
            raise

        results = [self._to_result(point) for point in response.points]
        logger.debug(f"Dense search on '{collection_name}' returned {len(results)} results")
        return results

    def _build_prefetch(self, collection_name: str, request: HybridSearchRequest) -> models.Prefetch:
        limit = self.prefetch_limit(request.limit)
        params = models.SearchParams(**request.param) if request.param else None

        if request.anns_field in self.settings.dense_fields:
            if not isinstance(request.data, list):
                raise InvalidSearchParametersError(
                    f"Dense request on '{request.anns_field}' requires a vector, got text"
                )
            logger.debug(f"Added dense vector prefetch: {len(request.data)}D vector, limit {limit}")
            return models.Prefetch(query=request.data, using=DENSE_VECTOR_NAME, limit=limit, params=params)

        if not isinstance(request.data, str):
            raise InvalidSearchParametersError(
                f"Lexical request on '{request.anns_field}' requires query text, got a vector"
            )
        sparse = self._vocabulary_registry.encoder_for(collection_name).encode(request.data)
        logger.debug(f"Added sparse vector prefetch: {len(sparse.indices)} dimensions, limit {limit}")
        return models.Prefetch(query=sparse.to_qdrant(), using=SPARSE_VECTOR_NAME, limit=limit, params=params)

    async def hybrid_search(
        self,
        collection_name: str,
        requests: Sequence[RequestInput],
        options: Optional[HybridSearchOptions] = None
    ) -> List[SearchResult]:
        """
        Run a fused multi-stage search.

        Args:
            collection_name: Hybrid collection to search
            requests: One request per retrieval stage
            options: Fused result limit and filter

        Returns:
            Fused results, best first. An empty request list returns [] without
            contacting the server.

        Raises:
            InvalidSearchParametersError: If a request's data does not match its field
        """
        if not requests:
            logger.warning("No search requests provided")
            return []

        options = options or HybridSearchOptions()
        limit = options.limit or self.settings.default_limit
        query_filter = FilterBuilder.to_qdrant_filter(options.filter_expr)

        parsed = [
            r if isinstance(r, HybridSearchRequest) else HybridSearchRequest.model_validate(r)
            for r in requests
        ]
        prefetches = [self._build_prefetch(collection_name, r) for r in parsed]

        client = await self._connection_manager.get_client()
        try:
            if self.settings.local_fusion:
                results = await self._fuse_locally(client, collection_name, prefetches, query_filter, limit)
            else:
                response = await client.query_points(
                    collection_name=collection_name,
                    prefetch=prefetches,
                    query=models.FusionQuery(fusion=models.Fusion.RRF),
                    query_filter=query_filter,
                    limit=limit,
                    with_payload=True,
                    with_vectors=False,
                )
                results = [self._to_result(point) for point in response.points]
        except Exception as e:
            logger.error(f"Failed to perform hybrid search on collection '{collection_name}': {e}")
            raise

        logger.debug(
            f"Hybrid search on '{collection_name}' completed - "
            f"stages: {len(prefetches)}, results: {len(results)}, "
            f"fusion: {'local' if self.settings.local_fusion else 'server'}"
        )
        return results

    async def _fuse_locally(
        self,
        client: Any,
        collection_name: str,
        prefetches: List[models.Prefetch],
        query_filter: Optional[models.Filter],
        limit: int
    ) -> List[SearchResult]:
        """Run each stage separately and fuse with local RRF, dense stages first."""
        ordered = sorted(prefetches, key=lambda p: p.using != DENSE_VECTOR_NAME)
        responses = await asyncio.gather(*[
            client.query_points(
                collection_name=collection_name,
                query=prefetch.query,
                using=prefetch.using,
                query_filter=query_filter,
                limit=prefetch.limit,
                search_params=prefetch.params,
                with_payload=True,
                with_vectors=False,
            )
            for prefetch in ordered
        ])

        fused: List[Tuple[Any, float]] = reciprocal_rank_fusion(
            [response.points for response in responses],
            k=self.settings.rrf_k,
        )
        return [
            SearchResult(document=Document.from_payload(point.id, point.payload), score=score)
            for point, score in fused[:limit]
        ]
