"""
Search Operations Module

Dense and hybrid retrieval for Qdrant collections:
- Single dense queries against the unnamed or named "dense" space
- Multi-stage hybrid queries (dense + lexical) fused with Reciprocal Rank Fusion
- Payload filter builders for file extension and exact path
"""

from .filters import FilterBuilder
from .fusion import reciprocal_rank_fusion, DEFAULT_RRF_K
from .parameters import SearchOptions, HybridSearchRequest, HybridSearchOptions
from .search_ops_exceptions import SearchError, InvalidSearchParametersError
from .engine import HybridSearchEngine

__all__ = [
    'HybridSearchEngine',
    'FilterBuilder',
    'reciprocal_rank_fusion',
    'DEFAULT_RRF_K',
    'SearchOptions',
    'HybridSearchRequest',
    'HybridSearchOptions',
    'SearchError',
    'InvalidSearchParametersError',
]
