"""
Collection Operations Module

This module provides functionality for managing Qdrant collections:
- Dense and hybrid (dense + sparse) collection creation
- HNSW, quantization and sparse index configuration with strong typing
- Existence probes, listing and description
- Dropping collections along with their in-memory vocabulary handle
"""

from .manager import CollectionManager
from .schema import (
    DENSE_VECTOR_NAME,
    SPARSE_VECTOR_NAME,
    CollectionKind,
    HnswConfig,
    QuantizationConfig,
    SparseIndexConfig,
    CollectionOptions,
    CollectionDescriptor,
    build_dense_vector_params,
    build_sparse_vector_params,
    build_create_collection_request,
    dense_dimension,
    has_sparse_space,
)

__all__ = [
    'CollectionManager',
    'DENSE_VECTOR_NAME',
    'SPARSE_VECTOR_NAME',
    'CollectionKind',
    'HnswConfig',
    'QuantizationConfig',
    'SparseIndexConfig',
    'CollectionOptions',
    'CollectionDescriptor',
    'build_dense_vector_params',
    'build_sparse_vector_params',
    'build_create_collection_request',
    'dense_dimension',
    'has_sparse_space',
]
