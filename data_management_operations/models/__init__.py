"""
Data Management Models

Pydantic models for documents, search hits and operation results.
"""

from .entities import (
    PAYLOAD_FIELDS,
    SPARSE_VECTOR_METADATA_KEY,
    OperationStatus,
    Document,
    SearchResult,
    BatchOperationResult,
    payload_row,
)

__all__ = [
    'PAYLOAD_FIELDS',
    'SPARSE_VECTOR_METADATA_KEY',
    'OperationStatus',
    'Document',
    'SearchResult',
    'BatchOperationResult',
    'payload_row',
]
