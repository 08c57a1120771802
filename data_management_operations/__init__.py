"""
Data Management Operations Module

Provides functionality for managing data in Qdrant collections:
- Dense document insertion
- Hybrid insertion with client-side sparse encoding and vocabulary persistence
- Delete by ID
- Filtered payload queries
- Client-side validation of vectors before any write

Typical usage from external projects:

    from data_management_operations import DataManager, Document, DocumentValidationError

    manager = DataManager(conn_mgr, coll_mgr, vocabulary_registry)

    try:
        result = await manager.insert_hybrid("hybrid_code_chunks_1a2b3c4d", docs)
        print(f"Successfully inserted {result.successful_count} documents")
    except DocumentValidationError as e:
        for doc_id, errors in e.validation_errors.items():
            print(f"Invalid document {doc_id}: {errors}")
"""

# Data models
from .models.entities import (
    Document,
    SearchResult,
    BatchOperationResult,
    OperationStatus,
)

# Exceptions
from .data_ops_exceptions import (
    DocumentValidationError,
    MissingSparseSpaceError,
    InsertionError,
)

# Core manager (primary interface)
from .core.validator import DataValidator
from .core.manager import DataManager

__all__ = [
    # Primary interface
    'DataManager',
    # Models
    'Document',
    'SearchResult',
    'BatchOperationResult',
    'OperationStatus',
    # Utilities
    'DataValidator',
    # Exceptions
    'DocumentValidationError',
    'MissingSparseSpaceError',
    'InsertionError',
]
