"""
Data Management Operations Exceptions

Exception hierarchy for data management operations, providing clear error
reporting and enabling precise error handling in external projects.
"""

from typing import Any, Dict, List, Optional

from qdrant_ops_exceptions import (
    InsertionError,
    DataValidationError,
)


class DocumentValidationError(DataValidationError):
    """
    Raised when documents fail validation before any remote call.

    Attributes:
        message: Human-readable error message
        validation_errors: Map of document IDs (or positions) to their errors

    Example:
        ```python
        try:
            await manager.insert("docs", documents)
        except DocumentValidationError as e:
            for doc_id, errors in e.validation_errors.items():
                logger.error(f"Document {doc_id}: {errors}")
        ```
    """

    def __init__(self, message: str, validation_errors: Optional[Dict[Any, List[str]]] = None):
        """
        Initialize document validation error.

        Args:
            message: Human-readable error message
            validation_errors: Map of document IDs to validation error lists
        """
        super().__init__(message)
        self.message = message
        self.validation_errors = validation_errors or {}


class MissingSparseSpaceError(DataValidationError):
    """Raised when a hybrid insert targets a collection without the sparse vector space."""
    pass


__all__ = [
    'InsertionError',
    'DocumentValidationError',
    'MissingSparseSpaceError',
]
