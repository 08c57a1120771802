"""
Qdrant Operations Exceptions

This module defines custom exceptions for the Qdrant_Ops package
to provide clear error handling and reporting.
"""

class QdrantOpsError(Exception):
    """Base exception for all Qdrant_Ops errors"""
    pass


class ConnectionError(QdrantOpsError):
    """Raised when connection to the Qdrant server fails"""
    pass


class ConfigurationError(QdrantOpsError):
    """Raised when configuration is invalid or missing"""
    pass


class CollectionError(QdrantOpsError):
    """Base exception for collection-related errors"""
    pass


class CollectionNotFoundError(CollectionError):
    """Raised when a collection does not exist"""
    pass


class SchemaError(QdrantOpsError):
    """Raised when a collection configuration cannot be built"""
    pass


class InsertionError(QdrantOpsError):
    """Raised when data insertion fails"""
    pass


class QueryError(QdrantOpsError):
    """Raised when a query operation fails"""
    pass


class DataValidationError(QdrantOpsError):
    """Raised when data validation fails"""
    pass
