"""
Search Operations Exceptions

This module defines custom exceptions for search operations in Qdrant,
providing clear error handling and reporting for search-related issues.
"""

from qdrant_ops_exceptions import QueryError


class SearchError(QueryError):
    """Base exception for all search-related errors"""
    pass


class InvalidSearchParametersError(SearchError):
    """Raised when search parameters are invalid"""
    pass
