"""
Connection Management Exceptions

This module defines specialized exceptions for Qdrant connection management,
providing detailed error reporting and handling for connection-related issues.
"""

from qdrant_ops_exceptions import ConnectionError as BaseConnectionError


class ConnectionError(BaseConnectionError):
    """
    Base exception for all connection-related errors.

    This base class ensures consistent error handling across the connection
    management system and allows applications to catch all connection errors
    uniformly while still providing access to specific error details.
    """
    pass


class ConnectionInitializationError(ConnectionError):
    """
    Raised when the shared client handle cannot be created.

    Initialization runs once; every caller awaiting the client observes the
    same failure for the lifetime of the manager.
    """
    pass


class ConnectionClosedError(ConnectionError):
    """
    Raised when attempting to use a connection manager after close().

    This prevents the use of a released client handle, which could lead to
    unpredictable behaviour or errors.
    """
    pass
