"""
Connection Management Module

This module owns the single asynchronous Qdrant client handle shared by all
operations:
- Lazy, single-flight initialization (one pending/completed state)
- Pluggable client factory for alternative transports and tests
- Idempotent shutdown
"""

from .connection_manager import ConnectionManager, default_client_factory
from .connection_exceptions import (
    ConnectionError,
    ConnectionClosedError,
    ConnectionInitializationError,
)

__all__ = [
    'ConnectionManager',
    'default_client_factory',
    'ConnectionError',
    'ConnectionClosedError',
    'ConnectionInitializationError',
]
