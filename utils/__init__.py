"""
Utilities Module

This module provides common utilities shared across the package:
- Bounded retry with exponential backoff for remote calls
- Structured operation events and the default logging sink
- Deterministic point ID derivation

Implements shared functionality used across the package to ensure
consistency, reliability, and maintainability.
"""

from .retry import RetryExecutor, is_terminal_error, TERMINAL_ERROR_PATTERNS
from .events import (
    OperationEvent,
    OperationEventType,
    EventCallback,
    LoggingEventSink,
    emit_event,
)
from .identifiers import IdentifierMapper, to_stable_id

__all__ = [
    'RetryExecutor',
    'is_terminal_error',
    'TERMINAL_ERROR_PATTERNS',
    'OperationEvent',
    'OperationEventType',
    'EventCallback',
    'LoggingEventSink',
    'emit_event',
    'IdentifierMapper',
    'to_stable_id',
]
