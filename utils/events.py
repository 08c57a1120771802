"""
Operation Events

Structured events emitted while executing remote operations. Components
report progress (attempt, retry, success, failure) to an injected callback
instead of writing log lines themselves; the default sink forwards events to
the standard logging module.
"""

import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Union

logger = logging.getLogger(__name__)


class OperationEventType(Enum):
    """Lifecycle stages of a retried operation."""
    ATTEMPT = "attempt"
    RETRY = "retry"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class OperationEvent:
    """
    A single progress notice for a named operation.

    Attributes:
        operation: Human-readable operation name, e.g. "Create collection 'docs'"
        event_type: Stage of the operation this event reports
        attempt: 1-based attempt number the event refers to
        max_attempts: Attempt budget for the operation
        delay: Seconds until the next attempt (RETRY events only)
        error: String form of the error that caused a retry or failure
        terminal: Whether the failure was classified as non-retryable
        timestamp: Unix timestamp when the event was created
    """
    operation: str
    event_type: OperationEventType
    attempt: int
    max_attempts: int
    delay: Optional[float] = None
    error: Optional[str] = None
    terminal: bool = False
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the event to dictionary format."""
        return {
            "operation": self.operation,
            "event_type": self.event_type.value,
            "attempt": self.attempt,
            "max_attempts": self.max_attempts,
            "delay": self.delay,
            "error": self.error,
            "terminal": self.terminal,
            "timestamp": self.timestamp,
        }


EventCallback = Callable[[OperationEvent], None]


class LoggingEventSink:
    """
    Default event callback writing operation events to `logging`.

    Attempts and successes are logged at the configured level, retries as
    warnings and failures as errors.
    """

    def __init__(self, level: Union[int, str] = logging.DEBUG):
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
            if not isinstance(level, int):
                level = logging.DEBUG
        self.level = level

    def __call__(self, event: OperationEvent) -> None:
        if event.event_type is OperationEventType.RETRY:
            logger.warning(
                f"{event.operation} failed (attempt {event.attempt}/{event.max_attempts}): "
                f"{event.error}. Retrying in {event.delay:.2f}s..."
            )
        elif event.event_type is OperationEventType.FAILURE:
            reason = "non-retryable error" if event.terminal else "final attempt"
            logger.error(
                f"{event.operation} failed on attempt {event.attempt}/{event.max_attempts} "
                f"({reason}): {event.error}"
            )
        elif event.event_type is OperationEventType.SUCCESS:
            logger.log(
                self.level,
                f"{event.operation} succeeded on attempt {event.attempt}/{event.max_attempts}"
            )
        else:
            logger.log(
                self.level,
                f"{event.operation} attempt {event.attempt}/{event.max_attempts}"
            )


def emit_event(callback: Optional[EventCallback], event: OperationEvent) -> None:
    """Deliver an event to a callback; callback errors are logged and dropped."""
    if callback is None:
        return
    try:
        callback(event)
    except Exception as e:
        logger.error(f"Event callback failed: {str(e)}")
