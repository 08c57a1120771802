"""
Retry Module

This module provides a bounded retry wrapper with exponential backoff for
remote operations against the Qdrant server.

Errors whose message marks a business condition ("already exists",
"not found") are terminal: they are raised on the first attempt without any
delay. Every other error is retried until the attempt budget runs out, after
which the last error is raised unchanged.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from .events import (
    EventCallback,
    LoggingEventSink,
    OperationEvent,
    OperationEventType,
    emit_event,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')

TERMINAL_ERROR_PATTERNS = (
    "already exists",
    "not found",
)


def is_terminal_error(exception: BaseException) -> bool:
    """
    Determine if an exception represents a terminal (business) condition.

    The Qdrant client does not expose granular exception types for these
    conditions, so the error message is examined.

    Args:
        exception: Exception to check

    Returns:
        True if the operation must not be retried
    """
    error_message = str(exception).lower()
    return any(pattern in error_message for pattern in TERMINAL_ERROR_PATTERNS)


class RetryExecutor:
    """
    Executes async operations with bounded retry and exponential backoff.

    The delay before retry n is `initial_delay * 2 ** (n - 1)`: with the
    defaults an operation is tried three times, waiting 1s and then 2s.
    No jitter is applied. At most one attempt of an operation is in flight
    at a time.

    Example:
        >>> executor = RetryExecutor()
        >>> await executor.execute(
        ...     lambda: client.create_collection("docs", vectors_config=params),
        ...     "Create collection 'docs'"
        ... )
    """

    def __init__(
        self,
        max_attempts: int = 3,
        initial_delay: float = 1.0,
        event_callback: Optional[EventCallback] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    ):
        """
        Initialize the retry executor.

        Args:
            max_attempts: Default attempt budget, including the first attempt
            initial_delay: Default delay in seconds before the first retry
            event_callback: Receives OperationEvents; logs them when None
            sleep: Awaitable sleep function used between attempts
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        if initial_delay < 0:
            raise ValueError(f"initial_delay must be non-negative, got {initial_delay}")

        self.max_attempts = max_attempts
        self.initial_delay = initial_delay
        self.event_callback = event_callback if event_callback is not None else LoggingEventSink()
        self._sleep = sleep

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        name: str,
        max_attempts: Optional[int] = None,
        initial_delay: Optional[float] = None
    ) -> T:
        """
        Execute an operation with retry logic.

        Args:
            operation: Zero-argument callable returning an awaitable
            name: Human-readable operation name for events and logs
            max_attempts: Attempt budget for this call (defaults to executor's)
            initial_delay: First backoff delay for this call (defaults to executor's)

        Returns:
            Result of the first successful attempt

        Raises:
            Exception: The terminal error, or the last error once attempts are exhausted
        """
        attempts = max_attempts if max_attempts is not None else self.max_attempts
        delay = initial_delay if initial_delay is not None else self.initial_delay

        def _before_sleep(retry_state: RetryCallState) -> None:
            emit_event(self.event_callback, OperationEvent(
                operation=name,
                event_type=OperationEventType.RETRY,
                attempt=retry_state.attempt_number,
                max_attempts=attempts,
                delay=retry_state.next_action.sleep if retry_state.next_action else None,
                error=str(retry_state.outcome.exception()) if retry_state.outcome else None
            ))

        retrying = AsyncRetrying(
            stop=stop_after_attempt(attempts),
            wait=wait_exponential(multiplier=delay, exp_base=2, min=0),
            retry=retry_if_exception(lambda e: isinstance(e, Exception) and not is_terminal_error(e)),
            before_sleep=_before_sleep,
            sleep=self._sleep,
            reraise=True
        )

        attempt_number = 0
        try:
            async for attempt in retrying:
                with attempt:
                    attempt_number = attempt.retry_state.attempt_number
                    emit_event(self.event_callback, OperationEvent(
                        operation=name,
                        event_type=OperationEventType.ATTEMPT,
                        attempt=attempt_number,
                        max_attempts=attempts
                    ))
                    result = await operation()
        except Exception as e:
            emit_event(self.event_callback, OperationEvent(
                operation=name,
                event_type=OperationEventType.FAILURE,
                attempt=attempt_number,
                max_attempts=attempts,
                error=str(e),
                terminal=is_terminal_error(e)
            ))
            raise

        emit_event(self.event_callback, OperationEvent(
            operation=name,
            event_type=OperationEventType.SUCCESS,
            attempt=attempt_number,
            max_attempts=attempts
        ))
        return result
