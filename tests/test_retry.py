"""Tests for RetryExecutor backoff, terminal errors and events."""

import asyncio

import pytest

from utils import (
    OperationEventType,
    RetryExecutor,
    emit_event,
    is_terminal_error,
)
from utils.events import OperationEvent


class Flaky:
    """Operation that fails a given number of times before succeeding."""

    def __init__(self, failures, result="ok"):
        self.failures = list(failures)
        self.result = result
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return self.result


@pytest.mark.parametrize("message,terminal", [
    ("Collection `docs` already exists!", True),
    ("Not found: Collection `docs` doesn't exist!", True),
    ("NOT FOUND", True),
    ("Already Exists", True),
    ("connection reset by peer", False),
    ("timed out", False),
])
def test_is_terminal_error(message, terminal):
    assert is_terminal_error(Exception(message)) is terminal


@pytest.mark.asyncio
async def test_retries_transient_errors_with_doubling_delay(retry_executor, sleeps):
    operation = Flaky([Exception("unavailable"), Exception("unavailable")], result=42)

    result = await retry_executor.execute(operation, "Flaky op")

    assert result == 42
    assert operation.calls == 3
    assert sleeps == [1.0, 2.0]


@pytest.mark.asyncio
async def test_terminal_error_raised_immediately(retry_executor, sleeps):
    error = Exception("Collection `docs` already exists!")
    operation = Flaky([error])

    with pytest.raises(Exception) as exc_info:
        await retry_executor.execute(operation, "Create")

    assert exc_info.value is error
    assert operation.calls == 1
    assert sleeps == []


@pytest.mark.asyncio
async def test_last_error_raised_after_exhaustion(retry_executor, sleeps):
    errors = [Exception("first"), Exception("second"), Exception("third")]
    operation = Flaky(list(errors))

    with pytest.raises(Exception) as exc_info:
        await retry_executor.execute(operation, "Always failing")

    assert exc_info.value is errors[-1]
    assert operation.calls == 3
    # No delay after the final attempt
    assert sleeps == [1.0, 2.0]


@pytest.mark.asyncio
async def test_per_call_overrides(retry_executor, sleeps):
    operation = Flaky([Exception("a"), Exception("b"), Exception("c"), Exception("d")])

    result = await retry_executor.execute(operation, "Override", max_attempts=5, initial_delay=0.5)

    assert result == "ok"
    assert sleeps == [0.5, 1.0, 2.0, 4.0]


@pytest.mark.asyncio
async def test_single_attempt_never_sleeps(retry_executor, sleeps):
    operation = Flaky([Exception("transient")])

    with pytest.raises(Exception, match="transient"):
        await retry_executor.execute(operation, "Once", max_attempts=1)

    assert sleeps == []


@pytest.mark.asyncio
async def test_events_emitted_for_each_stage():
    events = []

    async def no_sleep(delay):
        return None

    executor = RetryExecutor(event_callback=events.append, sleep=no_sleep)
    await executor.execute(Flaky([Exception("blip")]), "Evented")

    assert [e.event_type for e in events] == [
        OperationEventType.ATTEMPT,
        OperationEventType.RETRY,
        OperationEventType.ATTEMPT,
        OperationEventType.SUCCESS,
    ]
    retry_event = events[1]
    assert retry_event.attempt == 1
    assert retry_event.delay == 1.0
    assert retry_event.error == "blip"
    assert events[-1].attempt == 2


@pytest.mark.asyncio
async def test_failure_event_marks_terminal():
    events = []
    executor = RetryExecutor(event_callback=events.append)

    with pytest.raises(Exception):
        await executor.execute(Flaky([Exception("not found")]), "Lookup")

    failure = events[-1]
    assert failure.event_type is OperationEventType.FAILURE
    assert failure.terminal is True
    assert failure.to_dict()["event_type"] == "failure"


def test_callback_errors_are_swallowed():
    def broken(event):
        raise RuntimeError("sink down")

    emit_event(broken, OperationEvent("op", OperationEventType.ATTEMPT, 1, 3))


def test_invalid_configuration_rejected():
    with pytest.raises(ValueError):
        RetryExecutor(max_attempts=0)
    with pytest.raises(ValueError):
        RetryExecutor(initial_delay=-1)


@pytest.mark.asyncio
async def test_cancellation_is_not_retried(retry_executor, sleeps):
    operation = Flaky([asyncio.CancelledError()])

    with pytest.raises(asyncio.CancelledError):
        await retry_executor.execute(operation, "Cancelled op")

    assert operation.calls == 1
    assert sleeps == []
