"""Shared test fixtures for flowtrace."""

from __future__ import annotations

import asyncio
import threading
from collections import deque
from typing import TYPE_CHECKING, Any

import pytest

from flowtrace.capture import TraceLog
from flowtrace.settings import reset_to_defaults

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator


@pytest.fixture(autouse=True)
def _reset_config() -> Iterator[None]:
    """Keep process-wide settings from leaking between tests."""
    reset_to_defaults()
    yield
    reset_to_defaults()


@pytest.fixture
def trace_log() -> TraceLog:
    """A TraceLog wired into the process-wide config as both sinks."""
    return TraceLog().install()


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------


async def values_of(*items: Any) -> AsyncIterator[Any]:
    """Cold source yielding ``items`` without suspending."""
    for item in items:
        yield item


async def collect(stream: Any) -> list[Any]:
    """Consume an async iterable fully."""
    return [item async for item in stream]


class _HotStream:
    """Per-subscriber queues, fanned out under a lock."""

    def __init__(self) -> None:
        self._queues: set[asyncio.Queue[Any]] = set()
        self._lock = threading.Lock()

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._queues)

    def _publish(self, value: Any) -> None:
        with self._lock:
            queues = frozenset(self._queues)
        for queue in queues:
            queue.put_nowait(value)

    def _initial(self) -> list[Any]:
        return []

    async def _subscribe(self) -> AsyncIterator[Any]:
        queue: asyncio.Queue[Any] = asyncio.Queue()
        for value in self._initial():
            queue.put_nowait(value)
        with self._lock:
            self._queues.add(queue)
        try:
            while True:
                yield await queue.get()
        finally:
            with self._lock:
                self._queues.discard(queue)

    def __aiter__(self) -> AsyncIterator[Any]:
        return self._subscribe()


class StateStream(_HotStream):
    """Always holds a current value; subscribers get it first, then updates."""

    def __init__(self, initial: Any) -> None:
        super().__init__()
        self._value = initial

    def current_value(self) -> Any:
        return self._value

    def set(self, value: Any) -> None:
        self._value = value
        self._publish(value)

    def _initial(self) -> list[Any]:
        return [self._value]


class ReplayStream(_HotStream):
    """Replays its last ``replay`` values to each new subscriber."""

    def __init__(self, replay: int) -> None:
        super().__init__()
        self._buffer: deque[Any] = deque(maxlen=replay)

    def replay_buffer_size(self) -> int:
        return len(self._buffer)

    def emit(self, value: Any) -> None:
        self._buffer.append(value)
        self._publish(value)

    def _initial(self) -> list[Any]:
        return list(self._buffer)
