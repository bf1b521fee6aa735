"""Hot-stream introspection.

A hot source can expose its state without being subscribed to.  Two
capabilities are recognised, checked structurally with ``isinstance``:

- ``StateHolder``: always has a current value.
- ``ReplayBuffered``: replays its most recent values to new subscribers.

A source implementing both is reported as a state holder.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from flowtrace.events import HotStreamInfo, now_ns


@runtime_checkable
class StateHolder(Protocol):
    """A stream with a current value readable without subscribing."""

    def current_value(self) -> Any:
        """Return the value a new subscriber would see first."""
        ...


@runtime_checkable
class ReplayBuffered(Protocol):
    """A multicast stream that caches its most recent values."""

    def replay_buffer_size(self) -> int:
        """Return how many values a new subscriber would be replayed."""
        ...


def inspect_hot_stream(source: object, tag: str) -> HotStreamInfo | None:
    """Describe the hot-stream state of ``source``, or None for cold sources."""
    if isinstance(source, StateHolder):
        return HotStreamInfo(
            tag=tag, kind="state", detail=source.current_value(), timestamp_ns=now_ns()
        )
    if isinstance(source, ReplayBuffered):
        return HotStreamInfo(
            tag=tag, kind="replay", detail=source.replay_buffer_size(), timestamp_ns=now_ns()
        )
    return None
