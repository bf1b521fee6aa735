"""Lifecycle notifications and terminal outcomes of a trace session.

A session produces one ``Start``, at most one ``HotStreamInfo``, any number
of ``Emit`` and exactly one terminal notification (``Complete``, ``Error``
or ``Cancelled``).  Notifications are handed to the sinks as soon as they
are built; nothing here is queued.

How a source terminated is decided once, by ``classify()``, at the point
the session observes it.  Everything downstream works with the resulting
``Outcome`` and never inspects exception types again.

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any

from flowtrace._types import HotStreamKind

HIDDEN = "[HIDDEN]"


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Start:
    """A consumer subscribed to a traced stream.

    Attributes:
        tag: Tag of the traced stream.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    tag: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class HotStreamInfo:
    """The source exposes hot-stream state at subscription time.

    Attributes:
        tag: Tag of the traced stream.
        kind: ``"state"`` for a state holder, ``"replay"`` for a replay buffer.
        detail: The current value, or the replay buffer size.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    tag: str
    kind: HotStreamKind
    detail: Any
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class Emit:
    """The source produced a value.

    Attributes:
        tag: Tag of the traced stream.
        elapsed_ms: Milliseconds since the session started.
        value: String form of the value, or ``HIDDEN``.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    tag: str
    elapsed_ms: int
    value: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class Error:
    """The source failed with a non-cancellation error.

    Attributes:
        tag: Tag of the traced stream.
        elapsed_ms: Milliseconds since the session started.
        message: The error's message.
        kind_name: The error's class name.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    tag: str
    elapsed_ms: int
    message: str
    kind_name: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class Cancelled:
    """The session ended by cancellation.

    Attributes:
        tag: Tag of the traced stream.
        elapsed_ms: Milliseconds since the session started.
        reason: Cancellation message, if any.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    tag: str
    elapsed_ms: int
    reason: str | None
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class Complete:
    """The source finished normally."""

    tag: str
    elapsed_ms: int
    timestamp_ns: int


type Notification = Start | HotStreamInfo | Emit | Error | Cancelled | Complete


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Completed:
    """Normal termination."""


@dataclass(frozen=True, slots=True)
class Failed:
    """Termination by a domain error, carried as-is."""

    error: BaseException


@dataclass(frozen=True, slots=True)
class Aborted:
    """Termination by cancellation."""

    reason: str | None = None


type Outcome = Completed | Failed | Aborted

CONSUMER_CLOSED = "consumer closed the stream"


def classify(exc: BaseException | None) -> Outcome:
    """Decide the terminal outcome for whatever ended the source.

    ``None`` means the source was exhausted.  ``asyncio.CancelledError``
    and ``GeneratorExit`` are cancellations, anything else is a failure.
    """
    if exc is None:
        return Completed()
    if isinstance(exc, GeneratorExit):
        return Aborted(str(exc) or CONSUMER_CLOSED)
    if isinstance(exc, asyncio.CancelledError):
        return Aborted(str(exc) or None)
    return Failed(exc)


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
