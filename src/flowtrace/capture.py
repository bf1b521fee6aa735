"""Trace log: an in-memory recorder usable as both sinks.

Stores a bounded ring buffer of log lines and analytics events so tests
(and interactive debugging sessions) can assert on what a traced stream
reported.  Nothing is written anywhere else.

Usage::

    log = TraceLog()
    log.install()                     # process-wide config
    async for _ in flowtrace.trace(source, "Prices"):
        ...
    assert log.messages(contains="COMPLETE")

Thread Safety:
    All methods are protected by a ``threading.Lock``.  Safe for
    concurrent reads and writes from multiple threads.

"""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from flowtrace.events import now_ns
from flowtrace.settings import config as global_config

if TYPE_CHECKING:
    from flowtrace.settings import TraceConfig


@dataclass(frozen=True, slots=True)
class LogRecord:
    """A line received by the log sink.

    Attributes:
        tag: Tag of the traced stream.
        message: Rendered message.
        timestamp_ns: Monotonic nanosecond timestamp of receipt.

    """

    tag: str
    message: str
    timestamp_ns: int

    def __str__(self) -> str:
        return f"{self.tag}: {self.message}"


@dataclass(frozen=True, slots=True)
class AnalyticsRecord:
    """An event received by the analytics sink."""

    name: str
    params: dict[str, Any]
    timestamp_ns: int


type Record = LogRecord | AnalyticsRecord


class TraceLog:
    """Bounded recorder of sink traffic with query support.

    Records are stored in a ring buffer (deque with maxlen).  When the
    buffer is full, the oldest records are discarded automatically.

    Args:
        max_records: Maximum number of records to retain.

    """

    __slots__ = ("_lock", "_max_records", "_records")

    def __init__(self, max_records: int = 10_000) -> None:
        self._max_records = max_records
        self._records: deque[Record] = deque(maxlen=max_records)
        self._lock = threading.Lock()

    # ----- Sinks -----

    def log_sink(self, tag: str, message: str) -> None:
        """``LogSink`` implementation."""
        with self._lock:
            self._records.append(LogRecord(tag=tag, message=message, timestamp_ns=now_ns()))

    def analytics_sink(self, name: str, params: dict[str, Any]) -> None:
        """``AnalyticsSink`` implementation.  Stores a copy of ``params``."""
        with self._lock:
            self._records.append(
                AnalyticsRecord(name=name, params=dict(params), timestamp_ns=now_ns())
            )

    def install(self, config: TraceConfig | None = None) -> TraceLog:
        """Route both sinks of ``config`` (default: process-wide) into this log."""
        target = config if config is not None else global_config
        target.log_sink = self.log_sink
        target.analytics_sink = self.analytics_sink
        return self

    # ----- Queries -----

    def messages(self, *, tag: str | None = None, contains: str | None = None) -> list[str]:
        """Return ``"<tag>: <message>"`` lines in arrival order, optionally filtered.

        Args:
            tag: Only lines logged under this tag.
            contains: Only lines whose message contains this substring.

        """
        with self._lock:
            records = [r for r in self._records if isinstance(r, LogRecord)]
        return [
            str(r)
            for r in records
            if (tag is None or r.tag == tag) and (contains is None or contains in r.message)
        ]

    def events(
        self, *, name: str | None = None, tag: str | None = None
    ) -> list[AnalyticsRecord]:
        """Return analytics records in arrival order, optionally filtered.

        Args:
            name: Only events with this name (e.g. ``flow_trace_emit``).
            tag: Only events whose ``flow_tag`` param equals this tag.

        """
        with self._lock:
            records = [r for r in self._records if isinstance(r, AnalyticsRecord)]
        return [
            r
            for r in records
            if (name is None or r.name == name)
            and (tag is None or r.params.get("flow_tag") == tag)
        ]

    def recent(self, n: int = 20) -> list[Record]:
        """Return the N most recent records."""
        with self._lock:
            items = list(self._records)
        return items[-n:]

    def clear(self) -> int:
        """Clear all records and return the count that was cleared."""
        with self._lock:
            count = len(self._records)
            self._records.clear()
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def stats(self) -> dict[str, Any]:
        """Return summary counts of stored records."""
        with self._lock:
            records = list(self._records)

        by_event: dict[str, int] = {}
        by_tag: dict[str, int] = {}
        lines = 0
        for record in records:
            if isinstance(record, LogRecord):
                lines += 1
                by_tag[record.tag] = by_tag.get(record.tag, 0) + 1
            else:
                by_event[record.name] = by_event.get(record.name, 0) + 1

        return {
            "total": len(records),
            "max_records": self._max_records,
            "log_lines": lines,
            "lines_by_tag": by_tag,
            "events_by_name": by_event,
        }
