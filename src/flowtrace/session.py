"""Trace session: the lifecycle of one subscription to a traced stream.

A session is created each time a consumer starts iterating a traced
stream, so elapsed times are per subscriber.  It turns what it observes
into notifications and hands each one to the configured sinks before the
value (or termination) is passed on.

Thread Safety:
    A session is owned by the iteration that created it and is never
    shared.  The ``TraceConfig`` it reads is shared and read unlocked.

"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Any

from flowtrace._errors import SinkError
from flowtrace.events import (
    HIDDEN,
    Aborted,
    Cancelled,
    Complete,
    Completed,
    Emit,
    Error,
    Failed,
    Start,
    now_ns,
)
from flowtrace.introspection import inspect_hot_stream
from flowtrace.rendering import analytics_event, render

if TYPE_CHECKING:
    from flowtrace.events import Notification, Outcome
    from flowtrace.settings import TraceConfig


class TraceSession:
    """Per-subscription timing and reporting state.

    Args:
        tag: Tag of the traced stream.
        config: Settings and sinks to report through.
        log_values: Include values in log lines and analytics.
        report_emissions: Send a ``flow_trace_emit`` event for every value.

    """

    __slots__ = ("_config", "_start_ns", "_terminated", "log_values", "report_emissions", "tag")

    def __init__(
        self,
        tag: str,
        config: TraceConfig,
        *,
        log_values: bool = True,
        report_emissions: bool = False,
    ) -> None:
        self.tag = tag
        self.log_values = log_values
        self.report_emissions = report_emissions
        self._config = config
        self._start_ns = 0
        self._terminated = False

    @property
    def terminated(self) -> bool:
        """True once the terminal notification has been dispatched."""
        return self._terminated

    def elapsed_ms(self) -> int:
        """Whole milliseconds since ``start()``."""
        return (now_ns() - self._start_ns) // 1_000_000

    def start(self, source: object) -> None:
        """Record the start time and report ``Start`` plus any hot-stream info."""
        self._start_ns = now_ns()
        self.dispatch(Start(tag=self.tag, timestamp_ns=self._start_ns))
        info = inspect_hot_stream(source, self.tag)
        if info is not None:
            self.dispatch(info)

    def emit(self, value: Any) -> None:
        """Report one value produced by the source."""
        shown = str(value) if self.log_values else HIDDEN
        self.dispatch(
            Emit(tag=self.tag, elapsed_ms=self.elapsed_ms(), value=shown, timestamp_ns=now_ns())
        )

    def finish(self, outcome: Outcome) -> None:
        """Report the terminal notification.  Only the first call has an effect."""
        if self._terminated:
            return
        self._terminated = True

        elapsed = self.elapsed_ms()
        ts = now_ns()
        match outcome:
            case Completed():
                n: Notification = Complete(tag=self.tag, elapsed_ms=elapsed, timestamp_ns=ts)
            case Failed(error=error):
                n = Error(
                    tag=self.tag,
                    elapsed_ms=elapsed,
                    message=str(error) or "Unknown Error",
                    kind_name=type(error).__name__,
                    timestamp_ns=ts,
                )
            case Aborted(reason=reason):
                n = Cancelled(tag=self.tag, elapsed_ms=elapsed, reason=reason, timestamp_ns=ts)
        self.dispatch(n)

    def dispatch(self, n: Notification) -> None:
        """Send a notification to the log sink and, if reportable, the analytics sink."""
        cfg = self._config
        self._call_sink(cfg.log_sink, self.tag, render(n, show_context_info=cfg.show_context_info))

        analytics = cfg.analytics_sink
        if analytics is None:
            return
        event = analytics_event(n, report_emissions=self.report_emissions)
        if event is not None:
            self._call_sink(analytics, *event)

    def _call_sink(self, sink: Any, *args: Any) -> None:
        try:
            sink(*args)
        except Exception as exc:
            if self._config.raise_sink_errors:
                msg = f"{self.tag}: {exc}"
                raise SinkError(msg) from exc
            print(f"  Sink error: {self.tag}: {exc}", file=sys.stderr)
