"""flowtrace configuration.

TraceConfig holds the settings every trace session reads.  A single
process-wide instance, ``config``, is what ``flowtrace.trace`` uses; other
instances can be injected through ``flowtrace.Tracer``.

Thread Safety:
    Fields are plain attributes, read without a lock.  A change made while
    streams are running takes effect at the next notification of each
    session, not atomically across sessions.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flowtrace._types import AnalyticsSink, LogSink


def default_log_sink(tag: str, message: str) -> None:
    """Write a trace line to standard output."""
    print(f"FlowTrace-{tag}: {message}")


@dataclass(slots=True)
class TraceConfig:
    """Settings shared by all trace sessions that report through it.

    Attributes:
        enabled: When False, ``trace()`` returns its source untouched.
            Checked once, when a stream is decorated.
        show_context_info: Append ``[T: <thread/task>]`` to log lines.
        log_sink: Receives ``(tag, message)`` for every notification.
        analytics_sink: Receives ``(event_name, params)``; None skips reporting.
        raise_sink_errors: Raise ``SinkError`` to the consumer when a sink
            fails instead of reporting the failure on stderr.

    """

    enabled: bool = True
    show_context_info: bool = True
    log_sink: LogSink = default_log_sink
    analytics_sink: AnalyticsSink | None = None
    raise_sink_errors: bool = False

    def initialize(
        self,
        enabled: bool = True,
        show_context_info: bool = True,
        custom_logger: LogSink | None = None,
    ) -> None:
        """Set the switches and, if given, replace the log sink."""
        self.enabled = enabled
        self.show_context_info = show_context_info
        if custom_logger is not None:
            self.log_sink = custom_logger

    def reset(self) -> None:
        """Restore every field to its default value."""
        self.enabled = True
        self.show_context_info = True
        self.log_sink = default_log_sink
        self.analytics_sink = None
        self.raise_sink_errors = False


# ---------------------------------------------------------------------------
# Process-wide instance
# ---------------------------------------------------------------------------

config = TraceConfig()


def initialize(
    enabled: bool = True,
    show_context_info: bool = True,
    custom_logger: LogSink | None = None,
) -> None:
    """Configure the process-wide settings.

    Call once at application startup.  To route trace lines into the
    standard ``logging`` module::

        flowtrace.initialize(
            custom_logger=lambda tag, msg: logging.getLogger(f"flowtrace.{tag}").debug(msg)
        )

    """
    config.initialize(
        enabled=enabled,
        show_context_info=show_context_info,
        custom_logger=custom_logger,
    )


def reset_to_defaults() -> None:
    """Restore the process-wide settings.  Safe to call at any time."""
    config.reset()
