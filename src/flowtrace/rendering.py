"""Turn notifications into log lines and analytics events.

Log line format::

    <marker> [+<elapsed>ms] -> <detail> [T: <context>]

The elapsed segment is absent for ``Start`` and ``HotStreamInfo``; the
context segment only appears when context info is enabled.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Any

from flowtrace.events import (
    Cancelled,
    Complete,
    Emit,
    Error,
    HotStreamInfo,
    Notification,
    Start,
)

START_EVENT = "flow_trace_start"
EMIT_EVENT = "flow_trace_emit"
ERROR_EVENT = "flow_trace_error"
CANCEL_EVENT = "flow_trace_cancel"
COMPLETE_EVENT = "flow_trace_complete"


def context_name() -> str:
    """Name the thread running the caller, plus its asyncio task if any."""
    name = threading.current_thread().name
    try:
        task = asyncio.current_task()
    except RuntimeError:
        task = None
    if task is not None:
        return f"{name}/{task.get_name()}"
    return name


def _marker_and_detail(n: Notification) -> tuple[str, str | None]:
    match n:
        case Start():
            return "🟢 START", None
        case HotStreamInfo(kind="state", detail=value):
            return "ℹ️ StateHolder Info", f"Current Value: {value}"
        case HotStreamInfo(detail=size):
            return "ℹ️ ReplayBuffer Info", f"Replay Buffer Size: {size}"
        case Emit(elapsed_ms=ms, value=value):
            return f"⬇️ EMIT [+{ms}ms]", f"Value: {value}"
        case Error(elapsed_ms=ms, message=message, kind_name=kind):
            return f"🔴 ERROR [+{ms}ms]", f"{kind}: {message}"
        case Cancelled(elapsed_ms=ms, reason=reason):
            return f"🚫 CANCELLED [+{ms}ms]", f"Reason: {reason or 'unknown'}"
        case Complete(elapsed_ms=ms):
            return f"🏁 COMPLETE [+{ms}ms]", "Finished successfully"
    msg = f"Unknown notification: {n!r}"
    raise TypeError(msg)


def render(n: Notification, *, show_context_info: bool) -> str:
    """Render a notification as a single log line."""
    marker, detail = _marker_and_detail(n)
    parts = [marker]
    if detail is not None:
        parts.append(f" -> {detail}")
    if show_context_info:
        parts.append(f" [T: {context_name()}]")
    return "".join(parts)


def analytics_event(
    n: Notification,
    *,
    report_emissions: bool,
) -> tuple[str, dict[str, Any]] | None:
    """Map a notification to ``(event_name, params)``.

    Returns None for notifications that are not reported: hot-stream info
    always, emissions unless ``report_emissions`` is set.
    """
    match n:
        case Start(tag=tag):
            return START_EVENT, {"flow_tag": tag, "type": "start"}
        case Emit(tag=tag, elapsed_ms=ms, value=value) if report_emissions:
            return EMIT_EVENT, {"flow_tag": tag, "elapsed_ms": ms, "value": value}
        case Error(tag=tag, elapsed_ms=ms, message=message, kind_name=kind):
            return ERROR_EVENT, {
                "flow_tag": tag,
                "elapsed_ms": ms,
                "error_message": message,
                "exception_class": kind,
            }
        case Cancelled(tag=tag, elapsed_ms=ms):
            return CANCEL_EVENT, {"flow_tag": tag, "elapsed_ms": ms}
        case Complete(tag=tag, elapsed_ms=ms):
            return COMPLETE_EVENT, {"flow_tag": tag, "elapsed_ms": ms}
    return None
