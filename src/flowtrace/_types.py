"""Shared type definitions for flowtrace."""

from collections.abc import Callable
from typing import Any, Literal

# Receives (tag, rendered message) for every notification
type LogSink = Callable[[str, str], None]

# Receives (event name, params) for every reportable notification
type AnalyticsSink = Callable[[str, dict[str, Any]], None]

# Which hot-stream capability a source exposes
type HotStreamKind = Literal["state", "replay"]
