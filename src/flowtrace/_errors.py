"""flowtrace error hierarchy.

All flowtrace-specific errors inherit from FlowTraceError for easy catching.
Errors raised by traced sources are never wrapped in these types.
"""


class FlowTraceError(Exception):
    """Base error for all flowtrace operations."""


class ConfigError(FlowTraceError):
    """Invalid or unreadable configuration."""


class SinkError(FlowTraceError):
    """A log or analytics sink raised while ``raise_sink_errors`` is set.

    The sink's own exception is chained as ``__cause__``.  Never reported as
    an error of the traced stream.
    """
