"""flowtrace — lifecycle tracing for async streams.

Wraps any async iterable and reports what happens to each subscription
(start, every value, error, cancellation, completion) to a log sink and an
optional analytics sink, without changing the values or how the stream ends.

Quick start::

    import flowtrace

    async for price in flowtrace.trace(ticker("ACME"), "Prices"):
        ...

Configuration (process-wide)::

    flowtrace.initialize(enabled=True, show_context_info=False,
                         custom_logger=lambda tag, msg: log.debug("%s %s", tag, msg))
    flowtrace.config.analytics_sink = analytics.log_event
    flowtrace.reset_to_defaults()

Other entry points::

    flowtrace.watch_in(stream, task_group, "Tag")   # trace + consume in a task
    @flowtrace.traced("Tag")                        # decorate a generator function
    flowtrace.Tracer(TraceConfig(...))              # injected configuration

"""

__version__ = "0.1.0"
__all__ = [
    "ConfigError",
    "FlowTraceError",
    "ReplayBuffered",
    "SinkError",
    "StateHolder",
    "TraceConfig",
    "TraceLog",
    "TracedStream",
    "Tracer",
    "__version__",
    "config",
    "initialize",
    "reset_to_defaults",
    "trace",
    "traced",
    "watch_in",
]

_LAZY: dict[str, str] = {
    "ConfigError": "flowtrace._errors",
    "FlowTraceError": "flowtrace._errors",
    "SinkError": "flowtrace._errors",
    "ReplayBuffered": "flowtrace.introspection",
    "StateHolder": "flowtrace.introspection",
    "TraceConfig": "flowtrace.settings",
    "TraceLog": "flowtrace.capture",
    "TracedStream": "flowtrace.tracer",
    "Tracer": "flowtrace.tracer",
    "config": "flowtrace.settings",
    "initialize": "flowtrace.settings",
    "reset_to_defaults": "flowtrace.settings",
    "trace": "flowtrace.tracer",
    "traced": "flowtrace.tracer",
    "watch_in": "flowtrace.tracer",
}


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import flowtrace`` cheap.  ``flowtrace.config`` is the live
    process-wide ``TraceConfig``, not a copy.
    """
    module_name = _LAZY.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
