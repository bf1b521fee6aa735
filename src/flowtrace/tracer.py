"""Trace decorator for async streams.

``trace()`` wraps any async iterable so that each subscription (each
``async for`` over it) reports its lifecycle through the configured sinks:

    🟢 START
    ℹ️ StateHolder Info -> Current Value: 42      (hot sources only)
    ⬇️ EMIT [+3ms] -> Value: 1
    🏁 COMPLETE [+9ms] -> Finished successfully   (or ERROR / CANCELLED)

Values, their order and the way the source terminates are passed through
untouched: a failing source raises the same exception object, a cancelled
one is still cancelled.

Quick Start:
    >>> import flowtrace
    >>> prices = flowtrace.trace(ticker(), "Prices", report_emissions=True)
    >>> async for price in prices:
    ...     render(price)

"""

from __future__ import annotations

import asyncio
import functools
from typing import TYPE_CHECKING, Any, Protocol

from flowtrace._errors import SinkError
from flowtrace.events import Completed, classify
from flowtrace.session import TraceSession
from flowtrace.settings import config as global_config

if TYPE_CHECKING:
    from collections.abc import AsyncIterable, AsyncIterator, Callable, Coroutine

    from flowtrace.settings import TraceConfig


class TaskFactory(Protocol):
    """Anything that can start a task: an event loop or an ``asyncio.TaskGroup``."""

    def create_task(
        self, coro: Coroutine[Any, Any, Any], *, name: str | None = None
    ) -> asyncio.Task[Any]: ...


class TracedStream[T]:
    """An async iterable that traces every subscription to ``source``.

    Each ``__aiter__()`` call starts a new ``TraceSession``; sessions share
    nothing but the configuration.

    """

    __slots__ = ("_config", "log_values", "report_emissions", "source", "tag")

    def __init__(
        self,
        source: AsyncIterable[T],
        tag: str,
        config: TraceConfig,
        *,
        log_values: bool = True,
        report_emissions: bool = False,
    ) -> None:
        self.source = source
        self.tag = tag
        self.log_values = log_values
        self.report_emissions = report_emissions
        self._config = config

    def __aiter__(self) -> AsyncIterator[T]:
        return self._subscribe()

    def __repr__(self) -> str:
        return f"TracedStream(tag={self.tag!r}, source={self.source!r})"

    async def _subscribe(self) -> AsyncIterator[T]:
        session = TraceSession(
            self.tag,
            self._config,
            log_values=self.log_values,
            report_emissions=self.report_emissions,
        )
        session.start(self.source)

        upstream: AsyncIterator[T] | None = None
        try:
            upstream = aiter(self.source)
            while True:
                try:
                    value = await anext(upstream)
                except StopAsyncIteration:
                    break
                session.emit(value)
                yield value
        except SinkError:
            # A broken sink is not an outcome of the source.
            raise
        except (asyncio.CancelledError, GeneratorExit, Exception) as exc:
            session.finish(classify(exc))
            raise
        else:
            session.finish(Completed())
        finally:
            # Propagates a consumer-side close to the source.
            aclose = getattr(upstream, "aclose", None)
            if aclose is not None:
                await aclose()


async def _drain(stream: AsyncIterable[Any]) -> None:
    async for _ in stream:
        pass


class Tracer:
    """Trace operations bound to one ``TraceConfig``.

    The module-level ``trace``/``watch_in``/``traced`` functions use the
    process-wide configuration; build a ``Tracer`` to report through a
    different one, e.g. in tests or in a library with its own sinks.

    Args:
        config: Settings to read.  Defaults to the process-wide instance.

    """

    __slots__ = ("config",)

    def __init__(self, config: TraceConfig | None = None) -> None:
        self.config = config if config is not None else global_config

    def trace[T](
        self,
        source: AsyncIterable[T],
        tag: str,
        log_values: bool = True,
        report_emissions: bool = False,
    ) -> AsyncIterable[T]:
        """Wrap ``source`` so its subscriptions report lifecycle events.

        ``enabled`` is read here, once.  When it is False the source itself
        is returned and nothing is ever reported for it, even if tracing is
        enabled later.  A stream decorated while enabled keeps reporting
        after tracing is disabled.

        Ending a subscription closes the iterator it opened on ``source``.
        When ``source`` is an async generator object, that iterator is the
        generator itself: once a consumer stops early (``aclose()``, or a
        ``break`` followed by the loop's async-generator finalizer) the
        generator is closed and cannot be resumed, even by code that still
        holds it.  Pass a fresh generator per subscription if it must
        outlive the trace.

        Args:
            source: Any async iterable.
            tag: Non-empty label used verbatim in log lines and analytics.
            log_values: Log values; when False they are shown as ``[HIDDEN]``.
            report_emissions: Send ``flow_trace_emit`` for every value.

        Raises:
            ValueError: If ``tag`` is empty.

        """
        if not self.config.enabled:
            return source
        if not tag:
            msg = "trace tag must be a non-empty string"
            raise ValueError(msg)
        return TracedStream(
            source,
            tag,
            self.config,
            log_values=log_values,
            report_emissions=report_emissions,
        )

    def watch_in(
        self,
        source: AsyncIterable[Any],
        context: TaskFactory,
        tag: str,
    ) -> asyncio.Task[None]:
        """Trace ``source`` and consume it in a new task, discarding values.

        Returns the task; cancel it to cancel the subscription.
        """
        stream = self.trace(source, tag)
        return context.create_task(_drain(stream), name=f"flowtrace:{tag}")

    def traced(
        self,
        tag: str | Callable[..., Any] | None = None,
        *,
        log_values: bool = True,
        report_emissions: bool = False,
    ) -> Any:
        """Decorate a function returning an async iterable.

        Works as ``@traced`` and ``@traced("tag")``.  Without a tag, the
        function's qualified name is used.  Every call decorates a new
        stream, so ``enabled`` is checked per call.

        Example:
            ```python
            @flowtrace.traced("Prices")
            async def ticker(symbol):
                while True:
                    yield await fetch(symbol)
            ```
        """

        def decorator(func: Callable[..., AsyncIterable[Any]]) -> Callable[..., AsyncIterable[Any]]:
            name = tag if isinstance(tag, str) else func.__qualname__

            @functools.wraps(func)
            def wrapper(*args: Any, **kwargs: Any) -> AsyncIterable[Any]:
                return self.trace(
                    func(*args, **kwargs),
                    name,
                    log_values=log_values,
                    report_emissions=report_emissions,
                )

            return wrapper

        # Handle both @traced and @traced(...) syntax
        if callable(tag):
            return decorator(tag)
        return decorator


# ---------------------------------------------------------------------------
# Process-wide entry points
# ---------------------------------------------------------------------------

_default = Tracer()


def trace[T](
    source: AsyncIterable[T],
    tag: str,
    log_values: bool = True,
    report_emissions: bool = False,
) -> AsyncIterable[T]:
    """Trace ``source`` through the process-wide configuration.  See ``Tracer.trace``."""
    return _default.trace(source, tag, log_values=log_values, report_emissions=report_emissions)


def watch_in(source: AsyncIterable[Any], context: TaskFactory, tag: str) -> asyncio.Task[None]:
    """Trace and consume ``source`` in ``context``.  See ``Tracer.watch_in``."""
    return _default.watch_in(source, context, tag)


def traced(
    tag: str | Callable[..., Any] | None = None,
    *,
    log_values: bool = True,
    report_emissions: bool = False,
) -> Any:
    """Decorator form of ``trace``.  See ``Tracer.traced``."""
    return _default.traced(tag, log_values=log_values, report_emissions=report_emissions)
