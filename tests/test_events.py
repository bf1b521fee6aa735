"""Tests for flowtrace.events — notifications and outcome classification."""

from __future__ import annotations

import asyncio

import pytest

from flowtrace.events import (
    CONSUMER_CLOSED,
    Aborted,
    Completed,
    Emit,
    Failed,
    Start,
    classify,
    now_ns,
)


class TestClassify:
    """classify() decides the terminal outcome once."""

    def test_none_is_completed(self) -> None:
        assert classify(None) == Completed()

    def test_domain_error_is_failed(self) -> None:
        err = ValueError("bad")
        outcome = classify(err)
        assert isinstance(outcome, Failed)
        assert outcome.error is err

    def test_cancelled_error_is_aborted(self) -> None:
        assert classify(asyncio.CancelledError("stop")) == Aborted("stop")

    def test_cancelled_without_message(self) -> None:
        assert classify(asyncio.CancelledError()) == Aborted(None)

    def test_generator_exit_is_aborted(self) -> None:
        assert classify(GeneratorExit()) == Aborted(CONSUMER_CLOSED)

    def test_cancellation_subclass_is_aborted(self) -> None:
        class Shutdown(asyncio.CancelledError):
            pass

        assert isinstance(classify(Shutdown("bye")), Aborted)


class TestNotifications:
    """Notifications are frozen."""

    def test_frozen(self) -> None:
        n = Start(tag="T", timestamp_ns=now_ns())
        with pytest.raises(AttributeError):
            n.tag = "other"  # type: ignore[misc]

    def test_emit_equality(self) -> None:
        assert Emit("T", 1, "v", 5) == Emit("T", 1, "v", 5)

    def test_now_ns_monotonic(self) -> None:
        a = now_ns()
        b = now_ns()
        assert b >= a
