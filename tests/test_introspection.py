"""Tests for flowtrace.introspection — hot-stream capabilities."""

from __future__ import annotations

from typing import Any

from flowtrace.introspection import ReplayBuffered, StateHolder, inspect_hot_stream
from tests.conftest import ReplayStream, StateStream, values_of


class _Both:
    def current_value(self) -> Any:
        return "now"

    def replay_buffer_size(self) -> int:
        return 3


class TestCapabilities:
    """Structural checks against the protocols."""

    def test_state_stream_is_state_holder(self) -> None:
        assert isinstance(StateStream(1), StateHolder)
        assert not isinstance(StateStream(1), ReplayBuffered)

    def test_replay_stream_is_replay_buffered(self) -> None:
        assert isinstance(ReplayStream(2), ReplayBuffered)
        assert not isinstance(ReplayStream(2), StateHolder)

    def test_cold_stream_has_neither(self) -> None:
        gen = values_of(1)
        assert not isinstance(gen, StateHolder)
        assert not isinstance(gen, ReplayBuffered)


class TestInspectHotStream:
    """inspect_hot_stream() builds at most one HotStreamInfo."""

    def test_state(self) -> None:
        info = inspect_hot_stream(StateStream(42), "S")
        assert info is not None
        assert (info.tag, info.kind, info.detail) == ("S", "state", 42)

    def test_replay(self) -> None:
        stream = ReplayStream(replay=3)
        stream.emit("a")
        stream.emit("b")
        info = inspect_hot_stream(stream, "R")
        assert info is not None
        assert (info.kind, info.detail) == ("replay", 2)

    def test_state_wins_over_replay(self) -> None:
        info = inspect_hot_stream(_Both(), "B")
        assert info is not None
        assert info.kind == "state"

    def test_cold(self) -> None:
        assert inspect_hot_stream(values_of(), "C") is None
