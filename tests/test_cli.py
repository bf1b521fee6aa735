"""Tests for flowtrace._cli — argument parsing and the demo command."""

from __future__ import annotations

from pathlib import Path

import pytest

from flowtrace._cli import _build_parser, main, run_demo


def _demo_args(*extra: str):
    return _build_parser().parse_args(["demo", "--interval", "0", *extra])


class TestBuildParser:
    """_build_parser — CLI argument parsing."""

    def test_demo_default_args(self) -> None:
        args = _build_parser().parse_args(["demo"])
        assert args.command == "demo"
        assert args.tag == "StockStream-DEMO"
        assert args.interval == 0.5
        assert args.hide_values is False
        assert args.no_context is False
        assert args.report_emissions is False
        assert args.fail is False
        assert args.config is None

    def test_demo_all_flags(self) -> None:
        args = _build_parser().parse_args([
            "demo",
            "--tag", "Prices",
            "--interval", "0.1",
            "--hide-values",
            "--no-context",
            "--report-emissions",
            "--fail",
            "--config", "site/",
        ])
        assert args.tag == "Prices"
        assert args.interval == 0.1
        assert args.hide_values is True
        assert args.no_context is True
        assert args.report_emissions is True
        assert args.fail is True
        assert args.config == "site/"

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as info:
            _build_parser().parse_args(["--version"])
        assert info.value.code == 0
        assert "flowtrace 0.1.0" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as info:
            main([])
        assert info.value.code == 0
        assert "demo" in capsys.readouterr().out


class TestRunDemo:
    """run_demo — end-to-end through the default console sink."""

    def test_completes(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert run_demo(_demo_args("--no-context")) == 0

        out, err = capsys.readouterr()
        lines = out.splitlines()
        assert lines[0] == "FlowTrace-StockStream-DEMO: 🟢 START"
        assert "Value: 150.0" in lines[1]
        assert "COMPLETE" in lines[-1]
        assert "[T:" not in out
        assert "flow_trace_complete" in err

    def test_fails(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert run_demo(_demo_args("--fail", "--hide-values")) == 1

        out, err = capsys.readouterr()
        assert "🔴 ERROR" in out
        assert "NetworkError: Simulated Network Error" in out
        assert "150.0" not in out
        assert "Demo stream failed" in err

    def test_report_emissions(self, capsys: pytest.CaptureFixture[str]) -> None:
        run_demo(_demo_args("--report-emissions"))
        assert capsys.readouterr().err.count("flow_trace_emit") == 3

    def test_config_disables(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (tmp_path / "flowtrace.yaml").write_text("enabled: false\n")
        assert run_demo(_demo_args("--config", str(tmp_path))) == 0
        assert capsys.readouterr().out == ""

    def test_bad_config(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (tmp_path / "flowtrace.yaml").write_text("enabled: maybe\n")
        assert run_demo(_demo_args("--config", str(tmp_path))) == 2
        assert "Config error" in capsys.readouterr().err

    def test_main_exits_with_demo_code(self) -> None:
        with pytest.raises(SystemExit) as info:
            main(["demo", "--interval", "0", "--no-context"])
        assert info.value.code == 0
