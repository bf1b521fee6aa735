"""flowtrace CLI — flowtrace demo.

Entry point for the ``flowtrace`` command-line interface.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the flowtrace CLI."""
    parser = argparse.ArgumentParser(
        prog="flowtrace",
        description="Lifecycle tracing for async streams.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # flowtrace demo
    demo_parser = subparsers.add_parser(
        "demo",
        help="Trace a simulated price ticker",
    )
    demo_parser.add_argument("--tag", default="StockStream-DEMO", help="Trace tag")
    demo_parser.add_argument(
        "--interval", type=float, default=0.5, help="Seconds between prices",
    )
    demo_parser.add_argument(
        "--hide-values", action="store_true", help="Log [HIDDEN] instead of values",
    )
    demo_parser.add_argument(
        "--no-context", action="store_true", help="Omit the [T: ...] annotation",
    )
    demo_parser.add_argument(
        "--report-emissions", action="store_true", help="Report every value to analytics",
    )
    demo_parser.add_argument(
        "--fail", action="store_true", help="End the ticker with a network error",
    )
    demo_parser.add_argument(
        "--config", default=None, help="Directory to read flowtrace settings from",
    )

    return parser


def _get_version() -> str:
    """Get the package version."""
    from flowtrace import __version__

    return __version__


def _print_event(name: str, params: dict[str, Any]) -> None:
    print(f"  analytics {name}: {params}", file=sys.stderr)


async def _run_demo(args: argparse.Namespace) -> list[float]:
    from flowtrace._demo import ticker
    from flowtrace.tracer import trace

    stream = trace(
        ticker(interval=args.interval, fail=args.fail),
        args.tag,
        log_values=not args.hide_values,
        report_emissions=args.report_emissions,
    )
    return [price async for price in stream]


def run_demo(args: argparse.Namespace) -> int:
    """Configure tracing from ``args`` and run the ticker.  Returns the exit code."""
    from flowtrace._demo import NetworkError
    from flowtrace._errors import ConfigError
    from flowtrace.config_loader import configure_from
    from flowtrace.settings import config, initialize

    initialize(show_context_info=not args.no_context)
    if args.config is not None:
        try:
            configure_from(Path(args.config))
        except ConfigError as exc:
            print(f"  Config error: {exc}", file=sys.stderr)
            return 2
    config.analytics_sink = _print_event

    try:
        asyncio.run(_run_demo(args))
    except NetworkError as exc:
        print(f"  Demo stream failed: {exc}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "demo":
        sys.exit(run_demo(args))


if __name__ == "__main__":
    main()
