"""CLI entrypoints for repoprobe commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .logging import configure_logging
from .toolbox import TOOLS, Toolbox


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repoprobe",
        description="Inspect and edit a project tree through sandboxed tools.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--root",
        default=None,
        help="Project root (defaults to $REPOPROBE_PROJECT_ROOT, then the current directory).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the MCP server over stdio.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)

    http_parser = subparsers.add_parser(
        "http",
        help="Run the HTTP service with uvicorn.",
    )
    _add_verbose_option(http_parser, suppress_default=True)
    http_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    http_parser.add_argument("--port", type=int, default=8000, help="Port to bind.")

    call_parser = subparsers.add_parser(
        "call",
        help="Run a single tool and print its JSON result.",
    )
    _add_verbose_option(call_parser, suppress_default=True)
    call_parser.add_argument("tool", choices=sorted(TOOLS), help="Tool name.")
    call_parser.add_argument(
        "--args",
        dest="arguments",
        default="{}",
        help="Tool arguments as a JSON object.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for repoprobe commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(args.root)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "serve":
        from .server import run_server

        run_server(config)
    elif args.command == "http":
        from .service import run_service

        run_service(args.host, args.port, toolbox=Toolbox(config))
    elif args.command == "call":
        try:
            arguments = json.loads(args.arguments)
        except json.JSONDecodeError as exc:
            parser.exit(1, f"--args must be a JSON object: {exc}\n")
        if not isinstance(arguments, dict):
            parser.exit(1, "--args must be a JSON object\n")
        result = Toolbox(config).dispatch(args.tool, arguments)
        print(json.dumps(result.to_dict(), indent=2))
        if not result.ok:
            sys.exit(1)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
