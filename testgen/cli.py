"""CLI entrypoints for testgen commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .logging import configure_logging
from .orchestrator import Orchestrator


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


def _add_component_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        help="Component file, relative to the project root.",
    )
    parser.add_argument(
        "--root",
        default=".",
        help="Project root directory (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="testgen",
        description="Generate, run and repair React component tests.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the JSON-RPC tool server on stdin/stdout.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)

    http_parser = subparsers.add_parser(
        "serve-http",
        help="Run the HTTP service (requires the 'service' extra).",
    )
    _add_verbose_option(http_parser, suppress_default=True)
    http_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    http_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Print the extracted component model as JSON.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    _add_component_arguments(analyze_parser)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate a test suite and repair it until it passes.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_component_arguments(generate_parser)
    generate_parser.add_argument(
        "--output",
        default=None,
        help="Custom output path for the test file, relative to the project root.",
    )
    generate_parser.add_argument(
        "--no-verify",
        action="store_true",
        help="Write the generated suite without running it.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for testgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "serve":
        from .service.stdio import serve_stdio

        serve_stdio()
    elif args.command == "serve-http":
        from .service.app import run_service

        try:
            run_service(host=args.host, port=args.port)
        except RuntimeError as exc:
            parser.exit(1, f"{exc}\n")
    elif args.command == "analyze":
        orchestrator = Orchestrator()
        try:
            model = orchestrator.analyze(args.path, args.root)
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        print(json.dumps(model.to_dict(), indent=2))
    elif args.command == "generate":
        orchestrator = Orchestrator()
        try:
            outcome = orchestrator.generate_tests(
                args.path,
                args.root,
                args.output,
                verify=not bool(getattr(args, "no_verify", False)),
            )
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except RuntimeError as exc:
            parser.exit(1, f"testgen generate failed: {exc}\nRun with --verbose for more details.\n")
        print(outcome.report())
        if outcome.terminal is not None and not outcome.passed:
            parser.exit(2)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
