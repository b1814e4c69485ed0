"""CLI entrypoints for pushmanifest commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError
from .logging import configure_logging
from .orchestrator import Orchestrator
from .resolver import ResolutionError


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
        "default": argparse.SUPPRESS if suppress_default else False,
    }
    parser.add_argument("-v", "--verbose", **kwargs)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pushmanifest",
        description="Generate HTTP/2 push manifests from a project's HTML, CSS and JS imports.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Analyze the project and write push-manifest.json.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Project root or config file (defaults to current directory).",
    )
    generate_parser.add_argument(
        "--out",
        dest="out_path",
        default=None,
        help="Manifest path relative to the project root (default: push-manifest.json).",
    )
    generate_parser.add_argument(
        "--base-path",
        default=None,
        help="Prefix applied to every URL in the manifest.",
    )
    generate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the manifest instead of writing it.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for pushmanifest commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    orchestrator = Orchestrator()

    if args.command == "generate":
        dry_run = bool(getattr(args, "dry_run", False))
        try:
            outcome = orchestrator.run_generate(
                args.path,
                out_path=args.out_path,
                base_path=args.base_path,
                dry_run=dry_run,
            )
        except (ConfigError, ResolutionError, FileNotFoundError, NotADirectoryError, ValueError) as exc:
            parser.exit(1, f"pushmanifest generate failed: {exc}\nRun with --verbose for more details.\n")
        if dry_run:
            print(outcome.contents)
        else:
            print(f"Push manifest written to {_relativize(outcome.path)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
