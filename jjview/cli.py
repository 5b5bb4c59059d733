"""Command-line front door for jjview.

Parses CLI options, sets up logging, and dispatches into the interactive
runtime. Startup failures from ``jj`` end the program with a message.
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

from .jj import JjError, JjNotFound, NotARepository
from .runtime import run_app
from .runtime.app import AppOptions
from .runtime.logs import configure_logging, resolve_log_file
from .render.highlight import DEFAULT_STYLE
from .ui_theme import available_theme_names


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jjview",
        description="Terminal UI for the jj version control system.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Repository path. Defaults to current directory.")
    parser.add_argument("-r", "--revset", default=None, help="Revset shown in the log on startup.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--style", default=DEFAULT_STYLE, help="Pygments style name for blame highlighting.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--no-preview", action="store_true", help="Start with the diff preview hidden.")
    parser.add_argument("--log-file", default=None, help="Write debug logs to FILE (or set JJVIEW_LOG).")
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level, including every jj command.")
    return parser


def options_from_args(args: argparse.Namespace, default_path: Path | None = None) -> AppOptions:
    if default_path is None:
        default_path = Path.cwd()
    path = Path(args.path) if args.path else default_path
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    return AppOptions(
        repo_path=path,
        revset=args.revset,
        theme=args.theme,
        no_color=args.no_color,
        preview=False if args.no_preview else None,
        style=args.style,
    )


def main(argv: Sequence[str] | None = None, default_path: Path | None = None) -> None:
    """Parse CLI arguments and launch jjview on a repository.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    args = build_parser().parse_args(argv)
    configure_logging(resolve_log_file(args.log_file), logging.DEBUG if args.debug else logging.INFO)
    options = options_from_args(args, default_path)
    try:
        run_app(options)
    except (NotARepository, JjNotFound) as exc:
        raise SystemExit(str(exc)) from exc
    except JjError as exc:
        raise SystemExit(f"jj error: {exc}") from exc
