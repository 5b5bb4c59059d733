"""Runtime composition layer for jjview.

Builds the initial state from config and CLI options, loads the first log,
wires controller, key router and renderer into loop callbacks, and starts
the loop.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ..controller import ActionController
from ..input import KeyRouter
from ..jj import JjExecutor
from ..render import build_frame, write_frame
from ..render.highlight import DEFAULT_STYLE
from ..render.views import format_change_row
from ..state import AppState
from ..ui_theme import PLAIN_THEME, UITheme, resolve_theme
from .config import Settings, load_settings, save_preferences
from .loop import RuntimeLoopCallbacks, RuntimeLoopTiming, run_main_loop
from .terminal import TerminalController

logger = logging.getLogger(__name__)

KEY_TIMEOUT_MS = 120


@dataclass(frozen=True)
class AppOptions:
    """Startup options after CLI parsing; ``None`` means use the config value."""

    repo_path: Path | None = None
    revset: str | None = None
    theme: str | None = None
    no_color: bool = False
    preview: bool | None = None
    style: str = DEFAULT_STYLE
    config_path: Path | None = None


def build_state(settings: Settings, options: AppOptions) -> AppState:
    state = AppState()
    state.default_revset = options.revset or settings.default_revset
    state.preview_enabled = settings.preview if options.preview is None else options.preview
    state.protected_bookmarks = settings.protected_bookmarks
    state.log.reversed = settings.log_reversed
    return state


def load_initial_log(state: AppState, jj: JjExecutor) -> None:
    """Load the first log page; engine errors propagate to the CLI."""
    revset = state.default_revset
    changes = jj.log(revset, state.log.reversed)
    state.log.set_changes(changes)
    state.log.current_revset = revset
    if revset:
        state.log.revset_history.append(revset)


def print_log(state: AppState, theme: UITheme = PLAIN_THEME) -> None:
    """Non-interactive output: one log row per line."""
    for change in state.log.changes:
        sys.stdout.write(format_change_row(change, theme) + "\n")


def _make_key_handler(
    state: AppState,
    router: KeyRouter,
    config_path: Path | None,
) -> Callable[[str], None]:
    """Route keys and persist the preview and log-order toggles when they change."""
    saved = (state.preview_enabled, state.log.reversed)

    def handle_key(key: str) -> None:
        nonlocal saved
        router.handle_key(key)
        current = (state.preview_enabled, state.log.reversed)
        if current != saved:
            saved = current
            save_preferences(current[0], current[1], config_path)

    return handle_key


def run_app(options: AppOptions) -> None:
    """Initialize runtime state, wire subsystems, and run the event loop."""
    settings = load_settings(options.config_path)
    theme = resolve_theme(options.theme or settings.theme, no_color=options.no_color)
    syntax_style = None if options.no_color else options.style
    jj = JjExecutor(options.repo_path)
    state = build_state(settings, options)
    load_initial_log(state, jj)
    logger.info("loaded %d log rows", len(state.log.changes))

    if not os.isatty(sys.stdin.fileno()) or not os.isatty(sys.stdout.fileno()):
        print_log(state, theme if os.isatty(sys.stdout.fileno()) else PLAIN_THEME)
        return

    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    terminal = TerminalController(stdin_fd, stdout_fd)
    ctl = ActionController(state, jj, suspend=terminal.suspend)
    router = KeyRouter(ctl)
    ctl.update_preview_if_needed()

    def render(width: int, height: int) -> None:
        write_frame(build_frame(state, theme, width, height, syntax_style), stdout_fd)

    def on_idle() -> bool:
        fetched = ctl.resolve_pending_preview()
        expired = ctl.clear_expired_notification()
        return fetched or expired

    callbacks = RuntimeLoopCallbacks(
        render=render,
        handle_key=_make_key_handler(state, router, options.config_path),
        on_idle=on_idle,
    )
    run_main_loop(state, terminal, stdin_fd, RuntimeLoopTiming(key_timeout_ms=KEY_TIMEOUT_MS), callbacks)
