"""Public runtime entry points.

Groups the interactive bootstrap (``run_app``) and the lower-level event
loop contracts used by tests and composition code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .app import AppOptions
    from .loop import RuntimeLoopCallbacks, RuntimeLoopTiming


def run_app(*args, **kwargs):
    """Lazily import the app entrypoint to keep ``import jjview.runtime`` light."""
    from .app import run_app as _run_app

    return _run_app(*args, **kwargs)


def run_main_loop(*args, **kwargs):
    """Lazily import the loop runner to avoid package-import cycles."""
    from .loop import run_main_loop as _run_main_loop

    return _run_main_loop(*args, **kwargs)


def __getattr__(name: str):
    if name in {"RuntimeLoopCallbacks", "RuntimeLoopTiming"}:
        from . import loop as _loop

        return getattr(_loop, name)
    if name == "AppOptions":
        from .app import AppOptions as _AppOptions

        return _AppOptions
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "AppOptions",
    "RuntimeLoopCallbacks",
    "RuntimeLoopTiming",
    "run_app",
    "run_main_loop",
]
