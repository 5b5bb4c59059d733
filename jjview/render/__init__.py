"""Rendering: per-view line builders composed into full ANSI frames.

Builders only read state; nothing here talks to ``jj``.
"""

from .ansi import clip_ansi_line, display_width, fit_ansi_line, selected_with_ansi, strip_ansi
from .help import HELP_SECTIONS, help_line_count, help_lines
from .screen import body_rows, build_frame, build_status_line, write_frame
from .views import bookmark_row_index, preview_visible, status_header_rows

__all__ = [
    "HELP_SECTIONS",
    "body_rows",
    "bookmark_row_index",
    "build_frame",
    "build_status_line",
    "clip_ansi_line",
    "display_width",
    "fit_ansi_line",
    "help_line_count",
    "help_lines",
    "preview_visible",
    "selected_with_ansi",
    "status_header_rows",
    "strip_ansi",
    "write_frame",
]
