"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the views and chrome. Blame syntax colors come
from Pygments and are a separate setting.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    reverse: str
    dim: str
    title: str
    change_id: str
    commit_id: str
    author: str
    timestamp: str
    bookmark: str
    working_copy: str
    conflict: str
    empty: str
    graph: str
    diff_header: str
    diff_added: str
    diff_deleted: str
    status_added: str
    status_modified: str
    status_deleted: str
    status_renamed: str
    notify_success: str
    notify_info: str
    notify_warning: str
    error: str
    help_heading: str
    help_key: str
    dialog_border: str
    dialog_title: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    reverse="\033[7m",
    dim="\033[2m",
    title="\033[1;38;5;81m",
    change_id="\033[1;38;5;170m",
    commit_id="\033[38;5;110m",
    author="\033[38;5;179m",
    timestamp="\033[38;5;109m",
    bookmark="\033[1;38;5;141m",
    working_copy="\033[1;38;5;42m",
    conflict="\033[1;38;5;196m",
    empty="\033[2;38;5;250m",
    graph="\033[38;5;244m",
    diff_header="\033[1;38;5;229m",
    diff_added="\033[38;5;42m",
    diff_deleted="\033[38;5;203m",
    status_added="\033[38;5;42m",
    status_modified="\033[38;5;214m",
    status_deleted="\033[38;5;203m",
    status_renamed="\033[38;5;81m",
    notify_success="\033[38;5;42m",
    notify_info="\033[38;5;81m",
    notify_warning="\033[38;5;214m",
    error="\033[1;38;5;196m",
    help_heading="\033[1;38;5;81m",
    help_key="\033[38;5;229m",
    dialog_border="\033[38;5;45m",
    dialog_title="\033[1;38;5;45m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    reverse="\033[7m",
    dim="\033[2;38;5;110m",
    title="\033[1;38;5;45m",
    change_id="\033[1;38;5;45m",
    commit_id="\033[38;5;117m",
    author="\033[38;5;153m",
    timestamp="\033[38;5;73m",
    bookmark="\033[1;38;5;39m",
    working_copy="\033[1;38;5;84m",
    conflict="\033[1;38;5;203m",
    empty="\033[2;38;5;110m",
    graph="\033[38;5;31m",
    diff_header="\033[1;38;5;153m",
    diff_added="\033[38;5;84m",
    diff_deleted="\033[38;5;210m",
    status_added="\033[38;5;84m",
    status_modified="\033[38;5;215m",
    status_deleted="\033[38;5;210m",
    status_renamed="\033[38;5;45m",
    notify_success="\033[38;5;84m",
    notify_info="\033[38;5;45m",
    notify_warning="\033[38;5;215m",
    error="\033[1;38;5;203m",
    help_heading="\033[1;38;5;45m",
    help_key="\033[38;5;153m",
    dialog_border="\033[38;5;39m",
    dialog_title="\033[1;38;5;39m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="\033[0m",
    reverse="\033[7m",
    dim="",
    title="",
    change_id="",
    commit_id="",
    author="",
    timestamp="",
    bookmark="",
    working_copy="",
    conflict="",
    empty="",
    graph="",
    diff_header="",
    diff_added="",
    diff_deleted="",
    status_added="",
    status_modified="",
    status_deleted="",
    status_renamed="",
    notify_success="",
    notify_info="",
    notify_warning="",
    error="",
    help_heading="",
    help_key="",
    dialog_border="",
    dialog_title="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
