"""Command names, flags, and recognized message fragments for ``jj``."""

from __future__ import annotations

JJ_COMMAND = "jj"

NO_COLOR = "--color=never"
NO_GRAPH = "--no-graph"
REPO_PATH = "-R"

ALLOW_NEW = "--allow-new"
ALLOW_PRIVATE = "--allow-private"
ALLOW_EMPTY_DESCRIPTION = "--allow-empty-description"
ALLOW_BACKWARDS = "--allow-backwards"
SKIP_EMPTIED = "--skip-emptied"
DRY_RUN = "--dry-run"

NOT_A_REPO_MARKER = "There is no jj repo"

OP_LOG_LIMIT = 50

DEFAULT_PROTECTED_BOOKMARKS: tuple[str, ...] = ("main", "master", "trunk")
