"""Pure parsers turning ``jj`` command output into model records."""

from .annotation import parse_annotation
from .bookmark import jumpable_bookmarks, parse_bookmark_info_list, parse_bookmark_list, untracked_remote_bookmarks
from .diff import (
    parse_diff_body,
    parse_diff_body_git,
    parse_diff_body_stat,
    parse_show,
    parse_show_git,
    parse_show_stat,
)
from .evolog import parse_evolog
from .log import parse_log, parse_log_lenient
from .operation import parse_op_log
from .push import parse_push_dry_run
from .resolve import parse_resolve_list
from .status import parse_status

__all__ = [
    "jumpable_bookmarks",
    "parse_annotation",
    "parse_bookmark_info_list",
    "parse_bookmark_list",
    "parse_diff_body",
    "parse_diff_body_git",
    "parse_diff_body_stat",
    "parse_evolog",
    "parse_log",
    "parse_log_lenient",
    "parse_op_log",
    "parse_push_dry_run",
    "parse_resolve_list",
    "parse_show",
    "parse_show_git",
    "parse_show_stat",
    "untracked_remote_bookmarks",
]
