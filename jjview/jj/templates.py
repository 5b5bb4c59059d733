"""``jj`` template strings whose output the parsers understand.

Every template emits tab-separated fields terminated by a newline.
"""

from __future__ import annotations

LOG_TEMPLATE = (
    'change_id.short(8) ++ "\\t" ++ '
    'commit_id.short(8) ++ "\\t" ++ '
    'author.email() ++ "\\t" ++ '
    'author.timestamp().format("%Y-%m-%dT%H:%M:%S%z") ++ "\\t" ++ '
    'description.first_line() ++ "\\t" ++ '
    'if(current_working_copy, "true", "false") ++ "\\t" ++ '
    'if(empty, "true", "false") ++ "\\t" ++ '
    'bookmarks.map(|b| b.name()).join(",") ++ "\\t" ++ '
    'if(conflict, "true", "false") ++ "\\n"'
)

OP_LOG_TEMPLATE = (
    'self.id().short(12) ++ "\\t" ++ '
    'self.user() ++ "\\t" ++ '
    'self.time().start().ago() ++ "\\t" ++ '
    'self.description().first_line() ++ "\\n"'
)

REDO_PROBE_TEMPLATE = 'id.short() ++ "\\t" ++ description.first_line() ++ "\\n"'

BOOKMARK_LIST_TEMPLATE = 'separate("\\t", name, remote, tracked) ++ "\\n"'

BOOKMARK_INFO_TEMPLATE = (
    'name ++ "\\t" ++ '
    'if(remote, remote, "") ++ "\\t" ++ '
    'if(tracked, "true", "false") ++ "\\t" ++ '
    'if(normal_target, normal_target.change_id().short(8), "") ++ "\\t" ++ '
    'if(normal_target, normal_target.commit_id().short(8), "") ++ "\\t" ++ '
    'if(normal_target, normal_target.description().first_line(), "") ++ "\\n"'
)

EVOLOG_TEMPLATE = (
    'commit.commit_id().short(8) ++ "\\t" ++ '
    'commit.change_id().short(8) ++ "\\t" ++ '
    'commit.author().email() ++ "\\t" ++ '
    'commit.author().timestamp().format("%Y-%m-%d %H:%M:%S") ++ "\\t" ++ '
    'if(commit.empty(), "[empty]", "") ++ "\\t" ++ '
    'commit.description().first_line() ++ "\\n"'
)

DESCRIPTION_TEMPLATE = "description"
CONFLICT_TEMPLATE = 'if(conflict, "true", "false")'
IMMUTABLE_TEMPLATE = 'if(immutable, "true", "false")'
CHANGE_LOOKUP_TEMPLATE = 'change_id.short(8) ++ "\\t" ++ description.first_line() ++ "\\n"'
