"""Parsers for ``jj bookmark list`` output.

Two-field rows are local bookmarks, three-field rows are remote ones. The
richer info template adds the target change for jump and move flows.
"""

from __future__ import annotations

from ...model import Bookmark, BookmarkInfo

GIT_REMOTE = "git"


def _tracked(value: str) -> bool:
    return value.strip() == "true"


def parse_bookmark_list(output: str) -> list[Bookmark]:
    """Parse ``separate("\\t", name, remote, tracked)`` rows.

    ``separate`` drops empty fields, so local bookmarks produce two fields
    and remote bookmarks three. Rows of any other shape are skipped.
    """
    bookmarks: list[Bookmark] = []
    for raw_line in output.splitlines():
        line = raw_line.rstrip("\r")
        if not line.strip():
            continue
        fields = line.split("\t")
        if len(fields) == 2:
            bookmarks.append(Bookmark(name=fields[0], remote=None, is_tracked=_tracked(fields[1])))
        elif len(fields) == 3:
            bookmarks.append(Bookmark(name=fields[0], remote=fields[1], is_tracked=_tracked(fields[2])))
    return bookmarks


def parse_bookmark_info_list(output: str) -> list[BookmarkInfo]:
    """Parse six-field info rows, dropping the engine-internal ``@git`` remote."""
    infos: list[BookmarkInfo] = []
    for raw_line in output.splitlines():
        line = raw_line.rstrip("\r")
        if not line.strip():
            continue
        fields = line.split("\t")
        if len(fields) < 3:
            continue
        fields += [""] * (6 - len(fields))
        name, remote, tracked, change_id, commit_id, description = fields[:6]
        if not name:
            continue
        remote_name = remote or None
        if remote_name == GIT_REMOTE:
            continue
        infos.append(
            BookmarkInfo(
                bookmark=Bookmark(name=name, remote=remote_name, is_tracked=_tracked(tracked)),
                change_id=change_id or None,
                commit_id=commit_id or None,
                description=description or None,
            )
        )
    return infos


def untracked_remote_bookmarks(bookmarks: list[Bookmark]) -> list[Bookmark]:
    """Return remote entries with no tracked counterpart, for the track flow."""
    return [bookmark for bookmark in bookmarks if bookmark.is_untracked_remote and bookmark.remote != GIT_REMOTE]


def jumpable_bookmarks(infos: list[BookmarkInfo]) -> list[BookmarkInfo]:
    """Return entries with a resolvable change id, for the jump flow."""
    return [info for info in infos if info.is_jumpable]
