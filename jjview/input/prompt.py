"""Footer text prompts: revset, search, describe, bookmark names, commit."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..state import PromptKind, PromptState

if TYPE_CHECKING:
    from ..controller import ActionController

REVSET_LABEL = "Revset: "
SEARCH_LABEL = "Search: "
BOOKMARK_LABEL = "Bookmark name: "


def open_prompt(ctl: ActionController, kind: PromptKind, label: str, buffer: str = "", target: str | None = None) -> None:
    ctl.state.prompt = PromptState(kind, label, buffer, target)


def _delete_word(buffer: str) -> str:
    trimmed = buffer.rstrip()
    cut = trimmed.rfind(" ")
    return trimmed[: cut + 1] if cut >= 0 else ""


def handle_prompt_key(ctl: ActionController, key: str) -> None:
    """Edit the active prompt; Enter submits and Esc cancels."""
    state = ctl.state
    prompt = state.prompt
    if prompt is None:
        return
    if key == "ESC":
        cancel_prompt(ctl)
    elif key == "ENTER":
        state.prompt = None
        submit_prompt(ctl, prompt)
    elif key == "BACKSPACE":
        prompt.buffer = prompt.buffer[:-1]
    elif key == "CTRL_U":
        prompt.buffer = ""
    elif key == "CTRL_W":
        prompt.buffer = _delete_word(prompt.buffer)
    elif len(key) == 1 and key.isprintable():
        prompt.buffer += key


def cancel_prompt(ctl: ActionController) -> None:
    prompt = ctl.state.prompt
    ctl.state.prompt = None
    if prompt is not None and prompt.kind is PromptKind.RENAME:
        ctl.state.bookmarks.rename_from = None


def submit_prompt(ctl: ActionController, prompt: PromptState) -> None:
    """Run the action a finished prompt was opened for."""
    text = prompt.buffer
    kind = prompt.kind
    if kind is PromptKind.REVSET:
        ctl.navigation.apply_revset(text)
    elif kind is PromptKind.SEARCH:
        query = text.strip()
        if query:
            ctl.navigation.search(query)
        else:
            ctl.state.log.last_search_query = None
    elif kind is PromptKind.DESCRIBE and prompt.target is not None:
        ctl.changes.describe(prompt.target, text)
    elif kind is PromptKind.BOOKMARK_NAME and prompt.target is not None:
        ctl.bookmarks.execute_create(prompt.target, text)
    elif kind is PromptKind.RENAME and prompt.target is not None:
        ctl.bookmarks.execute_rename(prompt.target, text)
    elif kind is PromptKind.COMMIT:
        if text.strip():
            ctl.changes.commit(text.strip())
        else:
            ctl.notify_warning("Commit message cannot be empty")
