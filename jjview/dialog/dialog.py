"""Modal confirm / select dialogs.

A dialog only tracks cursor and selection state and turns keys into a
``DialogResult``; it never calls ``jj``. The controller owns what happens
after completion, keyed by the dialog's callback.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .callbacks import DialogCallback

CONFIRM_KEYS = frozenset({"y", "Y", "ENTER"})
CANCEL_CONFIRM_KEYS = frozenset({"n", "N", "ESC"})
CANCEL_SELECT_KEYS = frozenset({"ESC", "q"})
DOWN_KEYS = frozenset({"j", "DOWN"})
UP_KEYS = frozenset({"k", "UP"})
TOGGLE_KEY = " "


class DialogKind(Enum):
    CONFIRM = "confirm"
    SELECT = "select"
    SELECT_SINGLE = "select_single"


@dataclass
class SelectItem:
    label: str
    value: str
    selected: bool = False


@dataclass(frozen=True)
class DialogResult:
    """``confirmed`` with the chosen values, or a cancellation."""

    confirmed: bool
    values: tuple[str, ...] = ()

    @classmethod
    def confirm(cls, values: list[str] | tuple[str, ...] = ()) -> DialogResult:
        return cls(True, tuple(values))

    @classmethod
    def cancel(cls) -> DialogResult:
        return cls(False)


@dataclass
class Dialog:
    kind: DialogKind
    title: str
    message: str
    callback: DialogCallback
    detail: str | None = None
    items: list[SelectItem] = field(default_factory=list)
    cursor: int = 0

    @classmethod
    def confirm(cls, title: str, message: str, detail: str | None, callback: DialogCallback) -> Dialog:
        return cls(DialogKind.CONFIRM, title, message, callback, detail)

    @classmethod
    def select(
        cls,
        title: str,
        message: str,
        items: list[SelectItem],
        detail: str | None,
        callback: DialogCallback,
    ) -> Dialog:
        """Multi-toggle list; Enter confirms the checked subset."""
        return cls(DialogKind.SELECT, title, message, callback, detail, list(items))

    @classmethod
    def select_single(
        cls,
        title: str,
        message: str,
        items: list[SelectItem],
        detail: str | None,
        callback: DialogCallback,
    ) -> Dialog:
        """Single-choice list; Enter confirms the item under the cursor."""
        return cls(DialogKind.SELECT_SINGLE, title, message, callback, detail, list(items))

    def handle_key(self, key: str) -> DialogResult | None:
        """Apply one key; return a result when the dialog completes."""
        if self.kind is DialogKind.CONFIRM:
            if key in CONFIRM_KEYS:
                return DialogResult.confirm()
            if key in CANCEL_CONFIRM_KEYS:
                return DialogResult.cancel()
            return None
        return self._handle_select_key(key)

    def _handle_select_key(self, key: str) -> DialogResult | None:
        if key in DOWN_KEYS:
            if self.cursor < len(self.items) - 1:
                self.cursor += 1
            return None
        if key in UP_KEYS:
            if self.cursor > 0:
                self.cursor -= 1
            return None
        if key == TOGGLE_KEY:
            if self.kind is DialogKind.SELECT and 0 <= self.cursor < len(self.items):
                item = self.items[self.cursor]
                item.selected = not item.selected
            return None
        if key == "ENTER":
            if self.kind is DialogKind.SELECT_SINGLE:
                if 0 <= self.cursor < len(self.items):
                    return DialogResult.confirm([self.items[self.cursor].value])
                return DialogResult.cancel()
            chosen = [item.value for item in self.items if item.selected]
            return DialogResult.confirm(chosen) if chosen else DialogResult.cancel()
        if key in CANCEL_SELECT_KEYS:
            return DialogResult.cancel()
        return None
