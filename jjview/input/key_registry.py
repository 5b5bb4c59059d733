"""Per-view key tables."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

KeyHandler = Callable[[], object]


@dataclass(frozen=True)
class KeyComboBinding:
    """One or more key tokens bound to a single action."""

    combos: tuple[str, ...]
    handler: KeyHandler


class KeyComboRegistry:
    """Exact-match key dispatch table for one view or mode."""

    def __init__(self) -> None:
        self._handlers: dict[str, KeyHandler] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._handlers

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for the same keys."""
        for combo in binding.combos:
            self._handlers[combo] = binding.handler
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        for binding in bindings:
            self.register_binding(binding)
        return self

    def bound_keys(self) -> list[str]:
        return list(self._handlers)

    def dispatch(self, key: str) -> bool:
        """Run the handler bound to ``key`` and report whether it took the key.

        A handler declines a key by returning ``False``; any other return
        value counts as handled.
        """
        handler = self._handlers.get(key)
        if handler is None:
            return False
        return handler() is not False
