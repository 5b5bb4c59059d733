"""Shared plumbing for controller action groups."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..jj import JjExecutor
    from ..state import AppState
    from .core import ActionController


class ActionGroup:
    """One domain slice of the controller.

    Groups never keep state of their own; everything lives on ``AppState`` so
    that any group can observe what another one did.
    """

    def __init__(self, ctl: ActionController) -> None:
        self.ctl = ctl

    @property
    def state(self) -> AppState:
        return self.ctl.state

    @property
    def jj(self) -> JjExecutor:
        return self.ctl.jj
