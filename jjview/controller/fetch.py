"""Fetch flows: default, all remotes, one remote, or one branch."""

from __future__ import annotations

from ..cache import DirtyFlags
from ..dialog import Dialog, GitFetch, GitFetchBranch, SelectItem
from ..jj import JjError
from .base import ActionGroup

DEFAULT_OPTION = "__default__"
ALL_REMOTES_OPTION = "__all_remotes__"
BRANCH_OPTION = "__branch__"

_OPTION_SOURCES = {
    DEFAULT_OPTION: "default remotes",
    ALL_REMOTES_OPTION: "all remotes",
}


class FetchActions(ActionGroup):
    def start(self) -> None:
        """Fetch directly with one remote; otherwise ask where to fetch from."""
        try:
            remotes = self.jj.git_remote_list()
        except JjError:
            remotes = []
        if len(remotes) <= 1:
            self.execute()
            return
        items = [
            SelectItem("Default fetch (jj config)", DEFAULT_OPTION),
            SelectItem("All remotes (including untracked)", ALL_REMOTES_OPTION),
        ]
        items.extend(SelectItem(remote, remote) for remote in remotes)
        items.append(SelectItem("Specific branch...", BRANCH_OPTION))
        self.ctl.open_dialog(Dialog.select_single("Git Fetch", "Select remote to fetch from:", items, None, GitFetch()))

    def execute(self) -> None:
        try:
            output = self.jj.git_fetch()
        except JjError as exc:
            self.ctl.set_error(f"Fetch failed: {exc}")
            return
        self.ctl.mark_dirty_and_refresh_current(DirtyFlags.everything())
        if output.strip():
            self.ctl.notify_success("Fetched from remote")
        else:
            self.ctl.notify_info("Already up to date")

    def execute_with_option(self, option: str) -> None:
        try:
            if option == DEFAULT_OPTION:
                output = self.jj.git_fetch()
            elif option == ALL_REMOTES_OPTION:
                output = self.jj.git_fetch_all_remotes()
            else:
                output = self.jj.git_fetch_remote(option)
        except JjError as exc:
            self.ctl.set_error(f"Fetch failed: {exc}")
            return
        self.ctl.mark_dirty_and_refresh_current(DirtyFlags.everything())
        if output.strip():
            self.ctl.notify_success(f"Fetched from {_OPTION_SOURCES.get(option, option)}")
        else:
            self.ctl.notify_info("Already up to date")

    def start_branch_select(self) -> None:
        try:
            names = self.jj.local_bookmark_names()
        except JjError:
            self.ctl.notify_info("Failed to list bookmarks, fetching all")
            self.execute()
            return
        if not names:
            self.ctl.notify_info("No bookmarks found")
            self.execute()
            return
        items = [SelectItem(name, name) for name in names]
        self.ctl.open_dialog(
            Dialog.select_single("Fetch Branch", "Select branch to fetch:", items, None, GitFetchBranch())
        )

    def execute_branch(self, branch: str) -> None:
        try:
            output = self.jj.git_fetch_branch(branch)
        except JjError as exc:
            self.ctl.set_error(f"Fetch failed: {exc}")
            return
        self.ctl.mark_dirty_and_refresh_current(DirtyFlags.everything())
        if output.strip():
            self.ctl.notify_success(f"Fetched branch '{branch}'")
        else:
            self.ctl.notify_info(f"Branch '{branch}': already up to date")
