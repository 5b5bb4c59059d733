from __future__ import annotations

import unittest

from jjview.cache import PREVIEW_CACHE_CAPACITY, DirtyFlags, PreviewCache, PreviewCacheEntry
from jjview.model import Change, DiffContent


def _entry(change_id: str, commit_id: str = "c0") -> PreviewCacheEntry:
    return PreviewCacheEntry(change_id=change_id, commit_id=commit_id, content=DiffContent())


class DirtyFlagsTests(unittest.TestCase):
    def test_presets_always_include_op_log(self) -> None:
        for flags in (
            DirtyFlags.log_only(),
            DirtyFlags.status_only(),
            DirtyFlags.log_and_status(),
            DirtyFlags.log_and_bookmarks(),
            DirtyFlags.everything(),
        ):
            self.assertTrue(flags.op_log)

    def test_preset_values_are_exact(self) -> None:
        self.assertEqual(DirtyFlags(), DirtyFlags(log=False, status=False, op_log=False, bookmarks=False))
        self.assertEqual(DirtyFlags.log_only(), DirtyFlags(log=True, status=False, op_log=True, bookmarks=False))
        self.assertEqual(DirtyFlags.status_only(), DirtyFlags(log=False, status=True, op_log=True, bookmarks=False))
        self.assertEqual(DirtyFlags.log_and_status(), DirtyFlags(log=True, status=True, op_log=True, bookmarks=False))
        self.assertEqual(
            DirtyFlags.log_and_bookmarks(), DirtyFlags(log=True, status=False, op_log=True, bookmarks=True)
        )
        self.assertEqual(DirtyFlags.everything(), DirtyFlags(log=True, status=True, op_log=True, bookmarks=True))

    def test_merge_is_union(self) -> None:
        flags = DirtyFlags.log_only()
        flags.merge(DirtyFlags.status_only())

        self.assertEqual(flags, DirtyFlags(log=True, status=True, op_log=True, bookmarks=False))

    def test_any(self) -> None:
        self.assertFalse(DirtyFlags().any())
        self.assertTrue(DirtyFlags(bookmarks=True).any())


class PreviewCacheTests(unittest.TestCase):
    def test_default_capacity_is_eight(self) -> None:
        self.assertEqual(PreviewCache().capacity, PREVIEW_CACHE_CAPACITY)
        self.assertEqual(PREVIEW_CACHE_CAPACITY, 8)

    def test_evicts_least_recently_used(self) -> None:
        cache = PreviewCache(capacity=3)
        for change_id in ("a", "b", "c"):
            cache.insert(_entry(change_id))

        cache.touch("a")
        cache.insert(_entry("d"))

        self.assertEqual(cache.keys(), ["c", "a", "d"])
        self.assertNotIn("b", cache)

    def test_peek_does_not_promote(self) -> None:
        cache = PreviewCache(capacity=2)
        cache.insert(_entry("a"))
        cache.insert(_entry("b"))

        self.assertIsNotNone(cache.peek("a"))
        cache.insert(_entry("c"))

        self.assertEqual(cache.keys(), ["b", "c"])

    def test_reinsert_replaces_and_promotes(self) -> None:
        cache = PreviewCache(capacity=2)
        cache.insert(_entry("a", "old"))
        cache.insert(_entry("b"))
        cache.insert(_entry("a", "new"))

        self.assertEqual(cache.keys(), ["b", "a"])
        self.assertEqual(cache.peek("a").commit_id, "new")
        self.assertEqual(len(cache), 2)

    def test_touch_missing_returns_false(self) -> None:
        self.assertFalse(PreviewCache().touch("zzz"))

    def test_validate_drops_stale_and_refreshes_bookmarks(self) -> None:
        cache = PreviewCache()
        cache.insert(_entry("keep", "c1"))
        cache.insert(_entry("rewritten", "c2"))
        cache.insert(_entry("gone", "c3"))
        changes = [
            Change(change_id="keep", commit_id="c1", bookmarks=["main"]),
            Change(change_id="rewritten", commit_id="c9"),
            Change.graph_only("│"),
        ]

        cache.validate(changes)

        self.assertEqual(cache.keys(), ["keep"])
        self.assertEqual(cache.peek("keep").bookmarks, ["main"])

    def test_validate_ignores_graph_only_match(self) -> None:
        cache = PreviewCache()
        cache.insert(_entry("x", "c1"))

        cache.validate([Change(change_id="x", commit_id="c1", is_graph_only=True)])

        self.assertNotIn("x", cache)

    def test_validate_is_idempotent(self) -> None:
        cache = PreviewCache()
        for change_id in ("a", "b", "c"):
            cache.insert(_entry(change_id, "c1"))
        changes = [Change(change_id="a", commit_id="c1"), Change(change_id="c", commit_id="c2")]

        cache.validate(changes)
        once = cache.keys()
        cache.validate(changes)

        self.assertEqual(cache.keys(), once)
        self.assertEqual(once, ["a"])

    def test_remove_and_clear(self) -> None:
        cache = PreviewCache()
        cache.insert(_entry("a"))
        cache.insert(_entry("b"))

        cache.remove("a")
        cache.remove("missing")
        self.assertEqual(cache.keys(), ["b"])
        cache.clear()
        self.assertEqual(len(cache), 0)


if __name__ == "__main__":
    unittest.main()
