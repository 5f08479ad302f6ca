"""
Hook iteration unit tests

Exercises hookpress.hooks.hook.Hook directly: bucket bookkeeping,
tombstones and compaction, and cursor movement over a live structure.
"""

from __future__ import annotations

from hookpress.hooks.hook import Hook
from hookpress.hooks.identity import callback_key, qualified_name


def _drain(hook, cursor):
    out = []
    while True:
        entry = hook.advance(cursor)
        if entry is None:
            return out
        out.append(entry.callback)


def _named(label):
    def cb():
        return label

    cb.__name__ = cb.__qualname__ = label
    return cb


class TestBuckets:
    def test_new_hook_is_empty(self):
        hook = Hook("h")
        assert len(hook) == 0
        assert hook.priorities == []
        assert hook.entries() == []

    def test_add_creates_sorted_buckets(self):
        hook = Hook("h")
        for priority in (30, 10, 20):
            hook.add(_named(str(priority)), priority, 1, priority)
        assert hook.priorities == [10, 20, 30]
        assert hook._priorities == [10, 20, 30]

    def test_add_duplicate_returns_false(self):
        hook = Hook("h")
        cb = _named("cb")
        assert hook.add(cb, 10, 1, 1) is True
        assert hook.add(cb, 10, 1, 2) is False
        assert len(hook) == 1

    def test_priority_of(self):
        hook = Hook("h")
        cb = _named("cb")
        hook.add(cb, 40, 1, 1)
        hook.add(cb, 7, 1, 2)
        assert hook.priority_of(cb) == 7
        assert hook.priority_of(_named("other")) is None

    def test_remove_without_cursor_compacts(self):
        hook = Hook("h")
        cb = _named("cb")
        hook.add(cb, 10, 1, 1)
        assert hook.remove(cb, 10) is True
        assert hook._buckets == {}
        assert hook._priorities == []

    def test_clear_single_priority(self):
        hook = Hook("h")
        a, b = _named("a"), _named("b")
        hook.add(a, 10, 1, 1)
        hook.add(b, 20, 1, 2)
        assert hook.clear(10) is True
        assert [e.callback for e in hook.entries()] == [b]
        assert hook.clear(10) is False

    def test_repr_mentions_name(self):
        assert "Hook('init'" in repr(Hook("init"))


class TestTombstones:
    def test_remove_with_open_cursor_tombstones(self):
        hook = Hook("h")
        a, b = _named("a"), _named("b")
        hook.add(a, 10, 1, 1)
        hook.add(b, 10, 1, 2)

        cursor = hook.open_cursor()
        hook.remove(b, 10)
        assert len(hook) == 1
        assert [e.callback for e in hook._buckets[10]] == [a, b]
        assert hook._buckets[10][1].removed is True
        assert [e.callback for e in hook.entries()] == [a]

        hook.close_cursor(cursor)
        assert [e.callback for e in hook._buckets[10]] == [a]

    def test_emptied_bucket_dropped_on_close(self):
        hook = Hook("h")
        a = _named("a")
        hook.add(a, 10, 1, 1)
        cursor = hook.open_cursor()
        hook.remove(a, 10)
        assert 10 in hook._buckets
        assert hook.priorities == []
        hook.close_cursor(cursor)
        assert hook._buckets == {}

    def test_compaction_waits_for_last_cursor(self):
        hook = Hook("h")
        a = _named("a")
        hook.add(a, 10, 1, 1)
        outer = hook.open_cursor()
        inner = hook.open_cursor()
        hook.remove(a, 10)
        hook.close_cursor(inner)
        assert 10 in hook._buckets
        assert hook.dispatching is True
        hook.close_cursor(outer)
        assert hook._buckets == {}
        assert hook.dispatching is False


class TestCursor:
    def test_walks_in_priority_then_insertion_order(self):
        hook = Hook("h")
        a, b, c = _named("a"), _named("b"), _named("c")
        hook.add(c, 20, 1, 1)
        hook.add(a, 10, 1, 2)
        hook.add(b, 10, 1, 3)
        cursor = hook.open_cursor()
        assert _drain(hook, cursor) == [a, b, c]
        hook.close_cursor(cursor)

    def test_empty_hook_yields_nothing(self):
        hook = Hook("h")
        cursor = hook.open_cursor()
        assert hook.advance(cursor) is None

    def test_exhausted_cursor_stays_exhausted(self):
        hook = Hook("h")
        hook.add(_named("a"), 10, 1, 1)
        cursor = hook.open_cursor()
        _drain(hook, cursor)
        assert hook.advance(cursor) is None

    def test_lower_priority_added_mid_walk_skipped(self):
        hook = Hook("h")
        a, late, low = _named("a"), _named("late"), _named("low")
        hook.add(a, 10, 1, 1)
        hook.add(late, 30, 1, 2)
        cursor = hook.open_cursor()
        assert hook.advance(cursor).callback is a
        hook.add(low, 5, 1, 3)
        assert _drain(hook, cursor) == [late]

    def test_higher_priority_added_mid_walk_visited(self):
        hook = Hook("h")
        a, mid = _named("a"), _named("mid")
        hook.add(a, 10, 1, 1)
        cursor = hook.open_cursor()
        assert hook.advance(cursor).callback is a
        hook.add(mid, 15, 1, 2)
        assert _drain(hook, cursor) == [mid]

    def test_append_to_current_bucket_visited(self):
        hook = Hook("h")
        a, b = _named("a"), _named("b")
        hook.add(a, 10, 1, 1)
        cursor = hook.open_cursor()
        assert hook.advance(cursor).callback is a
        hook.add(b, 10, 1, 2)
        assert _drain(hook, cursor) == [b]

    def test_independent_cursors(self):
        hook = Hook("h")
        a, b = _named("a"), _named("b")
        hook.add(a, 10, 1, 1)
        hook.add(b, 10, 1, 2)
        outer = hook.open_cursor()
        assert hook.advance(outer).callback is a
        inner = hook.open_cursor()
        assert _drain(hook, inner) == [a, b]
        hook.close_cursor(inner)
        assert _drain(hook, outer) == [b]


class TestIdentity:
    def test_bound_method_key_is_stable(self):
        class Obj:
            def m(self):
                pass

        obj = Obj()
        assert callback_key(obj.m) == callback_key(obj.m)
        assert callback_key(obj.m) != callback_key(Obj().m)

    def test_function_key_is_function(self):
        def f():
            pass

        assert callback_key(f) is f

    def test_qualified_name_of_method(self):
        class Obj:
            def m(self):
                pass

        assert qualified_name(Obj().m).endswith("Obj.m")

    def test_qualified_name_of_callable_instance(self):
        class Handler:
            def __call__(self):
                pass

        assert qualified_name(Handler()).endswith("Handler")
