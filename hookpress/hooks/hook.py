"""
Hook: priority buckets for a single hook name

A Hook owns its callbacks grouped into integer priority buckets. Buckets
are visited in ascending priority; within a bucket, entries run in the
order they were added.

Each in-flight dispatch holds its own DispatchCursor over the *live*
bucket structure rather than a copy of it:

  - Entries removed while any dispatch of this hook is running are only
    tombstoned (``removed = True``) so indices stay stable; they are
    physically dropped once the last cursor closes.
  - Entries appended to the bucket a cursor is walking are visited by that
    cursor when it reaches their index.
  - Entries added at a priority lower than the cursor's current bucket are
    never visited by that cursor; higher priorities are.

Hook does no locking of its own. HookRegistry serialises every call into
it with the registry lock.
"""

from __future__ import annotations

from bisect import bisect_right, insort
from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
from typing import Any

from hookpress.hooks.identity import callback_key


@dataclass(eq=False)
class HookEntry:
    """
    One registered callback.

    Attributes:
        callback:      The callable to invoke.
        priority:      Bucket key; lower runs first.
        accepted_args: Number of leading dispatch arguments passed on.
        sequence:      Registry-wide registration counter value.
        key:           Identity key from callback_key().
        removed:       Tombstone flag set by a removal during dispatch.
    """

    callback: Callable[..., Any]
    priority: int
    accepted_args: int
    sequence: int
    key: Hashable = field(repr=False)
    removed: bool = False

    def invoke(self, args: tuple[Any, ...]) -> Any:
        return self.callback(*args[: self.accepted_args])


class DispatchCursor:
    """Position of one in-flight dispatch: current bucket and next index."""

    __slots__ = ("priority", "index")

    def __init__(self) -> None:
        self.priority: int | None = None
        self.index = 0


class Hook:
    """Ordered callbacks registered under one hook name."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._buckets: dict[int, list[HookEntry]] = {}
        self._priorities: list[int] = []
        self._live: dict[tuple[Hashable, int], HookEntry] = {}
        self._cursors: list[DispatchCursor] = []
        self._needs_compaction = False

    def __len__(self) -> int:
        return len(self._live)

    def __repr__(self) -> str:
        return f"Hook({self.name!r}, callbacks={len(self)}, priorities={self.priorities})"

    # ── Queries ───────────────────────────────────────────────────────────────

    @property
    def priorities(self) -> list[int]:
        """Priorities that currently hold at least one live entry."""
        return sorted({p for _, p in self._live})

    @property
    def dispatching(self) -> bool:
        return bool(self._cursors)

    def priority_of(self, callback: Callable[..., Any]) -> int | None:
        """Lowest priority at which *callback* is registered, or None."""
        key = callback_key(callback)
        found = [p for k, p in self._live if k == key]
        return min(found) if found else None

    def has(self, callback: Callable[..., Any], priority: int) -> bool:
        return (callback_key(callback), priority) in self._live

    def entries(self) -> list[HookEntry]:
        """Live entries in dispatch order."""
        return [
            entry
            for priority in self._priorities
            for entry in self._buckets[priority]
            if not entry.removed
        ]

    # ── Mutation ──────────────────────────────────────────────────────────────

    def add(self, callback: Callable[..., Any], priority: int, accepted_args: int, sequence: int) -> bool:
        """Append *callback* to its bucket. Returns False if it was already there."""
        key = callback_key(callback)
        if (key, priority) in self._live:
            return False

        entry = HookEntry(
            callback=callback,
            priority=priority,
            accepted_args=accepted_args,
            sequence=sequence,
            key=key,
        )
        bucket = self._buckets.get(priority)
        if bucket is None:
            bucket = self._buckets[priority] = []
            insort(self._priorities, priority)
        bucket.append(entry)
        self._live[(key, priority)] = entry
        return True

    def remove(self, callback: Callable[..., Any], priority: int) -> bool:
        entry = self._live.pop((callback_key(callback), priority), None)
        if entry is None:
            return False
        self._retire([entry])
        return True

    def clear(self, priority: int | None = None) -> bool:
        """Remove every entry, or every entry of one bucket. Returns True if any were removed."""
        doomed = [
            self._live.pop(slot)
            for slot in list(self._live)
            if priority is None or slot[1] == priority
        ]
        if not doomed:
            return False
        self._retire(doomed)
        return True

    def _retire(self, entries: list[HookEntry]) -> None:
        for entry in entries:
            entry.removed = True
        if self._cursors:
            self._needs_compaction = True
        else:
            self._compact()

    def _compact(self) -> None:
        for priority in list(self._priorities):
            bucket = [entry for entry in self._buckets[priority] if not entry.removed]
            if bucket:
                self._buckets[priority] = bucket
            else:
                del self._buckets[priority]
                self._priorities.remove(priority)
        self._needs_compaction = False

    # ── Iteration ─────────────────────────────────────────────────────────────

    def open_cursor(self) -> DispatchCursor:
        cursor = DispatchCursor()
        self._cursors.append(cursor)
        return cursor

    def close_cursor(self, cursor: DispatchCursor) -> None:
        self._cursors.remove(cursor)
        if not self._cursors and self._needs_compaction:
            self._compact()

    def advance(self, cursor: DispatchCursor) -> HookEntry | None:
        """Return the next live entry for *cursor*, or None when the pass is over."""
        while True:
            if cursor.priority is not None:
                bucket = self._buckets[cursor.priority]
                while cursor.index < len(bucket):
                    entry = bucket[cursor.index]
                    cursor.index += 1
                    if not entry.removed:
                        return entry
                position = bisect_right(self._priorities, cursor.priority)
            else:
                position = 0

            if position >= len(self._priorities):
                return None
            cursor.priority = self._priorities[position]
            cursor.index = 0
