"""
Hook Registry

HookRegistry: constructed, explicitly passed table of hook names to
priority-ordered callbacks, with action and filter dispatch.

  - Actions:  dispatch_action(name, *args) invokes every callback and
              discards return values.
  - Filters:  dispatch_filter(name, value, *args) threads ``value`` through
              every callback and returns the final value.

Callbacks receive only their first ``accepted_args`` dispatch arguments.
Exceptions raised by callbacks are not caught: they abort the dispatch
(and any outer dispatch) and reach the caller unchanged. The dispatch
stack is always unwound on the way out.

Callbacks registered on the special hook ``all`` run before the callbacks
of every dispatched hook and receive the hook name followed by the full
argument list.
"""

from __future__ import annotations

import logging
import threading
import warnings
from collections import Counter
from collections.abc import Callable, Iterator, Sequence
from contextlib import closing, contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any

from hookpress.config import settings
from hookpress.exceptions import InvalidArgumentError
from hookpress.hooks.hook import Hook, HookEntry
from hookpress.hooks.identity import qualified_name

logger = logging.getLogger(__name__)

ALL_HOOK = "all"


@dataclass
class DispatchTally:
    """Actions and filters dispatched inside one track_dispatches() block."""

    actions: int = 0
    filters: int = 0


_tally_var: ContextVar[DispatchTally | None] = ContextVar("dispatch_tally", default=None)


@contextmanager
def track_dispatches() -> Iterator[DispatchTally]:
    """
    Count dispatches made in the current context while the block runs.

    The tally follows the context: asyncio tasks and threadpool calls
    started from inside the block are counted, other threads are not.
    """
    tally = DispatchTally()
    token = _tally_var.set(tally)
    try:
        yield tally
    finally:
        _tally_var.reset(token)


@dataclass(frozen=True)
class RegisteredCallback:
    """Read-only view of a registration, returned by HookRegistry.callbacks()."""

    hook_name: str
    callback: Callable[..., Any]
    name: str
    priority: int
    accepted_args: int
    sequence: int


class _DispatchState(threading.local):
    def __init__(self) -> None:
        self.stack: list[str] = []


class HookRegistry:
    """
    Registry of action and filter callbacks.

    One instance is built per application (or per test) and handed to
    every collaborator that registers or dispatches hooks.

    add/remove and cursor movement are serialised by a re-entrant lock so
    the registry can be shared by a threaded server; callbacks themselves
    run outside the lock. The dispatch stack is tracked per thread.
    """

    def __init__(self, default_priority: int | None = None, default_accepted_args: int | None = None) -> None:
        self.default_priority = settings.default_priority if default_priority is None else default_priority
        self.default_accepted_args = (
            settings.default_accepted_args if default_accepted_args is None else default_accepted_args
        )
        _validate_priority(self.default_priority)
        _validate_accepted_args(self.default_accepted_args)

        self._hooks: dict[str, Hook] = {}
        self._lock = threading.RLock()
        self._sequence = 0
        self._state = _DispatchState()
        self._action_counts: Counter[str] = Counter()
        self._filter_counts: Counter[str] = Counter()

    # ── Registration ──────────────────────────────────────────────────────────

    def add(
        self,
        hook_name: str,
        callback: Callable[..., Any],
        priority: int | None = None,
        accepted_args: int | None = None,
    ) -> bool:
        """
        Register *callback* on *hook_name*.

        Registering an equal callback again at the same priority is a no-op
        and leaves the existing registration where it is.

        Args:
            hook_name:     Non-empty hook name.
            callback:      Any callable.
            priority:      Lower runs first (default 10).
            accepted_args: Leading dispatch arguments passed to the callback (default 1).

        Returns:
            True.

        Raises:
            InvalidArgumentError: on an empty hook name or a malformed argument.
        """
        _validate_hook_name(hook_name)
        if not callable(callback):
            raise InvalidArgumentError("Hook callback must be callable", argument="callback")
        priority = self.default_priority if priority is None else priority
        accepted_args = self.default_accepted_args if accepted_args is None else accepted_args
        _validate_priority(priority)
        _validate_accepted_args(accepted_args)

        with self._lock:
            hook = self._hooks.get(hook_name)
            if hook is None:
                hook = self._hooks[hook_name] = Hook(hook_name)
            self._sequence += 1
            added = hook.add(callback, priority, accepted_args, self._sequence)

        if added:
            logger.debug("Hook added: %s -> %s (priority=%d)", hook_name, qualified_name(callback), priority)
        return True

    def remove(self, hook_name: str, callback: Callable[..., Any], priority: int | None = None) -> bool:
        """Unregister *callback* from *hook_name* at *priority*. Returns whether it was registered."""
        priority = self.default_priority if priority is None else priority
        with self._lock:
            hook = self._hooks.get(hook_name)
            removed = hook is not None and hook.remove(callback, priority)

        if removed:
            logger.debug("Hook removed: %s -> %s (priority=%d)", hook_name, qualified_name(callback), priority)
        return removed

    def remove_all(self, hook_name: str, priority: int | None = None) -> bool:
        """Unregister every callback on *hook_name*, or only those at *priority*."""
        with self._lock:
            hook = self._hooks.get(hook_name)
            removed = hook is not None and hook.clear(priority)

        if removed:
            logger.debug("Hook cleared: %s (priority=%s)", hook_name, "all" if priority is None else priority)
        return removed

    def action(
        self, hook_name: str, priority: int | None = None, accepted_args: int | None = None
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator form of add()."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.add(hook_name, func, priority, accepted_args)
            return func

        return decorator

    # Filters share the action table.
    filter = action

    # ── Queries ───────────────────────────────────────────────────────────────

    def exists(self, hook_name: str, callback: Callable[..., Any] | None = None) -> bool | int:
        """
        Check for registrations on *hook_name*.

        Without *callback*, returns whether the hook has any callbacks.
        With *callback*, returns the lowest priority it is registered at, or
        False. Note that priority 0 is falsy: compare with ``is not False``.
        """
        with self._lock:
            hook = self._hooks.get(hook_name)
            if callback is None:
                return hook is not None and len(hook) > 0
            if hook is None:
                return False
            priority = hook.priority_of(callback)
        return False if priority is None else priority

    def registered_at(self, hook_name: str, callback: Callable[..., Any], priority: int) -> bool:
        """Whether *callback* is registered on *hook_name* at exactly *priority*."""
        _validate_hook_name(hook_name)
        _validate_priority(priority)
        with self._lock:
            hook = self._hooks.get(hook_name)
            return hook is not None and hook.has(callback, priority)

    def hook_names(self) -> list[str]:
        """Names of all hooks that currently have callbacks, sorted."""
        with self._lock:
            return sorted(name for name, hook in self._hooks.items() if len(hook))

    def callbacks(self, hook_name: str) -> list[RegisteredCallback]:
        """Live registrations of *hook_name* in dispatch order."""
        with self._lock:
            hook = self._hooks.get(hook_name)
            entries = hook.entries() if hook is not None else []
        return [
            RegisteredCallback(
                hook_name=hook_name,
                callback=entry.callback,
                name=qualified_name(entry.callback),
                priority=entry.priority,
                accepted_args=entry.accepted_args,
                sequence=entry.sequence,
            )
            for entry in entries
        ]

    def did_action(self, hook_name: str) -> int:
        """Number of times *hook_name* has been dispatched as an action."""
        return self._action_counts[hook_name]

    def did_filter(self, hook_name: str) -> int:
        """Number of times *hook_name* has been dispatched as a filter."""
        return self._filter_counts[hook_name]

    # ── Dispatch stack ────────────────────────────────────────────────────────

    @property
    def stack(self) -> tuple[str, ...]:
        """Hook names currently being dispatched on this thread, outermost first."""
        return tuple(self._state.stack)

    def current(self) -> str | None:
        """Name of the innermost hook being dispatched, or None."""
        stack = self._state.stack
        return stack[-1] if stack else None

    def doing(self, hook_name: str | None = None) -> bool:
        """Whether *hook_name* (or, if None, any hook) is being dispatched."""
        if hook_name is None:
            return bool(self._state.stack)
        return hook_name in self._state.stack

    # ── Dispatch ──────────────────────────────────────────────────────────────

    def dispatch_action(self, hook_name: str, *args: Any) -> None:
        """Invoke every callback on *hook_name*; return values are discarded."""
        with self._lock:
            self._action_counts[hook_name] += 1
            tally = _tally_var.get()
            if tally is not None:
                tally.actions += 1
            hook, all_hook = self._resolve(hook_name)
        if hook is None and all_hook is None:
            return

        self._state.stack.append(hook_name)
        try:
            if all_hook is not None:
                self._run_all(all_hook, (hook_name, *args))
            if hook is not None:
                with closing(self._walk(hook)) as entries:
                    for entry in entries:
                        entry.invoke(args)
        finally:
            self._state.stack.pop()

    def dispatch_filter(self, hook_name: str, value: Any, *args: Any) -> Any:
        """Pass *value* through every callback on *hook_name* and return the result."""
        with self._lock:
            self._filter_counts[hook_name] += 1
            tally = _tally_var.get()
            if tally is not None:
                tally.filters += 1
            hook, all_hook = self._resolve(hook_name)
        if hook is None and all_hook is None:
            return value

        self._state.stack.append(hook_name)
        try:
            if all_hook is not None:
                self._run_all(all_hook, (hook_name, value, *args))
            if hook is not None:
                with closing(self._walk(hook)) as entries:
                    for entry in entries:
                        value = entry.invoke((value, *args))
        finally:
            self._state.stack.pop()
        return value

    def dispatch_action_deprecated(
        self,
        hook_name: str,
        args: Sequence[Any],
        version: str,
        replacement: str | None = None,
        message: str | None = None,
    ) -> None:
        """dispatch_action() that warns registered callbacks the hook is deprecated."""
        if not self.exists(hook_name):
            return
        _warn_deprecated_hook(hook_name, version, replacement, message)
        self.dispatch_action(hook_name, *args)

    def dispatch_filter_deprecated(
        self,
        hook_name: str,
        args: Sequence[Any],
        version: str,
        replacement: str | None = None,
        message: str | None = None,
    ) -> Any:
        """dispatch_filter() that warns registered callbacks the hook is deprecated."""
        if not args:
            raise InvalidArgumentError("Deprecated filter dispatch needs a value to filter", argument="args")
        if not self.exists(hook_name):
            return args[0]
        _warn_deprecated_hook(hook_name, version, replacement, message)
        return self.dispatch_filter(hook_name, *args)

    # ── Internals ─────────────────────────────────────────────────────────────

    def _resolve(self, hook_name: str) -> tuple[Hook | None, Hook | None]:
        hook = self._hooks.get(hook_name)
        if hook is not None and not len(hook):
            hook = None
        if hook_name == ALL_HOOK:
            return hook, None
        all_hook = self._hooks.get(ALL_HOOK)
        if all_hook is not None and not len(all_hook):
            all_hook = None
        return hook, all_hook

    def _walk(self, hook: Hook) -> Iterator[HookEntry]:
        with self._lock:
            cursor = hook.open_cursor()
        try:
            while True:
                with self._lock:
                    entry = hook.advance(cursor)
                if entry is None:
                    return
                yield entry
        finally:
            with self._lock:
                hook.close_cursor(cursor)

    def _run_all(self, all_hook: Hook, args: tuple[Any, ...]) -> None:
        with closing(self._walk(all_hook)) as entries:
            for entry in entries:
                entry.callback(*args)


def _validate_hook_name(hook_name: Any) -> None:
    if not isinstance(hook_name, str) or not hook_name:
        raise InvalidArgumentError("Hook name must be a non-empty string", argument="hook_name")


def _validate_priority(priority: Any) -> None:
    if isinstance(priority, bool) or not isinstance(priority, int):
        raise InvalidArgumentError("Hook priority must be an integer", argument="priority")


def _validate_accepted_args(accepted_args: Any) -> None:
    if isinstance(accepted_args, bool) or not isinstance(accepted_args, int) or accepted_args < 0:
        raise InvalidArgumentError("accepted_args must be a non-negative integer", argument="accepted_args")


def _warn_deprecated_hook(hook_name: str, version: str, replacement: str | None, message: str | None) -> None:
    text = f"Hook '{hook_name}' is deprecated since version {version}"
    text += f"; use '{replacement}' instead." if replacement else " with no alternative available."
    if message:
        text += f" {message}"
    warnings.warn(text, DeprecationWarning, stacklevel=3)
