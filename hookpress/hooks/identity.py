"""Callback identity helpers used for idempotent registration and removal."""

from __future__ import annotations

import types
from collections.abc import Callable, Hashable
from typing import Any


def callback_key(callback: Callable[..., Any]) -> Hashable:
    """
    Return the key that identifies *callback* within a priority bucket.

    Bound methods are keyed by their target object and underlying function,
    so ``obj.method`` fetched twice yields the same key. Hashable callables
    compare by their own equality; unhashable ones fall back to object
    identity.
    """
    if isinstance(callback, types.MethodType):
        return ("method", id(callback.__self__), callback.__func__)
    try:
        hash(callback)
    except TypeError:
        return ("object", id(callback))
    return callback


def qualified_name(callback: Callable[..., Any]) -> str:
    """Human-readable dotted name of *callback* for logs and introspection."""
    if isinstance(callback, types.MethodType):
        owner = type(callback.__self__)
        return f"{owner.__module__}.{owner.__qualname__}.{callback.__func__.__name__}"
    module = getattr(callback, "__module__", "") or ""
    name = getattr(callback, "__qualname__", None) or type(callback).__qualname__
    if module:
        return f"{module}.{name}"
    return str(name)
