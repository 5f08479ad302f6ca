"""
HookPress hook engine

Public API:
    HookRegistry        — action/filter registry and dispatcher
    RegisteredCallback  — read-only view of one registration
    ALL_HOOK            — name of the hook that observes every dispatch
    track_dispatches    — per-context count of actions and filters dispatched
"""

from .registry import ALL_HOOK, DispatchTally, HookRegistry, RegisteredCallback, track_dispatches

__all__ = ["ALL_HOOK", "DispatchTally", "HookRegistry", "RegisteredCallback", "track_dispatches"]
