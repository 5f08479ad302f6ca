"""
Route Dependencies

The HookRegistry and PluginRegistry live on `app.state` and are injected
into routes from there.

HookPress has no authentication of its own. The current user comes from
the `determine_current_user` filter (default None) and permission checks
go through the `user_has_cap` filter (default False), so an auth plugin
decides both.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fastapi import Depends, Request

from hookpress.exceptions import AuthorizationError
from hookpress.hooks.names import FILTER_DETERMINE_CURRENT_USER, FILTER_USER_HAS_CAP
from hookpress.hooks.registry import HookRegistry
from hookpress.plugins.registry import PluginRegistry


def get_hooks(request: Request) -> HookRegistry:
    return request.app.state.hooks


def get_plugins(request: Request) -> PluginRegistry:
    return request.app.state.plugins


def get_current_user(request: Request, hooks: HookRegistry = Depends(get_hooks)) -> Any:
    """Resolve the current user through the `determine_current_user` filter."""
    return hooks.dispatch_filter(FILTER_DETERMINE_CURRENT_USER, None, request)


def require_capability(capability: str) -> Callable[..., Any]:
    """
    Dependency factory: allow the request only if `user_has_cap` grants *capability*.

    Usage:
        @router.post("/x", dependencies=[Depends(require_capability("activate_plugins"))])
    """

    def checker(
        user: Any = Depends(get_current_user),
        hooks: HookRegistry = Depends(get_hooks),
    ) -> Any:
        if user is None or not hooks.dispatch_filter(FILTER_USER_HAS_CAP, False, capability, user):
            raise AuthorizationError(f"Missing capability: {capability}")
        return user

    return checker
