"""
Admin Dashboard

GET /admin/dashboard → welcome panel sections and dashboard widgets.

The `welcome_panel` action is only fired when something is hooked to it;
callbacks append their sections to the list they receive. Widgets come
from the `dashboard_widgets` filter, which also receives the current user.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from hookpress.hooks.names import FILTER_DASHBOARD_WIDGETS, HOOK_WELCOME_PANEL
from hookpress.hooks.registry import HookRegistry
from hookpress.routes.deps import get_hooks, require_capability

router = APIRouter(tags=["Admin"])


class DashboardResponse(BaseModel):
    welcome_panel: list[Any] | None
    widgets: list[dict[str, Any]]


@router.get("/admin/dashboard", response_model=DashboardResponse)
async def dashboard(
    hooks: HookRegistry = Depends(get_hooks),
    user: Any = Depends(require_capability("read")),
) -> DashboardResponse:
    welcome_panel: list[Any] | None = None
    if hooks.exists(HOOK_WELCOME_PANEL):
        welcome_panel = []
        hooks.dispatch_action(HOOK_WELCOME_PANEL, welcome_panel)

    widgets = hooks.dispatch_filter(FILTER_DASHBOARD_WIDGETS, [], user)
    return DashboardResponse(welcome_panel=welcome_panel, widgets=list(widgets))
