"""
Generic Request (GET/POST) Handler

Form submissions from themes and plugins are routed to actions:

    admin_init                       always, first
    admin_post_{action}              authenticated request with an action
    admin_post                       authenticated request without one
    admin_post_nopriv_{action}       anonymous request with an action
    admin_post_nopriv                anonymous request without one

Handlers receive the Request as their first argument.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from hookpress.hooks.names import HOOK_ADMIN_INIT, admin_post_hook
from hookpress.hooks.registry import HookRegistry
from hookpress.routes.deps import get_current_user, get_hooks

router = APIRouter(tags=["Admin"])
logger = logging.getLogger(__name__)


class AdminPostResponse(BaseModel):
    action: str
    hook: str
    handled: bool


async def _read_action(request: Request) -> str:
    action = request.query_params.get("action")
    if action is None and request.method == "POST":
        form = await request.form()
        action = form.get("action")
    return str(action or "")


@router.api_route("/admin-post", methods=["GET", "POST"], response_model=AdminPostResponse)
async def admin_post(
    request: Request,
    hooks: HookRegistry = Depends(get_hooks),
    user: Any = Depends(get_current_user),
) -> AdminPostResponse:
    """Dispatch the admin-post action named by the `action` parameter."""
    action = await _read_action(request)
    hooks.dispatch_action(HOOK_ADMIN_INIT)

    hook_name = admin_post_hook(action, authenticated=user is not None)
    handled = bool(hooks.exists(hook_name))
    if not handled:
        logger.info("admin-post: no handler for %s", hook_name)
    hooks.dispatch_action(hook_name, request)

    return AdminPostResponse(action=action, hook=hook_name, handled=handled)
