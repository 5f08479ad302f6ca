"""
Hook Introspection Routes

GET /api/v1/hooks         → every hook with callbacks, in dispatch order
GET /api/v1/hooks/{name}  → one hook (empty callback list if unknown)

Requires the `manage_options` capability.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from hookpress.hooks.registry import HookRegistry
from hookpress.routes.deps import get_hooks, require_capability

router = APIRouter(tags=["Hooks"], dependencies=[Depends(require_capability("manage_options"))])


class CallbackResponse(BaseModel):
    name: str
    priority: int
    accepted_args: int


class HookResponse(BaseModel):
    name: str
    did_action: int
    did_filter: int
    callbacks: list[CallbackResponse]


def _build_response(hooks: HookRegistry, name: str) -> HookResponse:
    return HookResponse(
        name=name,
        did_action=hooks.did_action(name),
        did_filter=hooks.did_filter(name),
        callbacks=[
            CallbackResponse(name=cb.name, priority=cb.priority, accepted_args=cb.accepted_args)
            for cb in hooks.callbacks(name)
        ],
    )


@router.get("/", response_model=list[HookResponse])
async def list_hooks(hooks: HookRegistry = Depends(get_hooks)) -> list[HookResponse]:
    return [_build_response(hooks, name) for name in hooks.hook_names()]


@router.get("/{name}", response_model=HookResponse)
async def get_hook(name: str, hooks: HookRegistry = Depends(get_hooks)) -> HookResponse:
    return _build_response(hooks, name)
