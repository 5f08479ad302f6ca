"""
Plugin Administration Routes

All routes require the `activate_plugins` capability.

GET  /api/v1/plugins                    → list all registered plugins
GET  /api/v1/plugins/{name}             → get single plugin by name
POST /api/v1/plugins/{name}/activate    → load plugin, fire activation hooks
POST /api/v1/plugins/{name}/deactivate  → fire deactivation hooks, remove its callbacks

The enabled flag is persisted to the plugins config file so the next
startup loads the same set.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from hookpress.plugins.base import PluginBase  # noqa: TC001
from hookpress.plugins.loader import load_plugins_config, set_plugin_enabled
from hookpress.plugins.registry import PluginRegistry
from hookpress.routes.deps import get_plugins, require_capability

router = APIRouter(tags=["Plugins"], dependencies=[Depends(require_capability("activate_plugins"))])
logger = logging.getLogger(__name__)


# ── Pydantic schemas ───────────────────────────────────────────────────────────


class PluginResponse(BaseModel):
    name: str
    version: str
    description: str
    author: str
    must_use: bool
    active: bool
    callbacks: int
    config: dict[str, Any]
    config_schema: dict[str, Any]


# ── Helpers ────────────────────────────────────────────────────────────────────


def _build_response(plugin: PluginBase, registry: PluginRegistry, all_config: dict[str, Any]) -> PluginResponse:
    scoped = registry.hooks_for(plugin.meta.name)
    return PluginResponse(
        name=plugin.meta.name,
        version=plugin.meta.version,
        description=plugin.meta.description,
        author=plugin.meta.author,
        must_use=plugin.meta.must_use,
        active=registry.is_active(plugin.meta.name),
        callbacks=len(scoped.registered) if scoped is not None else 0,
        config=all_config.get(plugin.meta.name, {}),
        config_schema=plugin.meta.config_schema,
    )


# ── Routes ─────────────────────────────────────────────────────────────────────


@router.get("/", response_model=list[PluginResponse])
async def list_plugins(registry: PluginRegistry = Depends(get_plugins)) -> list[PluginResponse]:
    """List all registered plugins with their status and configuration."""
    all_config = load_plugins_config()
    return [_build_response(p, registry, all_config) for p in registry.all_plugins()]


@router.get("/{name}", response_model=PluginResponse)
async def get_plugin(name: str, registry: PluginRegistry = Depends(get_plugins)) -> PluginResponse:
    """Get a single plugin by name."""
    plugin = registry.get_or_raise(name)
    return _build_response(plugin, registry, load_plugins_config())


@router.post("/{name}/activate", response_model=PluginResponse)
async def activate_plugin(name: str, registry: PluginRegistry = Depends(get_plugins)) -> PluginResponse:
    """Activate a plugin by name."""
    registry.get_or_raise(name)
    plugin = registry.activate(name, load_plugins_config().get(name, {}))
    set_plugin_enabled(name, True)
    logger.info("Plugin enabled: %s", name)
    return _build_response(plugin, registry, load_plugins_config())


@router.post("/{name}/deactivate", response_model=PluginResponse)
async def deactivate_plugin(name: str, registry: PluginRegistry = Depends(get_plugins)) -> PluginResponse:
    """Deactivate a plugin by name. Must-use plugins are refused."""
    plugin = registry.deactivate(name)
    set_plugin_enabled(name, False)
    logger.info("Plugin disabled: %s", name)
    return _build_response(plugin, registry, load_plugins_config())
