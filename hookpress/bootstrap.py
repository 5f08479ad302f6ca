"""
Application Bootstrap

Runs the startup action sequence around plugin loading:

    muplugins_loaded → plugins_loaded    (fired by initialize_plugins)
    setup_theme → after_setup_theme → init → wp_loaded

and the matching `shutdown` action plus plugin unloading on exit.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from hookpress.hooks.names import HOOK_SHUTDOWN, STARTUP_HOOKS
from hookpress.plugins.loader import initialize_plugins

if TYPE_CHECKING:
    from hookpress.plugins.base import PluginBase
    from hookpress.plugins.registry import PluginRegistry

logger = logging.getLogger(__name__)


def bootstrap(plugins: PluginRegistry, candidates: list[PluginBase] | None = None) -> list[str]:
    """Load plugins and fire the startup actions. Returns the loaded plugin names."""
    loaded = initialize_plugins(plugins, candidates)
    for hook_name in STARTUP_HOOKS:
        logger.debug("Bootstrap: firing %s", hook_name)
        plugins.hooks.dispatch_action(hook_name)
    logger.info("Bootstrap complete")
    return loaded


def shutdown(plugins: PluginRegistry) -> None:
    """Fire the `shutdown` action, then unload every active plugin."""
    try:
        plugins.hooks.dispatch_action(HOOK_SHUTDOWN)
    finally:
        plugins.unload_all()
    logger.info("Shutdown complete")
