"""
Plugin Registry

PluginRegistry: stores known plugins, tracks which are active, and drives
their lifecycle through the shared HookRegistry.

Each active plugin registers its callbacks through a PluginHooks facade.
The facade remembers every registration so deactivating or unloading the
plugin removes exactly the callbacks it added.

Activation fires, in order: `activate_{name}`, then `activated_plugin`.
Deactivation fires `deactivate_plugin`, `deactivate_{name}`, then
`deactivated_plugin`. Errors raised by hook callbacks propagate.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from hookpress.exceptions import HookPressError, InvalidPluginOperationError, PluginError, PluginNotFoundError
from hookpress.hooks.names import (
    HOOK_ACTIVATED_PLUGIN,
    HOOK_DEACTIVATE_PLUGIN,
    HOOK_DEACTIVATED_PLUGIN,
    activation_hook,
    deactivation_hook,
)

if TYPE_CHECKING:
    from hookpress.hooks.registry import HookRegistry
    from hookpress.plugins.base import PluginBase

logger = logging.getLogger(__name__)


class PluginHooks:
    """
    HookRegistry facade handed to a single plugin.

    add(), remove(), remove_all() and the decorators are recorded against
    the plugin, which only owns the registrations it created;
    everything else (dispatch, exists, introspection) is delegated as-is.
    """

    def __init__(self, hooks: HookRegistry, plugin_name: str) -> None:
        self._hooks = hooks
        self.plugin_name = plugin_name
        self._registered: list[tuple[str, Callable[..., Any], int]] = []

    def __getattr__(self, name: str) -> Any:
        return getattr(self._hooks, name)

    @property
    def registered(self) -> list[tuple[str, Callable[..., Any], int]]:
        return list(self._registered)

    def add(
        self,
        hook_name: str,
        callback: Callable[..., Any],
        priority: int | None = None,
        accepted_args: int | None = None,
    ) -> bool:
        priority = self._hooks.default_priority if priority is None else priority
        # A registration made by core or another plugin stays with its owner.
        owned = not self._hooks.registered_at(hook_name, callback, priority)
        result = self._hooks.add(hook_name, callback, priority, accepted_args)
        if owned:
            self._registered.append((hook_name, callback, priority))
        return result

    def remove(self, hook_name: str, callback: Callable[..., Any], priority: int | None = None) -> bool:
        priority = self._hooks.default_priority if priority is None else priority
        record = (hook_name, callback, priority)
        if record in self._registered:
            self._registered.remove(record)
        return self._hooks.remove(hook_name, callback, priority)

    def remove_all(self, hook_name: str, priority: int | None = None) -> bool:
        self._registered = [
            record
            for record in self._registered
            if not (record[0] == hook_name and (priority is None or record[2] == priority))
        ]
        return self._hooks.remove_all(hook_name, priority)

    def action(
        self, hook_name: str, priority: int | None = None, accepted_args: int | None = None
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.add(hook_name, func, priority, accepted_args)
            return func

        return decorator

    filter = action

    def release(self) -> int:
        """Remove every callback this plugin registered. Returns how many were removed."""
        removed = 0
        for hook_name, callback, priority in reversed(self._registered):
            if self._hooks.remove(hook_name, callback, priority):
                removed += 1
        self._registered.clear()
        return removed


class PluginRegistry:
    """
    In-process registry for HookPress plugins.

    Stores registered plugins by name and, for active plugins, the
    PluginHooks facade holding their registrations.
    """

    def __init__(self, hooks: HookRegistry) -> None:
        self.hooks = hooks
        self._plugins: dict[str, PluginBase] = {}
        self._active: dict[str, PluginHooks] = {}

    # ── Registration ──────────────────────────────────────────────────────────

    def register(self, plugin: PluginBase) -> None:
        """Make a plugin known to the registry without loading it."""
        self._plugins[plugin.meta.name] = plugin
        logger.info("Plugin registered: %s v%s", plugin.meta.name, plugin.meta.version)

    def register_activation_hook(self, name: str, callback: Callable[..., Any]) -> bool:
        """Run *callback* when plugin *name* is activated."""
        return self.hooks.add(activation_hook(name), callback)

    def register_deactivation_hook(self, name: str, callback: Callable[..., Any]) -> bool:
        """Run *callback* when plugin *name* is deactivated."""
        return self.hooks.add(deactivation_hook(name), callback)

    # ── Lookup ────────────────────────────────────────────────────────────────

    def get(self, name: str) -> PluginBase | None:
        """Return the plugin with the given name, or None if not registered."""
        return self._plugins.get(name)

    def get_or_raise(self, name: str) -> PluginBase:
        plugin = self._plugins.get(name)
        if plugin is None:
            raise PluginNotFoundError(name)
        return plugin

    def all_plugins(self) -> list[PluginBase]:
        """Return all registered plugins in registration order."""
        return list(self._plugins.values())

    def active_plugins(self) -> list[PluginBase]:
        """Return active plugins in load order."""
        return [self._plugins[name] for name in self._active]

    def is_registered(self, name: str) -> bool:
        """Return True if a plugin with the given name has been registered."""
        return name in self._plugins

    def is_active(self, name: str) -> bool:
        return name in self._active

    def hooks_for(self, name: str) -> PluginHooks | None:
        """Return the PluginHooks facade of an active plugin."""
        return self._active.get(name)

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def load(self, name: str, config: dict[str, Any] | None = None) -> PluginBase:
        """
        Load a registered plugin: call on_load() and let it register its hooks.

        Raises:
            PluginNotFoundError:          if *name* is not registered.
            InvalidPluginOperationError:  if the plugin is already active.
            PluginError:                  if on_load() or register_hooks() fails.
        """
        plugin = self.get_or_raise(name)
        if name in self._active:
            raise InvalidPluginOperationError(name, "load", "plugin is already active")

        scoped = PluginHooks(self.hooks, name)
        try:
            plugin.on_load(config or {})
            plugin.register_hooks(scoped)
        except HookPressError:
            scoped.release()
            raise
        except Exception as exc:
            scoped.release()
            raise PluginError(name, str(exc)) from exc

        self._active[name] = scoped
        logger.info("Plugin loaded: %s (%d callbacks)", name, len(scoped.registered))
        return plugin

    def activate(self, name: str, config: dict[str, Any] | None = None) -> PluginBase:
        """Load a plugin and fire its activation hooks."""
        if name in self._active:
            raise InvalidPluginOperationError(name, "activate", "plugin is already active")
        plugin = self.load(name, config)
        self.hooks.dispatch_action(activation_hook(name))
        plugin.on_activate()
        self.hooks.dispatch_action(HOOK_ACTIVATED_PLUGIN, name)
        logger.info("Plugin activated: %s", name)
        return plugin

    def deactivate(self, name: str) -> PluginBase:
        """Fire a plugin's deactivation hooks and remove its callbacks."""
        plugin = self.get_or_raise(name)
        if plugin.meta.must_use:
            raise InvalidPluginOperationError(name, "deactivate", "must-use plugins cannot be deactivated")
        if name not in self._active:
            raise InvalidPluginOperationError(name, "deactivate", "plugin is not active")

        self.hooks.dispatch_action(HOOK_DEACTIVATE_PLUGIN, name)
        self.hooks.dispatch_action(deactivation_hook(name))
        plugin.on_deactivate()
        removed = self._active.pop(name).release()
        self.hooks.dispatch_action(HOOK_DEACTIVATED_PLUGIN, name)
        logger.info("Plugin deactivated: %s (%d callbacks removed)", name, removed)
        return plugin

    def unload_all(self) -> None:
        """Unload active plugins in reverse load order."""
        for name in reversed(list(self._active)):
            self._plugins[name].on_unload()
            self._active.pop(name).release()
            logger.info("Plugin unloaded: %s", name)
