"""
Plugin Loader

Handles reading/writing plugin configuration from the JSON file named by
`settings.plugins_config_file` and loading plugins at startup.

Load order:
    1. must-use plugins (always, regardless of the enabled flag)
    2. `muplugins_loaded`
    3. regular plugins whose config has `enabled: true`
    4. `plugins_loaded`
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from hookpress.config import settings
from hookpress.hooks.names import HOOK_MUPLUGINS_LOADED, HOOK_PLUGINS_LOADED

if TYPE_CHECKING:
    from hookpress.plugins.base import PluginBase
    from hookpress.plugins.registry import PluginRegistry

logger = logging.getLogger(__name__)

# ── Config file location ──────────────────────────────────────────────────────
_PLUGINS_CONFIG_FILE = Path(settings.plugins_config_file)

# ── Default plugin config (all built-in plugins enabled) ─────────────────────
_DEFAULT_CONFIG: dict[str, dict[str, Any]] = {
    "formatting": {"enabled": True, "excerpt_length": 55},
    "seo": {"enabled": True, "site_name": "HookPress", "separator": "|"},
    "analytics": {"enabled": True},
}


# ── Config I/O ────────────────────────────────────────────────────────────────


def load_plugins_config() -> dict[str, dict[str, Any]]:
    """
    Load plugin configuration from disk.

    Returns defaults if the file does not exist or cannot be parsed.
    """
    if _PLUGINS_CONFIG_FILE.exists():
        try:
            return json.loads(_PLUGINS_CONFIG_FILE.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Failed to read plugins config: %s", exc)
    return copy.deepcopy(_DEFAULT_CONFIG)


def save_plugins_config(config: dict[str, dict[str, Any]]) -> None:
    """Persist plugin configuration to disk."""
    _PLUGINS_CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    _PLUGINS_CONFIG_FILE.write_text(
        json.dumps(config, indent=2, ensure_ascii=False),
        encoding="utf-8",
    )


def set_plugin_enabled(name: str, enabled: bool) -> dict[str, Any]:
    """Flip the persisted enabled flag of one plugin and return its config slice."""
    all_config = load_plugins_config()
    plugin_config = all_config.get(name, {})
    plugin_config["enabled"] = enabled
    all_config[name] = plugin_config
    save_plugins_config(all_config)
    return plugin_config


# ── Startup initialisation ────────────────────────────────────────────────────


def builtin_plugins() -> list[PluginBase]:
    """
    Instantiate the plugins shipped with HookPress.

    Deferred imports prevent circular imports at module load time.
    """
    from hookpress.plugins.analytics_plugin import AnalyticsPlugin
    from hookpress.plugins.formatting_plugin import FormattingPlugin
    from hookpress.plugins.seo_plugin import SEOPlugin

    return [FormattingPlugin(), SEOPlugin(), AnalyticsPlugin()]


def initialize_plugins(registry: PluginRegistry, plugins: list[PluginBase] | None = None) -> list[str]:
    """
    Register and load plugins in must-use-first order.

    Args:
        registry: Registry to load into; its HookRegistry receives the
                  `muplugins_loaded` and `plugins_loaded` actions.
        plugins:  Plugins to consider; defaults to builtin_plugins().

    Returns:
        Names of the plugins that were loaded, in load order.
    """
    config = load_plugins_config()
    candidates = builtin_plugins() if plugins is None else plugins
    for plugin in candidates:
        registry.register(plugin)

    loaded: list[str] = []
    for plugin in candidates:
        if plugin.meta.must_use:
            registry.load(plugin.meta.name, config.get(plugin.meta.name, {}))
            loaded.append(plugin.meta.name)
    registry.hooks.dispatch_action(HOOK_MUPLUGINS_LOADED)

    for plugin in candidates:
        if plugin.meta.must_use:
            continue
        plugin_config = config.get(plugin.meta.name, {})
        if not plugin_config.get("enabled", False):
            logger.info("Plugin skipped (disabled): %s", plugin.meta.name)
            continue
        registry.load(plugin.meta.name, plugin_config)
        loaded.append(plugin.meta.name)
    registry.hooks.dispatch_action(HOOK_PLUGINS_LOADED)

    logger.info("Plugin initialisation complete: %d plugins loaded", len(loaded))
    return loaded
