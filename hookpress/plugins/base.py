"""
Plugin Base Classes

PluginMeta: declarative metadata for a plugin (name, version, must-use flag, config schema).
PluginBase: abstract base class all plugins must subclass.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from hookpress.plugins.registry import PluginHooks


@dataclass
class PluginMeta:
    """
    Declarative metadata describing a plugin.

    Attributes:
        name:          Machine-readable slug, e.g. "seo", "analytics".
        version:       Semver string, e.g. "1.0.0".
        description:   Human-readable description shown in admin UI.
        author:        Plugin author (defaults to "HookPress Core Team").
        must_use:      Must-use plugins load before all others, ignore the
                       enabled flag and cannot be deactivated.
        config_schema: JSON Schema fragments describing configurable options
                       (used by admin UI for form generation).
    """

    name: str
    version: str
    description: str
    author: str = "HookPress Core Team"
    must_use: bool = False
    config_schema: dict[str, Any] = field(default_factory=dict)


class PluginBase(ABC):
    """
    Abstract base class for all HookPress plugins.

    Subclasses must implement the `meta` property and usually override
    `register_hooks` to attach their callbacks. All other lifecycle methods
    have default no-op implementations so subclasses only override what
    they need.
    """

    @property
    @abstractmethod
    def meta(self) -> PluginMeta:
        """Return the plugin's metadata."""
        ...

    def on_load(self, config: dict[str, Any]) -> None:  # noqa: B027
        """
        Called once when the plugin is loaded, with its persisted config dict.

        Override to perform one-time initialisation (e.g. store config,
        warm caches).
        """

    def register_hooks(self, hooks: PluginHooks) -> None:  # noqa: B027
        """
        Attach the plugin's actions and filters.

        Callbacks added through *hooks* are recorded against the plugin and
        removed again when it is deactivated or unloaded.
        """

    def on_activate(self) -> None:  # noqa: B027
        """Called after the plugin's activation hook has fired."""

    def on_deactivate(self) -> None:  # noqa: B027
        """Called after the plugin's deactivation hook has fired."""

    def on_unload(self) -> None:  # noqa: B027
        """
        Called when the application shuts down.

        Override to release resources (e.g. close connections).
        """
