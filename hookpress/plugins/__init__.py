"""
HookPress Plugin System

Public API for the plugin system:
    PluginMeta      — plugin metadata dataclass
    PluginBase      — abstract base class for all plugins
    PluginHooks     — per-plugin HookRegistry facade
    PluginRegistry  — plugin lifecycle on top of a HookRegistry
"""

from .base import PluginBase, PluginMeta
from .registry import PluginHooks, PluginRegistry

__all__ = ["PluginBase", "PluginHooks", "PluginMeta", "PluginRegistry"]
