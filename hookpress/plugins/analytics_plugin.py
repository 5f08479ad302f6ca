"""
Analytics Plugin

Counts content lifecycle events and publishes the totals as a dashboard
widget.

Hook subscriptions:
  - content.created / updated / deleted / published → increment counter
  - dashboard_widgets (filter)                      → append activity widget
  - activate_analytics                              → reset counters
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING, Any

from hookpress.hooks.names import CONTENT_HOOKS, FILTER_DASHBOARD_WIDGETS, activation_hook
from hookpress.plugins.base import PluginBase, PluginMeta

if TYPE_CHECKING:
    from hookpress.plugins.registry import PluginHooks

logger = logging.getLogger(__name__)

_META = PluginMeta(
    name="analytics",
    version="1.0.0",
    description="Content activity counters shown on the admin dashboard",
)


class AnalyticsPlugin(PluginBase):
    """Content activity counters."""

    def __init__(self) -> None:
        self.counts: Counter[str] = Counter()

    @property
    def meta(self) -> PluginMeta:
        return _META

    def register_hooks(self, hooks: PluginHooks) -> None:
        for hook_name in CONTENT_HOOKS:
            hooks.add(hook_name, _EventCounter(self.counts, hook_name))
        hooks.add(FILTER_DASHBOARD_WIDGETS, self.dashboard_widget)
        hooks.add(activation_hook(self.meta.name), self.reset)

    def reset(self) -> None:
        self.counts.clear()
        logger.debug("AnalyticsPlugin counters reset")

    def dashboard_widget(self, widgets: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return [
            *widgets,
            {
                "id": "analytics_activity",
                "title": "Content activity",
                "data": dict(self.counts),
            },
        ]


class _EventCounter:
    """Callback that increments one counter key per dispatch."""

    def __init__(self, counts: Counter[str], event: str) -> None:
        self.counts = counts
        self.event = event

    def __call__(self, payload: Any = None) -> None:
        self.counts[self.event] += 1
