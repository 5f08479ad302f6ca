"""
Formatting Plugin

Must-use plugin carrying the default text filters every site relies on.

Filter subscriptions:
  - the_title    → trim and collapse whitespace (priority 10)
  - the_excerpt  → cut to `excerpt_length` words, adding " [...]" when cut
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from hookpress.hooks.names import FILTER_THE_EXCERPT, FILTER_THE_TITLE
from hookpress.plugins.base import PluginBase, PluginMeta

if TYPE_CHECKING:
    from hookpress.plugins.registry import PluginHooks

logger = logging.getLogger(__name__)

EXCERPT_MORE = " [...]"

_META = PluginMeta(
    name="formatting",
    version="1.0.0",
    description="Default title and excerpt formatting filters",
    must_use=True,
    config_schema={
        "excerpt_length": {"type": "integer", "default": 55},
    },
)


class FormattingPlugin(PluginBase):
    """Default text filters, loaded before every other plugin."""

    def __init__(self) -> None:
        self.excerpt_length = 55

    @property
    def meta(self) -> PluginMeta:
        return _META

    def on_load(self, config: dict[str, Any]) -> None:
        self.excerpt_length = int(config.get("excerpt_length", 55))
        logger.debug("FormattingPlugin loaded (excerpt_length=%d)", self.excerpt_length)

    def register_hooks(self, hooks: PluginHooks) -> None:
        hooks.add(FILTER_THE_TITLE, self.normalize_title)
        hooks.add(FILTER_THE_EXCERPT, self.trim_excerpt)

    def normalize_title(self, title: str) -> str:
        return " ".join(str(title).split())

    def trim_excerpt(self, excerpt: str) -> str:
        words = str(excerpt).split()
        if len(words) <= self.excerpt_length:
            return " ".join(words)
        return " ".join(words[: self.excerpt_length]) + EXCERPT_MORE
