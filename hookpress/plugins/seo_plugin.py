"""
SEO Plugin

Filter subscriptions:
  - document_title  → append "<separator> <site_name>"
  - head_tags       → add description and Open Graph meta tags for the
                      content being rendered (accepts 2 args)

Action subscriptions:
  - content.published / content.deleted → log sitemap invalidation signal
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from hookpress.hooks.names import (
    FILTER_DOCUMENT_TITLE,
    FILTER_HEAD_TAGS,
    HOOK_CONTENT_DELETED,
    HOOK_CONTENT_PUBLISHED,
)
from hookpress.plugins.base import PluginBase, PluginMeta

if TYPE_CHECKING:
    from hookpress.plugins.registry import PluginHooks

logger = logging.getLogger(__name__)

_META = PluginMeta(
    name="seo",
    version="1.0.0",
    description="Document titles, meta description and Open Graph tags",
    config_schema={
        "site_name": {"type": "string", "default": "HookPress"},
        "separator": {"type": "string", "default": "|"},
    },
)


class SEOPlugin(PluginBase):
    """Title and head-tag filters for rendered content."""

    def __init__(self) -> None:
        self._config: dict[str, Any] = {}

    @property
    def meta(self) -> PluginMeta:
        return _META

    def on_load(self, config: dict[str, Any]) -> None:
        self._config = config
        logger.debug("SEOPlugin loaded (site_name=%s)", config.get("site_name", "HookPress"))

    def register_hooks(self, hooks: PluginHooks) -> None:
        hooks.add(FILTER_DOCUMENT_TITLE, self.document_title, priority=20)
        hooks.add(FILTER_HEAD_TAGS, self.head_tags, accepted_args=2)
        hooks.add(HOOK_CONTENT_PUBLISHED, self.invalidate_sitemap)
        hooks.add(HOOK_CONTENT_DELETED, self.invalidate_sitemap)

    def document_title(self, title: str) -> str:
        site_name = self._config.get("site_name", "HookPress")
        separator = self._config.get("separator", "|")
        if not title:
            return site_name
        return f"{title} {separator} {site_name}"

    def head_tags(self, tags: list[dict[str, str]], content: dict[str, Any] | None = None) -> list[dict[str, str]]:
        if not content:
            return tags
        tags = list(tags)
        description = content.get("excerpt") or content.get("description")
        if description:
            tags.append({"name": "description", "content": description})
        if content.get("title"):
            tags.append({"property": "og:title", "content": content["title"]})
        return tags

    def invalidate_sitemap(self, payload: dict[str, Any]) -> None:
        logger.debug("SEOPlugin: sitemap cache invalidation signalled (content_id=%s)", payload.get("content_id"))
