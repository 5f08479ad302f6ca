"""
Hook Name Constants

Centralised list of the hook names the HookPress shell dispatches.
Startup and admin hooks keep the snake_case names plugins already know;
content lifecycle hooks follow the `category.action` convention.
"""

from __future__ import annotations

# ── Startup sequence ──────────────────────────────────────────────────────────
HOOK_MUPLUGINS_LOADED = "muplugins_loaded"
HOOK_PLUGINS_LOADED = "plugins_loaded"
HOOK_SETUP_THEME = "setup_theme"
HOOK_AFTER_SETUP_THEME = "after_setup_theme"
HOOK_INIT = "init"
HOOK_LOADED = "wp_loaded"
HOOK_SHUTDOWN = "shutdown"

# ── Plugin lifecycle ──────────────────────────────────────────────────────────
HOOK_ACTIVATED_PLUGIN = "activated_plugin"
HOOK_DEACTIVATE_PLUGIN = "deactivate_plugin"
HOOK_DEACTIVATED_PLUGIN = "deactivated_plugin"

# ── Admin requests ────────────────────────────────────────────────────────────
HOOK_ADMIN_INIT = "admin_init"
HOOK_ADMIN_POST = "admin_post"
HOOK_ADMIN_POST_NOPRIV = "admin_post_nopriv"
HOOK_WELCOME_PANEL = "welcome_panel"

# ── Filters ───────────────────────────────────────────────────────────────────
FILTER_DETERMINE_CURRENT_USER = "determine_current_user"
FILTER_USER_HAS_CAP = "user_has_cap"
FILTER_DASHBOARD_WIDGETS = "dashboard_widgets"
FILTER_THE_TITLE = "the_title"
FILTER_THE_EXCERPT = "the_excerpt"
FILTER_DOCUMENT_TITLE = "document_title"
FILTER_HEAD_TAGS = "head_tags"

# ── Content lifecycle ─────────────────────────────────────────────────────────
HOOK_CONTENT_CREATED = "content.created"
HOOK_CONTENT_UPDATED = "content.updated"
HOOK_CONTENT_DELETED = "content.deleted"
HOOK_CONTENT_PUBLISHED = "content.published"

# ── Master lists ──────────────────────────────────────────────────────────────
STARTUP_HOOKS: list[str] = [
    HOOK_SETUP_THEME,
    HOOK_AFTER_SETUP_THEME,
    HOOK_INIT,
    HOOK_LOADED,
]

CONTENT_HOOKS: list[str] = [
    HOOK_CONTENT_CREATED,
    HOOK_CONTENT_UPDATED,
    HOOK_CONTENT_DELETED,
    HOOK_CONTENT_PUBLISHED,
]


def activation_hook(plugin_name: str) -> str:
    """Name of the action fired when *plugin_name* is activated."""
    return f"activate_{plugin_name}"


def deactivation_hook(plugin_name: str) -> str:
    """Name of the action fired when *plugin_name* is deactivated."""
    return f"deactivate_{plugin_name}"


def admin_post_hook(action: str, authenticated: bool) -> str:
    """Name of the action that handles an admin-post request for *action*."""
    base = HOOK_ADMIN_POST if authenticated else HOOK_ADMIN_POST_NOPRIV
    return f"{base}_{action}" if action else base
