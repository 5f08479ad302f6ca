import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from hookpress.bootstrap import bootstrap, shutdown
from hookpress.config import Settings, settings
from hookpress.exception_handlers import register_exception_handlers
from hookpress.hooks.registry import HookRegistry
from hookpress.middleware.logging import StructuredLoggingMiddleware
from hookpress.plugins.base import PluginBase
from hookpress.plugins.registry import PluginRegistry
from hookpress.routes import admin_post, dashboard, hooks, plugins

logger = logging.getLogger(__name__)


def create_app(
    app_settings: Settings | None = None,
    candidates: list[PluginBase] | None = None,
    hook_registry: HookRegistry | None = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    A fresh HookRegistry is built for every app unless one is passed in;
    plugins are loaded and the startup actions fired in the lifespan.
    """
    app_settings = app_settings or settings
    registry = hook_registry or HookRegistry(
        default_priority=app_settings.default_priority,
        default_accepted_args=app_settings.default_accepted_args,
    )
    plugin_registry = PluginRegistry(registry)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting up %s (%s)", app_settings.app_name, app_settings.environment)
        bootstrap(plugin_registry, candidates)
        try:
            yield
        finally:
            logger.info("Shutting down the application...")
            shutdown(plugin_registry)

    app = FastAPI(
        title=app_settings.app_name,
        description="Action/filter hook engine for a plugin-driven CMS",
        debug=app_settings.debug,
        version=app_settings.app_version,
        lifespan=lifespan,
    )
    app.state.hooks = registry
    app.state.plugins = plugin_registry

    app.add_middleware(StructuredLoggingMiddleware)
    register_exception_handlers(app)

    app.include_router(admin_post.router)
    app.include_router(dashboard.router)
    app.include_router(plugins.router, prefix="/api/v1/plugins")
    app.include_router(hooks.router, prefix="/api/v1/hooks")

    @app.get("/health", tags=["Root"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
