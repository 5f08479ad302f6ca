"""
Pytest configuration and fixtures for HookPress tests
"""

import os
import sys
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))  # noqa: PTH100, PTH118, PTH120

from hookpress.hooks.names import FILTER_DETERMINE_CURRENT_USER, FILTER_USER_HAS_CAP  # noqa: E402
from hookpress.hooks.registry import HookRegistry  # noqa: E402
from hookpress.main import create_app  # noqa: E402
from hookpress.plugins import loader as loader_module  # noqa: E402
from hookpress.plugins.registry import PluginRegistry  # noqa: E402


@pytest.fixture
def hooks() -> HookRegistry:
    """A fresh registry with the stock defaults (priority 10, one argument)."""
    return HookRegistry(default_priority=10, default_accepted_args=1)


@pytest.fixture
def plugin_registry(hooks: HookRegistry) -> PluginRegistry:
    return PluginRegistry(hooks)


@pytest.fixture
def plugins_config_file(tmp_path: Path):
    """Point the plugin loader at a config file inside tmp_path (absent until written)."""
    config_path = tmp_path / "data" / "plugins_config.json"
    with patch.object(loader_module, "_PLUGINS_CONFIG_FILE", config_path):
        yield config_path


def grant_admin(hooks: HookRegistry) -> None:
    """Treat requests carrying an X-User header as an admin with every capability."""

    def determine_user(user: Any, request: Any) -> Any:
        name = request.headers.get("X-User")
        return {"name": name} if name else user

    hooks.add(FILTER_DETERMINE_CURRENT_USER, determine_user, accepted_args=2)
    hooks.add(FILTER_USER_HAS_CAP, lambda allowed, capability, user: True, accepted_args=3)


@pytest.fixture
def app(plugins_config_file):
    application = create_app()
    grant_admin(application.state.hooks)
    return application


@pytest.fixture
def client(app):
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-User": "admin"}
