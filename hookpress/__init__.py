"""HookPress: priority-ordered action/filter hooks for a plugin-driven CMS."""

from hookpress.hooks import HookRegistry

__version__ = "1.0.0"

__all__ = ["HookRegistry", "__version__"]
