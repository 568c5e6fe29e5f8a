"""Dynamic plugin discovery and loading."""

from rolegate_core.plugins.loader import (
    InvalidPluginError,
    PluginError,
    PluginLoader,
    PluginNotFoundError,
)

__all__ = ["InvalidPluginError", "PluginError", "PluginLoader", "PluginNotFoundError"]
