from .loader import load_config
from .models import (
    PermissionConfig,
    PluginsConfig,
    ResolverConfig,
    RolegateConfig,
)

__all__ = [
    "PermissionConfig",
    "PluginsConfig",
    "ResolverConfig",
    "RolegateConfig",
    "load_config",
]
