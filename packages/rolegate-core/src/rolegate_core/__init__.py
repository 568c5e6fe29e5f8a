"""Rolegate Core - role-based permission authority over pluggable stores and identity providers."""

from rolegate_core.authority import PermissionAuthority
from rolegate_core.config import PermissionConfig, RolegateConfig, load_config
from rolegate_core.errors import AuthorityError, ConfigurationError, ResolutionError, StoreError
from rolegate_core.interfaces import Group, Permission, PermissionStore, Role, RoleResolver

__version__ = "0.1.0"

__all__ = [
    "AuthorityError",
    "ConfigurationError",
    "Group",
    "Permission",
    "PermissionAuthority",
    "PermissionConfig",
    "PermissionStore",
    "ResolutionError",
    "Role",
    "RoleResolver",
    "RolegateConfig",
    "StoreError",
    "load_config",
]
