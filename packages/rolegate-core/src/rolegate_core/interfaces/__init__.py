"""Models and collaborator interfaces for the permission authority."""

from rolegate_core.interfaces.permissions import Group, Permission, Role
from rolegate_core.interfaces.resolver import ResolverFactory, RoleResolver
from rolegate_core.interfaces.store import PermissionStore, StoreFactory

__all__ = [
    "Group",
    "Permission",
    "PermissionStore",
    "ResolverFactory",
    "Role",
    "RoleResolver",
    "StoreFactory",
]
