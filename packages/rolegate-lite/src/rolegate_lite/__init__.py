"""Rolegate Lite - local SQLite store, YAML role resolver and command line."""

from rolegate_lite.resolver import FileRoleResolver
from rolegate_lite.store import SQLitePermissionStore

__all__ = ["FileRoleResolver", "SQLitePermissionStore"]
