"""PermissionStore implementation backed by a local SQLite database."""

from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Sequence
from pathlib import Path

from rolegate_core.config.models import PermissionConfig
from rolegate_core.errors import StoreError
from rolegate_core.interfaces.permissions import Permission, Role

logger = logging.getLogger(__name__)

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS permissions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    resource TEXT NOT NULL,
    action TEXT NOT NULL,
    UNIQUE (resource, action)
);
CREATE TABLE IF NOT EXISTS grants (
    permission_id INTEGER NOT NULL REFERENCES permissions(id),
    role_id TEXT NOT NULL,
    role_name TEXT NOT NULL DEFAULT '',
    PRIMARY KEY (permission_id, role_id)
);
CREATE INDEX IF NOT EXISTS idx_grants_role ON grants(role_id);
"""

_MEMORY = ":memory:"


class SQLitePermissionStore:
    """PermissionStore implementation using SQLite with WAL mode.

    One connection is shared by every thread using the store; statements
    are serialized through a lock. Foreign keys are enforced, so a
    permission that still has grants cannot be deleted.
    """

    def __init__(self, config: PermissionConfig) -> None:
        if config.datasource != _MEMORY:
            Path(config.datasource).parent.mkdir(parents=True, exist_ok=True)

        self.db_path = config.datasource
        self._lock = threading.Lock()
        try:
            # isolation_level=None => autocommit mode, giving us manual
            # transaction control for grant's read-then-write.
            self._conn = sqlite3.connect(
                self.db_path,
                isolation_level=None,
                timeout=config.timeout,
                check_same_thread=False,
            )
            self._conn.execute("PRAGMA foreign_keys=ON")
            if self.db_path != _MEMORY:
                self._conn.execute("PRAGMA journal_mode=WAL")
            if config.create_schema:
                self._conn.executescript(_SCHEMA)
        except sqlite3.Error as e:
            raise StoreError("connect", e) from e
        logger.debug("Opened permission store at %s", self.db_path)

    # -- helpers ---------------------------------------------------------------

    def _permission_id(self, permission: Permission) -> int | None:
        row = self._conn.execute(
            "SELECT id FROM permissions WHERE resource = ? AND action = ?",
            (permission.resource, permission.action),
        ).fetchone()
        return row[0] if row else None

    # -- PermissionStore protocol ----------------------------------------------

    def insert(self, permission: Permission) -> None:
        """Create the permission record. Duplicates are rejected."""
        with self._lock:
            try:
                self._conn.execute(
                    "INSERT INTO permissions (resource, action) VALUES (?, ?)",
                    (permission.resource, permission.action),
                )
            except sqlite3.Error as e:
                raise StoreError("insert", e, permission) from e

    def delete(self, permission: Permission) -> None:
        """Delete the permission record. Fails if it does not exist."""
        with self._lock:
            try:
                cursor = self._conn.execute(
                    "DELETE FROM permissions WHERE resource = ? AND action = ?",
                    (permission.resource, permission.action),
                )
            except sqlite3.Error as e:
                raise StoreError("delete", e, permission) from e
        if cursor.rowcount == 0:
            raise StoreError("delete", permission=permission, message="permission does not exist")

    def grant(self, permission: Permission, role: Role) -> None:
        """Associate an existing permission with a role.

        Re-granting refreshes the stored display name and is otherwise a no-op.
        """
        with self._lock:
            cursor = self._conn.cursor()
            try:
                cursor.execute("BEGIN IMMEDIATE")
                permission_id = self._permission_id(permission)
                if permission_id is None:
                    cursor.execute("ROLLBACK")
                    raise StoreError(
                        "grant", permission=permission, message="permission does not exist"
                    )
                cursor.execute(
                    "INSERT INTO grants (permission_id, role_id, role_name) VALUES (?, ?, ?) "
                    "ON CONFLICT (permission_id, role_id) DO UPDATE SET role_name = excluded.role_name",
                    (permission_id, role.id, role.display_name),
                )
                cursor.execute("COMMIT")
            except sqlite3.Error as e:
                if self._conn.in_transaction:
                    self._conn.rollback()
                raise StoreError("grant", e, permission) from e

    def revoke_all(self, permission: Permission) -> None:
        """Remove every grant of the permission."""
        with self._lock:
            try:
                self._conn.execute(
                    "DELETE FROM grants WHERE permission_id IN "
                    "(SELECT id FROM permissions WHERE resource = ? AND action = ?)",
                    (permission.resource, permission.action),
                )
            except sqlite3.Error as e:
                raise StoreError("revoke_all", e, permission) from e

    def revoke(self, permission: Permission, role: Role) -> None:
        """Remove the grant of the permission to one role."""
        with self._lock:
            try:
                self._conn.execute(
                    "DELETE FROM grants WHERE role_id = ? AND permission_id IN "
                    "(SELECT id FROM permissions WHERE resource = ? AND action = ?)",
                    (role.id, permission.resource, permission.action),
                )
            except sqlite3.Error as e:
                raise StoreError("revoke", e, permission) from e

    def has_any(self, roles: Sequence[Role], permission: Permission) -> bool:
        """True if at least one of the roles holds the permission."""
        role_ids = sorted({role.id for role in roles})
        if not role_ids:
            return False
        placeholders = ", ".join("?" for _ in role_ids)
        with self._lock:
            try:
                row = self._conn.execute(
                    "SELECT 1 FROM grants g JOIN permissions p ON p.id = g.permission_id "
                    f"WHERE p.resource = ? AND p.action = ? AND g.role_id IN ({placeholders}) "
                    "LIMIT 1",
                    (permission.resource, permission.action, *role_ids),
                ).fetchone()
            except sqlite3.Error as e:
                raise StoreError("has_any", e, permission) from e
        return row is not None

    # -- extras ----------------------------------------------------------------

    def roles_for(self, permission: Permission) -> list[Role]:
        """Roles currently granted the permission, ordered by role id."""
        with self._lock:
            try:
                rows = self._conn.execute(
                    "SELECT g.role_id, g.role_name FROM grants g "
                    "JOIN permissions p ON p.id = g.permission_id "
                    "WHERE p.resource = ? AND p.action = ? ORDER BY g.role_id",
                    (permission.resource, permission.action),
                ).fetchall()
            except sqlite3.Error as e:
                raise StoreError("roles_for", e, permission) from e
        return [Role(id=role_id, display_name=name) for role_id, name in rows]

    def list_permissions(self) -> list[Permission]:
        """All stored permissions, ordered by resource then action."""
        with self._lock:
            try:
                rows = self._conn.execute(
                    "SELECT resource, action FROM permissions ORDER BY resource, action"
                ).fetchall()
            except sqlite3.Error as e:
                raise StoreError("list_permissions", e) from e
        return [Permission(resource=r, action=a) for r, a in rows]

    def close(self) -> None:
        with self._lock:
            self._conn.close()
