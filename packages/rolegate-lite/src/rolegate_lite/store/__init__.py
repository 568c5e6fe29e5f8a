"""SQLite-backed permission store for local deployments."""

from __future__ import annotations

from rolegate_lite.store.sqlite_store import SQLitePermissionStore

__all__ = ["SQLitePermissionStore"]
