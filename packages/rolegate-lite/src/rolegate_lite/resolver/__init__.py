"""File-backed role resolution for local deployments."""

from __future__ import annotations

from rolegate_lite.resolver.file_resolver import FileRoleResolver

__all__ = ["FileRoleResolver"]
