"""Error types raised by the permission authority and its collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rolegate_core.interfaces.permissions import Permission


class AuthorityError(Exception):
    """Base class for failures surfaced by the permission authority."""


class ConfigurationError(AuthorityError):
    """A required collaborator was never bound."""

    def __init__(self, dependency: str, message: str | None = None) -> None:
        self.dependency = dependency
        super().__init__(message or f"{dependency} is not configured")


class StoreError(AuthorityError):
    """Wraps a persistence failure with the operation that caused it."""

    def __init__(
        self,
        operation: str,
        cause: Exception | None = None,
        permission: Permission | None = None,
        message: str | None = None,
    ) -> None:
        self.operation = operation
        self.permission = permission
        detail = message or (str(cause) if cause is not None else "failed")
        target = f" {permission}" if permission is not None else ""
        super().__init__(f"store {operation}{target} failed: {detail}")
        if cause is not None:
            self.__cause__ = cause


class ResolutionError(Exception):
    """Raised by role resolvers when a user's groups cannot be resolved."""

    def __init__(self, username: str, reason: str, cause: Exception | None = None) -> None:
        self.username = username
        self.reason = reason
        super().__init__(f"cannot resolve roles for {username!r}: {reason}")
        if cause is not None:
            self.__cause__ = cause
