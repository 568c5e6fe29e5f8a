"""Role resolver interface."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from rolegate_core.interfaces.permissions import Group

if TYPE_CHECKING:
    from rolegate_core.config.models import RolegateConfig


@runtime_checkable
class RoleResolver(Protocol):
    """Identity provider lookup of a user's current group membership."""

    def resolve_roles(self, username: str) -> list[Group]: ...


@runtime_checkable
class ResolverFactory(Protocol):
    """Builds a configured resolver. Resolver plugins register their class,
    whose ``from_config`` classmethod satisfies this."""

    def from_config(self, config: RolegateConfig) -> RoleResolver: ...
