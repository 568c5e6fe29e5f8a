"""Permission store interface."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from rolegate_core.interfaces.permissions import Permission, Role

if TYPE_CHECKING:
    from rolegate_core.config.models import PermissionConfig


@runtime_checkable
class PermissionStore(Protocol):
    """Durable relation between permissions and the roles they are granted to.

    Implementations raise ``StoreError`` for every failure, with the
    backend exception chained as ``__cause__``.
    """

    def insert(self, permission: Permission) -> None: ...

    def delete(self, permission: Permission) -> None: ...

    def grant(self, permission: Permission, role: Role) -> None: ...

    def revoke_all(self, permission: Permission) -> None: ...

    def revoke(self, permission: Permission, role: Role) -> None: ...

    def has_any(self, roles: Sequence[Role], permission: Permission) -> bool: ...


# A store class whose constructor takes the config is a valid factory.
StoreFactory = Callable[["PermissionConfig"], PermissionStore]
