"""Permission lifecycle and authorization decisions over a store and a role resolver."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from pydantic import ValidationError

from rolegate_core.errors import AuthorityError, ConfigurationError, ResolutionError
from rolegate_core.interfaces.permissions import Permission, Role
from rolegate_core.interfaces.resolver import RoleResolver
from rolegate_core.interfaces.store import PermissionStore, StoreFactory
from rolegate_core.plugins.loader import PluginLoader

if TYPE_CHECKING:
    from rolegate_core.config.models import PermissionConfig, RolegateConfig

logger = logging.getLogger(__name__)


class PermissionAuthority:
    """Single entry point for permission mutations and permission checks.

    All store access goes through one handle, built from ``store_factory``
    and ``config`` the first time an operation needs it and reused for the
    lifetime of the authority. Role membership is resolved on every check;
    nothing is cached.

    Missing collaborators are allowed at construction time and reported as
    ``ConfigurationError`` by the first operation that needs them.
    """

    def __init__(
        self,
        store_factory: StoreFactory | None = None,
        resolver: RoleResolver | None = None,
        config: PermissionConfig | None = None,
    ) -> None:
        self._store_factory = store_factory
        self._resolver = resolver
        self._config = config
        self._store: PermissionStore | None = None
        self._store_lock = threading.Lock()

    @classmethod
    def from_config(
        cls, config: RolegateConfig, loader: PluginLoader | None = None
    ) -> PermissionAuthority:
        """Build an authority whose collaborators come from the configured plugins."""
        loader = loader or PluginLoader(config)
        store_factory = loader.load_store()
        resolver_factory = loader.load_resolver()
        return cls(
            store_factory=store_factory,
            resolver=resolver_factory.from_config(config),
            config=config.permissions,
        )

    # -- store handle ----------------------------------------------------------

    def _get_store(self) -> PermissionStore:
        store = self._store
        if store is not None:
            return store

        with self._store_lock:
            if self._store is None:
                if self._store_factory is None:
                    raise ConfigurationError("store factory")
                if self._config is None:
                    raise ConfigurationError("permission config")
                logger.debug("Permission store is not initialized. Initializing the store.")
                # Published only after the factory returns, so a failed
                # construction leaves the slot empty for the next caller.
                self._store = self._store_factory(self._config)
            return self._store

    def dispose(self) -> None:
        """Drop the store handle, closing it if the store supports that."""
        with self._store_lock:
            store, self._store = self._store, None
        close = getattr(store, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> PermissionAuthority:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.dispose()

    # -- mutations -------------------------------------------------------------

    def add_permission(self, permission: Permission) -> None:
        logger.debug("Add permission %s", permission)
        self._get_store().insert(permission)

    def delete_permission(self, permission: Permission) -> None:
        """Revoke the permission from every role, then delete it.

        The delete is not attempted if the revoke fails.
        """
        logger.debug("Delete permission %s", permission)
        store = self._get_store()
        store.revoke_all(permission)
        store.delete(permission)

    def grant_permission(self, permission: Permission, role: Role) -> None:
        logger.debug("Grant permission %s to %s", permission, role)
        self._get_store().grant(permission, role)

    def revoke_permission(self, permission: Permission, role: Role | None = None) -> None:
        """Revoke the permission from ``role``, or from every role when omitted."""
        if role is None:
            logger.debug("Revoke permission %s", permission)
            self._get_store().revoke_all(permission)
        else:
            logger.debug("Revoke permission %s from %s", permission, role)
            self._get_store().revoke(permission, role)

    # -- decisions -------------------------------------------------------------

    def has_permission(self, username: str, permission: Permission) -> bool:
        """Check whether any of the user's current roles holds the permission.

        A user without roles never holds a permission; the store is not
        consulted in that case.
        """
        logger.debug("Check permission %s", permission)
        roles = self._get_roles(username)
        if not roles:
            logger.debug("No roles retrieved for the user.")
            return False
        logger.debug("Retrieved %d roles for the user.", len(roles))
        return self._get_store().has_any(roles, permission)

    def _get_roles(self, username: str) -> list[Role]:
        if self._resolver is None:
            raise ConfigurationError(
                "role resolver",
                "Role resolver is not initialized properly. Unable to get user roles.",
            )
        try:
            groups = self._resolver.resolve_roles(username)
            return [Role.from_group(group) for group in groups]
        except ResolutionError as e:
            logger.error("Unable to check permission. Failed getting roles of the user.")
            raise AuthorityError("Failed getting roles of the user.") from e
        except (ValidationError, AttributeError, TypeError) as e:
            logger.error("Unable to check permission. Role resolver returned malformed groups.")
            raise AuthorityError("Role resolver returned malformed groups.") from e
