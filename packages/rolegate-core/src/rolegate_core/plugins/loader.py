"""Store and resolver plugin lookup via entry points, with lite defaults."""

from __future__ import annotations

import importlib.metadata
import logging
from typing import TYPE_CHECKING

from rolegate_core.interfaces.resolver import ResolverFactory, RoleResolver
from rolegate_core.interfaces.store import PermissionStore, StoreFactory

if TYPE_CHECKING:
    from rolegate_core.config.models import RolegateConfig

logger = logging.getLogger(__name__)


class PluginError(Exception):
    """Base class for plugin lookup failures."""

    def __init__(self, plugin_type: str, name: str | None, message: str):
        self.plugin_type = plugin_type
        self.name = name
        super().__init__(message)


class PluginNotFoundError(PluginError):
    """No plugin is registered under the name, or its module cannot be imported."""

    def __init__(self, plugin_type: str, name: str | None = None, detail: str | None = None):
        msg = f"No {plugin_type} plugin found"
        if name:
            msg += f" with name '{name}'"
        if detail:
            msg += f": {detail}"
        super().__init__(plugin_type, name, msg)


class InvalidPluginError(PluginError):
    """The plugin loaded but does not provide the expected interface."""

    def __init__(self, plugin_type: str, name: str, expected: str, obj: object):
        super().__init__(
            plugin_type,
            name,
            f"{plugin_type} plugin '{name}' is not a {expected} (got {obj!r})",
        )


def _is_store_factory(obj: object) -> bool:
    if isinstance(obj, type):
        return issubclass(obj, PermissionStore)
    return callable(obj)


def _is_resolver_factory(obj: object) -> bool:
    if isinstance(obj, type) and not issubclass(obj, RoleResolver):
        return False
    return isinstance(obj, ResolverFactory)


class PluginLoader:
    """Finds the store factory and resolver factory a config asks for.

    Lookup order per plugin type: explicit name > ``config.plugins`` > the
    lite default. A name that is not registered is an error; it never falls
    back to the default.
    """

    GROUPS = {
        "store": "rolegate.plugins.store",
        "resolver": "rolegate.plugins.resolver",
    }

    # Same "module:attr" form as an entry point value.
    LITE_DEFAULTS = {
        "store": "rolegate_lite.store.sqlite_store:SQLitePermissionStore",
        "resolver": "rolegate_lite.resolver.file_resolver:FileRoleResolver",
    }

    def __init__(self, config: RolegateConfig):
        self._config = config

    def discover(self) -> dict[str, list[str]]:
        """Scan entry_points for registered plugins. Returns {type: [name, ...]}."""
        result: dict[str, list[str]] = {}
        for plugin_type, group in self.GROUPS.items():
            eps = importlib.metadata.entry_points(group=group)
            result[plugin_type] = [ep.name for ep in eps]
        return result

    def _find(
        self, plugin_type: str, name: str | None
    ) -> tuple[str | None, importlib.metadata.EntryPoint]:
        if name is None:
            name = getattr(self._config.plugins, plugin_type, None)
        group = self.GROUPS[plugin_type]

        if name is None:
            return None, importlib.metadata.EntryPoint(
                name="default", value=self.LITE_DEFAULTS[plugin_type], group=group
            )

        for ep in importlib.metadata.entry_points(group=group):
            if ep.name == name:
                return name, ep
        raise PluginNotFoundError(plugin_type, name)

    def _load(self, plugin_type: str, name: str | None) -> tuple[str, object]:
        """Return the plugin's display name and the loaded object."""
        resolved, ep = self._find(plugin_type, name)
        try:
            obj = ep.load()
        except (ImportError, AttributeError) as e:
            raise PluginNotFoundError(plugin_type, resolved, f"cannot import {ep.value} ({e})") from e
        logger.debug("Loaded %s plugin %s from %s", plugin_type, resolved or "default", ep.value)
        return resolved or "default", obj

    def load_store(self, name: str | None = None) -> StoreFactory:
        """Return a callable that builds a ``PermissionStore`` from a ``PermissionConfig``."""
        resolved, obj = self._load("store", name)
        if not _is_store_factory(obj):
            raise InvalidPluginError("store", resolved, "PermissionStore factory", obj)
        return obj  # type: ignore[return-value]

    def load_resolver(self, name: str | None = None) -> ResolverFactory:
        """Return an object whose ``from_config`` builds a ``RoleResolver``."""
        resolved, obj = self._load("resolver", name)
        if not _is_resolver_factory(obj):
            raise InvalidPluginError("resolver", resolved, "RoleResolver with from_config", obj)
        return obj  # type: ignore[return-value]
