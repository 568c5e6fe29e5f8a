"""Shared test fixtures for Rolegate."""

import pytest
import yaml
from unittest.mock import MagicMock

from rolegate_core.config.models import PermissionConfig, ResolverConfig, RolegateConfig
from rolegate_core.interfaces import Group, Permission, PermissionStore, Role, RoleResolver
from rolegate_lite.resolver.file_resolver import FileRoleResolver
from rolegate_lite.store.sqlite_store import SQLitePermissionStore


@pytest.fixture
def dashboard_view():
    return Permission(resource="dashboard-1", action="view")


@pytest.fixture
def analyst_role():
    return Role(id="role-analyst", display_name="Analysts")


@pytest.fixture
def permission_config(tmp_path):
    return PermissionConfig(datasource=str(tmp_path / "rolegate" / "permissions.db"))


@pytest.fixture
def sqlite_store(permission_config):
    store = SQLitePermissionStore(permission_config)
    yield store
    store.close()


@pytest.fixture
def groups_file(tmp_path):
    """YAML membership file: alice is an analyst, bob has no groups, carol is an admin."""
    path = tmp_path / "groups.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "groups": {"role-analyst": "Analysts", "role-admin": "Administrators"},
                "users": {
                    "alice": ["role-analyst"],
                    "bob": [],
                    "carol": ["role-admin", "role-analyst"],
                },
            }
        )
    )
    return path


@pytest.fixture
def file_resolver(groups_file):
    return FileRoleResolver(groups_file)


@pytest.fixture
def mock_store():
    store = MagicMock(spec=PermissionStore)
    store.has_any.return_value = True
    store.close = MagicMock()
    return store


@pytest.fixture
def mock_store_factory(mock_store):
    return MagicMock(return_value=mock_store)


@pytest.fixture
def mock_resolver():
    resolver = MagicMock(spec=RoleResolver)
    resolver.resolve_roles.return_value = [Group(id="role-analyst", display_name="Analysts")]
    return resolver


@pytest.fixture
def sample_config(tmp_path, groups_file):
    return RolegateConfig(
        permissions=PermissionConfig(datasource=str(tmp_path / "permissions.db")),
        resolver=ResolverConfig(groups_file=str(groups_file)),
    )
