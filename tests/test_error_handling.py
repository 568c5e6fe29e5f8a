"""Error taxonomy tests: hierarchy, messages and chained causes."""

from __future__ import annotations

from rolegate_core.errors import AuthorityError, ConfigurationError, ResolutionError, StoreError
from rolegate_core.interfaces import Permission


class TestHierarchy:
    def test_store_error_is_authority_error(self):
        assert issubclass(StoreError, AuthorityError)

    def test_configuration_error_is_authority_error(self):
        assert issubclass(ConfigurationError, AuthorityError)

    def test_resolution_error_is_separate(self):
        """Resolvers raise it; the authority converts it at its boundary."""
        assert not issubclass(ResolutionError, AuthorityError)


class TestStoreError:
    def test_message_names_operation_and_permission(self):
        perm = Permission(resource="dashboard-1", action="view")
        err = StoreError("insert", RuntimeError("UNIQUE constraint failed"), perm)
        assert str(err) == "store insert dashboard-1:view failed: UNIQUE constraint failed"
        assert err.operation == "insert"
        assert err.permission == perm

    def test_cause_chained(self):
        cause = OSError("disk full")
        err = StoreError("grant", cause)
        assert err.__cause__ is cause

    def test_message_without_cause(self):
        err = StoreError("delete", message="permission does not exist")
        assert err.__cause__ is None
        assert "permission does not exist" in str(err)


class TestConfigurationError:
    def test_default_message(self):
        err = ConfigurationError("store factory")
        assert err.dependency == "store factory"
        assert str(err) == "store factory is not configured"

    def test_custom_message(self):
        err = ConfigurationError("role resolver", "Role resolver is not initialized properly.")
        assert str(err) == "Role resolver is not initialized properly."


class TestResolutionError:
    def test_attributes(self):
        cause = TimeoutError("idp slow")
        err = ResolutionError("alice", "identity provider request failed", cause)
        assert err.username == "alice"
        assert err.reason == "identity provider request failed"
        assert err.__cause__ is cause
        assert "alice" in str(err)
