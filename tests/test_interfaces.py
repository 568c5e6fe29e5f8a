"""Tests for rolegate_core.interfaces: value models and structural subtyping."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from rolegate_core.interfaces import (
    Group,
    Permission,
    PermissionStore,
    ResolverFactory,
    Role,
    RoleResolver,
)


# ---------------------------------------------------------------------------
# Permission
# ---------------------------------------------------------------------------


class TestPermission:
    def test_equality_by_value(self):
        assert Permission(resource="dashboard-1", action="view") == Permission(
            resource="dashboard-1", action="view"
        )

    def test_different_action_not_equal(self):
        assert Permission(resource="r", action="view") != Permission(resource="r", action="edit")

    def test_hashable(self):
        perms = {Permission(resource="r", action="a"), Permission(resource="r", action="a")}
        assert len(perms) == 1

    def test_frozen(self):
        perm = Permission(resource="r", action="a")
        with pytest.raises(ValidationError):
            perm.action = "b"

    @pytest.mark.parametrize("field", ["resource", "action"])
    def test_blank_fields_rejected(self, field):
        values = {"resource": "r", "action": "a", field: "   "}
        with pytest.raises(ValidationError):
            Permission(**values)

    def test_str(self):
        assert str(Permission(resource="dashboard-1", action="view")) == "dashboard-1:view"

    def test_round_trip(self):
        perm = Permission(resource="dashboard-1", action="view")
        assert Permission.model_validate_json(perm.model_dump_json()) == perm


# ---------------------------------------------------------------------------
# Role / Group
# ---------------------------------------------------------------------------


class TestRole:
    def test_from_group_copies_fields(self):
        role = Role.from_group(Group(id="role-analyst", display_name="Analysts"))
        assert role == Role(id="role-analyst", display_name="Analysts")

    def test_display_name_optional(self):
        assert Role(id="role-analyst").display_name == ""

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            Role(id="")

    def test_whitespace_id_rejected(self):
        with pytest.raises(ValidationError, match="whitespace"):
            Role(id="  ")

    def test_str_is_id(self):
        assert str(Role(id="role-analyst", display_name="Analysts")) == "role-analyst"


class TestGroup:
    def test_frozen(self):
        group = Group(id="g")
        with pytest.raises(ValidationError):
            group.id = "h"

    @pytest.mark.parametrize("group_id", ["", "   "])
    def test_blank_id_rejected(self, group_id):
        with pytest.raises(ValidationError):
            Group(id=group_id)


# ---------------------------------------------------------------------------
# Protocol structural checks
# ---------------------------------------------------------------------------


class _FakeStore:
    def insert(self, permission): ...
    def delete(self, permission): ...
    def grant(self, permission, role): ...
    def revoke_all(self, permission): ...
    def revoke(self, permission, role): ...
    def has_any(self, roles, permission):
        return False


class _FakeResolver:
    def resolve_roles(self, username):
        return []


class TestProtocols:
    def test_store_structural_match(self):
        assert isinstance(_FakeStore(), PermissionStore)

    def test_incomplete_store_rejected(self):
        class Partial:
            def insert(self, permission): ...

        assert not isinstance(Partial(), PermissionStore)

    def test_resolver_structural_match(self):
        assert isinstance(_FakeResolver(), RoleResolver)

    def test_store_is_not_a_resolver(self):
        assert not isinstance(_FakeStore(), RoleResolver)

    def test_resolver_class_is_a_factory(self):
        class WithFactory(_FakeResolver):
            @classmethod
            def from_config(cls, config):
                return cls()

        assert isinstance(WithFactory, ResolverFactory)
        assert not isinstance(_FakeResolver, ResolverFactory)
