"""RoleResolver backed by a YAML file of user group memberships.

File layout::

    groups:
      role-analyst: Analysts
    users:
      alice: [role-analyst]
      bob: []
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import yaml
from pydantic import ValidationError

from rolegate_core.errors import ResolutionError
from rolegate_core.interfaces.permissions import Group

if TYPE_CHECKING:
    from rolegate_core.config.models import RolegateConfig

logger = logging.getLogger(__name__)


class FileRoleResolver:
    """Resolve groups from a YAML file, re-read on every lookup."""

    def __init__(self, groups_file: str | Path) -> None:
        self.groups_file = Path(groups_file)

    @classmethod
    def from_config(cls, config: RolegateConfig) -> FileRoleResolver:
        return cls(config.resolver.groups_file)

    def _load(self, username: str) -> dict:
        try:
            with open(self.groups_file) as f:
                raw = yaml.safe_load(f) or {}
        except OSError as e:
            raise ResolutionError(username, f"cannot read {self.groups_file}", e) from e
        except yaml.YAMLError as e:
            raise ResolutionError(username, f"invalid YAML in {self.groups_file}", e) from e
        if not isinstance(raw, dict):
            raise ResolutionError(username, f"{self.groups_file} must contain a mapping")
        return raw

    def resolve_roles(self, username: str) -> list[Group]:
        raw = self._load(username)
        users = raw.get("users") or {}
        names = raw.get("groups") or {}
        if not isinstance(users, dict) or not isinstance(names, dict):
            raise ResolutionError(
                username, f"'users' and 'groups' in {self.groups_file} must be mappings"
            )

        if username not in users:
            raise ResolutionError(username, "unknown user")

        group_ids = users[username] or []
        if not isinstance(group_ids, list):
            raise ResolutionError(username, "group list must be a sequence")
        if not all(isinstance(gid, (str, int)) for gid in group_ids):
            raise ResolutionError(username, "group ids must be strings")

        try:
            groups = [
                Group(id=str(gid), display_name=str(names.get(gid) or ""))
                for gid in group_ids
            ]
        except ValidationError as e:
            raise ResolutionError(username, f"invalid group entry in {self.groups_file}", e) from e
        logger.debug("Resolved %d groups for %s from %s", len(groups), username, self.groups_file)
        return groups
