"""RoleResolver backed by a SCIM 2.0 identity provider."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING
from urllib.parse import urlparse

import httpx
from pydantic import ValidationError

from rolegate_core.errors import ResolutionError
from rolegate_core.interfaces.permissions import Group

if TYPE_CHECKING:
    from rolegate_core.config.models import RolegateConfig

logger = logging.getLogger(__name__)

_SCIM_JSON = "application/scim+json"


def _validate_base_url(url: str) -> str:
    """Reject non-http(s) schemes and CRLF injection in the IdP base URL."""
    if "\r" in url or "\n" in url:
        raise ValueError("CRLF injection detected in base_url")

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise ValueError(f"SCIM base_url must be http(s), got {parsed.scheme}")
    if not parsed.hostname:
        raise ValueError("SCIM base_url has no host")

    if parsed.scheme == "http" and parsed.hostname not in {"localhost", "127.0.0.1", "::1"}:
        logger.warning(
            "SCIM base_url %s is not using https; bearer tokens will travel in clear text",
            parsed.hostname,
        )
    return url.rstrip("/")


class ScimRoleResolver:
    """Looks a user up by ``userName`` and returns the groups on their SCIM record."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = _validate_base_url(base_url)
        headers = {"Accept": _SCIM_JSON}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = client or httpx.Client(timeout=timeout)
        self._headers = headers

    @classmethod
    def from_config(cls, config: RolegateConfig) -> ScimRoleResolver:
        if not config.resolver.base_url:
            raise ValueError("resolver.base_url is required for the SCIM resolver")
        return cls(
            base_url=config.resolver.base_url,
            token=os.environ.get(config.resolver.token_env),
            timeout=config.resolver.timeout,
        )

    def resolve_roles(self, username: str) -> list[Group]:
        escaped = username.replace("\\", "\\\\").replace('"', '\\"')
        try:
            resp = self._client.get(
                f"{self._base_url}/Users",
                params={"filter": f'userName eq "{escaped}"', "attributes": "userName,groups"},
                headers=self._headers,
            )
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise ResolutionError(username, "identity provider request failed", e) from e
        except ValueError as e:
            raise ResolutionError(username, "identity provider returned invalid JSON", e) from e

        if not isinstance(data, dict):
            raise ResolutionError(username, "identity provider response is not a SCIM ListResponse")
        resources = data.get("Resources") or []
        if not isinstance(resources, list):
            raise ResolutionError(username, "SCIM 'Resources' must be a list")
        if not resources:
            raise ResolutionError(username, "unknown user")
        if len(resources) > 1:
            logger.warning("SCIM lookup for %s matched %d users, using the first", username, len(resources))

        user = resources[0]
        if not isinstance(user, dict):
            raise ResolutionError(username, "SCIM user record is not an object")
        entries = user.get("groups") or []
        if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
            raise ResolutionError(username, "SCIM user record has malformed 'groups'")

        try:
            groups = [
                Group(id=str(entry["value"]), display_name=str(entry.get("display") or ""))
                for entry in entries
                if entry.get("value")
            ]
        except ValidationError as e:
            raise ResolutionError(username, "SCIM user record has an invalid group", e) from e
        logger.debug("Resolved %d groups for %s", len(groups), username)
        return groups

    def close(self) -> None:
        self._client.close()
