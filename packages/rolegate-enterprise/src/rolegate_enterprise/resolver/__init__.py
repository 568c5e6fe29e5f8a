"""Identity-provider backed role resolvers."""

from rolegate_enterprise.resolver.scim import ScimRoleResolver

__all__ = ["ScimRoleResolver"]
