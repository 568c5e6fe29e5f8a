from rolegate_core.authority.authority import PermissionAuthority

__all__ = ["PermissionAuthority"]
