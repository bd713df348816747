from .predicates import requires_member_permissions, requires_role, requires_user

__all__ = ["requires_role", "requires_user", "requires_member_permissions"]
