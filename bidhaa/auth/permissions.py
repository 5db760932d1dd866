"""
Central registry of account roles and the admin actions each may perform.
"""
from models.user import USER_ROLES, ADMIN_ROLES

ADMIN_ROLE_SCOPES = {
    "super_admin": {"*"},
    "manager":     {"view_profile", "edit_profile", "view_catalog"},
    "support":     {"view_profile", "edit_profile"},
    "sales":       {"view_profile", "edit_profile", "view_catalog"},
    "finance":     {"view_profile", "edit_profile"},
}


def is_user_role(role: str) -> bool:
    return role in USER_ROLES


def is_admin_role(role: str) -> bool:
    return role in ADMIN_ROLES


def admin_role_has_scope(admin_role: str, action: str) -> bool:
    scopes = ADMIN_ROLE_SCOPES.get(admin_role, set())
    return "*" in scopes or action in scopes
