"""
Staff account rules: permissions, password hashing, washer status.
"""
from typing import List

import bcrypt

SUPER_ADMIN_PERMISSIONS = [
    "manage_workers",
    "view_reports",
    "manage_customers",
    "manage_admins",
    "manage_services",
    "financial_access",
    "system_settings",
]

ADMIN_PERMISSIONS = [
    "manage_workers",
    "view_reports",
    "manage_customers",
    "manage_services",
]


def permissions_for_role(role: str) -> List[str]:
    if role == "super_admin":
        return list(SUPER_ADMIN_PERMISSIONS)
    if role == "admin":
        return list(ADMIN_PERMISSIONS)
    return ["view_reports"]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def washer_status(is_active: bool, is_available: bool) -> str:
    """inactive beats on_leave beats active."""
    if not is_active:
        return "inactive"
    if not is_available:
        return "on_leave"
    return "active"
