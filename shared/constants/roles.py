from enum import Enum


class Role(str, Enum):
    USER = "user"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


# Roles allowed into the administrative panel
ADMIN_ROLES = frozenset({Role.ADMIN, Role.SUPER_ADMIN})
