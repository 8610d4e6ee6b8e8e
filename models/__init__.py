# -------------------------
# Enums
# -------------------------
from .enums import (
    BaseStrEnum,
    AccessLevel,
    Module,
    UserRole,
)

# -------------------------
# RBAC Models
# -------------------------
from .rbac import (
    AccessGrant,
    UserAccessProfile,
    RouteRule,
    AccessGrantsUpdate,
    UserAccessCreate,
    ModuleAccessRead,
    PermissionsRead,
    AccessCheckRead,
    RouteCheckRead,
    RouteTableRead,
    UserAccessRead,
)

__all__ = [
    "BaseStrEnum",
    "AccessLevel",
    "Module",
    "UserRole",
    "AccessGrant",
    "UserAccessProfile",
    "RouteRule",
    "AccessGrantsUpdate",
    "UserAccessCreate",
    "ModuleAccessRead",
    "PermissionsRead",
    "AccessCheckRead",
    "RouteCheckRead",
    "RouteTableRead",
    "UserAccessRead",
]
