# core/rbac.py

"""
Module-level permission resolution.

Every function here is a pure check over a UserAccessProfile snapshot:
no I/O, no exceptions. Degenerate input (no user, no grants, unknown
module/level, unknown route) resolves to the safest answer, except the
two allow-by-default cases: company owners, and routes missing from the
route table while RBAC_UNMAPPED_ROUTES_ALLOWED is on.
"""

from typing import Dict, Iterable, List, Optional

from core.config import settings
from models.enums import AccessLevel, Module
from models.rbac import RouteRule, UserAccessProfile


# Lowest → highest. A level implies every level before it.
ACCESS_HIERARCHY: List[AccessLevel] = [
    AccessLevel.none,
    AccessLevel.read,
    AccessLevel.write,
    AccessLevel.delete,
    AccessLevel.manage,
    AccessLevel.admin,
]


# ============================================================
# ROUTE → MODULE MAP
# ============================================================
ROUTE_ACCESS_MAP: Dict[str, RouteRule] = {
    # Properties
    "/buildings": RouteRule(module=Module.properties, level=AccessLevel.read),
    "/new-building": RouteRule(module=Module.properties, level=AccessLevel.write),
    "/vacant-units": RouteRule(module=Module.properties, level=AccessLevel.read),
    "/new-vacant-unit": RouteRule(module=Module.properties, level=AccessLevel.write),

    # Tenants / leases
    "/tenants": RouteRule(module=Module.tenants, level=AccessLevel.read),
    "/tenants/add": RouteRule(module=Module.tenants, level=AccessLevel.write),
    "/notices": RouteRule(module=Module.leases, level=AccessLevel.read),

    # Finances
    "/finances": RouteRule(module=Module.payments, level=AccessLevel.read),
    "/finances/invoices": RouteRule(module=Module.payments, level=AccessLevel.read),
    "/finances/receipts": RouteRule(module=Module.payments, level=AccessLevel.read),

    # Reports / settings
    "/analytics": RouteRule(module=Module.reports, level=AccessLevel.read),
    "/settings": RouteRule(module=Module.company_settings, level=AccessLevel.read),

    # User management
    "/admin": RouteRule(module=Module.user_management, level=AccessLevel.read),
    "/admin/roles": RouteRule(module=Module.user_management, level=AccessLevel.manage),
    "/admin/add-agent": RouteRule(module=Module.user_management, level=AccessLevel.write),
}

# Open to every authenticated user even when unmapped routes are denied.
PUBLIC_ROUTES = frozenset({
    "/",
    "/profile",
    "/setup",
})


# ============================================================
# Helpers
# ============================================================
def _to_enum(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return None


def access_rank(level) -> int:
    """Position of `level` in ACCESS_HIERARCHY, or -1 if it is not a level."""
    level = _to_enum(AccessLevel, level)
    if level is None:
        return -1
    return ACCESS_HIERARCHY.index(level)


def highest_level(levels: Iterable) -> AccessLevel:
    """Highest level in `levels`; `none` for an empty iterable."""
    best = AccessLevel.none
    for level in levels:
        if access_rank(level) > access_rank(best):
            best = _to_enum(AccessLevel, level)
    return best


def _module_levels(user: UserAccessProfile, module: Module, skip_empty: bool) -> Optional[List[AccessLevel]]:
    # First grant carrying an entry for the module wins.
    for grant in user.access:
        levels = grant.get(module)
        if levels is None:
            continue
        if skip_empty and not levels:
            continue
        return levels
    return None


def grants_include_admin(access: Iterable[Dict]) -> bool:
    return any(
        AccessLevel.admin in levels
        for grant in access
        for levels in grant.values()
    )


def has_admin_grant(user: Optional[UserAccessProfile]) -> bool:
    """True when any grant holds `admin` on any module."""
    if user is None:
        return False
    return grants_include_admin(user.access)


def _is_global_admin(user: UserAccessProfile) -> bool:
    return settings.RBAC_ADMIN_GRANT_ESCALATES and has_admin_grant(user)


# ============================================================
# Permission checks
# ============================================================
def has_access(user: Optional[UserAccessProfile], module, required_level) -> bool:
    """
    Check if user holds `required_level` (or higher) on `module`.
    """
    if user is None:
        return False

    if user.is_company_owner:
        return True

    if _is_global_admin(user):
        return True

    module = _to_enum(Module, module)
    required_rank = access_rank(required_level)
    if module is None or required_rank < 0:
        return False

    levels = _module_levels(user, module, skip_empty=False)
    if not levels:
        return False

    return max(access_rank(level) for level in levels) >= required_rank


def get_user_access_level(user: Optional[UserAccessProfile], module) -> AccessLevel:
    """
    Get user's highest access level for a module.
    """
    if user is None:
        return AccessLevel.none

    if user.is_company_owner:
        return AccessLevel.admin

    if _is_global_admin(user):
        return AccessLevel.admin

    module = _to_enum(Module, module)
    if module is None:
        return AccessLevel.none

    levels = _module_levels(user, module, skip_empty=True)
    if not levels:
        return AccessLevel.none

    return highest_level(levels)


def normalize_route(route: str) -> str:
    """Drop query string / fragment and trailing slash ("/tenants/?x=1" → "/tenants")."""
    path = route.split("?", 1)[0].split("#", 1)[0]
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    return path


def get_route_rule(route: str) -> Optional[RouteRule]:
    return ROUTE_ACCESS_MAP.get(normalize_route(route))


def can_access_route(user: Optional[UserAccessProfile], route: str) -> bool:
    """
    Check if user can open a frontend route.
    """
    if user is None:
        return False

    if user.is_company_owner:
        return True

    rule = get_route_rule(route)
    if rule is None:
        if normalize_route(route) in PUBLIC_ROUTES:
            return True
        return settings.RBAC_UNMAPPED_ROUTES_ALLOWED

    return has_access(user, rule.module, rule.level)


# ============================================================
# Reporting helpers
# ============================================================
def effective_access_map(user: Optional[UserAccessProfile]) -> Dict[Module, AccessLevel]:
    return {module: get_user_access_level(user, module) for module in Module}


def get_access_summary(user: Optional[UserAccessProfile]) -> str:
    """
    Short label for the roles screen:
        Full Access (Owner) / No Access / Default (<role>) /
        System Admin / Custom (<n> modules)
    """
    if user is None:
        return "No Access"

    if user.is_company_owner:
        return "Full Access (Owner)"

    if not user.access:
        return f"Default ({user.role})" if user.role else "No Access"

    if has_admin_grant(user):
        return "System Admin"

    module_count = sum(len(grant) for grant in user.access)
    return f"Custom ({module_count} modules)"
