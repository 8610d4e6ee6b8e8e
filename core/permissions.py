# core/permissions.py

from typing import Dict, List, Optional

from models.enums import AccessLevel, Module
from models.rbac import AccessGrant

_ALL = [AccessLevel.read, AccessLevel.write, AccessLevel.delete, AccessLevel.manage, AccessLevel.admin]
_READ_MANAGE = [AccessLevel.read, AccessLevel.write, AccessLevel.delete, AccessLevel.manage]
_READ_WRITE = [AccessLevel.read, AccessLevel.write]
_READ_ONLY = [AccessLevel.read]


# ============================================
# ROLE → DEFAULT MODULE ACCESS
# ============================================
# Applied when a user is created or reset to defaults.
# Modules missing from a role get an empty level list.
DEFAULT_ROLE_ACCESS: Dict[str, Dict[Module, List[AccessLevel]]] = {

    # =====================================================
    # ADMIN: everything, including the admin tier
    # =====================================================
    "admin": {module: _ALL for module in Module},

    # =====================================================
    # MANAGER: manage all modules, view the team only
    # =====================================================
    "manager": {
        Module.properties: _READ_MANAGE,
        Module.tenants: _READ_MANAGE,
        Module.leases: _READ_MANAGE,
        Module.payments: _READ_MANAGE,
        Module.maintenance_requests: _READ_MANAGE,
        Module.reports: _READ_MANAGE,
        Module.company_settings: _READ_MANAGE,
        Module.user_management: _READ_ONLY,
    },

    # =====================================================
    # AGENT: day-to-day leasing work
    # =====================================================
    "agent": {
        Module.properties: _READ_WRITE,
        Module.tenants: _READ_WRITE,
        Module.leases: _READ_WRITE,
        Module.payments: _READ_ONLY,
        Module.maintenance_requests: _READ_WRITE,
        Module.reports: _READ_ONLY,
    },

    # =====================================================
    # LANDLORD: read-only portfolio view
    # =====================================================
    "landlord": {
        Module.properties: _READ_ONLY,
        Module.tenants: _READ_ONLY,
        Module.leases: _READ_ONLY,
        Module.payments: _READ_ONLY,
        Module.maintenance_requests: _READ_ONLY,
        Module.reports: _READ_ONLY,
    },
}


def default_access_for_role(role: Optional[str]) -> Optional[List[AccessGrant]]:
    """
    Build the users.access payload for a role.

    Returns a single grant covering every module, or None when the role
    has no defaults (unknown / empty role).
    """
    perms = DEFAULT_ROLE_ACCESS.get((role or "").lower())
    if perms is None:
        return None

    grant: AccessGrant = {module: list(perms.get(module, [])) for module in Module}
    return [grant]
