from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string.
    """

    def __str__(self):
        return str(self.value)


# -----------------------------------------------------
# ACCESS LEVEL
# -----------------------------------------------------
class AccessLevel(BaseStrEnum):
    """
    Privilege tier within a module.
    Declaration order is the privilege order (lowest first).
    """

    none = "none"
    read = "read"
    write = "write"
    delete = "delete"
    manage = "manage"
    admin = "admin"


# -----------------------------------------------------
# MODULE
# -----------------------------------------------------
class Module(BaseStrEnum):
    """Resource categories that are permissioned independently."""

    properties = "properties"
    tenants = "tenants"
    leases = "leases"
    payments = "payments"
    maintenance_requests = "maintenance_requests"
    reports = "reports"
    company_settings = "company_settings"
    user_management = "user_management"


# -----------------------------------------------------
# USER ROLE
# -----------------------------------------------------
class UserRole(BaseStrEnum):
    """Roles an account can be created with. Drives default grants only."""

    admin = "admin"
    manager = "manager"
    agent = "agent"
    landlord = "landlord"
