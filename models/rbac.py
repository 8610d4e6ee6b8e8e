# models/rbac.py

from typing import Dict, List, Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from models.enums import AccessLevel, Module, UserRole


# One grant record: module → levels held for that module.
AccessGrant = Dict[Module, List[AccessLevel]]


# ===============================================================
# RBAC CONTEXT (public.users row, RBAC columns only)
# ===============================================================

class UserAccessProfile(BaseModel):
    """
    Snapshot of a user's authorization data.

    `access` mirrors the users.access jsonb[] column. Unknown module keys
    or level names fail validation.
    """
    id: str
    role: Optional[str] = None
    is_company_owner: bool = False
    access: List[AccessGrant] = []
    company_account_id: Optional[str] = None

    @field_validator("is_company_owner", mode="before")
    @classmethod
    def _owner_null_is_false(cls, value):
        return False if value is None else value

    @field_validator("access", mode="before")
    @classmethod
    def _access_null_is_empty(cls, value):
        return [] if value is None else value


class RouteRule(BaseModel):
    """Minimum level on a module required to open a route."""
    module: Module
    level: AccessLevel


# ===============================================================
# API MODELS
# ===============================================================

class UserAccessCreate(BaseModel):
    """
    New company user created from the roles screen.
    The company is always the caller's; access comes from the role defaults.
    """
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    address: Optional[str] = None
    description: Optional[str] = None
    role: Optional[UserRole] = None
    is_company_owner: bool = False


class AccessGrantsUpdate(BaseModel):
    """
    Replacement grant list for a user (admin only).
    """
    access: List[AccessGrant]


class ModuleAccessRead(BaseModel):
    module: Module
    level: AccessLevel


class PermissionsRead(BaseModel):
    """
    Effective permissions of the calling user.
    """
    id: str
    role: Optional[str] = None
    is_company_owner: bool = False
    company_account_id: Optional[str] = None
    summary: str
    modules: List[ModuleAccessRead]


class AccessCheckRead(BaseModel):
    module: Module
    level: AccessLevel
    allowed: bool


class RouteCheckRead(BaseModel):
    path: str
    allowed: bool
    rule: Optional[RouteRule] = None


class RouteTableRead(BaseModel):
    routes: Dict[str, RouteRule]
    public_routes: List[str]
    unmapped_routes_allowed: bool


class UserAccessRead(BaseModel):
    """
    A company user as shown on the roles screen.
    """
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None
    is_company_owner: bool = False
    access: List[AccessGrant] = []
    summary: str
