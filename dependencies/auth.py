from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
from supabase import Client

from core.supabase_client import get_supabase_client
from core.rbac_context import get_user_rbac_context
from core.rbac import has_access, can_access_route
from models.enums import AccessLevel, Module
from models.rbac import UserAccessProfile


bearer_scheme = HTTPBearer()


# ============================================================
# Current User Model (authenticated identity)
# ============================================================
class CurrentUser(BaseModel):
    id: str                         # Supabase Auth UID (= public.users.id)
    email: str
    name: Optional[str] = None
    role: Optional[str] = None
    company_account_id: Optional[str] = None


# ============================================================
# AUTH DECODING (Supabase: validates JWT + reads metadata)
# ============================================================
def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> CurrentUser:

    token = credentials.credentials

    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired authentication token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    client: Client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    # ---------------------------------------------------------
    # Validate JWT via Supabase GoTrue
    # ---------------------------------------------------------
    try:
        auth_resp = client.auth.get_user(token)
        if not auth_resp or not auth_resp.user:
            raise unauthorized
        auth_user = auth_resp.user
    except Exception:
        raise unauthorized

    email = auth_user.email
    metadata = auth_user.user_metadata or {}

    if not email:
        raise unauthorized

    return CurrentUser(
        id=auth_user.id,
        email=email,
        name=metadata.get("name"),
        role=metadata.get("role") or metadata.get("user_role"),
        company_account_id=metadata.get("company_account_id"),
    )


# ============================================================
# RBAC CONTEXT (users row, loaded fresh per request)
# ============================================================
def get_rbac_context(
    current_user: CurrentUser = Depends(get_current_user),
) -> Optional[UserAccessProfile]:
    return get_user_rbac_context(current_user.id)


def require_rbac_context(
    profile: Optional[UserAccessProfile] = Depends(get_rbac_context),
) -> UserAccessProfile:
    if profile is None:
        raise HTTPException(
            status_code=403,
            detail="No access profile found for this account",
        )
    return profile


# ============================================================
# MODULE ACCESS CHECK
# ============================================================
def requires_access(module: Module, level: AccessLevel):
    """
    Usage:
        @router.put("/", dependencies=[Depends(requires_access(Module.tenants, AccessLevel.write))])
    """

    def dependency(profile: Optional[UserAccessProfile] = Depends(get_rbac_context)):
        if not has_access(profile, module, level):
            raise HTTPException(
                status_code=403,
                detail=f"Insufficient permissions: '{module}:{level}' required",
            )
        return profile

    return dependency


# ============================================================
# ROUTE ACCESS CHECK (frontend route guards)
# ============================================================
def requires_route(route: str):
    def dependency(profile: Optional[UserAccessProfile] = Depends(get_rbac_context)):
        if not can_access_route(profile, route):
            raise HTTPException(
                status_code=403,
                detail="You don't have permission to access this page",
            )
        return profile

    return dependency


# ============================================================
# OPTIONAL AUTHENTICATION (for hybrid endpoints)
# ============================================================
def get_optional_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(HTTPBearer(auto_error=False)),
) -> Optional[CurrentUser]:
    """
    Returns CurrentUser if a valid token is provided, None otherwise.
    """
    if not credentials:
        return None

    try:
        return get_current_user(credentials)
    except HTTPException:
        return None
