# routers/permissions.py

from typing import Optional
from fastapi import APIRouter, Depends, Query

from core.config import settings
from core.rbac import (
    ROUTE_ACCESS_MAP,
    PUBLIC_ROUTES,
    can_access_route,
    effective_access_map,
    get_access_summary,
    get_route_rule,
    has_access,
    normalize_route,
)
from core.rbac_context import get_user_rbac_context
from dependencies.auth import CurrentUser, get_optional_auth, require_rbac_context
from models.enums import AccessLevel, Module
from models.rbac import (
    AccessCheckRead,
    ModuleAccessRead,
    PermissionsRead,
    RouteCheckRead,
    RouteTableRead,
    UserAccessProfile,
)

router = APIRouter(
    prefix="/permissions",
    tags=["Permissions"],
)


# -----------------------------------------------------
# GET /permissions/me
# Effective level per module for the calling user
# -----------------------------------------------------
@router.get("/me", response_model=PermissionsRead, summary="Current user's permissions")
def get_my_permissions(profile: UserAccessProfile = Depends(require_rbac_context)):
    levels = effective_access_map(profile)
    return PermissionsRead(
        id=profile.id,
        role=profile.role,
        is_company_owner=profile.is_company_owner,
        company_account_id=profile.company_account_id,
        summary=get_access_summary(profile),
        modules=[ModuleAccessRead(module=m, level=lvl) for m, lvl in levels.items()],
    )


# -----------------------------------------------------
# GET /permissions/check?module=tenants&level=write
# -----------------------------------------------------
@router.get("/check", response_model=AccessCheckRead, summary="Check module access")
def check_access(
    module: Module = Query(...),
    level: AccessLevel = Query(AccessLevel.read),
    profile: UserAccessProfile = Depends(require_rbac_context),
):
    return AccessCheckRead(
        module=module,
        level=level,
        allowed=has_access(profile, module, level),
    )


# -----------------------------------------------------
# GET /permissions/route?path=/tenants/add
# Used by frontend route guards; anonymous callers get allowed=false
# -----------------------------------------------------
@router.get("/route", response_model=RouteCheckRead, summary="Check route access")
def check_route(
    path: str = Query(..., min_length=1),
    current_user: Optional[CurrentUser] = Depends(get_optional_auth),
):
    profile = get_user_rbac_context(current_user.id) if current_user else None

    return RouteCheckRead(
        path=normalize_route(path),
        allowed=can_access_route(profile, path),
        rule=get_route_rule(path),
    )


# -----------------------------------------------------
# GET /permissions/routes
# -----------------------------------------------------
@router.get("/routes", response_model=RouteTableRead, summary="Route access table")
def list_route_rules():
    return RouteTableRead(
        routes=ROUTE_ACCESS_MAP,
        public_routes=sorted(PUBLIC_ROUTES),
        unmapped_routes_allowed=settings.RBAC_UNMAPPED_ROUTES_ALLOWED,
    )
