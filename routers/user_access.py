# routers/user_access.py

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from core.cache import CacheKeys, cache_delete, get_cached_data
from core.config import settings
from core.errors import extract_supabase_error, handle_supabase_error
from core.logging_config import logger
from core.permissions import default_access_for_role
from core.rbac import get_access_summary, grants_include_admin
from core.rbac_context import (
    get_user_rbac_context,
    invalidate_user_rbac_context,
    parse_user_access_profile,
    serialize_access,
)
from core.supabase_client import get_supabase_client
from dependencies.auth import requires_access
from models.enums import AccessLevel, Module, UserRole
from models.rbac import AccessGrantsUpdate, UserAccessCreate, UserAccessProfile, UserAccessRead

router = APIRouter(
    prefix="/user-access",
    tags=["Access Management"],
)

USER_LIST_COLUMNS = "id, email, name, role, is_company_owner, access, company_account_id"


# ============================================================
# Helpers
# ============================================================
def _to_read(row: dict, profile: UserAccessProfile) -> UserAccessRead:
    return UserAccessRead(
        id=profile.id,
        email=row.get("email"),
        name=row.get("name"),
        role=profile.role,
        is_company_owner=profile.is_company_owner,
        access=profile.access,
        summary=get_access_summary(profile),
    )


def _get_company_user(user_id: str, caller: UserAccessProfile) -> UserAccessProfile:
    """Load a target user; users outside the caller's company look missing."""
    if not caller.company_account_id:
        raise HTTPException(404, "User not found")

    target = get_user_rbac_context(user_id)
    if target is None or target.company_account_id != caller.company_account_id:
        raise HTTPException(404, "User not found")
    return target


def _get_editable_user(user_id: str, caller: UserAccessProfile) -> UserAccessProfile:
    if user_id == caller.id:
        logger.warning(f"User {caller.id} tried to change their own access")
        raise HTTPException(403, "You cannot change your own access")

    target = _get_company_user(user_id, caller)
    if target.is_company_owner:
        raise HTTPException(
            status_code=403,
            detail="Company owners have full system access and cannot be modified",
        )
    return target


def _require_admin_grant_allowed(caller: UserAccessProfile, access) -> None:
    """Only company owners may hand out the admin tier."""
    if access and grants_include_admin(access) and not caller.is_company_owner:
        logger.warning(f"User {caller.id} tried to grant admin access without being a company owner")
        raise HTTPException(403, "Only company owners can grant admin access")


def _write_access(user_id: str, company_id: Optional[str], access) -> UserAccessProfile:
    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    try:
        result = (
            client.table("users")
            .update({"access": serialize_access(access)})
            .eq("id", user_id)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Update user access")

    invalidate_user_rbac_context(user_id)
    if company_id:
        cache_delete(CacheKeys.company_users(company_id))

    if not result.data:
        raise HTTPException(404, "User not found")

    updated = parse_user_access_profile(result.data[0])
    if updated is None:
        raise HTTPException(500, "Stored access data is invalid")
    return updated


def _fetch_company_users(company_id: str) -> list:
    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    try:
        result = (
            client.table("users")
            .select(USER_LIST_COLUMNS)
            .eq("company_account_id", company_id)
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "List company users")

    return result.data or []


# ============================================================
# List company users with their access
# ============================================================
@router.get(
    "",
    response_model=list[UserAccessRead],
    summary="List company users and their access",
)
def list_user_access(
    caller: UserAccessProfile = Depends(requires_access(Module.user_management, AccessLevel.read)),
):
    if not caller.company_account_id:
        return []

    ttl = settings.RBAC_CONTEXT_CACHE_TTL
    if ttl > 0:
        rows = get_cached_data(
            CacheKeys.company_users(caller.company_account_id),
            lambda: _fetch_company_users(caller.company_account_id),
            ttl_seconds=ttl,
        )
    else:
        rows = _fetch_company_users(caller.company_account_id)

    users = []
    for row in rows:
        profile = parse_user_access_profile(row)
        if profile is None:
            logger.warning(f"Skipping user {row.get('id')} with unreadable access data")
            continue
        users.append(_to_read(row, profile))

    return users


# ============================================================
# Create a company user with role default access
# ============================================================
@router.post(
    "",
    response_model=UserAccessRead,
    status_code=201,
    summary="Create a company user",
)
def create_company_user(
    payload: UserAccessCreate,
    caller: UserAccessProfile = Depends(requires_access(Module.user_management, AccessLevel.manage)),
):
    """
    Creates the Supabase Auth user (confirmed, so they can log in right away)
    and upserts the matching public.users row with the role's default access.
    """
    company_id = caller.company_account_id
    if not company_id:
        raise HTTPException(400, "No company account found for the current user")

    if payload.is_company_owner and not caller.is_company_owner:
        logger.warning(f"User {caller.id} tried to create a company owner")
        raise HTTPException(403, "Only company owners can create company owners")

    role_name = str(payload.role) if payload.role else None
    access = default_access_for_role(role_name)
    _require_admin_grant_allowed(caller, access)

    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    metadata = {
        "name": payload.name,
        "phone": payload.phone,
        "address": payload.address,
        "description": payload.description,
        "role": role_name,
        "company_account_id": company_id,
        "is_company_owner": payload.is_company_owner,
    }

    create_payload = {
        "email": payload.email,
        "password": payload.password,
        "email_confirm": True,
        "user_metadata": metadata,
    }

    try:
        user_resp = client.auth.admin.create_user(create_payload)
    except Exception as e:
        logger.error(f"Auth user creation failed for {payload.email}: {extract_supabase_error(e)}")
        raise HTTPException(400, f"User creation failed: {extract_supabase_error(e)}")

    new_user_id = getattr(getattr(user_resp, "user", None), "id", None)
    if not new_user_id:
        raise HTTPException(500, "Auth user creation returned no user id")

    row = {
        "id": new_user_id,
        "email": payload.email,
        "name": payload.name,
        "phone": payload.phone,
        "address": payload.address,
        "description": payload.description,
        "role": role_name,
        "company_account_id": company_id,
        "is_company_owner": payload.is_company_owner,
        "access": serialize_access(access),
    }

    try:
        result = (
            client.table("users")
            .upsert(row, on_conflict="id")
            .execute()
        )
    except Exception as e:
        raise handle_supabase_error(e, "Create user profile")

    cache_delete(CacheKeys.company_users(company_id))

    stored = result.data[0] if result.data else row
    profile = parse_user_access_profile(stored)
    if profile is None:
        raise HTTPException(500, "Stored access data is invalid")

    logger.info(f"User {caller.id} created user {new_user_id} with '{role_name}' defaults")
    return _to_read(stored, profile)


# ============================================================
# Read one user's access
# ============================================================
@router.get(
    "/{user_id}",
    response_model=UserAccessProfile,
    summary="Get a user's access profile",
)
def get_user_access(
    user_id: str,
    caller: UserAccessProfile = Depends(requires_access(Module.user_management, AccessLevel.read)),
):
    return _get_company_user(user_id, caller)


# ============================================================
# Replace a user's grants
# ============================================================
@router.put(
    "/{user_id}",
    response_model=UserAccessProfile,
    summary="Replace a user's module access",
)
def update_user_access(
    user_id: str,
    payload: AccessGrantsUpdate,
    caller: UserAccessProfile = Depends(requires_access(Module.user_management, AccessLevel.manage)),
):
    _get_editable_user(user_id, caller)
    _require_admin_grant_allowed(caller, payload.access)

    updated = _write_access(user_id, caller.company_account_id, payload.access)
    logger.info(f"User {caller.id} updated access for {user_id}")
    return updated


# ============================================================
# Clear a user's grants
# ============================================================
@router.delete(
    "/{user_id}",
    response_model=UserAccessProfile,
    summary="Remove all module access from a user",
)
def clear_user_access(
    user_id: str,
    caller: UserAccessProfile = Depends(requires_access(Module.user_management, AccessLevel.manage)),
):
    _get_editable_user(user_id, caller)

    updated = _write_access(user_id, caller.company_account_id, None)
    logger.info(f"User {caller.id} cleared access for {user_id}")
    return updated


# ============================================================
# Reset a user's grants to role defaults
# ============================================================
@router.post(
    "/{user_id}/defaults",
    response_model=UserAccessProfile,
    summary="Apply role default access to a user",
)
def apply_default_access(
    user_id: str,
    role: Optional[UserRole] = Query(None, description="Role to take defaults from (defaults to the user's role)"),
    caller: UserAccessProfile = Depends(requires_access(Module.user_management, AccessLevel.manage)),
):
    target = _get_editable_user(user_id, caller)

    role_name = str(role) if role else target.role
    access = default_access_for_role(role_name)
    if access is None:
        raise HTTPException(400, f"No default access defined for role '{role_name}'")
    _require_admin_grant_allowed(caller, access)

    updated = _write_access(user_id, caller.company_account_id, access)
    logger.info(f"User {caller.id} applied '{role_name}' defaults to {user_id}")
    return updated
