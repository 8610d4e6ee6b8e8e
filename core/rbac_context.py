# core/rbac_context.py

"""
Loads UserAccessProfile snapshots from public.users.

Every failure (no client, query error, missing row, malformed grants)
is logged and returned as None, which the resolver treats as no access.
"""

from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from core.cache import CacheKeys, cache_delete, get_cached_data
from core.config import settings
from core.logging_config import logger
from core.supabase_client import get_supabase_client
from models.rbac import AccessGrant, UserAccessProfile

RBAC_COLUMNS = "id, role, is_company_owner, access, company_account_id"


def parse_user_access_profile(record: Optional[Dict[str, Any]]) -> Optional[UserAccessProfile]:
    """
    Validate a raw users row into a UserAccessProfile.
    Malformed grant data is rejected here rather than read as "no access" later.
    """
    if not record:
        return None

    try:
        return UserAccessProfile.model_validate(record)
    except ValidationError as e:
        logger.error(
            f"Rejected malformed RBAC data for user {record.get('id')}: "
            f"{e.error_count()} validation error(s)"
        )
        return None


def _fetch_user_rbac_context(user_id: str) -> Optional[UserAccessProfile]:
    client = get_supabase_client()
    if not client:
        logger.error("Cannot load RBAC context: Supabase client not configured")
        return None

    try:
        result = (
            client.table("users")
            .select(RBAC_COLUMNS)
            .eq("id", user_id)
            .single()
            .execute()
        )
    except Exception as e:
        logger.error(f"Error fetching user RBAC context for {user_id}: {e}")
        return None

    return parse_user_access_profile(result.data)


def get_user_rbac_context(user_id: str) -> Optional[UserAccessProfile]:
    """
    Get a user's RBAC context from the database.

    Reads fresh unless RBAC_CONTEXT_CACHE_TTL is set.
    """
    if not user_id:
        return None

    ttl = settings.RBAC_CONTEXT_CACHE_TTL
    if ttl <= 0:
        return _fetch_user_rbac_context(user_id)

    return get_cached_data(
        CacheKeys.user_profile(user_id),
        lambda: _fetch_user_rbac_context(user_id),
        ttl_seconds=ttl,
    )


def invalidate_user_rbac_context(user_id: str):
    cache_delete(CacheKeys.user_profile(user_id))


def serialize_access(access: Optional[List[AccessGrant]]) -> Optional[List[Dict[str, List[str]]]]:
    """Plain-JSON form of a grant list for the users.access column."""
    if access is None:
        return None
    return [
        {str(module): [str(level) for level in levels] for module, levels in grant.items()}
        for grant in access
    ]
