# tests/test_rbac_context.py

"""
Tests for loading RBAC contexts from Supabase.
"""

from unittest.mock import Mock, patch

from core.config import settings
from core.rbac_context import (
    get_user_rbac_context,
    invalidate_user_rbac_context,
    parse_user_access_profile,
    serialize_access,
)
from models.enums import AccessLevel, Module


def _client_returning(data):
    mock_client = Mock()
    query = mock_client.table.return_value.select.return_value.eq.return_value.single.return_value
    query.execute.return_value = Mock(data=data)
    return mock_client


def test_parse_valid_record():
    profile = parse_user_access_profile({
        "id": "u-1",
        "role": "agent",
        "is_company_owner": None,
        "access": [{"tenants": ["read", "write"]}],
        "company_account_id": "company-1",
    })

    assert profile is not None
    assert profile.is_company_owner is False
    assert profile.access == [{Module.tenants: [AccessLevel.read, AccessLevel.write]}]


def test_parse_null_access_is_empty():
    profile = parse_user_access_profile({"id": "u-1", "access": None})
    assert profile.access == []


def test_parse_rejects_unknown_module():
    assert parse_user_access_profile({"id": "u-1", "access": [{"pets": ["read"]}]}) is None


def test_parse_rejects_unknown_level():
    assert parse_user_access_profile({"id": "u-1", "access": [{"tenants": ["root"]}]}) is None


def test_parse_rejects_non_object_grant():
    assert parse_user_access_profile({"id": "u-1", "access": ["tenants"]}) is None


def test_parse_empty_record():
    assert parse_user_access_profile(None) is None
    assert parse_user_access_profile({}) is None


def test_get_context_queries_users_table():
    mock_client = _client_returning({
        "id": "u-1",
        "role": "agent",
        "is_company_owner": False,
        "access": [{"leases": ["read"]}],
        "company_account_id": "company-1",
    })

    with patch("core.rbac_context.get_supabase_client", return_value=mock_client):
        profile = get_user_rbac_context("u-1")

    mock_client.table.assert_called_once_with("users")
    mock_client.table.return_value.select.return_value.eq.assert_called_once_with("id", "u-1")
    assert profile.id == "u-1"
    assert profile.access[0][Module.leases] == [AccessLevel.read]


def test_get_context_without_client_returns_none():
    with patch("core.rbac_context.get_supabase_client", return_value=None):
        assert get_user_rbac_context("u-1") is None


def test_get_context_query_error_returns_none():
    mock_client = Mock()
    mock_client.table.side_effect = Exception("connection refused")

    with patch("core.rbac_context.get_supabase_client", return_value=mock_client):
        assert get_user_rbac_context("u-1") is None


def test_get_context_empty_id_returns_none():
    with patch("core.rbac_context.get_supabase_client") as mock_supabase:
        assert get_user_rbac_context("") is None
        mock_supabase.assert_not_called()


def test_get_context_reads_fresh_by_default():
    mock_client = _client_returning({"id": "u-1", "access": []})

    with patch("core.rbac_context.get_supabase_client", return_value=mock_client):
        get_user_rbac_context("u-1")
        get_user_rbac_context("u-1")

    assert mock_client.table.call_count == 2


def test_get_context_uses_cache_when_ttl_set(monkeypatch):
    monkeypatch.setattr(settings, "RBAC_CONTEXT_CACHE_TTL", 60)
    mock_client = _client_returning({"id": "u-1", "access": []})

    with patch("core.rbac_context.get_supabase_client", return_value=mock_client):
        first = get_user_rbac_context("u-1")
        second = get_user_rbac_context("u-1")
        invalidate_user_rbac_context("u-1")
        get_user_rbac_context("u-1")

    assert first == second
    assert mock_client.table.call_count == 2


def test_serialize_access_uses_plain_strings():
    payload = serialize_access([{Module.tenants: [AccessLevel.read, AccessLevel.write]}])

    assert payload == [{"tenants": ["read", "write"]}]
    assert type(next(iter(payload[0]))) is str
    assert serialize_access(None) is None
