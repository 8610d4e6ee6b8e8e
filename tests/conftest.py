# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock
from typing import Generator

from main import create_app
from dependencies.auth import CurrentUser
from models.rbac import UserAccessProfile


@pytest.fixture(scope="function")
def app():
    """Create a test FastAPI application instance."""
    return create_app()


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def mock_current_user():
    """Authenticated identity as decoded from a Supabase token."""
    return CurrentUser(
        id="user-1",
        email="agent@example.com",
        name="Test Agent",
        role="agent",
        company_account_id="company-1",
    )


@pytest.fixture
def owner_profile():
    return UserAccessProfile(
        id="owner-1",
        role="admin",
        is_company_owner=True,
        access=[],
        company_account_id="company-1",
    )


@pytest.fixture
def tenant_editor_profile():
    """Non-owner with read/write on tenants only."""
    return UserAccessProfile(
        id="user-1",
        role="agent",
        is_company_owner=False,
        access=[{"tenants": ["read", "write"]}],
        company_account_id="company-1",
    )


@pytest.fixture
def user_manager_profile():
    """Non-owner allowed to manage other users' access."""
    return UserAccessProfile(
        id="manager-1",
        role="manager",
        is_company_owner=False,
        access=[{"user_management": ["read", "write", "delete", "manage"]}],
        company_account_id="company-1",
    )


@pytest.fixture
def no_access_profile():
    return UserAccessProfile(
        id="user-2",
        role=None,
        is_company_owner=False,
        access=[],
        company_account_id="company-1",
    )


@pytest.fixture
def mock_supabase_client():
    """Create a mock Supabase client."""
    mock_client = Mock()
    mock_table = Mock()
    mock_client.table.return_value = mock_table
    return mock_client


@pytest.fixture(autouse=True)
def reset_cache():
    """Reset cache before each test."""
    from core.cache import cache_clear
    cache_clear()
    yield
    cache_clear()
