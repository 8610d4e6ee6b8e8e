# tests/test_permissions_api.py

"""
Tests for the /permissions endpoints.
"""

from unittest.mock import patch

from fastapi.testclient import TestClient

from dependencies.auth import get_optional_auth, get_rbac_context


def test_me_returns_effective_levels(app, client: TestClient, tenant_editor_profile):
    app.dependency_overrides[get_rbac_context] = lambda: tenant_editor_profile

    response = client.get("/permissions/me")

    assert response.status_code == 200
    data = response.json()
    assert data["summary"] == "Custom (1 modules)"
    levels = {m["module"]: m["level"] for m in data["modules"]}
    assert levels["tenants"] == "write"
    assert levels["payments"] == "none"


def test_me_without_profile_is_forbidden(app, client: TestClient):
    app.dependency_overrides[get_rbac_context] = lambda: None

    response = client.get("/permissions/me")

    assert response.status_code == 403


def test_me_requires_token(client: TestClient):
    response = client.get("/permissions/me")

    assert response.status_code in (401, 403)


def test_check_module_access(app, client: TestClient, tenant_editor_profile):
    app.dependency_overrides[get_rbac_context] = lambda: tenant_editor_profile

    allowed = client.get("/permissions/check", params={"module": "tenants", "level": "write"})
    denied = client.get("/permissions/check", params={"module": "tenants", "level": "delete"})

    assert allowed.json()["allowed"] is True
    assert denied.json()["allowed"] is False


def test_check_rejects_unknown_module(app, client: TestClient, tenant_editor_profile):
    app.dependency_overrides[get_rbac_context] = lambda: tenant_editor_profile

    response = client.get("/permissions/check", params={"module": "pets"})

    assert response.status_code == 422


def test_route_check_for_signed_in_user(app, client: TestClient, mock_current_user, tenant_editor_profile):
    app.dependency_overrides[get_optional_auth] = lambda: mock_current_user

    with patch("routers.permissions.get_user_rbac_context", return_value=tenant_editor_profile):
        add_tenant = client.get("/permissions/route", params={"path": "/tenants/add"})
        roles = client.get("/permissions/route", params={"path": "/admin/roles"})

    assert add_tenant.json()["allowed"] is True
    assert add_tenant.json()["rule"] == {"module": "tenants", "level": "write"}
    assert roles.json()["allowed"] is False


def test_route_check_unmapped_route_is_open(app, client: TestClient, mock_current_user, no_access_profile):
    app.dependency_overrides[get_optional_auth] = lambda: mock_current_user

    with patch("routers.permissions.get_user_rbac_context", return_value=no_access_profile):
        response = client.get("/permissions/route", params={"path": "/some/unmapped/route"})

    assert response.json() == {"path": "/some/unmapped/route", "allowed": True, "rule": None}


def test_route_check_anonymous_is_denied(client: TestClient):
    response = client.get("/permissions/route", params={"path": "/some/unmapped/route"})

    assert response.status_code == 200
    assert response.json()["allowed"] is False


def test_route_table(client: TestClient):
    response = client.get("/permissions/routes")

    assert response.status_code == 200
    data = response.json()
    assert data["routes"]["/admin/roles"] == {"module": "user_management", "level": "manage"}
    assert "/profile" in data["public_routes"]
    assert data["unmapped_routes_allowed"] is True
