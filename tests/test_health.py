# tests/test_health.py

from unittest.mock import patch

from fastapi.testclient import TestClient


def test_health_app(client: TestClient):
    response = client.get("/health/app")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_health_db_not_configured(client: TestClient):
    with patch("core.supabase_client.get_supabase_client", return_value=None):
        response = client.get("/health/db")

    assert response.status_code == 200
    assert response.json()["status"] == "not_configured"


def test_health_db_reports_tables(client: TestClient, mock_supabase_client):
    mock_supabase_client.table.return_value.select.return_value.limit.return_value.execute.return_value.data = [
        {"id": "1"}
    ]

    with patch("core.supabase_client.get_supabase_client", return_value=mock_supabase_client):
        response = client.get("/health/db")

    data = response.json()
    assert data["status"] == "ok"
    assert data["details"]["tables"]["users"] == {"status": "ok", "rows_found": 1}


def test_startup_tolerates_routes_without_path(app):
    class PathlessRoute:
        methods = None

    app.router.routes.append(PathlessRoute())

    with TestClient(app) as test_client:
        assert test_client.app is app
