"""
Tests for bearer-token auth, the error envelope, CORS and health.
"""

from unittest.mock import MagicMock

import pytest

from document_service.auth import require_admin_client


# =============================================================================
# Authentication
# =============================================================================


class TestAuthentication:
    """Every document endpoint requires a valid Supabase session."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("get", "/api/list-documents"),
            ("post", "/api/upload-document"),
            ("post", "/api/update-document"),
            ("post", "/api/delete-document"),
            ("post", "/api/get-document-url"),
            ("get", "/api/profile"),
            ("post", "/api/update-profile"),
            ("post", "/api/upload-avatar"),
        ],
    )
    def test_missing_header_returns_401(self, client, method, path):
        response = getattr(client, method)(path)

        assert response.status_code == 401
        assert response.json() == {"error": "Missing or invalid Authorization header"}

    @pytest.mark.parametrize("header", ["Token abc", "Basic dXNlcjpwYXNz", "Bearer", "abc"])
    def test_malformed_header_returns_401(self, client, header):
        response = client.get("/api/list-documents", headers={"Authorization": header})

        assert response.status_code == 401
        assert response.json() == {"error": "Missing or invalid Authorization header"}

    def test_rejected_token_returns_401(self, client, invalid_auth_headers, mock_documents_repo):
        response = client.get("/api/list-documents", headers=invalid_auth_headers)

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid or expired session. Please sign in again."}
        mock_documents_repo.list_for_user.assert_not_called()

    def test_response_without_user_returns_401(self, client, auth_headers, mock_supabase):
        mock_supabase.auth.get_user.side_effect = None
        mock_supabase.auth.get_user.return_value = MagicMock(user=None)

        response = client.get("/api/list-documents", headers=auth_headers)

        assert response.status_code == 401

    def test_missing_service_key_returns_500(self, app, client, auth_headers, mocker):
        app.dependency_overrides.pop(require_admin_client)
        mocker.patch("document_service.auth.get_admin_client", return_value=None)

        response = client.get("/api/list-documents", headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"error": "Server misconfiguration: missing service key"}

    def test_missing_service_key_checked_before_token(self, app, client, mocker):
        app.dependency_overrides.pop(require_admin_client)
        mocker.patch("document_service.auth.get_admin_client", return_value=None)

        response = client.get("/api/list-documents")

        assert response.status_code == 500


# =============================================================================
# Error Envelope
# =============================================================================


class TestErrorEnvelope:
    def test_wrong_method_returns_405(self, client, auth_headers):
        response = client.get("/api/delete-document", headers=auth_headers)

        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}

    def test_unknown_route_returns_404_envelope(self, client):
        response = client.get("/api/does-not-exist")

        assert response.status_code == 404
        assert "error" in response.json()

    def test_malformed_json_returns_400(self, client, auth_headers):
        response = client.post(
            "/api/delete-document",
            headers={**auth_headers, "Content-Type": "application/json"},
            content=b"{\"docId\": ",
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body"}


# =============================================================================
# Health and CORS
# =============================================================================


class TestHealth:
    def test_health_check(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["supabase_configured"] is True
        assert "timestamp" in data
        assert data["timestamp"].endswith("Z")
        assert "version" in data


class TestCors:
    def test_preflight_allows_any_origin(self, client):
        response = client.options(
            "/api/list-documents",
            headers={
                "Origin": "https://app.example.com",
                "Access-Control-Request-Method": "GET",
                "Access-Control-Request-Headers": "Authorization",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
