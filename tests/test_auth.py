"""
Tests for the login/logout endpoints and credential configuration.
"""
import pytest

from portal.auth.session import AUTH_COOKIE_NAME
from portal.common.config import get_admin_credentials
from portal.common.errors import ConfigError


def _login(client, username="pricing-admin", password="s3cret-pass"):
    return client.post("/api/auth/login", json={"username": username, "password": password})


def test_login_success_sets_marker_cookie(client):
    response = _login(client)

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert response.cookies.get(AUTH_COOKIE_NAME) == "1"

    set_cookie = response.headers["set-cookie"]
    assert "HttpOnly" in set_cookie
    assert "Max-Age=604800" in set_cookie
    assert "Path=/" in set_cookie
    assert "samesite=lax" in set_cookie.lower()
    assert "Secure" not in set_cookie


def test_login_cookie_opens_protected_routes(client, mock_firestore):
    mock_firestore.collection.return_value.order_by.return_value.stream.return_value = []

    assert client.get("/api/products").status_code == 401
    _login(client)
    assert client.get("/api/products").status_code == 200


@pytest.mark.parametrize("username,password", [
    ("pricing-admin", "wrong"),
    ("wrong", "s3cret-pass"),
    ("wrong", "wrong"),
    ("PRICING-ADMIN", "s3cret-pass"),
    ("pricing-admin ", "s3cret-pass"),
])
def test_login_mismatch_is_401_with_generic_message(client, username, password):
    response = _login(client, username, password)

    assert response.status_code == 401
    assert response.json() == {"message": "Invalid credentials"}
    assert AUTH_COOKIE_NAME not in response.cookies


def test_login_missing_field_is_400(client):
    response = client.post("/api/auth/login", json={"username": "pricing-admin"})

    assert response.status_code == 400
    assert set(response.json()["errors"]) == {"password"}


def test_login_production_without_secrets_is_500(client, monkeypatch):
    monkeypatch.setenv("ENV", "production")
    monkeypatch.delenv("ADMIN_PASS")

    response = _login(client)

    assert response.status_code == 500
    assert "ADMIN_PASS" in response.json()["message"]
    assert "ADMIN_USER" not in response.json()["message"]


def test_login_production_marks_cookie_secure(client, monkeypatch):
    monkeypatch.setenv("ENV", "production")

    response = _login(client)

    assert response.status_code == 200
    assert "Secure" in response.headers["set-cookie"]


def test_login_development_fallback_credentials(client, monkeypatch):
    monkeypatch.delenv("ADMIN_USER")
    monkeypatch.delenv("ADMIN_PASS")

    assert _login(client, "admin", "admin123").status_code == 200
    assert _login(client, "pricing-admin", "s3cret-pass").status_code == 401


def test_logout_clears_cookie(client):
    _login(client)
    response = client.post("/api/auth/logout")

    assert response.status_code == 200
    assert "Max-Age=0" in response.headers["set-cookie"]
    assert client.get("/api/products").status_code == 401


class TestAdminCredentials:

    def test_production_names_every_missing_key(self, monkeypatch):
        monkeypatch.setenv("ENV", "production")
        monkeypatch.delenv("ADMIN_USER")
        monkeypatch.delenv("ADMIN_PASS")

        with pytest.raises(ConfigError) as exc_info:
            get_admin_credentials()

        assert exc_info.value.missing_keys == ["ADMIN_USER", "ADMIN_PASS"]
        assert exc_info.value.status_code == 500

    def test_configured_credentials_are_returned(self):
        assert get_admin_credentials() == ("pricing-admin", "s3cret-pass")
