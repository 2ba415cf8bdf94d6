"""Tests for login, logout and route protection."""

from fastapi import status

from taskboard.config import settings
from taskboard.core.sessions import sign

HTMX = {"HX-Request": "true"}
USERNAME = settings.admin_username
PASSWORD = settings.admin_password


class TestLogin:
    def test_login_page_renders_form(self, client):
        response = client.get("/login")

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"].startswith("text/html")
        assert 'name="username"' in response.text
        assert 'name="password"' in response.text

    def test_successful_login_sets_signed_cookie(self, client):
        response = client.post(
            "/login",
            data={"username": USERNAME, "password": PASSWORD},
            follow_redirects=False,
        )

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/boards"
        cookie = response.headers["set-cookie"]
        assert cookie.startswith(f"{settings.session_cookie_name}=")
        assert "HttpOnly" in cookie
        assert "samesite=lax" in cookie.lower()
        assert f"Max-Age={settings.session_max_age_seconds}" in cookie

    def test_htmx_login_uses_hx_redirect(self, client):
        response = client.post(
            "/login", data={"username": USERNAME, "password": PASSWORD}, headers=HTMX
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["HX-Redirect"] == "/boards"
        assert settings.session_cookie_name in response.headers["set-cookie"]

    def test_wrong_password_is_unauthorized(self, client):
        response = client.post("/login", data={"username": USERNAME, "password": "nope"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert "Invalid username or password" in response.text
        assert "set-cookie" not in response.headers
        # The submitted username is kept, the password never echoed
        assert f'value="{USERNAME}"' in response.text
        assert "nope" not in response.text

    def test_missing_fields_are_unprocessable(self, client):
        response = client.post("/login", data={"username": "", "password": ""})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "Username is required" in response.text
        assert "Password is required" in response.text

    def test_logged_in_user_skips_login_page(self, auth_client):
        response = auth_client.get("/login", follow_redirects=False)

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/boards"

    def test_logout_clears_cookie(self, auth_client):
        response = auth_client.post("/logout", follow_redirects=False)

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/login"
        assert 'Max-Age=0' in response.headers["set-cookie"]

        follow_up = auth_client.get("/boards", follow_redirects=False)
        assert follow_up.status_code == status.HTTP_303_SEE_OTHER


class TestProtection:
    def test_anonymous_page_request_redirects_to_login(self, client):
        response = client.get("/boards", follow_redirects=False)

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/login"

    def test_anonymous_htmx_request_is_unauthorized(self, client):
        response = client.get("/boards", headers=HTMX, follow_redirects=False)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.headers["HX-Redirect"] == "/login"

    def test_anonymous_mutation_is_blocked(self, client, store):
        response = client.post("/boards", data={"name": "Sneaky"}, follow_redirects=False)

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert client.get("/health").json()["boards"] == 0

    def test_tampered_cookie_is_rejected(self, client):
        token = sign(USERNAME, "not-the-server-secret")
        client.cookies.set(settings.session_cookie_name, token)

        response = client.get("/boards", follow_redirects=False)

        assert response.status_code == status.HTTP_303_SEE_OTHER
        assert response.headers["location"] == "/login"

    def test_cookie_signed_with_server_secret_is_accepted(self, client):
        client.cookies.set(
            settings.session_cookie_name, sign("someone", settings.session_secret)
        )

        response = client.get("/boards")

        assert response.status_code == status.HTTP_200_OK
        assert "Signed in as someone" in response.text

    def test_expired_cookie_is_rejected(self, client):
        token = sign(
            USERNAME,
            settings.session_secret,
            issued_at=1_000_000_000,
        )
        client.cookies.set(settings.session_cookie_name, token)

        response = client.get("/boards", follow_redirects=False)

        assert response.status_code == status.HTTP_303_SEE_OTHER

    def test_health_is_public(self, client):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "taskboard"
        assert data["boards"] == 0
