"""API tests for registration, login, refresh and logout."""

from __future__ import annotations

import pytest

from tests.factories.member import DEFAULT_PASSWORD, MemberFactory

AUTH = "/api/v1/auth"


@pytest.fixture()
def member(session):
    m = MemberFactory(email="ada@example.com", username="ada")
    session.commit()
    return m


def _login(client, email="ada@example.com", password=DEFAULT_PASSWORD):
    return client.post(f"{AUTH}/login", json={"email": email, "password": password})


class TestRegister:
    def test_register_returns_public_member(self, client) -> None:
        payload = {
            "email": "new@example.com",
            "username": "newbie",
            "password": "long-enough-pw",
            "full_name": "New Member",
        }

        resp = client.post(f"{AUTH}/register", json=payload)

        assert resp.status_code == 201
        data = resp.get_json()["data"]
        assert data["email"] == "new@example.com"
        assert data["username"] == "newbie"
        assert "password" not in data
        assert "password_hash" not in data

    def test_register_then_login(self, client) -> None:
        payload = {"email": "flow@example.com", "username": "flow", "password": "secret-123"}
        assert client.post(f"{AUTH}/register", json=payload).status_code == 201

        resp = _login(client, "flow@example.com", "secret-123")

        assert resp.status_code == 200
        assert resp.get_json()["data"]["access_token"]

    def test_short_password_is_rejected(self, client) -> None:
        payload = {"email": "short@example.com", "username": "short", "password": "1234567"}

        resp = client.post(f"{AUTH}/register", json=payload)

        assert resp.status_code == 400
        problem = resp.get_json()
        assert problem["code"] == "password_too_short"
        assert problem["details"] == {"field": "password"}

    def test_duplicate_email_conflicts(self, client, member) -> None:
        payload = {"email": member.email, "username": "someone-else", "password": "secret-123"}

        resp = client.post(f"{AUTH}/register", json=payload)

        assert resp.status_code == 409

    def test_missing_fields_fail_validation(self, client) -> None:
        resp = client.post(f"{AUTH}/register", json={"email": "not-an-email"})

        assert resp.status_code == 422
        problem = resp.get_json()
        assert problem["code"] == "validation_error"
        assert {"email", "username", "password"} <= set(problem["details"]["errors"])


class TestLogin:
    def test_login_issues_token_pair(self, client, member) -> None:
        resp = _login(client)

        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert data["token_type"] == "bearer"
        assert data["expires_in"] == 900
        assert data["access_token"] and data["refresh_token"]
        assert data["member"]["id"] == str(member.id)

    @pytest.mark.parametrize(
        ("email", "password"),
        [("ada@example.com", "wrong-password"), ("nobody@example.com", DEFAULT_PASSWORD)],
    )
    def test_bad_credentials_are_indistinguishable(self, client, member, email, password) -> None:
        resp = _login(client, email, password)

        assert resp.status_code == 401
        assert resp.headers["WWW-Authenticate"] == "Bearer"
        assert resp.get_json()["code"] == "invalid_credentials"


class TestRefreshAndLogout:
    def test_refresh_returns_new_access_token(self, client, member) -> None:
        refresh_token = _login(client).get_json()["data"]["refresh_token"]

        resp = client.post(f"{AUTH}/refresh", json={"refresh_token": refresh_token})

        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert data["access_token"]
        assert "refresh_token" not in data

    def test_logout_revokes_refresh_token(self, client, member) -> None:
        refresh_token = _login(client).get_json()["data"]["refresh_token"]

        assert client.post(f"{AUTH}/logout", json={"refresh_token": refresh_token}).status_code == 204
        resp = client.post(f"{AUTH}/refresh", json={"refresh_token": refresh_token})

        assert resp.status_code == 401
        assert resp.get_json()["code"] == "invalid_refresh_token"

    def test_logout_with_unknown_token_is_accepted(self, client) -> None:
        resp = client.post(f"{AUTH}/logout", json={"refresh_token": "never-issued"})

        assert resp.status_code == 204

    def test_logout_all_revokes_every_session(self, client, member, auth_headers) -> None:
        first = _login(client).get_json()["data"]["refresh_token"]
        _login(client)

        resp = client.post(f"{AUTH}/logout-all", headers=auth_headers(member))

        assert resp.status_code == 200
        assert resp.get_json()["data"]["revoked"] == 2
        assert client.post(f"{AUTH}/refresh", json={"refresh_token": first}).status_code == 401


class TestBearerAuthentication:
    def test_missing_token(self, client) -> None:
        resp = client.get("/api/v1/members/me")

        assert resp.status_code == 401
        assert resp.headers["WWW-Authenticate"] == "Bearer"
        assert resp.get_json()["code"] == "missing_token"

    def test_malformed_header(self, client) -> None:
        resp = client.get("/api/v1/members/me", headers={"Authorization": "Token abc"})

        assert resp.status_code == 401
        assert resp.get_json()["code"] == "invalid_token"

    def test_garbage_token(self, client) -> None:
        resp = client.get("/api/v1/members/me", headers={"Authorization": "Bearer not.a.jwt"})

        assert resp.status_code == 401
        assert resp.get_json()["code"] == "invalid_token"

    def test_refresh_token_is_not_an_access_token(self, client, member) -> None:
        refresh_token = _login(client).get_json()["data"]["refresh_token"]

        resp = client.get("/api/v1/members/me", headers={"Authorization": f"Bearer {refresh_token}"})

        assert resp.status_code == 401

    def test_me_returns_profile(self, client, member, auth_headers) -> None:
        resp = client.get("/api/v1/members/me", headers=auth_headers(member))

        assert resp.status_code == 200
        assert resp.get_json()["data"]["username"] == "ada"

    def test_me_update_changes_only_given_fields(self, client, member, auth_headers) -> None:
        resp = client.patch(
            "/api/v1/members/me", json={"full_name": "Ada L."}, headers=auth_headers(member)
        )

        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert data["full_name"] == "Ada L."
        assert data["email"] == "ada@example.com"
