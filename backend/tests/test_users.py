"""User management endpoint tests (admin only)."""

import pytest

from fleetledger.models import User


def _new_user(**overrides):
    body = {"username": "ravi", "password": "secret1", "name": "Ravi Kumar", "role": "MANAGER"}
    body.update(overrides)
    return body


class TestCreateUser:

    def test_admin_creates_manager(self, client, admin_headers):
        resp = client.post("/api/users", json=_new_user(), headers=admin_headers)
        assert resp.status_code == 201
        user = resp.get_json()["user"]
        assert user["username"] == "ravi"
        assert user["role"] == "MANAGER"
        assert "password_hash" not in user

        # The new account can sign in
        login = client.post("/api/auth/login", json={"username": "ravi", "password": "secret1"})
        assert login.status_code == 200

    def test_role_defaults_to_manager(self, client, admin_headers):
        body = _new_user()
        del body["role"]
        resp = client.post("/api/users", json=body, headers=admin_headers)
        assert resp.status_code == 201
        assert resp.get_json()["user"]["role"] == "MANAGER"

    def test_role_is_case_insensitive(self, client, admin_headers):
        resp = client.post("/api/users", json=_new_user(role="admin"), headers=admin_headers)
        assert resp.status_code == 201
        assert resp.get_json()["user"]["role"] == "ADMIN"

    def test_duplicate_username(self, client, admin_headers):
        assert client.post("/api/users", json=_new_user(), headers=admin_headers).status_code == 201
        resp = client.post("/api/users", json=_new_user(name="Other"), headers=admin_headers)
        assert resp.status_code == 400
        assert resp.get_json()["field"] == "username"
        assert User.query.filter_by(username="ravi").count() == 1

    @pytest.mark.parametrize("overrides,field", [
        ({"password": "12345"}, "password"),
        ({"role": "OWNER"}, "role"),
        ({"username": "  "}, "username"),
        ({"name": ""}, "name"),
        ({"username": 42}, "username"),
        ({"name": ["Ravi"]}, "name"),
        ({"role": 1}, "role"),
        ({"password": 123456}, "password"),
    ])
    def test_invalid_input(self, client, admin_headers, overrides, field):
        resp = client.post("/api/users", json=_new_user(**overrides), headers=admin_headers)
        assert resp.status_code == 400
        assert resp.get_json()["field"] == field

    def test_non_object_body(self, client, admin_headers):
        resp = client.post("/api/users", json=["ravi"], headers=admin_headers)
        assert resp.status_code == 400
        assert User.query.count() == 1

    def test_manager_forbidden(self, client, manager_headers):
        resp = client.post("/api/users", json=_new_user(), headers=manager_headers)
        assert resp.status_code == 403
        assert User.query.filter_by(username="ravi").count() == 0


class TestListUsers:

    def test_lists_all_users(self, client, admin_headers, manager_user):
        resp = client.get("/api/users", headers=admin_headers)
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["count"] == 2
        assert {u["username"] for u in data["users"]} == {"admin_user", "manager_user"}
