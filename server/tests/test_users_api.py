"""Tests for the /users routes."""

from conftest import make_user


class TestListUsers:

    def test_admin_lists_users(self, client, admin_user, user, admin_headers):
        res = client.get("/users", headers=admin_headers)
        assert res.status_code == 200
        body = res.json()
        assert body["total"] == 2
        assert [u["username"] for u in body["items"]] == ["admin", "Eddi"]
        assert body["links"]["self"] == {"href": "/users?page=1"}
        assert "next" not in body["links"]

    def test_pages(self, client, db, admin_headers):
        for n in range(11):
            make_user(db, f"user{n}")
        body = client.get("/users", params={"page": 2}, headers=admin_headers).json()
        assert body["page"] == 2
        assert body["totalPages"] == 2
        assert len(body["items"]) == 2
        assert body["links"]["prev"] == {"href": "/users?page=1"}

    def test_page_must_be_positive(self, client, admin_headers):
        res = client.get("/users", params={"page": 0}, headers=admin_headers)
        assert res.status_code == 400

    def test_non_admin(self, client, user_headers):
        assert client.get("/users", headers=user_headers).status_code == 401


class TestGetUser:

    def test_me(self, client, user, user_headers):
        body = client.get("/users/me", headers=user_headers).json()
        assert body == {
            "id": user.id,
            "username": "Eddi",
            "admin": False,
            "score": 0,
            "firstOptionAnsweredQuestionIds": [],
            "secondOptionAnsweredQuestionIds": [],
        }

    def test_by_id(self, client, admin_user, user_headers):
        res = client.get(f"/users/{admin_user.id}", headers=user_headers)
        assert res.status_code == 200
        assert res.json()["admin"] is True

    def test_missing(self, client, user_headers):
        res = client.get("/users/999", headers=user_headers)
        assert res.status_code == 404
        assert res.json() == {"error": "User with userId does not exist"}


class TestUpdateMe:

    def test_change_username(self, client, user_headers):
        res = client.patch("/users/me", headers=user_headers, json={"username": "eddi2"})
        assert res.status_code == 200
        assert res.json()["username"] == "eddi2"

    def test_change_password(self, client, user_headers):
        client.patch("/users/me", headers=user_headers, json={"password": "newpass"})
        ok = client.post("/login", json={"username": "Eddi", "password": "newpass"})
        old = client.post("/login", json={"username": "Eddi", "password": "eddipass"})
        assert ok.status_code == 200
        assert old.status_code == 401

    def test_keep_own_username(self, client, user_headers):
        res = client.patch("/users/me", headers=user_headers, json={"username": "Eddi"})
        assert res.status_code == 200

    def test_taken_username(self, client, admin_user, user_headers):
        res = client.patch("/users/me", headers=user_headers, json={"username": "admin"})
        assert res.status_code == 400

    def test_empty_body(self, client, user_headers):
        res = client.patch("/users/me", headers=user_headers, json={})
        assert res.status_code == 400
        assert res.json()["errors"][0]["msg"].startswith("require at least one value of")


class TestAdminUpdate:

    def test_promote(self, client, db, user, admin_headers):
        res = client.patch(f"/users/{user.id}", headers=admin_headers, json={"admin": True})
        assert res.status_code == 200
        assert res.json()["admin"] is True

    def test_demote(self, client, db, admin_headers):
        other = make_user(db, "boss", admin=True)
        res = client.patch(f"/users/{other.id}", headers=admin_headers, json={"admin": False})
        assert res.json()["admin"] is False

    def test_admin_must_be_boolean(self, client, user, admin_headers):
        res = client.patch(f"/users/{user.id}", headers=admin_headers, json={"admin": "yes"})
        assert res.status_code == 400

    def test_missing_user(self, client, admin_headers):
        res = client.patch("/users/999", headers=admin_headers, json={"admin": True})
        assert res.status_code == 404


class TestDeleteUser:

    def test_delete_twice(self, client, user, admin_headers):
        first = client.delete(f"/users/{user.id}", headers=admin_headers)
        assert first.status_code == 204
        assert first.content == b""
        second = client.delete(f"/users/{user.id}", headers=admin_headers)
        assert second.status_code == 404
