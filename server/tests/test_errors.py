"""Tests for the app-wide error handling."""

from fastapi.testclient import TestClient


class TestErrorHandlers:

    def test_invalid_json(self, client, admin_headers):
        res = client.post(
            "/categories",
            content=b'{"name": "Cars",',
            headers={**admin_headers, "Content-Type": "application/json"},
        )
        assert res.status_code == 400
        assert res.json() == {"error": "invalid json"}

    def test_unknown_route(self, client):
        res = client.get("/nowhere")
        assert res.status_code == 404
        assert res.json() == {"error": "not found"}

    def test_non_integer_id(self, client, user_headers):
        res = client.get("/items/abc", headers=user_headers)
        assert res.status_code == 400
        assert res.json()["errors"][0]["param"] == "item_id"

    def test_unhandled_exception(self, app):
        def explode():
            raise RuntimeError("boom")

        app.add_api_route("/explode", explode, methods=["GET"])
        with TestClient(app, raise_server_exceptions=False) as client:
            res = client.get("/explode")
        assert res.status_code == 500
        assert res.json() == {"error": "boom"}

    def test_index_lists_routes(self, client):
        hrefs = [route["href"] for route in client.get("/").json()]
        assert "/questions/{questionId}/vote/{itemId}" in hrefs

    def test_oversized_path_id(self, client, user_headers):
        res = client.get("/users/99999999999999999999", headers=user_headers)
        assert res.status_code == 400
        assert res.json()["errors"][0]["param"] == "user_id"

    def test_oversized_vote_ids(self, client, user_headers):
        res = client.post(f"/questions/1/vote/{2**64}", headers=user_headers)
        assert res.status_code == 400

    def test_oversized_page(self, client, user_headers):
        res = client.get("/categories", params={"page": 10**19}, headers=user_headers)
        assert res.status_code == 400
        assert res.json()["errors"][0]["param"] == "page"

    def test_oversized_category_filter(self, client, user_headers):
        res = client.get("/items", params={"categoryId": 10**19}, headers=user_headers)
        assert res.status_code == 400
