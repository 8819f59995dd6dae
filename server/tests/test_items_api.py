"""Tests for the /items routes."""

import random
from unittest.mock import patch

import pytest

from conftest import make_category
from core.voting import create_question
from models import Question


@pytest.fixture
def image_lookup():
    with patch("api.items.get_image_url", return_value="https://img.example/found.jpg") as m:
        yield m


class TestReadItems:

    def test_list_and_filter(self, client, category, lonely_category, user_headers):
        everything = client.get("/items", headers=user_headers).json()
        assert everything["total"] == 4

        filtered = client.get("/items", params={"categoryId": lonely_category.id},
                              headers=user_headers).json()
        assert [item["name"] for item in filtered["items"]] == ["Only one"]
        assert filtered["links"]["self"] == {
            "href": f"/items?categoryId={lonely_category.id}&page=1"
        }

    def test_get(self, client, category, user_headers):
        item = category.items[0]
        body = client.get(f"/items/{item.id}", headers=user_headers).json()
        assert body == {
            "id": item.id,
            "name": "Gull",
            "imageURL": None,
            "categoryId": category.id,
        }

    def test_missing(self, client, user_headers):
        assert client.get("/items/999", headers=user_headers).status_code == 404


class TestCreateItem:

    def test_create_with_lookup(self, client, category, admin_headers, image_lookup):
        res = client.post("/items", headers=admin_headers,
                          json={"name": "Pilsner Urquell", "categoryId": category.id})
        assert res.status_code == 200
        assert res.json()["imageURL"] == "https://img.example/found.jpg"
        assert image_lookup.call_args[0][0] == "Pilsner Urquell"

    def test_given_image_skips_lookup(self, client, category, admin_headers, image_lookup):
        res = client.post("/items", headers=admin_headers, json={
            "name": "Tuborg", "categoryId": category.id, "imageURL": "https://x/t.png"
        })
        assert res.json()["imageURL"] == "https://x/t.png"
        image_lookup.assert_not_called()

    def test_lookup_failure_leaves_no_image(self, client, category, admin_headers):
        with patch("api.items.get_image_url", return_value=None):
            res = client.post("/items", headers=admin_headers,
                              json={"name": "Tuborg", "categoryId": str(category.id)})
        assert res.status_code == 200
        assert res.json()["imageURL"] is None
        assert res.json()["categoryId"] == category.id

    def test_unknown_category(self, client, admin_headers, image_lookup):
        res = client.post("/items", headers=admin_headers,
                          json={"name": "Tuborg", "categoryId": 999})
        assert res.status_code == 400
        assert res.json()["errors"][0]["msg"] == "category with id does not exist"

    def test_non_ascii_digits_are_a_bad_request(self, client, category, admin_headers,
                                                image_lookup):
        res = client.post("/items", headers=admin_headers,
                          json={"name": "Tuborg", "categoryId": "\u00b2"})
        assert res.status_code == 400
        assert res.json()["errors"][0]["param"] == "categoryId"

    def test_duplicate_name(self, client, category, admin_headers, image_lookup):
        res = client.post("/items", headers=admin_headers,
                          json={"name": "Gull", "categoryId": category.id})
        assert res.status_code == 400
        assert res.json()["errors"][0]["msg"] == "item with name already exists"


class TestUpdateItem:

    def test_rename_looks_up_new_image(self, client, category, admin_headers, image_lookup):
        item = category.items[0]
        res = client.patch(f"/items/{item.id}", headers=admin_headers, json={"name": "Gull Lite"})
        assert res.json()["name"] == "Gull Lite"
        assert res.json()["imageURL"] == "https://img.example/found.jpg"

    def test_image_only(self, client, category, admin_headers, image_lookup):
        item = category.items[0]
        res = client.patch(f"/items/{item.id}", headers=admin_headers,
                           json={"imageURL": "https://x/gull.png"})
        assert res.json()["imageURL"] == "https://x/gull.png"
        assert res.json()["name"] == "Gull"
        image_lookup.assert_not_called()

    def test_move_drops_questions(self, client, db, category, admin_headers, image_lookup):
        question = create_question(db, category.id, random.Random(0))
        moved_id = question.first_item_id
        other = make_category(db, name="Cinemas", item_names=("Bio",))

        res = client.patch(f"/items/{moved_id}", headers=admin_headers,
                           json={"categoryId": other.id})
        assert res.status_code == 200
        assert res.json()["categoryId"] == other.id

        db.expire_all()
        assert db.query(Question).count() == 0

    def test_empty_body(self, client, category, admin_headers):
        res = client.patch(f"/items/{category.items[0].id}", headers=admin_headers, json={})
        assert res.status_code == 400

    def test_missing(self, client, admin_headers):
        res = client.patch("/items/999", headers=admin_headers, json={"name": "X"})
        assert res.status_code == 404


class TestDeleteItem:

    def test_delete_drops_its_questions(self, client, db, category, admin_headers):
        question = create_question(db, category.id, random.Random(0))
        spare = next(
            item for item in category.items
            if item.id not in (question.first_item_id, question.second_item_id)
        )
        doomed_id = question.second_item_id
        res = client.delete(f"/items/{doomed_id}", headers=admin_headers)
        assert res.status_code == 204

        db.expire_all()
        assert db.query(Question).count() == 0
        assert client.get(f"/items/{spare.id}", headers=admin_headers).status_code == 200
        assert client.delete(f"/items/{doomed_id}", headers=admin_headers).status_code == 404
