"""Tests for Repository and pagination."""

import pytest

from core.pagination import paginate
from core.repository import Repository, get_item_by_name, get_user_by_name
from models import Category, Item


class TestRepository:

    def test_create_and_find(self, db):
        repo = Repository(db, Category)
        created = repo.create(name="Pools", description="d", question_text="q")
        assert repo.find_by_id(created.id).name == "Pools"
        assert repo.find_by(name="Pools").id == created.id

    def test_find_by_id_missing(self, db):
        assert Repository(db, Category).find_by_id(12345) is None

    def test_update_merges(self, db, category):
        repo = Repository(db, Category)
        repo.update(category, {"name": None, "description": "new"})
        assert category.name == "Beers"
        assert category.description == "new"

    def test_update_keeps_false(self, db, admin_user):
        Repository(db, type(admin_user)).update(admin_user, {"admin": False})
        assert admin_user.admin is False

    def test_count_list_and_filters(self, db, category, lonely_category):
        repo = Repository(db, Item)
        assert repo.count() == 4
        assert repo.count(category_id=lonely_category.id) == 1
        assert [i.name for i in repo.list(offset=1, limit=2)] == ["Guinness", "Heineken"]

    def test_none_filters_are_ignored(self, db, category):
        assert Repository(db, Item).count(category_id=None) == 3

    def test_delete(self, db, category):
        repo = Repository(db, Category)
        repo.delete(category)
        assert repo.count() == 0

    def test_lookup_helpers(self, db, category, user):
        assert get_item_by_name(db, "Gull").category_id == category.id
        assert get_user_by_name(db, "Eddi").id == user.id
        assert get_user_by_name(db, "nobody") is None


class TestPagination:

    @pytest.fixture
    def many_items(self, db, category):
        for i in range(22):
            db.add(Item(name=f"extra {i:02d}", category_id=category.id))
        db.commit()
        return Repository(db, Item).query()

    def page(self, query, n, **kwargs):
        return paginate(query, n, 10, "/items", lambda item: item.name, **kwargs)

    def test_first_page(self, many_items):
        result = self.page(many_items, 1)
        assert len(result["items"]) == 10
        assert result["total"] == 25
        assert result["totalPages"] == 3
        assert result["perPage"] == 10
        assert result["links"]["self"] == {"href": "/items?page=1"}
        assert result["links"]["next"] == {"href": "/items?page=2"}
        assert "prev" not in result["links"]

    def test_middle_page(self, many_items):
        links = self.page(many_items, 2)["links"]
        assert links["next"]["href"].endswith("page=3")
        assert links["prev"]["href"].endswith("page=1")

    def test_last_page(self, many_items):
        result = self.page(many_items, 3)
        assert len(result["items"]) == 5
        assert "next" not in result["links"]
        assert "prev" in result["links"]

    def test_past_the_end(self, many_items):
        result = self.page(many_items, 9)
        assert result["items"] == []
        assert "next" not in result["links"]

    @pytest.mark.parametrize("n", [1, 2, 3, 4])
    def test_link_presence(self, many_items, n):
        result = self.page(many_items, n)
        assert ("next" in result["links"]) == (n < result["totalPages"])
        assert ("prev" in result["links"]) == (n > 1)

    def test_empty(self, db):
        result = self.page(Repository(db, Item).query(), 1)
        assert result["items"] == []
        assert result["total"] == 0
        assert result["totalPages"] == 1
        assert result["links"].keys() == {"self"}

    def test_filters_carried_in_links(self, many_items, category):
        links = self.page(many_items, 1, params={"categoryId": category.id, "x": None})["links"]
        assert links["next"] == {"href": f"/items?categoryId={category.id}&page=2"}
