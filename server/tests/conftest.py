"""Shared fixtures for the API tests."""

import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient

import database
from config import Settings
from core import security
from core.security import create_access_token, get_password_hash
from main import create_app
from models import Category, Item, User


TEST_SECRET = "test-secret"

# bcrypt's floor, the default cost makes the suite crawl
security.pwd_context.update(bcrypt__rounds=4)


# ==================== App & Database Fixtures ====================

@pytest.fixture
def settings():
    """Settings for a fresh in-memory database."""
    return Settings(jwt_secret=TEST_SECRET, database_url="sqlite://", page_size=10)


@pytest.fixture
def app(settings):
    """A new app; building it binds the session factory to a new empty database."""
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(app):
    """Session on the same database the app uses."""
    session = database.SessionLocal()
    yield session
    session.close()


# ==================== Data Helpers ====================

def make_user(db, username, password="pw", admin=False):
    user = User(username=username, hashed_password=get_password_hash(password), admin=admin)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_category(db, name="Beers", item_names=("Gull", "Guinness", "Heineken")):
    category = Category(
        name=name,
        description=f"{name} description",
        question_text="Which of these do you prefer?",
        items=[Item(name=item_name) for item_name in item_names],
    )
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def bearer(user, secret=TEST_SECRET, **kwargs):
    return {"Authorization": f"Bearer {create_access_token(user.id, secret, **kwargs)}"}


@pytest.fixture
def admin_user(db):
    return make_user(db, "admin", "123", admin=True)


@pytest.fixture
def user(db):
    return make_user(db, "Eddi", "eddipass")


@pytest.fixture
def admin_headers(admin_user):
    return bearer(admin_user)


@pytest.fixture
def user_headers(user):
    return bearer(user)


@pytest.fixture
def category(db):
    """A category with three items."""
    return make_category(db)


@pytest.fixture
def lonely_category(db):
    """A category with a single item, too few for a question."""
    return make_category(db, name="Lonely", item_names=("Only one",))
