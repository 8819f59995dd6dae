# server/core/repository.py

from typing import Any, Optional
from sqlalchemy.orm import Query, Session
from models import Category, Item, Question, User

# largest value an INTEGER primary key can hold
MAX_ID = 2**63 - 1


class Repository:
    """
    Thin per-model data access used by the handlers and validators.
    Filters are plain column equality, ``None`` filters are ignored.
    """

    def __init__(self, db: Session, model):
        self.db = db
        self.model = model

    def query(self, **filters) -> Query:
        query = self.db.query(self.model)
        for column, value in filters.items():
            if value is not None:
                query = query.filter(getattr(self.model, column) == value)
        return query.order_by(self.model.id)

    def find_by_id(self, id: int):
        return self.db.get(self.model, id)

    def find_by(self, **filters):
        return self.query(**filters).first()

    def count(self, **filters) -> int:
        return self.query(**filters).count()

    def list(self, offset: int = 0, limit: int = 10, **filters) -> list:
        return self.query(**filters).offset(offset).limit(limit).all()

    def create(self, **values):
        obj = self.model(**values)
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def update(self, obj, values: dict[str, Any]):
        """Partial merge: keys that are missing or ``None`` keep their stored value."""
        for column, value in values.items():
            if value is not None:
                setattr(obj, column, value)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def delete(self, obj):
        self.db.delete(obj)
        self.db.commit()


# -------------------------------
# Lookups used by validators
# -------------------------------

def get_category_by_id(db: Session, id: int) -> Optional[Category]:
    return Repository(db, Category).find_by_id(id)


def get_category_by_name(db: Session, name: str) -> Optional[Category]:
    return Repository(db, Category).find_by(name=name)


def get_item_by_id(db: Session, id: int) -> Optional[Item]:
    return Repository(db, Item).find_by_id(id)


def get_item_by_name(db: Session, name: str) -> Optional[Item]:
    return Repository(db, Item).find_by(name=name)


def get_question_by_id(db: Session, id: int) -> Optional[Question]:
    return Repository(db, Question).find_by_id(id)


def get_user_by_id(db: Session, id: int) -> Optional[User]:
    return Repository(db, User).find_by_id(id)


def get_user_by_name(db: Session, username: str) -> Optional[User]:
    return Repository(db, User).find_by(username=username)
