# server/api/common.py

from contextlib import contextmanager
from typing import Annotated
from fastapi import HTTPException, Path, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from core.repository import MAX_ID, Repository


MAX_PAGE = 2**31 - 1

# path ids past MAX_ID cannot reach the store, they are rejected as bad input
ResourceId = Annotated[int, Path(le=MAX_ID)]


def page_param(page: int = Query(default=1, ge=1, le=MAX_PAGE)) -> int:
    return page


def get_or_404(db: Session, model, id: int, message: str):
    obj = Repository(db, model).find_by_id(id)
    if obj is None:
        raise HTTPException(status_code=404, detail=message)
    return obj


@contextmanager
def duplicate_guard(db: Session, message: str):
    """
    Turns a unique-constraint violation raised inside the block into a 400.
    """
    try:
        yield
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=message) from e
