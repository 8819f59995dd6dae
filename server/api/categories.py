# server/api/categories.py

import logging
from fastapi import APIRouter, Body, Depends, Request, Response, status
from sqlalchemy.orm import Session

from api.auth import current_settings, require_admin, require_authenticated
from api.common import ResourceId, duplicate_guard, get_or_404, page_param
from api.schemas import category_detail_out, category_out
from config import Settings
from core.pagination import paginate
from core.repository import Repository
from core.validation import (
    RequestContext,
    at_least_one_body_value,
    category_id_param_does_exist,
    category_name_does_not_exist,
    generic_sanitizer_many,
    run_pipeline,
    string_validator,
    validation_check,
    xss_sanitizer_many,
)
from database import get_db
from models import Category
from models.user import User as UserModel


logger = logging.getLogger(__name__)

router = APIRouter()

CATEGORY_FIELDS = ["name", "description", "questionText"]

DUPLICATE_NAME = "category with name already exists"


@router.get("/categories")
def list_categories(
    request: Request,
    page: int = Depends(page_param),
    db: Session = Depends(get_db),
    settings: Settings = Depends(current_settings),
    current_user: UserModel = Depends(require_authenticated),
):
    query = Repository(db, Category).query()
    return paginate(query, page, settings.page_size, request.url.path, category_out)


@router.get("/categories/{category_id}")
def get_category(
    category_id: ResourceId,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(require_authenticated),
):
    category = get_or_404(db, Category, category_id, "Category with id does not exist")
    return category_detail_out(category)


CREATE_CATEGORY_CHECKS = [
    string_validator("name", max_length=128),
    string_validator("description", max_length=128),
    string_validator("questionText", max_length=128),
    category_name_does_not_exist(),
    *xss_sanitizer_many(CATEGORY_FIELDS),
    validation_check,
    *generic_sanitizer_many(CATEGORY_FIELDS),
]


@router.post("/categories")
def create_category(
    payload: dict | None = Body(default=None),
    db: Session = Depends(get_db),
    admin: UserModel = Depends(require_admin),
):
    ctx = run_pipeline(RequestContext(db, body=payload), CREATE_CATEGORY_CHECKS)
    with duplicate_guard(db, DUPLICATE_NAME):
        category = Repository(db, Category).create(
            name=ctx.body["name"],
            description=ctx.body["description"],
            question_text=ctx.body["questionText"],
        )
    logger.info("Category %s (%s) created", category.id, category.name)
    return category_out(category)


PATCH_CATEGORY_CHECKS = [
    category_id_param_does_exist(),
    string_validator("name", max_length=128, optional=True),
    string_validator("description", value_required=False, max_length=128, optional=True),
    string_validator("questionText", value_required=False, max_length=128, optional=True),
    at_least_one_body_value(CATEGORY_FIELDS),
    category_name_does_not_exist(own_id_param="categoryId"),
    *xss_sanitizer_many(CATEGORY_FIELDS),
    validation_check,
    *generic_sanitizer_many(CATEGORY_FIELDS),
]


@router.patch("/categories/{category_id}")
def update_category(
    category_id: ResourceId,
    payload: dict | None = Body(default=None),
    db: Session = Depends(get_db),
    admin: UserModel = Depends(require_admin),
):
    ctx = run_pipeline(
        RequestContext(db, body=payload, params={"categoryId": category_id}),
        PATCH_CATEGORY_CHECKS,
    )
    repo = Repository(db, Category)
    with duplicate_guard(db, DUPLICATE_NAME):
        category = repo.update(repo.find_by_id(category_id), {
            "name": ctx.body.get("name"),
            "description": ctx.body.get("description"),
            "question_text": ctx.body.get("questionText"),
        })
    return category_out(category)


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: ResourceId,
    db: Session = Depends(get_db),
    admin: UserModel = Depends(require_admin),
):
    run_pipeline(
        RequestContext(db, params={"categoryId": category_id}),
        [category_id_param_does_exist(), validation_check],
    )
    repo = Repository(db, Category)
    repo.delete(repo.find_by_id(category_id))
    logger.info("Category %s deleted", category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
