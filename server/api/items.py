# server/api/items.py

import logging
from typing import Optional
from fastapi import APIRouter, Body, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from api.auth import current_settings, require_admin, require_authenticated
from api.common import ResourceId, duplicate_guard, get_or_404, page_param
from api.schemas import item_out
from config import Settings
from core.images import get_image_url
from core.pagination import paginate
from core.repository import MAX_ID, Repository
from core.validation import (
    RequestContext,
    at_least_one_body_value,
    category_id_does_exist,
    generic_sanitizer,
    integer_validator,
    item_id_param_does_exist,
    item_name_does_not_exist,
    run_pipeline,
    string_validator,
    validation_check,
    xss_sanitizer,
)
from database import get_db
from models import Item
from models.user import User as UserModel


logger = logging.getLogger(__name__)

router = APIRouter()

ITEM_FIELDS = ["name", "categoryId", "imageURL"]

DUPLICATE_NAME = "item with name already exists"


@router.get("/items")
def list_items(
    request: Request,
    page: int = Depends(page_param),
    category_id: Optional[int] = Query(default=None, alias="categoryId", le=MAX_ID),
    db: Session = Depends(get_db),
    settings: Settings = Depends(current_settings),
    current_user: UserModel = Depends(require_authenticated),
):
    query = Repository(db, Item).query(category_id=category_id)
    return paginate(
        query, page, settings.page_size, request.url.path, item_out,
        params={"categoryId": category_id},
    )


@router.get("/items/{item_id}")
def get_item(
    item_id: ResourceId,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(require_authenticated),
):
    return item_out(get_or_404(db, Item, item_id, "Item with itemId does not exist"))


CREATE_ITEM_CHECKS = [
    string_validator("name", max_length=128),
    integer_validator("categoryId"),
    string_validator("imageURL", max_length=2048, optional=True),
    item_name_does_not_exist(),
    category_id_does_exist(),
    xss_sanitizer("name"),
    validation_check,
    generic_sanitizer("name"),
]


@router.post("/items")
def create_item(
    payload: dict | None = Body(default=None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(current_settings),
    admin: UserModel = Depends(require_admin),
):
    ctx = run_pipeline(RequestContext(db, body=payload), CREATE_ITEM_CHECKS)
    image_url = ctx.body.get("imageURL") or get_image_url(ctx.body["name"], settings)
    with duplicate_guard(db, DUPLICATE_NAME):
        item = Repository(db, Item).create(
            name=ctx.body["name"],
            category_id=ctx.body["categoryId"],
            image_url=image_url,
        )
    logger.info("Item %s (%s) created in category %s", item.id, item.name, item.category_id)
    return item_out(item)


PATCH_ITEM_CHECKS = [
    item_id_param_does_exist(),
    string_validator("name", max_length=128, optional=True),
    integer_validator("categoryId", optional=True),
    string_validator("imageURL", max_length=2048, optional=True),
    at_least_one_body_value(ITEM_FIELDS),
    item_name_does_not_exist(own_id_param="itemId"),
    category_id_does_exist(),
    xss_sanitizer("name"),
    validation_check,
    generic_sanitizer("name"),
]


@router.patch("/items/{item_id}")
def update_item(
    item_id: ResourceId,
    payload: dict | None = Body(default=None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(current_settings),
    admin: UserModel = Depends(require_admin),
):
    ctx = run_pipeline(
        RequestContext(db, body=payload, params={"itemId": item_id}), PATCH_ITEM_CHECKS
    )
    repo = Repository(db, Item)
    item = repo.find_by_id(item_id)

    name = ctx.body.get("name")
    image_url = ctx.body.get("imageURL")
    if name and name != item.name and not image_url:
        image_url = get_image_url(name, settings)

    category_id = ctx.body.get("categoryId")
    if category_id and category_id != item.category_id:
        # its questions would pair items from two categories
        for question in item.first_option_questions + item.second_option_questions:
            db.delete(question)
        logger.info("Item %s moved to category %s, its questions dropped", item.id, category_id)

    with duplicate_guard(db, DUPLICATE_NAME):
        item = repo.update(item, {
            "name": name,
            "category_id": category_id,
            "image_url": image_url,
        })
    return item_out(item)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(
    item_id: ResourceId,
    db: Session = Depends(get_db),
    admin: UserModel = Depends(require_admin),
):
    run_pipeline(
        RequestContext(db, params={"itemId": item_id}),
        [item_id_param_does_exist(), validation_check],
    )
    repo = Repository(db, Item)
    repo.delete(repo.find_by_id(item_id))
    logger.info("Item %s deleted", item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
