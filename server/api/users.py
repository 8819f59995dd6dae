# server/api/users.py

import logging
from fastapi import APIRouter, Body, Depends, Request, Response, status
from sqlalchemy.orm import Session

from api.auth import current_settings, require_admin, require_authenticated
from api.common import ResourceId, duplicate_guard, get_or_404, page_param
from api.schemas import user_out
from config import Settings
from core.pagination import paginate
from core.repository import Repository
from core.security import get_password_hash
from core.validation import (
    RequestContext,
    at_least_one_body_value,
    boolean_validator,
    generic_sanitizer,
    run_pipeline,
    string_validator,
    user_id_param_does_exist,
    username_does_not_exist,
    validation_check,
    xss_sanitizer,
)
from database import get_db
from models.user import User as UserModel


logger = logging.getLogger(__name__)

router = APIRouter()


# -------------------------------
# Listing & lookup
# -------------------------------

@router.get("/users")
def list_users(
    request: Request,
    page: int = Depends(page_param),
    db: Session = Depends(get_db),
    settings: Settings = Depends(current_settings),
    admin: UserModel = Depends(require_admin),
):
    query = Repository(db, UserModel).query()
    return paginate(query, page, settings.page_size, request.url.path, user_out)


@router.get("/users/me")
def read_users_me(current_user: UserModel = Depends(require_authenticated)):
    return user_out(current_user)


@router.get("/users/{user_id}")
def get_user(
    user_id: ResourceId,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(require_authenticated),
):
    return user_out(get_or_404(db, UserModel, user_id, "User with userId does not exist"))


# -------------------------------
# Updates
# -------------------------------

PATCH_ME_CHECKS = [
    string_validator("username", max_length=64, optional=True),
    string_validator("password", max_length=72, optional=True, trim=False, sensitive=True,
                     sanitized=False),
    at_least_one_body_value(["username", "password"]),
    username_does_not_exist(own_id_param="userId"),
    xss_sanitizer("username"),
    validation_check,
    generic_sanitizer("username"),
]


@router.patch("/users/me")
def update_users_me(
    payload: dict | None = Body(default=None),
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(require_authenticated),
):
    ctx = run_pipeline(
        RequestContext(db, body=payload, params={"userId": current_user.id}, user=current_user),
        PATCH_ME_CHECKS,
    )
    password = ctx.body.get("password")
    values = {
        "username": ctx.body.get("username"),
        "hashed_password": get_password_hash(password) if password else None,
    }
    with duplicate_guard(db, "A user with this username already exists"):
        user = Repository(db, UserModel).update(current_user, values)
    return user_out(user)


PATCH_USER_CHECKS = [
    user_id_param_does_exist(),
    boolean_validator("admin"),
    validation_check,
]


@router.patch("/users/{user_id}")
def update_user(
    user_id: ResourceId,
    payload: dict | None = Body(default=None),
    db: Session = Depends(get_db),
    admin: UserModel = Depends(require_admin),
):
    ctx = run_pipeline(
        RequestContext(db, body=payload, params={"userId": user_id}), PATCH_USER_CHECKS
    )
    repo = Repository(db, UserModel)
    user = repo.update(repo.find_by_id(user_id), {"admin": ctx.body["admin"]})
    logger.info("User %s admin flag set to %s by %s", user.id, user.admin, admin.id)
    return user_out(user)


# -------------------------------
# Delete
# -------------------------------

@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: ResourceId,
    db: Session = Depends(get_db),
    admin: UserModel = Depends(require_admin),
):
    ctx = RequestContext(db, params={"userId": user_id})
    run_pipeline(ctx, [user_id_param_does_exist(), validation_check])
    repo = Repository(db, UserModel)
    repo.delete(repo.find_by_id(user_id))
    logger.info("User %s deleted by %s", user_id, admin.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
