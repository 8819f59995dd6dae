# server/api/auth.py

import logging
from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from api.schemas import LoginRequest, Token
from config import Settings
from core.repository import Repository, get_user_by_name
from core.security import (
    TokenError,
    create_access_token,
    get_password_hash,
    verify_access_token,
    verify_password,
)
from core.validation import (
    RequestContext,
    generic_sanitizer,
    run_pipeline,
    stored_form,
    string_validator,
    username_does_not_exist,
    validation_check,
    xss_sanitizer,
)
from database import get_db
from models.user import User as UserModel


logger = logging.getLogger(__name__)

router = APIRouter()

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="login", auto_error=False)


# -------------------------------
# Gates
# -------------------------------

def current_settings(request: Request) -> Settings:
    return request.app.state.settings


def unauthorized(reason: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=reason,
        headers={"WWW-Authenticate": "Bearer"},
    )


def require_authenticated(
    token: str | None = Depends(oauth2_scheme),
    settings: Settings = Depends(current_settings),
    db: Session = Depends(get_db),
) -> UserModel:
    """
    Resolves the bearer token to a stored user or answers 401.
    """
    try:
        user_id = verify_access_token(token, settings.jwt_secret)
    except TokenError as e:
        raise unauthorized(e.reason)

    user = db.get(UserModel, user_id)
    if user is None:
        raise unauthorized("invalid token")
    return user


def require_admin(user: UserModel = Depends(require_authenticated)) -> UserModel:
    if not user.admin:
        raise unauthorized("unauthorized admin access")
    return user


# -------------------------------
# Login & signup
# -------------------------------

def authenticate_user(db: Session, username: str, password: str):
    user = get_user_by_name(db, stored_form(username))
    if not user:
        return None, "No such user"
    if not verify_password(password, user.hashed_password):
        return None, "Invalid password"
    return user, None


def issue_token(user: UserModel, settings: Settings) -> dict:
    return {"token": create_access_token(user.id, settings.jwt_secret, settings.token_lifetime)}


@router.post("/login", response_model=Token)
def login(
    req: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(current_settings),
):
    user, error = authenticate_user(db, req.username, req.password)
    if not user:
        logger.info("Failed login for %r: %s", req.username, error)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=error)
    return issue_token(user, settings)


SIGNUP_CHECKS = [
    string_validator("username", max_length=64),
    string_validator("password", max_length=72, trim=False, sensitive=True,
                     sanitized=False),
    username_does_not_exist(),
    xss_sanitizer("username"),
    validation_check,
    generic_sanitizer("username"),
]


@router.post("/signup", response_model=Token, status_code=status.HTTP_201_CREATED)
def signup(
    payload: dict | None = Body(default=None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(current_settings),
):
    ctx = run_pipeline(RequestContext(db, body=payload), SIGNUP_CHECKS)
    try:
        user = Repository(db, UserModel).create(
            username=ctx.body["username"],
            hashed_password=get_password_hash(ctx.body["password"]),
        )
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="A user with this username already exists")

    logger.info("Signed up user %s (%s)", user.id, user.username)
    return issue_token(user, settings)


@router.get("/admin")
def admin_details(admin: UserModel = Depends(require_admin)):
    return {"data": "top secret"}
