# server/core/validation.py

import html
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional
import bleach
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.repository import (
    MAX_ID,
    get_category_by_id,
    get_category_by_name,
    get_item_by_id,
    get_item_by_name,
    get_question_by_id,
    get_user_by_id,
    get_user_by_name,
)


logger = logging.getLogger(__name__)

INVALID = "invalid"
NOT_FOUND = "not found"
SERVER_ERROR = "server error"


# -------------------------------
# Request context & errors
# -------------------------------

@dataclass
class FieldError:
    param: str
    msg: str
    value: Any = None
    location: str = "body"
    kind: str = INVALID

    def as_dict(self) -> dict:
        return {
            "value": self.value,
            "msg": self.msg,
            "param": self.param,
            "location": self.location,
        }


class ValidationFailed(Exception):
    """
    Raised by the validation gate with every error collected so far.
    """

    def __init__(self, errors: list[FieldError]):
        super().__init__(f"{len(errors)} validation error(s)")
        self.errors = list(errors)

    @property
    def status_code(self) -> int:
        kinds = {error.kind for error in self.errors}
        if SERVER_ERROR in kinds:
            return 500
        if NOT_FOUND in kinds:
            return 404
        return 400

    def as_dict(self) -> dict:
        return {"errors": [error.as_dict() for error in self.errors]}


class RequestContext:
    """
    What a pipeline works on: the JSON body, the path params, the store
    and the authenticated user. Stages mutate it in place.
    """

    def __init__(
        self,
        db: Optional[Session] = None,
        body: Any = None,
        params: Optional[dict] = None,
        user=None,
    ):
        self.db = db
        self.body = dict(body) if isinstance(body, dict) else {}
        self.params = dict(params or {})
        self.user = user
        self.errors: list[FieldError] = []

    def source(self, location: str) -> dict:
        return self.params if location == "params" else self.body

    def present(self, field: str, location: str = "body") -> bool:
        return self.source(location).get(field) is not None

    def failed(self, field: str) -> bool:
        return any(error.param == field for error in self.errors)

    def add_error(self, field: str, msg: str, value: Any = None,
                  location: str = "body", kind: str = INVALID):
        self.errors.append(FieldError(field, msg, value, location, kind))

    def values(self, fields: Iterable[str]) -> dict:
        return {field: self.body.get(field) for field in fields}


Stage = Callable[[RequestContext], Optional[RequestContext]]


def run_pipeline(ctx: RequestContext, stages: Iterable[Stage]) -> RequestContext:
    """Runs ``stages`` in order; any stage may stop the run by raising."""
    for stage in stages:
        stage(ctx)
    return ctx


def validation_check(ctx: RequestContext) -> RequestContext:
    if ctx.errors:
        raise ValidationFailed(ctx.errors)
    return ctx


# -------------------------------
# Shape validators
# -------------------------------

def string_validator(field: str, value_required: bool = True, max_length: int = 0,
                     optional: bool = False, trim: bool = True,
                     sensitive: bool = False, sanitized: bool = True) -> Stage:
    """
    Checks a string body field. For fields that go through the markup
    sanitizer, a required value must still hold text once tags are stripped.
    """
    message = " ".join(
        part for part in (
            field,
            "required" if value_required else "",
            f"max {max_length} characters" if max_length else "",
        ) if part
    )

    def validate(ctx: RequestContext):
        if optional and not ctx.present(field):
            return ctx
        value = ctx.body.get(field)
        if not isinstance(value, str):
            ctx.add_error(field, message, None if sensitive else value)
            return ctx
        if trim:
            value = value.strip()
            ctx.body[field] = value
        blank = not value or (sanitized and not strip_markup(value).strip())
        if (value_required and blank) or (max_length and len(value) > max_length):
            ctx.add_error(field, message, None if sensitive else value)
        return ctx

    return validate


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        # str.isdigit also accepts digits like "²" that int() rejects
        if value.isascii() and value.isdigit():
            try:
                return int(value)
            except ValueError:
                # past the interpreter's digit limit
                return None
    return None


def integer_validator(field: str, optional: bool = False, location: str = "body") -> Stage:
    def validate(ctx: RequestContext):
        if optional and not ctx.present(field, location):
            return ctx
        source = ctx.source(location)
        value = _as_int(source.get(field))
        if value is None or not 1 <= value <= MAX_ID:
            ctx.add_error(field, f"{field} must be a positive integer",
                          source.get(field), location)
        else:
            source[field] = value
        return ctx

    return validate


def boolean_validator(field: str, optional: bool = False) -> Stage:
    def validate(ctx: RequestContext):
        if optional and not ctx.present(field):
            return ctx
        value = ctx.body.get(field)
        if not isinstance(value, bool):
            ctx.add_error(field, f"{field} must be a boolean", value)
        return ctx

    return validate


def at_least_one_body_value(fields: list[str]) -> Stage:
    def validate(ctx: RequestContext):
        if not any(ctx.present(field) for field in fields):
            ctx.add_error("", f"require at least one value of: {', '.join(fields)}")
        return ctx

    return validate


# -------------------------------
# Store-backed validators
# -------------------------------

def lookup_validator(
    field: str,
    lookup: Callable[[Session, Any], Any],
    msg: str,
    should_exist: bool = True,
    location: str = "body",
    kind: str = INVALID,
    own_id_param: Optional[str] = None,
) -> Stage:
    """
    Checks ``field`` against the store. Absent fields and fields that
    already failed a shape check are skipped. With ``own_id_param`` a
    uniqueness check ignores the entity being updated.
    """

    def validate(ctx: RequestContext):
        if not ctx.present(field, location) or ctx.failed(field):
            return ctx
        value = ctx.source(location)[field]
        try:
            found = lookup(ctx.db, value)
        except SQLAlchemyError:
            logger.exception("Lookup of %s=%r failed", field, value)
            ctx.add_error(field, SERVER_ERROR, value, location, SERVER_ERROR)
            return ctx

        if should_exist and found is None:
            ctx.add_error(field, msg, value, location, kind)
        elif not should_exist and found is not None:
            if own_id_param and found.id == ctx.params.get(own_id_param):
                return ctx
            ctx.add_error(field, msg, value, location, kind)
        return ctx

    return validate


def stored_form(value: str) -> str:
    """What a free-text field looks like once both sanitizers have run."""
    return escape_text(strip_markup(value))


def username_does_not_exist(own_id_param: Optional[str] = None) -> Stage:
    return lookup_validator(
        "username",
        lambda db, name: get_user_by_name(db, stored_form(name)),
        "A user with this username already exists",
        should_exist=False, own_id_param=own_id_param,
    )


def category_name_does_not_exist(own_id_param: Optional[str] = None) -> Stage:
    return lookup_validator(
        "name",
        lambda db, name: get_category_by_name(db, stored_form(name)),
        "category with name already exists",
        should_exist=False, own_id_param=own_id_param,
    )


def item_name_does_not_exist(own_id_param: Optional[str] = None) -> Stage:
    return lookup_validator(
        "name",
        lambda db, name: get_item_by_name(db, stored_form(name)),
        "item with name already exists",
        should_exist=False, own_id_param=own_id_param,
    )


def category_id_does_exist(field: str = "categoryId") -> Stage:
    return lookup_validator(field, get_category_by_id, "category with id does not exist")


def item_id_does_exist(field: str) -> Stage:
    return lookup_validator(field, get_item_by_id, "item with id does not exist")


def category_id_param_does_exist() -> Stage:
    return lookup_validator(
        "categoryId", get_category_by_id, NOT_FOUND, location="params", kind=NOT_FOUND
    )


def item_id_param_does_exist() -> Stage:
    return lookup_validator(
        "itemId", get_item_by_id, NOT_FOUND, location="params", kind=NOT_FOUND
    )


def question_id_param_does_exist() -> Stage:
    return lookup_validator(
        "questionId", get_question_by_id, NOT_FOUND, location="params", kind=NOT_FOUND
    )


def user_id_param_does_exist() -> Stage:
    return lookup_validator(
        "userId", get_user_by_id, NOT_FOUND, location="params", kind=NOT_FOUND
    )


# -------------------------------
# Sanitizers
# -------------------------------

def strip_markup(value: str) -> str:
    # bleach escapes the text it keeps; unescape so escaping happens once, later
    return html.unescape(bleach.clean(value, tags=set(), attributes={}, strip=True))


def escape_text(value: str) -> str:
    return html.escape(value.strip(), quote=True)


def _sanitizer(field: str, clean: Callable[[str], str]) -> Stage:
    def sanitize(ctx: RequestContext):
        value = ctx.body.get(field)
        if isinstance(value, str) and not ctx.failed(field):
            ctx.body[field] = clean(value)
        return ctx

    return sanitize


def xss_sanitizer(field: str) -> Stage:
    return _sanitizer(field, strip_markup)


def xss_sanitizer_many(fields: list[str]) -> list[Stage]:
    return [xss_sanitizer(field) for field in fields]


def generic_sanitizer(field: str) -> Stage:
    return _sanitizer(field, escape_text)


def generic_sanitizer_many(fields: list[str]) -> list[Stage]:
    return [generic_sanitizer(field) for field in fields]
