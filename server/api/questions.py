# server/api/questions.py

import logging
from typing import Optional
from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from api.auth import current_settings, require_admin, require_authenticated
from api.common import ResourceId, get_or_404, page_param
from api.schemas import question_out
from config import Settings
from core.pagination import paginate
from core.repository import MAX_ID, Repository
from core.validation import (
    RequestContext,
    at_least_one_body_value,
    category_id_does_exist,
    integer_validator,
    item_id_does_exist,
    question_id_param_does_exist,
    run_pipeline,
    validation_check,
)
from core.voting import (
    AlreadyVoted,
    InvalidQuestion,
    ItemNotInQuestion,
    NotEnoughItems,
    QuestionNotFound,
    VotingError,
    cast_vote,
    create_question,
    update_question,
)
from database import get_db
from models import Question, Vote
from models.user import User as UserModel


logger = logging.getLogger(__name__)

router = APIRouter()

VOTING_ERROR_STATUS = {
    QuestionNotFound: status.HTTP_404_NOT_FOUND,
    ItemNotInQuestion: status.HTTP_400_BAD_REQUEST,
    NotEnoughItems: status.HTTP_400_BAD_REQUEST,
    InvalidQuestion: status.HTTP_400_BAD_REQUEST,
    AlreadyVoted: status.HTTP_409_CONFLICT,
}


def voting_http_error(error: VotingError) -> HTTPException:
    code = VOTING_ERROR_STATUS.get(type(error), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=code, detail=error.message)


# -------------------------------
# Listing & lookup
# -------------------------------

@router.get("/questions")
def list_questions(
    request: Request,
    page: int = Depends(page_param),
    category_id: Optional[int] = Query(default=None, alias="categoryId", le=MAX_ID),
    unanswered: bool = False,
    db: Session = Depends(get_db),
    settings: Settings = Depends(current_settings),
    current_user: UserModel = Depends(require_authenticated),
):
    """
    Paginated questions, optionally limited to one category and, with
    ``unanswered=true``, to the ones the caller has not voted on yet.
    """
    query = Repository(db, Question).query(category_id=category_id)
    if unanswered:
        voted = select(Vote.question_id).where(Vote.user_id == current_user.id)
        query = query.filter(Question.id.not_in(voted))
    params = {"categoryId": category_id, "unanswered": "true" if unanswered else None}
    return paginate(
        query, page, settings.page_size, request.url.path, question_out, params=params
    )


@router.get("/questions/{question_id}")
def get_question(
    question_id: ResourceId,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(require_authenticated),
):
    question = get_or_404(db, Question, question_id, QuestionNotFound.message)
    return question_out(question)


# -------------------------------
# Create / update / delete
# -------------------------------

CREATE_QUESTION_CHECKS = [
    integer_validator("categoryId"),
    category_id_does_exist(),
    validation_check,
]


@router.post("/questions")
def create_question_route(
    payload: dict | None = Body(default=None),
    db: Session = Depends(get_db),
    admin: UserModel = Depends(require_admin),
):
    ctx = run_pipeline(RequestContext(db, body=payload), CREATE_QUESTION_CHECKS)
    try:
        question = create_question(db, ctx.body["categoryId"])
    except VotingError as e:
        raise voting_http_error(e)
    return question_out(question)


QUESTION_FIELDS = ["categoryId", "firstItemId", "secondItemId"]

PATCH_QUESTION_CHECKS = [
    question_id_param_does_exist(),
    integer_validator("categoryId", optional=True),
    integer_validator("firstItemId", optional=True),
    integer_validator("secondItemId", optional=True),
    at_least_one_body_value(QUESTION_FIELDS),
    category_id_does_exist(),
    item_id_does_exist("firstItemId"),
    item_id_does_exist("secondItemId"),
    validation_check,
]


@router.patch("/questions/{question_id}")
def update_question_route(
    question_id: ResourceId,
    payload: dict | None = Body(default=None),
    db: Session = Depends(get_db),
    admin: UserModel = Depends(require_admin),
):
    ctx = run_pipeline(
        RequestContext(db, body=payload, params={"questionId": question_id}),
        PATCH_QUESTION_CHECKS,
    )
    question = Repository(db, Question).find_by_id(question_id)
    try:
        question = update_question(
            db,
            question,
            category_id=ctx.body.get("categoryId"),
            first_item_id=ctx.body.get("firstItemId"),
            second_item_id=ctx.body.get("secondItemId"),
        )
    except VotingError as e:
        db.rollback()
        raise voting_http_error(e)
    return question_out(question)


@router.delete("/questions/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_question(
    question_id: ResourceId,
    db: Session = Depends(get_db),
    admin: UserModel = Depends(require_admin),
):
    run_pipeline(
        RequestContext(db, params={"questionId": question_id}),
        [question_id_param_does_exist(), validation_check],
    )
    repo = Repository(db, Question)
    repo.delete(repo.find_by_id(question_id))
    logger.info("Question %s deleted", question_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# -------------------------------
# Voting
# -------------------------------

@router.post("/questions/{question_id}/vote/{item_id}")
def vote(
    question_id: ResourceId,
    item_id: ResourceId,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(require_authenticated),
):
    try:
        question = cast_vote(db, question_id, item_id, current_user)
    except VotingError as e:
        raise voting_http_error(e)
    return question_out(question)
