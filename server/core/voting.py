# server/core/voting.py

import logging
import random
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from models import Item, Question, User, Vote


logger = logging.getLogger(__name__)


class VotingError(Exception):
    message = "voting error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class NotEnoughItems(VotingError):
    message = "Question could not be created, not enough items exist"


class QuestionNotFound(VotingError):
    message = "Question with questionId does not exist"


class ItemNotInQuestion(VotingError):
    message = "item with id does not exist in this question"


class InvalidQuestion(VotingError):
    message = "both items must differ and belong to the question's category"


class AlreadyVoted(VotingError):
    message = "User has already voted for this question"


# -------------------------------
# Question generation
# -------------------------------

def category_item_ids(db: Session, category_id: int) -> list[int]:
    rows = db.query(Item.id).filter(Item.category_id == category_id).order_by(Item.id)
    return [row.id for row in rows]


def draw_item_pair(db: Session, category_id: int, rng=random) -> tuple[int, int]:
    """
    Two distinct item ids from the category, drawn uniformly without
    replacement from a single read of the category's items.
    """
    item_ids = category_item_ids(db, category_id)
    if len(item_ids) < 2:
        raise NotEnoughItems()
    first_id, second_id = rng.sample(item_ids, 2)
    return first_id, second_id


def create_question(db: Session, category_id: int, rng=random) -> Question:
    first_id, second_id = draw_item_pair(db, category_id, rng)
    question = Question(
        category_id=category_id,
        first_item_id=first_id,
        second_item_id=second_id,
    )
    db.add(question)
    db.commit()
    db.refresh(question)
    logger.info(
        "Created question %s in category %s (%s vs %s)",
        question.id, category_id, first_id, second_id,
    )
    return question


def update_question(
    db: Session,
    question: Question,
    category_id: Optional[int] = None,
    first_item_id: Optional[int] = None,
    second_item_id: Optional[int] = None,
    rng=random,
) -> Question:
    """
    Partial update. Moving a question to another category without naming
    items redraws both; otherwise the merged pair must still be two
    distinct items of the (merged) category.
    """
    new_category_id = category_id or question.category_id
    if category_id and category_id != question.category_id and not (first_item_id or second_item_id):
        first, second = draw_item_pair(db, new_category_id, rng)
    else:
        first = first_item_id or question.first_item_id
        second = second_item_id or question.second_item_id
        category_ids = {
            row.category_id
            for row in db.query(Item.category_id).filter(Item.id.in_([first, second]))
        }
        if first == second or category_ids != {new_category_id}:
            raise InvalidQuestion()

    question.category_id = new_category_id
    question.first_item_id = first
    question.second_item_id = second
    db.commit()
    db.refresh(question)
    return question


# -------------------------------
# Voting
# -------------------------------

def cast_vote(db: Session, question_id: int, item_id: int, user: User) -> Question:
    """
    Records ``user``'s one and only vote on the question for the side
    holding ``item_id`` and bumps the user's score.
    """
    question = db.get(Question, question_id)
    if question is None:
        raise QuestionNotFound()

    side = question.side_for(item_id)
    if side is None:
        raise ItemNotInQuestion()

    if question.has_voted(user.id):
        raise AlreadyVoted()

    db.add(Vote(question_id=question.id, user_id=user.id, side=side))
    user.score = (user.score or 0) + 1
    try:
        db.commit()
    except IntegrityError as e:
        # a concurrent request got its vote in first
        db.rollback()
        raise AlreadyVoted() from e

    db.refresh(question)
    logger.info("User %s voted %s on question %s", user.id, side, question.id)
    return question
