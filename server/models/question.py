# server/models/question.py

from datetime import datetime
from typing import Optional
from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import relationship
from . import Base


FIRST = "first"
SECOND = "second"


class Question(Base):
    """
    A pairwise question: two distinct items of one category.
    Who voted for which side is kept in the votes table.
    """
    __tablename__ = "questions"
    __table_args__ = (
        CheckConstraint("first_item_id <> second_item_id", name="ck_questions_distinct_items"),
    )

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), index=True, nullable=False)
    first_item_id = Column(Integer, ForeignKey("items.id"), nullable=False)
    second_item_id = Column(Integer, ForeignKey("items.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.now)

    category = relationship("Category", back_populates="questions")
    first_item = relationship(
        "Item", foreign_keys=[first_item_id], back_populates="first_option_questions"
    )
    second_item = relationship(
        "Item", foreign_keys=[second_item_id], back_populates="second_option_questions"
    )
    votes = relationship(
        "Vote",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="Vote.created_at",
    )

    def side_for(self, item_id: int) -> Optional[str]:
        if item_id == self.first_item_id:
            return FIRST
        if item_id == self.second_item_id:
            return SECOND
        return None

    def answered_user_ids(self, side: str) -> list[int]:
        return [vote.user_id for vote in self.votes if vote.side == side]

    def has_voted(self, user_id: int) -> bool:
        return any(vote.user_id == user_id for vote in self.votes)

    @property
    def first_option_answered_user_ids(self) -> list[int]:
        return self.answered_user_ids(FIRST)

    @property
    def second_option_answered_user_ids(self) -> list[int]:
        return self.answered_user_ids(SECOND)

    @property
    def question_text(self) -> str:
        return self.category.question_text if self.category else ""


class Vote(Base):
    __tablename__ = "votes"
    __table_args__ = (
        CheckConstraint("side IN ('first', 'second')", name="ck_votes_side"),
    )

    # one row per (question, user): a user sits in at most one answered list
    question_id = Column(
        Integer, ForeignKey("questions.id", ondelete="CASCADE"), primary_key=True
    )
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    side = Column(String(6), nullable=False)
    created_at = Column(DateTime, default=datetime.now)

    question = relationship("Question", back_populates="votes")
    user = relationship("User", back_populates="votes")
