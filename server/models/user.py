# server/models/user.py

from datetime import datetime
from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from . import Base
from .question import FIRST, SECOND


# -------------------------------
# User Model
# -------------------------------

class User(Base):
    """
    Database model for application users.
    Stores the hashed password, the admin flag and the running vote score.
    Answered questions live in the votes table, one row per question.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(64), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    admin = Column(Boolean, nullable=False, default=False)
    score = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.now)

    votes = relationship(
        "Vote",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="Vote.created_at",
    )

    def answered_question_ids(self, side: str) -> list[int]:
        return [vote.question_id for vote in self.votes if vote.side == side]

    @property
    def first_option_answered_question_ids(self) -> list[int]:
        return self.answered_question_ids(FIRST)

    @property
    def second_option_answered_question_ids(self) -> list[int]:
        return self.answered_question_ids(SECOND)
