# server/models/category.py

from datetime import datetime
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from . import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(128), unique=True, index=True, nullable=False)
    description = Column(String(128), nullable=False, default="")
    question_text = Column(String(128), nullable=False, default="")
    created_at = Column(DateTime, default=datetime.now)

    items = relationship(
        "Item", back_populates="category", cascade="all", order_by="Item.id"
    )
    questions = relationship(
        "Question", back_populates="category", cascade="all", order_by="Question.id"
    )


class Item(Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(128), unique=True, index=True, nullable=False)
    image_url = Column(String, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), index=True, nullable=False)
    created_at = Column(DateTime, default=datetime.now)

    category = relationship("Category", back_populates="items")

    # a question cannot outlive either of its two options
    first_option_questions = relationship(
        "Question",
        foreign_keys="Question.first_item_id",
        back_populates="first_item",
        cascade="all",
    )
    second_option_questions = relationship(
        "Question",
        foreign_keys="Question.second_item_id",
        back_populates="second_item",
        cascade="all",
    )
