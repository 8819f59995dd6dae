# server/api/schemas.py

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


# -------------------------------
# Request bodies
# -------------------------------

class LoginRequest(BaseModel):
    username: str
    password: str = ""


class Token(BaseModel):
    token: str


# -------------------------------
# Response payloads
# -------------------------------

class OrmModel(BaseModel):
    """
    Read from ORM attributes by field name, dump with camelCase aliases.
    """
    model_config = ConfigDict(from_attributes=True)

    def dump(self) -> dict:
        return self.model_dump(by_alias=True)


class UserOut(OrmModel):
    id: int
    username: str
    admin: bool
    score: int
    first_option_answered_question_ids: list[int] = Field(
        serialization_alias="firstOptionAnsweredQuestionIds"
    )
    second_option_answered_question_ids: list[int] = Field(
        serialization_alias="secondOptionAnsweredQuestionIds"
    )


class CategoryOut(OrmModel):
    id: int
    name: str
    description: str
    question_text: str = Field(serialization_alias="questionText")


class ItemOut(OrmModel):
    id: int
    name: str
    image_url: Optional[str] = Field(default=None, serialization_alias="imageURL")
    category_id: int = Field(serialization_alias="categoryId")


class CategoryDetailOut(CategoryOut):
    items: list[ItemOut]
    question_count: int = Field(serialization_alias="questionCount")


class QuestionOut(OrmModel):
    id: int
    category_id: int = Field(serialization_alias="categoryId")
    question_text: str = Field(serialization_alias="questionText")
    first_item_id: int = Field(serialization_alias="firstItemId")
    second_item_id: int = Field(serialization_alias="secondItemId")
    first_item: ItemOut = Field(serialization_alias="firstItem")
    second_item: ItemOut = Field(serialization_alias="secondItem")
    first_option_answered_user_ids: list[int] = Field(
        serialization_alias="firstOptionAnsweredUserIds"
    )
    second_option_answered_user_ids: list[int] = Field(
        serialization_alias="secondOptionAnsweredUserIds"
    )


def user_out(user) -> dict:
    return UserOut.model_validate(user).dump()


def category_out(category) -> dict:
    return CategoryOut.model_validate(category).dump()


def category_detail_out(category) -> dict:
    return CategoryDetailOut(
        id=category.id,
        name=category.name,
        description=category.description,
        question_text=category.question_text,
        items=[ItemOut.model_validate(item) for item in category.items],
        question_count=len(category.questions),
    ).dump()


def item_out(item) -> dict:
    return ItemOut.model_validate(item).dump()


def question_out(question) -> dict:
    return QuestionOut.model_validate(question).dump()
