# server/models/__init__.py

from sqlalchemy.orm import declarative_base


Base = declarative_base()


from .user import User  # noqa: E402
from .category import Category, Item  # noqa: E402
from .question import Question, Vote, FIRST, SECOND  # noqa: E402
