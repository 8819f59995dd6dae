# server/seed.py

import argparse
import logging
import random
from sqlalchemy.orm import Session

from config import configure_logging, get_settings
from core.security import get_password_hash
from core.voting import create_question
from database import SessionLocal, drop_db, get_db_engine, init_db
from models import Base, Category, Item, User


logger = logging.getLogger(__name__)


QUESTION_TEXT = "Which of these do you prefer?"

CATEGORIES = [
    {
        "name": "Sugar free Energy Drinks",
        "description": "Sugar-free energy drinks",
        "items": ["Nocco BCAA", "Red Bull Sugarfree", "Monster Ultra White", "Collab"],
    },
    {
        "name": "Icelandic cinemas",
        "description": "Icelandic cinemas :)",
        "items": ["Bíó Paradís", "Smárabíó", "Laugarásbíó", "Sambíóin Egilshöll"],
    },
    {
        "name": "Icelandic swimming pools",
        "description": "Icelandic swimming pools :)",
        "items": ["Vesturbæjarlaug", "Laugardalslaug", "Sundhöll Reykjavíkur", "Árbæjarlaug"],
    },
    {
        "name": "Classic beers and lagers",
        "description": "A fine collection of beverages :)",
        "items": ["Pilsner Urquell", "Guinness", "Gull", "Heineken"],
    },
    {
        "name": "PC Videogames",
        "description": "Videogames are a great way to waste time, not spend but waste. :)",
        "items": ["Half-Life 2", "StarCraft", "Portal", "Age of Empires II"],
    },
]

USERS = [
    ("admin", "123", True),
    ("Eddi", "eddipass", False),
    ("joe_nash01", "joebroe123", False),
    ("tommyboy98", "loki11", False),
    ("sigma_nicc17", "nyquist69", False),
]

# questions per category, in CATEGORIES order
QUESTIONS = [1, 1, 3, 1, 1]


def seed(db: Session, rng=random) -> dict:
    """
    Inserts the demo users, categories, items and questions.
    Returns how many of each were created.
    """
    for username, password, admin in USERS:
        db.add(User(username=username, hashed_password=get_password_hash(password), admin=admin))

    categories = []
    for data in CATEGORIES:
        category = Category(
            name=data["name"],
            description=data["description"],
            question_text=QUESTION_TEXT,
            items=[Item(name=name) for name in data["items"]],
        )
        db.add(category)
        categories.append(category)
    db.commit()

    question_count = 0
    for category, count in zip(categories, QUESTIONS):
        for _ in range(count):
            create_question(db, category.id, rng)
            question_count += 1

    counts = {
        "users": len(USERS),
        "categories": len(categories),
        "items": sum(len(data["items"]) for data in CATEGORIES),
        "questions": question_count,
    }
    logger.info("Seeded %s", counts)
    return counts


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create the schema and load demo data.")
    parser.add_argument("--reset", action="store_true", help="drop all tables first")
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level)
    init_db(settings.database_url)
    if args.reset:
        drop_db()
        Base.metadata.create_all(bind=get_db_engine())
        logger.info("Schema dropped and recreated")

    db = SessionLocal()
    try:
        if db.query(User).count() and not args.reset:
            logger.error("Database already holds users, rerun with --reset to replace them")
            return 1
        seed(db)
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
