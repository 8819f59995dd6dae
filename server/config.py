# server/config.py

import os
import logging
from functools import lru_cache
from typing import Optional
from dotenv import load_dotenv
from pydantic import BaseModel


load_dotenv()


class ConfigError(RuntimeError):
    pass


class Settings(BaseModel):
    """
    Runtime configuration, built once at startup and handed to the app.
    """
    jwt_secret: str
    database_url: str
    token_lifetime: int = 86400
    port: int = 3000
    page_size: int = 10
    log_level: str = "INFO"
    image_search_key: Optional[str] = None
    image_search_cx: Optional[str] = None


REQUIRED_ENV = ("JWT_SECRET", "DATABASE_URL")


def settings_from_env() -> Settings:
    missing = [name for name in REQUIRED_ENV if not os.getenv(name)]
    if missing:
        raise ConfigError(f"Missing environment variables: {', '.join(missing)}")

    return Settings(
        jwt_secret=os.getenv("JWT_SECRET"),
        database_url=os.getenv("DATABASE_URL"),
        token_lifetime=int(os.getenv("TOKEN_LIFETIME", "86400")),
        port=int(os.getenv("PORT", "3000")),
        page_size=int(os.getenv("PAGE_SIZE", "10")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        image_search_key=os.getenv("IMAGE_SEARCH_KEY") or None,
        image_search_cx=os.getenv("IMAGE_SEARCH_CX") or None,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return settings_from_env()


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
