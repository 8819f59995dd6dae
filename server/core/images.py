# server/core/images.py

import logging
from typing import Optional
import requests
from config import Settings


logger = logging.getLogger(__name__)

SEARCH_URL = "https://www.googleapis.com/customsearch/v1"
TIMEOUT_SECONDS = 10


def get_image_url(name: str, settings: Settings) -> Optional[str]:
    """
    Looks up an image for an item name with the Custom Search image API.
    Returns None when no search credentials are configured or the lookup fails.
    """
    if not settings.image_search_key or not settings.image_search_cx:
        return None

    params = {
        "key": settings.image_search_key,
        "cx": settings.image_search_cx,
        "q": name,
        "searchType": "image",
        "imgSize": "large",
        "num": 1,
    }
    try:
        res = requests.get(SEARCH_URL, params=params, timeout=TIMEOUT_SECONDS)
        res.raise_for_status()
        items = res.json().get("items") or []
    except (requests.RequestException, ValueError) as e:
        logger.warning("Image lookup for %r failed: %s", name, e)
        return None

    if not items:
        logger.warning("Image lookup for %r returned no results", name)
        return None
    return items[0].get("link")
