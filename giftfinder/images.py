# giftfinder/images.py - Product images from the Unsplash API (free tier: 50 requests/hour)

import logging
import re
from typing import List

import requests

from .models import GiftQuery
from .placeholders import FALLBACK_IMAGE
from . import config

logger = logging.getLogger(__name__)

UNSPLASH_API = "https://api.unsplash.com"

# Marketing adjectives that make stock photo searches worse
NOISE_WORDS = re.compile(r"vintage|antique|retro|modern|premium|luxury", re.IGNORECASE)


def is_configured() -> bool:
    return bool(config.UNSPLASH_ACCESS_KEY and config.UNSPLASH_ACCESS_KEY.strip())


def clean_query(query: str) -> str:
    cleaned = re.sub(r"\s+", " ", NOISE_WORDS.sub("", query)).strip()
    return cleaned or query


def fetch_image(query: str) -> str:
    """
    Fetch one square image for a search query.

    Returns the fallback image on a missing key, a non-OK response,
    empty results or any request error.
    """
    if not is_configured():
        logger.info("Unsplash API not configured, using fallback image")
        return FALLBACK_IMAGE

    search_query = clean_query(query)
    logger.info(f"Fetching Unsplash image for: {search_query}")

    try:
        response = requests.get(
            f"{UNSPLASH_API}/search/photos",
            params={"query": search_query, "per_page": 1, "orientation": "squarish"},
            headers={"Authorization": f"Client-ID {config.UNSPLASH_ACCESS_KEY}"},
            timeout=config.HTTP_TIMEOUT,
        )
        if not response.ok:
            logger.error(f"Unsplash API error: {response.status_code}")
            return FALLBACK_IMAGE

        data = response.json()
        results = (data.get("results") if isinstance(data, dict) else None) or []
        if not isinstance(results, list) or not results:
            logger.info("No Unsplash results, using fallback")
            return FALLBACK_IMAGE

        photo = results[0] if isinstance(results[0], dict) else {}
        urls = photo.get("urls") or {}
        regular = urls.get("regular") if isinstance(urls, dict) else None
        return regular if isinstance(regular, str) and regular else FALLBACK_IMAGE

    except (requests.RequestException, ValueError) as e:
        logger.error(f"Unsplash fetch error: {e}")
        return FALLBACK_IMAGE


def fetch_images(queries: List[GiftQuery]) -> List[str]:
    return [fetch_image(q.query) for q in queries]
