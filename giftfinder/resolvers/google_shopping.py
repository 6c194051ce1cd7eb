import re
import logging
from typing import List

import requests

from .base_resolver import BaseResolver, encode_query, title_case
from ..models import Gift, GiftQuery
from ..placeholders import FALLBACK_IMAGE
from .. import config

logger = logging.getLogger('google_shopping')

CUSTOM_SEARCH_API = "https://www.googleapis.com/customsearch/v1"

# $19.99, €25.50, £30, USD 40, 15 dollars
PRICE_PATTERNS = [
    re.compile(r"\$[\d,]+\.?\d*"),
    re.compile(r"€[\d,]+\.?\d*"),
    re.compile(r"£[\d,]+\.?\d*"),
    re.compile(r"USD?\s*[\d,]+\.?\d*", re.IGNORECASE),
    re.compile(r"[\d,]+\.?\d*\s*dollars?", re.IGNORECASE),
]

PRICE_VARIES = "Price varies"


def is_configured():
    return bool(config.GOOGLE_SEARCH_API_KEY and config.GOOGLE_SEARCH_ENGINE_ID)


def _text(value):
    return value if isinstance(value, str) and value else None


def extract_price(text):
    """Return the first price-looking substring of a snippet, or None"""
    if not text:
        return None

    for pattern in PRICE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0).strip()
    return None


class GoogleShoppingResolver(BaseResolver):
    """Finds a real product image/price per query with the Google Custom Search API"""

    source = "google-shopping"
    fallback_source = "google-shopping-fallback"

    def __init__(self, delay=None):
        self.delay = config.GOOGLE_SHOPPING_DELAY if delay is None else delay
        self.session = requests.Session()

    def delay_seconds(self):
        return self.delay

    def resolve(self, queries: List[GiftQuery]) -> List[Gift]:
        # One resolver per request; release pooled connections when done
        try:
            return super().resolve(queries)
        finally:
            self.session.close()

    def search(self, query):
        """
        Search for the top image result of a query

        Returns:
            dict: title, price, image, link and snippet, or None on any failure
        """
        if not is_configured():
            logger.warning("Google Shopping API not configured")
            return None

        params = {
            "key": config.GOOGLE_SEARCH_API_KEY,
            "cx": config.GOOGLE_SEARCH_ENGINE_ID,
            "q": query,
            "searchType": "image",
            "num": 1,
            "safe": "active",
        }

        try:
            logger.info(f"Searching Google Shopping for: {query}")
            response = self.session.get(CUSTOM_SEARCH_API, params=params, timeout=config.HTTP_TIMEOUT)

            if not response.ok:
                logger.error(f"Google API error: {response.status_code} {response.reason}")
                return None

            data = response.json()
            items = (data.get("items") if isinstance(data, dict) else None) or []
            if not isinstance(items, list) or not items or not isinstance(items[0], dict):
                logger.warning(f"No results found for: {query}")
                return None

            item = items[0]
            snippet = _text(item.get("snippet")) or ""
            image_info = item.get("image")
            context_link = image_info.get("contextLink") if isinstance(image_info, dict) else None
            image_link = _text(item.get("link"))
            product = {
                "title": _text(item.get("title")) or query,
                "price": extract_price(snippet) or PRICE_VARIES,
                "image": image_link or FALLBACK_IMAGE,
                "link": (
                    _text(context_link)
                    or image_link
                    or f"https://www.google.com/search?q={encode_query(query)}"
                ),
                "snippet": snippet,
            }
            logger.info(f"Found: {product['title'][:50]}")
            return product

        except (requests.RequestException, ValueError) as e:
            logger.error(f"Google Shopping error: {e}")
            return None

    def resolve_one(self, query: GiftQuery) -> Gift:
        product = self.search(query.query)

        if product:
            return Gift(
                **product,
                reason=query.reason,
                search_query=query.query,
                source=self.source,
            )

        return Gift(
            title=title_case(query.query),
            price=PRICE_VARIES,
            image=FALLBACK_IMAGE,
            link=f"https://www.google.com/search?tbm=shop&q={encode_query(query.query)}",
            reason=query.reason,
            search_query=query.query,
            source=self.fallback_source,
        )
