import re
import logging

from .base_resolver import BaseResolver, encode_query, title_case
from ..models import Gift, GiftQuery, PlatformLinks
from ..placeholders import CATEGORY_IMAGES
from .. import images

logger = logging.getLogger('multi_store')

# Checked in order; the first match wins
CATEGORY_PATTERNS = [
    ("tech", re.compile(r"tech|gadget|electronic|computer|phone|headphone|speaker|smartwatch")),
    ("books", re.compile(r"book|reading|novel|magazine|kindle")),
    ("home", re.compile(r"home|decor|furniture|kitchen|cookware|garden")),
    ("food", re.compile(r"food|coffee|tea|chocolate|wine|gourmet|cooking")),
    ("fashion", re.compile(r"fashion|clothing|jewelry|accessory|watch|bag|shoes")),
]

PRICE_PATTERNS = [
    ("$50-150", re.compile(r"luxury|premium|designer|gold|silver|diamond|high-end|professional")),
    ("$10-30", re.compile(r"budget|affordable|cheap|basic|simple")),
    ("$40-120", re.compile(r"tech|electronic|gadget|smartwatch|tablet")),
    ("$30-80", re.compile(r"jewelry|watch|bag|fashion")),
    ("$15-40", re.compile(r"book|dvd|cd|magazine")),
]

DEFAULT_PRICE_RANGE = "$25-60"

PLATFORM_URLS = {
    "amazon": "https://www.amazon.com/s?k={}",
    "ebay": "https://www.ebay.com/sch/i.html?_nkw={}",
    "etsy": "https://www.etsy.com/search?q={}",
    "walmart": "https://www.walmart.com/search?q={}",
    "target": "https://www.target.com/s?searchTerm={}",
}


def detect_category(query):
    query_lower = query.lower()
    for category, pattern in CATEGORY_PATTERNS:
        if pattern.search(query_lower):
            return category
    return "default"


def estimate_price_range(query):
    query_lower = query.lower()
    for price_range, pattern in PRICE_PATTERNS:
        if pattern.search(query_lower):
            return price_range
    return DEFAULT_PRICE_RANGE


def generate_platform_links(query):
    encoded = encode_query(query)
    return PlatformLinks(**{name: url.format(encoded) for name, url in PLATFORM_URLS.items()})


class MultiStoreResolver(BaseResolver):
    """
    Builds a recommendation card with search links for five stores.

    No product lookup happens; only an optional Unsplash image request
    per query when an access key is configured.
    """

    source = "multi-store"

    def __init__(self, use_unsplash=True):
        self.use_unsplash = use_unsplash

    def resolve_one(self, query: GiftQuery) -> Gift:
        category = detect_category(query.query)
        platform_links = generate_platform_links(query.query)

        image = CATEGORY_IMAGES[category]
        if self.use_unsplash and images.is_configured():
            image = images.fetch_image(query.query)

        return Gift(
            title=title_case(query.query),
            price=estimate_price_range(query.query),
            image=image,
            link=platform_links.amazon,
            platform_links=platform_links,
            reason=query.reason,
            search_query=query.query,
            category=category,
            source=self.source,
        )
