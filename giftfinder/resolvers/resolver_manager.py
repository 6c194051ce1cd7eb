import logging

from .multi_store import MultiStoreResolver
from .google_shopping import GoogleShoppingResolver, is_configured as google_shopping_configured
from .ebay_scraper import EbayScraper, MockResolver

logger = logging.getLogger('resolver_manager')

# Product source name -> resolver class
RESOLVERS = {
    "multi-store": MultiStoreResolver,
    "google-shopping": GoogleShoppingResolver,
    "mock": MockResolver,
    "ebay-scraping": EbayScraper,
}

DEFAULT_SOURCE = "multi-store"


def get_resolver(product_source):
    """
    Pick the resolver for a product source

    Unknown sources use multi-store, and google-shopping without
    Google Search credentials also degrades to multi-store.

    Args:
        product_source (str): Configured product source

    Returns:
        BaseResolver: Resolver instance for this request
    """
    if product_source not in RESOLVERS:
        logger.warning(f"Unknown product source '{product_source}', using {DEFAULT_SOURCE}")
        product_source = DEFAULT_SOURCE

    if product_source == "google-shopping" and not google_shopping_configured():
        logger.warning("Google Shopping not configured, falling back to multi-store")
        product_source = DEFAULT_SOURCE

    if product_source == "ebay-scraping":
        logger.warning("Using legacy eBay scraping (may fail)")

    return RESOLVERS[product_source]()


def available_sources():
    return list(RESOLVERS)
