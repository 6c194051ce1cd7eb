from .base_resolver import BaseResolver
from .multi_store import MultiStoreResolver
from .google_shopping import GoogleShoppingResolver
from .ebay_scraper import EbayScraper, MockResolver
from .resolver_manager import get_resolver, available_sources

__all__ = [
    'BaseResolver', 'MultiStoreResolver', 'GoogleShoppingResolver',
    'EbayScraper', 'MockResolver', 'get_resolver', 'available_sources',
]
