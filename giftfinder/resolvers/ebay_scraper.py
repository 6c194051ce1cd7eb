from .base_resolver import BaseResolver, encode_query
from ..models import Gift, GiftQuery
from ..placeholders import NO_IMAGE, NO_RESULTS, ERROR_IMAGE, MOCK_IMAGES
from .. import config
from bs4 import BeautifulSoup
import logging
import random

logger = logging.getLogger('ebay_scraper')

EBAY_SEARCH_URL = "https://www.ebay.com/sch/i.html?_nkw={}"

USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36'
)

HIDE_WEBDRIVER_SCRIPT = "Object.defineProperty(navigator, 'webdriver', {get: () => false});"

RESULTS_SELECTOR = ".s-item, .srp-results"

# eBay selectors, tried in order for different page layouts
ITEM_SELECTORS = [
    ".s-item",
    ".srp-results .s-item",
    "li.s-item",
]
TITLE_SELECTORS = [
    ".s-item__title",
    ".s-item__title span",
    "h3.s-item__title",
]
PRICE_SELECTORS = [
    ".s-item__price",
    "span.s-item__price",
    ".s-item__detail--primary .s-item__price",
]
IMAGE_SELECTORS = [
    ".s-item__image-img",
    ".s-item__image img",
    "img",
]
LINK_SELECTORS = [
    ".s-item__link",
    ".s-item__info a",
    "a",
]

HEADER_TITLE = 'Shop on eBay'


def search_url_for(keyword):
    return EBAY_SEARCH_URL.format(encode_query(keyword))


def _first_text(item, selectors):
    for selector in selectors:
        elem = item.select_one(selector)
        if elem and elem.get_text(strip=True):
            return elem.get_text(" ", strip=True)
    return None


def extract_first_product(html):
    """
    Pull title/price/image/link of the first real result out of an eBay search page

    Args:
        html (str): Page source

    Returns:
        dict: Product fields, or None if the page has no usable result
    """
    if not html:
        return None

    soup = BeautifulSoup(html, 'html.parser')

    items = []
    for selector in ITEM_SELECTORS:
        items = soup.select(selector)
        if items:
            break

    # Skip the "Shop on eBay" header card
    first_item = None
    for item in items:
        title = _first_text(item, TITLE_SELECTORS)
        if title and HEADER_TITLE not in title:
            first_item = item
            break

    if first_item is None:
        return None

    title = _first_text(first_item, TITLE_SELECTORS) or 'No title'
    title = title.replace('New Listing', '').strip() or 'No title'

    price = _first_text(first_item, PRICE_SELECTORS) or 'Price not available'

    image = NO_IMAGE
    for selector in IMAGE_SELECTORS:
        img_elem = first_item.select_one(selector)
        if img_elem:
            # eBay uses data-src for lazy loading
            image = img_elem.get('src') or img_elem.get('data-src') or NO_IMAGE
            break

    link = '#'
    for selector in LINK_SELECTORS:
        link_elem = first_item.select_one(selector)
        if link_elem and link_elem.get('href'):
            link = link_elem['href']
            break

    return {"title": title, "price": price, "image": image, "link": link}


class EbayScraper(BaseResolver):
    """
    Legacy eBay scraping with a headless Chrome browser (not recommended).

    eBay actively blocks automated traffic, so results are best-effort.
    Requires selenium and a Chrome install; webdriver-manager fetches the driver.
    """

    source = "ebay-scraping"

    def __init__(self, min_delay=None, max_delay=None):
        self.min_delay = config.SCRAPER_MIN_DELAY if min_delay is None else min_delay
        self.max_delay = config.SCRAPER_MAX_DELAY if max_delay is None else max_delay

    def delay_seconds(self):
        # Random delay between requests to look less like a bot
        return random.uniform(self.min_delay, self.max_delay)

    def _create_driver(self):
        from selenium import webdriver
        from selenium.webdriver.chrome.options import Options
        from selenium.webdriver.chrome.service import Service
        from webdriver_manager.chrome import ChromeDriverManager

        chrome_options = Options()
        chrome_options.add_argument("--headless=new")
        chrome_options.add_argument("--no-sandbox")
        chrome_options.add_argument("--disable-setuid-sandbox")
        chrome_options.add_argument("--disable-dev-shm-usage")
        chrome_options.add_argument("--disable-gpu")
        chrome_options.add_argument("--disable-blink-features=AutomationControlled")
        chrome_options.add_argument("--window-size=1920,1080")
        chrome_options.add_argument("--lang=en-US")
        chrome_options.add_argument(f"user-agent={USER_AGENT}")

        driver = webdriver.Chrome(service=Service(ChromeDriverManager().install()), options=chrome_options)
        driver.execute_cdp_cmd("Page.addScriptToEvaluateOnNewDocument", {"source": HIDE_WEBDRIVER_SCRIPT})
        driver.set_page_load_timeout(config.SCRAPER_PAGE_TIMEOUT)
        return driver

    def get_page_source(self, url):
        """
        Load a page in headless Chrome and return its HTML once results render

        The browser is always closed, even when loading fails.
        """
        from selenium.common.exceptions import TimeoutException
        from selenium.webdriver.common.by import By
        from selenium.webdriver.support import expected_conditions as EC
        from selenium.webdriver.support.ui import WebDriverWait

        driver = self._create_driver()
        try:
            logger.info(f"Navigating to: {url}")
            driver.get(url)

            try:
                WebDriverWait(driver, config.SCRAPER_WAIT_TIMEOUT).until(
                    EC.presence_of_element_located((By.CSS_SELECTOR, RESULTS_SELECTOR))
                )
                logger.info("Products section found")
            except TimeoutException:
                logger.warning("Products section not found, attempting to extract anyway...")

            # Let lazy content settle
            self.wait(1.5)
            return driver.page_source
        finally:
            try:
                driver.quit()
            except Exception as e:
                logger.error(f"Error closing browser: {e}")

    def search_ebay(self, keyword):
        """
        Scrape the top eBay result for a keyword

        Returns:
            dict: title, price, image, link (and error on failure)
        """
        search_url = search_url_for(keyword)
        logger.info(f"Scraping eBay for: {keyword}")

        try:
            html = self.get_page_source(search_url)
            product = extract_first_product(html)
        except Exception as e:
            logger.error(f"Scraper error: {e}")
            return {
                "title": f'Error: Could not fetch results for "{keyword}"',
                "price": "N/A",
                "image": ERROR_IMAGE,
                "link": search_url,
                "error": str(e),
            }

        if not product:
            logger.warning(f"No eBay product found for: {keyword}")
            return {
                "title": f'No results found for "{keyword}"',
                "price": "N/A",
                "image": NO_RESULTS,
                "link": search_url,
            }

        logger.info(f"Scraped product: {product['title'][:50]}")
        return product

    def resolve_one(self, query: GiftQuery) -> Gift:
        product = self.search_ebay(query.query)
        return Gift(**product, reason=query.reason, search_query=query.query, source=self.source)


class MockResolver(BaseResolver):
    """Returns canned eBay-style products without any network access (development)"""

    source = "mock"

    def generate_mock_product(self, keyword):
        mock_products = [
            {
                "title": f"Premium {keyword} - Limited Edition",
                "price": "$29.99",
                "image": MOCK_IMAGES[0],
                "link": "https://www.ebay.com/itm/mock-product-1",
            },
            {
                "title": f"Best Selling {keyword} Gift Set",
                "price": "$45.00",
                "image": MOCK_IMAGES[1],
                "link": "https://www.ebay.com/itm/mock-product-2",
            },
            {
                "title": f"Handcrafted {keyword} Collection",
                "price": "$67.50",
                "image": MOCK_IMAGES[2],
                "link": "https://www.ebay.com/itm/mock-product-3",
            },
        ]
        return random.choice(mock_products)

    def resolve_one(self, query: GiftQuery) -> Gift:
        logger.info(f"[MOCK MODE] Returning fake data for: {query.query}")
        product = self.generate_mock_product(query.query)
        return Gift(**product, reason=query.reason, search_query=query.query, source=self.source)
