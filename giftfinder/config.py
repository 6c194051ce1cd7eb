import os
from dotenv import load_dotenv

load_dotenv()

# AI provider defaults (the settings endpoint can change these at runtime)
AI_PROVIDER = os.getenv("AI_PROVIDER", "gemini").strip()
AI_MODEL = os.getenv("AI_MODEL", "").strip()
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "").strip()
AI_REQUEST_TIMEOUT = float(os.getenv("AI_REQUEST_TIMEOUT", "30"))

PRODUCT_SOURCE = os.getenv("PRODUCT_SOURCE", "multi-store").strip()

# Google Custom Search (image mode) for the google-shopping source
GOOGLE_SEARCH_API_KEY = os.getenv("GOOGLE_SEARCH_API_KEY", "").strip()
GOOGLE_SEARCH_ENGINE_ID = os.getenv("GOOGLE_SEARCH_ENGINE_ID", "").strip()
GOOGLE_SHOPPING_DELAY = float(os.getenv("GOOGLE_SHOPPING_DELAY", "0.5"))

UNSPLASH_ACCESS_KEY = os.getenv("UNSPLASH_ACCESS_KEY", "").strip()

HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "10"))

# Legacy eBay scraping
SCRAPER_MIN_DELAY = float(os.getenv("SCRAPER_MIN_DELAY", "2"))
SCRAPER_MAX_DELAY = float(os.getenv("SCRAPER_MAX_DELAY", "4"))
SCRAPER_PAGE_TIMEOUT = int(os.getenv("SCRAPER_PAGE_TIMEOUT", "45"))
SCRAPER_WAIT_TIMEOUT = int(os.getenv("SCRAPER_WAIT_TIMEOUT", "10"))

APP_ENV = os.getenv("APP_ENV", "production").strip()
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "5000"))

MIN_DESCRIPTION_LENGTH = 5
MAX_DESCRIPTION_LENGTH = 500
QUERIES_PER_REQUEST = 6
