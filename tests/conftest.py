"""
Shared pytest fixtures for GiftFinder tests.

This module provides reusable fixtures for:
- Configuration stores with known settings
- AI replies and gift queries
- A FastAPI test client wired to an isolated config store
- Disabling rate-limit sleeps and external API keys
"""
from __future__ import annotations

import json
from typing import List
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from giftfinder import config
from giftfinder.config_store import ConfigStore
from giftfinder.main import app, get_config_store
from giftfinder.models import Configuration, GiftQuery
from giftfinder.resolvers import BaseResolver


# =============================================================================
# Environment isolation
# =============================================================================

@pytest.fixture(autouse=True)
def no_external_keys(monkeypatch):
    """Blank out third-party keys so no test reaches a real API by accident."""
    monkeypatch.setattr(config, "GOOGLE_SEARCH_API_KEY", "")
    monkeypatch.setattr(config, "GOOGLE_SEARCH_ENGINE_ID", "")
    monkeypatch.setattr(config, "UNSPLASH_ACCESS_KEY", "")


@pytest.fixture(autouse=True)
def no_sleep():
    """Skip rate-limit and page-settle delays."""
    with patch.object(BaseResolver, "wait") as wait:
        yield wait


@pytest.fixture
def google_keys(monkeypatch):
    monkeypatch.setattr(config, "GOOGLE_SEARCH_API_KEY", "test_google_key")
    monkeypatch.setattr(config, "GOOGLE_SEARCH_ENGINE_ID", "test_engine_id")


@pytest.fixture
def unsplash_key(monkeypatch):
    monkeypatch.setattr(config, "UNSPLASH_ACCESS_KEY", "test_unsplash_key")


# =============================================================================
# Configuration Fixtures
# =============================================================================

def make_store(product_source: str = "multi-store", provider: str = "gemini",
               api_key: str = "test_gemini_key_123456", model: str = "gemini-2.5-flash-lite") -> ConfigStore:
    return ConfigStore(Configuration(
        provider=provider,
        api_key=api_key,
        model=model,
        product_source=product_source,
    ))


@pytest.fixture
def store() -> ConfigStore:
    """Gemini store using the multi-store source."""
    return make_store()


# =============================================================================
# AI Fixtures
# =============================================================================

FISHING_QUERIES = [
    {"query": "fly fishing tackle box", "reason": "Keeps his gear organised for every trip."},
    {"query": "personalized fishing lure set", "reason": "A keepsake he will actually use."},
    {"query": "waterproof fishing hat", "reason": "Sun protection on long days at the lake."},
    {"query": "fishing knot tying book", "reason": "No screens, just a good guide."},
    {"query": "insulated camping coffee mug", "reason": "Hot coffee at dawn on the water."},
    {"query": "wooden fishing rod rack", "reason": "Displays his rods in the garage."},
]


@pytest.fixture
def sample_queries() -> List[GiftQuery]:
    return [GiftQuery(**q) for q in FISHING_QUERIES]


@pytest.fixture
def ai_reply() -> str:
    """A well-formed model reply wrapped in a markdown fence."""
    return "```json\n" + json.dumps(FISHING_QUERIES, indent=2) + "\n```"


# =============================================================================
# API client
# =============================================================================

@pytest.fixture
def client_for():
    """Build a TestClient bound to a specific config store."""
    def _create(store: ConfigStore) -> TestClient:
        app.dependency_overrides[get_config_store] = lambda: store
        return TestClient(app)

    yield _create
    app.dependency_overrides.clear()


@pytest.fixture
def client(client_for, store) -> TestClient:
    return client_for(store)
