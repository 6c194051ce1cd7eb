"""
Tests for the Unsplash image resolver. Every failure path returns the fallback image.
"""
from urllib.parse import parse_qs, urlparse

import pytest
import requests
import responses

from giftfinder import images
from giftfinder.models import GiftQuery
from giftfinder.placeholders import FALLBACK_IMAGE

SEARCH_URL = f"{images.UNSPLASH_API}/search/photos"


def test_clean_query_strips_marketing_words():
    assert images.clean_query("Vintage leather PREMIUM wallet") == "leather wallet"
    # A query made only of noise words is kept as is
    assert images.clean_query("luxury") == "luxury"


def test_missing_key_returns_fallback():
    assert not images.is_configured()
    assert images.fetch_image("leather wallet") == FALLBACK_IMAGE


@responses.activate
def test_fetch_image_success(unsplash_key):
    responses.add(
        responses.GET,
        SEARCH_URL,
        json={"results": [{"urls": {"regular": "https://images.unsplash.com/photo-42"}}]},
        status=200,
    )

    assert images.fetch_image("retro vinyl record player") == "https://images.unsplash.com/photo-42"

    request = responses.calls[0].request
    params = parse_qs(urlparse(request.url).query)
    assert params["query"] == ["vinyl record player"]
    assert params["per_page"] == ["1"]
    assert params["orientation"] == ["squarish"]
    assert request.headers["Authorization"] == "Client-ID test_unsplash_key"


@responses.activate
def test_non_ok_response_returns_fallback(unsplash_key):
    responses.add(responses.GET, SEARCH_URL, json={"errors": ["Rate Limit Exceeded"]}, status=403)
    assert images.fetch_image("record player") == FALLBACK_IMAGE


@responses.activate
def test_empty_results_return_fallback(unsplash_key):
    responses.add(responses.GET, SEARCH_URL, json={"total": 0, "results": []}, status=200)
    assert images.fetch_image("record player") == FALLBACK_IMAGE


@responses.activate
def test_network_error_returns_fallback(unsplash_key):
    responses.add(responses.GET, SEARCH_URL, body=requests.exceptions.Timeout("timed out"))
    assert images.fetch_image("record player") == FALLBACK_IMAGE


@responses.activate
def test_invalid_json_returns_fallback(unsplash_key):
    responses.add(responses.GET, SEARCH_URL, body="<html>maintenance</html>", status=200)
    assert images.fetch_image("record player") == FALLBACK_IMAGE


@responses.activate
def test_fetch_images_one_per_query(unsplash_key):
    responses.add(
        responses.GET,
        SEARCH_URL,
        json={"results": [{"urls": {"regular": "https://images.unsplash.com/photo-7"}}]},
        status=200,
    )
    queries = [GiftQuery(query="tea set", reason="r"), GiftQuery(query="desk lamp", reason="r")]
    assert images.fetch_images(queries) == ["https://images.unsplash.com/photo-7"] * 2


@pytest.mark.parametrize("body", [
    [],
    {"results": None},
    {"results": "photo"},
    {"results": ["photo"]},
    {"results": [{"urls": None}]},
    {"results": [{"urls": ["https://images.unsplash.com/photo-1"]}]},
    {"results": [{"urls": {"regular": None}}]},
])
@responses.activate
def test_unexpected_payload_returns_fallback(unsplash_key, body):
    responses.add(responses.GET, SEARCH_URL, json=body, status=200)
    assert images.fetch_image("record player") == FALLBACK_IMAGE
