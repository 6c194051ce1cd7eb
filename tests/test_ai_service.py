"""
Tests for the AI query generator: prompt, reply parsing and fallback behaviour.
"""
import asyncio
import json
from unittest.mock import AsyncMock, patch

import pytest

from giftfinder import config
from giftfinder.ai_service import (
    FALLBACK_QUERIES,
    GeminiClient,
    GroqClient,
    build_prompt,
    clean_and_parse_response,
    generate_gift_queries,
    get_fallback_queries,
)
from giftfinder.errors import AIProviderError, AIResponseError

from tests.conftest import FISHING_QUERIES


def run(coro):
    return asyncio.run(coro)


class TestParsing:

    def test_plain_json_array(self):
        queries = clean_and_parse_response(json.dumps(FISHING_QUERIES))
        assert [q.query for q in queries] == [q["query"] for q in FISHING_QUERIES]

    def test_json_fence_stripped(self, ai_reply):
        queries = clean_and_parse_response(ai_reply)
        assert len(queries) == 6
        assert queries[0].reason == FISHING_QUERIES[0]["reason"]

    def test_bare_fence_stripped(self):
        text = "```\n" + json.dumps(FISHING_QUERIES) + "\n```"
        assert len(clean_and_parse_response(text)) == 6

    def test_malformed_json_rejected(self):
        with pytest.raises(AIResponseError):
            clean_and_parse_response("Here are some ideas: [{query: fishing}]")

    @pytest.mark.parametrize("count", [0, 5, 7])
    def test_wrong_length_rejected(self, count):
        items = (FISHING_QUERIES * 2)[:count]
        with pytest.raises(AIResponseError) as exc_info:
            clean_and_parse_response(json.dumps(items))
        assert "exactly 6" in str(exc_info.value)

    def test_object_instead_of_array_rejected(self):
        with pytest.raises(AIResponseError):
            clean_and_parse_response(json.dumps({"queries": FISHING_QUERIES}))

    def test_missing_reason_rejected(self):
        items = [dict(q) for q in FISHING_QUERIES]
        items[3]["reason"] = ""
        with pytest.raises(AIResponseError) as exc_info:
            clean_and_parse_response(json.dumps(items))
        assert "Query 4" in str(exc_info.value)


def test_prompt_embeds_description():
    prompt = build_prompt("My sister who loves pottery")
    assert 'Person Description: "My sister who loves pottery"' in prompt
    assert "exactly 6" in prompt
    assert prompt.count('"query"') == 6


def test_fallback_list_is_fixed():
    fallback = get_fallback_queries()
    assert len(fallback) == 6
    assert fallback[0].query == "unique personalized gifts"
    assert [q.query for q in fallback] == [q["query"] for q in FALLBACK_QUERIES]


class TestGenerate:

    def test_gemini_success(self, store, ai_reply):
        with patch.object(GeminiClient, "generate", new=AsyncMock(return_value=ai_reply)) as gemini:
            result = run(generate_gift_queries("My dad who loves fishing", store.get()))

        assert not result.used_fallback
        assert result.provider == "gemini"
        assert len(result.queries) == 6
        prompt, api_key, model = gemini.call_args.args
        assert "My dad who loves fishing" in prompt
        assert api_key == "test_gemini_key_123456"
        assert model == "gemini-2.5-flash-lite"

    def test_groq_backend_selected(self, store, ai_reply):
        store.update(provider="groq", api_key="gsk_test", model="llama-3.3-70b-versatile")
        with patch.object(GroqClient, "generate", new=AsyncMock(return_value=ai_reply)) as groq, \
                patch.object(GeminiClient, "generate", new=AsyncMock()) as gemini:
            result = run(generate_gift_queries("My dad who loves fishing", store.get()))

        assert not result.used_fallback
        assert groq.await_count == 1
        assert gemini.await_count == 0

    def test_malformed_reply_falls_back(self, store):
        with patch.object(GeminiClient, "generate", new=AsyncMock(return_value="not json at all")):
            result = run(generate_gift_queries("My dad who loves fishing", store.get()))

        assert result.used_fallback
        assert [q.query for q in result.queries] == [q["query"] for q in FALLBACK_QUERIES]
        assert "not valid JSON" in result.error

    def test_short_array_falls_back(self, store):
        reply = json.dumps(FISHING_QUERIES[:3])
        with patch.object(GeminiClient, "generate", new=AsyncMock(return_value=reply)):
            result = run(generate_gift_queries("My dad who loves fishing", store.get()))
        assert result.used_fallback
        assert len(result.queries) == 6

    def test_provider_error_falls_back(self, store):
        error = AIProviderError("Gemini API error 429: quota", provider="gemini", status_code=429)
        with patch.object(GeminiClient, "generate", new=AsyncMock(side_effect=error)):
            result = run(generate_gift_queries("My dad who loves fishing", store.get()))
        assert result.used_fallback
        assert "429" in result.error

    def test_unexpected_error_falls_back(self, store):
        with patch.object(GeminiClient, "generate", new=AsyncMock(side_effect=RuntimeError("boom"))):
            result = run(generate_gift_queries("My dad who loves fishing", store.get()))
        assert result.used_fallback
        assert "boom" in result.error

    def test_missing_key_skips_backend(self, store):
        store.update(api_key="")
        with patch.object(GeminiClient, "generate", new=AsyncMock()) as gemini:
            result = run(generate_gift_queries("My dad who loves fishing", store.get()))
        assert result.used_fallback
        assert "API key not configured" in result.error
        assert gemini.await_count == 0

    @pytest.mark.parametrize("client, provider, model", [
        (GeminiClient, "Gemini", "gemini-2.5-flash-lite"),
        (GroqClient, "Groq", "llama-3.3-70b-versatile"),
    ])
    def test_timeout_raises_provider_error(self, client, provider, model, monkeypatch):
        monkeypatch.setattr(config, "AI_REQUEST_TIMEOUT", 30.0)
        with patch("giftfinder.ai_service.aiohttp.ClientSession") as session_cls:
            session_cls.return_value.__aenter__.side_effect = asyncio.TimeoutError()
            with pytest.raises(AIProviderError, match=f"{provider} request timed out after 30s"):
                run(client.generate("prompt", "key_123", model))

    def test_timeout_falls_back_without_unexpected_error(self, store):
        with patch("giftfinder.ai_service.aiohttp.ClientSession") as session_cls, \
                patch("giftfinder.ai_service.logger") as logger:
            session_cls.return_value.__aenter__.side_effect = asyncio.TimeoutError()
            result = run(generate_gift_queries("My dad who loves fishing", store.get()))

        assert result.used_fallback
        assert result.error.startswith("Gemini request timed out")
        logger.exception.assert_not_called()
