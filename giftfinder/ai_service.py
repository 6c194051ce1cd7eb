# giftfinder/ai_service.py - Gift query generation with Gemini / Groq

import asyncio
import json
import logging
import re
from typing import List, Optional

import aiohttp

from .errors import AIProviderError, AIResponseError
from .models import Configuration, GenerationResult, GiftQuery
from . import config

logger = logging.getLogger(__name__)

# API Configuration
GEMINI_API = "https://generativelanguage.googleapis.com/v1beta"
GROQ_API = "https://api.groq.com/openai/v1"

FALLBACK_QUERIES = [
    {
        "query": "unique personalized gifts",
        "reason": "AI service temporarily unavailable. This is a generic search to help you get started.",
    },
    {"query": "best seller gifts", "reason": "Popular gift items that many people enjoy."},
    {"query": "creative gift ideas", "reason": "Unique and creative options for any occasion."},
    {"query": "handmade artisan gifts", "reason": "Handcrafted items with a personal touch."},
    {"query": "premium gift sets", "reason": "Curated gift collections for special occasions."},
    {"query": "experience gifts", "reason": "Memorable experiences and activities."},
]

PROMPT_TEMPLATE = """You are a gift recommendation expert. Analyze this person description and generate exactly 6 unique, specific search queries for finding gifts.

Person Description: "{description}"

IMPORTANT: Respond ONLY with a valid JSON array. No markdown, no explanations, just the JSON array.

Format:
[
  {{
    "query": "specific search term",
    "reason": "why this gift matches the person (1-2 sentences)"
  }},
  {{
    "query": "another specific search term",
    "reason": "why this gift is perfect"
  }},
  {{
    "query": "third unique search term",
    "reason": "why they'll love this"
  }},
  {{
    "query": "fourth creative search term",
    "reason": "why this is a great match"
  }},
  {{
    "query": "fifth unique search term",
    "reason": "why this gift works"
  }},
  {{
    "query": "sixth special search term",
    "reason": "why this is perfect for them"
  }}
]

Make the queries creative, specific, and tailored to the person's interests. Include a mix of practical and creative gifts. Avoid generic terms."""


def build_prompt(description: str) -> str:
    return PROMPT_TEMPLATE.format(description=description)


class GeminiClient:
    """Google Gemini generateContent client"""

    name = "gemini"

    @staticmethod
    async def generate(prompt: str, api_key: str, model: str) -> str:
        url = f"{GEMINI_API}/models/{model}:generateContent"
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        timeout = aiohttp.ClientTimeout(total=config.AI_REQUEST_TIMEOUT)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(url, params={"key": api_key}, json=payload) as response:
                    if response.status != 200:
                        body = (await response.text())[:300]
                        raise AIProviderError(
                            f"Gemini API error {response.status}: {body}",
                            provider="gemini",
                            status_code=response.status,
                        )
                    data = await response.json()
        except asyncio.TimeoutError as e:
            raise AIProviderError(f"Gemini request timed out after {config.AI_REQUEST_TIMEOUT:g}s", provider="gemini") from e
        except aiohttp.ClientError as e:
            raise AIProviderError(f"Gemini request failed: {e}", provider="gemini") from e

        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = candidates[0].get("content", {}).get("parts") or []
        return parts[0].get("text", "") if parts else ""


class GroqClient:
    """Groq client (OpenAI-compatible chat completions)"""

    name = "groq"

    @staticmethod
    async def generate(prompt: str, api_key: str, model: str) -> str:
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": 0.7,
            "max_tokens": 1024,
        }
        timeout = aiohttp.ClientTimeout(total=config.AI_REQUEST_TIMEOUT)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(f"{GROQ_API}/chat/completions", headers=headers, json=payload) as response:
                    if response.status != 200:
                        body = (await response.text())[:300]
                        raise AIProviderError(
                            f"Groq API error {response.status}: {body}",
                            provider="groq",
                            status_code=response.status,
                        )
                    data = await response.json()
        except asyncio.TimeoutError as e:
            raise AIProviderError(f"Groq request timed out after {config.AI_REQUEST_TIMEOUT:g}s", provider="groq") from e
        except aiohttp.ClientError as e:
            raise AIProviderError(f"Groq request failed: {e}", provider="groq") from e

        choices = data.get("choices") or []
        if not choices:
            return ""
        return (choices[0].get("message") or {}).get("content") or ""


PROVIDER_CLIENTS = {
    GeminiClient.name: GeminiClient,
    GroqClient.name: GroqClient,
}


def clean_and_parse_response(text: str) -> List[GiftQuery]:
    """
    Parse the raw model reply into exactly 6 gift queries.

    Markdown code fences around the array are tolerated.

    Raises:
        AIResponseError: if the reply is not a JSON array of 6 {query, reason} objects
    """
    text = (text or "").strip()

    if text.startswith("```json"):
        text = re.sub(r"^```json\s*", "", text)
        text = re.sub(r"\s*```$", "", text)
    elif text.startswith("```"):
        text = re.sub(r"^```\s*", "", text)
        text = re.sub(r"\s*```$", "", text)

    try:
        queries = json.loads(text)
    except json.JSONDecodeError as e:
        raise AIResponseError(f"AI response is not valid JSON: {e}") from e

    if not isinstance(queries, list) or len(queries) != config.QUERIES_PER_REQUEST:
        raise AIResponseError(f"AI did not return exactly {config.QUERIES_PER_REQUEST} queries")

    parsed = []
    for index, q in enumerate(queries):
        if not isinstance(q, dict) or not q.get("query") or not q.get("reason"):
            raise AIResponseError(f"Query {index + 1} is missing 'query' or 'reason' field")
        parsed.append(GiftQuery(query=str(q["query"]), reason=str(q["reason"])))

    return parsed


def get_fallback_queries() -> List[GiftQuery]:
    return [GiftQuery(**q) for q in FALLBACK_QUERIES]


async def generate_gift_queries(description: str, settings: Configuration) -> GenerationResult:
    """
    Generate gift search queries with the configured AI provider.

    Never raises: a missing key, transport error or malformed reply yields
    the static fallback list with used_fallback=True.
    """
    provider = settings.provider
    model = settings.model
    error: Optional[str] = None

    try:
        if not settings.api_key or not settings.api_key.strip():
            raise AIProviderError("API key not configured. Please set up your API key in settings.")

        client = PROVIDER_CLIENTS.get(provider)
        if client is None:
            raise AIProviderError(f"Unknown provider: {provider}")

        logger.info(f"Requesting gift ideas from {provider} ({model})")
        text = await client.generate(build_prompt(description), settings.api_key, model)
        logger.debug(f"Raw AI response: {text}")

        queries = clean_and_parse_response(text)
        logger.info(f"Generated {len(queries)} gift queries")
        return GenerationResult(queries=queries, provider=provider, model=model)

    except (AIProviderError, AIResponseError) as e:
        error = str(e)
    except Exception as e:
        error = f"Unexpected AI service error: {e}"
        logger.exception("Unexpected error while generating gift queries")

    logger.warning(f"AI service error: {error}. Using fallback queries")
    return GenerationResult(
        queries=get_fallback_queries(),
        used_fallback=True,
        provider=provider,
        model=model,
        error=error,
    )
