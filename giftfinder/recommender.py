# giftfinder/recommender.py - AI step + product step for one recommendation request

import asyncio
import logging
from typing import Optional, Tuple

from .ai_service import generate_gift_queries
from .models import Configuration, RecommendData
from .resolvers import get_resolver
from . import config

logger = logging.getLogger(__name__)


def validate_description(description: Optional[str]) -> Optional[Tuple[str, str]]:
    """
    Check a recipient description.

    Returns:
        (error, message) for an invalid description, None when it is usable
    """
    if description is None or not description.strip():
        return (
            "Description is required",
            "Please provide a description of the person you want to find gifts for.",
        )

    length = len(description.strip())
    if length < config.MIN_DESCRIPTION_LENGTH:
        return (
            "Description too short",
            f"Please provide a more detailed description (at least {config.MIN_DESCRIPTION_LENGTH} characters).",
        )
    if length > config.MAX_DESCRIPTION_LENGTH:
        return (
            "Description too long",
            f"Please keep your description under {config.MAX_DESCRIPTION_LENGTH} characters.",
        )
    return None


async def recommend_gifts(description: str, settings: Configuration) -> RecommendData:
    """
    Generate gift ideas for a description and resolve each one into a product.

    `settings` is a snapshot taken when the request started, so a settings
    update arriving mid-request does not switch provider or source halfway.
    """
    logger.info(f"New gift recommendation request: {description!r}")

    logger.info("Step 1/2: Generating gift ideas with AI...")
    result = await generate_gift_queries(description, settings)
    if result.used_fallback:
        logger.warning(f"AI fallback used ({result.error})")
    logger.info(f"Generated {len(result.queries)} gift queries")

    logger.info(f"Step 2/2: Finding products using '{settings.product_source}'...")
    resolver = get_resolver(settings.product_source)

    # Resolvers block (HTTP calls, browser, rate-limit sleeps)
    loop = asyncio.get_running_loop()
    gifts = await loop.run_in_executor(None, resolver.resolve, result.queries)
    logger.info(f"Resolved {len(gifts)} gifts via {resolver.source}")

    return RecommendData(
        description=description,
        total_results=len(gifts),
        gifts=gifts,
        ai_fallback=result.used_fallback,
    )
