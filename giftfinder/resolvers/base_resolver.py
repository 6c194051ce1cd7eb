import logging
import time
from typing import List
from urllib.parse import quote

from ..models import Gift, GiftQuery

logger = logging.getLogger('base_resolver')


def encode_query(query):
    """URL-encode a query the way browsers encode a URI component (spaces become %20)"""
    return quote(query, safe="-_.!~*'()")


def title_case(query):
    """Capitalize the first letter of every word, leaving the rest untouched"""
    return " ".join(word[:1].upper() + word[1:] for word in query.split(" "))


class BaseResolver:
    """Base class for product resolvers (one query in, one gift out)"""

    # Value written to Gift.source and used as the registry key
    source = "base"

    def resolve_one(self, query: GiftQuery) -> Gift:
        """
        Resolve a single AI query into a gift (to be implemented by child classes)

        Args:
            query (GiftQuery): AI-generated search phrase and reason

        Returns:
            Gift: Resolved product card
        """
        raise NotImplementedError("Child classes must implement resolve_one")

    def delay_seconds(self):
        """Pause between two consecutive lookups; 0 disables it"""
        return 0

    def wait(self, seconds):
        time.sleep(seconds)

    def resolve(self, queries: List[GiftQuery]) -> List[Gift]:
        """
        Resolve queries sequentially, preserving their order

        Args:
            queries (list): GiftQuery objects from the AI step

        Returns:
            list: One Gift per query
        """
        name = self.__class__.__name__
        logger.info(f"{name}: resolving {len(queries)} queries")
        start_time = time.time()

        gifts = []
        for i, query in enumerate(queries):
            logger.info(f"  [{i + 1}/{len(queries)}] {query.query}")
            gifts.append(self.resolve_one(query))

            if i < len(queries) - 1:
                delay = self.delay_seconds()
                if delay > 0:
                    logger.info(f"Waiting {delay:.1f}s before next request...")
                    self.wait(delay)

        duration = time.time() - start_time
        logger.info(f"{name}: resolved {len(gifts)} gifts in {duration:.2f}s")
        return gifts
