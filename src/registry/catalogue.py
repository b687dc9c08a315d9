"""
Review Catalogue - the in-memory collection for one session.

Holds the loaded reviews in artifact order and resolves ids. Read-only
after construction.
"""

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from src.models.review import ReviewRecord

logger = logging.getLogger(__name__)


class Catalogue:
    """
    Loaded reviews, in the artifact's canonical order.

    Loaded once at startup and shared by the query engine and the
    navigation synchronizer; neither mutates it.
    """

    def __init__(self, reviews: Optional[List[ReviewRecord]] = None):
        """
        Initialize catalogue.

        Args:
            reviews: Reviews in artifact order (default: empty)
        """
        self._reviews: Tuple[ReviewRecord, ...] = tuple(reviews or ())
        self._by_id: Dict[str, ReviewRecord] = {}  # id -> ReviewRecord

        for review in self._reviews:
            if review.id in self._by_id:
                logger.warning(f"Duplicate id '{review.id}' in artifact; keeping the later entry")
            self._by_id[review.id] = review

        logger.debug(f"Catalogue holds {len(self._reviews)} reviews")

    def __len__(self) -> int:
        return len(self._reviews)

    def __iter__(self) -> Iterator[ReviewRecord]:
        return iter(self._reviews)

    @property
    def reviews(self) -> List[ReviewRecord]:
        """Reviews in artifact order (a fresh list each call)."""
        return list(self._reviews)

    def get(self, review_id: Optional[str]) -> Optional[ReviewRecord]:
        """Retrieve review by id. Returns None if not found."""
        if review_id is None:
            return None
        return self._by_id.get(review_id)

