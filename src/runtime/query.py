"""
Query Engine.

Pure function from (reviews, query state) to the ordered subset to render.
"""

import logging
from typing import Callable, Dict, Iterable, List

from src.models.query import ALL, QueryState, SortDirection, SortKey
from src.models.review import ReviewRecord

logger = logging.getLogger(__name__)


SORT_KEY_EXTRACTORS: Dict[SortKey, Callable[[ReviewRecord], object]] = {
    SortKey.RATING: lambda r: r.rating,
    SortKey.RELEASE_YEAR: lambda r: r.release_year,
    SortKey.REVIEW_DATE: lambda r: r.review_timestamp,
}


def matches_type(review: ReviewRecord, state: QueryState) -> bool:
    return state.filter_type == ALL or review.media_type == state.filter_type


def matches_search(review: ReviewRecord, state: QueryState) -> bool:
    """Case-insensitive substring match on title or author."""
    term = state.search_term.lower()
    if not term:
        return True
    return term in review.title.lower() or term in (review.author or "").lower()


def filter_reviews(reviews: Iterable[ReviewRecord], state: QueryState) -> List[ReviewRecord]:
    return [r for r in reviews if matches_type(r, state) and matches_search(r, state)]


def sort_reviews(reviews: Iterable[ReviewRecord], state: QueryState) -> List[ReviewRecord]:
    """
    Sort by the state's key and direction.

    Stable in both directions: reviews with equal keys keep input order.
    """
    key = SORT_KEY_EXTRACTORS[state.sort_key]
    return sorted(reviews, key=key, reverse=state.sort_direction == SortDirection.DESC)


def run_query(reviews: Iterable[ReviewRecord], state: QueryState) -> List[ReviewRecord]:
    """
    Filter then sort.

    Args:
        reviews: Source collection (not modified)
        state: Current query state

    Returns:
        New list; empty when nothing matches
    """
    result = sort_reviews(filter_reviews(reviews, state), state)
    logger.debug(
        f"Query type={state.filter_type if state.filter_type == ALL else state.filter_type.value} "
        f"search={state.search_term!r} sort={state.sort_key.value} {state.sort_direction.value}: "
        f"{len(result)} reviews"
    )
    return result


def review_count_label(count: int) -> str:
    return f"{count} {'Review' if count == 1 else 'Reviews'}"
