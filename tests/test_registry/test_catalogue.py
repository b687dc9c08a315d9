"""
Basic unit tests for the in-memory Catalogue.
"""

from src.models.review import ReviewRecord
from src.registry.catalogue import Catalogue


def make_record(review_id, media_type="Movie", title=None):
    return ReviewRecord(
        id=review_id,
        title=title or review_id,
        media_type=media_type,
        rating=3,
        text="...",
        release_year=1999,
        review_date="2024-01-01T00:00:00Z",
    )


def test_empty_catalogue():
    catalogue = Catalogue()
    assert len(catalogue) == 0
    assert catalogue.get("anything") is None
    assert catalogue.get(None) is None


def test_get_by_id_and_order_preserved():
    catalogue = Catalogue([make_record("b"), make_record("a"), make_record("c")])

    assert [r.id for r in catalogue] == ["b", "a", "c"]
    assert catalogue.get("a").id == "a"
    assert catalogue.get("z") is None


def test_reviews_returns_fresh_list():
    catalogue = Catalogue([make_record("a")])
    reviews = catalogue.reviews
    reviews.clear()
    assert len(catalogue) == 1


def test_duplicate_ids_in_artifact_resolve_to_later_entry():
    catalogue = Catalogue([make_record("a", title="First"), make_record("a", title="Second")])
    assert catalogue.get("a").title == "Second"
