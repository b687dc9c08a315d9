"""
Tests for the Catalogue Controller (application state and wiring).
"""

import json
import os
import tempfile
from unittest.mock import MagicMock

import pytest

from src.controller import CatalogueController
from src.pipeline.aggregation import Aggregator
from src.pipeline.ingestion import parse_record_file
from src.runtime.authoring import ReviewDraft
from src.runtime.loader import ArtifactLoader, LoadResult, LoadStatus
from src.runtime.navigation import LocationHistory, View


RECORDS = {
    "a.yaml": 'title: Alpha\ntype: Movie\nrating: 3\ntext: A.\nreleaseYear: 2001\nreviewDate: "2024-01-01"\n',
    "b.yaml": 'title: Bravo\ntype: Book\nauthor: Someone\nrating: 5\ntext: B.\nreleaseYear: 2002\nreviewDate: "2024-03-01"\n',
    "c.yaml": 'title: Charlie\ntype: Music\nauthor: Band\nrating: 4\ntext: C.\nreleaseYear: 2003\nreviewDate: "2024-02-01"\n',
}


@pytest.fixture
def workspace():
    """Build a small artifact in a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        content_dir = os.path.join(tmpdir, "content")
        os.makedirs(content_dir)
        for name, text in RECORDS.items():
            with open(os.path.join(content_dir, name), "w", encoding="utf-8") as f:
                f.write(text)
        artifact = os.path.join(tmpdir, "public", "reviews.json")
        Aggregator.from_paths(content_dir, artifact).run()
        yield {
            "root": tmpdir,
            "content": content_dir,
            "artifact": artifact,
            "downloads": os.path.join(tmpdir, "downloads"),
        }


def make_controller(workspace, location="/"):
    return CatalogueController(
        loader=ArtifactLoader(workspace["artifact"]),
        history=LocationHistory(location),
        download_dir=workspace["downloads"],
        content_dir=workspace["content"],
    )


def test_loading_state_before_start(workspace):
    controller = make_controller(workspace)
    assert controller.status == LoadStatus.LOADING
    assert controller.visible_reviews() == []
    with pytest.raises(RuntimeError):
        controller.open_review("a")


def test_start_loads_once():
    loader = MagicMock()
    loader.load.return_value = LoadResult(status=LoadStatus.READY)
    controller = CatalogueController(loader=loader)

    controller.start()
    controller.start()

    loader.load.assert_called_once()
    assert controller.is_ready


def test_unavailable_is_distinct_from_empty():
    loader = MagicMock()
    loader.load.return_value = LoadResult(status=LoadStatus.UNAVAILABLE, error="boom")
    controller = CatalogueController(loader=loader)
    controller.start()

    assert controller.status == LoadStatus.UNAVAILABLE
    assert controller.load_error == "boom"
    assert controller.visible_reviews() == []


def test_concrete_scenario_orders(workspace):
    controller = make_controller(workspace)
    controller.start()

    assert [r.id for r in controller.visible_reviews()] == ["b", "c", "a"]

    controller.toggle_sort_direction()
    assert [r.id for r in controller.visible_reviews()] == ["a", "c", "b"]


def test_filter_search_and_sort_setters(workspace):
    controller = make_controller(workspace)
    controller.start()

    controller.set_filter("Book")
    assert [r.id for r in controller.visible_reviews()] == ["b"]

    controller.set_filter("all")
    controller.set_search("band")
    assert [r.id for r in controller.visible_reviews()] == ["c"]

    controller.set_search("")
    controller.set_sort("releaseYear")
    assert [r.id for r in controller.visible_reviews()] == ["c", "b", "a"]


def test_empty_catalogue_and_empty_state_messages():
    with tempfile.TemporaryDirectory() as tmpdir:
        content_dir = os.path.join(tmpdir, "content")
        artifact = os.path.join(tmpdir, "reviews.json")
        Aggregator.from_paths(content_dir, artifact).run()

        controller = CatalogueController(loader=ArtifactLoader(artifact), content_dir=content_dir)
        controller.start()

        assert controller.is_ready
        assert controller.visible_reviews() == []
        assert "first review" in controller.empty_state_message()

        controller.set_search("anything")
        assert "adjusting your filters" in controller.empty_state_message()


def test_deep_link_to_existing_and_missing_review(workspace):
    controller = make_controller(workspace, "/?review=b")
    controller.start()
    assert controller.view == View.DETAIL
    assert controller.active_review().title == "Bravo"

    controller = make_controller(workspace, "/?review=zzz")
    controller.start()
    assert controller.view == View.DETAIL
    assert controller.active_review() is None


def test_save_new_review_writes_download_and_returns_to_list(workspace):
    controller = make_controller(workspace)
    controller.start()
    controller.new_review()

    path = controller.save_review(ReviewDraft(
        title="Delta", media_type="Movie", rating=2.5, text="D.", release_year=2010,
    ))

    assert os.path.dirname(path) == workspace["downloads"]
    with open(path, encoding="utf-8") as f:
        record = parse_record_file(os.path.basename(path), f.read())
    assert record.title == "Delta"
    assert controller.view == View.LIST
    # Catalogue is untouched until the author rebuilds
    assert len(controller.catalogue) == 3


def test_save_edit_preserves_id_and_review_date(workspace):
    controller = make_controller(workspace)
    controller.start()
    controller.open_review("b")
    controller.edit_review("b")

    existing = controller.catalogue.get("b")
    draft = ReviewDraft.from_record(existing)
    draft.rating = 4
    path = controller.save_review(draft)

    assert os.path.basename(path) == "b.yaml"
    with open(path, encoding="utf-8") as f:
        record = parse_record_file("b.yaml", f.read())
    assert record.review_date == existing.review_date
    assert record.updated_date is not None
    assert record.rating == 4
    assert controller.view == View.LIST
    assert controller.navigation.in_sync()


def test_save_outside_edit_view_rejected(workspace):
    controller = make_controller(workspace)
    controller.start()
    with pytest.raises(RuntimeError):
        controller.save_review(ReviewDraft(
            title="X", media_type="Movie", rating=1, text="x", release_year=2000,
        ))


def test_save_edit_of_missing_review_rejected(workspace):
    controller = make_controller(workspace)
    controller.start()
    controller.edit_review("gone")
    with pytest.raises(ValueError, match="gone"):
        controller.save_review(ReviewDraft(
            title="X", media_type="Movie", rating=1, text="x", release_year=2000,
        ))


def test_cancel_edit_returns_to_detail(workspace):
    controller = make_controller(workspace)
    controller.start()
    controller.open_review("a")
    controller.edit_review("a")
    controller.cancel_edit()

    assert controller.view == View.DETAIL
    assert controller.active_review().id == "a"


def test_delete_instructions_do_not_touch_storage(workspace):
    controller = make_controller(workspace)
    controller.start()

    message = controller.delete_instructions("a")

    assert "a.yaml" in message
    assert os.path.exists(os.path.join(workspace["content"], "a.yaml"))
    with open(workspace["artifact"], encoding="utf-8") as f:
        assert len(json.load(f)) == 3
