"""
Unit tests for the review data model.
"""

import pytest
from datetime import datetime, timezone

from src.models.review import (
    MEDIA_TYPE_INFO,
    MediaType,
    ReviewRecord,
    format_display_date,
    format_timestamp,
    media_type_info,
    needs_author,
    parse_timestamp,
)


def make_record(**overrides):
    fields = dict(
        id="dune",
        title="Dune",
        media_type="Book",
        rating=4.5,
        text="Sand and spice.",
        release_year=1965,
        review_date="2024-01-01T10:00:00.000Z",
        author="Frank Herbert",
    )
    fields.update(overrides)
    return ReviewRecord(**fields)


def test_media_type_parse_accepts_values_and_names():
    assert MediaType.parse("TV Show") == MediaType.TV_SHOW
    assert MediaType.parse("TVShow") == MediaType.TV_SHOW
    assert MediaType.parse("tv") == MediaType.TV_SHOW
    assert MediaType.parse("Movie") == MediaType.MOVIE
    assert MediaType.parse(MediaType.BOOK) == MediaType.BOOK

    with pytest.raises(ValueError):
        MediaType.parse("Podcast")
    with pytest.raises(ValueError):
        MediaType.parse(3)


def test_every_media_type_has_display_info():
    assert set(MEDIA_TYPE_INFO) == set(MediaType)
    assert media_type_info(MediaType.MUSIC).author_label == "Artist"
    assert media_type_info(MediaType.BOOK).author_label == "Author"
    assert needs_author(MediaType.BOOK)
    assert not needs_author(MediaType.MOVIE)
    assert not needs_author(MediaType.TV_SHOW)


def test_valid_record():
    record = make_record()
    assert record.media_type == MediaType.BOOK
    assert record.rating == 4.5


def test_whole_float_rating_normalized_to_int():
    record = make_record(rating=4.0)
    assert record.rating == 4
    assert isinstance(record.rating, int)


@pytest.mark.parametrize("rating", [-1, 5.5, 3.3, "4", True])
def test_invalid_rating_rejected(rating):
    with pytest.raises(ValueError):
        make_record(rating=rating)


def test_empty_title_rejected():
    with pytest.raises(ValueError, match="Title"):
        make_record(title="   ")


def test_release_year_range():
    make_record(release_year=1800)
    with pytest.raises(ValueError):
        make_record(release_year=1799)
    with pytest.raises(ValueError):
        make_record(release_year=datetime.now(timezone.utc).year + 6)


def test_updated_date_must_not_precede_review_date():
    make_record(updated_date="2024-02-01T00:00:00Z")
    with pytest.raises(ValueError, match="earlier"):
        make_record(updated_date="2023-12-31T00:00:00Z")


def test_invalid_timestamp_rejected():
    with pytest.raises(ValueError):
        make_record(review_date="last tuesday")


def test_blank_author_becomes_none():
    assert make_record(author="  ").author is None


def test_parse_timestamp_handles_z_and_bare_dates():
    assert parse_timestamp("2024-01-01T00:00:00Z") == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert parse_timestamp("2024-01-01") == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert parse_timestamp("2024-01-01T02:00:00+02:00") == datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_parse_timestamp_accepts_any_fraction_length():
    assert parse_timestamp("2024-01-01T00:00:00.5Z") == datetime(2024, 1, 1, 0, 0, 0, 500000, tzinfo=timezone.utc)
    assert parse_timestamp("2024-01-01T00:00:00.123456789Z") == datetime(2024, 1, 1, 0, 0, 0, 123456, tzinfo=timezone.utc)
    assert parse_timestamp("2024-01-01T00:00:00.12+01:00") == datetime(2023, 12, 31, 23, 0, 0, 120000, tzinfo=timezone.utc)


def test_format_timestamp():
    moment = datetime(2024, 3, 5, 12, 30, 0, 123000, tzinfo=timezone.utc)
    assert format_timestamp(moment) == "2024-03-05T12:30:00.123Z"


def test_format_display_date():
    assert format_display_date("2024-01-01T10:00:00Z") == "Jan 1, 2024"


def test_excerpt_truncates_long_text():
    long_text = " ".join(f"word{i}" for i in range(100))
    record = make_record(text=long_text)

    excerpt = record.excerpt()
    assert excerpt.endswith("...")
    assert len(excerpt[:-3].split()) == 80

    short = make_record(text="Short and sweet.")
    assert short.excerpt() == "Short and sweet."


def test_dict_round_trip():
    record = make_record(updated_date="2024-02-01T00:00:00.000Z")
    data = record.to_dict()

    assert list(data)[0] == "id"
    assert data["type"] == "Book"
    assert data["releaseYear"] == 1965

    restored = ReviewRecord.from_dict(data)
    assert restored == record


def test_to_dict_omits_absent_optional_fields():
    data = make_record(media_type="Movie", author=None).to_dict()
    assert "author" not in data
    assert "updatedDate" not in data


def test_from_dict_missing_field():
    data = make_record().to_dict()
    del data["title"]
    with pytest.raises(ValueError, match="title"):
        ReviewRecord.from_dict(data)
