"""
Authoring output.

Turns a filled-in review draft into a single-record YAML document for the
author to drop into the Record Store. Nothing here writes to the Record
Store itself or to the loaded catalogue.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, Union

import yaml

from src.models.review import MediaType, ReviewRecord, format_timestamp, needs_author
from src.utils.storage import RecordStore

logger = logging.getLogger(__name__)

RECORD_FILE_EXTENSION = ".yaml"


@dataclass
class ReviewDraft:
    """
    The editable fields of a review, as entered by the author.

    Identity and dates are assigned by create_record / update_record.
    """
    title: str
    media_type: Union[MediaType, str]
    rating: Union[int, float]
    text: str
    release_year: int
    author: Optional[str] = None

    def __post_init__(self):
        self.media_type = MediaType.parse(self.media_type)
        # Screen media never carry an author
        if not needs_author(self.media_type):
            self.author = None

    @classmethod
    def from_record(cls, record: ReviewRecord) -> "ReviewDraft":
        """Draft pre-filled from an existing review (the edit form's initial data)."""
        return cls(
            title=record.title,
            media_type=record.media_type,
            rating=record.rating,
            text=record.text,
            release_year=record.release_year,
            author=record.author,
        )


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def create_record(
    draft: ReviewDraft,
    now: Optional[datetime] = None,
    id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
) -> ReviewRecord:
    """
    New review: fresh unique id, reviewDate set to now.

    Raises:
        ValueError: If the draft does not form a valid review
    """
    record = ReviewRecord(
        id=id_factory(),
        title=draft.title,
        media_type=draft.media_type,
        rating=draft.rating,
        text=draft.text,
        release_year=draft.release_year,
        review_date=format_timestamp(now or _utc_now()),
        author=draft.author,
    )
    logger.info(f"Created review '{record.id}' ({record.title})")
    return record


def update_record(existing: ReviewRecord, draft: ReviewDraft, now: Optional[datetime] = None) -> ReviewRecord:
    """
    Edited review: keeps the original id and reviewDate, sets updatedDate to now.

    Raises:
        ValueError: If the draft does not form a valid review
    """
    record = ReviewRecord(
        id=existing.id,
        title=draft.title,
        media_type=draft.media_type,
        rating=draft.rating,
        text=draft.text,
        release_year=draft.release_year,
        review_date=existing.review_date,
        author=draft.author,
        updated_date=format_timestamp(now or _utc_now()),
    )
    logger.info(f"Updated review '{record.id}' ({record.title})")
    return record


class _RecordDumper(yaml.SafeDumper):
    """SafeDumper that writes multi-line strings as literal blocks."""


def _represent_str(dumper: yaml.SafeDumper, value: str):
    if "\n" in value:
        return dumper.represent_scalar("tag:yaml.org,2002:str", value, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", value)


_RecordDumper.add_representer(str, _represent_str)


def render_record_yaml(record: ReviewRecord) -> str:
    """
    Single-record YAML document.

    The id is left out: it is the file name.
    """
    return yaml.dump(
        record.to_source_dict(),
        Dumper=_RecordDumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


def record_filename(record: ReviewRecord) -> str:
    return f"{record.id}{RECORD_FILE_EXTENSION}"


def write_record_file(record: ReviewRecord, directory: str) -> str:
    """
    Write the record's YAML document as <id>.yaml in directory.

    Returns:
        Path of the written file
    """
    store = RecordStore(directory)
    return store.write_record(record_filename(record), render_record_yaml(record))
