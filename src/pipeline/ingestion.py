"""
Record Ingestion.

Parses one YAML record file into a validated ReviewRecord. The record's id
comes from the file name, never from the file content.
"""

import logging
import os
from typing import Any, Dict

import yaml

from src.models.review import ReviewRecord, needs_author, timestamp_to_string
import config.settings as settings

logger = logging.getLogger(__name__)

KNOWN_FIELDS = (
    "id", "title", "type", "author", "rating", "text",
    "releaseYear", "reviewDate", "updatedDate",
)


class RecordError(ValueError):
    """A record file that cannot become a ReviewRecord."""

    def __init__(self, filename: str, reason: str):
        super().__init__(f"{filename}: {reason}")
        self.filename = filename
        self.reason = reason


class RecordParseError(RecordError):
    """The file is not valid YAML."""


class RecordShapeError(RecordError):
    """The file is valid YAML but not a valid review mapping."""


def record_id_from_filename(filename: str) -> str:
    """Stable id: the file's base name with its extension removed."""
    base = os.path.basename(filename)
    stem, _ = os.path.splitext(base)
    return stem


def normalize_text(value: Any, filename: str) -> Any:
    """
    Reduce a review body to a single string.

    A list of paragraphs is joined with a blank line. Anything else is
    returned as-is and left for ReviewRecord validation.
    """
    if isinstance(value, list):
        if not all(isinstance(p, str) for p in value):
            raise RecordShapeError(filename, "text paragraphs must all be strings")
        logger.info(f"{filename}: joining {len(value)} text paragraphs into one block")
        return settings.PARAGRAPH_SEPARATOR.join(p.strip() for p in value)
    return value


def scalar_to_text(value: Any) -> Any:
    """Unquoted numeric titles and names ("1984", "311") load as numbers; keep them as text."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def record_from_mapping(record_id: str, data: Dict[str, Any], filename: str) -> ReviewRecord:
    """
    Build a ReviewRecord from a parsed record mapping.

    Raises:
        RecordShapeError: If required fields are missing or invalid
    """
    unknown = sorted(str(k) for k in data if k not in KNOWN_FIELDS)
    if unknown:
        logger.debug(f"{filename}: ignoring unknown fields {unknown}")

    if "id" in data and data["id"] != record_id:
        logger.debug(f"{filename}: replacing id {data['id']!r} with {record_id!r}")

    missing = [f for f in ("title", "type", "rating", "text", "releaseYear", "reviewDate") if f not in data]
    if missing:
        raise RecordShapeError(filename, f"missing required fields {missing}")

    try:
        record = ReviewRecord(
            id=record_id,
            title=scalar_to_text(data["title"]),
            media_type=data["type"],
            rating=data["rating"],
            text=normalize_text(data["text"], filename),
            release_year=data["releaseYear"],
            review_date=timestamp_to_string(data["reviewDate"]),
            author=scalar_to_text(data.get("author")),
            updated_date=timestamp_to_string(data.get("updatedDate")),
        )
    except RecordError:
        raise
    except ValueError as e:
        raise RecordShapeError(filename, str(e))

    if needs_author(record.media_type) and not record.author:
        logger.info(f"{filename}: {record.media_type.value} review has no author")

    return record


def parse_record_file(filename: str, text: str) -> ReviewRecord:
    """
    Parse and validate one record file.

    Args:
        filename: File name (used for the id and for diagnostics)
        text: File content

    Returns:
        Validated ReviewRecord with id derived from filename

    Raises:
        RecordParseError: If the text is not valid YAML
        RecordShapeError: If the document is not a valid review mapping
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise RecordParseError(filename, f"invalid YAML ({e})")

    if not isinstance(data, dict):
        raise RecordShapeError(
            filename, f"expected a mapping at top level, got {type(data).__name__}"
        )

    return record_from_mapping(record_id_from_filename(filename), data, filename)


# Design Rationale and Trade-offs:
#
# 1. Why yaml.safe_load?
#    - Record files are hand-edited; no arbitrary object construction
#
# 2. Why join paragraph lists instead of storing them?
#    - One canonical body shape; consumers never branch on it
#    - Trade-off: Paragraph boundaries become blank lines in the text
#
# 3. Why raise instead of returning None?
#    - The aggregator decides the policy (skip and warn) and counts skips
