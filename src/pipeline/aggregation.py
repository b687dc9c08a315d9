"""
Review Aggregator.

Collects every record file in the Record Store into one ordered aggregate
artifact (public/reviews.json).
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from src.models.review import ReviewRecord
from src.pipeline.ingestion import RecordError, parse_record_file
from src.utils.storage import ArtifactStore, RecordStore
import config.settings as settings

logger = logging.getLogger(__name__)


@dataclass
class AggregationResult:
    """Outcome of aggregating a set of record files."""
    records: List[ReviewRecord] = field(default_factory=list)  # Canonical order
    skipped: List[str] = field(default_factory=list)  # File names
    collisions: List[Tuple[str, str]] = field(default_factory=list)  # (overwritten, winner)


@dataclass
class BuildResult:
    """Outcome of one build run."""
    output_path: str
    record_count: int
    skipped: List[str] = field(default_factory=list)
    collisions: List[Tuple[str, str]] = field(default_factory=list)


def sort_records(records: Iterable[ReviewRecord]) -> List[ReviewRecord]:
    """
    Canonical artifact order: newest reviewDate first.

    Stable, so records with equal dates keep scan order.
    """
    return sorted(records, key=lambda r: r.review_timestamp, reverse=True)


def aggregate_records(entries: Iterable[Tuple[str, Optional[str]]]) -> AggregationResult:
    """
    Parse, validate, de-duplicate and sort record files.

    Pure function over (file name, file text) pairs in scan order; no file
    system access.

    Args:
        entries: (file name, file text) pairs; text is None for a file
            that could not be read

    Returns:
        AggregationResult with records in canonical order
    """
    by_id: Dict[str, ReviewRecord] = {}
    source_of: Dict[str, str] = {}
    result = AggregationResult()

    for filename, text in entries:
        if text is None:
            logger.warning(f"Skipping {filename}: file could not be read")
            result.skipped.append(filename)
            continue

        try:
            record = parse_record_file(filename, text)
        except RecordError as e:
            logger.warning(f"Skipping {filename}: {e.reason}")
            result.skipped.append(filename)
            continue

        if record.id in by_id:
            # Later file in scan order wins; dict keeps the first insertion slot
            previous = source_of[record.id]
            logger.warning(
                f"Duplicate id '{record.id}': {filename} overwrites {previous}"
            )
            result.collisions.append((previous, filename))
            del by_id[record.id]

        by_id[record.id] = record
        source_of[record.id] = filename
        logger.debug(f"Parsed {filename} as '{record.id}'")

    result.records = sort_records(by_id.values())
    return result


def serialize_artifact(records: List[ReviewRecord]) -> str:
    """
    Serialize records to the artifact document.

    Same records in the same order always give the same bytes.
    """
    payload = [record.to_dict() for record in records]
    return json.dumps(payload, indent=settings.ARTIFACT_INDENT, ensure_ascii=False) + "\n"


class Aggregator:
    """
    Builds the aggregate artifact from the Record Store.

    One-shot batch step; not designed for concurrent runs against the same
    output.
    """

    def __init__(self, record_store: RecordStore, artifact_store: ArtifactStore):
        """
        Initialize aggregator.

        Args:
            record_store: Source record files
            artifact_store: Destination of the aggregate artifact
        """
        self.record_store = record_store
        self.artifact_store = artifact_store

    @classmethod
    def from_paths(cls, content_dir: str, artifact_path: str) -> "Aggregator":
        return cls(RecordStore(content_dir), ArtifactStore(artifact_path))

    def run(self) -> BuildResult:
        """
        Aggregate all record files and replace the artifact.

        Malformed files are skipped with a warning; an empty store yields
        an empty artifact. Neither is an error.

        Returns:
            BuildResult summarizing the run
        """
        logger.info(f"Building reviews from {self.record_store.content_dir}")

        filenames = self.record_store.list_record_files()
        if not filenames:
            logger.warning(f"No YAML files found in {self.record_store.content_dir}")

        result = aggregate_records(self.record_store.iter_records())

        self.artifact_store.write(serialize_artifact(result.records))

        logger.info(
            f"Built {len(result.records)} reviews to {self.artifact_store.artifact_path} "
            f"({len(result.skipped)} skipped, {len(result.collisions)} duplicate ids)"
        )

        return BuildResult(
            output_path=self.artifact_store.artifact_path,
            record_count=len(result.records),
            skipped=result.skipped,
            collisions=result.collisions,
        )


# Design Rationale and Trade-offs:
#
# 1. Why skip bad files instead of failing the build?
#    - One typo in one review shouldn't take the whole site down
#    - Trade-off: A skipped review silently disappears from the site,
#      mitigated by the warning and the skipped count
#
# 2. Why warn-and-overwrite on duplicate ids?
#    - a.yaml and a.yml both map to id "a"; the later file in sorted order
#      (a.yml) wins, matching the original last-write behavior
#    - Trade-off: Still lossy, but now visible in the build output
#
# 3. Why delete before re-inserting a duplicate?
#    - Keeps the winner at its own scan position, so tie order among equal
#      reviewDates follows the file that actually supplied the record
#
# 4. Why rebuild the whole artifact every run?
#    - Review counts are small; no delta bookkeeping to get wrong
