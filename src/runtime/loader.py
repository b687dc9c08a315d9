"""
Artifact Loader.

Fetches the aggregate artifact once at startup, from a local file or over
HTTP, and turns it into the session's Catalogue.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import requests

from src.models.review import ReviewRecord
from src.registry.catalogue import Catalogue
from src.utils.storage import ArtifactStore
import config.settings as settings

logger = logging.getLogger(__name__)


class LoadStatus(Enum):
    LOADING = "loading"  # Fetch not finished yet
    READY = "ready"  # Loaded; possibly zero reviews
    UNAVAILABLE = "unavailable"  # Fetch or parse failed


@dataclass
class LoadResult:
    status: LoadStatus
    catalogue: Catalogue = field(default_factory=Catalogue)
    error: Optional[str] = None
    skipped: int = 0  # Artifact entries that failed validation

    @property
    def is_ready(self) -> bool:
        return self.status == LoadStatus.READY


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


class ArtifactLoader:
    """
    Loads the aggregate artifact.

    An absent or empty artifact is a valid empty catalogue. A failed read
    is reported as UNAVAILABLE, never as an empty catalogue.
    """

    def __init__(self, source: str, timeout_seconds: int = settings.LOADER_TIMEOUT_SECONDS):
        """
        Initialize loader.

        Args:
            source: Artifact path or http(s) URL
            timeout_seconds: HTTP request timeout
        """
        self.source = str(source)
        self.timeout_seconds = timeout_seconds

    def load(self) -> LoadResult:
        """
        Fetch and parse the artifact.

        Returns:
            LoadResult with status READY or UNAVAILABLE
        """
        logger.info(f"Loading reviews from {self.source}")

        try:
            text = self._fetch()
        except (OSError, UnicodeDecodeError, requests.RequestException) as e:
            logger.error(f"Failed to read artifact {self.source}: {e}")
            return LoadResult(status=LoadStatus.UNAVAILABLE, error=str(e))

        if text is None or not text.strip():
            logger.info("Artifact absent or empty; starting with an empty catalogue")
            return LoadResult(status=LoadStatus.READY)

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse artifact JSON: {e}")
            return LoadResult(status=LoadStatus.UNAVAILABLE, error=f"Invalid JSON: {e}")

        if not isinstance(data, list):
            logger.error(f"Artifact must be a JSON array, got {type(data).__name__}")
            return LoadResult(
                status=LoadStatus.UNAVAILABLE,
                error=f"Expected a JSON array, got {type(data).__name__}",
            )

        reviews, skipped = self._parse_entries(data)
        logger.info(f"Loaded {len(reviews)} reviews")
        return LoadResult(status=LoadStatus.READY, catalogue=Catalogue(reviews), skipped=skipped)

    def _fetch(self) -> Optional[str]:
        """Artifact text, or None if there is no artifact."""
        if is_url(self.source):
            response = requests.get(self.source, timeout=self.timeout_seconds)
            if response.status_code == 404:
                logger.warning(f"No artifact at {self.source} (HTTP 404)")
                return None
            response.raise_for_status()
            return response.text

        return ArtifactStore(self.source).read()

    def _parse_entries(self, data: list):
        reviews: List[ReviewRecord] = []
        skipped = 0
        for index, item in enumerate(data):
            try:
                if not isinstance(item, dict):
                    raise ValueError(f"expected an object, got {type(item).__name__}")
                reviews.append(ReviewRecord.from_dict(item))
            except ValueError as e:
                logger.warning(f"Skipping invalid artifact entry {index}: {e}")
                skipped += 1
        return reviews, skipped


# Design Rationale and Trade-offs:
#
# 1. Why treat HTTP 404 like a missing file?
#    - A site deployed before its first build has no reviews.json yet
#    - Trade-off: A wrong URL also looks like an empty catalogue; the
#      warning names the URL
#
# 2. Why re-validate entries the aggregator already validated?
#    - The artifact may be hand-edited or produced by an older build
#    - Trade-off: Validation runs twice per record, negligible at this size
