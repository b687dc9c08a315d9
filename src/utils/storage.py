"""
Storage utility.

File I/O for the Record Store (one YAML file per review) and the aggregate
artifact. Everything else in the pipeline works on strings and records.
"""

import os
import logging
from typing import List, Optional, Tuple

import config.settings as settings

logger = logging.getLogger(__name__)


class RecordStore:
    """
    A directory of record files.

    Handles:
    - Listing record files (.yaml / .yml, sorted by file name)
    - Reading record text
    - Writing single-record documents (authoring output)
    """

    def __init__(self, content_dir: str, extensions: Tuple[str, ...] = settings.RECORD_EXTENSIONS):
        """
        Initialize record store.

        A missing directory is created empty: an absent store means
        "nothing to aggregate yet", not an error.

        Args:
            content_dir: Directory holding record files
            extensions: Recognized record file suffixes
        """
        self.content_dir = str(content_dir)
        self.extensions = tuple(extensions)

        if not os.path.isdir(self.content_dir):
            logger.info(f"Creating content directory at {self.content_dir}")
            os.makedirs(self.content_dir, exist_ok=True)

    def list_record_files(self) -> List[str]:
        """
        List record file names in scan order.

        Returns:
            Sorted file names with a recognized extension; other files are ignored
        """
        names = []
        for filename in os.listdir(self.content_dir):
            path = os.path.join(self.content_dir, filename)
            if not os.path.isfile(path):
                continue
            if filename.endswith(self.extensions):
                names.append(filename)
            else:
                logger.debug(f"Ignoring non-record file: {filename}")
        return sorted(names)

    def read_record(self, filename: str) -> str:
        """Read one record file as UTF-8 text."""
        filepath = os.path.join(self.content_dir, filename)
        with open(filepath, "r", encoding="utf-8") as f:
            return f.read()

    def iter_records(self):
        """
        Yield (file name, text) pairs in scan order.

        Unreadable files are logged and yielded with text None so the
        caller can count them as skipped.
        """
        for filename in self.list_record_files():
            try:
                yield filename, self.read_record(filename)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Unreadable record file {filename}: {e}")
                yield filename, None

    def write_record(self, filename: str, text: str) -> str:
        """
        Write a single-record document.

        Returns:
            Path of the written file
        """
        filepath = os.path.join(self.content_dir, filename)
        try:
            with open(filepath, "w", encoding="utf-8") as f:
                f.write(text)
            logger.info(f"Wrote record file {filepath}")
        except OSError as e:
            logger.error(f"Failed to write record file {filepath}: {e}")
            raise
        return filepath


class ArtifactStore:
    """
    The aggregate artifact on disk (public/reviews.json).
    """

    def __init__(self, artifact_path: str):
        """
        Initialize artifact store.

        Args:
            artifact_path: Path of the aggregate artifact file
        """
        self.artifact_path = str(artifact_path)

    def write(self, text: str) -> None:
        """
        Replace the artifact with new content.

        Written to a temporary file first so readers never see a partial
        artifact.
        """
        output_dir = os.path.dirname(self.artifact_path)
        if output_dir and not os.path.isdir(output_dir):
            logger.info(f"Creating output directory at {output_dir}")
            os.makedirs(output_dir, exist_ok=True)

        tmp_path = f"{self.artifact_path}.tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8", newline="\n") as f:
                f.write(text)
            os.replace(tmp_path, self.artifact_path)
            logger.debug(f"Wrote artifact to {self.artifact_path}")
        except OSError as e:
            logger.error(f"Failed to write artifact {self.artifact_path}: {e}")
            raise

    def read(self) -> Optional[str]:
        """
        Read the artifact text.

        Returns:
            Artifact text, or None if the file doesn't exist

        Raises:
            OSError: If the file exists but cannot be read
        """
        if not os.path.exists(self.artifact_path):
            logger.warning(f"No artifact found at {self.artifact_path}")
            return None

        with open(self.artifact_path, "r", encoding="utf-8") as f:
            return f.read()


# Design Rationale and Trade-offs:
#
# 1. Why keep all file I/O here?
#    - aggregation.py can be tested with in-memory (name, text) pairs
#    - Trade-off: One more indirection for a handful of file reads
#
# 2. Why return None for a missing artifact instead of raising?
#    - A fresh catalogue with no build yet is a valid, empty state
#    - Trade-off: Caller must check for None
#
# 3. Why sort file names?
#    - os.listdir order is filesystem dependent; builds must be repeatable
