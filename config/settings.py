"""
Configuration settings for Little Reviews.

Centralized configuration for the build pipeline and the run-time catalogue.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
CONTENT_DIR = Path(os.getenv("REVIEWS_CONTENT_DIR", PROJECT_ROOT / "content" / "reviews"))
PUBLIC_DIR = Path(os.getenv("REVIEWS_PUBLIC_DIR", PROJECT_ROOT / "public"))
OUTPUT_ROOT = PROJECT_ROOT / "output"
DOWNLOAD_DIR = Path(os.getenv("REVIEWS_DOWNLOAD_DIR", PROJECT_ROOT / "downloads"))

# Aggregate artifact
ARTIFACT_FILENAME = "reviews.json"
ARTIFACT_PATH = PUBLIC_DIR / ARTIFACT_FILENAME
ARTIFACT_INDENT = 2

# Record Store
RECORD_EXTENSIONS = (".yaml", ".yml")  # Same format, two spellings
PARAGRAPH_SEPARATOR = "\n\n"  # Joins list-shaped review bodies

# Record validation
MIN_RELEASE_YEAR = 1800
RELEASE_YEAR_LOOKAHEAD = 5  # Years past the current one
MAX_RATING = 5

# Run-time
LOCATION_PARAM = "review"  # ?review=<id>
LOADER_TIMEOUT_SECONDS = 10
EXCERPT_WORD_LIMIT = 80

# Logging
LOG_LEVEL = os.getenv("REVIEWS_LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "little_reviews.log"


# Design Rationale and Trade-offs:
#
# 1. Why environment variables for the directories?
#    - CI builds and local previews point at different content folders
#    - Trade-off: Values are read once at import time
#
# 2. Why accept both .yaml and .yml?
#    - Editors and download dialogs produce either spelling
#    - Trade-off: a.yaml and a.yml resolve to the same id (see aggregation.py)
