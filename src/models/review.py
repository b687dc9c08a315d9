"""
Review data model.

Represents one reviewed work as it appears in a record file and in the
aggregate artifact.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Dict, NamedTuple, Optional, Union

import config.settings as settings

_FRACTION_RE = re.compile(r"(\d{2}:\d{2}:\d{2})\.(\d+)")


class MediaType(Enum):
    """Closed set of reviewable media. Values are the serialized form."""
    MOVIE = "Movie"
    TV_SHOW = "TV Show"
    BOOK = "Book"
    MUSIC = "Music"

    @classmethod
    def parse(cls, value: Union[str, "MediaType"]) -> "MediaType":
        """
        Resolve a media type from its value ("TV Show") or a loose spelling
        of its name ("TV", "TVShow", "tv_show").

        Raises:
            ValueError: If the value names no media type
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Invalid media type: {value!r}")

        key = value.replace(" ", "").replace("_", "").lower()
        media_type = _MEDIA_TYPE_ALIASES.get(key)
        if media_type is None:
            allowed = ", ".join(m.value for m in cls)
            raise ValueError(f"Invalid media type: {value!r}. Must be one of: {allowed}")
        return media_type


_MEDIA_TYPE_ALIASES = {
    "movie": MediaType.MOVIE,
    "tv": MediaType.TV_SHOW,
    "tvshow": MediaType.TV_SHOW,
    "book": MediaType.BOOK,
    "music": MediaType.MUSIC,
}


class MediaTypeInfo(NamedTuple):
    label: str
    icon: str
    author_label: Optional[str]  # None when the type has no author/artist


MEDIA_TYPE_INFO: Dict[MediaType, MediaTypeInfo] = {
    MediaType.MOVIE: MediaTypeInfo("Movie", "film", None),
    MediaType.TV_SHOW: MediaTypeInfo("TV Show", "tv", None),
    MediaType.BOOK: MediaTypeInfo("Book", "book", "Author"),
    MediaType.MUSIC: MediaTypeInfo("Music", "music", "Artist"),
}

# Every media type needs an entry; fail at import rather than at render time.
_unmapped = set(MediaType) - set(MEDIA_TYPE_INFO)
if _unmapped:
    raise RuntimeError(f"MEDIA_TYPE_INFO is missing entries for: {sorted(m.name for m in _unmapped)}")


def media_type_info(media_type: MediaType) -> MediaTypeInfo:
    """Display label, icon name and author label for a media type."""
    return MEDIA_TYPE_INFO[media_type]


def needs_author(media_type: MediaType) -> bool:
    """Books and music credit an author or artist; screen media does not."""
    return MEDIA_TYPE_INFO[media_type].author_label is not None


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp into an aware datetime.

    Accepts a trailing "Z", bare dates and any number of fractional-second
    digits (truncated to microseconds). Naive values are taken as UTC.

    Raises:
        ValueError: If the value is not an ISO 8601 string
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid timestamp: {value!r}")

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # fromisoformat before 3.11 only takes 3 or 6 fraction digits
    text = _FRACTION_RE.sub(lambda m: f"{m.group(1)}.{m.group(2)[:6].ljust(6, '0')}", text, count=1)

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValueError(f"Invalid ISO 8601 timestamp: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(moment: datetime) -> str:
    """Format as UTC ISO 8601 with millisecond precision and a Z suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def timestamp_to_string(value) -> str:
    """
    Normalize a YAML timestamp value to an ISO 8601 string.

    YAML loaders turn unquoted timestamps into date/datetime objects.
    Strings pass through unchanged.
    """
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, date):
        return value.isoformat()
    return value


def format_display_date(value: str) -> str:
    """Render a timestamp as e.g. "Jan 1, 2024"."""
    moment = parse_timestamp(value)
    return f"{moment.strftime('%b')} {moment.day}, {moment.year}"


def normalize_rating(value) -> Union[int, float]:
    """
    Validate a rating and collapse whole-number floats to int.

    Raises:
        ValueError: If the rating is not a half step in [0, MAX_RATING]
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Invalid rating: {value!r}. Must be a number")
    if not (0 <= value <= settings.MAX_RATING):
        raise ValueError(f"Invalid rating: {value}. Must be 0-{settings.MAX_RATING}")
    if (value * 2) != int(value * 2):
        raise ValueError(f"Invalid rating: {value}. Must be a whole or half star")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


@dataclass
class ReviewRecord:
    """
    One reviewed work.

    The id is derived from the record's file name, never from its content,
    so editing a record keeps its identity.
    """
    id: str
    title: str
    media_type: MediaType
    rating: Union[int, float]  # 0-5 in half steps
    text: str
    release_year: int
    review_date: str  # ISO 8601, set once at creation
    author: Optional[str] = None  # Author (Book) or Artist (Music)
    updated_date: Optional[str] = None  # ISO 8601, absent if never edited

    def __post_init__(self):
        if not isinstance(self.id, str) or not self.id:
            raise ValueError(f"Invalid id: {self.id!r}")

        if not isinstance(self.title, str) or not self.title.strip():
            raise ValueError("Title must be a non-empty string")

        self.media_type = MediaType.parse(self.media_type)
        self.rating = normalize_rating(self.rating)

        if not isinstance(self.text, str):
            raise ValueError(f"Review text must be a string, got {type(self.text).__name__}")

        if self.author is not None:
            if not isinstance(self.author, str):
                raise ValueError(f"Invalid author: {self.author!r}")
            self.author = self.author.strip() or None

        # Validate release year
        latest_year = datetime.now(timezone.utc).year + settings.RELEASE_YEAR_LOOKAHEAD
        if isinstance(self.release_year, bool) or not isinstance(self.release_year, int):
            raise ValueError(f"Invalid release year: {self.release_year!r}")
        if not (settings.MIN_RELEASE_YEAR <= self.release_year <= latest_year):
            raise ValueError(
                f"Invalid release year: {self.release_year}. "
                f"Must be {settings.MIN_RELEASE_YEAR}-{latest_year}"
            )

        # Validate dates
        reviewed = parse_timestamp(self.review_date)
        if self.updated_date is not None:
            updated = parse_timestamp(self.updated_date)
            if updated < reviewed:
                raise ValueError(
                    f"updatedDate {self.updated_date} is earlier than reviewDate {self.review_date}"
                )

    @property
    def review_timestamp(self) -> datetime:
        return parse_timestamp(self.review_date)

    def excerpt(self, word_limit: int = settings.EXCERPT_WORD_LIMIT) -> str:
        """First word_limit words of the review, with "..." when truncated."""
        words = self.text.split()
        if len(words) <= word_limit:
            return self.text
        return " ".join(words[:word_limit]) + "..."

    @classmethod
    def from_dict(cls, data: dict) -> "ReviewRecord":
        """Create ReviewRecord from an artifact entry (camelCase keys)."""
        try:
            return cls(
                id=data["id"],
                title=data["title"],
                media_type=data["type"],
                rating=data["rating"],
                text=data["text"],
                release_year=data["releaseYear"],
                review_date=data["reviewDate"],
                author=data.get("author"),
                updated_date=data.get("updatedDate"),
            )
        except KeyError as e:
            raise ValueError(f"Missing required field: {e.args[0]}")

    def to_source_dict(self) -> dict:
        """Convert to the record-file mapping (no id, which lives in the file name)."""
        data = {
            "title": self.title,
            "type": self.media_type.value,
        }
        if self.author is not None:
            data["author"] = self.author
        data["rating"] = self.rating
        data["text"] = self.text
        data["releaseYear"] = self.release_year
        data["reviewDate"] = self.review_date
        if self.updated_date is not None:
            data["updatedDate"] = self.updated_date
        return data

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable artifact entry."""
        data = {"id": self.id}
        data.update(self.to_source_dict())
        return data


# Design Rationale and Trade-offs:
#
# 1. Why keep dates as ISO strings on the record?
#    - The artifact is regenerated byte-for-byte from the same strings
#    - Trade-off: Sorting parses on demand (review_timestamp)
#
# 2. Why collapse 4.0 to 4?
#    - Read-only and editable views render the same number
#    - Trade-off: YAML written back may differ from a hand-typed 4.0
#
# 3. Why is a missing author for books and music not rejected?
#    - Older records predate the author field
#    - Trade-off: Ingestion logs it instead (see ingestion.py)
