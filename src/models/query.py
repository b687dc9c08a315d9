"""
Query state model.

The filter, search and sort parameters that decide which reviews are shown
and in what order. Transient: created with defaults at startup and never
persisted.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from src.models.review import MediaType

ALL = "all"  # filter_type value that disables the type filter


class SortKey(Enum):
    REVIEW_DATE = "reviewDate"
    RELEASE_YEAR = "releaseYear"
    RATING = "rating"


class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"


SORT_LABELS = {
    SortKey.REVIEW_DATE: "Review Date",
    SortKey.RATING: "Rating",
    SortKey.RELEASE_YEAR: "Release Year",
}


@dataclass
class QueryState:
    """
    Current filter/search/sort parameters.

    String values are accepted for every field and coerced to their enum,
    so CLI arguments can be passed straight through.
    """
    filter_type: Union[MediaType, str] = ALL
    search_term: str = ""
    sort_key: Union[SortKey, str] = SortKey.REVIEW_DATE
    sort_direction: Union[SortDirection, str] = SortDirection.DESC

    def __post_init__(self):
        if isinstance(self.filter_type, str) and self.filter_type.lower() == ALL:
            self.filter_type = ALL
        else:
            self.filter_type = MediaType.parse(self.filter_type)

        if self.search_term is None:
            self.search_term = ""

        self.sort_key = SortKey(self.sort_key)
        self.sort_direction = SortDirection(self.sort_direction)

    @property
    def is_filtered(self) -> bool:
        """True when a type filter or search term narrows the list."""
        return self.filter_type != ALL or bool(self.search_term)

    def toggled_direction(self) -> "QueryState":
        """Copy of this state with the sort direction flipped."""
        flipped = SortDirection.ASC if self.sort_direction == SortDirection.DESC else SortDirection.DESC
        return QueryState(
            filter_type=self.filter_type,
            search_term=self.search_term,
            sort_key=self.sort_key,
            sort_direction=flipped,
        )
