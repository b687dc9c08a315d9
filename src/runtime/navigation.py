"""
Navigation / State Synchronizer.

Keeps the view state (list / detail / edit) and the active review id in
step with a shareable location string such as "/?review=dune".
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from src.models.review import ReviewRecord
from src.registry.catalogue import Catalogue
import config.settings as settings

logger = logging.getLogger(__name__)


class View(Enum):
    LIST = "list"
    DETAIL = "detail"
    EDIT = "edit"


@dataclass
class NavigationState:
    view: View = View.LIST
    active_id: Optional[str] = None  # None in list view and for a new record


def parse_location(location: str, param: str = settings.LOCATION_PARAM) -> Optional[str]:
    """Review id named by the location's query parameter, if any."""
    query = urlsplit(location).query
    for key, value in parse_qsl(query, keep_blank_values=True):
        if key == param:
            return value or None
    return None


def with_reference(location: str, review_id: Optional[str], param: str = settings.LOCATION_PARAM) -> str:
    """
    Location with the review reference set to review_id, or removed when
    review_id is None. Other query parameters are kept.
    """
    parts = urlsplit(location)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != param]
    if review_id is not None:
        query.append((param, review_id))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


class LocationHistory:
    """
    Browser-style history of location strings.

    push() and replace() are programmatic and do not notify listeners;
    back() and forward() are external navigation and do, like popstate.
    """

    def __init__(self, initial: str = "/"):
        self._entries: List[str] = [initial]
        self._index = 0
        self._listeners: List[Callable[[str], None]] = []

    @property
    def current(self) -> str:
        return self._entries[self._index]

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, location: str) -> None:
        """Add a new entry, dropping any forward entries."""
        del self._entries[self._index + 1:]
        self._entries.append(location)
        self._index += 1

    def replace(self, location: str) -> None:
        """Overwrite the current entry without adding one."""
        self._entries[self._index] = location

    def back(self) -> bool:
        if self._index == 0:
            return False
        self._index -= 1
        self._notify()
        return True

    def forward(self) -> bool:
        if self._index >= len(self._entries) - 1:
            return False
        self._index += 1
        self._notify()
        return True

    def subscribe(self, listener: Callable[[str], None]) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.current)


class NavigationSynchronizer:
    """
    State machine over list / detail / edit, mirrored into a LocationHistory.

    The location carries a review reference if and only if the view is
    detail. External navigation re-derives the state from the location
    exactly as on initial load.
    """

    def __init__(self, history: LocationHistory, param: str = settings.LOCATION_PARAM):
        """
        Initialize synchronizer from the history's current location.

        Args:
            history: Location history to read and write
            param: Query parameter naming the active review
        """
        self.history = history
        self.param = param
        self.state = self._derive(history.current)
        history.subscribe(self.on_location_change)

        logger.debug(f"Initial navigation state: {self.state.view.value} ({self.state.active_id})")

    def _derive(self, location: str) -> NavigationState:
        review_id = parse_location(location, self.param)
        if review_id:
            return NavigationState(view=View.DETAIL, active_id=review_id)
        return NavigationState(view=View.LIST)

    def _location_for(self, review_id: Optional[str]) -> str:
        return with_reference(self.history.current, review_id, self.param)

    @property
    def view(self) -> View:
        return self.state.view

    @property
    def active_id(self) -> Optional[str]:
        return self.state.active_id

    def on_location_change(self, location: str) -> None:
        """Browser back/forward: recompute state from the new location."""
        self.state = self._derive(location)
        logger.debug(f"Location changed to {location!r}: {self.state.view.value}")

    def open_item(self, review_id: str) -> None:
        """Show one review; creates a new history entry."""
        self.state = NavigationState(view=View.DETAIL, active_id=review_id)
        self.history.push(self._location_for(review_id))

    def request_edit(self, review_id: Optional[str] = None) -> None:
        """
        Enter the edit view for review_id, or for a new record when None.

        No history entry is added; the reference is stripped from the
        current entry since edit is not shareable.
        """
        self.state = NavigationState(view=View.EDIT, active_id=review_id)
        self.history.replace(self._location_for(None))

    def cancel_edit(self, catalogue: Catalogue) -> None:
        """Leave edit: back to detail if the edited review exists, else list."""
        if self.state.active_id is not None and catalogue.get(self.state.active_id) is not None:
            self.state = NavigationState(view=View.DETAIL, active_id=self.state.active_id)
            self.history.replace(self._location_for(self.state.active_id))
        else:
            self.state = NavigationState(view=View.LIST)
            self.history.replace(self._location_for(None))

    def save(self) -> None:
        """After saving (create or update) always return to the list."""
        self.state = NavigationState(view=View.LIST)
        self.history.push(self._location_for(None))

    def back(self) -> None:
        """Detail back to list."""
        self.state = NavigationState(view=View.LIST)
        self.history.push(self._location_for(None))

    def resolve(self, catalogue: Catalogue) -> Optional[ReviewRecord]:
        """
        The active review, or None.

        None in detail view means "not found" (e.g. a shared link to a
        deleted review), which is a displayable state.
        """
        return catalogue.get(self.state.active_id)

    def in_sync(self) -> bool:
        """True when the location's reference agrees with the view."""
        reference = parse_location(self.history.current, self.param)
        if self.state.view == View.DETAIL:
            return reference is not None and reference == self.state.active_id
        return reference is None
