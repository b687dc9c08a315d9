"""
Catalogue Controller.

Owns the application state for one session and coordinates the run-time
components.
"""

import logging
import os
from typing import List, Optional, Union

from src.models.query import QueryState, SortKey
from src.models.review import MediaType, ReviewRecord
from src.registry.catalogue import Catalogue
from src.runtime.authoring import ReviewDraft, create_record, update_record, write_record_file
from src.runtime.loader import ArtifactLoader, LoadResult, LoadStatus
from src.runtime.navigation import LocationHistory, NavigationSynchronizer, View
from src.runtime.query import run_query
import config.settings as settings

logger = logging.getLogger(__name__)


class CatalogueController:
    """
    Top-level application state.

    Holds:
    1. Load status and the loaded Catalogue (loaded once)
    2. Query state (filter / search / sort)
    3. Navigation state, synchronized with the location history

    Components receive what they need from here explicitly.
    """

    def __init__(
        self,
        loader: ArtifactLoader,
        history: Optional[LocationHistory] = None,
        download_dir: str = str(settings.DOWNLOAD_DIR),
        content_dir: str = str(settings.CONTENT_DIR),
    ):
        """
        Initialize controller.

        Args:
            loader: Loader for the aggregate artifact
            history: Location history (default: a fresh one at "/")
            download_dir: Where authoring output is written
            content_dir: Record Store directory (used in author instructions)
        """
        self.loader = loader
        self.download_dir = download_dir
        self.content_dir = content_dir

        self.status = LoadStatus.LOADING
        self.catalogue = Catalogue()
        self.load_error: Optional[str] = None
        self._load_result: Optional[LoadResult] = None

        self.query = QueryState()
        self.history = history or LocationHistory()
        self.navigation = NavigationSynchronizer(self.history)

    # Loading

    def start(self) -> LoadResult:
        """
        Load the artifact. Runs once per session; later calls return the
        first result.
        """
        if self._load_result is not None:
            logger.debug("Catalogue already loaded; ignoring repeated start()")
            return self._load_result

        result = self.loader.load()
        self._load_result = result
        self.status = result.status
        self.catalogue = result.catalogue
        self.load_error = result.error

        if result.status == LoadStatus.UNAVAILABLE:
            logger.warning(f"Catalogue unavailable: {result.error}")
        return result

    @property
    def is_ready(self) -> bool:
        return self.status == LoadStatus.READY

    def _require_ready(self) -> None:
        if not self.is_ready:
            raise RuntimeError(f"Catalogue is not loaded (status: {self.status.value})")

    # Query

    def visible_reviews(self) -> List[ReviewRecord]:
        """Reviews to render in the list view; empty until loaded."""
        if not self.is_ready:
            return []
        return run_query(self.catalogue, self.query)

    def set_filter(self, filter_type: Union[MediaType, str]) -> None:
        self.query = QueryState(filter_type, self.query.search_term, self.query.sort_key, self.query.sort_direction)

    def set_search(self, term: str) -> None:
        self.query = QueryState(self.query.filter_type, term, self.query.sort_key, self.query.sort_direction)

    def set_sort(self, sort_key: Union[SortKey, str]) -> None:
        self.query = QueryState(self.query.filter_type, self.query.search_term, sort_key, self.query.sort_direction)

    def toggle_sort_direction(self) -> None:
        self.query = self.query.toggled_direction()

    def empty_state_message(self) -> str:
        if self.query.is_filtered:
            return "No reviews found. Try adjusting your filters or search term."
        return "No reviews found. Create your first review YAML to get started!"

    # Navigation

    @property
    def view(self) -> View:
        return self.navigation.view

    def active_review(self) -> Optional[ReviewRecord]:
        """Active review, or None (new record, list view, or not found)."""
        return self.navigation.resolve(self.catalogue)

    def open_review(self, review_id: str) -> None:
        self._require_ready()
        self.navigation.open_item(review_id)

    def edit_review(self, review_id: str) -> None:
        self._require_ready()
        self.navigation.request_edit(review_id)

    def new_review(self) -> None:
        self._require_ready()
        self.navigation.request_edit(None)

    def cancel_edit(self) -> None:
        self.navigation.cancel_edit(self.catalogue)

    def back(self) -> None:
        self.navigation.back()

    # Authoring

    def save_review(self, draft: ReviewDraft) -> str:
        """
        Produce the downloadable record for the review being edited.

        Updates when editing an existing review, creates otherwise. The
        loaded catalogue is not changed; the author places the file in the
        Record Store and rebuilds.

        Returns:
            Path of the written YAML file

        Raises:
            RuntimeError: If not in the edit view
            ValueError: If the edited review no longer exists or the draft is invalid
        """
        self._require_ready()
        if self.navigation.view != View.EDIT:
            raise RuntimeError("Reviews can only be saved from the edit view")

        review_id = self.navigation.active_id
        if review_id is not None:
            existing = self.catalogue.get(review_id)
            if existing is None:
                raise ValueError(f"Cannot update review '{review_id}': not in the catalogue")
            record = update_record(existing, draft)
        else:
            record = create_record(draft)

        path = write_record_file(record, self.download_dir)
        self.navigation.save()

        logger.info(
            f"Review file written to {path}. Move it to {self.content_dir} and rebuild the site."
        )
        return path

    def delete_instructions(self, review_id: str) -> str:
        """Deletion is out of band: tell the author which file to remove."""
        filename = os.path.join(self.content_dir, f"{review_id}.yaml")
        return (
            f"To delete a review, remove {filename} (or its .yml twin) "
            f"from the content directory and rebuild the site."
        )
