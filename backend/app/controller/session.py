"""Selection and interaction controller.

One TripSession exists per client session. It owns every piece of transient
interaction state (selection, active day, drag gesture, category filter,
pagination, generation status) and routes user gestures either to the
ItineraryStore, which is the only writer of canonical state, or to the pure
derivation functions for rendering.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum

from backend.app.derivation import views
from backend.app.errors import GenerationError, GenerationInProgressError, InvalidItineraryError
from backend.app.llm.client import GenerationProvider, generate_itinerary
from backend.app.models.common import ALL_CATEGORIES, CategoryFilter, ViewState
from backend.app.models.itinerary import Itinerary
from backend.app.models.preferences import TripPreferences
from backend.app.models.saved import SavedTrip
from backend.app.models.views import TripView
from backend.app.persistence.writer import PersistenceWriter
from backend.app.store.itinerary_store import ItineraryStore

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 8
DEFAULT_ACTIVE_DAY = 1
GENERIC_GENERATION_ERROR = "Failed to generate trip. Please try again."


class DragPhase(str, Enum):
    """Two-phase drag gesture state."""

    idle = "idle"
    dragging = "dragging"


class TripSession:
    """Transient interaction state plus gesture routing for one user session."""

    def __init__(
        self,
        store: ItineraryStore,
        provider: GenerationProvider,
        *,
        writer: PersistenceWriter | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._store = store
        self._provider = provider
        self._writer = writer
        self._page_size = page_size

        self.view_state = ViewState.result if store.snapshot() is not None else ViewState.landing
        self.error: str | None = None
        self.is_generating = False

        self.selected_place_id: str | None = None
        self.active_day = views.first_day_num(store.snapshot(), DEFAULT_ACTIVE_DAY)

        self.dragged_place_id: str | None = None
        self.drag_target_day: int | None = None

        self.category_filter: CategoryFilter = ALL_CATEGORIES
        self.recommendation_limit = page_size

        store.set_change_hook(self._on_store_change)

    # --- Read-only access -------------------------------------------------

    @property
    def itinerary(self) -> Itinerary | None:
        return self._store.snapshot()

    @property
    def drag_phase(self) -> DragPhase:
        return DragPhase.dragging if self.dragged_place_id is not None else DragPhase.idle

    def view(self) -> TripView:
        """Derive everything presentation needs from the current snapshot."""
        return views.build_trip_view(
            self._store.snapshot(),
            view_state=self.view_state,
            active_day=self.active_day,
            category_filter=self.category_filter,
            recommendation_limit=self.recommendation_limit,
            selected_place_id=self.selected_place_id,
            dragged_place_id=self.dragged_place_id,
            drag_over_day=self.drag_target_day,
            error=self.error,
            is_generating=self.is_generating,
        )

    # --- Selection --------------------------------------------------------

    def select(self, place_id: str | None) -> None:
        """Select a place; a scheduled place also switches the active day to its day."""
        self.selected_place_id = place_id
        place = views.find_place(self._store.snapshot(), place_id)
        if place is not None and place.day_index > 0:
            self.active_day = place.day_index
        self._persist()

    def set_active_day(self, day_num: int) -> None:
        self.active_day = day_num
        self._persist()

    # --- Drag and drop ----------------------------------------------------

    def begin_drag(self, place_id: str) -> None:
        self.dragged_place_id = place_id

    def end_drag(self) -> None:
        """Finish the gesture whether or not a drop happened."""
        self.dragged_place_id = None
        self.drag_target_day = None

    def drag_over_day(self, day_num: int) -> None:
        # Advisory only: drives highlighting, never canonical state
        self.drag_target_day = day_num

    def drag_leave(self) -> None:
        self.drag_target_day = None

    def drop_on_day(self, day_num: int) -> None:
        """Move the dragged place to day_num (0 = back to the pool).

        A drop without an active drag is ignored.
        """
        place_id = self.dragged_place_id
        if place_id is None:
            return
        self._store.move_place_to_day(place_id, day_num)
        self.end_drag()

    # --- Schedule edits ---------------------------------------------------

    def delete_place(self, place_id: str) -> None:
        """Take a place off the schedule; clears the selection if it was selected.

        At most one document is written, and it never names the removed place
        as selected.
        """
        before = self._store.snapshot()
        with self._without_write_through():
            after = self._store.delete_place(place_id)

        cleared = self.selected_place_id == place_id
        if cleared:
            self.selected_place_id = None
        if cleared or after is not before:
            self._persist()

    # --- Filtering and pagination -----------------------------------------

    def set_category_filter(self, category_filter: CategoryFilter) -> None:
        """Change the pool filter; pagination always restarts."""
        self.category_filter = category_filter
        self.recommendation_limit = self._page_size

    def load_more(self) -> None:
        self.recommendation_limit += self._page_size

    def reset_filters(self) -> None:
        self.category_filter = ALL_CATEGORIES
        self.recommendation_limit = self._page_size

    # --- Whole-trip operations --------------------------------------------

    async def generate(self, preferences: TripPreferences) -> Itinerary:
        """Request a new itinerary and make it the canonical trip on success.

        Only one request may be in flight per session. On failure the current
        trip (if any) stays active and `error` holds a message for the user.

        Raises:
            GenerationInProgressError: If a request is already outstanding
            GenerationError: If the provider fails; unexpected errors are wrapped in one
            InvalidItineraryError: If the provider returns an inconsistent itinerary
        """
        if self.is_generating:
            raise GenerationInProgressError()

        self.is_generating = True
        self.view_state = ViewState.loading
        self.error = None
        try:
            itinerary = await generate_itinerary(preferences, self._provider)
            self.replace_itinerary(itinerary)
        except (GenerationError, InvalidItineraryError) as e:
            self.error = str(e) or GENERIC_GENERATION_ERROR
            logger.info(
                "Generation failed, keeping current trip",
                extra={"structured": {"error": self.error, "has_trip": self._store.snapshot() is not None}},
            )
            self.view_state = ViewState.result if self._store.snapshot() is not None else ViewState.landing
            raise
        except Exception as e:
            self.error = GENERIC_GENERATION_ERROR
            logger.error(
                f"Unexpected generation failure: {e}",
                extra={"structured": {"error": type(e).__name__, "has_trip": self._store.snapshot() is not None}},
            )
            self.view_state = ViewState.result if self._store.snapshot() is not None else ViewState.landing
            raise GenerationError(GENERIC_GENERATION_ERROR) from e
        finally:
            self.is_generating = False

        return itinerary

    def replace_itinerary(self, itinerary: Itinerary) -> None:
        """Make itinerary canonical and reset every piece of transient state.

        Raises:
            InvalidItineraryError: If itinerary breaks the place/day invariant;
                session state is left untouched
        """
        with self._without_write_through():
            self._store.replace(itinerary)
        self.end_drag()
        self.reset_filters()
        self.active_day = views.first_day_num(itinerary, DEFAULT_ACTIVE_DAY)
        self.selected_place_id = views.first_scheduled_place_id(itinerary)
        self.view_state = ViewState.result
        self.error = None
        self._persist()

    def clear_trip(self) -> None:
        """Drop the trip and return to the landing screen."""
        self.end_drag()
        self.reset_filters()
        self.selected_place_id = None
        self.active_day = DEFAULT_ACTIVE_DAY
        self.view_state = ViewState.landing
        self.error = None
        self._store.replace(None)

    def go_to_landing(self) -> None:
        """Show the form again without discarding the current trip."""
        self.view_state = ViewState.landing

    # --- Persistence ------------------------------------------------------

    def snapshot_document(self) -> SavedTrip:
        return SavedTrip(
            itinerary=self._store.snapshot(),
            active_day=self.active_day,
            selected_place_id=self.selected_place_id,
        )

    def restore(self, saved: SavedTrip | None) -> None:
        """Cold start from a previously saved document.

        Restoring does not write back: the document just came from storage.
        """
        if saved is None or saved.itinerary is None:
            return
        with self._without_write_through():
            self._store.replace(saved.itinerary)
        self.active_day = saved.active_day
        self.selected_place_id = saved.selected_place_id
        self.reset_filters()
        self.end_drag()
        self.view_state = ViewState.result
        logger.info(
            "Restored saved trip",
            extra={"structured": {"active_day": self.active_day, "saved_at": saved.saved_at.isoformat()}},
        )

    @contextmanager
    def _without_write_through(self) -> Iterator[None]:
        """Detach the store hook so the caller can persist once, after its own state is final."""
        self._store.set_change_hook(None)
        try:
            yield
        finally:
            self._store.set_change_hook(self._on_store_change)

    def _on_store_change(self, itinerary: Itinerary | None) -> None:
        if self._writer is None:
            return
        if itinerary is None:
            self._writer.submit_clear()
        else:
            self._writer.submit(self.snapshot_document())

    def _persist(self) -> None:
        if self._writer is not None and self._store.snapshot() is not None:
            self._writer.submit(self.snapshot_document())
