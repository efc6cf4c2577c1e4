"""Itinerary store - sole owner and writer of the canonical trip."""

from collections.abc import Callable

from backend.app.errors import InvalidItineraryError
from backend.app.models.itinerary import Day, Itinerary, check_integrity
from backend.app.utils.logging import StructuredTripLogger
from backend.app.utils.metrics import PrometheusTripMetrics

POOL_DAY = 0

ChangeHook = Callable[[Itinerary | None], None]


class ItineraryStore:
    """Holds the live Itinerary and applies every mutation to it.

    Snapshots are frozen models, so callers only ever see read-only values.
    Each accepted mutation swaps in a new snapshot and then invokes the
    change hook (persistence write-through). Mutations that reference an
    unknown place or day are ignored: they only arise from stale gesture
    state and never surface as errors.
    """

    def __init__(
        self,
        itinerary: Itinerary | None = None,
        *,
        on_change: ChangeHook | None = None,
        logger: StructuredTripLogger | None = None,
        metrics: PrometheusTripMetrics | None = None,
    ) -> None:
        if itinerary is not None:
            _ensure_consistent(itinerary)
        self._itinerary = itinerary
        self._on_change = on_change
        self._logger = logger or StructuredTripLogger()
        self._metrics = metrics or PrometheusTripMetrics()

    def snapshot(self) -> Itinerary | None:
        """Return the current immutable Itinerary, or None if none is loaded."""
        return self._itinerary

    def set_change_hook(self, on_change: ChangeHook | None) -> None:
        self._on_change = on_change

    def replace(self, itinerary: Itinerary | None) -> Itinerary | None:
        """Atomically swap the whole canonical state.

        Passing None clears the trip.

        Raises:
            InvalidItineraryError: If the new itinerary breaks the place/day invariant
        """
        if itinerary is not None:
            _ensure_consistent(itinerary)

        self._itinerary = itinerary
        self._record("replace", "accepted")
        self._notify()
        return self._itinerary

    def move_place_to_day(self, place_id: str, target_day: int) -> Itinerary | None:
        """Assign a place to a day (appended last), or to the pool when target_day is 0.

        Returns:
            The resulting snapshot; unchanged when the move is ignored
        """
        current = self._itinerary
        if current is None:
            self._record("move", "ignored", place_id=place_id, target_day=target_day, reason="no_itinerary")
            return current

        place = current.get_place(place_id)
        if place is None:
            self._record("move", "ignored", place_id=place_id, target_day=target_day, reason="unknown_place")
            return current

        if target_day != POOL_DAY and current.get_day(target_day) is None:
            self._record("move", "ignored", place_id=place_id, target_day=target_day, reason="unknown_day")
            return current

        updated = _with_place_on_day(current, place_id, target_day)
        if updated == current:
            self._record("move", "unchanged", place_id=place_id, target_day=target_day)
            return current

        self._itinerary = updated
        self._record("move", "accepted", place_id=place_id, target_day=target_day)
        self._notify()
        return updated

    def delete_place(self, place_id: str) -> Itinerary | None:
        """Take a place off the schedule; it returns to the recommendation pool."""
        return self.move_place_to_day(place_id, POOL_DAY)

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self._itinerary)

    def _record(
        self,
        operation: str,
        outcome: str,
        *,
        place_id: str | None = None,
        target_day: int | None = None,
        reason: str | None = None,
    ) -> None:
        self._logger.log_mutation(
            operation, outcome, place_id=place_id, target_day=target_day, reason=reason
        )
        self._metrics.inc_mutation(operation, outcome)


def _ensure_consistent(itinerary: Itinerary) -> None:
    problems = check_integrity(itinerary)
    if problems:
        raise InvalidItineraryError(problems)


def _with_place_on_day(itinerary: Itinerary, place_id: str, target_day: int) -> Itinerary:
    """Build the next snapshot with place_id on target_day.

    The place is removed from every other day. On the target day an existing
    entry keeps its position (duplicates collapse to the first one); otherwise
    the id is appended at the end.
    """
    pins = tuple(
        pin.model_copy(update={"day_index": target_day}) if pin.id == place_id else pin
        for pin in itinerary.map_pins
    )

    days: list[Day] = []
    for day in itinerary.daily_flow:
        if day.day_num == target_day:
            pin_ids = _keep_first(day.pin_ids, place_id)
            if place_id not in pin_ids:
                pin_ids = (*pin_ids, place_id)
        else:
            pin_ids = tuple(pin_id for pin_id in day.pin_ids if pin_id != place_id)

        days.append(day if pin_ids == day.pin_ids else day.model_copy(update={"pin_ids": pin_ids}))

    return itinerary.model_copy(update={"map_pins": pins, "daily_flow": tuple(days)})


def _keep_first(pin_ids: tuple[str, ...], place_id: str) -> tuple[str, ...]:
    seen = False
    kept: list[str] = []
    for pin_id in pin_ids:
        if pin_id == place_id:
            if seen:
                continue
            seen = True
        kept.append(pin_id)
    return tuple(kept)
