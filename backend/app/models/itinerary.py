"""Itinerary models - the canonical trip document.

Field names follow the generation contract (trip_meta, map_pins, daily_flow)
so the same models serve the API, the client and persistence. All models are
frozen: a snapshot handed out by the store can never be edited in place.
"""

from collections import Counter

from pydantic import BaseModel, ConfigDict, Field

from backend.app.models.common import Category, Coordinates, CostTier, TimeSlot

MAX_VIBE_TAGS = 5


class Place(BaseModel):
    """Single point of interest (map pin)."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    day_index: int = Field(..., ge=0, description="0 = recommendation pool, N = scheduled on day N")
    name: str
    coordinates: Coordinates
    category_icon: Category
    short_description: str = ""
    image_search_query: str = ""
    time_slot: TimeSlot
    logistics_note: str = ""
    cost_tier: CostTier
    rating: float | None = None

    @property
    def is_scheduled(self) -> bool:
        return self.day_index > 0


class Day(BaseModel):
    """One day of the schedule; pin_ids is the authoritative visit order."""

    model_config = ConfigDict(frozen=True)

    day_num: int = Field(..., ge=1)
    theme: str = ""
    date: str | None = None
    pin_ids: tuple[str, ...] = ()


class EstimatedCost(BaseModel):
    """Total estimated trip cost."""

    model_config = ConfigDict(frozen=True)

    amount: float
    currency: str


class TripMeta(BaseModel):
    """Descriptive trip header. Never mutated after generation."""

    model_config = ConfigDict(frozen=True)

    title: str
    duration: str = ""
    vibe_tags: tuple[str, ...] = Field(default=(), max_length=MAX_VIBE_TAGS)
    total_estimated_cost: EstimatedCost | None = None


class Itinerary(BaseModel):
    """Aggregate root: unit of persistence and of wholesale replacement."""

    model_config = ConfigDict(frozen=True)

    trip_meta: TripMeta
    map_pins: tuple[Place, ...] = ()
    daily_flow: tuple[Day, ...] = ()

    @property
    def day_nums(self) -> list[int]:
        return [day.day_num for day in self.daily_flow]

    def get_place(self, place_id: str) -> Place | None:
        for place in self.map_pins:
            if place.id == place_id:
                return place
        return None

    def get_day(self, day_num: int) -> Day | None:
        for day in self.daily_flow:
            if day.day_num == day_num:
                return day
        return None


def check_integrity(itinerary: Itinerary) -> list[str]:
    """Return every violation of the place/day referential invariant.

    An empty list means the document is consistent: each place is either in
    the pool (day_index 0) or listed exactly once, in the pin_ids of the day
    matching its day_index, and every listed id resolves to such a place.
    """
    problems: list[str] = []

    place_counts = Counter(place.id for place in itinerary.map_pins)
    for place_id, count in place_counts.items():
        if count > 1:
            problems.append(f"place id '{place_id}' is used by {count} places")

    day_counts = Counter(day.day_num for day in itinerary.daily_flow)
    for day_num, count in day_counts.items():
        if count > 1:
            problems.append(f"day {day_num} appears {count} times")

    places = {place.id: place for place in itinerary.map_pins}
    day_nums = set(day_counts)

    listed_on: dict[str, list[int]] = {}
    for day in itinerary.daily_flow:
        for pin_id in day.pin_ids:
            listed_on.setdefault(pin_id, []).append(day.day_num)
            place = places.get(pin_id)
            if place is None:
                problems.append(f"day {day.day_num} references unknown place '{pin_id}'")
            elif place.day_index != day.day_num:
                problems.append(
                    f"day {day.day_num} lists '{pin_id}' but its day_index is {place.day_index}"
                )

    for pin_id, days in listed_on.items():
        if len(days) > 1:
            problems.append(f"place '{pin_id}' is listed {len(days)} times (days {days})")

    for place in itinerary.map_pins:
        if place.day_index == 0:
            continue
        if place.day_index not in day_nums:
            problems.append(f"place '{place.id}' is assigned to missing day {place.day_index}")
        elif place.id not in listed_on:
            problems.append(f"place '{place.id}' is on day {place.day_index} but not in its pin_ids")

    return problems
