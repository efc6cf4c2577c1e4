"""Itinerary generation clients with OpenAI integration.

Security: Reads API key from environment only, never hardcoded.
Provides a deterministic stub when no key is present, for local runs and tests.
"""

import hashlib
import logging
import time
from typing import Protocol

from openai import AsyncOpenAI, OpenAIError

from backend.app.config import Settings, get_settings
from backend.app.errors import GenerationError, ProviderNotConfiguredError
from backend.app.llm.parsing import parse_itinerary_payload
from backend.app.models.common import Category, Coordinates, CostTier, TimeSlot
from backend.app.models.itinerary import MAX_VIBE_TAGS, Day, Itinerary, Place, TripMeta
from backend.app.models.preferences import TripPreferences
from backend.app.utils.logging import StructuredTripLogger
from backend.app.utils.metrics import PrometheusTripMetrics

logger = logging.getLogger(__name__)

DEFAULT_INTERESTS = "local food, culture, hidden gems"
DEFAULT_RECOMMENDED_INTERESTS = "cafes, desserts"

# Scheduled rhythm of every generated day
DAY_RHYTHM: list[tuple[str, TimeSlot, Category]] = [
    ("Breakfast", TimeSlot.morning, Category.food),
    ("Morning activity", TimeSlot.morning, Category.sights),
    ("Lunch", TimeSlot.lunch, Category.food),
    ("Afternoon activity", TimeSlot.afternoon, Category.nature),
    ("Dinner", TimeSlot.dinner, Category.food),
]


def recommended_pin_count(duration: int) -> int:
    """Extra pool places requested: longer trips already carry many scheduled stops."""
    return 5 if duration > 2 else 10


class GenerationProvider(Protocol):
    """Protocol for itinerary generation implementations."""

    name: str

    async def generate_itinerary(self, preferences: TripPreferences) -> Itinerary:
        """Generate a complete itinerary for the given preferences.

        Args:
            preferences: Destination, duration, party size and interests

        Returns:
            Itinerary satisfying the place/day invariant

        Raises:
            GenerationError: If the provider fails or returns an unusable document
        """
        ...


class DeterministicStubClient:
    """Deterministic stub provider (no API key required)."""

    name = "stub"

    async def generate_itinerary(self, preferences: TripPreferences) -> Itinerary:
        """Generate a deterministic itinerary from the preferences alone."""
        base_lat, base_lng = _anchor(preferences.destination)
        pins: list[Place] = []
        days: list[Day] = []

        for day_num in range(1, preferences.duration + 1):
            pin_ids: list[str] = []
            for slot_index, (label, slot, category) in enumerate(DAY_RHYTHM):
                pin_id = f"pin_{len(pins) + 1}"
                pins.append(
                    Place(
                        id=pin_id,
                        day_index=day_num,
                        name=f"{preferences.destination} {label} {day_num}",
                        coordinates=Coordinates(
                            lat=round(base_lat + day_num * 0.01, 6),
                            lng=round(base_lng + slot_index * 0.005, 6),
                        ),
                        category_icon=category,
                        short_description=f"{label} stop for day {day_num}",
                        image_search_query=f"{preferences.destination} {category.value}",
                        time_slot=slot,
                        logistics_note="Short walk from the previous stop",
                        cost_tier=list(CostTier)[(day_num + slot_index) % len(CostTier)],
                        rating=4.5,
                    )
                )
                pin_ids.append(pin_id)
            theme = f"Day {day_num} in {preferences.destination}"
            days.append(Day(day_num=day_num, theme=theme, pin_ids=tuple(pin_ids)))

        categories = list(Category)
        for index in range(recommended_pin_count(preferences.duration)):
            category = categories[index % len(categories)]
            pins.append(
                Place(
                    id=f"pin_{len(pins) + 1}",
                    day_index=0,
                    name=f"{preferences.destination} pick {index + 1}",
                    coordinates=Coordinates(
                        lat=round(base_lat - 0.01 - index * 0.002, 6),
                        lng=round(base_lng - 0.01, 6),
                    ),
                    category_icon=category,
                    short_description=f"Recommended {category.value} spot",
                    image_search_query=f"{preferences.destination} {category.value}",
                    time_slot=TimeSlot.afternoon,
                    logistics_note="Fits any free afternoon",
                    cost_tier=CostTier.standard,
                    rating=4.0,
                )
            )

        tags = [t.strip() for t in preferences.interests.split(",") if t.strip()]
        meta = TripMeta(
            title=f"{preferences.duration} Days in {preferences.destination}",
            duration=f"{preferences.duration} days",
            vibe_tags=tuple((tags or ["Curated", "Local"])[:MAX_VIBE_TAGS]),
        )
        return Itinerary(trip_meta=meta, map_pins=tuple(pins), daily_flow=tuple(days))


class OpenAIItineraryClient:
    """OpenAI-backed itinerary generation."""

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        timeout_seconds: float = 60.0,
        max_tokens: int = 8192,
    ):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key (read from environment)
            model: Model name to use (default: gpt-4o-mini for cost efficiency)
            timeout_seconds: Per-request timeout
            max_tokens: Output token cap for the JSON document
        """
        self.client = AsyncOpenAI(api_key=api_key, timeout=timeout_seconds, max_retries=1)
        self.model = model
        self.max_tokens = max_tokens

    async def generate_itinerary(self, preferences: TripPreferences) -> Itinerary:
        """Generate an itinerary using the OpenAI API."""
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": self._build_system_prompt()},
                    {"role": "user", "content": self._build_user_prompt(preferences)},
                ],
                response_format={"type": "json_object"},
                temperature=0.7,
                max_tokens=self.max_tokens,
            )
        except OpenAIError as e:
            logger.error(f"OpenAI API call failed: {e}")
            raise GenerationError("Failed to generate trip. Please try again.") from e

        text = response.choices[0].message.content if response.choices else None
        if not text or not text.strip():
            raise GenerationError("No response from AI")

        return parse_itinerary_payload(text)

    def _build_system_prompt(self) -> str:
        """Build system prompt for itinerary generation."""
        return """You are "TripArchitect Core", the planning engine behind a visual travel planner.
Your output drives a split-screen interface: an interactive map that needs precise
coordinates and a category per pin, and a card list that needs short, inviting titles.

RULES:
- category_icon must be one of: food, sights, nature, shopping, activity
- time_slot must be one of: Morning, Lunch, Afternoon, Dinner
- cost_tier must be one of: $, $$, $$$
- rating must be realistic (1.0-5.0): popular spots 4.2-4.8, hidden gems 3.8-4.3
- Coordinates must be real and accurate
- Group activities geographically within each day
- Prioritize appropriately for the party (e.g. kid-friendly places for families)

OUTPUT SCHEMA:
{
  "trip_meta": {"title": "string", "duration": "string", "vibe_tags": ["string (max 5)"]},
  "map_pins": [{
    "id": "string (unique, e.g. 'pin_1')",
    "day_index": "integer (1,2,3... for scheduled, 0 for recommended)",
    "name": "string",
    "coordinates": {"lat": "number", "lng": "number"},
    "category_icon": "food | sights | nature | shopping | activity",
    "short_description": "string",
    "image_search_query": "string",
    "time_slot": "Morning | Lunch | Afternoon | Dinner",
    "logistics_note": "string",
    "cost_tier": "$ | $$ | $$$",
    "rating": "number"
  }],
  "daily_flow": [{"day_num": "integer", "theme": "string", "pin_ids": ["string"]}]
}

Return ONLY the JSON object, no markdown, no explanation."""

    def _build_user_prompt(self, preferences: TripPreferences) -> str:
        """Build the per-request prompt from user preferences."""
        duration = preferences.duration
        interests = preferences.interests or DEFAULT_INTERESTS
        day_list = ", ".join(str(day) for day in range(1, duration + 1))
        recommended = recommended_pin_count(duration)

        lines = [
            "## Trip Request",
            f"- Destination: {preferences.destination}",
            f"- Duration: {duration} days",
            f"- Party: {preferences.party_size.value}",
            f"- Interests: {interests}",
            "",
            "## Generate",
            f'1. trip_meta with title, duration ("{duration} days"), and up to 5 vibe_tags',
            "2. map_pins with TWO kinds of pins:",
            f"   a) SCHEDULED pins (day_index = 1 to {duration}): exactly 5 per day:",
            "      Breakfast (Morning/food) -> Activity (Morning) -> Lunch (Lunch/food)"
            " -> Activity (Afternoon) -> Dinner (Dinner/food)",
            f"   b) RECOMMENDED pins (day_index = 0): {recommended} extra places matching"
            f' "{preferences.interests or DEFAULT_RECOMMENDED_INTERESTS}"',
            f"3. daily_flow: exactly {duration} objects for days [{day_list}], each with day_num,"
            " theme, and pin_ids referencing that day's scheduled pins in visiting order",
            "",
            "Descriptions MUST be under 80 chars (under 50 for recommended pins).",
        ]
        return "\n".join(lines)


def _anchor(destination: str) -> tuple[float, float]:
    """Stable pseudo-coordinates for a destination name."""
    digest = hashlib.sha256(destination.lower().encode("utf-8")).digest()
    lat = (int.from_bytes(digest[:4], "big") / 2**32) * 120 - 60
    lng = (int.from_bytes(digest[4:8], "big") / 2**32) * 360 - 180
    return round(lat, 4), round(lng, 4)


def get_generation_provider(settings: Settings | None = None) -> GenerationProvider:
    """Factory function to get the generation provider based on config.

    Returns:
        OpenAIItineraryClient if an API key is configured, DeterministicStubClient
        otherwise (when stub generation is allowed)

    Raises:
        ProviderNotConfiguredError: If no key is set and the stub is disabled
    """
    settings = settings or get_settings()
    api_key = settings.openai_api_key

    if api_key and api_key.get_secret_value():
        logger.info("Using OpenAI client for itinerary generation")
        return OpenAIItineraryClient(
            api_key=api_key.get_secret_value(),
            model=settings.openai_model,
            timeout_seconds=settings.generation_timeout_seconds,
            max_tokens=settings.generation_max_tokens,
        )

    if settings.allow_stub_generation:
        logger.warning("No OpenAI API key configured, using deterministic stub client")
        return DeterministicStubClient()

    raise ProviderNotConfiguredError()


async def generate_itinerary(
    preferences: TripPreferences,
    provider: GenerationProvider | None = None,
) -> Itinerary:
    """Main entry point for itinerary generation, with logging and metrics.

    Args:
        preferences: User preferences
        provider: Provider to use (default: resolved from settings)

    Returns:
        Generated itinerary

    Raises:
        GenerationError: If generation fails for any reason
    """
    provider = provider or get_generation_provider()
    trip_logger = StructuredTripLogger()
    metrics = PrometheusTripMetrics()

    started = time.perf_counter()
    try:
        itinerary = await provider.generate_itinerary(preferences)
    except GenerationError as e:
        latency_ms = (time.perf_counter() - started) * 1000
        trip_logger.log_generation(
            provider.name, preferences.destination, "error", latency_ms, error_reason=str(e)
        )
        metrics.record_generation(provider.name, "error", latency_ms)
        metrics.inc_generation_error(provider.name, type(e).__name__)
        raise

    latency_ms = (time.perf_counter() - started) * 1000
    trip_logger.log_generation(provider.name, preferences.destination, "success", latency_ms)
    metrics.record_generation(provider.name, "success", latency_ms)
    return itinerary
