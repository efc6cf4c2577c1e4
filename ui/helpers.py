"""Helper functions for UI - /api/generate client + presentation shaping."""

from typing import Any
from urllib.parse import quote

import httpx

from backend.app.config import Settings
from backend.app.controller.session import TripSession
from backend.app.errors import GenerationError
from backend.app.llm.parsing import parse_itinerary_payload
from backend.app.models.common import Category, CostTier
from backend.app.models.itinerary import Itinerary, Place
from backend.app.models.preferences import TripPreferences
from backend.app.models.views import CostTierSlice
from backend.app.persistence.writer import PersistenceWriter
from backend.app.store.itinerary_store import ItineraryStore

GENERIC_ERROR = "Failed to generate trip. Please try again."

# Marker colors by category; anything else renders dark
CATEGORY_COLORS: dict[Category, str] = {
    Category.food: "#fb7185",
    Category.nature: "#34d399",
    Category.sights: "#fbbf24",
}
DEFAULT_MARKER_COLOR = "#1e293b"
SELECTED_MARKER_SIZE = 60
MARKER_SIZE = 30

COST_TIER_LABELS: dict[CostTier, str] = {
    CostTier.budget: "Budget",
    CostTier.standard: "Standard",
    CostTier.luxury: "Luxury",
}


class HttpGenerationProvider:
    """Generation provider that calls the backend's /api/generate endpoint."""

    name = "http"

    def __init__(
        self,
        backend_url: str,
        timeout: float = 90.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize provider.

        Args:
            backend_url: Backend base URL (e.g. http://localhost:8000)
            timeout: Request timeout in seconds; generation is slow
            transport: Optional httpx transport (tests inject a mock)
        """
        self.backend_url = backend_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def generate_itinerary(self, preferences: TripPreferences) -> Itinerary:
        """POST preferences and parse the returned itinerary.

        Raises:
            GenerationError: On network failure, a non-2xx status (carrying the
                server's error message), or an unusable response body
        """
        payload = preferences.model_dump(mode="json", by_alias=True)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(f"{self.backend_url}/api/generate", json=payload)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise GenerationError(GENERIC_ERROR) from e

        if response.is_error:
            raise GenerationError(_error_message(response))

        try:
            body = response.json()
        except ValueError as e:
            raise GenerationError("Invalid response structure from AI") from e
        return parse_itinerary_payload(body)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return GENERIC_ERROR
    if isinstance(body, dict) and isinstance(body.get("error"), str) and body["error"]:
        return str(body["error"])
    return GENERIC_ERROR


def image_url(query: str, size: int = 200) -> str:
    """Thumbnail URL generated from a place's image search query."""
    return f"https://image.pollinations.ai/prompt/{quote(query, safe='')}?width={size}&height={size}&nologo=true"


def cost_tier_label(tier: CostTier) -> str:
    """Human label, e.g. 'Standard ($$)'."""
    return f"{COST_TIER_LABELS[tier]} ({tier.value})"


def place_caption(place: Place) -> str:
    """One-line caption: slot, cost tier and rating when known."""
    parts = [place.time_slot.value, place.cost_tier.value]
    if place.rating is not None:
        parts.append(f"★ {place.rating:.1f}")
    return " · ".join(parts)


def map_points(pins: list[Place], selected_place_id: str | None = None) -> list[dict[str, Any]]:
    """Rows for st.map: one per visible pin, the selected one drawn larger.

    Args:
        pins: Pins currently visible on the map
        selected_place_id: Currently selected place, if any

    Returns:
        List of dicts with lat, lon, color, size and name
    """
    return [
        {
            "lat": pin.coordinates.lat,
            "lon": pin.coordinates.lng,
            "color": CATEGORY_COLORS.get(pin.category_icon, DEFAULT_MARKER_COLOR),
            "size": SELECTED_MARKER_SIZE if pin.id == selected_place_id else MARKER_SIZE,
            "name": pin.name,
        }
        for pin in pins
    ]


def chart_rows(slices: list[CostTierSlice]) -> dict[str, list[Any]]:
    """Column-oriented cost distribution for a chart widget."""
    return {
        "tier": [s.name for s in slices],
        "places": [s.value for s in slices],
        "color": [s.color for s in slices],
    }


def build_trip_session(writer: PersistenceWriter, settings: Settings) -> TripSession:
    """Create one browser session's controller over a shared writer.

    The writer (and the storage connection it holds) is shared by every
    session in the process; each session restores the last saved trip.
    """
    session = TripSession(
        ItineraryStore(),
        HttpGenerationProvider(settings.backend_url, timeout=settings.generation_timeout_seconds + 30),
        writer=writer,
        page_size=settings.recommendation_page_size,
    )
    session.restore(writer.storage.load())
    return session
