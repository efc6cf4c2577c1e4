"""Tests for UI helpers - backend client and presentation shaping."""

import json
from collections.abc import Callable

import httpx
import pytest

from backend.app.config import Settings
from backend.app.derivation.views import cost_tier_distribution
from backend.app.errors import GenerationError
from backend.app.models.common import Category, CostTier, ViewState
from backend.app.models.itinerary import Itinerary, Place
from backend.app.models.preferences import TripPreferences
from backend.app.models.saved import SavedTrip
from backend.app.persistence.storage import InMemoryTripStorage
from backend.app.persistence.writer import PersistenceWriter
from ui.helpers import (
    DEFAULT_MARKER_COLOR,
    HttpGenerationProvider,
    build_trip_session,
    chart_rows,
    cost_tier_label,
    image_url,
    map_points,
    place_caption,
)


def _provider(handler: Callable[[httpx.Request], httpx.Response]) -> HttpGenerationProvider:
    return HttpGenerationProvider("http://backend:8000/", transport=httpx.MockTransport(handler))


class TestHttpGenerationProvider:
    @pytest.mark.asyncio
    async def test_posts_preferences_and_parses(
        self, sample_itinerary: Itinerary, sample_preferences: TripPreferences
    ) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=sample_itinerary.model_dump(mode="json"))

        itinerary = await _provider(handler).generate_itinerary(sample_preferences)

        assert itinerary == sample_itinerary
        assert str(seen[0].url) == "http://backend:8000/api/generate"
        body = json.loads(seen[0].content)
        assert body["destination"] == "Kyoto"
        assert body["partySize"] == "Couple"

    @pytest.mark.asyncio
    async def test_server_error_message_is_surfaced(self, sample_preferences: TripPreferences) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": "API key not configured on server"})

        with pytest.raises(GenerationError, match="API key not configured on server"):
            await _provider(handler).generate_itinerary(sample_preferences)

    @pytest.mark.asyncio
    async def test_non_json_error_gets_generic_message(self, sample_preferences: TripPreferences) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="Bad Gateway")

        with pytest.raises(GenerationError, match="Failed to generate trip"):
            await _provider(handler).generate_itinerary(sample_preferences)

    @pytest.mark.asyncio
    async def test_network_error(self, sample_preferences: TripPreferences) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(GenerationError, match="Failed to generate trip"):
            await _provider(handler).generate_itinerary(sample_preferences)

    @pytest.mark.asyncio
    async def test_invalid_url_becomes_generation_error(self, sample_preferences: TripPreferences) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.InvalidURL("Invalid port")

        with pytest.raises(GenerationError, match="Failed to generate trip"):
            await _provider(handler).generate_itinerary(sample_preferences)

    @pytest.mark.asyncio
    async def test_malformed_body(self, sample_preferences: TripPreferences) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"trip_meta": {"title": "x"}})

        with pytest.raises(GenerationError, match="Invalid response structure"):
            await _provider(handler).generate_itinerary(sample_preferences)


def test_image_url_encodes_query() -> None:
    url = image_url("kyoto temple & garden")
    assert url.startswith("https://image.pollinations.ai/prompt/kyoto%20temple%20%26%20garden?")
    assert "width=200" in url


def test_cost_tier_label() -> None:
    assert cost_tier_label(CostTier.luxury) == "Luxury ($$$)"


def test_place_caption(make_place: Callable[..., Place]) -> None:
    assert place_caption(make_place("a", rating=4.3)) == "Morning · $ · ★ 4.3"
    assert place_caption(make_place("b", rating=None)) == "Morning · $"


def test_map_points(make_place: Callable[..., Place]) -> None:
    pins = [
        make_place("a", 1, category_icon=Category.food),
        make_place("b", 1, category_icon=Category.shopping),
    ]
    points = map_points(pins, selected_place_id="b")

    assert points[0]["color"] == "#fb7185"
    assert points[1]["color"] == DEFAULT_MARKER_COLOR
    assert points[1]["size"] > points[0]["size"]
    assert points[0]["lon"] == pins[0].coordinates.lng


def test_chart_rows(sample_itinerary: Itinerary) -> None:
    rows = chart_rows(cost_tier_distribution(sample_itinerary))
    assert rows["tier"] == ["Budget ($)", "Standard ($$)", "Luxury ($$$)"]
    assert rows["places"] == [3, 2, 1]


def test_sessions_share_one_writer(sample_itinerary: Itinerary) -> None:
    """Test every browser session reuses the process-wide writer and restores from it."""
    storage = InMemoryTripStorage()
    storage.save(SavedTrip(itinerary=sample_itinerary, active_day=2, selected_place_id="p3"))
    writer = PersistenceWriter(storage)
    settings = Settings(recommendation_page_size=4)

    first = build_trip_session(writer, settings)
    second = build_trip_session(writer, settings)

    assert first._writer is writer
    assert second._writer is writer
    assert second.itinerary == sample_itinerary
    assert second.active_day == 2
    assert second.view_state == ViewState.result
    assert second.recommendation_limit == 4

    first.delete_place("p3")
    writer.flush(timeout=5)
    reopened = build_trip_session(writer, settings)
    assert reopened.selected_place_id is None
    writer.close()
