"""Tests for turning raw provider output into a trusted Itinerary."""

import json
from typing import Any

import pytest

from backend.app.errors import GenerationError
from backend.app.llm.parsing import parse_itinerary_payload
from backend.app.models.common import Category, CostTier, TimeSlot


@pytest.fixture
def raw_payload() -> dict[str, Any]:
    """A realistic, slightly sloppy model response."""
    return {
        "trip_meta": {
            "title": "Weekend in Lisbon",
            "duration": "2 days",
            "vibe_tags": ["Coastal", "Food", " ", "Views", "Music", "History", "Extra"],
        },
        "map_pins": [
            {
                "id": "pin_1",
                "day_index": 1,
                "name": "Pastéis de Belém",
                "coordinates": {"lat": 38.6975, "lng": -9.2032},
                "category_icon": "Food",
                "short_description": "Custard tarts since 1837",
                "image_search_query": "pasteis de belem",
                "time_slot": "morning",
                "logistics_note": "Tram 15E",
                "cost_tier": "$ $",
                "rating": 4.7,
            },
            {
                "id": "pin_2",
                "day_index": 0,
                "name": "LX Factory",
                "coordinates": {"lat": 38.703, "lng": -9.178},
                "category_icon": "shopping",
                "time_slot": "Afternoon",
                "cost_tier": "$",
            },
        ],
        "daily_flow": [
            {"day_num": 1, "theme": "Belém", "pin_ids": ["pin_1"]},
            {"day_num": 2, "theme": "Alfama", "pin_ids": []},
        ],
    }


def test_parses_and_normalizes(raw_payload: dict[str, Any]) -> None:
    itinerary = parse_itinerary_payload(json.dumps(raw_payload))

    first = itinerary.map_pins[0]
    assert first.category_icon == Category.food
    assert first.time_slot == TimeSlot.morning
    assert first.cost_tier == CostTier.standard
    assert itinerary.trip_meta.vibe_tags == ("Coastal", "Food", "Views", "Music", "History")
    assert itinerary.map_pins[1].rating is None


def test_accepts_markdown_fence(raw_payload: dict[str, Any]) -> None:
    text = "```json\n" + json.dumps(raw_payload) + "\n```"
    assert parse_itinerary_payload(text).trip_meta.title == "Weekend in Lisbon"


def test_accepts_decoded_dict(raw_payload: dict[str, Any]) -> None:
    assert len(parse_itinerary_payload(raw_payload).daily_flow) == 2


def test_invalid_json() -> None:
    with pytest.raises(GenerationError, match="not valid JSON"):
        parse_itinerary_payload("Sure! Here is your trip:")


@pytest.mark.parametrize("section", ["trip_meta", "map_pins", "daily_flow"])
def test_missing_section(raw_payload: dict[str, Any], section: str) -> None:
    del raw_payload[section]
    with pytest.raises(GenerationError, match="Invalid response structure from AI"):
        parse_itinerary_payload(raw_payload)


def test_non_object_payload() -> None:
    with pytest.raises(GenerationError, match="Invalid response structure"):
        parse_itinerary_payload("[1, 2, 3]")


def test_empty_lists_are_allowed(raw_payload: dict[str, Any]) -> None:
    raw_payload["map_pins"] = []
    raw_payload["daily_flow"] = []
    itinerary = parse_itinerary_payload(raw_payload)
    assert itinerary.map_pins == ()


def test_unknown_enum_value_is_reported(raw_payload: dict[str, Any]) -> None:
    raw_payload["map_pins"][0]["category_icon"] = "nightlife"
    with pytest.raises(GenerationError, match="map_pins.0.category_icon"):
        parse_itinerary_payload(raw_payload)


def test_inconsistent_itinerary_rejected(raw_payload: dict[str, Any]) -> None:
    """Test a pin whose day does not list it is rejected, not repaired."""
    raw_payload["daily_flow"][0]["pin_ids"] = []
    with pytest.raises(GenerationError, match="inconsistent itinerary"):
        parse_itinerary_payload(raw_payload)
