"""Test JSON schema export of the generation contract."""

import json
from pathlib import Path

import pytest

from scripts.export_schemas import export_schemas


@pytest.fixture
def schemas_dir(tmp_path: Path) -> Path:
    export_schemas(tmp_path / "schemas")
    return tmp_path / "schemas"


def test_schemas_exist(schemas_dir: Path) -> None:
    """Test that one schema file per contract model was created."""
    names = sorted(p.name for p in schemas_dir.iterdir())
    assert names == [
        "Itinerary.schema.json",
        "SavedTrip.schema.json",
        "TripPreferences.schema.json",
    ]


def test_itinerary_schema_requires_sections(schemas_dir: Path) -> None:
    with open(schemas_dir / "Itinerary.schema.json") as f:
        schema = json.load(f)
    assert schema["title"] == "Itinerary"
    assert schema["required"] == ["trip_meta"]
    assert set(schema["properties"]) == {"trip_meta", "map_pins", "daily_flow"}


def test_preferences_schema_uses_wire_names(schemas_dir: Path) -> None:
    """Test the request schema exposes partySize as sent by clients."""
    with open(schemas_dir / "TripPreferences.schema.json") as f:
        schema = json.load(f)
    assert "partySize" in schema["properties"]
    assert set(schema["required"]) == {"destination", "duration"}
