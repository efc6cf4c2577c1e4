"""Parse and normalize generation provider output into an Itinerary.

This is the boundary where loosely formatted model output becomes a trusted
document: enum spellings are normalized, the vibe tag list is capped, the
result is schema-validated, and an itinerary that breaks the place/day
invariant is rejected outright.
"""

import json
import re
from typing import Any

from pydantic import ValidationError

from backend.app.errors import GenerationError
from backend.app.models.common import Category, CostTier, TimeSlot
from backend.app.models.itinerary import MAX_VIBE_TAGS, Itinerary, check_integrity

REQUIRED_SECTIONS = ("trip_meta", "map_pins", "daily_flow")

_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*(?P<body>.*?)\s*```$", re.DOTALL)

_CATEGORY_LOOKUP = {c.value: c.value for c in Category}
_TIME_SLOT_LOOKUP = {t.value.lower(): t.value for t in TimeSlot}
_COST_TIER_LOOKUP = {t.value: t.value for t in CostTier}


def parse_itinerary_payload(payload: str | dict[str, Any]) -> Itinerary:
    """Turn raw provider output into a consistent Itinerary.

    Args:
        payload: JSON text (optionally wrapped in a markdown fence) or a decoded dict

    Returns:
        Validated Itinerary

    Raises:
        GenerationError: If the payload is not JSON, misses a section, fails
            schema validation, or breaks the place/day invariant
    """
    data = _decode(payload) if isinstance(payload, str) else payload

    if not isinstance(data, dict) or any(data.get(key) is None for key in REQUIRED_SECTIONS):
        raise GenerationError("Invalid response structure from AI")

    pins = data["map_pins"]
    normalized = {
        "trip_meta": _normalize_meta(data["trip_meta"]),
        "map_pins": [_normalize_pin(pin) for pin in pins] if isinstance(pins, list) else pins,
        "daily_flow": data["daily_flow"],
    }

    try:
        itinerary = Itinerary.model_validate(normalized)
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        raise GenerationError(
            "AI response is missing or has invalid fields: " + ", ".join(fields[:5])
        ) from e

    problems = check_integrity(itinerary)
    if problems:
        raise GenerationError("AI returned an inconsistent itinerary: " + problems[0])

    return itinerary


def _decode(text: str) -> Any:
    text = text.strip()
    match = _FENCE_PATTERN.match(text)
    if match:
        text = match.group("body")
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise GenerationError("AI response was not valid JSON") from e


def _normalize_meta(meta: Any) -> Any:
    if not isinstance(meta, dict):
        return meta
    meta = dict(meta)
    tags = meta.get("vibe_tags")
    if isinstance(tags, list):
        meta["vibe_tags"] = [str(tag).strip() for tag in tags if str(tag).strip()][:MAX_VIBE_TAGS]
    return meta


def _normalize_pin(pin: Any) -> Any:
    if not isinstance(pin, dict):
        return pin
    pin = dict(pin)
    pin["category_icon"] = _lookup(pin.get("category_icon"), _CATEGORY_LOOKUP, str.lower)
    pin["time_slot"] = _lookup(pin.get("time_slot"), _TIME_SLOT_LOOKUP, str.lower)
    pin["cost_tier"] = _lookup(pin.get("cost_tier"), _COST_TIER_LOOKUP, lambda s: s.replace(" ", ""))
    return pin


def _lookup(value: Any, table: dict[str, str], key: Any) -> Any:
    """Map a loosely spelled enum value onto its canonical spelling.

    Unknown values are passed through untouched so schema validation
    reports them.
    """
    if not isinstance(value, str):
        return value
    return table.get(key(value.strip()), value)
