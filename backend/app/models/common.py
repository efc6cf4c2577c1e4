"""Common types and enums shared across all models."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict


class Coordinates(BaseModel):
    """Geographic coordinates (WGS84) as returned by the generation provider."""

    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float


class Category(str, Enum):
    """Place category, drives the map pin icon."""

    food = "food"
    sights = "sights"
    nature = "nature"
    shopping = "shopping"
    activity = "activity"


class TimeSlot(str, Enum):
    """Part of the day a place is scheduled for."""

    morning = "Morning"
    lunch = "Lunch"
    afternoon = "Afternoon"
    dinner = "Dinner"


class CostTier(str, Enum):
    """Relative price level of a place."""

    budget = "$"
    standard = "$$"
    luxury = "$$$"


class PartySize(str, Enum):
    """Who is travelling."""

    solo = "Solo"
    couple = "Couple"
    family = "Family with Kids"
    friends = "Group of Friends"


class ViewState(str, Enum):
    """Top-level screen the client is showing."""

    landing = "landing"
    loading = "loading"
    result = "result"


ALL_CATEGORIES = "all"

# Either a single category or "all"
CategoryFilter = Category | Literal["all"]
