"""Preference models - user input to itinerary generation."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from backend.app.models.common import PartySize


class TripPreferences(BaseModel):
    """What the user asked for on the landing form."""

    destination: str
    duration: Annotated[int, Field(ge=1, description="Trip length in days")]
    party_size: PartySize = Field(default=PartySize.couple, alias="partySize")
    interests: str = ""

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("destination")
    @classmethod
    def validate_destination_not_blank(cls, v: str) -> str:
        """Ensure a destination was entered."""
        v = v.strip()
        if not v:
            raise ValueError("destination must not be empty")
        return v

    @field_validator("interests")
    @classmethod
    def strip_interests(cls, v: str) -> str:
        return v.strip()
