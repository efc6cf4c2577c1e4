"""Itinerary generation endpoint - POST /api/generate."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from backend.app.llm.client import GenerationProvider, generate_itinerary, get_generation_provider
from backend.app.models.itinerary import Itinerary
from backend.app.models.preferences import TripPreferences

router = APIRouter(prefix="/api", tags=["generate"])
logger = logging.getLogger(__name__)


def get_provider() -> GenerationProvider:
    """Resolve the configured generation provider.

    Raises:
        ProviderNotConfiguredError: Mapped to 500 by the application handlers
    """
    return get_generation_provider()


@router.post("/generate", response_model=Itinerary)
async def generate(
    preferences: TripPreferences,
    provider: Annotated[GenerationProvider, Depends(get_provider)],
) -> Itinerary:
    """Generate a complete itinerary for the submitted trip preferences.

    Returns:
        Itinerary document (trip_meta, map_pins, daily_flow)

    Errors (all bodies are {"error": message}):
        400 if destination or duration is missing or malformed
        500 if no generation provider is configured
        502 if the provider fails or returns an unusable document
    """
    logger.info(
        f"Generating itinerary for {preferences.destination} ({preferences.duration} days)",
        extra={"structured": {"provider": provider.name, "party_size": preferences.party_size.value}},
    )
    return await generate_itinerary(preferences, provider)
