"""Structured logging for store mutations and itinerary generation."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class StructuredTripLogger:
    """Structured logger for canonical-state changes and generation calls."""

    def log_mutation(
        self,
        operation: str,
        outcome: str,
        *,
        place_id: str | None = None,
        target_day: int | None = None,
        reason: str | None = None,
    ) -> None:
        """Log a store mutation attempt with structured data.

        Ignored mutations come from stale gesture state and are expected, so
        they are logged at debug level only.
        """
        log_data: dict[str, Any] = {
            "operation": operation,
            "outcome": outcome,
        }
        if place_id is not None:
            log_data["place_id"] = place_id
        if target_day is not None:
            log_data["target_day"] = target_day
        if reason:
            log_data["reason"] = reason

        log_msg = f"Store mutation: {operation} - {outcome}"

        if outcome == "ignored":
            logger.debug(log_msg, extra={"structured": log_data})
        else:
            logger.info(log_msg, extra={"structured": log_data})

    def log_generation(
        self,
        provider: str,
        destination: str,
        outcome: str,
        latency_ms: float,
        error_reason: str | None = None,
    ) -> None:
        """Log an itinerary generation attempt with structured data."""
        log_data: dict[str, Any] = {
            "provider": provider,
            "destination": destination,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Itinerary generation: {provider} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
