"""Exception hierarchy shared by the client and the generation service."""


class TripArchitectError(Exception):
    """Base exception for the application."""


class GenerationError(TripArchitectError):
    """Itinerary generation failed; the message is safe to show to the user."""


class GenerationInProgressError(GenerationError):
    """A generation request is already outstanding for this session."""

    def __init__(self) -> None:
        super().__init__("A trip is already being generated. Please wait for it to finish.")


class ProviderNotConfiguredError(GenerationError):
    """No generation provider credentials are configured."""

    def __init__(self) -> None:
        super().__init__("API key not configured on server")


class InvalidItineraryError(TripArchitectError):
    """An itinerary document is structurally invalid."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = problems
        super().__init__("Invalid itinerary: " + "; ".join(problems))
