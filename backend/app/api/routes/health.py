"""Health check endpoint."""

from fastapi import APIRouter

from backend.app.config import get_settings

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running), plus which provider mode is active
    """
    settings = get_settings()
    api_key = settings.openai_api_key
    if api_key and api_key.get_secret_value():
        provider = "openai"
    elif settings.allow_stub_generation:
        provider = "stub"
    else:
        provider = "unconfigured"
    return {"status": "ok", "provider": provider}
