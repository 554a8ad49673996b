"""
Health Check Routes

System health and status endpoints.
"""

from fastapi import APIRouter
from agents.ai_providers import get_provider_descriptors
from models.schemas import HealthResponse
from config.settings import settings


router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Returns the current status, version and which providers are configured.
    Status is "demo" when no provider has credentials.

    Returns:
        HealthResponse with status, version and provider information
    """
    providers = get_provider_descriptors(settings)
    any_enabled = any(p.enabled for p in providers)

    return HealthResponse(
        status="healthy" if any_enabled else "demo",
        version=settings.APP_VERSION,
        providers=providers
    )


@router.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "description": "Brand visibility scoring across LLM providers",
        "endpoints": {
            "health": "/health",
            "analyze": "/api/vln/analyze"
        },
        "workflow": {
            "step_1": "Generate comparison prompts for the brand and its competitors",
            "step_2": "Query each configured AI provider",
            "step_3": "Score brand and competitor mentions, positions and sentiment"
        }
    }
