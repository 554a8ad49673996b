"""
Brand Analysis Routes

Endpoint for the brand visibility analysis.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import JSONResponse

from agents.ai_providers import TextGenerationProvider, get_enabled_providers
from config.settings import settings
from models.schemas import (
    AnalysisRequest,
    BrandAnalysisResult,
    ErrorResponse,
    RateLimitErrorResponse,
    ValidationErrorResponse
)
from src.controllers.brand_analysis_controller import (
    execute_brand_analysis,
    get_client_identifier
)
from utils.errors import VisibilityError
from utils.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/vln", tags=["Brand Analysis"])

ANALYSIS_FAILED_MESSAGE = "Failed to perform brand analysis"


def get_rate_limiter(request: Request) -> RateLimiter:
    """Dependency: the limiter built by the app factory."""
    return request.app.state.rate_limiter


def get_providers() -> List[TextGenerationProvider]:
    """Dependency: providers enabled by the configured credentials."""
    return get_enabled_providers(settings)


@router.post(
    "/analyze",
    response_model=BrandAnalysisResult,
    responses={
        400: {"model": ValidationErrorResponse},
        429: {"model": RateLimitErrorResponse},
        500: {"model": ErrorResponse}
    }
)
def analyze_brand(
    body: AnalysisRequest,
    x_forwarded_for: Optional[str] = Header(None),
    x_real_ip: Optional[str] = Header(None),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    providers: List[TextGenerationProvider] = Depends(get_providers)
):
    """
    Analyze how visible a brand is across AI providers.

    Sends a fixed set of prompts to every configured provider, scans the
    replies for brand and competitor mentions and returns the aggregated
    visibility scores. Without configured providers a demo result is
    returned.

    Returns:
        BrandAnalysisResult

    Errors:
        400: Invalid domains, duplicates or too many competitors
        429: Rate limit exceeded
        500: Unexpected internal failure
    """
    client_id = get_client_identifier(x_forwarded_for, x_real_ip)

    try:
        return execute_brand_analysis(
            brand=body.brand,
            competitors=body.competitors,
            client_id=client_id,
            rate_limiter=rate_limiter,
            providers=providers
        )

    except VisibilityError:
        raise
    except Exception:
        logger.exception("Analysis error")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": ANALYSIS_FAILED_MESSAGE}
        )
