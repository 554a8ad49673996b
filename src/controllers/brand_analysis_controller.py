"""
Brand Analysis Controller

Handles business logic for the analyze endpoint: validation, rate limiting,
provider selection and the demo fallback.
"""

import logging
from typing import List, Optional, Sequence

from agents.ai_providers import TextGenerationProvider, get_enabled_providers
from agents.brand_analysis_agent import run_brand_analysis_workflow
from agents.demo_data import generate_demo_analysis
from config.settings import settings
from models.schemas import BrandAnalysisResult
from utils.errors import RateLimitError, ValidationError
from utils.rate_limiter import RateLimiter
from utils.validation import CleanAnalysisRequest, validate_brand_analysis_request

logger = logging.getLogger(__name__)

ANONYMOUS_CLIENT = "anonymous"


def get_client_identifier(forwarded_for: Optional[str], real_ip: Optional[str]) -> str:
    """Identify the caller by the first forwarded address, then X-Real-IP."""
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    if real_ip and real_ip.strip():
        return real_ip.strip()
    return ANONYMOUS_CLIENT


def validate_request(brand: Optional[str], competitors: Optional[List[str]]) -> CleanAnalysisRequest:
    """
    Validate and normalize the request body.

    Raises:
        ValidationError: If any domain is invalid, duplicated, or there are
            too many competitors
    """
    validation = validate_brand_analysis_request(
        brand,
        competitors or [],
        max_competitors=settings.MAX_COMPETITORS
    )
    if not validation.success:
        logger.info(f"Validation failed: {validation.errors}")
        raise ValidationError(validation.errors, code=validation.code)
    return validation.data


def enforce_rate_limit(rate_limiter: RateLimiter, client_id: str) -> None:
    """
    Count this request against the caller's quota.

    Raises:
        RateLimitError: If the caller exceeded its quota
    """
    result = rate_limiter.check(client_id)
    if not result.allowed:
        logger.warning(f"Rate limit exceeded for {client_id} until {result.reset_time.isoformat()}")
        raise RateLimitError(result.reset_time)


def log_progress(step: str, status: str, message: str) -> None:
    """Progress callback for the analysis workflow."""
    logger.info(f"[{step}] {status}: {message}")


def run_analysis(
    brand: str,
    competitors: List[str],
    providers: Optional[Sequence[TextGenerationProvider]] = None
) -> BrandAnalysisResult:
    """
    Run the analysis for an already validated request.

    Args:
        brand: Normalized brand domain
        competitors: Normalized competitor domains
        providers: Providers to query (default: every enabled provider)

    Returns:
        BrandAnalysisResult, synthetic when no provider is enabled
    """
    if providers is None:
        providers = get_enabled_providers(settings)

    if not providers:
        logger.info("No AI providers configured, returning demo data")
        return generate_demo_analysis(brand, competitors)

    return run_brand_analysis_workflow(
        brand=brand,
        competitors=competitors,
        providers=providers,
        max_tokens=settings.MAX_OUTPUT_TOKENS,
        prompts_per_provider=settings.PROMPTS_PER_PROVIDER,
        progress_callback=log_progress
    )


def execute_brand_analysis(
    brand: Optional[str],
    competitors: Optional[List[str]],
    client_id: str,
    rate_limiter: RateLimiter,
    providers: Optional[Sequence[TextGenerationProvider]] = None
) -> BrandAnalysisResult:
    """
    Validate, rate limit and analyze one request.

    Validation runs first, so invalid requests never consume quota.

    Raises:
        ValidationError: Invalid request (HTTP 400)
        RateLimitError: Quota exceeded (HTTP 429)
    """
    clean = validate_request(brand, competitors)
    enforce_rate_limit(rate_limiter, client_id)

    logger.info(f"Analyzing {clean.brand} against {len(clean.competitors)} competitors for {client_id}")
    return run_analysis(clean.brand, clean.competitors, providers)
