"""
Provider Dispatcher

Sends each prompt to each enabled provider, one call at a time, and turns
every reply into an analyzed ProviderResponse. A failed call never aborts the
run: it is logged and recorded as a degraded response instead.
"""

import logging
from datetime import datetime, timezone
from typing import List, Sequence

from agents.ai_providers import TextGenerationProvider
from agents.response_analyzer import analyze_response
from models.schemas import CompetitorMention, ProviderResponse, Sentiment
from utils.helpers import truncate_text

logger = logging.getLogger(__name__)

# Constants
MAX_TOKENS = 1000
PROMPTS_PER_PROVIDER = 3


def build_error_response(
    provider: TextGenerationProvider,
    prompt: str,
    competitors: Sequence[str]
) -> ProviderResponse:
    """Degraded record for a call that failed."""
    return ProviderResponse(
        provider=provider.name,
        model=provider.model,
        prompt=prompt,
        response=f"Error: Unable to get response from {provider.name}",
        brand_mentioned=False,
        brand_position=None,
        competitor_mentions=[CompetitorMention(name=c, mentioned=False) for c in competitors],
        sentiment=Sentiment.NEUTRAL,
        confidence=0,
        timestamp=datetime.now(timezone.utc)
    )


def query_provider(
    provider: TextGenerationProvider,
    prompt: str,
    brand: str,
    competitors: Sequence[str],
    max_tokens: int = MAX_TOKENS
) -> ProviderResponse:
    """
    Query one provider with one prompt and analyze the reply.

    Args:
        provider: Enabled provider adapter
        prompt: Prompt text
        brand: Brand domain
        competitors: Competitor domains
        max_tokens: Output length cap, identical for all providers

    Returns:
        ProviderResponse (degraded on failure, never raises)
    """
    try:
        text = provider.generate(prompt, max_tokens)
    except Exception as e:
        logger.error(f"Error querying {provider.name}: {e}")
        return build_error_response(provider, prompt, competitors)

    analysis = analyze_response(text, brand, list(competitors))

    return ProviderResponse(
        provider=provider.name,
        model=provider.model,
        prompt=prompt,
        response=text,
        brand_mentioned=analysis.brand_mentioned,
        brand_position=analysis.brand_position,
        competitor_mentions=analysis.competitor_mentions,
        sentiment=analysis.sentiment,
        confidence=analysis.confidence,
        timestamp=datetime.now(timezone.utc)
    )


def dispatch_prompts(
    providers: Sequence[TextGenerationProvider],
    prompts: Sequence[str],
    brand: str,
    competitors: Sequence[str],
    max_tokens: int = MAX_TOKENS,
    prompts_per_provider: int = PROMPTS_PER_PROVIDER
) -> List[ProviderResponse]:
    """
    Query every provider with the leading prompts, sequentially.

    Order is provider-major, then prompt order; the result always holds
    ``len(providers) * min(prompts_per_provider, len(prompts))`` records.

    Args:
        providers: Enabled providers
        prompts: Generated prompts
        brand: Brand domain
        competitors: Competitor domains
        max_tokens: Output length cap
        prompts_per_provider: How many leading prompts each provider gets

    Returns:
        List of ProviderResponse in call order
    """
    selected_prompts = list(prompts)[:max(0, prompts_per_provider)]
    responses: List[ProviderResponse] = []

    logger.info(f"Querying {len(providers)} providers with {len(selected_prompts)} prompts each")

    for provider in providers:
        for i, prompt in enumerate(selected_prompts):
            logger.info(f"  {provider.name} [{i+1}/{len(selected_prompts)}]: {truncate_text(prompt, 60)}")
            response = query_provider(provider, prompt, brand, competitors, max_tokens)
            responses.append(response)

    failed = sum(1 for r in responses if r.confidence == 0)
    logger.info(f"Completed {len(responses)} provider calls ({failed} failed)")

    return responses
