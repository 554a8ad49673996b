"""
Node functions for the brand analysis LangGraph workflow.
"""

import logging

from agents.brand_analysis_agent.models import BrandAnalysisState
from agents.prompt_generator import generate_analysis_prompts
from agents.provider_dispatcher import MAX_TOKENS, PROMPTS_PER_PROVIDER, dispatch_prompts
from agents.scorer_aggregator import aggregate_results

logger = logging.getLogger(__name__)


def generate_prompts(state: BrandAnalysisState) -> dict:
    """Node: Build the analysis prompts."""
    brand = state["brand"]
    competitors = state.get("competitors", [])

    prompts = generate_analysis_prompts(brand, competitors)
    logger.info(f"📝 Generated {len(prompts)} prompts for {brand} ({len(competitors)} competitors)")

    return {"prompts": prompts}


def query_providers(state: BrandAnalysisState) -> dict:
    """Node: Query every provider with the leading prompts."""
    providers = state.get("providers", [])
    logger.info(f"🧪 Querying {len(providers)} providers...")

    responses = dispatch_prompts(
        providers=providers,
        prompts=state.get("prompts", []),
        brand=state["brand"],
        competitors=state.get("competitors", []),
        max_tokens=state.get("max_tokens", MAX_TOKENS),
        prompts_per_provider=state.get("prompts_per_provider", PROMPTS_PER_PROVIDER)
    )

    return {"responses": responses}


def aggregate(state: BrandAnalysisState) -> dict:
    """Node: Fold the responses into the final result."""
    result = aggregate_results(
        brand=state["brand"],
        competitors=state.get("competitors", []),
        responses=state.get("responses", []),
        providers_queried=[p.name for p in state.get("providers", [])]
    )
    logger.info(f"✅ Brand analysis complete: {result.overall_visibility_score}% visibility")

    return {"result": result}
