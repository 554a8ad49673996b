"""
Scorer Aggregator

Folds the analyzed provider responses of one request into the overall brand
visibility score and the per-competitor comparison table.

Scores are:
    overall    = round(100 * responses mentioning the brand / total responses)
    competitor = round(100 * responses mentioning the competitor / total responses)

An empty response set scores 0. Competitor sentiment is not rolled up and is
always reported as neutral.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from models.schemas import (
    AnalysisMetadata,
    BrandAnalysisResult,
    CompetitorComparison,
    ProviderResponse,
    Sentiment
)
from utils.helpers import round_half_up

logger = logging.getLogger(__name__)


def _percentage(count: int, total: int) -> int:
    if total == 0:
        return 0
    return round_half_up(count / total * 100)


def calculate_visibility_score(responses: Sequence[ProviderResponse]) -> int:
    """
    Calculate the brand visibility score.

    Args:
        responses: All analyzed responses of one request

    Returns:
        int: Percentage (0-100) of responses mentioning the brand
    """
    brand_mentions = sum(1 for r in responses if r.brand_mentioned)
    return _percentage(brand_mentions, len(responses))


def build_competitor_comparison(
    competitors: Sequence[str],
    responses: Sequence[ProviderResponse]
) -> List[CompetitorComparison]:
    """
    Build one comparison row per competitor, in competitor order.

    Args:
        competitors: Competitor domains
        responses: All analyzed responses of one request

    Returns:
        List of CompetitorComparison
    """
    total_responses = len(responses)
    comparison = []

    for competitor in competitors:
        mention_count = 0
        positions: List[int] = []

        for response in responses:
            entries = [cm for cm in response.competitor_mentions if cm.name == competitor]
            if any(cm.mentioned for cm in entries):
                mention_count += 1
            positions.extend(cm.position for cm in entries if cm.position)

        average_position = round_half_up(sum(positions) / len(positions)) if positions else 0

        comparison.append(CompetitorComparison(
            competitor=competitor,
            visibility_score=_percentage(mention_count, total_responses),
            mention_count=mention_count,
            average_position=average_position,
            sentiment=Sentiment.NEUTRAL
        ))

    return comparison


def aggregate_results(
    brand: str,
    competitors: Sequence[str],
    responses: Sequence[ProviderResponse],
    providers_queried: Sequence[str],
    analysis_timestamp: Optional[datetime] = None,
    demo: bool = False
) -> BrandAnalysisResult:
    """
    Assemble the terminal BrandAnalysisResult.

    Args:
        brand: Brand domain
        competitors: Competitor domains
        responses: All analyzed responses, in call order
        providers_queried: Display names of the providers that were queried
        analysis_timestamp: Defaults to now (UTC)
        demo: Marks a synthetic result

    Returns:
        BrandAnalysisResult
    """
    if not responses:
        logger.warning(f"No responses to aggregate for {brand}; visibility defaults to 0")

    overall_score = calculate_visibility_score(responses)
    logger.info(
        f"Visibility for {brand}: {overall_score}% "
        f"({sum(1 for r in responses if r.brand_mentioned)}/{len(responses)} responses)"
    )

    return BrandAnalysisResult(
        brand=brand,
        competitors=list(competitors),
        overall_visibility_score=overall_score,
        ai_provider_responses=list(responses),
        competitor_comparison=build_competitor_comparison(competitors, responses),
        analysis_metadata=AnalysisMetadata(
            total_prompts_analyzed=len(responses),
            providers_queried=list(providers_queried),
            analysis_timestamp=analysis_timestamp or datetime.now(timezone.utc)
        ),
        demo=demo
    )
