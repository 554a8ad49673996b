"""
Demo analysis generator.

Used when no provider credentials are configured: returns a randomized
result shaped exactly like a real BrandAnalysisResult. Values carry no
meaning; pass a seeded ``random.Random`` for reproducible output.
"""

import random
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from agents.scorer_aggregator import aggregate_results
from models.schemas import BrandAnalysisResult, CompetitorMention, ProviderResponse, Sentiment

DEMO_PROVIDERS = [
    {"name": "ChatGPT", "model": "gpt-4o-mini"},
    {"name": "Claude", "model": "claude-3-haiku"},
    {"name": "Gemini", "model": "gemini-1.5-flash"},
    {"name": "Perplexity", "model": "llama-3.1-sonar"},
]

DEMO_PROMPTS_PER_PROVIDER = 2
BRAND_MENTION_RATE = 0.7
COMPETITOR_MENTION_RATE = 0.6


def _demo_prompts(brand: str, competitors: List[str]) -> List[str]:
    return [
        f"What are the top 5 companies in the same industry as {brand}? Please rank them by market leadership and innovation.",
        f"Compare {brand} with {', '.join(competitors[:2])}. Which company offers the best solution and why?",
        f"I'm looking for alternatives to {brand}. What are the best competing solutions available?",
        f"Rank these companies by customer satisfaction: {', '.join([brand] + competitors[:3])}.",
    ]


def _nth(items: List[str], index: int, fallback: str) -> str:
    return items[index] if index < len(items) else fallback


def _demo_reply(prompt: str, brand: str, competitors: List[str], rng: random.Random) -> str:
    """Canned reply matching the kind of prompt."""
    companies = [brand] + competitors[:3]
    rng.shuffle(companies)
    first = _nth(companies, 0, "Industry Leader Inc")
    second = _nth(companies, 1, "Market Challenger Co")
    third = _nth(companies, 2, "Rising Star Ltd")

    if "top 5 companies" in prompt:
        return (
            "Based on market analysis, here are the top companies in this industry:\n\n"
            f"1. {first} - Market leader with innovative solutions\n"
            f"2. {second} - Strong customer base and reliable service\n"
            f"3. {third} - Growing rapidly with competitive pricing\n"
            "4. Industry Pioneer Corp - Established player with legacy systems\n"
            "5. Innovation Labs Inc - Emerging technology focus\n\n"
            "Each company has unique strengths in different market segments."
        )

    if "Compare" in prompt:
        return (
            "When comparing these solutions:\n\n"
            f"{brand} offers excellent user experience and robust features, making it ideal for "
            "businesses seeking comprehensive functionality. "
            f"{_nth(competitors, 0, 'Competitor A')} provides competitive pricing and good customer support. "
            f"{_nth(competitors, 1, 'Competitor B')} focuses on enterprise-grade security and scalability.\n\n"
            "For most use cases, I'd recommend evaluating based on your specific needs: "
            f"{brand} for feature richness, {_nth(competitors, 0, 'alternatives')} for budget-conscious decisions."
        )

    if "alternatives" in prompt:
        return (
            f"If you're looking for alternatives to {brand}, here are some excellent options:\n\n"
            f"• {_nth(competitors, 0, 'Alternative A')} - Similar features with different pricing model\n"
            f"• {_nth(competitors, 1, 'Alternative B')} - Strong in enterprise environments\n"
            f"• {_nth(competitors, 2, 'Alternative C')} - Best for small to medium businesses\n"
            "• Market Leader Pro - Premium option with advanced features\n\n"
            "Each alternative has its own strengths depending on your specific requirements."
        )

    return (
        "Customer satisfaction rankings based on recent surveys:\n\n"
        f"1. {first} - 4.5/5 stars (Excellent user experience)\n"
        f"2. {second} - 4.2/5 stars (Reliable service)\n"
        f"3. {third} - 4.0/5 stars (Good value for money)\n\n"
        "Factors considered include ease of use, customer support quality, "
        "feature completeness, and overall value proposition."
    )


def _demo_sentiment(brand_mentioned: bool, rng: random.Random) -> Sentiment:
    if not brand_mentioned:
        return Sentiment.NEUTRAL
    if rng.random() > 0.7:
        return Sentiment.NEGATIVE
    return Sentiment.POSITIVE if rng.random() > 0.3 else Sentiment.NEUTRAL


def generate_demo_analysis(
    brand: str,
    competitors: List[str],
    rng: Optional[random.Random] = None
) -> BrandAnalysisResult:
    """
    Generate a synthetic analysis result.

    Args:
        brand: Brand domain
        competitors: Competitor domains
        rng: Random source (default: a fresh unseeded Random)

    Returns:
        BrandAnalysisResult flagged with demo=True
    """
    rng = rng or random.Random()
    now = datetime.now(timezone.utc)
    competitors = list(competitors)
    prompts = _demo_prompts(brand, competitors)[:DEMO_PROMPTS_PER_PROVIDER]

    responses: List[ProviderResponse] = []

    for provider in DEMO_PROVIDERS:
        for prompt in prompts:
            brand_mentioned = rng.random() < BRAND_MENTION_RATE
            brand_position = rng.randint(1, 5) if brand_mentioned and rng.random() > 0.5 else None

            competitor_mentions = [
                CompetitorMention(
                    name=competitor,
                    mentioned=rng.random() < COMPETITOR_MENTION_RATE,
                    position=rng.randint(1, 5) if rng.random() > 0.6 else None
                )
                for competitor in competitors
            ]

            responses.append(ProviderResponse(
                provider=provider["name"],
                model=provider["model"],
                prompt=prompt,
                response=_demo_reply(prompt, brand, competitors, rng),
                brand_mentioned=brand_mentioned,
                brand_position=brand_position,
                competitor_mentions=competitor_mentions,
                sentiment=_demo_sentiment(brand_mentioned, rng),
                confidence=rng.randint(70, 99),
                timestamp=now - timedelta(seconds=rng.uniform(0, 3600))
            ))

    return aggregate_results(
        brand=brand,
        competitors=competitors,
        responses=responses,
        providers_queried=[p["name"] for p in DEMO_PROVIDERS],
        analysis_timestamp=now,
        demo=True
    )
