"""
Prompt Generator

Builds the fixed set of natural-language prompts sent to every provider.
Domains are interpolated as-is; the caller passes already-normalized values.
"""

from typing import List

MAIN_COMPETITOR_PLACEHOLDER = "their main competitor"
COMPETITORS_PLACEHOLDER = "its main competitors"


def generate_analysis_prompts(brand: str, competitors: List[str]) -> List[str]:
    """
    Generate the analysis prompts for a brand and its competitors.

    Args:
        brand: Brand domain
        competitors: Competitor domains, order preserved

    Returns:
        List of 8 prompts, in a fixed order
    """
    all_companies = [brand] + list(competitors)
    compared = ", ".join(competitors[:3]) or COMPETITORS_PLACEHOLDER
    main_competitor = competitors[0] if competitors else MAIN_COMPETITOR_PLACEHOLDER

    return [
        f"What are the top 5 companies in the same industry as {brand}? Please rank them by market leadership and innovation.",
        f"Compare {brand} with {compared}. Which company offers the best solution and why?",
        f"I'm looking for alternatives to {brand}. What are the best competing solutions available?",
        f"Rank these companies by customer satisfaction and product quality: {', '.join(all_companies)}.",
        f"Which company between {brand} and {main_competitor} would you recommend for a business solution?",
        f"What are the pros and cons of {brand} compared to its main competitors?",
        f"List the market leaders in {brand}'s industry and explain their competitive advantages.",
        f"If I had to choose between {', '.join(all_companies[:4])}, which would be the best option and why?",
    ]
