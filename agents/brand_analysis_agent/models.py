"""
State for the brand analysis graph.
"""

from typing import Any, List, Optional, TypedDict

from models.schemas import BrandAnalysisResult, ProviderResponse


class BrandAnalysisState(TypedDict, total=False):
    """State for the brand analysis graph."""
    # Input
    brand: str
    competitors: List[str]
    providers: List[Any]  # TextGenerationProvider instances
    max_tokens: int
    prompts_per_provider: int

    # Processing
    prompts: List[str]
    responses: List[ProviderResponse]

    # Output
    result: Optional[BrandAnalysisResult]
