"""
Data models and schemas for the LLM Brand Visibility Service.

This module defines the Pydantic models used for API requests/responses
and for the request-scoped analysis records. Response models serialize with
camelCase keys to keep the JSON wire format stable for existing dashboards.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Sentiment(str, Enum):
    """Coarse sentiment of a reply towards the brand."""
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class CamelModel(BaseModel):
    """Immutable model serialized with camelCase aliases."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        protected_namespaces=()
    )


# API Request Models

class AnalysisRequest(BaseModel):
    """Request model for the /api/vln/analyze endpoint."""
    brand: str = Field(
        ...,
        description="The brand's domain",
        examples=["acme.com"]
    )
    competitors: List[str] = Field(
        default_factory=list,
        description="Competitor domains, in display order (max 10)",
        examples=[["beta.io", "gamma.com"]]
    )


# Provider Models

class ProviderDescriptor(CamelModel):
    """Static description of a text-generation provider."""
    id: str = Field(..., examples=["openai"])
    display_name: str = Field(..., examples=["ChatGPT"])
    model_name: str = Field(..., examples=["gpt-4o-mini"])
    enabled: bool = Field(
        False,
        description="True when credentials for this provider are configured"
    )


class CompetitorMention(CamelModel):
    """Mention/position signal for one competitor in one reply."""
    name: str
    mentioned: bool = False
    position: Optional[int] = Field(None, ge=1, le=5)


class ProviderResponse(CamelModel):
    """One analyzed (provider, prompt) reply."""
    provider: str
    model: str
    prompt: str
    response: str
    brand_mentioned: bool = False
    brand_position: Optional[int] = Field(None, ge=1, le=5)
    competitor_mentions: List[CompetitorMention] = Field(default_factory=list)
    sentiment: Sentiment = Sentiment.NEUTRAL
    confidence: int = Field(0, ge=0, le=100)
    timestamp: datetime


# Aggregate Models

class CompetitorComparison(CamelModel):
    """Per-competitor aggregate across all replies of one request."""
    competitor: str
    visibility_score: int = Field(0, ge=0, le=100)
    mention_count: int = Field(0, ge=0)
    average_position: int = Field(
        0,
        ge=0,
        description="Rounded mean rank, 0 when the competitor was never ranked"
    )
    sentiment: Sentiment = Sentiment.NEUTRAL


class AnalysisMetadata(CamelModel):
    """Bookkeeping for one analysis run."""
    total_prompts_analyzed: int = Field(0, ge=0)
    providers_queried: List[str] = Field(default_factory=list)
    analysis_timestamp: datetime


class BrandAnalysisResult(CamelModel):
    """Terminal aggregate returned by the analyze endpoint."""
    brand: str
    competitors: List[str] = Field(default_factory=list)
    overall_visibility_score: int = Field(0, ge=0, le=100)
    ai_provider_responses: List[ProviderResponse] = Field(default_factory=list)
    competitor_comparison: List[CompetitorComparison] = Field(default_factory=list)
    analysis_metadata: AnalysisMetadata
    demo: bool = Field(
        False,
        description="True when no provider is configured and the result is synthetic"
    )


# Error / Status Models

class ErrorResponse(BaseModel):
    """Generic error body."""
    error: str


class ValidationErrorResponse(ErrorResponse):
    """Body returned with HTTP 400."""
    details: List[str] = Field(default_factory=list)


class RateLimitErrorResponse(CamelModel):
    """Body returned with HTTP 429."""
    error: str
    reset_time: datetime


class HealthResponse(BaseModel):
    """Response model for the /health endpoint."""
    status: str = Field(
        ...,
        description="Health status of the system",
        examples=["healthy", "demo"]
    )
    version: str = Field(
        ...,
        description="Application version",
        examples=["1.0.0"]
    )
    providers: List[ProviderDescriptor] = Field(default_factory=list)
