"""
Response Analyzer

Scans one raw provider reply for brand/competitor mentions, ranked-list
positions and a coarse sentiment signal.

An entity counts as mentioned when the reply contains its domain, its domain
with the dots removed ("examplecom"), or its registrable label ("example" for
"docs.example.co.uk") as a whole word. Labels shorter than three characters,
and labels shared by two domains of the same request, are ignored.

Position extraction is a heuristic over five numbered-list patterns, not a
list parser: for each pattern ("1." .. "5.") every captured segment that
mentions the entity sets that rank, so the last match scanned wins.
"""

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from models.schemas import CompetitorMention, Sentiment
from utils.helpers import registrable_label

POSITIVE_WORDS = [
    "best", "excellent", "great", "outstanding",
    "superior", "leading", "innovative", "recommended"
]
NEGATIVE_WORDS = [
    "worst", "poor", "bad", "inferior",
    "limited", "lacking", "problematic"
]

RANKING_PATTERNS = [
    re.compile(rf"{rank}\.\s*([^.\n]+)") for rank in range(1, 6)
]

_POSITIVE_RES = [re.compile(rf"\b{word}\b") for word in POSITIVE_WORDS]
_NEGATIVE_RES = [re.compile(rf"\b{word}\b") for word in NEGATIVE_WORDS]

BRAND_PLACEHOLDER = " BRAND "
MIN_LABEL_LENGTH = 3
MIN_CONFIDENCE = 50
MAX_CONFIDENCE = 100
CONFIDENCE_PER_WORD = 20


@dataclass(frozen=True)
class ResponseAnalysis:
    """Analysis fields of a ProviderResponse."""
    brand_mentioned: bool
    brand_position: Optional[int]
    competitor_mentions: List[CompetitorMention] = field(default_factory=list)
    sentiment: Sentiment = Sentiment.NEUTRAL
    confidence: int = MIN_CONFIDENCE


class EntityMatcher:
    """Case-insensitive matcher for one domain."""

    def __init__(self, domain: str, match_label: bool = True):
        self.domain = domain.lower()
        self.dotless = self.domain.replace(".", "")

        label = registrable_label(self.domain) if match_label else ""
        self._label_re = (
            re.compile(rf"\b{re.escape(label)}\b")
            if len(label) >= MIN_LABEL_LENGTH else None
        )

    def matches(self, text_lower: str) -> bool:
        if self.domain in text_lower or self.dotless in text_lower:
            return True
        return bool(self._label_re and self._label_re.search(text_lower))

    def find_position(self, text_lower: str) -> Optional[int]:
        """Return the rank (1-5) of the last numbered item mentioning the domain."""
        position = None

        for rank, pattern in enumerate(RANKING_PATTERNS, start=1):
            for match in pattern.finditer(text_lower):
                if self.matches(match.group(1)):
                    position = rank

        return position


def shared_labels(domains: List[str]) -> Set[str]:
    """Registrable labels that more than one of ``domains`` resolves to."""
    counts = Counter(registrable_label(domain) for domain in domains)
    return {label for label, count in counts.items() if label and count > 1}


def score_sentiment(text_lower: str, brand: str) -> Tuple[Sentiment, int, int]:
    """
    Count sentiment words in the reply with the brand masked out.

    Returns:
        Tuple of (sentiment, positive_count, negative_count)
    """
    brand_lower = brand.lower()
    context = text_lower.replace(brand_lower, BRAND_PLACEHOLDER) if brand_lower else text_lower

    positive_count = sum(len(regex.findall(context)) for regex in _POSITIVE_RES)
    negative_count = sum(len(regex.findall(context)) for regex in _NEGATIVE_RES)

    if positive_count > negative_count:
        sentiment = Sentiment.POSITIVE
    elif negative_count > positive_count:
        sentiment = Sentiment.NEGATIVE
    else:
        sentiment = Sentiment.NEUTRAL

    return sentiment, positive_count, negative_count


def calculate_confidence(positive_count: int, negative_count: int) -> int:
    return min(
        MAX_CONFIDENCE,
        max(MIN_CONFIDENCE, (positive_count + negative_count) * CONFIDENCE_PER_WORD + MIN_CONFIDENCE)
    )


def analyze_response(response: str, brand: str, competitors: List[str]) -> ResponseAnalysis:
    """
    Analyze a provider reply for brand visibility signals.

    Deterministic and total: any string (including empty) yields a result.

    Args:
        response: Raw reply text
        brand: Brand domain
        competitors: Competitor domains

    Returns:
        ResponseAnalysis
    """
    text_lower = (response or "").lower()
    ambiguous = shared_labels([brand] + list(competitors))
    brand_matcher = EntityMatcher(brand, match_label=registrable_label(brand) not in ambiguous)

    competitor_mentions = []
    for competitor in competitors:
        matcher = EntityMatcher(competitor, match_label=registrable_label(competitor) not in ambiguous)
        competitor_mentions.append(CompetitorMention(
            name=competitor,
            mentioned=matcher.matches(text_lower),
            position=matcher.find_position(text_lower)
        ))

    sentiment, positive_count, negative_count = score_sentiment(text_lower, brand)

    return ResponseAnalysis(
        brand_mentioned=brand_matcher.matches(text_lower),
        brand_position=brand_matcher.find_position(text_lower),
        competitor_mentions=competitor_mentions,
        sentiment=sentiment,
        confidence=calculate_confidence(positive_count, negative_count)
    )
