"""
Domain validation for analysis requests.

Requests are validated and normalized here before the pipeline sees them;
failures surface as HTTP 400 with one human-readable message per problem.
"""

import re
from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

from utils.errors import ErrorCode
from utils.helpers import normalize_domain, strip_domain_prefixes

T = TypeVar("T")

MAX_DOMAIN_LENGTH = 253

_LABEL = r"[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
_DOMAIN_RE = re.compile(rf"^(?:{_LABEL}\.)*{_LABEL}$")

_INVALID_PATTERNS = [
    re.compile(r"^\."),            # starts with dot
    re.compile(r"\.$"),            # ends with dot
    re.compile(r"\.\."),           # consecutive dots
    re.compile(r"^-"),             # starts with hyphen
    re.compile(r"-$"),             # ends with hyphen
    re.compile(r"[^a-zA-Z0-9.-]"), # invalid characters
]

MSG_REQUIRED = "Domain is required"
MSG_TOO_LONG = "Domain is too long"
MSG_INVALID = "Please enter a valid domain (e.g., example.com)"
MSG_NO_TLD = "Domain must include a top-level domain (e.g., .com, .org)"
MSG_BAD_FORMAT = "Domain contains invalid characters or format"
MSG_DUPLICATES = "Duplicate domains detected. Each domain should be unique."


@dataclass
class DomainValidationResult:
    is_valid: bool
    clean_domain: str
    errors: List[str] = field(default_factory=list)


@dataclass
class ValidationResult(Generic[T]):
    success: bool
    data: Optional[T] = None
    errors: List[str] = field(default_factory=list)
    code: Optional[str] = None


@dataclass
class CleanAnalysisRequest:
    brand: str
    competitors: List[str]


def _domain_errors(domain: str) -> List[str]:
    """Collect every validation message that applies to a raw domain."""
    if not domain:
        return [MSG_REQUIRED]

    errors = []
    if len(domain) > MAX_DOMAIN_LENGTH:
        errors.append(MSG_TOO_LONG)

    candidate = strip_domain_prefixes(domain).rstrip("/")

    if not _DOMAIN_RE.match(candidate.lower()):
        errors.append(MSG_INVALID)

    tld = candidate.rsplit(".", 1)[-1] if "." in candidate else ""
    if len(tld) < 2:
        errors.append(MSG_NO_TLD)

    if any(pattern.search(candidate) for pattern in _INVALID_PATTERNS):
        errors.append(MSG_BAD_FORMAT)

    return errors


def validate_domain(domain: Optional[str]) -> DomainValidationResult:
    """
    Validate a single domain and return its normalized form.

    Args:
        domain: Raw domain, optionally with protocol and www. prefix

    Returns:
        DomainValidationResult with the cleaned domain when valid,
        otherwise the raw input and the list of problems
    """
    raw = (domain or "").strip()
    errors = _domain_errors(raw)

    if errors:
        return DomainValidationResult(is_valid=False, clean_domain=domain, errors=errors)

    return DomainValidationResult(is_valid=True, clean_domain=normalize_domain(raw))


def validate_brand_analysis_request(
    brand: Optional[str],
    competitors: Optional[List[str]],
    max_competitors: int = 10
) -> ValidationResult[CleanAnalysisRequest]:
    """
    Validate and normalize a brand analysis request.

    Blank competitor entries are dropped before validation. Every domain is
    normalized (lower-cased, protocol and www. stripped) and the brand plus
    competitors must all be distinct afterwards.

    Args:
        brand: Brand domain
        competitors: Competitor domains in display order
        max_competitors: Upper bound on the number of competitors

    Returns:
        ValidationResult whose data holds the cleaned brand and competitors
    """
    competitors = [c for c in (competitors or []) if c and c.strip()]
    errors: List[str] = []
    code = ErrorCode.INVALID_DOMAIN

    brand_result = validate_domain(brand)
    for message in brand_result.errors:
        errors.append(f"brand: {message}")

    if len(competitors) > max_competitors:
        errors.append(f"competitors: Maximum {max_competitors} competitors allowed")
        code = ErrorCode.TOO_MANY_COMPETITORS

    competitor_results = [validate_domain(c) for c in competitors]
    for index, result in enumerate(competitor_results):
        for message in result.errors:
            errors.append(f"competitors.{index}: {message}")

    if errors:
        return ValidationResult(success=False, errors=errors, code=code)

    clean_brand = brand_result.clean_domain
    clean_competitors = [result.clean_domain for result in competitor_results]

    all_domains = [clean_brand] + clean_competitors
    if len(set(all_domains)) != len(all_domains):
        return ValidationResult(
            success=False,
            errors=[MSG_DUPLICATES],
            code=ErrorCode.DUPLICATE_DOMAINS
        )

    return ValidationResult(
        success=True,
        data=CleanAnalysisRequest(brand=clean_brand, competitors=clean_competitors)
    )
