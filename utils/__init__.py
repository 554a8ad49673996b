# Utilities package

from .helpers import (
    normalize_domain,
    registrable_label,
    round_half_up,
    truncate_text
)

__all__ = [
    "normalize_domain",
    "registrable_label",
    "round_half_up",
    "truncate_text"
]
