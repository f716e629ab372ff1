"""Manufacturing attribution extraction from label free text."""

from .extractor import extract_attribution, extract_from_text
from .models import AttributionRecord, AttributionResult, AttributionRole

__all__ = [
    "AttributionRecord",
    "AttributionResult",
    "AttributionRole",
    "extract_attribution",
    "extract_from_text",
]
