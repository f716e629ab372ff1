"""Label-level helpers layered over attribution extraction."""

from .enrichment import OriginRecord, build_origin_record, is_foreign_manufactured
from .ndc import find_best_ndc

__all__ = ["OriginRecord", "build_origin_record", "find_best_ndc", "is_foreign_manufactured"]
