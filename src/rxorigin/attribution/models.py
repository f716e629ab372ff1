"""Data structures produced by the attribution extractor."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class AttributionRole(str, Enum):
    """Which party an attribution statement names."""

    MANUFACTURED_BY = "manufactured_by"
    MANUFACTURED_FOR = "manufactured_for"


@dataclass(frozen=True, slots=True)
class AttributionRecord:
    """One manufacturer/sponsor attribution mined from label text."""

    role: AttributionRole
    entity_name: str
    country: str | None
    phrase: str              # attribution phrase as it appeared, e.g. "Mfd. for"
    source_fragment: str     # first line of the captured block
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "role": self.role.value,
            "entity_name": self.entity_name,
            "country": self.country,
            "phrase": self.phrase,
            "source_fragment": self.source_fragment,
            "confidence": self.confidence,
        }


@dataclass(frozen=True, slots=True)
class AttributionResult:
    """Per-document outcome: at most one record per role.

    ``alternates`` keeps valid records that lost to an earlier match for the
    same role so callers can see when a label was ambiguous.
    """

    manufactured_by: AttributionRecord | None = None
    manufactured_for: AttributionRecord | None = None
    alternates: tuple[AttributionRecord, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return self.manufactured_by is None and self.manufactured_for is None

    def get(self, role: AttributionRole) -> AttributionRecord | None:
        if role is AttributionRole.MANUFACTURED_FOR:
            return self.manufactured_for
        return self.manufactured_by

    def to_dict(self) -> dict[str, Any]:
        return {
            "manufactured_by": self.manufactured_by.to_dict() if self.manufactured_by else None,
            "manufactured_for": self.manufactured_for.to_dict() if self.manufactured_for else None,
            "alternates": [record.to_dict() for record in self.alternates],
        }
