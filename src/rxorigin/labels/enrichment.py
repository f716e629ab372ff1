"""Enriched per-label origin records built on top of attribution results."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any

from rxorigin.attribution.entity import USA
from rxorigin.attribution.models import AttributionResult
from rxorigin.labels.ndc import find_best_ndc

NOT_AVAILABLE = "N/A"
MANUFACTURER_NOT_FOUND = "N/A (Not Found)"
GENERIC_NAME_MAX_WORDS = 5


@dataclass(frozen=True, slots=True)
class OriginRecord:
    """Flat row describing where a labeled product is manufactured."""

    product_ndc: str
    labeler_name: str
    brand_name: str
    generic_name: str
    marketing_start_date: str
    listing_expiration_date: str
    manufacturer_name: str
    manufacturer_by_country: str | None
    manufactured_for: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _openfda_first(label: Mapping[str, Any], field: str) -> str | None:
    openfda = label.get("openfda") or {}
    if not isinstance(openfda, Mapping):
        return None
    values = openfda.get(field) or []
    if isinstance(values, str):
        values = [values]
    for value in values:
        text = str(value).strip()
        if text:
            return text
    return None


def _display_generic_name(label: Mapping[str, Any]) -> str:
    generic = _openfda_first(label, "generic_name")
    if not generic or len(generic.split()) > GENERIC_NAME_MAX_WORDS:
        return _openfda_first(label, "brand_name") or NOT_AVAILABLE
    return generic


def is_foreign_manufactured(result: AttributionResult) -> bool:
    """True when the manufacturer carries a country other than the USA."""

    record = result.manufactured_by
    if record is None or record.country is None:
        return False
    return record.country.upper() != USA


def build_origin_record(label: Mapping[str, Any], attribution: AttributionResult) -> OriginRecord:
    """Combine openFDA metadata with the extracted attribution."""

    labeler = _openfda_first(label, "manufacturer_name")
    manufactured_by = attribution.manufactured_by
    manufactured_for = attribution.manufactured_for

    return OriginRecord(
        product_ndc=find_best_ndc(label) or NOT_AVAILABLE,
        labeler_name=labeler or NOT_AVAILABLE,
        brand_name=_openfda_first(label, "brand_name") or NOT_AVAILABLE,
        generic_name=_display_generic_name(label),
        marketing_start_date=str(label.get("effective_time") or NOT_AVAILABLE),
        listing_expiration_date=NOT_AVAILABLE,
        manufacturer_name=manufactured_by.entity_name if manufactured_by else MANUFACTURER_NOT_FOUND,
        manufacturer_by_country=manufactured_by.country if manufactured_by else None,
        manufactured_for=(manufactured_for.entity_name if manufactured_for else None) or labeler or NOT_AVAILABLE,
    )
