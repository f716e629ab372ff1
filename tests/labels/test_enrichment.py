from __future__ import annotations

from rxorigin.attribution.extractor import extract_attribution, extract_from_text
from rxorigin.attribution.models import AttributionResult
from rxorigin.labels.enrichment import (
    MANUFACTURER_NOT_FOUND,
    NOT_AVAILABLE,
    build_origin_record,
    is_foreign_manufactured,
)


def _label(**overrides: object) -> dict[str, object]:
    label: dict[str, object] = {
        "id": "2f1c_0093-7363",
        "effective_time": "20240115",
        "openfda": {
            "manufacturer_name": ["Apotex Corp"],
            "brand_name": ["Tadalafil"],
            "generic_name": ["TADALAFIL"],
            "product_ndc": ["60505-4561"],
        },
        "spl_unclassified_section": [
            "Manufactured by: Cipla Ltd., Goa, India\nManufactured for: Apotex Corp., Weston, FL 33326",
        ],
    }
    label.update(overrides)
    return label


def test_origin_record_combines_metadata_and_attribution() -> None:
    label = _label()

    record = build_origin_record(label, extract_attribution(label))

    assert record.product_ndc == "60505-4561"
    assert record.labeler_name == "Apotex Corp"
    assert record.brand_name == "Tadalafil"
    assert record.generic_name == "TADALAFIL"
    assert record.marketing_start_date == "20240115"
    assert record.listing_expiration_date == NOT_AVAILABLE
    assert record.manufacturer_name == "Cipla Ltd."
    assert record.manufacturer_by_country == "India"
    assert record.manufactured_for == "Apotex Corp."


def test_long_generic_name_falls_back_to_brand() -> None:
    label = _label(
        openfda={
            "brand_name": ["Azor"],
            "generic_name": ["AMLODIPINE BESYLATE AND OLMESARTAN MEDOXOMIL TABLETS FILM COATED"],
        }
    )

    record = build_origin_record(label, AttributionResult())

    assert record.generic_name == "Azor"


def test_missing_attribution_uses_placeholders_and_labeler() -> None:
    label = {"openfda": {"manufacturer_name": ["Lilly"]}}

    record = build_origin_record(label, AttributionResult())

    assert record.product_ndc == NOT_AVAILABLE
    assert record.brand_name == NOT_AVAILABLE
    assert record.generic_name == NOT_AVAILABLE
    assert record.marketing_start_date == NOT_AVAILABLE
    assert record.manufacturer_name == MANUFACTURER_NOT_FOUND
    assert record.manufacturer_by_country is None
    assert record.manufactured_for == "Lilly"


def test_origin_record_to_dict_has_flat_fields() -> None:
    label = _label()
    payload = build_origin_record(label, extract_attribution(label)).to_dict()

    assert payload["manufacturer_name"] == "Cipla Ltd."
    assert payload["manufacturer_by_country"] == "India"
    assert set(payload) >= {"product_ndc", "labeler_name", "manufactured_for"}


def test_foreign_manufacture_requires_non_usa_country() -> None:
    assert is_foreign_manufactured(extract_from_text("Manufactured by: Lupin Limited, Pune, India"))
    assert not is_foreign_manufactured(extract_from_text("Manufactured by: Pfizer Labs, New York, NY 10017"))
    assert not is_foreign_manufactured(extract_from_text("Manufactured by: Global Health Inc."))
    assert not is_foreign_manufactured(extract_from_text("Manufactured for: Lupin Limited, Pune, India"))
    assert not is_foreign_manufactured(AttributionResult())
