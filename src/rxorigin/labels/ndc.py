"""Product NDC selection from openFDA label records."""

from __future__ import annotations

from collections.abc import Mapping
import re
from typing import Any

_NDC_FORMAT_RE = re.compile(r"^\d[\d-]*\d$")
_HOW_SUPPLIED_NDC_RE = re.compile(r"NDC\s*:*\s*([\d-]+)", re.IGNORECASE)


def is_ndc_format(value: str) -> bool:
    """Digits and hyphens only, at least one hyphen, digit at both ends."""

    return bool(_NDC_FORMAT_RE.match(value)) and "-" in value


def _first(value: Any) -> str | None:
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _how_supplied_text(label: Mapping[str, Any]) -> str:
    value = label.get("how_supplied") or []
    if isinstance(value, str):
        return value
    return " ".join(str(part) for part in value)


def find_best_ndc(label: Mapping[str, Any]) -> str | None:
    """Pick the most trustworthy product NDC a label carries.

    Candidates are tried in order: the harmonized ``openfda.product_ndc``,
    a top-level ``product_ndc``, the tail of the ``id`` field, then the
    first "NDC 12345-678" mention in the how-supplied text.
    """

    openfda = label.get("openfda") or {}
    candidates = [
        _first(openfda.get("product_ndc")) if isinstance(openfda, Mapping) else None,
        _first(label.get("product_ndc")),
    ]

    label_id = _first(label.get("id"))
    if label_id:
        candidates.append(label_id.rsplit("_", 1)[-1])

    match = _HOW_SUPPLIED_NDC_RE.search(_how_supplied_text(label))
    if match:
        candidates.append(match.group(1))

    for candidate in candidates:
        if candidate and is_ndc_format(candidate):
            return candidate
    return None
