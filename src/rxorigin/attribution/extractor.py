"""Free-text manufacturing attribution extraction for drug label documents.

The pipeline is staged: assemble a corpus from the label sections, find the
attribution phrases, drop prose false positives, pull an entity and country
out of each capture, then assign records first-match-wins per role.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from rxorigin.attribution.corpus import build_corpus
from rxorigin.attribution.entity import EntityInfo, extract_entity
from rxorigin.attribution.models import AttributionRecord, AttributionResult, AttributionRole
from rxorigin.attribution.phrases import PhraseMatch, drop_prose_matches, scan_phrases

_STRONG_PHRASE_CONFIDENCE = 0.9     # "Manufactured by", "Mfd. for", ...
_TRADE_PHRASE_CONFIDENCE = 0.7      # "Distributed by", "Marketed by"
_COLON_BY_CONFIDENCE = 0.6          # "By:"
_BARE_BY_CONFIDENCE = 0.4
_NO_COUNTRY_PENALTY = 0.2


def _phrase_confidence(match: PhraseMatch) -> float:
    if match.is_bare_by:
        return _COLON_BY_CONFIDENCE if match.explicit_colon else _BARE_BY_CONFIDENCE
    head = match.phrase.split(None, 1)[0].lower()
    if head in {"distributed", "marketed"}:
        return _TRADE_PHRASE_CONFIDENCE
    return _STRONG_PHRASE_CONFIDENCE


def _confidence(match: PhraseMatch, entity: EntityInfo) -> float:
    score = _phrase_confidence(match)
    if entity.country is None:
        score -= _NO_COUNTRY_PENALTY
    return round(min(1.0, max(0.0, score)), 2)


def _build_record(match: PhraseMatch) -> AttributionRecord | None:
    entity = extract_entity(match.text)
    if entity is None:
        return None
    return AttributionRecord(
        role=match.role,
        entity_name=entity.name,
        country=entity.country,
        phrase=" ".join(match.phrase.split()),
        source_fragment=entity.source_fragment,
        confidence=_confidence(match, entity),
    )


def extract_from_text(corpus: str) -> AttributionResult:
    """Extract attributions from an already assembled corpus."""

    if not isinstance(corpus, str) or not corpus.strip():
        return AttributionResult()

    assigned: dict[AttributionRole, AttributionRecord] = {}
    alternates: list[AttributionRecord] = []

    for match in drop_prose_matches(scan_phrases(corpus)):
        record = _build_record(match)
        if record is None:
            continue
        if record.role in assigned:
            alternates.append(record)
            continue
        assigned[record.role] = record

    return AttributionResult(
        manufactured_by=assigned.get(AttributionRole.MANUFACTURED_BY),
        manufactured_for=assigned.get(AttributionRole.MANUFACTURED_FOR),
        alternates=tuple(alternates),
    )


def extract_attribution(document: Mapping[str, Any] | None) -> AttributionResult:
    """Extract "manufactured by/for" attributions from a label document.

    Missing sections, empty text and unrecognized input all degrade to an
    empty result; this function never raises for malformed documents.
    """

    return extract_from_text(build_corpus(document))
