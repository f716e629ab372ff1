"""Corpus assembly: flatten and normalize the label sections worth scanning."""

from __future__ import annotations

from collections.abc import Mapping
import re
import unicodedata
from typing import Any

# Sections most likely to carry "Manufactured by/for" statements, highest
# priority first.
SECTION_PRIORITY: tuple[str, ...] = (
    "spl_unclassified_section",
    "spl_medguide",
    "information_for_patients",
    "spl_patient_package_insert",
    "how_supplied",
    "package_label_principal_display_panel",
)

PARAGRAPH_BREAK = "\n\n"

_TYPOGRAPHY = str.maketrans(
    {
        "\u00a0": " ",
        "\u2007": " ",
        "\u202f": " ",
        "\u2018": "'",
        "\u2019": "'",
        "\u201a": "'",
        "\u201b": "'",
        "\u201c": '"',
        "\u201d": '"',
        "\u201e": '"',
        "\u201f": '"',
        "\u2010": "-",
        "\u2011": "-",
        "\u2012": "-",
        "\u2013": "-",
        "\u2014": "-",
        "\u2015": "-",
        "\u2212": "-",
        "\r": "\n",
    }
)

_HORIZONTAL_WS_RE = re.compile(r"[^\S\n]+")
_NEWLINE_PADDING_RE = re.compile(r" *\n *")
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")


def normalize_section_text(text: str) -> str:
    """Clean encoding artifacts while keeping line and paragraph structure."""

    normalized = unicodedata.normalize("NFKC", text.replace("\r\n", "\n"))
    normalized = normalized.translate(_TYPOGRAPHY)
    normalized = _HORIZONTAL_WS_RE.sub(" ", normalized)
    normalized = _NEWLINE_PADDING_RE.sub("\n", normalized)
    normalized = _EXCESS_NEWLINES_RE.sub(PARAGRAPH_BREAK, normalized)
    return normalized.strip()


def flatten_section(value: Any) -> str:
    """Return section text as one string; list paragraphs are newline-joined."""

    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return "\n".join(str(part) for part in value if part is not None)
    return str(value)


def build_corpus(document: Mapping[str, Any] | None, sections: tuple[str, ...] = SECTION_PRIORITY) -> str:
    """Concatenate normalized sections in priority order, skipping repeats."""

    if not isinstance(document, Mapping):
        return ""

    parts: list[str] = []
    seen: set[str] = set()
    for key in sections:
        raw = document.get(key)
        if not raw:
            continue
        cleaned = normalize_section_text(flatten_section(raw))
        if not cleaned or cleaned in seen:
            continue
        seen.add(cleaned)
        parts.append(cleaned)

    return PARAGRAPH_BREAK.join(parts)
