"""Attribution phrase scanning over a normalized corpus.

Every "Manufactured for/by"-style phrase is located left to right, and the
text following each one is captured up to the next phrase, a blank line, or
the end of the corpus.  Bare "By" captures are then filtered so ordinary
prepositions in running prose are not mistaken for attribution markers.
"""

from __future__ import annotations

from dataclasses import dataclass
import re

from rxorigin.attribution.models import AttributionRole

# Longer alternatives come first so "Manufactured by" never degrades to "by".
_FOR_PATTERNS: tuple[str, ...] = (
    r"manufactured\s+for",
    r"mfd\.?\s+for",
    r"mfr\.?\s+for",
)
_BY_PATTERNS: tuple[str, ...] = (
    r"manufactured\s+by",
    r"mfd\.?\s+by",
    r"mfr\.?\s+by",
    r"distributed\s+by",
    r"marketed\s+by",
    r"by",
)

_FOR_RE = re.compile(r"(?:" + "|".join(_FOR_PATTERNS) + r")\Z", re.IGNORECASE)
_PHRASE_RE = re.compile(
    r"\b(?P<phrase>" + "|".join(_FOR_PATTERNS + _BY_PATTERNS) + r")\b(?P<sep>[:\s]*)",
    re.IGNORECASE,
)
_PARAGRAPH_BREAK_RE = re.compile(r"\n[^\S\n]*\n")

BARE_BY_MAX_WORDS = 5


@dataclass(frozen=True, slots=True)
class PhraseMatch:
    """One attribution phrase and the text block it introduces."""

    phrase: str
    role: AttributionRole
    explicit_colon: bool
    text: str
    start: int   # offset of the phrase
    end: int     # offset where the captured text stops

    @property
    def is_bare_by(self) -> bool:
        return self.phrase.lower() == "by"

    @property
    def word_count(self) -> int:
        return len(self.text.split())


def classify_phrase(phrase: str) -> AttributionRole:
    """Map a matched phrase onto the role it attributes."""

    normalized = " ".join(phrase.split())
    if _FOR_RE.match(normalized):
        return AttributionRole.MANUFACTURED_FOR
    return AttributionRole.MANUFACTURED_BY


def scan_phrases(corpus: str) -> list[PhraseMatch]:
    """Return every phrase occurrence with its captured text, in document order."""

    if not corpus:
        return []

    occurrences = list(_PHRASE_RE.finditer(corpus))
    matches: list[PhraseMatch] = []

    for index, occurrence in enumerate(occurrences):
        body_start = occurrence.end()
        stop = occurrences[index + 1].start() if index + 1 < len(occurrences) else len(corpus)

        paragraph_break = _PARAGRAPH_BREAK_RE.search(corpus, body_start, stop)
        if paragraph_break is not None:
            stop = paragraph_break.start()

        text = corpus[body_start:stop]
        if not text.strip():
            continue

        phrase = occurrence.group("phrase")
        matches.append(
            PhraseMatch(
                phrase=phrase,
                role=classify_phrase(phrase),
                explicit_colon=":" in occurrence.group("sep"),
                text=text,
                start=occurrence.start(),
                end=stop,
            )
        )

    return matches


def drop_prose_matches(matches: list[PhraseMatch], *, max_words: int = BARE_BY_MAX_WORDS) -> list[PhraseMatch]:
    """Remove bare "By" captures that read as ordinary prose.

    A bare "By" without a colon is prose when its capture runs longer than
    *max_words*, or when it picks up exactly where a prose "by" left off.
    """

    kept: list[PhraseMatch] = []
    prose_end: int | None = None

    for match in matches:
        if match.is_bare_by and not match.explicit_colon:
            if match.word_count > max_words or match.start == prose_end:
                prose_end = match.end
                continue
        prose_end = None
        kept.append(match)

    return kept
