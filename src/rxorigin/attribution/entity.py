"""Entity name and country heuristics for a captured attribution block."""

from __future__ import annotations

from dataclasses import dataclass
import re

US_STATE_CODES: tuple[str, ...] = (
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA",
    "HI", "ID", "IL", "IN", "IA", "KS", "KY", "LA", "ME", "MD",
    "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH", "NJ",
    "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC",
    "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY",
)

# Common non-US manufacturing locations, matched as plain substrings.
FOREIGN_COUNTRIES: tuple[str, ...] = (
    "INDIA",
    "IRELAND",
    "GERMANY",
    "SWITZERLAND",
    "JAPAN",
    "CHINA",
    "KOREA",
    "ITALY",
    "FRANCE",
    "CANADA",
    "SPAIN",
    "CAYMAN ISLANDS",
)

USA = "USA"
MIN_NAME_LENGTH = 3

_STATE_ZIP_RE = re.compile(r"\b(?:" + "|".join(US_STATE_CODES) + r")\s+\d{5}", re.IGNORECASE)
_USA_TOKEN_RE = re.compile(r"\bU\.?S\.?A\b", re.IGNORECASE)
_FOREIGN_COUNTRY_RES: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (name, re.compile(re.escape(name), re.IGNORECASE)) for name in FOREIGN_COUNTRIES
)
# "Hyderabad - 500 090" style postal suffixes: a hyphen followed by digits,
# cut from the first space of the word run leading up to it.
_POSTAL_HYPHEN_RE = re.compile(r"-\s*\d")
_WORD_OR_SPACE_RE = re.compile(r"[\w\s]")
_SPACE_RE = re.compile(r"\s")
_SEPARATOR_CHARS = ",;:"
_ABBREVIATION_MAX_CHARS = 4


@dataclass(frozen=True, slots=True)
class CountryMatch:
    """Detected country and where its token starts in the line."""

    country: str
    token_start: int


@dataclass(frozen=True, slots=True)
class EntityInfo:
    """Cleaned entity name with its detected country."""

    name: str
    country: str | None
    source_fragment: str


def first_line(text: str) -> str:
    return text.strip().split("\n", 1)[0].strip()


def _last_match(pattern: re.Pattern[str], line: str) -> re.Match[str] | None:
    last = None
    for last in pattern.finditer(line):
        pass
    return last


def detect_country(line: str) -> CountryMatch | None:
    """Find the country a line names, US addresses taking precedence.

    Offsets always refer to *line* itself; matching is case-insensitive
    without building a case-mapped copy, whose length may differ.
    """

    for pattern in (_USA_TOKEN_RE, _STATE_ZIP_RE):
        match = _last_match(pattern, line)
        if match is not None:
            return CountryMatch(country=USA, token_start=match.start())

    best: CountryMatch | None = None
    for name, pattern in _FOREIGN_COUNTRY_RES:
        match = _last_match(pattern, line)
        if match is None:
            continue
        if best is None or match.start() > best.token_start:
            best = CountryMatch(country=name.title(), token_start=match.start())
    return best


def _strip_postal_suffix(name: str) -> str:
    """Drop a "City - 500 090" tail, scanning each character a bounded number of times."""

    for hyphen in _POSTAL_HYPHEN_RE.finditer(name):
        run_start = hyphen.start()
        while run_start > 0 and _WORD_OR_SPACE_RE.match(name, run_start - 1):
            run_start -= 1
        # The cut needs a space plus at least one more character before the hyphen.
        space = _SPACE_RE.search(name, run_start, hyphen.start() - 1)
        if space is not None:
            return name[: space.start()]
    return name


def _rstrip_separators(name: str) -> str:
    while True:
        trimmed = name.rstrip().rstrip(_SEPARATOR_CHARS)
        if trimmed == name:
            return name
        name = trimmed


def _strip_trailing_punctuation(name: str) -> str:
    name = _rstrip_separators(name)
    if not name.endswith("."):
        return name

    last_word = name.rsplit(None, 1)[-1][:-1]
    # Keep the period of "Inc.", "Ltd.", "S.p.A." and similar abbreviations.
    if "." in last_word or len(last_word) <= _ABBREVIATION_MAX_CHARS:
        return name
    return _rstrip_separators(name.rstrip("."))


def clean_entity_name(line: str, country: CountryMatch | None) -> str:
    """Reduce an address line to the company name that precedes it."""

    name = line[: country.token_start] if country is not None else line
    name = name.split(",", 1)[0]
    name = _strip_postal_suffix(name).strip()
    return _strip_trailing_punctuation(name)


def extract_entity(text: str) -> EntityInfo | None:
    """Return the entity named by a captured block, or None when unusable."""

    line = first_line(text)
    if not line:
        return None

    country = detect_country(line)
    name = clean_entity_name(line, country)
    if len(name) < MIN_NAME_LENGTH:
        return None

    return EntityInfo(
        name=name,
        country=country.country if country is not None else None,
        source_fragment=line,
    )
