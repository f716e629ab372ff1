"""Runtime configuration for the openFDA label client."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Mapping


DEFAULT_OPENFDA_BASE_URL = "https://api.fda.gov"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 1000


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1, maximum: int | None = None) -> int:
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    if maximum is not None and value > maximum:
        raise ValueError(f"{name} must be <= {maximum}")
    return value


def _parse_positive_float(*, name: str, raw_value: str, minimum: float = 0.001) -> float:
    try:
        value = float(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class OpenFDASettings:
    """Validated openFDA endpoint settings."""

    api_key: str | None = None
    base_url: str = DEFAULT_OPENFDA_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def label_url(self) -> str:
        return f"{self.base_url}/drug/label.json"

    @property
    def download_manifest_url(self) -> str:
        return f"{self.base_url}/download.json"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "OpenFDASettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        api_key = source.get("OPENFDA_API_KEY", "").strip() or None
        base_url = source.get("OPENFDA_BASE_URL", DEFAULT_OPENFDA_BASE_URL).strip()
        timeout_raw = source.get("OPENFDA_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS)).strip()
        page_size_raw = source.get("OPENFDA_PAGE_SIZE", str(DEFAULT_PAGE_SIZE)).strip()

        if not base_url:
            raise ValueError("OPENFDA_BASE_URL cannot be empty")
        if not (base_url.startswith("http://") or base_url.startswith("https://")):
            raise ValueError("OPENFDA_BASE_URL must start with http:// or https://")
        if not timeout_raw:
            raise ValueError("OPENFDA_TIMEOUT_SECONDS cannot be empty")
        if not page_size_raw:
            raise ValueError("OPENFDA_PAGE_SIZE cannot be empty")

        timeout_seconds = _parse_positive_float(
            name="OPENFDA_TIMEOUT_SECONDS",
            raw_value=timeout_raw,
            minimum=0.1,
        )
        page_size = _parse_positive_int(
            name="OPENFDA_PAGE_SIZE",
            raw_value=page_size_raw,
            minimum=1,
            maximum=MAX_PAGE_SIZE,
        )

        return cls(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            timeout_seconds=timeout_seconds,
            page_size=page_size,
        )
