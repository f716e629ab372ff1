from __future__ import annotations

import pytest

from rxorigin.openfda.config import (
    DEFAULT_OPENFDA_BASE_URL,
    DEFAULT_PAGE_SIZE,
    DEFAULT_TIMEOUT_SECONDS,
    OpenFDASettings,
)


def test_settings_defaults_without_environment() -> None:
    settings = OpenFDASettings.from_env({})

    assert settings.api_key is None
    assert settings.base_url == DEFAULT_OPENFDA_BASE_URL
    assert settings.timeout_seconds == DEFAULT_TIMEOUT_SECONDS
    assert settings.page_size == DEFAULT_PAGE_SIZE
    assert settings.label_url == "https://api.fda.gov/drug/label.json"
    assert settings.download_manifest_url == "https://api.fda.gov/download.json"


def test_settings_load_overrides_and_trim_base_url() -> None:
    settings = OpenFDASettings.from_env(
        {
            "OPENFDA_API_KEY": " key-123 ",
            "OPENFDA_BASE_URL": "http://localhost:8080/",
            "OPENFDA_TIMEOUT_SECONDS": "5",
            "OPENFDA_PAGE_SIZE": "250",
        }
    )

    assert settings.api_key == "key-123"
    assert settings.base_url == "http://localhost:8080"
    assert settings.timeout_seconds == 5.0
    assert settings.page_size == 250


def test_settings_validate_base_url() -> None:
    with pytest.raises(ValueError, match="OPENFDA_BASE_URL"):
        OpenFDASettings.from_env({"OPENFDA_BASE_URL": "api.fda.gov"})

    with pytest.raises(ValueError, match="OPENFDA_BASE_URL"):
        OpenFDASettings.from_env({"OPENFDA_BASE_URL": "  "})


def test_settings_validate_page_size_bounds() -> None:
    with pytest.raises(ValueError, match="OPENFDA_PAGE_SIZE"):
        OpenFDASettings.from_env({"OPENFDA_PAGE_SIZE": "0"})

    with pytest.raises(ValueError, match="OPENFDA_PAGE_SIZE"):
        OpenFDASettings.from_env({"OPENFDA_PAGE_SIZE": "5000"})

    with pytest.raises(ValueError, match="OPENFDA_PAGE_SIZE"):
        OpenFDASettings.from_env({"OPENFDA_PAGE_SIZE": "many"})


def test_settings_validate_timeout() -> None:
    with pytest.raises(ValueError, match="OPENFDA_TIMEOUT_SECONDS"):
        OpenFDASettings.from_env({"OPENFDA_TIMEOUT_SECONDS": "0"})

    with pytest.raises(ValueError, match="OPENFDA_TIMEOUT_SECONDS"):
        OpenFDASettings.from_env({"OPENFDA_TIMEOUT_SECONDS": "soon"})
