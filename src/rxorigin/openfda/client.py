"""openFDA drug label client: paginated search and bulk download partitions."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
import logging
import tempfile
import time
from typing import Any, Callable
import zipfile
import zlib

import ijson
import requests

from rxorigin.openfda.config import OpenFDASettings

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
_DOWNLOAD_CHUNK_BYTES = 1024 * 1024
DEFAULT_MAX_PAGES = 50


@dataclass(slots=True)
class OpenFDARequestError(RuntimeError):
    """Domain error raised for failed openFDA requests or unusable payloads."""

    url: str
    stage: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (url={self.url}, stage={self.stage})"


@dataclass(frozen=True, slots=True)
class LabelPartition:
    """One zipped JSON file of the bulk drug label download."""

    file: str
    display_name: str | None = None
    size_mb: float | None = None
    records: int | None = None

    @classmethod
    def from_manifest(cls, entry: dict[str, Any]) -> "LabelPartition":
        size_raw = entry.get("size_mb")
        records_raw = entry.get("records")
        return cls(
            file=str(entry["file"]),
            display_name=entry.get("display_name"),
            size_mb=float(size_raw) if size_raw not in (None, "") else None,
            records=int(records_raw) if records_raw not in (None, "") else None,
        )


def _is_retryable_exception(exc: Exception) -> bool:
    return isinstance(exc, (requests.ConnectionError, requests.Timeout))


class OpenFDAClient:
    """Thin openFDA wrapper with retries and response validation."""

    def __init__(
        self,
        settings: OpenFDASettings,
        *,
        session: Any | None = None,
        max_retries: int = 2,
        retry_base_seconds: float = 0.25,
        page_delay_seconds: float = 0.2,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries cannot be negative")
        if retry_base_seconds < 0:
            raise ValueError("retry_base_seconds cannot be negative")
        if page_delay_seconds < 0:
            raise ValueError("page_delay_seconds cannot be negative")

        self._settings = settings
        self._session = session or requests.Session()
        self._max_retries = max_retries
        self._retry_base_seconds = retry_base_seconds
        self._page_delay_seconds = page_delay_seconds
        self._sleep = sleep

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **kwargs: Any) -> "OpenFDAClient":
        return cls(OpenFDASettings.from_env(environ), **kwargs)

    @property
    def settings(self) -> OpenFDASettings:
        return self._settings

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "OpenFDAClient":
        return self

    def __exit__(self, exc_type: object, exc: object, traceback: object) -> None:
        self.close()

    def search_labels(
        self,
        search: str,
        *,
        max_records: int | None = None,
        max_pages: int = DEFAULT_MAX_PAGES,
    ) -> list[dict[str, Any]]:
        """Return label records matching an openFDA ``search`` expression.

        openFDA answers 404 when nothing matches; that is an empty result.
        """

        query = search.strip()
        if not query:
            raise ValueError("search cannot be empty")
        if max_records is not None and max_records < 1:
            raise ValueError("max_records must be >= 1")
        if max_pages < 1:
            raise ValueError("max_pages must be >= 1")

        page_size = self._settings.page_size
        if max_records is not None:
            page_size = min(page_size, max_records)

        labels: list[dict[str, Any]] = []
        skip = 0
        for page in range(max_pages):
            if page and self._page_delay_seconds:
                self._sleep(self._page_delay_seconds)

            params = self._with_api_key({"search": query, "limit": page_size, "skip": skip})
            response = self._get(self._settings.label_url, params=params, stage="search", allow_not_found=True)
            if response is None:
                break

            rows = self._json(response, url=self._settings.label_url, stage="search").get("results") or []
            labels.extend(row for row in rows if isinstance(row, dict))
            if max_records is not None and len(labels) >= max_records:
                return labels[:max_records]
            if len(rows) < page_size:
                break
            skip += page_size

        logger.debug("openFDA search %r returned %d label(s)", query, len(labels))
        return labels

    def find_label_by_ndc(self, product_ndc: str) -> dict[str, Any] | None:
        ndc = product_ndc.strip()
        if not ndc:
            raise ValueError("product_ndc cannot be empty")
        labels = self.search_labels(f'openfda.product_ndc:"{ndc}"', max_records=1, max_pages=1)
        return labels[0] if labels else None

    def fetch_download_manifest(self) -> dict[str, Any]:
        url = self._settings.download_manifest_url
        response = self._get(url, params=self._with_api_key({}), stage="manifest")
        return self._json(response, url=url, stage="manifest")

    def label_partitions(self) -> list[LabelPartition]:
        """List the bulk drug label partitions announced by the manifest."""

        url = self._settings.download_manifest_url
        manifest = self.fetch_download_manifest()
        try:
            entries = manifest["results"]["drug"]["label"]["partitions"]
        except (KeyError, TypeError) as exc:
            raise OpenFDARequestError(
                url=url,
                stage="manifest",
                message="Download manifest missing results.drug.label.partitions",
            ) from exc

        try:
            return [LabelPartition.from_manifest(entry) for entry in entries]
        except (KeyError, TypeError, ValueError) as exc:
            raise OpenFDARequestError(url=url, stage="manifest", message=f"Malformed partition entry: {exc}") from exc

    def iter_partition_labels(self, partition: LabelPartition) -> Iterator[dict[str, Any]]:
        """Download one zipped partition and yield its label records.

        The archive is spooled to a temporary file and ``results`` items are
        parsed one at a time, so a partition never sits in memory whole.
        """

        url = partition.file
        response = self._get(url, stage="partition", stream=True)

        with tempfile.TemporaryFile() as buffer:
            try:
                for chunk in response.iter_content(chunk_size=_DOWNLOAD_CHUNK_BYTES):
                    if chunk:
                        buffer.write(chunk)
            except requests.RequestException as exc:
                raise OpenFDARequestError(url=url, stage="partition", message=f"Download interrupted: {exc}") from exc
            finally:
                response.close()

            buffer.seek(0)
            yielded = 0
            for item in self._iter_zipped_results(buffer, url=url):
                if isinstance(item, dict):
                    yielded += 1
                    yield item

        if not yielded:
            logger.warning("Partition %s contained no label records", url)

    def _iter_zipped_results(self, buffer: Any, *, url: str) -> Iterator[Any]:
        try:
            with zipfile.ZipFile(buffer) as archive:
                members = [name for name in archive.namelist() if not name.endswith("/")]
                if not members:
                    raise OpenFDARequestError(url=url, stage="partition", message="Partition archive is empty")
                with archive.open(members[0]) as member:
                    yield from ijson.items(member, "results.item", use_float=True)
        except (zipfile.BadZipFile, zlib.error, ijson.JSONError, ValueError) as exc:
            raise OpenFDARequestError(url=url, stage="partition", message=f"Unreadable partition archive: {exc}") from exc

    def _with_api_key(self, params: dict[str, Any]) -> dict[str, Any]:
        if self._settings.api_key:
            params["api_key"] = self._settings.api_key
        return params

    def _json(self, response: Any, *, url: str, stage: str) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise OpenFDARequestError(url=url, stage=stage, message=f"Response is not valid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise OpenFDARequestError(url=url, stage=stage, message="Response JSON is not an object")
        return payload

    def _get(
        self,
        url: str,
        *,
        stage: str,
        params: dict[str, Any] | None = None,
        stream: bool = False,
        allow_not_found: bool = False,
    ) -> Any:
        attempts = self._max_retries + 1
        last_error: Exception | None = None

        for attempt in range(attempts):
            try:
                response = self._session.get(
                    url,
                    params=params,
                    timeout=self._settings.timeout_seconds,
                    stream=stream,
                )
            except requests.RequestException as exc:
                last_error = exc
                retryable = _is_retryable_exception(exc)
            else:
                status = response.status_code
                if status == 404 and allow_not_found:
                    response.close()
                    return None
                if status < 400:
                    return response
                response.close()
                last_error = requests.HTTPError(f"HTTP {status}", response=response)
                retryable = status in _RETRYABLE_STATUS_CODES

            if not (attempt < self._max_retries and retryable):
                break
            delay = self._retry_base_seconds * (2**attempt)
            logger.warning("openFDA %s request failed (%s); retrying in %.2fs", stage, last_error, delay)
            self._sleep(delay)

        detail = str(last_error) if last_error is not None else "unknown openFDA error"
        raise OpenFDARequestError(
            url=url,
            stage=stage,
            message=f"openFDA request failed after {attempt + 1} attempt(s): {detail}",
        ) from last_error
