"""Bulk build of the foreign-manufactured product list from openFDA labels."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
import logging
from typing import Any, Protocol

from rxorigin.attribution.extractor import extract_attribution
from rxorigin.labels.enrichment import OriginRecord, build_origin_record, is_foreign_manufactured
from rxorigin.openfda.client import LabelPartition

logger = logging.getLogger(__name__)

DEFAULT_PROGRESS_EVERY = 5000


class LabelSource(Protocol):
    """What the bulk build needs from a label client."""

    def label_partitions(self) -> list[LabelPartition]:
        """Return the partitions to walk."""

    def iter_partition_labels(self, partition: LabelPartition) -> Iterable[dict[str, Any]]:
        """Yield the label records of one partition."""


@dataclass(slots=True)
class BuildSummary:
    """Outcome of a bulk build run."""

    records: list[OriginRecord] = field(default_factory=list)
    processed: int = 0
    partitions: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "processed": self.processed,
            "partitions": self.partitions,
            "foreign_manufactured": len(self.records),
        }


def collect_origin_records(
    labels: Iterable[Mapping[str, Any]],
    *,
    summary: BuildSummary | None = None,
    progress_every: int = DEFAULT_PROGRESS_EVERY,
) -> BuildSummary:
    """Run extraction over *labels* and keep the foreign-manufactured ones."""

    if progress_every < 1:
        raise ValueError("progress_every must be >= 1")

    summary = summary if summary is not None else BuildSummary()
    for label in labels:
        summary.processed += 1
        if summary.processed % progress_every == 0:
            logger.info("Processed %d label(s), %d foreign-manufactured so far", summary.processed, len(summary.records))

        attribution = extract_attribution(label)
        if is_foreign_manufactured(attribution):
            summary.records.append(build_origin_record(label, attribution))

    return summary


def build_foreign_origin_list(
    source: LabelSource,
    *,
    max_partitions: int | None = None,
    progress_every: int = DEFAULT_PROGRESS_EVERY,
) -> BuildSummary:
    """Walk every bulk label partition and collect non-USA manufactured products."""

    if max_partitions is not None and max_partitions < 1:
        raise ValueError("max_partitions must be >= 1")

    partitions = source.label_partitions()
    if max_partitions is not None:
        partitions = partitions[:max_partitions]
    logger.info("Found %d label partition(s) to process", len(partitions))

    summary = BuildSummary()
    for index, partition in enumerate(partitions, start=1):
        logger.info("Processing partition %d of %d: %s", index, len(partitions), partition.file)
        before = summary.processed
        collect_origin_records(
            source.iter_partition_labels(partition),
            summary=summary,
            progress_every=progress_every,
        )
        summary.partitions += 1
        logger.info("Partition %d finished: %d record(s)", index, summary.processed - before)

    logger.info(
        "Build complete: %d label(s) processed, %d foreign-manufactured product(s)",
        summary.processed,
        len(summary.records),
    )
    return summary
