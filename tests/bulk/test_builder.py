from __future__ import annotations

import logging
from typing import Any

import pytest

from rxorigin.bulk.builder import BuildSummary, build_foreign_origin_list, collect_origin_records
from rxorigin.openfda.client import LabelPartition


def _label(label_id: str, section: str) -> dict[str, Any]:
    return {
        "id": label_id,
        "openfda": {"brand_name": [label_id.title()], "manufacturer_name": ["Labeler Inc"]},
        "spl_unclassified_section": [section],
    }


FOREIGN = _label("cipla", "Manufactured by: Cipla Ltd., Goa, India")
DOMESTIC = _label("pfizer", "Manufactured by: Pfizer Labs, New York, NY 10017")
UNATTRIBUTED = _label("plain", "Store at room temperature.")


class _FakeSource:
    def __init__(self, partitions: dict[str, list[dict[str, Any]]]) -> None:
        self._partitions = partitions
        self.opened: list[str] = []

    def label_partitions(self) -> list[LabelPartition]:
        return [LabelPartition(file=name) for name in self._partitions]

    def iter_partition_labels(self, partition: LabelPartition):
        self.opened.append(partition.file)
        yield from self._partitions[partition.file]


def test_collect_keeps_only_foreign_manufactured_labels() -> None:
    summary = collect_origin_records([FOREIGN, DOMESTIC, UNATTRIBUTED])

    assert summary.processed == 3
    assert [record.brand_name for record in summary.records] == ["Cipla"]
    assert summary.records[0].manufacturer_by_country == "India"


def test_collect_accumulates_into_existing_summary() -> None:
    summary = BuildSummary(processed=10)

    collect_origin_records([FOREIGN], summary=summary)

    assert summary.processed == 11
    assert len(summary.records) == 1


def test_collect_rejects_invalid_progress_interval() -> None:
    with pytest.raises(ValueError, match="progress_every"):
        collect_origin_records([], progress_every=0)


def test_collect_logs_progress(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="rxorigin.bulk.builder")

    collect_origin_records([DOMESTIC, FOREIGN, DOMESTIC, FOREIGN], progress_every=2)

    messages = [record.getMessage() for record in caplog.records]
    assert "Processed 2 label(s), 0 foreign-manufactured so far" in messages
    assert "Processed 4 label(s), 1 foreign-manufactured so far" in messages


def test_build_walks_every_partition() -> None:
    source = _FakeSource({"part-1.zip": [FOREIGN, DOMESTIC], "part-2.zip": [UNATTRIBUTED, FOREIGN]})

    summary = build_foreign_origin_list(source)

    assert source.opened == ["part-1.zip", "part-2.zip"]
    assert summary.to_dict() == {"processed": 4, "partitions": 2, "foreign_manufactured": 2}


def test_build_respects_partition_limit() -> None:
    source = _FakeSource({"part-1.zip": [FOREIGN], "part-2.zip": [FOREIGN]})

    summary = build_foreign_origin_list(source, max_partitions=1)

    assert source.opened == ["part-1.zip"]
    assert summary.partitions == 1
    assert summary.processed == 1


def test_build_rejects_invalid_partition_limit() -> None:
    with pytest.raises(ValueError, match="max_partitions"):
        build_foreign_origin_list(_FakeSource({}), max_partitions=0)


def test_build_without_partitions_is_empty() -> None:
    summary = build_foreign_origin_list(_FakeSource({}))

    assert summary.to_dict() == {"processed": 0, "partitions": 0, "foreign_manufactured": 0}
