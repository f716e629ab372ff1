from __future__ import annotations

import json
from pathlib import Path

from rxorigin.cli.extract_attribution import load_labels, main as extract_main


def _write(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_extract_cli_reports_attributions(tmp_path: Path, capsys: object) -> None:
    source = _write(
        tmp_path / "labels.json",
        {
            "meta": {},
            "results": [
                {
                    "id": "abc_0093-7363",
                    "set_id": "set-1",
                    "spl_unclassified_section": [
                        "Manufactured for: Teva Pharmaceuticals USA, Inc.\nManufactured by: Lupin Limited, Pune, India",
                    ],
                },
                {"id": "empty", "how_supplied": ["Bottles of 30"]},
            ],
        },
    )

    exit_code = extract_main(["--path", str(source)])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert payload["processed"] == 2
    assert payload["errors"] == []

    first, second = payload["results"]
    assert first["id"] == "abc_0093-7363"
    assert first["product_ndc"] == "0093-7363"
    assert first["manufactured_by"]["entity_name"] == "Lupin Limited"
    assert first["manufactured_by"]["country"] == "India"
    assert first["manufactured_for"]["country"] == "USA"
    assert second["manufactured_by"] is None
    assert second["manufactured_for"] is None
    assert second["product_ndc"] is None


def test_extract_cli_reports_unreadable_file(tmp_path: Path, capsys: object) -> None:
    source = tmp_path / "broken.json"
    source.write_text("{not json", encoding="utf-8")

    exit_code = extract_main(["--path", str(source)])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 1
    assert payload["processed"] == 0
    assert payload["results"] == []
    assert len(payload["errors"]) == 1


def test_extract_cli_reports_missing_file(tmp_path: Path, capsys: object) -> None:
    exit_code = extract_main(["--path", str(tmp_path / "missing.json")])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 1
    assert payload["errors"]


def test_load_labels_accepts_single_label_and_lists(tmp_path: Path) -> None:
    single = _write(tmp_path / "single.json", {"id": "one"})
    many = _write(tmp_path / "many.json", [{"id": "one"}, "skip", {"id": "two"}])

    assert load_labels(single) == [{"id": "one"}]
    assert load_labels(many) == [{"id": "one"}, {"id": "two"}]
