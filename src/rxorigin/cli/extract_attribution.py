"""CLI command extracting manufacturing attributions from label JSON files."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

from rxorigin.attribution.extractor import extract_attribution
from rxorigin.labels.ndc import find_best_ndc


def load_labels(path: Path) -> list[dict[str, Any]]:
    """Read one label, a list of labels, or an openFDA ``{"results": [...]}`` payload."""

    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict) and isinstance(data.get("results"), list):
        items = data["results"]
    elif isinstance(data, list):
        items = data
    elif isinstance(data, dict):
        items = [data]
    else:
        raise ValueError("Expected a label object, a list of labels, or an openFDA response")
    return [item for item in items if isinstance(item, dict)]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Extract manufactured by/for attributions from label JSON")
    parser.add_argument("--path", required=True, help="JSON file with one or more openFDA label records")
    args = parser.parse_args(argv)

    source_path = Path(args.path)
    try:
        labels = load_labels(source_path)
    except (OSError, ValueError) as exc:
        payload = {"path": str(source_path), "processed": 0, "results": [], "errors": [str(exc)]}
        print(json.dumps(payload, ensure_ascii=True, indent=2))
        return 1

    results: list[dict[str, Any]] = []
    for label in labels:
        attribution = extract_attribution(label)
        results.append(
            {
                "id": label.get("id"),
                "set_id": label.get("set_id"),
                "product_ndc": find_best_ndc(label),
                **attribution.to_dict(),
            }
        )

    payload = {
        "path": str(source_path),
        "processed": len(results),
        "results": results,
        "errors": [],
    }
    print(json.dumps(payload, ensure_ascii=True, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
