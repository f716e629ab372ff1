"""CLI command looking up openFDA labels and reporting their manufacturing origin."""

from __future__ import annotations

import argparse
import json
import logging
from typing import Any

from dotenv import load_dotenv

from rxorigin.attribution.extractor import extract_attribution
from rxorigin.labels.enrichment import build_origin_record, is_foreign_manufactured
from rxorigin.openfda.client import OpenFDAClient, OpenFDARequestError

logger = logging.getLogger(__name__)


def describe_label(label: dict[str, Any]) -> dict[str, Any]:
    attribution = extract_attribution(label)
    return {
        "id": label.get("id"),
        "set_id": label.get("set_id"),
        "foreign_manufactured": is_foreign_manufactured(attribution),
        "attribution": attribution.to_dict(),
        "origin": build_origin_record(label, attribution).to_dict(),
    }


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )

    parser = argparse.ArgumentParser(description="Look up openFDA drug labels and extract their manufacturer")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--ndc", help="Product NDC, e.g. 0006-3026")
    target.add_argument("--search", help='Raw openFDA search expression, e.g. openfda.brand_name:"KEYTRUDA"')
    parser.add_argument("--limit", type=int, default=5, help="Maximum number of labels for --search")
    args = parser.parse_args(argv)

    query = args.ndc if args.ndc is not None else args.search
    safe_limit = max(1, min(args.limit, 100))

    if not query.strip():
        payload = {"query": query, "results": [], "error": "--ndc/--search cannot be blank"}
        print(json.dumps(payload, ensure_ascii=True, indent=2))
        return 2

    try:
        client = OpenFDAClient.from_env()
    except ValueError as exc:
        logger.error("Configuration error: %s", exc)
        return 2

    try:
        with client:
            if args.ndc is not None:
                label = client.find_label_by_ndc(args.ndc)
                labels = [label] if label is not None else []
            else:
                labels = client.search_labels(args.search, max_records=safe_limit, max_pages=1)
    except OpenFDARequestError as exc:
        logger.error("openFDA lookup failed: %s", exc)
        payload = {"query": query, "results": [], "error": str(exc)}
        print(json.dumps(payload, ensure_ascii=True, indent=2))
        return 1

    payload = {
        "query": query,
        "results": [describe_label(label) for label in labels],
        "error": None,
    }
    print(json.dumps(payload, ensure_ascii=True, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
