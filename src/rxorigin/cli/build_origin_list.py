"""CLI command running the bulk foreign-manufacture build over all label partitions."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from rxorigin.bulk.builder import DEFAULT_PROGRESS_EVERY, build_foreign_origin_list
from rxorigin.openfda.client import OpenFDAClient, OpenFDARequestError

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )

    parser = argparse.ArgumentParser(description="Build the list of non-USA manufactured products from openFDA")
    parser.add_argument("--output", default="public/tariff-data.json", help="Where to write the JSON array")
    parser.add_argument("--max-partitions", type=int, default=None, help="Only process the first N partitions")
    parser.add_argument(
        "--progress-every",
        type=int,
        default=DEFAULT_PROGRESS_EVERY,
        help="Log progress after this many labels",
    )
    args = parser.parse_args(argv)

    output_path = Path(args.output)

    if args.max_partitions is not None and args.max_partitions < 1:
        payload = {"output": str(output_path), "error": "--max-partitions must be >= 1"}
        print(json.dumps(payload, ensure_ascii=True, indent=2))
        return 2

    try:
        client = OpenFDAClient.from_env()
    except ValueError as exc:
        logger.error("Configuration error: %s", exc)
        return 2

    try:
        with client:
            summary = build_foreign_origin_list(
                client,
                max_partitions=args.max_partitions,
                progress_every=max(1, args.progress_every),
            )
    except OpenFDARequestError as exc:
        logger.error("Bulk build failed: %s", exc)
        print(json.dumps({"output": str(output_path), "error": str(exc)}, ensure_ascii=True, indent=2))
        return 1

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps([record.to_dict() for record in summary.records], ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    logger.info("Wrote %d record(s) to %s", len(summary.records), output_path)

    payload = {"output": str(output_path), **summary.to_dict(), "error": None}
    print(json.dumps(payload, ensure_ascii=True, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
