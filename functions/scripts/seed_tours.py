"""
Load tours from a JSON file into the configured database.

The file holds a list of objects using the same fields as the admin tour
editor (title, location, duration_days, price, max_guests, ...).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pydantic import ValidationError

from tourbook.db import DbClient
from tourbook.dependencies import get_db_client
from tourbook.schemas import TourPayload

logger = logging.getLogger(__name__)


def seed_tours(db: DbClient, items: list[dict]) -> int:
    created = 0
    for index, item in enumerate(items):
        try:
            payload = TourPayload.model_validate(item)
        except ValidationError as exc:
            logger.warning("Skipping entry %d: %s", index, exc)
            continue
        tour = db.create_tour(payload.model_dump())
        logger.info("Created tour %s: %s", tour.id, tour.title)
        created += 1
    return created


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed tours from JSON")
    parser.add_argument(
        "-f",
        "--file",
        type=Path,
        default=Path("tours.json"),
        help="Path to a JSON list of tours",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")

    items = json.loads(args.file.read_text(encoding="utf-8"))
    if not isinstance(items, list):
        logger.error("%s must contain a JSON list", args.file)
        return 1

    created = seed_tours(get_db_client(), items)
    logger.info("Seeded %d of %d tours", created, len(items))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
