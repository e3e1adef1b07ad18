"""
Load the default water-conservation lessons into the configured store.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from watertrack.catalog import seed_lessons
from watertrack.config import get_settings
from watertrack.db import SqlDbClient
from watertrack.lessons import LessonService

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the lesson catalogue")
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy URL; defaults to DATABASE_URL from the environment",
    )
    parser.add_argument(
        "--replace",
        action="store_true",
        help="Overwrite lessons that already exist",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")
    database_url = args.database_url or get_settings().database_url
    if not database_url:
        logger.error("No database configured; set DATABASE_URL or pass --database-url")
        return 1

    service = LessonService(SqlDbClient(database_url))
    seeded = seed_lessons(service, replace=args.replace)
    logger.info("Done: %d lessons written", len(seeded))
    return 0


if __name__ == "__main__":
    sys.exit(main())
