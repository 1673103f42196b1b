import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import argparse

import structlog

from apartment_api.db.engine import engine
from apartment_api.db.seed import seed_listings, seed_lookups
from apartment_api.logging_config import setup_logging

setup_logging()
logger = structlog.get_logger(__name__)


def main() -> None:
    """
    Seed boroughs, neighborhoods, features and subway lines, plus sample listings.
    """
    parser = argparse.ArgumentParser(description=main.__doc__)
    parser.add_argument(
        "--lookups-only", action="store_true", help="Skip the sample listings"
    )
    args = parser.parse_args()

    try:
        with engine.begin() as conn:
            seed_lookups(conn)
            if not args.lookups_only:
                seed_listings(conn)
    except Exception:
        logger.exception("seed_failed")
        raise

    logger.info("seed_completed")


if __name__ == "__main__":
    main()
