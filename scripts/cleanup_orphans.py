import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import argparse
import json

import structlog

from apartment_api.cloudinary_api.client import CloudinaryClient
from apartment_api.config import CLOUDINARY_FOLDER
from apartment_api.db.engine import engine
from apartment_api.logging_config import setup_logging
from apartment_api.services.orphan_cleanup import collect_orphans

setup_logging()
logger = structlog.get_logger(__name__)


def main() -> None:
    """
    Report, and with --apply delete, Cloudinary images no listing references.
    """
    parser = argparse.ArgumentParser(description=main.__doc__)
    parser.add_argument("--apply", action="store_true", help="Delete orphans (default: dry run)")
    parser.add_argument("--folder", default=CLOUDINARY_FOLDER, help="Cloudinary folder to scan")
    args = parser.parse_args()

    image_host = CloudinaryClient.from_config()
    if image_host is None:
        raise SystemExit(
            "Missing Cloudinary credentials in environment "
            "(CLOUDINARY_CLOUD_NAME / CLOUDINARY_API_KEY / CLOUDINARY_API_SECRET)."
        )

    try:
        report = collect_orphans(engine, image_host, args.folder, apply=args.apply)
    except Exception:
        logger.exception("orphan_cleanup_failed", folder=args.folder)
        raise

    print(json.dumps(report, indent=2))


if __name__ == "__main__":
    main()
