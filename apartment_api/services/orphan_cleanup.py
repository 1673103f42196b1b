"""
Orphaned image asset cleanup.

Compares every public id referenced by a listing with every asset stored
under the image host folder. Assets nobody references are orphans: left
behind by failed writes, skipped best-effort deletes, or manual uploads.
Dry run (the default) only reports; apply mode deletes in batches.
"""

from __future__ import annotations

from typing import Any, Iterable

import structlog
from sqlalchemy.engine import Engine

from apartment_api.cloudinary_api.client import DELETE_BATCH_SIZE, CloudinaryClient
from apartment_api.db.readers.listings import iter_referenced_public_ids
from apartment_api.metrics import orphaned_assets_deleted

logger = structlog.get_logger(__name__)

SAMPLE_SIZE = 25


def find_orphans(referenced: set[str], remote: Iterable[str]) -> list[str]:
    """
    Remote public ids not in ``referenced``, in remote listing order.

    Example:
        >>> find_orphans({"a", "b"}, ["a", "b", "c"])
        ['c']
    """
    return [public_id for public_id in dict.fromkeys(remote) if public_id not in referenced]


def delete_orphans(image_host: CloudinaryClient, public_ids: list[str]) -> int:
    """
    Delete orphans in batches of DELETE_BATCH_SIZE.

    Returns:
        int: assets the host reported as ``deleted`` (ids it could not delete
        are reported individually and not counted)
    """
    deleted_count = 0
    for start in range(0, len(public_ids), DELETE_BATCH_SIZE):
        batch = public_ids[start : start + DELETE_BATCH_SIZE]
        statuses = image_host.delete_resources(batch)
        deleted = sum(1 for status in statuses.values() if status == "deleted")
        deleted_count += deleted
        logger.info(
            "orphan_batch_deleted", requested=len(batch), deleted=deleted, offset=start
        )

    orphaned_assets_deleted.inc(deleted_count)
    return deleted_count


def collect_orphans(
    engine: Engine,
    image_host: CloudinaryClient,
    folder: str,
    apply: bool = False,
    sample_size: int = SAMPLE_SIZE,
) -> dict[str, Any]:
    """
    Find, and optionally delete, image host assets no listing references.

    Args:
        engine: SQLAlchemy engine
        image_host: Image host client
        folder: Folder whose assets are candidates for deletion
        apply: Delete orphans instead of only reporting them
        sample_size: How many orphan ids to include in the report

    Returns:
        dict: report with mode, folder, counts, a sample of orphan ids and,
        in apply mode, the number of deleted assets
    """
    with engine.connect() as conn:
        referenced = set(iter_referenced_public_ids(conn))

    remote = list(image_host.iter_public_ids(folder))
    orphaned = find_orphans(referenced, remote)

    report: dict[str, Any] = {
        "mode": "apply" if apply else "dry-run",
        "folder": folder,
        "referencedCount": len(referenced),
        "folderAssetCount": len(remote),
        "orphanedCount": len(orphaned),
        "orphanedSample": orphaned[:sample_size],
    }
    logger.info(
        "orphan_scan_completed",
        mode=report["mode"],
        folder=folder,
        referenced=len(referenced),
        remote=len(remote),
        orphaned=len(orphaned),
    )

    if apply:
        report["deleted"] = delete_orphans(image_host, orphaned) if orphaned else 0

    return report
