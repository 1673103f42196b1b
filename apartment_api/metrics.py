"""
Prometheus metrics for listing search, admin writes and image host calls.

Metrics are exposed via the /metrics endpoint for scraping by Prometheus.

Example:
    >>> from apartment_api.metrics import listing_writes
    >>> listing_writes.labels(operation="create", status="success").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# =============================================================================
# Listing Metrics
# =============================================================================

listing_searches = Counter(
    "apartment_listing_searches_total",
    "Total listing search requests served",
    ["audience"],
)
"""
Counter for listing searches.

Labels:
    audience: public or admin
"""

listing_writes = Counter(
    "apartment_listing_writes_total",
    "Total administrative listing writes (success and failure)",
    ["operation", "status"],
)
"""
Counter for administrative writes.

Labels:
    operation: create, update, status, delete
    status: success or failure
"""

# =============================================================================
# Image Host Metrics
# =============================================================================

image_host_requests = Counter(
    "apartment_image_host_requests_total",
    "Total requests made to the image host",
    ["operation", "status"],
)
"""
Counter for image host requests.

Labels:
    operation: upload, list, delete
    status: ok, or error when the host rejected the call or was unreachable
"""

image_host_latency = Histogram(
    "apartment_image_host_latency_seconds",
    "Image host request latency in seconds",
    ["operation"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, float("inf")),
)

asset_cleanup_failures = Counter(
    "apartment_asset_cleanup_failures_total",
    "Best-effort asset deletions that failed and were skipped",
)

orphaned_assets_deleted = Counter(
    "apartment_orphaned_assets_deleted_total",
    "Orphaned image host assets deleted by the cleanup job",
)
