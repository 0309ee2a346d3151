import logging
import time
from contextlib import contextmanager

from prometheus_client import Counter, Histogram

logger = logging.getLogger(__name__)

# Prometheus Metrics
UPLOAD_DURATION_SECONDS = Histogram(
    "gallery_upload_duration_seconds",
    "Time spent ingesting an uploaded photo",
)

UPLOADS_TOTAL = Counter(
    "gallery_uploads_total",
    "Photos ingested successfully",
    ["replaced"],
)

UPLOAD_FAILURES_TOTAL = Counter(
    "gallery_upload_failures_total",
    "Photo ingestions that failed",
    ["reason"],
)


@contextmanager
def track_upload(label: str):
    """Time an ingestion and record it in the upload histogram."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        UPLOAD_DURATION_SECONDS.observe(duration)
        logger.debug(f"[{label}] Time: {duration:.4f}s")
