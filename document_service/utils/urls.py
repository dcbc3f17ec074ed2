"""
Viewing URL helpers shared by the routes and the client fallback path.
"""

import logging
from typing import Any, Dict, List, Optional

from ..repositories import StorageBucketInterface

logger = logging.getLogger(__name__)


def with_public_url(row: Dict[str, Any], bucket: StorageBucketInterface) -> Dict[str, Any]:
    """Copy of a row with `public_url` set for public documents, None otherwise."""
    if row.get("visibility") == "public" and row.get("file_path"):
        return {**row, "public_url": bucket.get_public_url(row["file_path"])}
    return {**row, "public_url": None}


def public_documents_with_urls(
    rows: List[Dict[str, Any]],
    bucket: StorageBucketInterface,
    expires_in: int,
) -> List[Dict[str, Any]]:
    """
    Attach a viewing URL to each public document.

    Prefers a signed URL (works with private buckets) and falls back to the
    bucket's public URL.
    """
    enhanced = []
    for row in rows:
        url: Optional[str] = None
        if not row.get("file_path"):
            enhanced.append({**row, "public_url": None})
            continue
        try:
            url = bucket.create_signed_url(row["file_path"], expires_in)
        except Exception as e:
            logger.debug(f"Signing failed for {row.get('id')}, using public URL: {e}")
        if not url:
            url = bucket.get_public_url(row["file_path"])
        enhanced.append({**row, "public_url": url})
    return enhanced
