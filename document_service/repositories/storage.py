"""
Supabase Storage bucket wrapper.
"""

import logging
from typing import List, Optional

from supabase import Client

from .base import StorageBucketInterface

logger = logging.getLogger(__name__)


class SupabaseStorageBucket(StorageBucketInterface):
    """
    One Supabase Storage bucket.

    storage3 raises StorageException on API errors; they propagate unchanged.
    """

    def __init__(self, client: Client, bucket: str):
        self._client = client
        self.bucket = bucket

    def _bucket(self):
        return self._client.storage.from_(self.bucket)

    def upload(
        self,
        path: str,
        content: bytes,
        content_type: str,
        upsert: bool = False,
    ) -> None:
        self._bucket().upload(
            path,
            content,
            file_options={
                "content-type": content_type,
                "upsert": "true" if upsert else "false",
            },
        )
        logger.debug(f"Uploaded {len(content)} bytes to {self.bucket}/{path}")

    def remove(self, paths: List[str]) -> None:
        self._bucket().remove(paths)

    def create_signed_url(self, path: str, expires_in: int) -> Optional[str]:
        result = self._bucket().create_signed_url(path, expires_in)
        if not result:
            return None
        # storage3 has used both spellings across releases
        return result.get("signedUrl") or result.get("signedURL")

    def get_public_url(self, path: str) -> str:
        return self._bucket().get_public_url(path)
