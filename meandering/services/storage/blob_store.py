"""
Blob store over a Cloud Storage bucket.
Works with a google-cloud-storage Bucket or the file-backed LocalBucket.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from meandering.utils.exceptions import StorageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlobInfo:
    """Listing entry for a stored object."""

    name: str
    size: Optional[int]
    content_type: Optional[str]
    updated: Optional[datetime]
    url: str


class BlobStore:
    """Key/value object storage used by the audio catalog."""

    def __init__(self, bucket):
        """
        Initialize blob store.

        Args:
            bucket: Object with the google-cloud-storage Bucket interface
        """
        self.bucket = bucket

    def public_url(self, key: str) -> str:
        """Public HTTPS URL of an object (valid once it is public)."""
        return self.bucket.blob(key).public_url

    def list(self, prefix: str = "") -> List[BlobInfo]:
        """List objects under a prefix."""
        try:
            return [
                BlobInfo(
                    name=blob.name,
                    size=int(blob.size) if blob.size is not None else None,
                    content_type=blob.content_type,
                    updated=blob.updated,
                    url=blob.public_url,
                )
                for blob in self.bucket.list_blobs(prefix=prefix or None)
            ]
        except Exception as e:
            logger.error("Failed to list blobs under '%s': %s", prefix, e)
            raise StorageError("Failed to list files", details=str(e)) from e

    def exists(self, key: str) -> bool:
        return self.bucket.blob(key).exists()

    def get(self, key: str) -> Optional[bytes]:
        """Download an object, or None when it does not exist."""
        blob = self.bucket.blob(key)
        if not blob.exists():
            return None
        try:
            return blob.download_as_bytes()
        except Exception as e:
            logger.error("Failed to download '%s': %s", key, e)
            raise StorageError(f"Failed to read {key}", details=str(e)) from e

    def put(
        self,
        key: str,
        data: bytes,
        content_type: str,
        cache_control: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
    ) -> None:
        """Upload (create or overwrite) an object."""
        blob = self.bucket.blob(key)
        if cache_control:
            blob.cache_control = cache_control
        if metadata:
            blob.metadata = metadata
        try:
            blob.upload_from_string(data, content_type=content_type)
        except Exception as e:
            logger.error("Failed to upload '%s': %s", key, e)
            raise StorageError(f"Failed to write {key}", details=str(e)) from e
        logger.info("Stored '%s' (%d bytes, %s)", key, len(data), content_type)

    def delete(self, key: str) -> bool:
        """Delete an object. Returns False when it did not exist."""
        blob = self.bucket.blob(key)
        if not blob.exists():
            return False
        try:
            blob.delete()
        except Exception as e:
            logger.error("Failed to delete '%s': %s", key, e)
            raise StorageError(f"Failed to delete {key}", details=str(e)) from e
        logger.info("Deleted '%s'", key)
        return True

    def make_public(self, key: str) -> None:
        try:
            self.bucket.blob(key).make_public()
        except Exception as e:
            logger.error("Failed to make '%s' public: %s", key, e)
            raise StorageError(f"Failed to make {key} public", details=str(e)) from e

    def sign(
        self,
        key: str,
        ttl: timedelta,
        method: str = "PUT",
        content_type: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> str:
        """
        Issue a v4 signed URL for direct client access to an object.

        Args:
            key: Object name
            ttl: URL lifetime
            method: HTTP method the URL allows
            content_type: Content type the client must send
            headers: Extension headers the client must send

        Returns:
            Signed URL
        """
        try:
            return self.bucket.blob(key).generate_signed_url(
                version="v4",
                expiration=ttl,
                method=method,
                content_type=content_type,
                headers=headers,
            )
        except Exception as e:
            logger.error("Failed to sign URL for '%s': %s", key, e)
            raise StorageError("Failed to generate signed URL", details=str(e)) from e
