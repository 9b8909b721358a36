"""Object storage: Cloud Storage bucket or file-backed local bucket."""

from meandering.services.storage.blob_store import BlobInfo, BlobStore
from meandering.services.storage.document_store import JsonDocumentStore
from meandering.services.storage.local_store import LocalBucket, get_local_bucket

__all__ = [
    "BlobInfo",
    "BlobStore",
    "JsonDocumentStore",
    "LocalBucket",
    "get_local_bucket",
]
