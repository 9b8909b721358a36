"""Whole-document JSON read/write on top of the blob store."""

import json
import logging
from typing import Optional

from meandering.services.storage.blob_store import BlobStore
from meandering.utils.exceptions import StorageError

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
NO_CACHE = "no-cache, no-store, must-revalidate"


class JsonDocumentStore:
    """
    Small JSON side-tables stored as public objects.

    Writes replace the whole document. There is no concurrency token, so
    two concurrent read-modify-write cycles on the same document can lose
    one of the updates.
    """

    def __init__(self, blob_store: BlobStore):
        self.blobs = blob_store

    def read_text(self, name: str) -> Optional[str]:
        """Raw document text, or None when the document does not exist."""
        data = self.blobs.get(name)
        if data is None:
            return None
        return data.decode("utf-8")

    def read(self, name: str) -> Optional[dict]:
        """
        Read and decode a document.

        Returns:
            Decoded document, or None when it does not exist

        Raises:
            StorageError: If the content is not a JSON object
        """
        text = self.read_text(name)
        if text is None:
            return None
        try:
            doc = json.loads(text)
        except json.JSONDecodeError as e:
            raise StorageError(f"Failed to parse {name}", details=str(e)) from e
        if not isinstance(doc, dict):
            raise StorageError(f"Failed to parse {name}", details="Document is not a JSON object")
        return doc

    def write(self, name: str, doc: dict) -> None:
        """Replace a document and keep it publicly readable."""
        payload = json.dumps(doc, indent=2).encode("utf-8")
        self.blobs.put(name, payload, content_type=JSON_CONTENT_TYPE, cache_control=NO_CACHE)
        self.blobs.make_public(name)
        logger.debug("Wrote document '%s'", name)
