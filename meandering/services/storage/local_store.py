"""
File-backed bucket that persists across process restarts.
Replaces Cloud Storage when no Firebase credentials are found.
"""

import json
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Iterator, Optional
from urllib.parse import quote, urlencode

METADATA_FILE = ".blob-metadata.json"


class LocalBucket:
    """Directory-backed store that mimics google-cloud-storage Bucket operations."""

    def __init__(self, root: str, name: str = "local-bucket"):
        self.name = name
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._metadata_path = self.root / METADATA_FILE
        self._metadata: Dict[str, dict] = self._load_metadata()

    def _load_metadata(self) -> Dict[str, dict]:
        if not self._metadata_path.exists():
            return {}
        with open(self._metadata_path) as f:
            return json.load(f)

    def _persist_metadata(self) -> None:
        with open(self._metadata_path, "w") as f:
            json.dump(self._metadata, f, indent=2)

    def path_for(self, name: str) -> Path:
        path = (self.root / name).resolve()
        if self.root.resolve() not in path.parents:
            raise ValueError(f"Blob name escapes bucket root: {name}")
        return path

    def blob(self, name: str) -> "LocalBlob":
        return LocalBlob(self, name)

    def list_blobs(self, prefix: Optional[str] = None) -> Iterator["LocalBlob"]:
        for path in sorted(self.root.rglob("*")):
            if not path.is_file() or path == self._metadata_path:
                continue
            name = path.relative_to(self.root).as_posix()
            if prefix and not name.startswith(prefix):
                continue
            yield LocalBlob(self, name)


class LocalBlob:
    """Mimics a google-cloud-storage Blob."""

    def __init__(self, bucket: LocalBucket, name: str):
        self.bucket = bucket
        self.name = name
        self.cache_control: Optional[str] = None
        self.metadata: Optional[Dict[str, str]] = None

    @property
    def _path(self) -> Path:
        return self.bucket.path_for(self.name)

    @property
    def _record(self) -> dict:
        return self.bucket._metadata.get(self.name, {})

    @property
    def size(self) -> Optional[int]:
        return self._path.stat().st_size if self._path.exists() else None

    @property
    def content_type(self) -> Optional[str]:
        return self._record.get("content_type")

    @property
    def updated(self) -> Optional[datetime]:
        if not self._path.exists():
            return None
        return datetime.fromtimestamp(self._path.stat().st_mtime, tz=timezone.utc)

    @property
    def public_url(self) -> str:
        return f"https://storage.googleapis.com/{self.bucket.name}/{quote(self.name)}"

    def exists(self) -> bool:
        return self._path.is_file()

    def download_as_bytes(self) -> bytes:
        if not self.exists():
            raise FileNotFoundError(self.name)
        return self._path.read_bytes()

    def upload_from_string(self, data, content_type: str = "application/octet-stream") -> None:
        if isinstance(data, str):
            data = data.encode("utf-8")
        with self.bucket._lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_bytes(data)
            self.bucket._metadata[self.name] = {
                "content_type": content_type,
                "cache_control": self.cache_control,
                "metadata": self.metadata or {},
                "public": self._record.get("public", False),
            }
            self.bucket._persist_metadata()

    def delete(self) -> None:
        if not self.exists():
            raise FileNotFoundError(self.name)
        with self.bucket._lock:
            self._path.unlink()
            self.bucket._metadata.pop(self.name, None)
            self.bucket._persist_metadata()

    def make_public(self) -> None:
        if not self.exists():
            raise FileNotFoundError(self.name)
        with self.bucket._lock:
            record = self.bucket._metadata.setdefault(self.name, {})
            record["public"] = True
            self.bucket._persist_metadata()

    def generate_signed_url(
        self,
        version: str = "v4",
        expiration: timedelta = timedelta(minutes=15),
        method: str = "GET",
        content_type: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> str:
        """Placeholder URL; local mode has no signing service."""
        expires_at = datetime.now(timezone.utc) + expiration
        params = {
            "X-Local-Version": version,
            "X-Local-Method": method,
            "X-Local-Expires": expires_at.isoformat(),
        }
        if content_type:
            params["X-Local-Content-Type"] = content_type
        return f"{self.public_url}?{urlencode(params)}"


# ── Singleton ────────────────────────────────────────────────────

_local_bucket: Optional[LocalBucket] = None


def get_local_bucket(root: str) -> LocalBucket:
    """Get or create the singleton LocalBucket instance."""
    global _local_bucket
    if _local_bucket is None:
        _local_bucket = LocalBucket(root)
    return _local_bucket
