"""
Audio Catalog CRUD
Audio uploads and the two JSON catalogs that list them.
"""

import json
import logging
import re
import uuid
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, List, Optional

from meandering.services.storage.blob_store import BlobInfo, BlobStore
from meandering.services.storage.document_store import JsonDocumentStore
from meandering.utils.exceptions import NotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)

HISTORY_CATALOG = "history-audio-list.json"
MEANDERING_CATALOG = "audio-list.json"
HISTORY_FOLDER = "boringhistory"
ARCHIVE_FOLDER = "archive"

DEFAULT_TOPIC = "boring"
DEFAULT_GENDER = "female"
DEFAULT_VOICE = "Unknown"

AUDIO_CONTENT_TYPE = "audio/mpeg"
AUDIO_EXTENSIONS = (".mp3", ".wav", ".m4a", ".ogg")
UPLOAD_ACL_HEADERS = {"x-goog-acl": "public-read"}

HISTORY_CATEGORIES: List[Dict[str, str]] = [
    {"id": "ancient", "name": "Ancient Civilizations"},
    {"id": "medieval", "name": "Medieval Life"},
    {"id": "crafts", "name": "Crafts & Trades"},
    {"id": "daily", "name": "Daily Routines"},
    {"id": "government", "name": "Government & Society"},
    {"id": "industrial", "name": "Industrial Era"},
]

HISTORY_ID_PATTERN = re.compile(r"HIST(\d+)")

# Placeholder some older catalog files contain instead of JSON
EMPTY_CATALOG_PLACEHOLDER = "audios []"


@dataclass(frozen=True)
class UploadTarget:
    """Where a new audio file goes and which catalog lists it."""

    id: str
    file_name: str
    upload_path: str
    catalog: str

    @property
    def is_history(self) -> bool:
        return self.catalog == HISTORY_CATALOG


def empty_catalog() -> Dict[str, Any]:
    return {"audios": []}


def normalize_catalog(text: Optional[str]) -> Dict[str, Any]:
    """
    Decode catalog text into ``{"audios": [...]}``.

    Empty content, the ``audios []`` placeholder and documents without an
    ``audios`` list all normalize to an empty catalog.

    Raises:
        json.JSONDecodeError: If the content is not valid JSON
    """
    content = (text or "").strip()
    if not content or content == EMPTY_CATALOG_PLACEHOLDER:
        return empty_catalog()
    doc = json.loads(content)
    if not isinstance(doc, dict) or not isinstance(doc.get("audios"), list):
        return empty_catalog()
    return doc


def entry_id_from_file_name(file_name: str) -> str:
    """``boringhistory/HIST001.mp3`` -> ``HIST001``."""
    base = file_name.rsplit("/", 1)[-1]
    if base.endswith(".mp3"):
        base = base[: -len(".mp3")]
    return base


def is_audio_file(name: str) -> bool:
    return name.lower().endswith(AUDIO_EXTENSIONS)


def category_ids() -> List[str]:
    return [category["id"] for category in HISTORY_CATEGORIES]


class AudioCatalog:
    """
    CRUD over uploaded audio and the History / Meandering catalogs.

    Catalog updates are whole-document read-modify-write cycles with no
    concurrency token.
    """

    def __init__(self, blob_store: BlobStore, documents: JsonDocumentStore):
        """
        Initialize catalog.

        Args:
            blob_store: Store holding the audio files
            documents: Store holding the catalog documents
        """
        self.blobs = blob_store
        self.documents = documents

    # ── Catalog documents ────────────────────────────────────────

    def load(self, catalog: str) -> Optional[Dict[str, Any]]:
        """
        Load and normalize a catalog.

        Returns:
            Catalog document, or None when it does not exist

        Raises:
            StorageError: If the catalog content is not valid JSON
        """
        text = self.documents.read_text(catalog)
        if text is None:
            return None
        try:
            return normalize_catalog(text)
        except json.JSONDecodeError as e:
            raise StorageError(f"Failed to parse {catalog}", details=str(e)) from e

    def load_or_reset(self, catalog: str) -> Dict[str, Any]:
        """Load a catalog, starting over when it is missing or undecodable."""
        try:
            doc = self.load(catalog)
        except StorageError as e:
            logger.error(f"Error parsing {catalog}, resetting to empty catalog: {e.details}")
            return empty_catalog()
        return doc if doc is not None else empty_catalog()

    def append_entry(self, catalog: str, entry: Dict[str, Any]) -> None:
        doc = self.load_or_reset(catalog)
        doc["audios"].append(entry)
        self.documents.write(catalog, doc)
        logger.info(f"Added '{entry.get('id')}' to {catalog}")

    # ── Id allocation ────────────────────────────────────────────

    def next_history_id(self) -> str:
        """Next ``HIST###`` id: highest existing number + 1, or HIST001."""
        try:
            doc = self.load(HISTORY_CATALOG)
        except StorageError as e:
            logger.error(f"Error reading history catalog: {e.details}")
            return "HIST001"
        if doc is None:
            return "HIST001"

        max_num = 0
        for audio in doc["audios"]:
            match = HISTORY_ID_PATTERN.search(str(audio.get("id", "")))
            if match:
                max_num = max(max_num, int(match.group(1)))
        return f"HIST{max_num + 1:03d}"

    @staticmethod
    def new_meandering_id() -> str:
        """Random 8-character uppercase hex id."""
        return uuid.uuid4().hex[:8].upper()

    def allocate(
        self,
        folder: Optional[str],
        topic: Optional[str] = None,
        gender: Optional[str] = None,
    ) -> UploadTarget:
        """
        Choose the id, file name and path for a new upload.

        History uploads (``folder == "boringhistory"``) get the next HIST id.
        Meandering uploads get a random id and land in ``archive/`` when
        their topic is the default one.
        """
        if folder == HISTORY_FOLDER:
            entry_id = self.next_history_id()
            file_name = f"{entry_id}.mp3"
            return UploadTarget(
                id=entry_id,
                file_name=file_name,
                upload_path=f"{HISTORY_FOLDER}/{file_name}",
                catalog=HISTORY_CATALOG,
            )

        entry_id = self.new_meandering_id()
        topic_part = topic or DEFAULT_TOPIC
        gender_part = gender or DEFAULT_GENDER
        file_name = f"{entry_id}_{topic_part}_{gender_part}.mp3"
        upload_path = f"{ARCHIVE_FOLDER}/{file_name}" if topic_part == DEFAULT_TOPIC else file_name
        return UploadTarget(
            id=entry_id,
            file_name=file_name,
            upload_path=upload_path,
            catalog=MEANDERING_CATALOG,
        )

    @staticmethod
    def build_entry(
        target: UploadTarget,
        title: str,
        topic: Optional[str] = None,
        gender: Optional[str] = None,
        voice_name: Optional[str] = None,
        is_new: Optional[bool] = None,
    ) -> Dict[str, Any]:
        """Catalog entry for a finished upload."""
        if target.is_history:
            entry: Dict[str, Any] = {
                "id": target.id,
                "title": title,
                "voice": voice_name or DEFAULT_VOICE,
            }
            if is_new is not None:
                entry["isNew"] = is_new
            return entry
        return {
            "topic": topic or DEFAULT_TOPIC,
            "subtopic": title,
            "id": target.id,
            "gender": gender or DEFAULT_GENDER,
        }

    # ── Files ────────────────────────────────────────────────────

    def list_audio_files(self) -> List[BlobInfo]:
        return [blob for blob in self.blobs.list() if is_audio_file(blob.name)]

    def upload(
        self,
        file_name: str,
        data: bytes,
        title: str,
        folder: Optional[str] = None,
        gender: Optional[str] = None,
        topic: Optional[str] = None,
        voice_name: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Store an MP3 upload and list it in its catalog.

        Args:
            file_name: Client-side file name, only used for type validation
            data: File contents
            title: Display title
            folder: ``boringhistory`` for History uploads
            gender: Narrator gender (Meandering uploads)
            topic: Topic slug (Meandering uploads)
            voice_name: Narrator voice (History uploads)

        Returns:
            ``{"file": {...}, "jsonEntry": {...}}``

        Raises:
            ValidationError: If the title is missing or the file is not an MP3
        """
        if not title:
            raise ValidationError("Title is required")
        if not file_name or not file_name.lower().endswith(".mp3"):
            raise ValidationError("Only MP3 files are allowed", details=f"Got '{file_name}'")

        target = self.allocate(folder, topic=topic, gender=gender)
        metadata = {"title": title}
        if gender:
            metadata["gender"] = gender
        if topic:
            metadata["topic"] = topic

        self.blobs.put(target.upload_path, data, content_type=AUDIO_CONTENT_TYPE, metadata=metadata)
        self.blobs.make_public(target.upload_path)

        entry = self.build_entry(target, title, topic=topic, gender=gender, voice_name=voice_name)
        self.append_entry(target.catalog, entry)

        return {
            "file": {
                "name": target.file_name,
                "size": len(data),
                "contentType": AUDIO_CONTENT_TYPE,
                "url": self.blobs.public_url(target.upload_path),
            },
            "jsonEntry": entry,
        }

    def signed_upload(
        self,
        title: str,
        ttl: timedelta,
        folder: Optional[str] = None,
        gender: Optional[str] = None,
        topic: Optional[str] = None,
    ) -> Dict[str, str]:
        """Allocate an upload target and sign a direct PUT to it."""
        if not title:
            raise ValidationError("Title is required")

        target = self.allocate(folder, topic=topic, gender=gender)
        signed_url = self.blobs.sign(
            target.upload_path,
            ttl,
            method="PUT",
            content_type=AUDIO_CONTENT_TYPE,
            headers=UPLOAD_ACL_HEADERS,
        )
        logger.info(f"Signed upload URL for '{target.upload_path}'")
        return {
            "signedUrl": signed_url,
            "uploadPath": target.upload_path,
            "fileName": target.file_name,
            "id": target.id,
            "publicUrl": self.blobs.public_url(target.upload_path),
        }

    def register_upload(
        self,
        entry_id: str,
        upload_path: str,
        folder: Optional[str] = None,
        title: Optional[str] = None,
        gender: Optional[str] = None,
        topic: Optional[str] = None,
        voice_name: Optional[str] = None,
        is_new: Optional[bool] = None,
    ) -> Dict[str, Any]:
        """Publish a directly uploaded file and add its catalog entry."""
        if not entry_id or not upload_path:
            raise ValidationError("ID and upload path are required")

        self.blobs.make_public(upload_path)

        catalog = HISTORY_CATALOG if folder == HISTORY_FOLDER else MEANDERING_CATALOG
        target = UploadTarget(
            id=entry_id,
            file_name=upload_path.rsplit("/", 1)[-1],
            upload_path=upload_path,
            catalog=catalog,
        )
        entry = self.build_entry(
            target,
            title or "",
            topic=topic,
            gender=gender,
            voice_name=voice_name,
            is_new=is_new,
        )
        self.append_entry(catalog, entry)
        return entry

    def delete_file(self, file_name: str) -> None:
        """
        Delete an audio file and drop its catalog entry when there is one.

        Raises:
            NotFoundError: If the file does not exist
        """
        if not file_name:
            raise ValidationError("File name is required")
        if not self.blobs.delete(file_name):
            raise NotFoundError("File not found", details=file_name)

        if file_name.startswith(f"{HISTORY_FOLDER}/"):
            catalog = HISTORY_CATALOG
            entry_id = entry_id_from_file_name(file_name)
        else:
            catalog = MEANDERING_CATALOG
            entry_id = entry_id_from_file_name(file_name).split("_", 1)[0]

        doc = self.load_or_reset(catalog)
        remaining = [audio for audio in doc["audios"] if audio.get("id") != entry_id]
        if len(remaining) != len(doc["audios"]):
            doc["audios"] = remaining
            self.documents.write(catalog, doc)
            logger.info(f"Removed '{entry_id}' from {catalog}")

    # ── History entry updates ────────────────────────────────────

    def _update_history_entry(
        self,
        file_name: str,
        changes: Dict[str, Any],
        remove=(),
        catalog_changes: Optional[Dict[str, Any]] = None,
    ) -> None:
        if not file_name:
            raise ValidationError("File name is required")

        doc = self.load(HISTORY_CATALOG)
        if doc is None:
            raise NotFoundError("JSON file not found", details=HISTORY_CATALOG)

        entry_id = entry_id_from_file_name(file_name)
        for audio in doc["audios"]:
            if audio.get("id") == entry_id:
                audio.update(changes)
                for key in remove:
                    audio.pop(key, None)
                doc.update(catalog_changes or {})
                self.documents.write(HISTORY_CATALOG, doc)
                return
        raise NotFoundError("Audio entry not found in JSON", details=entry_id)

    def toggle_new(self, file_name: str, is_new: bool) -> None:
        self._update_history_entry(file_name, {"isNew": is_new})
        logger.info(f"Set isNew={is_new} on '{file_name}'")

    def update_category(self, file_name: str, category: str) -> None:
        """Set an entry's category; the catalog also gets the category list."""
        if category not in category_ids():
            raise ValidationError("Unknown category", details=f"'{category}' is not one of {category_ids()}")

        self._update_history_entry(
            file_name,
            {"category": category},
            catalog_changes={"categories": HISTORY_CATEGORIES},
        )
        logger.info(f"Set category '{category}' on '{file_name}'")

    def update_image(self, file_name: str, image_url: Optional[str]) -> None:
        """Set an entry's image URL; an empty URL removes it."""
        if image_url:
            self._update_history_entry(file_name, {"imageUrl": image_url})
        else:
            self._update_history_entry(file_name, {}, remove=("imageUrl",))
        logger.info(f"Updated image on '{file_name}'")
