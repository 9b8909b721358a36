import json
import os
import tempfile
import unittest
from datetime import timedelta

from meandering.services.storage.blob_store import BlobStore
from meandering.services.storage.document_store import NO_CACHE, JsonDocumentStore
from meandering.services.storage.local_store import METADATA_FILE, LocalBucket
from meandering.utils.exceptions import StorageError


class LocalBucketTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.bucket = LocalBucket(self.tmp.name, name="test-bucket")
        self.store = BlobStore(self.bucket)

    def test_put_get_and_list(self) -> None:
        self.store.put("boringhistory/HIST001.mp3", b"audio", content_type="audio/mpeg")
        self.store.put("notes.txt", b"hello", content_type="text/plain")

        self.assertEqual(self.store.get("boringhistory/HIST001.mp3"), b"audio")
        names = [blob.name for blob in self.store.list()]
        self.assertEqual(names, ["boringhistory/HIST001.mp3", "notes.txt"])
        self.assertNotIn(METADATA_FILE, names)

        info = self.store.list("boringhistory/")[0]
        self.assertEqual(info.size, 5)
        self.assertEqual(info.content_type, "audio/mpeg")
        self.assertEqual(
            info.url, "https://storage.googleapis.com/test-bucket/boringhistory/HIST001.mp3"
        )
        self.assertIsNotNone(info.updated)

    def test_missing_object(self) -> None:
        self.assertIsNone(self.store.get("nope.mp3"))
        self.assertFalse(self.store.exists("nope.mp3"))
        self.assertFalse(self.store.delete("nope.mp3"))

    def test_delete(self) -> None:
        self.store.put("a.mp3", b"x", content_type="audio/mpeg")
        self.assertTrue(self.store.delete("a.mp3"))
        self.assertFalse(self.store.exists("a.mp3"))

    def test_metadata_survives_restart(self) -> None:
        self.store.put("a.mp3", b"x", content_type="audio/mpeg", metadata={"title": "Night"})
        self.store.make_public("a.mp3")

        reopened = LocalBucket(self.tmp.name)
        blob = reopened.blob("a.mp3")
        self.assertEqual(blob.content_type, "audio/mpeg")
        with open(os.path.join(self.tmp.name, METADATA_FILE)) as f:
            record = json.load(f)["a.mp3"]
        self.assertTrue(record["public"])
        self.assertEqual(record["metadata"], {"title": "Night"})

    def test_make_public_on_missing_object_fails(self) -> None:
        with self.assertRaises(StorageError):
            self.store.make_public("missing.mp3")

    def test_rejects_names_outside_root(self) -> None:
        with self.assertRaises(StorageError):
            self.store.put("../escape.mp3", b"x", content_type="audio/mpeg")

    def test_signed_url_placeholder(self) -> None:
        url = self.store.sign("a.mp3", timedelta(minutes=15), method="PUT", content_type="audio/mpeg")
        self.assertTrue(url.startswith("https://storage.googleapis.com/test-bucket/a.mp3?"))
        self.assertIn("X-Local-Method=PUT", url)


class JsonDocumentStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.bucket = LocalBucket(self.tmp.name)
        self.documents = JsonDocumentStore(BlobStore(self.bucket))

    def test_missing_document(self) -> None:
        self.assertIsNone(self.documents.read("audio-list.json"))

    def test_write_then_read(self) -> None:
        self.documents.write("audio-list.json", {"audios": [{"id": "ABCDEF12"}]})
        self.assertEqual(self.documents.read("audio-list.json"), {"audios": [{"id": "ABCDEF12"}]})

        raw = self.documents.read_text("audio-list.json")
        self.assertIn('\n  "audios"', raw)
        with open(os.path.join(self.tmp.name, METADATA_FILE)) as f:
            record = json.load(f)["audio-list.json"]
        self.assertEqual(record["content_type"], "application/json")
        self.assertEqual(record["cache_control"], NO_CACHE)
        self.assertTrue(record["public"])

    def test_undecodable_document(self) -> None:
        BlobStore(self.bucket).put("audio-list.json", b"{not json", content_type="application/json")
        with self.assertRaises(StorageError):
            self.documents.read("audio-list.json")


if __name__ == "__main__":
    unittest.main()
