import os
import unittest
from unittest.mock import MagicMock, patch

from botocore.exceptions import ClientError

from file_manager.settings import Settings
from file_manager.storage import UploadKey, create_metadata_store, create_object_store
from file_manager.storage.local_provider import LocalStorageProvider
from file_manager.storage.metadata_store import JsonFileMetadataStore
from file_manager.storage.s3_provider import S3StorageProvider

from ..tests.utils_helpers import TempStorage

PNG_HEADER = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class TestUploadKey(unittest.TestCase):

    def test_parse(self):
        self.assertEqual(UploadKey.parse("uploads/abc/report.pdf"), UploadKey(file_id="abc", file_name="report.pdf"))

    def test_nested_file_name(self):
        parsed = UploadKey.parse("uploads/abc/dir/report.pdf")
        self.assertEqual(parsed.file_name, "dir/report.pdf")
        self.assertEqual(parsed.key, "uploads/abc/dir/report.pdf")

    def test_unexpected_shapes(self):
        for key in ("processed/abc/report.pdf", "uploads/abc", "uploads//report.pdf", "uploads/abc/", "report.pdf"):
            self.assertIsNone(UploadKey.parse(key), key)


class TestLocalStorageProvider(unittest.TestCase):

    def setUp(self) -> None:
        self.storage = TempStorage()
        self.store: LocalStorageProvider = self.storage.object_store

    def tearDown(self) -> None:
        self.storage.cleanup()

    def test_put_and_head(self):
        stored = self.store.put_object(key="uploads/1/a.txt", payload=b"hello", content_type="text/plain",
                                       metadata={"file-id": "1"})
        self.assertEqual(stored.size, 5)

        head = self.store.head_object(key="uploads/1/a.txt")
        self.assertEqual(head.content_type, "text/plain")
        self.assertEqual(head.size, 5)
        self.assertEqual(head.metadata, {"file-id": "1"})
        self.assertEqual(self.store.read_bytes(key="uploads/1/a.txt"), b"hello")

    def test_head_missing_object(self):
        self.assertIsNone(self.store.head_object(key="uploads/1/missing.txt"))

    def test_content_type_is_sniffed_without_sidecar(self):
        path = self.storage.root / "objects" / "uploads" / "2" / "image"
        path.parent.mkdir(parents=True)
        path.write_bytes(PNG_HEADER)

        self.assertEqual(self.store.head_object(key="uploads/2/image").content_type, "image/png")

    def test_keys_cannot_escape_root(self):
        with self.assertRaises(ValueError):
            self.store.put_object(key="../outside.txt", payload=b"x", content_type="text/plain")


class TestJsonFileMetadataStore(unittest.TestCase):

    def setUp(self) -> None:
        self.storage = TempStorage()
        self.store: JsonFileMetadataStore = self.storage.metadata_store

    def tearDown(self) -> None:
        self.storage.cleanup()

    def test_put_get_scan(self):
        self.store.put({"file_id": "a", "file_name": "a.txt"})
        self.store.put({"file_id": "b", "file_name": "b.txt"})

        self.assertEqual(self.store.get("a"), {"file_id": "a", "file_name": "a.txt"})
        self.assertIsNone(self.store.get("missing"))
        self.assertEqual(sorted(item["file_id"] for item in self.store.scan()), ["a", "b"])

    def test_update_merges_into_existing_record(self):
        self.store.put({"file_id": "a", "status": "uploaded"})
        self.assertTrue(self.store.update("a", {"status": "processed", "extracted_file_type": "pdf"}))
        self.assertEqual(self.store.get("a"), {"file_id": "a", "status": "processed", "extracted_file_type": "pdf"})

    def test_update_missing_record(self):
        self.assertFalse(self.store.update("missing", {"status": "processed"}))
        self.assertEqual(self.store.scan(), [])

    def test_records_survive_a_new_instance(self):
        self.store.put({"file_id": "a"})
        reopened = JsonFileMetadataStore(path=self.store.path)
        self.assertEqual(reopened.get("a"), {"file_id": "a"})

    def test_put_requires_file_id(self):
        with self.assertRaises(ValueError):
            self.store.put({"file_name": "a.txt"})


class TestS3StorageProvider(unittest.TestCase):

    def setUp(self) -> None:
        patcher = patch("file_manager.storage.s3_provider.boto3.client")
        self.client_factory = patcher.start()
        self.addCleanup(patcher.stop)
        self.client = MagicMock()
        self.client_factory.return_value = self.client
        self.store = S3StorageProvider(bucket_name="bucket", region="eu-west-1")

    def test_client_configuration(self):
        self.client_factory.assert_called_once_with("s3", region_name="eu-west-1", endpoint_url=None)

    def test_put_object(self):
        stored = self.store.put_object(key="uploads/1/a.txt", payload=b"abc", content_type="text/plain",
                                       metadata={"file-id": "1"})
        self.client.put_object.assert_called_once_with(
            Bucket="bucket", Key="uploads/1/a.txt", Body=b"abc", ContentType="text/plain", Metadata={"file-id": "1"},
        )
        self.assertEqual(stored.size, 3)

    def test_head_object(self):
        self.client.head_object.return_value = {"ContentLength": 42, "ContentType": "application/pdf", "Metadata": {}}
        head = self.store.head_object(key="uploads/1/a.pdf")
        self.assertEqual((head.size, head.content_type), (42, "application/pdf"))

    def test_head_missing_object(self):
        self.client.head_object.side_effect = ClientError({"Error": {"Code": "404"}}, "HeadObject")
        self.assertIsNone(self.store.head_object(key="uploads/1/a.pdf"))

    def test_head_other_errors_propagate(self):
        self.client.head_object.side_effect = ClientError({"Error": {"Code": "403"}}, "HeadObject")
        with self.assertRaises(ClientError):
            self.store.head_object(key="uploads/1/a.pdf")


class TestStoreFactories(unittest.TestCase):

    def setUp(self) -> None:
        self.storage = TempStorage()

    def tearDown(self) -> None:
        self.storage.cleanup()

    def test_local_backend(self):
        settings = Settings(
            FILE_MANAGER_STORAGE_BACKEND="LOCAL",
            FILE_MANAGER_STORAGE_ROOT=str(self.storage.root / "objects"),
            FILE_MANAGER_METADATA_DB_PATH=str(self.storage.root / "db.json"),
        )
        self.assertIsInstance(create_object_store(settings), LocalStorageProvider)
        metadata_store = create_metadata_store(settings)
        self.assertIsInstance(metadata_store, JsonFileMetadataStore)
        self.assertEqual(os.path.basename(metadata_store.path), "db.json")

    def test_s3_backend_requires_bucket(self):
        settings = Settings(FILE_MANAGER_STORAGE_BACKEND="s3", FILE_MANAGER_S3_BUCKET_NAME="")
        with self.assertRaises(ValueError):
            create_object_store(settings)

    @patch("file_manager.storage.s3_provider.boto3.client")
    def test_s3_backend(self, client_factory):
        settings = Settings(FILE_MANAGER_STORAGE_BACKEND="s3", FILE_MANAGER_S3_BUCKET_NAME="files")
        self.assertIsInstance(create_object_store(settings), S3StorageProvider)
        client_factory.assert_called_once()
