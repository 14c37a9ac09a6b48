import base64
import unittest

from fastapi.testclient import TestClient

from file_manager.app import create_app

from ..tests.utils_helpers import FormField, TempStorage, build_multipart_body, multipart_content_type


class TestFilesApi(unittest.TestCase):

    def setUp(self) -> None:
        self.storage = TempStorage()
        self.client = TestClient(create_app(processor=self.storage.processor()))

    def tearDown(self) -> None:
        self.storage.cleanup()

    def _upload(self, fields: list[FormField], **headers: str):
        return self.client.post(
            "/api/upload",
            content=build_multipart_body(fields),
            headers={"Content-Type": multipart_content_type(), **headers},
        )

    def test_upload_then_metadata(self):
        response = self._upload([
            FormField(name="file", data=b"hello\nworld\n", filename="notes.txt", content_type="text/plain"),
            FormField(name="Project Name", data="apollo"),
            FormField(name="revision", data="3"),
        ])

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["message"], "File uploaded successfully")
        self.assertEqual(body["file_name"], "notes.txt")
        self.assertEqual(body["file_size"], 12)
        self.assertEqual(body["metadata_fields_stored"], 2)
        self.assertEqual(body["s3_key"], f"uploads/{body['file_id']}/notes.txt")

        metadata = self.client.get(f"/api/metadata/{body['file_id']}")
        self.assertEqual(metadata.status_code, 200)
        record = metadata.json()["metadata"]
        self.assertEqual(record["client_metadata"], {"project_name": "apollo", "revision": 3})
        # classification ran as a background task of the upload request
        self.assertEqual(record["status"], "processed")
        self.assertEqual(record["extracted_file_type"], "text")
        self.assertEqual(record["extracted_estimated_lines"], 1)

    def test_base64_encoded_body(self):
        body = build_multipart_body([FormField(name="file", data=b"\x00\x01\x02", filename="blob.bin")])
        response = self.client.post(
            "/api/upload",
            content=base64.b64encode(body),
            headers={"Content-Type": multipart_content_type(), "X-Body-Encoding": "base64"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["file_size"], 3)

    def test_upload_without_multipart_content_type(self):
        response = self.client.post("/api/upload", content=b"{}", headers={"Content-Type": "application/json"})
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body["error"], "Malformed multipart request")
        self.assertEqual(body["details"], ["Content-Type must be multipart/form-data"])
        self.assertIn("timestamp", body)

    def test_upload_without_file(self):
        response = self._upload([FormField(name="title", data="no file here")])
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "No file provided in the request")
        self.assertNotIn("details", response.json())

    def test_upload_with_invalid_metadata(self):
        fields = [FormField(name="file", data=b"abc", filename="a.txt")]
        fields.extend(FormField(name=f"field_{i}", data=str(i)) for i in range(51))
        response = self._upload(fields)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Invalid metadata format")
        self.assertEqual(response.json()["details"], ["Too many metadata fields - maximum 50 allowed"])

    def test_upload_too_large(self):
        client = TestClient(create_app(processor=self.storage.processor(max_file_size=1024 * 1024)))
        response = client.post(
            "/api/upload",
            content=build_multipart_body([FormField(name="file", data=b"x" * (2 * 1024 * 1024), filename="big")]),
            headers={"Content-Type": multipart_content_type()},
        )
        self.assertEqual(response.status_code, 413)
        body = response.json()
        self.assertEqual(body["error"], "File too large")
        self.assertEqual(body["max_size"], "1MB")
        self.assertEqual(body["actual_size"], "2.0MB")

    def test_metadata_not_found(self):
        response = self.client.get("/api/metadata/does-not-exist")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"], "File not found")

    def test_list_files(self):
        for name in ("a.txt", "b.txt", "c.txt"):
            self._upload([FormField(name="file", data=name, filename=name, content_type="text/plain")])

        first = self.client.get("/api/files", params={"limit": 2})
        self.assertEqual(first.status_code, 200)
        first_body = first.json()
        self.assertEqual(first_body["total_count"], 2)
        self.assertIn("next_key", first_body)
        self.assertEqual(set(first_body["files"][0]), {"file_id", "file_name", "upload_date", "file_size",
                                                        "status", "content_type"})

        second = self.client.get("/api/files", params={"limit": 2, "lastKey": first_body["next_key"]})
        second_body = second.json()
        self.assertEqual(second_body["total_count"], 1)
        self.assertNotIn("next_key", second_body)

        names = {item["file_name"] for item in first_body["files"] + second_body["files"]}
        self.assertEqual(names, {"a.txt", "b.txt", "c.txt"})

    def test_list_files_rejects_non_positive_limit(self):
        self.assertEqual(self.client.get("/api/files", params={"limit": 0}).status_code, 422)


class TestEventsApi(unittest.TestCase):

    def setUp(self) -> None:
        self.storage = TempStorage()
        self.processor = self.storage.processor()
        self.client = TestClient(create_app(processor=self.processor))

    def tearDown(self) -> None:
        self.storage.cleanup()

    def test_object_created(self):
        self.storage.object_store.put_object(key="uploads/abc/photo.png", payload=b"\x89PNG", content_type="image/png")
        self.storage.metadata_store.put({
            "file_id": "abc",
            "file_name": "photo.png",
            "content_type": "image/png",
            "s3_key": "uploads/abc/photo.png",
            "upload_date": "2024-05-01T10:00:00.000Z",
            "file_size": 4,
            "status": "uploaded",
            "client_metadata": {},
        })

        response = self.client.post("/api/events/object-created", json={"Records": [
            {"eventName": "ObjectCreated:Put", "s3": {"bucket": {"name": "local"},
                                                       "object": {"key": "uploads/abc/photo.png", "size": 4}}},
            {"s3": {"object": {"key": "elsewhere/photo.png", "size": 4}}},
        ]})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"message": "Files processed successfully", "records": 2, "processed": 1})

        record = self.client.get("/api/metadata/abc").json()["metadata"]
        self.assertEqual(record["extracted_file_type"], "image")
        self.assertEqual(record["extracted_format"], "PNG")
        self.assertEqual(record["extracted_category"], "media")
