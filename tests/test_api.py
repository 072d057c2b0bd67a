import json

import pytest
from fastapi.testclient import TestClient

from comicshelf.main import app
from comicshelf.services.ingest_pipeline import INVALID_TYPE_MESSAGE, NO_VALID_FILES_MESSAGE


@pytest.fixture
def client():
	return TestClient(app)


def test_upload_runs_job_and_stores_records(client, image_bytes):
	files = [
		("files", ("Batman_1_(1940).jpg", image_bytes(), "image/jpeg")),
		("files", ("notes.txt", b"not a cover", "text/plain")),
	]
	resp = client.post("/ingest/upload", files=files)
	assert resp.status_code == 200
	body = resp.json()
	assert body["status"] == "queued"
	assert body["num_files"] == 2
	assert body["filenames"] == ["Batman_1_(1940).jpg", "notes.txt"]
	job_id = body["job_id"]
	assert job_id.startswith("batman_1_-1940")

	# background tasks finish before TestClient returns
	status = client.get(body["status_endpoint"]).json()
	assert status["status"] == "completed"
	assert [i["status"] for i in status["items"]] == ["success", "error"]

	result = client.get(body["result_endpoint"]).json()
	assert result["succeeded"] == 1
	assert result["progress"] == {"completed": 2, "total": 2}
	assert result["failures"] == [{"filename": "notes.txt", "error": INVALID_TYPE_MESSAGE}]

	records = client.get("/catalog").json()
	assert len(records) == 1
	assert records[0]["series"] == "Batman"
	assert records[0]["publicationDate"] == "1940-01-01"
	assert records[0]["condition"] == "Near Mint"


def test_upload_without_images_reports_batch_error(client):
	resp = client.post("/ingest/upload", files=[("files", ("a.txt", b"a", "text/plain"))])
	result = client.get(resp.json()["result_endpoint"]).json()
	assert result["status"] == "error"
	assert result["error"] == NO_VALID_FILES_MESSAGE
	assert result["failures"] == [{"filename": "Upload", "error": NO_VALID_FILES_MESSAGE}]


def test_unknown_job(client):
	assert client.get("/ingest/status/missing").json() == {"job_id": "missing", "status": "unknown"}
	assert client.get("/ingest/result/missing").status_code == 404


def test_catalog_export_and_import(client):
	payload = json.dumps([{"id": "1", "series": "Saga"}])
	resp = client.post("/catalog/import", files={"file": ("comics-export.json", payload, "application/json")})
	assert resp.json() == {"imported": 1}

	exported = client.get("/catalog/export")
	assert exported.headers["content-type"].startswith("application/json")
	assert json.loads(exported.text) == [{"id": "1", "series": "Saga"}]

	bad = client.post("/catalog/import", files={"file": ("x.json", "{}", "application/json")})
	assert bad.status_code == 400
