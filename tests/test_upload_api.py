"""
Presigned upload URL endpoint tests
"""
from app.services.storage_service import StorageError


def test_presign_returns_upload_slot(client, s3_stub):
    response = client.get("/api/v1/upload/presign", params={"filename": "poster.jpg", "contentType": "image/png"})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["message"] == "Presigned URL generated successfully"

    data = body["data"]
    assert data["object_key"].startswith("poster_")
    assert data["object_key"].endswith(".jpg")
    assert data["public_url"] == f"http://localhost:9000/movies/{data['object_key']}"
    assert data["expires_in"] == 900
    assert s3_stub.presign_calls[0][1]["ContentType"] == "image/png"


def test_presign_defaults_content_type_to_jpeg(client, s3_stub):
    client.get("/api/v1/upload/presign", params={"filename": "backdrop.jpg"})

    assert s3_stub.presign_calls[0][1]["ContentType"] == "image/jpeg"


def test_presign_requires_filename(client):
    response = client.get("/api/v1/upload/presign")

    assert response.status_code == 400
    assert response.json() == {"status": "error", "code": 400, "message": "filename is required"}


def test_presign_storage_failure_is_server_error(client, storage_service, monkeypatch):
    def broken(filename, content_type):
        raise StorageError("endpoint unreachable")

    monkeypatch.setattr(storage_service, "generate_presigned_url", broken)

    response = client.get("/api/v1/upload/presign", params={"filename": "poster.jpg"})

    assert response.status_code == 500
    body = response.json()
    assert body["status"] == "fail"
    assert "endpoint unreachable" in body["message"]
