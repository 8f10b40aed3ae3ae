import base64

import httpx
from starlette.datastructures import UploadFile


def upload(client, content=b"\xff\xd8\xffjpeg-bytes", **data):
    return client.post(
        "/api/recognize-food",
        files={"image": ("meal.jpg", content, "image/jpeg")},
        data=data,
    )


def test_missing_image_is_rejected(client, fatsecret):
    response = client.post("/api/recognize-food")

    assert response.status_code == 400
    assert response.json() == {
        "error": "No image file provided",
        "message": "Please upload an image file",
    }
    assert fatsecret.token_requests == []
    assert fatsecret.recognition_requests == []


def test_missing_image_with_other_fields_is_rejected(client):
    response = client.post("/api/recognize-food", data={"region": "GB"})

    assert response.status_code == 400


def test_forwards_image_and_relays_response_verbatim(client, fatsecret):
    fatsecret.recognition_body = {"foods": [{"food_id": 1, "food_name": "Banana"}], "extra": None}

    response = upload(client, content=b"image-bytes")

    assert response.status_code == 200
    assert response.json() == {"foods": [{"food_id": 1, "food_name": "Banana"}], "extra": None}

    request = fatsecret.recognition_requests[0]
    assert request.headers["authorization"] == "Bearer token-1"
    assert fatsecret.last_payload() == {
        "image_b64": base64.b64encode(b"image-bytes").decode(),
        "include_food_data": True,
        "region": "US",
        "language": "en",
    }


def test_region_and_language_are_forwarded(client, fatsecret):
    upload(client, region="GB", language="fr")

    payload = fatsecret.last_payload()
    assert payload["region"] == "GB"
    assert payload["language"] == "fr"


def test_token_is_shared_across_requests(client, fatsecret):
    upload(client)
    upload(client)

    assert len(fatsecret.token_requests) == 1
    assert len(fatsecret.recognition_requests) == 2


def test_expired_token_is_refreshed_on_next_request(client, fatsecret, clock):
    upload(client)
    clock.advance(3600)
    upload(client)

    assert len(fatsecret.token_requests) == 2
    assert fatsecret.recognition_requests[-1].headers["authorization"] == "Bearer token-2"


def test_upstream_client_error_passes_through(client, fatsecret):
    fatsecret.recognition_status = 401
    fatsecret.recognition_body = {"error": {"code": 13, "message": "Invalid or expired token"}}

    response = upload(client)

    assert response.status_code == 401
    assert response.json() == {
        "error": "FatSecret API Error",
        "message": "Invalid or expired token",
        "details": {"error": {"code": 13, "message": "Invalid or expired token"}},
    }


def test_upstream_server_error_without_message(client, fatsecret):
    fatsecret.recognition_status = 502
    fatsecret.recognition_body = "Bad Gateway"

    response = upload(client)

    assert response.status_code == 502
    body = response.json()
    assert body["message"] == "Failed to process image"
    assert body["details"] == "Bad Gateway"


def test_upstream_timeout_maps_to_gateway_timeout(client, fatsecret):
    fatsecret.recognition_exc = httpx.ReadTimeout

    response = upload(client)

    assert response.status_code == 504
    assert response.json() == {
        "error": "Request Timeout",
        "message": "Image processing took too long",
    }
    assert len(fatsecret.recognition_requests) == 1


def test_connection_failure_is_internal_error(client, fatsecret):
    fatsecret.recognition_exc = httpx.ConnectError

    response = upload(client)

    assert response.status_code == 500
    assert response.json()["error"] == "Internal Server Error"


def test_token_failure_is_internal_error(client, fatsecret):
    fatsecret.token_status = 400
    fatsecret.token_body = b'{"error": "invalid_client"}'

    response = upload(client)

    assert response.status_code == 500
    assert response.json() == {
        "error": "Internal Server Error",
        "message": "Failed to authenticate with FatSecret API",
    }
    assert fatsecret.recognition_requests == []


def test_oversized_image_is_rejected(client, settings, fatsecret):
    settings.MAX_UPLOAD_BYTES = 1024

    response = upload(client, content=b"x" * 1025)

    assert response.status_code == 413
    assert response.json()["error"] == "File too large"
    assert fatsecret.recognition_requests == []


def test_oversized_image_read_is_bounded(client, settings, monkeypatch):
    settings.MAX_UPLOAD_BYTES = 1024
    reads = []
    original_read = UploadFile.read

    async def recording_read(self, size=-1):
        data = await original_read(self, size)
        reads.append((size, len(data)))
        return data

    monkeypatch.setattr(UploadFile, "read", recording_read)

    response = upload(client, content=b"x" * 5_000_000)

    assert response.status_code == 413
    assert reads
    assert all(size != -1 for size, _ in reads)
    assert sum(n for _, n in reads) <= settings.MAX_UPLOAD_BYTES + 1


def test_upstream_call_uses_configured_timeout(client, fatsecret):
    upload(client)

    timeout = fatsecret.recognition_requests[0].extensions["timeout"]
    assert timeout["read"] == 30.0
    assert timeout["connect"] == 30.0
