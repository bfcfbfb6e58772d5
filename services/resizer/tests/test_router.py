import base64

from fastapi.testclient import TestClient

from app.main import create_app
from app.resize.router import _get_settings


def _use_settings(client: TestClient, settings) -> None:
    client.app.dependency_overrides[_get_settings] = lambda: settings


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["service"] == "resizer"


def test_resize_returns_base64_image(client: TestClient, make_settings, echo_resizer) -> None:
    _use_settings(client, make_settings(resizer_path=str(echo_resizer), png_compression="none"))

    response = client.post(
        "/api/v1/resize",
        json={"key": "photo.jpg", "max_width": 200, "format": "png"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["key"] == "photo.jpg"
    image = base64.b64decode(data["image"])
    assert data["size_bytes"] == len(image)
    assert image.decode().split("\n") == [
        "--s3-bucket=mybucket",
        "--s3-key=photo.jpg",
        "--max-width=200",
        "--format=png",
        "--png-compression=none",
    ]


def test_resize_echoes_request_id(client: TestClient, make_settings, echo_resizer) -> None:
    _use_settings(client, make_settings(resizer_path=str(echo_resizer)))

    response = client.post(
        "/api/v1/resize",
        json={"key": "photo.jpg"},
        headers={"X-Request-ID": "req-123"},
    )

    assert response.headers["X-Request-ID"] == "req-123"


def test_resizer_failure_maps_to_502(client: TestClient, make_settings, make_resizer) -> None:
    _use_settings(client, make_settings(resizer_path=str(make_resizer("sys.exit(4)"))))

    response = client.post("/api/v1/resize", json={"key": "photo.jpg"})

    assert response.status_code == 502
    error = response.json()["error"]
    assert error["code"] == "resizer_failed"
    assert "4" in error["message"]


def test_missing_binary_maps_to_503(client: TestClient, make_settings, tmp_path) -> None:
    _use_settings(client, make_settings(resizer_path=str(tmp_path / "missing")))

    response = client.post(
        "/api/v1/resize",
        json={"key": "photo.jpg"},
        headers={"X-Request-ID": "req-456"},
    )

    assert response.status_code == 503
    body = response.json()
    assert body["error"]["code"] == "resizer_unavailable"
    assert body["request_id"] == "req-456"


def test_timeout_maps_to_504(client: TestClient, make_settings, make_resizer) -> None:
    path = make_resizer("""
        import time
        time.sleep(30)
    """)
    _use_settings(client, make_settings(resizer_path=str(path), resizer_timeout_seconds=0.5))

    response = client.post("/api/v1/resize", json={"key": "photo.jpg"})

    assert response.status_code == 504
    assert response.json()["error"]["code"] == "resize_timeout"


def test_oversized_image_maps_to_413(client: TestClient, make_settings, make_resizer) -> None:
    path = make_resizer("sys.stdout.buffer.write(b'x' * 2048)")
    _use_settings(client, make_settings(resizer_path=str(path), resizer_max_output_bytes=100))

    response = client.post("/api/v1/resize", json={"key": "photo.jpg"})

    assert response.status_code == 413
    assert response.json()["error"]["code"] == "resized_image_too_large"


def test_missing_bucket_maps_to_503(client: TestClient, make_settings, echo_resizer) -> None:
    _use_settings(client, make_settings(s3_bucket="", resizer_path=str(echo_resizer)))

    response = client.post("/api/v1/resize", json={"key": "photo.jpg"})

    assert response.status_code == 503
    assert response.json()["error"]["code"] == "bucket_not_configured"


def test_invalid_body_rejected(client: TestClient) -> None:
    response = client.post("/api/v1/resize", json={"key": "", "max_width": -1})
    assert response.status_code == 422


def test_create_app_applies_cors_origins(make_settings) -> None:
    app = create_app(make_settings(cors_origins="http://a.test, http://b.test"))

    with TestClient(app) as client:
        response = client.options(
            "/api/v1/resize",
            headers={
                "Origin": "http://b.test",
                "Access-Control-Request-Method": "POST",
            },
        )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://b.test"
