import uuid
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from mediastream.application.services.delete_service import FileDeleteService
from mediastream.application.services.file_metadata_service import FileMetadataService
from mediastream.application.services.stream_service import FileStreamService
from mediastream.application.services.thumbnail_service import ThumbnailService
from mediastream.application.services.upload_service import FileUploadService
from mediastream.infrastructure.external.file_storage.local_file_storage import LocalFileStorage
from mediastream.infrastructure.external.thumbnail.pillow_thumbnail_generator import (
    PillowThumbnailGenerator,
)
from mediastream.infrastructure.repositories.in_memory_file_record_repository import (
    InMemoryFileRecordRepository,
)
from mediastream.interfaces.service_dependencies import (
    get_delete_service,
    get_file_metadata_service,
    get_stream_service,
    get_upload_service,
)
from mediastream.main import app

BASE = "/api/mediastream/files"


@pytest.fixture
def services(tmp_path: Path) -> Generator[dict, None, None]:
    """使用临时目录与内存仓库替换真实服务"""
    storage = LocalFileStorage(tmp_path / "store")
    repository = InMemoryFileRecordRepository()
    thumbnails = ThumbnailService([PillowThumbnailGenerator()])
    overrides = {
        get_upload_service: lambda: FileUploadService(
            storage, repository, thumbnails, max_file_size=1024 * 1024
        ),
        get_stream_service: lambda: FileStreamService(storage, repository),
        get_delete_service: lambda: FileDeleteService(storage, repository),
        get_file_metadata_service: lambda: FileMetadataService(repository),
    }
    app.dependency_overrides.update(overrides)
    try:
        yield {"storage": storage, "repository": repository}
    finally:
        for dependency in overrides:
            app.dependency_overrides.pop(dependency, None)


def _upload(client: TestClient, name: str, data: bytes, media_type: str) -> dict:
    response = client.post(BASE, files={"file": (name, data, media_type)})
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_upload_image_returns_urls(client: TestClient, services, jpeg_bytes: bytes) -> None:
    data = _upload(client, "a.jpg", jpeg_bytes, "image/jpeg")

    assert data["category"] == "image"
    assert data["size"] == len(jpeg_bytes)
    assert data["thumbnail_generated"] is True
    assert data["stream_url"] == f"{BASE}/{data['id']}/stream"
    assert data["thumbnail_url"] == f"{BASE}/{data['id']}/thumbnail"


def test_upload_over_limit_is_413(client: TestClient, services) -> None:
    response = client.post(BASE, files={"file": ("big.mp4", b"x" * (1024 * 1024 + 1), "video/mp4")})

    assert response.status_code == 413
    assert response.json()["code"] == 413
    assert services["repository"].count() == 0


def test_stream_full_and_partial(client: TestClient, services) -> None:
    payload = bytes(range(256)) * 4
    file_id = _upload(client, "song.mp3", payload, "audio/mpeg")["id"]

    full = client.get(f"{BASE}/{file_id}/stream")
    assert full.status_code == 200
    assert full.headers["accept-ranges"] == "bytes"
    assert full.headers["content-length"] == "1024"
    assert full.headers["content-type"].startswith("audio/mpeg")
    assert full.content == payload

    partial = client.get(f"{BASE}/{file_id}/stream", headers={"Range": "bytes=0-99"})
    assert partial.status_code == 206
    assert partial.headers["content-range"] == "bytes 0-99/1024"
    assert partial.headers["content-length"] == "100"
    assert partial.content == payload[:100]

    suffix = client.get(f"{BASE}/{file_id}/stream", headers={"Range": "bytes=-24"})
    assert suffix.status_code == 206
    assert suffix.headers["content-range"] == "bytes 1000-1023/1024"
    assert suffix.content == payload[-24:]


def test_unsatisfiable_range_is_416(client: TestClient, services) -> None:
    file_id = _upload(client, "notes.txt", b"hello", "text/plain")["id"]

    response = client.get(f"{BASE}/{file_id}/stream", headers={"Range": "bytes=10-20"})

    assert response.status_code == 416
    assert response.headers["content-range"] == "bytes */5"


def test_thumbnail_endpoint(client: TestClient, services, jpeg_bytes: bytes) -> None:
    image_id = _upload(client, "a.jpg", jpeg_bytes, "image/jpeg")["id"]
    text_id = _upload(client, "notes.txt", b"hello", "text/plain")["id"]

    thumbnail = client.get(f"{BASE}/{image_id}/thumbnail")
    assert thumbnail.status_code == 200
    assert thumbnail.headers["content-type"] == "image/jpeg"
    assert thumbnail.content[:2] == b"\xff\xd8"

    assert client.get(f"{BASE}/{text_id}/thumbnail").status_code == 404


def test_list_and_get_info(client: TestClient, services) -> None:
    first = _upload(client, "one.txt", b"1", "text/plain")["id"]
    second = _upload(client, "two.txt", b"22", "text/plain")["id"]

    listing = client.get(BASE, params={"page": 0, "size": 10}).json()["data"]
    assert listing["total"] == 2
    assert {item["id"] for item in listing["items"]} == {first, second}

    info = client.get(f"{BASE}/{second}").json()["data"]
    assert info["original_name"] == "two.txt"
    assert info["formatted_size"] == "2 B"
    assert info["has_thumbnail"] is False
    assert "storage_locator" not in info


def test_invalid_paging_is_400(client: TestClient, services) -> None:
    response = client.get(BASE, params={"page": 0, "size": 500})

    assert response.status_code == 400


def test_delete_then_not_found(client: TestClient, services) -> None:
    file_id = _upload(client, "gone.txt", b"bye", "text/plain")["id"]

    assert client.delete(f"{BASE}/{file_id}").status_code == 204
    assert client.get(f"{BASE}/{file_id}").status_code == 404
    assert client.get(f"{BASE}/{file_id}/stream").status_code == 404
    assert client.delete(f"{BASE}/{file_id}").status_code == 404


def test_unknown_file_is_404(client: TestClient, services) -> None:
    response = client.get(f"{BASE}/{uuid.uuid4()}/stream")

    assert response.status_code == 404
    assert response.json()["code"] == 404


def test_category_filter_reports_filtered_total(client: TestClient, services, jpeg_bytes: bytes) -> None:
    for name in ("a.jpg", "b.jpg", "c.jpg"):
        _upload(client, name, jpeg_bytes, "image/jpeg")
    video_id = _upload(client, "clip.mp4", b"\x00\x00\x00\x18ftypmp42", "video/mp4")["id"]

    videos = client.get(BASE, params={"category": "video"}).json()["data"]
    assert [item["id"] for item in videos["items"]] == [video_id]
    assert videos["total"] == 1

    images = client.get(BASE, params={"category": "image", "size": 2}).json()["data"]
    assert len(images["items"]) == 2
    assert images["total"] == 3

    assert client.get(BASE).json()["data"]["total"] == 4


def test_unknown_range_unit_serves_full_body(client: TestClient, services) -> None:
    file_id = _upload(client, "notes.txt", b"0123456789", "text/plain")["id"]

    response = client.get(f"{BASE}/{file_id}/stream", headers={"Range": "items=0-4"})

    assert response.status_code == 200
    assert "content-range" not in response.headers
    assert response.content == b"0123456789"
