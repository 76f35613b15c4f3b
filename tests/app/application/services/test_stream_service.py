import io
import uuid

import pytest

from mediastream.application.errors.exceptions import InvalidRangeError, NotFoundError
from mediastream.application.services.stream_service import FileStreamService
from mediastream.domain.models.file_category import FileCategory
from mediastream.domain.models.file_record import FileRecord
from mediastream.infrastructure.repositories.in_memory_file_record_repository import (
    InMemoryFileRecordRepository,
)

PAYLOAD = bytes(range(256)) * 4  # 1024 bytes


@pytest.fixture
def repository() -> InMemoryFileRecordRepository:
    return InMemoryFileRecordRepository()


@pytest.fixture
def stored_record(fake_storage, repository) -> FileRecord:
    fake_storage.save("clip.mp4", io.BytesIO(PAYLOAD), len(PAYLOAD))
    record = FileRecord.create(
        original_name="clip.mp4",
        category=FileCategory.VIDEO,
        media_type="video/mp4",
        size=len(PAYLOAD),
        storage_locator="clip.mp4",
    )
    return repository.save(record)


@pytest.fixture
def service(fake_storage, repository) -> FileStreamService:
    return FileStreamService(fake_storage, repository)


def test_full_stream_without_range(service, stored_record) -> None:
    with service.stream(stored_record.id) as content:
        assert not content.is_partial()
        assert content.content_length == 1024
        assert content.stream.read() == PAYLOAD


@pytest.mark.parametrize("blank", [None, "", "   "])
def test_blank_range_is_full_content(service, stored_record, blank) -> None:
    with service.stream(stored_record.id, blank) as content:
        assert not content.is_partial()


@pytest.mark.parametrize("other_unit", ["items=0-4", "0-4", "lines=1-2"])
def test_non_byte_unit_is_ignored(service, stored_record, other_unit) -> None:
    with service.stream(stored_record.id, other_unit) as content:
        assert not content.is_partial()
        assert content.content_length == 1024
        assert content.stream.read() == PAYLOAD


def test_bounded_range(service, stored_record) -> None:
    with service.stream(stored_record.id, "bytes=0-99") as content:
        assert content.content_length == 100
        assert content.content_range_header() == "bytes 0-99/1024"
        assert content.stream.read() == PAYLOAD[:100]


def test_suffix_range(service, stored_record) -> None:
    with service.stream(stored_record.id, "bytes=-100") as content:
        assert (content.range_start, content.range_end) == (924, 1023)
        assert content.stream.read() == PAYLOAD[-100:]


def test_unknown_file_is_not_found(service) -> None:
    with pytest.raises(NotFoundError):
        service.stream(uuid.uuid4())


def test_malformed_range(service, stored_record) -> None:
    with pytest.raises(InvalidRangeError):
        service.stream(stored_record.id, "bytes=0-1,5-9")


def test_get_thumbnail(service, fake_storage, repository, stored_record) -> None:
    fake_storage.save("thumb.jpg", io.BytesIO(b"\xff\xd8thumb"), 7)
    repository.save(stored_record.with_thumbnail_locator("thumb.jpg"))

    with service.get_thumbnail(stored_record.id) as content:
        assert content.media_type == "image/jpeg"
        assert content.content_length == 7
        assert content.stream.read() == b"\xff\xd8thumb"


def test_get_thumbnail_without_thumbnail(service, stored_record) -> None:
    with pytest.raises(NotFoundError):
        service.get_thumbnail(stored_record.id)
