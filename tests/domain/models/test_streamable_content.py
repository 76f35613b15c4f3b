import io

import pytest
from pydantic import ValidationError

from mediastream.domain.models.file_category import FileCategory
from mediastream.domain.models.file_record import FileRecord
from mediastream.domain.models.streamable_content import StreamableContent


class TrackingStream(io.BytesIO):
    def __init__(self, data: bytes) -> None:
        super().__init__(data)
        self.close_calls = 0

    def close(self) -> None:
        self.close_calls += 1
        super().close()


def _record(size: int = 10) -> FileRecord:
    return FileRecord.create(
        original_name="clip.mp4",
        category=FileCategory.VIDEO,
        media_type="video/mp4",
        size=size,
        storage_locator="clip.mp4",
    )


def test_full_content_uses_record_size() -> None:
    content = StreamableContent.full(_record(), io.BytesIO(b"0123456789"))

    assert not content.is_partial()
    assert content.content_length == 10
    assert content.content_range_header() is None
    assert content.media_type == "video/mp4"


def test_partial_content_header() -> None:
    content = StreamableContent.partial(_record(1000), io.BytesIO(b"x" * 100), 0, 99)

    assert content.is_partial()
    assert content.content_length == 100
    assert content.content_range_header() == "bytes 0-99/1000"


def test_iter_chunks_closes_stream() -> None:
    stream = TrackingStream(b"abcdefgh")
    content = StreamableContent.full(_record(8), stream)

    assert b"".join(content.iter_chunks(chunk_size=3)) == b"abcdefgh"
    assert stream.close_calls >= 1


def test_abandoned_iteration_closes_stream() -> None:
    stream = TrackingStream(b"abcdefgh")
    content = StreamableContent.full(_record(8), stream)

    chunks = content.iter_chunks(chunk_size=2)
    next(chunks)
    chunks.close()

    assert stream.closed


def test_context_manager_closes_stream() -> None:
    stream = TrackingStream(b"abc")

    with StreamableContent.full(_record(3), stream) as content:
        assert content.stream.read() == b"abc"

    assert stream.closed


def test_media_type_override() -> None:
    content = StreamableContent(
        stream=io.BytesIO(b"jpg"),
        record=_record(),
        content_length=3,
        media_type_override="image/jpeg",
    )

    assert content.media_type == "image/jpeg"


def test_range_bounds_must_be_paired() -> None:
    with pytest.raises(ValidationError):
        StreamableContent(stream=io.BytesIO(), record=_record(), content_length=1, range_start=0)
