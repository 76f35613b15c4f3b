import uuid

import pytest
from pydantic import ValidationError

from mediastream.domain.models.file_category import FileCategory
from mediastream.domain.models.file_record import FileRecord, format_size


def _record(**kwargs) -> FileRecord:
    values = dict(
        original_name="Holiday.Photo.JPG",
        category=FileCategory.IMAGE,
        media_type="image/jpeg",
        size=2048,
        storage_locator="/data/abc.jpg",
    )
    values.update(kwargs)
    return FileRecord.create(**values)


def test_create_has_no_thumbnail_and_equal_timestamps() -> None:
    record = _record()

    assert isinstance(record.id, uuid.UUID)
    assert record.thumbnail_locator is None
    assert not record.has_thumbnail()
    assert record.created_at == record.updated_at


def test_create_uses_given_id() -> None:
    file_id = uuid.uuid4()

    assert _record(file_id=file_id).id == file_id


def test_with_thumbnail_locator_returns_new_record() -> None:
    record = _record()

    updated = record.with_thumbnail_locator("/data/abc_thumb.jpg")

    assert updated.has_thumbnail()
    assert updated.id == record.id
    assert updated.updated_at >= record.updated_at
    assert record.thumbnail_locator is None


def test_record_is_immutable() -> None:
    record = _record()

    with pytest.raises(ValidationError):
        record.size = 1


def test_blank_name_and_negative_size_are_rejected() -> None:
    with pytest.raises(ValidationError):
        _record(original_name="  ")
    with pytest.raises(ValidationError):
        _record(size=-1)


def test_name_helpers() -> None:
    record = _record()

    assert record.extension == "jpg"
    assert record.base_name == "Holiday.Photo"
    assert _record(original_name="README").extension == ""


def test_category_predicates() -> None:
    pdf = _record(original_name="a.pdf", category=FileCategory.DOCUMENT, media_type="application/pdf")

    assert pdf.is_document() and pdf.is_pdf()
    assert pdf.can_generate_thumbnail()
    assert not _record(category=FileCategory.AUDIO).can_generate_thumbnail()
    assert _record(category=FileCategory.VIDEO).is_streamable()


@pytest.mark.parametrize(
    "size, expected",
    [
        (512, "512 B"),
        (2048, "2.0 KB"),
        (15 * 1024 * 1024 + 512 * 1024, "15.5 MB"),
        (3 * 1024 * 1024 * 1024, "3.00 GB"),
    ],
)
def test_format_size(size, expected) -> None:
    assert format_size(size) == expected
