import uuid

from mediastream.domain.models.file_category import FileCategory
from mediastream.domain.models.file_record import FileRecord
from mediastream.interfaces.schemas.base import Response
from mediastream.interfaces.schemas.file import FileInfoResponse


def test_response_fail_default_data_is_none() -> None:
    response = Response[FileInfoResponse].fail(code=404, msg="文件不存在")

    assert response.code == 404
    assert response.msg == "文件不存在"
    assert response.data is None


def test_file_info_hides_locators() -> None:
    record = FileRecord.create(
        original_name="a.jpg",
        category=FileCategory.IMAGE,
        media_type="image/jpeg",
        size=10,
        storage_locator="/secret/a.jpg",
        file_id=uuid.UUID(int=1),
    ).with_thumbnail_locator("/secret/a_thumb.jpg")

    info = FileInfoResponse.from_record(record, "https://cdn.example.com/api/mediastream")

    assert info.thumbnail_url == (
        "https://cdn.example.com/api/mediastream/files/00000000-0000-0000-0000-000000000001/thumbnail"
    )
    assert "/secret" not in info.model_dump_json()
