from datetime import datetime, timedelta
from pathlib import Path

import pytest

from mediastream.domain.models.file_category import FileCategory
from mediastream.domain.models.file_record import FileRecord
from mediastream.infrastructure.repositories.db_file_record_repository import (
    DBFileRecordRepository,
)
from mediastream.infrastructure.storage.database import Database


@pytest.fixture
def database(tmp_path: Path):
    database = Database(f"sqlite:///{tmp_path / 'meta' / 'mediastream.db'}")
    database.init()
    yield database
    database.shutdown()


@pytest.fixture
def repository(database: Database) -> DBFileRecordRepository:
    return DBFileRecordRepository(database.session_factory)


def _record(name: str, category: FileCategory = FileCategory.IMAGE, minutes_ago: int = 0) -> FileRecord:
    created_at = (datetime.now() - timedelta(minutes=minutes_ago)).replace(microsecond=0)
    return FileRecord(
        original_name=name,
        category=category,
        media_type="image/jpeg",
        size=4096,
        storage_locator=f"/data/{name}",
        created_at=created_at,
        updated_at=created_at,
    )


def test_round_trip(repository: DBFileRecordRepository) -> None:
    record = repository.save(_record("a.jpg"))

    loaded = repository.get_by_id(record.id)

    assert loaded == record
    assert loaded.category is FileCategory.IMAGE
    assert repository.exists(record.id)
    assert repository.count() == 1


def test_update_existing_record(repository: DBFileRecordRepository) -> None:
    record = repository.save(_record("a.jpg"))

    repository.save(record.with_thumbnail_locator("/data/a_thumb.jpg"))

    assert repository.count() == 1
    assert repository.get_by_id(record.id).thumbnail_locator == "/data/a_thumb.jpg"


def test_listing_is_newest_first_and_paged(repository: DBFileRecordRepository) -> None:
    repository.save(_record("old.jpg", minutes_ago=30))
    repository.save(_record("clip.mp4", FileCategory.VIDEO, minutes_ago=20))
    repository.save(_record("new.jpg", minutes_ago=10))

    assert [r.original_name for r in repository.list(0, 10)] == ["new.jpg", "clip.mp4", "old.jpg"]
    assert [r.original_name for r in repository.list(1, 2)] == ["old.jpg"]
    assert [r.original_name for r in repository.list_by_category(FileCategory.IMAGE, 0, 10)] == [
        "new.jpg",
        "old.jpg",
    ]


def test_delete(repository: DBFileRecordRepository) -> None:
    record = repository.save(_record("a.jpg"))

    repository.delete(record.id)
    repository.delete(record.id)

    assert repository.get_by_id(record.id) is None
    assert repository.count() == 0


def test_count_by_category(repository: DBFileRecordRepository) -> None:
    repository.save(_record("a.jpg"))
    repository.save(_record("b.jpg"))
    repository.save(_record("clip.mp4", FileCategory.VIDEO))

    assert repository.count_by_category(FileCategory.IMAGE) == 2
    assert repository.count_by_category(FileCategory.VIDEO) == 1
    assert repository.count_by_category(FileCategory.AUDIO) == 0
