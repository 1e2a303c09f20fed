import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from tests.helpers.asserts import api_call, image_upload, assert_error
from app.core.constants import StorageTypeEnum
from app.core.exceptions import BlobStorageError
from app.models.course import Course as CourseModel
from app.models.file import File as FileModel
from app.schemas.course import CourseCreate
from app.schemas.file import FileUpload
from app.services.course import course_service
from app.services.file import file_service


def _blob_keys(storage):
    return sorted(p.relative_to(storage.root).as_posix() for p in storage.root.rglob("*") if p.is_file())


def _upload(content: bytes = b"\x89PNG-data", filename: str = "cover.png") -> FileUpload:
    return FileUpload(content=content, filename=filename, content_type="image/png")


class CommitFailure(Exception):
    pass


def _fail_next_commit(db_session: Session, monkeypatch):
    real_commit = db_session.commit
    calls = {"count": 0}

    def failing_commit():
        calls["count"] += 1
        if calls["count"] == 1:
            raise CommitFailure("database unavailable")
        return real_commit()
    monkeypatch.setattr(db_session, "commit", failing_commit)


def test_failed_course_commit_discards_new_blob(db_session: Session, admin_user, blob_storage, monkeypatch):
    print("\n[TEST] Course commit fails after the thumbnail blob was written")
    _fail_next_commit(db_session, monkeypatch)

    with pytest.raises(CommitFailure):
        course_service.create_course(
            db_session,
            course_in=CourseCreate(title="Doomed"),
            owner_id=admin_user.id,
            image=_upload(),
        )

    assert _blob_keys(blob_storage) == []
    assert db_session.query(FileModel).count() == 0
    assert db_session.query(CourseModel).count() == 0


def test_failed_record_write_leaves_no_blob(db_session: Session, admin_user, blob_storage, monkeypatch):
    def broken_create(*args, **kwargs):
        raise RuntimeError("insert failed")
    monkeypatch.setattr("app.crud.file.file.create", broken_create)

    with pytest.raises(RuntimeError):
        file_service.create(db_session, owner_id=admin_user.id, kind=StorageTypeEnum.IMAGE, upload=_upload())

    assert _blob_keys(blob_storage) == []


def test_blob_write_failure_is_reported_as_storage_error(client: TestClient, admin_headers, blob_storage, db_session: Session, monkeypatch):
    def broken_put(*args, **kwargs):
        raise BlobStorageError("bucket unreachable")
    monkeypatch.setattr(blob_storage, "put", broken_put)

    r = client.post("/course/", headers=admin_headers, data={"title": "No storage"}, files=image_upload())
    assert_error(r, 502, "STORAGE_ERROR")
    assert db_session.query(CourseModel).count() == 0
    assert db_session.query(FileModel).count() == 0


def test_replacing_a_thumbnail_keeps_only_the_new_blob(client: TestClient, admin_headers, blob_storage):
    r = api_call(client, "POST", "/course/", headers=admin_headers, data={"title": "Covered"}, files=image_upload("old.png"), expected_min=201, expected_max=202)
    course = r.json()["data"]
    old_key = course["thumbnail"]["key"]

    r = api_call(client, "PUT", f"/course/{course['id']}", headers=admin_headers, data={"title": "Covered"}, files=image_upload("new.png"))
    thumbnail = r.json()["data"]["thumbnail"]

    assert thumbnail["id"] == course["thumbnail"]["id"]
    assert thumbnail["key"] != old_key
    assert _blob_keys(blob_storage) == [thumbnail["key"]]


def test_failed_update_commit_keeps_the_old_thumbnail(db_session: Session, admin_user, blob_storage, monkeypatch):
    print("\n[TEST] Course update commit fails after a replacement blob was staged")
    course = course_service.create_course(
        db_session, course_in=CourseCreate(title="Stable"), owner_id=admin_user.id, image=_upload(b"old")
    )
    old_key = course.thumbnail.key

    _fail_next_commit(db_session, monkeypatch)
    with pytest.raises(CommitFailure):
        course_service.update_course(
            db_session, course_id=course.id, course_in=CourseCreate(title="Changed"), owner_id=admin_user.id, image=_upload(b"new")
        )

    db_session.expire_all()
    stored = db_session.query(CourseModel).filter(CourseModel.id == course.id).one()
    assert stored.title == "Stable"
    assert stored.thumbnail.key == old_key
    assert _blob_keys(blob_storage) == [old_key]
    assert blob_storage.get(old_key) == b"old"


def test_deleting_a_course_removes_its_thumbnail(client: TestClient, admin_headers, blob_storage, db_session: Session):
    r = api_call(client, "POST", "/course/", headers=admin_headers, data={"title": "Gone"}, files=image_upload(), expected_min=201, expected_max=202)
    course = r.json()["data"]

    api_call(client, "DELETE", f"/course/{course['id']}", headers=admin_headers)

    assert _blob_keys(blob_storage) == []
    assert db_session.query(FileModel).count() == 0
    stored = db_session.query(CourseModel).filter(CourseModel.id == course["id"]).one()
    assert stored.deleted_at is not None
    assert stored.thumbnail_id is None


def test_blob_delete_failure_does_not_fail_file_delete(client: TestClient, admin_headers, blob_storage, db_session: Session, monkeypatch):
    r = api_call(client, "POST", "/file/", headers=admin_headers, files=image_upload(), expected_min=201, expected_max=202)
    uploaded = r.json()["data"]

    def broken_delete(key):
        raise BlobStorageError("bucket unreachable", key=key)
    monkeypatch.setattr(blob_storage, "delete", broken_delete)

    api_call(client, "DELETE", f"/file/{uploaded['id']}", headers=admin_headers)

    assert db_session.query(FileModel).count() == 0
    assert _blob_keys(blob_storage) == [uploaded["key"]]


def test_render_is_public_but_missing_blob_is_a_storage_error(client: TestClient, admin_headers, blob_storage):
    r = api_call(client, "POST", "/file/", headers=admin_headers, files=image_upload(), expected_min=201, expected_max=202)
    uploaded = r.json()["data"]

    (blob_storage.root / uploaded["key"]).unlink()

    r = client.get(f"/file/{uploaded['id']}")
    assert_error(r, 502, "STORAGE_ERROR")
