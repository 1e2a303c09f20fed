import math
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from tests.helpers.asserts import api_call, image_upload
from app.core.constants import CatalogVisibilityEnum, CourseLevelEnum, CourseStatusEnum
from app.core.exceptions import InvalidOperationError
from app.crud.category import category as crud_category
from app.schemas.course import CatalogFilters, CatalogScope, CourseCreate
from app.schemas.file import FileUpload
from app.services.course import course_service
from app.services.file import file_service


def _create(client: TestClient, headers, title: str, **fields):
    data = {"title": title}
    data.update(fields)
    r = api_call(client, "POST", "/course/", headers=headers, data=data, expected_min=201, expected_max=202)
    return r.json()["data"]


def _titles(client: TestClient, path: str, headers=None, **params):
    r = api_call(client, "GET", path, headers=headers, params=params or None)
    return sorted(c["title"] for c in r.json()["data"]["items"])


@pytest.mark.parametrize("page_size", [1, 2, 3, 7, 10])
def test_pages_partition_the_catalog(client: TestClient, admin_headers, page_size):
    print(f"\n[TEST] Catalog pages of size {page_size}")
    created = {_create(client, admin_headers, f"Course {i}")["id"] for i in range(7)}

    expected_pages = math.ceil(len(created) / page_size)
    seen = []
    for page in range(1, expected_pages + 2):
        r = api_call(client, "GET", "/course/", headers=admin_headers, params={"page": page, "limit": page_size})
        data = r.json()["data"]
        assert data["total"] == len(created)
        assert data["pages"] == expected_pages
        assert data["has_previous"] == (page > 1)
        assert data["has_next"] == (page < expected_pages)
        seen.extend(c["id"] for c in data["items"])

    assert len(seen) == len(set(seen))
    assert set(seen) == created


def test_catalog_is_newest_first(client: TestClient, admin_headers):
    ids = [_create(client, admin_headers, f"Course {i}")["id"] for i in range(3)]
    r = api_call(client, "GET", "/course/", headers=admin_headers)
    assert [c["id"] for c in r.json()["data"]["items"]] == list(reversed(ids))


def test_visibility_per_role(client: TestClient, admin_headers, other_admin_headers, student_headers):
    print("\n[TEST] Catalog visibility per role")
    _create(client, admin_headers, "Mine active")
    _create(client, admin_headers, "Mine draft", status="inactive")
    _create(client, other_admin_headers, "Theirs active")
    _create(client, other_admin_headers, "Theirs draft", status="inactive")

    print("[1] Administrators see every course they own and nothing else")
    assert _titles(client, "/course/", admin_headers) == ["Mine active", "Mine draft"]
    assert _titles(client, "/course/", other_admin_headers) == ["Theirs active", "Theirs draft"]

    print("[2] Students and visitors see active courses only")
    assert _titles(client, "/course/", student_headers) == ["Mine active", "Theirs active"]
    assert _titles(client, "/course/visitor") == ["Mine active", "Theirs active"]


def test_subscribed_only_view(client: TestClient, admin_headers, student_headers, user_factory, headers_for):
    print("\n[TEST] Subscribed-only catalog view")
    followed = _create(client, admin_headers, "Followed")
    _create(client, admin_headers, "Ignored")

    api_call(client, "POST", f"/course/{followed['id']}/subscription", headers=student_headers)
    assert _titles(client, "/course/", student_headers, subscribed=True) == ["Followed"]

    print("[1] Another student has no subscriptions")
    other_student = headers_for(user_factory())
    assert _titles(client, "/course/", other_student, subscribed=True) == []

    print("[2] A deactivated course stays in the subscriber's own view")
    api_call(client, "PUT", f"/course/{followed['id']}", headers=admin_headers, data={"title": "Followed", "status": "inactive"})
    assert _titles(client, "/course/", student_headers, subscribed=True) == ["Followed"]
    assert _titles(client, "/course/", student_headers) == ["Ignored"]

    print("[3] The visitor view ignores the subscription filter")
    assert _titles(client, "/course/visitor", subscribed=True) == ["Ignored"]


def test_filters_combine(client: TestClient, admin_headers, admin_user, db_session: Session):
    go = crud_category.create(db_session, obj_in={"title": "Go", "admin_id": admin_user.id})
    rust = crud_category.create(db_session, obj_in={"title": "Rust", "admin_id": admin_user.id})
    _create(client, admin_headers, "Intro to Go", difficulty="beginner", category_ids=[go.id])
    _create(client, admin_headers, "Advanced Go", difficulty="advanced", category_ids=[go.id])
    _create(client, admin_headers, "Intro to Rust", difficulty="beginner", category_ids=[rust.id])
    _create(client, admin_headers, "100% Coverage", difficulty="beginner")

    assert _titles(client, "/course/visitor", title="INTRO") == ["Intro to Go", "Intro to Rust"]
    assert _titles(client, "/course/visitor", category_ids=[go.id]) == ["Advanced Go", "Intro to Go"]
    assert _titles(client, "/course/visitor", category_ids=[go.id, rust.id], difficulty="beginner") == ["Intro to Go", "Intro to Rust"]
    assert _titles(client, "/course/visitor", title="intro", category_ids=[rust.id]) == ["Intro to Rust"]
    assert _titles(client, "/course/visitor", title="%") == ["100% Coverage"]


def test_deleted_courses_leave_the_catalog(client: TestClient, admin_headers, student_headers):
    course = _create(client, admin_headers, "Short lived")
    assert _titles(client, "/course/visitor") == ["Short lived"]

    api_call(client, "DELETE", f"/course/{course['id']}", headers=admin_headers)
    assert _titles(client, "/course/visitor") == []
    assert _titles(client, "/course/", admin_headers) == []
    assert client.get(f"/course/{course['id']}", headers=student_headers).status_code == 404


def test_intro_to_go_scenario(db_session: Session, admin_user, blob_storage, monkeypatch):
    print("\n[TEST] Create, find, then add a first thumbnail")
    first = crud_category.create(db_session, obj_in={"title": "Languages", "admin_id": admin_user.id})
    second = crud_category.create(db_session, obj_in={"title": "Beginner friendly", "admin_id": admin_user.id})

    course = course_service.create_course(
        db_session,
        course_in=CourseCreate(title="Intro to Go", difficulty=CourseLevelEnum.BEGINNER, category_ids=[first.id, second.id]),
        owner_id=admin_user.id,
    )
    assert len(course.categories) == 2
    assert course.thumbnail is None

    page = course_service.fetch_catalog(
        db_session,
        filters=CatalogFilters(title="intro"),
        scope=CatalogScope(visibility=CatalogVisibilityEnum.PUBLIC),
        page=1,
        page_size=10,
    )
    assert [c.id for c in page.items] == [course.id]

    discarded = []
    monkeypatch.setattr(file_service, "discard_blob", lambda key: discarded.append(key))

    updated = course_service.update_course(
        db_session,
        course_id=course.id,
        course_in=CourseCreate(title="Intro to Go", category_ids=[first.id, second.id]),
        owner_id=admin_user.id,
        image=FileUpload(content=b"\x89PNG", filename="go.png", content_type="image/png"),
    )
    assert updated.thumbnail is not None
    assert blob_storage.exists(updated.thumbnail.key)
    assert discarded == []


def test_repeated_and_unknown_category_ids_collapse(db_session: Session, admin_user):
    languages = crud_category.create(db_session, obj_in={"title": "Languages", "admin_id": admin_user.id})

    course = course_service.create_course(
        db_session,
        course_in=CourseCreate(title="Intro to Go", category_ids=[languages.id, languages.id, 9999]),
        owner_id=admin_user.id,
    )
    assert [c.id for c in course.categories] == [languages.id]

    scope = CatalogScope(visibility=CatalogVisibilityEnum.PUBLIC)
    first = course_service.fetch_catalog(db_session, filters=CatalogFilters(), scope=scope, page=1, page_size=10)
    second = course_service.fetch_catalog(db_session, filters=CatalogFilters(), scope=scope, page=1, page_size=10)
    assert [c.id for c in first.items] == [c.id for c in second.items] == [course.id]


@pytest.mark.parametrize("page,page_size", [(0, 10), (1, 0), (-1, -1)])
def test_fetch_catalog_rejects_non_positive_pagination(db_session: Session, page, page_size):
    with pytest.raises(InvalidOperationError):
        course_service.fetch_catalog(
            db_session,
            filters=CatalogFilters(),
            scope=CatalogScope(visibility=CatalogVisibilityEnum.PUBLIC),
            page=page,
            page_size=page_size,
        )


def test_scoped_catalog_needs_a_user(db_session: Session):
    with pytest.raises(InvalidOperationError):
        course_service.fetch_catalog(
            db_session,
            filters=CatalogFilters(),
            scope=CatalogScope(visibility=CatalogVisibilityEnum.UNSCOPED),
            page=1,
            page_size=10,
        )


def test_thumbnail_appears_in_catalog(client: TestClient, admin_headers):
    r = api_call(client, "POST", "/course/", headers=admin_headers, data={"title": "Pictured"}, files=image_upload(), expected_min=201, expected_max=202)
    created = r.json()["data"]

    r = api_call(client, "GET", "/course/visitor")
    item = r.json()["data"]["items"][0]
    assert item["thumbnail"]["id"] == created["thumbnail"]["id"]
    assert item["status"] == CourseStatusEnum.ACTIVE.value
