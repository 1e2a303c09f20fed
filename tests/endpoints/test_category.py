from fastapi.testclient import TestClient
from tests.helpers.asserts import api_call, assert_error
from tests.helpers.contract import validate_response_schema
from app.schemas.category import Category


def _category(client: TestClient, headers, title: str):
    r = api_call(client, "POST", "/category/", headers=headers, json={"title": title}, expected_min=201, expected_max=202)
    return r.json()["data"]


def test_create_and_list_categories(client: TestClient, admin_headers):
    _category(client, admin_headers, "Programming")
    _category(client, admin_headers, "  Design  ")

    r = api_call(client, "GET", "/category/")
    data = r.json()["data"]
    validate_response_schema(data, Category)
    assert [c["title"] for c in data] == ["Programming", "Design"]

    r = api_call(client, "GET", "/category/", params={"title": "prog"})
    assert [c["title"] for c in r.json()["data"]] == ["Programming"]


def test_duplicate_category_title_conflicts(client: TestClient, admin_headers):
    _category(client, admin_headers, "Programming")
    r = client.post("/category/", headers=admin_headers, json={"title": " programming "})
    assert_error(r, 409, "CONFLICT")


def test_update_category(client: TestClient, admin_headers):
    programming = _category(client, admin_headers, "Programming")
    design = _category(client, admin_headers, "Design")

    r = api_call(client, "PUT", f"/category/{programming['id']}", headers=admin_headers, json={"title": "Software"})
    assert r.json()["data"]["title"] == "Software"

    r = client.put(f"/category/{design['id']}", headers=admin_headers, json={"title": "software"})
    assert_error(r, 409, "CONFLICT")

    r = client.put("/category/9999", headers=admin_headers, json={"title": "Ghost"})
    assert_error(r, 404, "NOT_FOUND")


def test_delete_category_unlinks_courses(client: TestClient, admin_headers):
    category = _category(client, admin_headers, "Temporary")
    r = api_call(
        client, "POST", "/course/", headers=admin_headers,
        data={"title": "Linked", "category_ids": [category["id"]]},
        expected_min=201, expected_max=202,
    )
    course_id = r.json()["data"]["id"]

    api_call(client, "DELETE", f"/category/{category['id']}", headers=admin_headers)

    r = api_call(client, "GET", f"/course/{course_id}", headers=admin_headers)
    assert r.json()["data"]["categories"] == []
    r = client.delete(f"/category/{category['id']}", headers=admin_headers)
    assert_error(r, 404, "NOT_FOUND")


def test_category_mutations_require_admin(client: TestClient, student_headers):
    r = client.post("/category/", headers=student_headers, json={"title": "Nope"})
    assert_error(r, 403, "FORBIDDEN")
