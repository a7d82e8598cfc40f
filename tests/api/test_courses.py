"""Tests for the course catalog endpoints."""

from __future__ import annotations

import uuid

from fastapi.testclient import TestClient

from tests.conftest import create_test_course

# ---- create / read ----


def test_create_course_returns_201_with_generated_id(client: TestClient) -> None:
    course = create_test_course(
        client,
        lessons=["https://videos.example.com/1", "https://videos.example.com/2"],
        assignments=[{"title": "HW1", "description": "Write a loop"}],
    )
    uuid.UUID(course["id"])
    assert course["title"] == "Python Basics"
    assert course["price"] == 49.0
    assert course["lessons"] == [
        "https://videos.example.com/1",
        "https://videos.example.com/2",
    ]
    assert course["assignments"] == [
        {"title": "HW1", "description": "Write a loop", "link": None}
    ]


def test_create_course_requires_title(client: TestClient) -> None:
    resp = client.post("/create-course", json={"price": 10})
    assert resp.status_code == 400


def test_create_course_rejects_assignment_without_description(
    client: TestClient,
) -> None:
    resp = client.post(
        "/create-course",
        json={"title": "T", "assignments": [{"title": "HW1"}]},
    )
    assert resp.status_code == 400


def test_list_courses_returns_total(client: TestClient) -> None:
    create_test_course(client, title="A")
    create_test_course(client, title="B")
    resp = client.get("/courses")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 2
    assert {c["title"] for c in body["courses"]} == {"A", "B"}


def test_get_course_by_id(client: TestClient) -> None:
    course = create_test_course(client)
    resp = client.get(f"/course/{course['id']}")
    assert resp.status_code == 200
    assert resp.json() == course


def test_get_course_not_found(client: TestClient) -> None:
    resp = client.get(f"/course/{uuid.uuid4()}")
    assert resp.status_code == 404
    assert resp.json()["detail"]["message"] == "Course not found"


def test_get_course_malformed_id_is_404(client: TestClient) -> None:
    resp = client.get("/course/not-a-uuid")
    assert resp.status_code == 404


# ---- update (merge) ----


def test_update_course_overwrites_only_given_fields(client: TestClient) -> None:
    course = create_test_course(client, category="programming")
    resp = client.put(
        f"/course/{course['id']}",
        json={"price": 99.5, "lessons": ["https://videos.example.com/new"]},
    )
    assert resp.status_code == 200
    updated = resp.json()["course"]
    assert updated["price"] == 99.5
    assert updated["lessons"] == ["https://videos.example.com/new"]
    assert updated["title"] == course["title"]
    assert updated["category"] == "programming"
    assert updated["createdAt"] == course["createdAt"]


def test_update_course_replaces_assignments_wholesale(client: TestClient) -> None:
    course = create_test_course(
        client, assignments=[{"title": "Old", "description": "old"}]
    )
    resp = client.put(
        f"/course/{course['id']}",
        json={
            "assignments": [
                {"title": "New", "description": "new", "link": "https://x.io/a"}
            ]
        },
    )
    assert resp.status_code == 200
    assert resp.json()["course"]["assignments"] == [
        {"title": "New", "description": "new", "link": "https://x.io/a"}
    ]


def test_update_course_not_found(client: TestClient) -> None:
    resp = client.put(f"/course/{uuid.uuid4()}", json={"price": 1})
    assert resp.status_code == 404


# ---- delete ----


def test_delete_course_returns_deleted_record(client: TestClient) -> None:
    course = create_test_course(client)
    resp = client.delete(f"/course/{course['id']}")
    assert resp.status_code == 200
    assert resp.json()["course"]["id"] == course["id"]
    assert client.get(f"/course/{course['id']}").status_code == 404


def test_delete_course_twice_is_404(client: TestClient) -> None:
    course = create_test_course(client)
    client.delete(f"/course/{course['id']}")
    assert client.delete(f"/course/{course['id']}").status_code == 404
