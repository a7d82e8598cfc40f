from __future__ import annotations

import os
import sys
from pathlib import Path

# Tests always run against the in-memory repositories.
os.environ.pop("DATABASE_URL", None)
os.environ.setdefault("APP_ENV", "test")

# Ensure repo root is on sys.path so `import app` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.api.dependencies import Repos, in_memory_repos, new_in_memory_repos  # noqa: E402
from app.main import app  # noqa: E402


@pytest.fixture(autouse=True)
def reset_store() -> None:
    """Clear the process-wide in-memory repos between tests."""
    in_memory_repos.courses._by_id.clear()  # type: ignore[attr-defined]
    in_memory_repos.users._by_email.clear()  # type: ignore[attr-defined]
    in_memory_repos.enrollments._by_id.clear()  # type: ignore[attr-defined]
    in_memory_repos.enrollments._by_key.clear()  # type: ignore[attr-defined]
    in_memory_repos.submissions._by_id.clear()  # type: ignore[attr-defined]


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def repos() -> Repos:
    """A private store for service-level tests."""
    return new_in_memory_repos()


# ---------------------------------------------------------------------------
# HTTP helpers
# ---------------------------------------------------------------------------


def create_test_course(client: TestClient, title: str = "Python Basics", **fields) -> dict:
    body = {"title": title, "price": 49.0, "instructor": "Ada", **fields}
    resp = client.post("/create-course", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


def enroll_test_student(
    client: TestClient,
    course_id: str,
    email: str = "student@example.com",
    transaction_id: str = "TXN-1001",
    **fields,
) -> dict:
    body = {
        "email": email,
        "courseId": course_id,
        "name": "Student One",
        "phone": "0123456789",
        "amount": 49.0,
        "paymentMethod": "bkash",
        "transactionId": transaction_id,
        **fields,
    }
    resp = client.post("/enroll/manual", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()["enrollment"]
