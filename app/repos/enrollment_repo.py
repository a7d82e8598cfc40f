from __future__ import annotations

from typing import Protocol
from uuid import UUID

from app.models.enrollment import Enrollment
from app.repos.errors import DuplicateKeyError


class EnrollmentRepo(Protocol):
    async def add(self, enrollment: Enrollment) -> None: ...
    async def get_by_id(self, enrollment_id: UUID) -> Enrollment | None: ...
    async def find(self, email: str, course_id: UUID) -> Enrollment | None: ...
    async def list_all(self) -> list[Enrollment]: ...
    async def list_by_email(self, email: str) -> list[Enrollment]: ...
    async def update(self, enrollment: Enrollment) -> bool: ...


def newest_first(enrollments: list[Enrollment]) -> list[Enrollment]:
    # Reverse insertion order first so equal timestamps still list newest first.
    return sorted(reversed(enrollments), key=lambda e: e.created_at, reverse=True)


class InMemoryEnrollmentRepo:
    def __init__(self) -> None:
        self._by_id: dict[UUID, Enrollment] = {}
        self._by_key: dict[tuple[str, UUID], UUID] = {}

    async def add(self, enrollment: Enrollment) -> None:
        key = (enrollment.email, enrollment.course_id)
        if key in self._by_key:
            raise DuplicateKeyError("enrollments.email_course_id")
        self._by_key[key] = enrollment.id
        self._by_id[enrollment.id] = enrollment

    async def get_by_id(self, enrollment_id: UUID) -> Enrollment | None:
        return self._by_id.get(enrollment_id)

    async def find(self, email: str, course_id: UUID) -> Enrollment | None:
        enrollment_id = self._by_key.get((email, course_id))
        if enrollment_id is None:
            return None
        return self._by_id.get(enrollment_id)

    async def list_all(self) -> list[Enrollment]:
        return newest_first(list(self._by_id.values()))

    async def list_by_email(self, email: str) -> list[Enrollment]:
        return newest_first([e for e in self._by_id.values() if e.email == email])

    async def update(self, enrollment: Enrollment) -> bool:
        if enrollment.id not in self._by_id:
            return False
        self._by_id[enrollment.id] = enrollment
        return True
