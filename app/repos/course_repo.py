from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import Protocol
from uuid import UUID

from app.models.course import Course


class CourseRepo(Protocol):
    async def add(self, course: Course) -> None: ...
    async def get_by_id(self, course_id: UUID) -> Course | None: ...
    async def get_many(self, course_ids: Iterable[UUID]) -> list[Course]: ...
    async def list_all(self) -> list[Course]: ...
    async def update(
        self, course_id: UUID, changes: Mapping[str, object]
    ) -> Course | None: ...
    async def delete(self, course_id: UUID) -> Course | None: ...


class InMemoryCourseRepo:
    def __init__(self) -> None:
        self._by_id: dict[UUID, Course] = {}

    async def add(self, course: Course) -> None:
        self._by_id[course.id] = course

    async def get_by_id(self, course_id: UUID) -> Course | None:
        return self._by_id.get(course_id)

    async def get_many(self, course_ids: Iterable[UUID]) -> list[Course]:
        return [self._by_id[cid] for cid in course_ids if cid in self._by_id]

    async def list_all(self) -> list[Course]:
        return list(self._by_id.values())

    async def update(
        self, course_id: UUID, changes: Mapping[str, object]
    ) -> Course | None:
        c = self._by_id.get(course_id)
        if c is None:
            return None

        updated = replace(c, **changes)  # type: ignore[arg-type]
        self._by_id[course_id] = updated
        return updated

    async def delete(self, course_id: UUID) -> Course | None:
        return self._by_id.pop(course_id, None)
