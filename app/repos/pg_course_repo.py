"""PostgreSQL implementation of CourseRepo."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.tables import CourseRow
from app.models.course import Course, CourseAssignment


class PgCourseRepo:
    """Satisfies the CourseRepo Protocol using PostgreSQL via SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, course: Course) -> None:
        row = CourseRow(id=course.id, created_at=course.created_at)
        _apply(row, _course_values(course))
        self._session.add(row)
        await self._session.flush()

    async def get_by_id(self, course_id: UUID) -> Course | None:
        row = await self._session.get(CourseRow, course_id)
        if row is None:
            return None
        return _row_to_course(row)

    async def get_many(self, course_ids: Iterable[UUID]) -> list[Course]:
        ids = list(course_ids)
        if not ids:
            return []
        stmt = select(CourseRow).where(CourseRow.id.in_(ids))
        rows = (await self._session.execute(stmt)).scalars().all()
        by_id = {row.id: _row_to_course(row) for row in rows}
        return [by_id[cid] for cid in ids if cid in by_id]

    async def list_all(self) -> list[Course]:
        stmt = select(CourseRow).order_by(CourseRow.created_at)
        rows = (await self._session.execute(stmt)).scalars().all()
        return [_row_to_course(row) for row in rows]

    async def update(
        self, course_id: UUID, changes: Mapping[str, object]
    ) -> Course | None:
        row = await self._session.get(CourseRow, course_id)
        if row is None:
            return None

        values = dict(changes)
        if "lessons" in values:
            values["lessons"] = list(values["lessons"])  # type: ignore[call-overload]
        if "assignments" in values:
            values["assignments"] = [
                _assignment_to_json(a)
                for a in values["assignments"]  # type: ignore[attr-defined]
            ]
        _apply(row, values)
        await self._session.flush()
        return _row_to_course(row)

    async def delete(self, course_id: UUID) -> Course | None:
        row = await self._session.get(CourseRow, course_id)
        if row is None:
            return None
        course = _row_to_course(row)
        await self._session.delete(row)
        await self._session.flush()
        return course


def _apply(row: CourseRow, values: Mapping[str, object]) -> None:
    for key, value in values.items():
        setattr(row, key, value)


def _assignment_to_json(a: CourseAssignment) -> dict:
    return {"title": a.title, "description": a.description, "link": a.link}


def _course_values(course: Course) -> dict[str, object]:
    return {
        "title": course.title,
        "description": course.description,
        "instructor": course.instructor,
        "price": course.price,
        "category": course.category,
        "syllabus": course.syllabus,
        "batch": course.batch,
        "thumbnail": course.thumbnail,
        "lessons": list(course.lessons),
        "assignments": [_assignment_to_json(a) for a in course.assignments],
    }


def _row_to_course(row: CourseRow) -> Course:
    return Course(
        id=row.id,
        title=row.title,
        description=row.description,
        instructor=row.instructor,
        price=row.price,
        category=row.category,
        syllabus=row.syllabus,
        batch=row.batch,
        thumbnail=row.thumbnail,
        lessons=tuple(row.lessons or ()),
        assignments=tuple(
            CourseAssignment(
                title=a["title"],
                description=a["description"],
                link=a.get("link"),
            )
            for a in row.assignments or ()
        ),
        created_at=row.created_at,
    )
