from __future__ import annotations

import logging
from collections.abc import Mapping
from uuid import UUID

from app.models.course import COURSE_FIELDS, Course
from app.repos.course_repo import CourseRepo
from app.services.errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


def _checked_fields(fields: Mapping[str, object]) -> dict[str, object]:
    unknown = set(fields) - set(COURSE_FIELDS)
    if unknown:
        raise InvalidInputError(f"unknown course fields: {', '.join(sorted(unknown))}")
    return dict(fields)


async def create_course(repo: CourseRepo, fields: Mapping[str, object]) -> Course:
    values = _checked_fields(fields)
    title = str(values.pop("title", "")).strip()
    if not title:
        raise InvalidInputError("title is required")

    course = Course.new(title=title, **values)
    await repo.add(course)
    logger.info("Course created", extra={"course_id": str(course.id)})
    return course


async def list_courses(repo: CourseRepo) -> list[Course]:
    return await repo.list_all()


async def get_course(repo: CourseRepo, course_id: UUID) -> Course:
    course = await repo.get_by_id(course_id)
    if course is None:
        raise NotFoundError("Course", course_id)
    return course


async def update_course(
    repo: CourseRepo, course_id: UUID, changes: Mapping[str, object]
) -> Course:
    """Overwrite every field present in ``changes``; absent fields are kept."""
    values = _checked_fields(changes)
    if "title" in values:
        values["title"] = str(values["title"]).strip()
        if not values["title"]:
            raise InvalidInputError("title cannot be empty")

    course = await repo.update(course_id, values)
    if course is None:
        raise NotFoundError("Course", course_id)
    logger.info(
        "Course updated fields=%s",
        ",".join(sorted(values)) or "-",
        extra={"course_id": str(course_id)},
    )
    return course


async def delete_course(repo: CourseRepo, course_id: UUID) -> Course:
    course = await repo.delete(course_id)
    if course is None:
        raise NotFoundError("Course", course_id)
    # Enrollments keep their course_id; readers treat it as a dangling reference.
    logger.info("Course deleted", extra={"course_id": str(course_id)})
    return course
