"""Course catalog endpoints.

POST /create-course, GET /courses, GET|PUT|DELETE /course/{course_id}.
PUT merges: every field in the body overwrites the stored value, fields
left out are kept.
"""

from __future__ import annotations

import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from app.api.dependencies import Repos, get_repos, parse_id
from app.api.errors import http_error
from app.models.course import Course, CourseAssignment
from app.services import course_service
from app.services.errors import ServiceError

router = APIRouter(tags=["courses"])


class AssignmentIn(BaseModel):
    title: str
    description: str
    link: str | None = None


class CourseIn(BaseModel):
    title: str
    description: str = ""
    instructor: str = ""
    price: float = 0.0
    category: str = ""
    syllabus: str = ""
    batch: str = ""
    thumbnail: str = ""
    lessons: list[str] = []
    assignments: list[AssignmentIn] = []


class CourseUpdateIn(BaseModel):
    title: str | None = None
    description: str | None = None
    instructor: str | None = None
    price: float | None = None
    category: str | None = None
    syllabus: str | None = None
    batch: str | None = None
    thumbnail: str | None = None
    lessons: list[str] | None = None
    assignments: list[AssignmentIn] | None = None


class AssignmentOut(BaseModel):
    title: str
    description: str
    link: str | None


class CourseOut(BaseModel):
    id: str
    title: str
    description: str
    instructor: str
    price: float
    category: str
    syllabus: str
    batch: str
    thumbnail: str
    lessons: list[str]
    assignments: list[AssignmentOut]
    createdAt: datetime.datetime


class CourseListOut(BaseModel):
    total: int
    courses: list[CourseOut]


class CourseChangeOut(BaseModel):
    message: str
    course: CourseOut


def course_out(course: Course) -> CourseOut:
    return CourseOut(
        id=str(course.id),
        title=course.title,
        description=course.description,
        instructor=course.instructor,
        price=course.price,
        category=course.category,
        syllabus=course.syllabus,
        batch=course.batch,
        thumbnail=course.thumbnail,
        lessons=list(course.lessons),
        assignments=[
            AssignmentOut(title=a.title, description=a.description, link=a.link)
            for a in course.assignments
        ],
        createdAt=course.created_at,
    )


def _to_domain_fields(fields: dict[str, object]) -> dict[str, object]:
    if "lessons" in fields:
        fields["lessons"] = tuple(fields["lessons"])  # type: ignore[arg-type]
    if "assignments" in fields:
        fields["assignments"] = tuple(
            CourseAssignment(**a)  # type: ignore[arg-type]
            for a in fields["assignments"]  # type: ignore[attr-defined]
        )
    return fields


@router.post(
    "/create-course",
    response_model=CourseOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_course(
    body: CourseIn,
    repos: Annotated[Repos, Depends(get_repos)],
) -> CourseOut:
    try:
        course = await course_service.create_course(
            repos.courses, _to_domain_fields(body.model_dump())
        )
    except ServiceError as e:
        raise http_error(e) from None
    return course_out(course)


@router.get("/courses", response_model=CourseListOut)
async def list_courses(
    repos: Annotated[Repos, Depends(get_repos)],
) -> CourseListOut:
    courses = await course_service.list_courses(repos.courses)
    return CourseListOut(total=len(courses), courses=[course_out(c) for c in courses])


@router.get("/course/{course_id}", response_model=CourseOut)
async def get_course(
    course_id: str,
    repos: Annotated[Repos, Depends(get_repos)],
) -> CourseOut:
    try:
        course = await course_service.get_course(
            repos.courses, parse_id(course_id, "Course")
        )
    except ServiceError as e:
        raise http_error(e) from None
    return course_out(course)


@router.put("/course/{course_id}", response_model=CourseChangeOut)
async def update_course(
    course_id: str,
    body: CourseUpdateIn,
    repos: Annotated[Repos, Depends(get_repos)],
) -> CourseChangeOut:
    changes = _to_domain_fields(body.model_dump(exclude_unset=True, exclude_none=True))
    try:
        course = await course_service.update_course(
            repos.courses, parse_id(course_id, "Course"), changes
        )
    except ServiceError as e:
        raise http_error(e) from None
    return CourseChangeOut(message="Course updated successfully", course=course_out(course))


@router.delete("/course/{course_id}", response_model=CourseChangeOut)
async def delete_course(
    course_id: str,
    repos: Annotated[Repos, Depends(get_repos)],
) -> CourseChangeOut:
    try:
        course = await course_service.delete_course(
            repos.courses, parse_id(course_id, "Course")
        )
    except ServiceError as e:
        raise http_error(e) from None
    return CourseChangeOut(message="Course deleted successfully", course=course_out(course))
