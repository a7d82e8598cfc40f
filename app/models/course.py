from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from uuid import UUID, uuid4


@dataclass(frozen=True, slots=True)
class CourseAssignment:
    """Instructor-defined assignment embedded in a course."""

    title: str
    description: str
    link: str | None = None


@dataclass(frozen=True, slots=True)
class Course:
    id: UUID
    title: str
    description: str = ""
    instructor: str = ""
    price: float = 0.0
    category: str = ""
    syllabus: str = ""
    batch: str = ""
    thumbnail: str = ""
    lessons: tuple[str, ...] = ()  # ordered lesson URLs
    assignments: tuple[CourseAssignment, ...] = ()
    created_at: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now(datetime.UTC)
    )

    @staticmethod
    def new(*, title: str, **fields: object) -> Course:
        return Course(id=uuid4(), title=title, **fields)  # type: ignore[arg-type]


# Fields a client may set on create/update; id and created_at are server-owned.
COURSE_FIELDS = (
    "title",
    "description",
    "instructor",
    "price",
    "category",
    "syllabus",
    "batch",
    "thumbnail",
    "lessons",
    "assignments",
)
