"""SQLAlchemy table definitions.

These map to the frozen dataclass domain models in app/models/.
Repos convert between rows and dataclasses.  Reference columns
(enrollments.course_id, submissions.enrollment_id) are plain UUIDs
without foreign keys: deleting a course leaves its enrollments in place.
"""

from __future__ import annotations

import datetime
import uuid

from sqlalchemy import (
    DateTime,
    Float,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.engine import Base


class CourseRow(Base):
    __tablename__ = "courses"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    instructor: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    category: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    syllabus: Mapped[str] = mapped_column(Text, nullable=False, default="")
    batch: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    thumbnail: Mapped[str] = mapped_column(Text, nullable=False, default="")
    lessons: Mapped[list[str]] = mapped_column(ARRAY(Text), nullable=False, default=[])
    # [{"title": ..., "description": ..., "link": ...}, ...]
    assignments: Mapped[list[dict]] = mapped_column(JSONB, nullable=False, default=[])
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


class UserRow(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default="student")
    registered_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )


class EnrollmentRow(Base):
    __tablename__ = "enrollments"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    course_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    course_title: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    payment_method: Mapped[str] = mapped_column(
        String(64), nullable=False, default=""
    )
    transaction_id: Mapped[str] = mapped_column(
        String(255), nullable=False, default=""
    )
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default="pending"
    )  # pending|approved|blocked
    course_status: Mapped[str] = mapped_column(
        String(32), nullable=False, default="pending"
    )  # pending|complete
    assignment_status: Mapped[str] = mapped_column(
        String(32), nullable=False, default="pending"
    )  # pending|complete
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("email", "course_id", name="uq_enrollments_email_course"),
    )


class SubmissionRow(Base):
    __tablename__ = "submissions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    enrollment_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True
    )
    assignment_title: Mapped[str] = mapped_column(String(500), nullable=False)
    assignment_details: Mapped[str] = mapped_column(Text, nullable=False)
    assignment_link: Mapped[str | None] = mapped_column(Text, nullable=True)
    student_submit_link: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default="pending"
    )  # pending|complete
    submitted_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
