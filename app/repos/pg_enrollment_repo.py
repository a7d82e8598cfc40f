"""PostgreSQL implementation of EnrollmentRepo.

The (email, course_id) unique constraint on the table is what prevents
duplicate enrollments; the service-level pre-check only produces a
friendlier error on the common path.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.tables import EnrollmentRow
from app.models.enrollment import CompletionStatus, Enrollment, EnrollmentStatus
from app.repos.errors import DuplicateKeyError


class PgEnrollmentRepo:
    """Satisfies the EnrollmentRepo Protocol using PostgreSQL via SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, enrollment: Enrollment) -> None:
        row = EnrollmentRow(
            id=enrollment.id,
            user_id=enrollment.user_id,
            email=enrollment.email,
            course_id=enrollment.course_id,
            course_title=enrollment.course_title,
            name=enrollment.name,
            phone=enrollment.phone,
            amount=enrollment.amount,
            payment_method=enrollment.payment_method,
            transaction_id=enrollment.transaction_id,
            status=enrollment.status.value,
            course_status=enrollment.course_status.value,
            assignment_status=enrollment.assignment_status.value,
            created_at=enrollment.created_at,
        )
        try:
            async with self._session.begin_nested():
                self._session.add(row)
        except IntegrityError as e:
            raise DuplicateKeyError("enrollments.email_course_id") from e

    async def get_by_id(self, enrollment_id: UUID) -> Enrollment | None:
        row = await self._session.get(EnrollmentRow, enrollment_id)
        if row is None:
            return None
        return _row_to_enrollment(row)

    async def find(self, email: str, course_id: UUID) -> Enrollment | None:
        stmt = select(EnrollmentRow).where(
            EnrollmentRow.email == email,
            EnrollmentRow.course_id == course_id,
        )
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        if row is None:
            return None
        return _row_to_enrollment(row)

    async def list_all(self) -> list[Enrollment]:
        stmt = select(EnrollmentRow).order_by(EnrollmentRow.created_at.desc())
        rows = (await self._session.execute(stmt)).scalars().all()
        return [_row_to_enrollment(row) for row in rows]

    async def list_by_email(self, email: str) -> list[Enrollment]:
        stmt = (
            select(EnrollmentRow)
            .where(EnrollmentRow.email == email)
            .order_by(EnrollmentRow.created_at.desc())
        )
        rows = (await self._session.execute(stmt)).scalars().all()
        return [_row_to_enrollment(row) for row in rows]

    async def update(self, enrollment: Enrollment) -> bool:
        # Only the status fields change after creation.
        stmt = (
            update(EnrollmentRow)
            .where(EnrollmentRow.id == enrollment.id)
            .values(
                status=enrollment.status.value,
                course_status=enrollment.course_status.value,
                assignment_status=enrollment.assignment_status.value,
            )
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0  # type: ignore[attr-defined]


def _row_to_enrollment(row: EnrollmentRow) -> Enrollment:
    return Enrollment(
        id=row.id,
        user_id=row.user_id,
        email=row.email,
        course_id=row.course_id,
        course_title=row.course_title,
        name=row.name,
        phone=row.phone,
        amount=row.amount,
        payment_method=row.payment_method,
        transaction_id=row.transaction_id,
        status=EnrollmentStatus(row.status),
        course_status=CompletionStatus(row.course_status),
        assignment_status=CompletionStatus(row.assignment_status),
        created_at=row.created_at,
    )
