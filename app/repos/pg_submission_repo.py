"""PostgreSQL implementation of SubmissionRepo."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.tables import SubmissionRow
from app.models.enrollment import CompletionStatus
from app.models.submission import Submission


class PgSubmissionRepo:
    """Satisfies the SubmissionRepo Protocol using PostgreSQL via SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, submission: Submission) -> None:
        row = SubmissionRow(
            id=submission.id,
            enrollment_id=submission.enrollment_id,
            assignment_title=submission.assignment_title,
            assignment_details=submission.assignment_details,
            assignment_link=submission.assignment_link,
            student_submit_link=submission.student_submit_link,
            status=submission.status.value,
            submitted_at=submission.submitted_at,
        )
        self._session.add(row)
        await self._session.flush()

    async def get_by_id(self, submission_id: UUID) -> Submission | None:
        row = await self._session.get(SubmissionRow, submission_id)
        if row is None:
            return None
        return _row_to_submission(row)

    async def list_all(self) -> list[Submission]:
        stmt = select(SubmissionRow).order_by(SubmissionRow.submitted_at.desc())
        rows = (await self._session.execute(stmt)).scalars().all()
        return [_row_to_submission(row) for row in rows]

    async def update(self, submission: Submission) -> bool:
        stmt = (
            update(SubmissionRow)
            .where(SubmissionRow.id == submission.id)
            .values(status=submission.status.value)
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0  # type: ignore[attr-defined]


def _row_to_submission(row: SubmissionRow) -> Submission:
    return Submission(
        id=row.id,
        enrollment_id=row.enrollment_id,
        assignment_title=row.assignment_title,
        assignment_details=row.assignment_details,
        assignment_link=row.assignment_link,
        student_submit_link=row.student_submit_link,
        status=CompletionStatus(row.status),
        submitted_at=row.submitted_at,
    )
