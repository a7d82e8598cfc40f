"""Enrollment record and its status model.

An enrollment carries three independent status fields:

  status            admin gate:   pending -> approved | blocked, blocked -> pending
  course_status     student marks the course finished:   pending -> complete
  assignment_status set when a linked submission completes: pending -> complete

Applying a transition to the state a record is already in is allowed and
changes nothing (re-approving an approved enrollment succeeds).
"""

from __future__ import annotations

import datetime
import enum
from dataclasses import dataclass, field
from uuid import UUID, uuid4


class EnrollmentStatus(enum.StrEnum):
    PENDING = "pending"
    APPROVED = "approved"
    BLOCKED = "blocked"


class CompletionStatus(enum.StrEnum):
    PENDING = "pending"
    COMPLETE = "complete"


_STATUS_TRANSITIONS: dict[EnrollmentStatus, frozenset[EnrollmentStatus]] = {
    EnrollmentStatus.PENDING: frozenset(
        {
            EnrollmentStatus.PENDING,
            EnrollmentStatus.APPROVED,
            EnrollmentStatus.BLOCKED,
        }
    ),
    EnrollmentStatus.APPROVED: frozenset({EnrollmentStatus.APPROVED}),
    EnrollmentStatus.BLOCKED: frozenset(
        {EnrollmentStatus.BLOCKED, EnrollmentStatus.PENDING}
    ),
}


def can_transition(current: EnrollmentStatus, target: EnrollmentStatus) -> bool:
    return target in _STATUS_TRANSITIONS[current]


@dataclass(frozen=True, slots=True)
class Enrollment:
    id: UUID
    email: str
    course_id: UUID
    course_title: str = ""
    user_id: str | None = None
    name: str = ""
    phone: str = ""
    amount: float = 0.0
    payment_method: str = ""
    transaction_id: str = ""
    status: EnrollmentStatus = EnrollmentStatus.PENDING
    course_status: CompletionStatus = CompletionStatus.PENDING
    assignment_status: CompletionStatus = CompletionStatus.PENDING
    created_at: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now(datetime.UTC)
    )

    @staticmethod
    def new(
        *,
        email: str,
        course_id: UUID,
        course_title: str = "",
        user_id: str | None = None,
        name: str = "",
        phone: str = "",
        amount: float = 0.0,
        payment_method: str = "",
        transaction_id: str = "",
    ) -> Enrollment:
        # All three status fields start pending.
        return Enrollment(
            id=uuid4(),
            email=email,
            course_id=course_id,
            course_title=course_title,
            user_id=user_id,
            name=name,
            phone=phone,
            amount=amount,
            payment_method=payment_method,
            transaction_id=transaction_id,
        )
