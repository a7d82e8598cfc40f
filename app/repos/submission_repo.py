from __future__ import annotations

from typing import Protocol
from uuid import UUID

from app.models.submission import Submission


class SubmissionRepo(Protocol):
    async def add(self, submission: Submission) -> None: ...
    async def get_by_id(self, submission_id: UUID) -> Submission | None: ...
    async def list_all(self) -> list[Submission]: ...
    async def update(self, submission: Submission) -> bool: ...


class InMemorySubmissionRepo:
    def __init__(self) -> None:
        self._by_id: dict[UUID, Submission] = {}

    async def add(self, submission: Submission) -> None:
        self._by_id[submission.id] = submission

    async def get_by_id(self, submission_id: UUID) -> Submission | None:
        return self._by_id.get(submission_id)

    async def list_all(self) -> list[Submission]:
        return sorted(
            reversed(list(self._by_id.values())),
            key=lambda s: s.submitted_at,
            reverse=True,
        )

    async def update(self, submission: Submission) -> bool:
        if submission.id not in self._by_id:
            return False
        self._by_id[submission.id] = submission
        return True
