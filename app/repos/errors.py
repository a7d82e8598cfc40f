from __future__ import annotations


class DuplicateKeyError(ValueError):
    """A write would violate a store-level unique constraint."""

    def __init__(self, constraint: str) -> None:
        super().__init__(f"duplicate key for {constraint}")
        self.constraint = constraint
