"""Domain errors raised by the services.

Routers translate these into HTTP responses; services never import
FastAPI.
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base class; ``message`` is safe to show to API clients."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(ServiceError):
    pass


class NotFoundError(ServiceError):
    def __init__(self, entity: str, entity_id: object) -> None:
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(ServiceError):
    pass


class StateMismatchError(ServiceError):
    pass


class InvalidTransitionError(ServiceError):
    def __init__(self, field: str, current: str, target: str) -> None:
        super().__init__(f"cannot change {field} from {current} to {target}")
        self.field = field
        self.current = current
        self.target = target
