"""Domain error types shared by services and routers."""

from __future__ import annotations


class DomainError(Exception):
    """Base class for errors raised by the readiness domain."""


class BusinessRuleViolation(DomainError):
    """Raised when an operation would break a readiness business rule."""


class EntityNotFoundError(DomainError):
    """Raised when a referenced team, repository or quest does not exist."""

    def __init__(self, entity: str, identifier: str) -> None:
        super().__init__(f"{entity} '{identifier}' not found")
        self.entity = entity
        self.identifier = identifier
