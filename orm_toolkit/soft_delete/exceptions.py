"""Exceptions for soft delete operations."""

from typing import Optional


class SoftDeleteError(Exception):
    """Base exception for soft delete operations."""

    def __init__(
        self,
        message: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
    ):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message)


class RegistrationError(SoftDeleteError):
    """Raised when a type cannot be registered as soft-deletable."""

    def __init__(self, entity_type: str, reason: str):
        super().__init__(
            f"Cannot register {entity_type} as soft-deletable: {reason}",
            entity_type=entity_type,
        )


class EntityNotFoundError(SoftDeleteError):
    """Raised when a lookup by identifier finds no visible entity."""

    def __init__(self, entity_type: str, entity_id: str):
        super().__init__(
            f"{entity_type} with ID {entity_id} not found",
            entity_type=entity_type,
            entity_id=entity_id,
        )
