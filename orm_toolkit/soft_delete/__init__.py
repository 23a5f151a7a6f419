"""
Soft Delete Module - logical removal for SQLAlchemy entities.

Provides the registry of soft-deletable types, the change interceptor that
rewrites removals into marked-deleted updates, and the visibility filter
that hides marked rows from every read unless explicitly overridden.
"""

from .exceptions import EntityNotFoundError, RegistrationError, SoftDeleteError
from .filters import VisibilityFilter
from .interceptor import ChangeInterceptor
from .mixins import SoftDeleteMixin
from .models import ChangeOperation, PendingChange
from .registry import SoftDeleteRegistration, SoftDeleteRegistry, get_registry
from .repository import SoftDeleteRepository

__all__ = [
    # Mixins
    "SoftDeleteMixin",
    # Registry
    "SoftDeleteRegistry",
    "SoftDeleteRegistration",
    "get_registry",
    # Interceptor and filter
    "ChangeInterceptor",
    "VisibilityFilter",
    "SoftDeleteRepository",
    # Models
    "ChangeOperation",
    "PendingChange",
    # Exceptions
    "SoftDeleteError",
    "RegistrationError",
    "EntityNotFoundError",
]
