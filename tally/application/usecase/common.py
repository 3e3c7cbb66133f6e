"""Shared request parsing for use cases."""

from typing import Callable, TypeVar
from uuid import UUID

from tally.domain.error import ValidationError

IdT = TypeVar("IdT")


def parse_id(value: str | None, field: str, wrap: Callable[[UUID], IdT]) -> IdT:
    """Parse a required UUID string into a typed identifier.

    Raises:
        ValidationError: If the value is missing or not a UUID
    """
    if not value:
        raise ValidationError(f"{field} is required")
    try:
        return wrap(UUID(value))
    except ValueError:
        raise ValidationError(f"{field} is not a valid id: {value!r}")
