"""Custom constraint predicates.

A predicate decides pass/fail for a custom rule. It may answer right away
with a bool or return an awaitable that resolves to one:

    @validator_constraint(name="is_even")
    class IsEven(ValidatorConstraint):
        def validate(self, value, obj, constraints):
            return isinstance(value, int) and value % 2 == 0

    @validator_constraint(name="username_free")
    class UsernameFree(ValidatorConstraint):
        async def validate(self, value, obj, constraints):
            return not await users.exists(value)
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, TypeVar

from .metadata import ConstraintMetadata
from .storage import MetadataStorage, get_metadata_storage

C = TypeVar("C", bound=type)


class ValidatorConstraint(ABC):
    """Base class for custom predicates."""

    @abstractmethod
    def validate(self, value: Any, obj: Any, constraints: tuple[Any, ...]) -> bool | Awaitable[bool]:
        """Return True (or an awaitable of True) when ``value`` satisfies the rule."""

    def default_message(self, value: Any, constraints: tuple[Any, ...]) -> str | None:
        """Message used when the rule declares none. ``None`` falls back to the kind default."""
        return None


def validator_constraint(
    name: str | None = None,
    *,
    storage: MetadataStorage | None = None,
) -> Callable[[C], C]:
    """Class decorator registering a predicate class with the metadata storage."""
    def decorator(cls: C) -> C:
        (storage or get_metadata_storage()).add_constraint_metadata(ConstraintMetadata(target=cls, name=name))
        return cls
    return decorator
