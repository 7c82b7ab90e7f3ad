"""Constraint descriptors.

Plain records describing where and how to validate. They are produced by
the declaration API (or built by hand) and consumed uniformly by the
executor, which never cares how they were declared.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Union

MessageSpec = Union[str, Callable[[Any, tuple], str], None]


class ValidationType(str, Enum):
    """Constraint kinds. Everything except CUSTOM and NESTED maps to a built-in predicate."""
    CUSTOM_VALIDATION = "custom_validation"
    NESTED_VALIDATION = "nested_validation"
    NOT_EMPTY = "not_empty"

    # Common
    IS_DEFINED = "is_defined"
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    IS_EMPTY = "is_empty"
    IS_IN = "is_in"
    IS_NOT_IN = "is_not_in"

    # Types
    IS_BOOLEAN = "is_boolean"
    IS_STRING = "is_string"
    IS_NUMBER = "is_number"
    IS_INT = "is_int"

    # Numbers
    MIN = "min"
    MAX = "max"

    # Strings
    MIN_LENGTH = "min_length"
    MAX_LENGTH = "max_length"
    LENGTH = "length"
    MATCHES = "matches"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    IS_EMAIL = "is_email"
    IS_UUID = "is_uuid"

    # Arrays
    ARRAY_NOT_EMPTY = "array_not_empty"
    ARRAY_MIN_SIZE = "array_min_size"
    ARRAY_MAX_SIZE = "array_max_size"
    ARRAY_UNIQUE = "array_unique"


@dataclass(frozen=True, slots=True)
class ValidationMetadata:
    """One declared rule on one property of one target.

    ``target`` is a class, or a schema name when the rule belongs to a named
    schema. ``groups`` empty means the rule is always active.
    """
    type: ValidationType
    target: type | str
    property_name: str
    constraints: tuple[Any, ...] = ()
    each: bool = False
    groups: frozenset[str] = frozenset()
    message: MessageSpec = None
    constraint_cls: type | None = None

    @property
    def target_name(self) -> str:
        return self.target if isinstance(self.target, str) else self.target.__name__

    @property
    def target_schema(self) -> str | None:
        """Schema for nested values: an explicit one, else the declaring schema, if any."""
        if self.type is ValidationType.NESTED_VALIDATION and self.constraints:
            return self.constraints[0]
        return self.target if isinstance(self.target, str) else None

    def is_active_for(self, groups: frozenset[str] | None) -> bool:
        if not groups or not self.groups:
            return True
        return bool(self.groups & groups)


@dataclass(frozen=True, slots=True)
class ConstraintMetadata:
    """Registration of a custom predicate class under an optional name."""
    target: type
    name: str | None = None
