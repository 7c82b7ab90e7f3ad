"""Built-in Atomic Validators

Immutable predicate objects backing every built-in constraint kind. Each
returns a ValidationResult carrying rich context; the executor decides on
``is_valid`` and logs the constraint, code and expectation of a failure at
debug level.

Features:
- Frozen dataclass validators for immutability
- Compiled regex caching
- NOT combinator (``~validator``) for negated kinds
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from typing import Any
from uuid import UUID as StdUUID

from propcheck.core.errors import ErrorCode

SEQUENCE_TYPES = (list, tuple, set, frozenset)
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


@lru_cache(maxsize=256)
def _compile(pattern: str, flags: int) -> re.Pattern:
    return re.compile(pattern, flags)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Result of a validation check with rich context."""
    is_valid: bool
    error_message: str | None = None
    error_code: ErrorCode | None = None
    constraint: str | None = None
    expected: Any = None
    actual: Any = None

    @classmethod
    def valid(cls) -> ValidationResult: return cls(is_valid=True)

    @classmethod
    def invalid(cls, message: str, code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC, *,
                constraint: str | None = None, expected: Any = None, actual: Any = None) -> ValidationResult:
        return cls(is_valid=False, error_message=message, error_code=code, constraint=constraint,
            expected=expected, actual=actual)


class AtomicValidator(ABC):
    """Base class for atomic validators. ``~validator`` negates it."""

    @abstractmethod
    def validate(self, value: Any) -> ValidationResult:
        """Validate a value. Returns ValidationResult."""

    @property
    @abstractmethod
    def constraint_name(self) -> str:
        """Human-readable constraint name for error messages."""

    def __call__(self, value: Any) -> ValidationResult: return self.validate(value)

    def __invert__(self) -> Not: return Not(self)


def _type_mismatch(expected: str, value: Any) -> ValidationResult:
    return ValidationResult.invalid(f"Expected {expected}, got {type(value).__name__}", ErrorCode.E2004_INVALID_TYPE,
        constraint=expected, expected=expected, actual=type(value).__name__)


# ============================================================================
# Common Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class NotEmpty(AtomicValidator):
    """Value is neither None nor the empty string."""

    @property
    def constraint_name(self) -> str:
        return "not_empty"

    def validate(self, value: Any) -> ValidationResult:
        if value is None or value == "":
            return ValidationResult.invalid("Value cannot be empty", ErrorCode.E2001_REQUIRED_FIELD_MISSING,
                constraint=self.constraint_name, expected="non-empty value", actual=value)
        return ValidationResult.valid()


@dataclass(frozen=True, slots=True)
class Defined(AtomicValidator):
    """Value is not None."""

    @property
    def constraint_name(self) -> str:
        return "is_defined"

    def validate(self, value: Any) -> ValidationResult:
        if value is None:
            return ValidationResult.invalid("Value must be defined", ErrorCode.E2001_REQUIRED_FIELD_MISSING,
                constraint=self.constraint_name)
        return ValidationResult.valid()


@dataclass(frozen=True, slots=True)
class EqualTo(AtomicValidator):
    """Value compares equal to a fixed comparison value."""
    comparison: Any

    @property
    def constraint_name(self) -> str:
        return f"equals[{self.comparison!r}]"

    def validate(self, value: Any) -> ValidationResult:
        if value != self.comparison:
            return ValidationResult.invalid(f"Value must equal {self.comparison!r}", ErrorCode.E2005_CONSTRAINT_VIOLATION,
                constraint=self.constraint_name, expected=self.comparison, actual=value)
        return ValidationResult.valid()


@dataclass(frozen=True, slots=True)
class OneOf(AtomicValidator):
    """Value is one of the allowed options (compared with ==, options need not be hashable)."""
    options: tuple[Any, ...]

    @property
    def constraint_name(self) -> str:
        opts = [repr(o) for o in self.options[:5]]
        suffix = f"... +{len(self.options) - 5}" if len(self.options) > 5 else ""
        return f"one_of[{', '.join(opts)}{suffix}]"

    def validate(self, value: Any) -> ValidationResult:
        if not any(value == option for option in self.options):
            return ValidationResult.invalid(f"Value {value!r} is not one of: {list(self.options)}",
                ErrorCode.E2005_CONSTRAINT_VIOLATION, constraint=self.constraint_name,
                expected=list(self.options), actual=value)
        return ValidationResult.valid()


# ============================================================================
# Type Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class TypeCheck(AtomicValidator):
    """Value is of a given primitive kind: boolean, string, number or int."""
    kind: str

    @property
    def constraint_name(self) -> str:
        return self.kind

    def validate(self, value: Any) -> ValidationResult:
        checks = {
            "boolean": lambda v: isinstance(v, bool),
            "string": lambda v: isinstance(v, str),
            "number": _is_number,
            "int": lambda v: isinstance(v, int) and not isinstance(v, bool),
        }
        if not checks[self.kind](value):
            return _type_mismatch(self.kind, value)
        return ValidationResult.valid()


# ============================================================================
# Numeric Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class NumericRange(AtomicValidator):
    """Validate numeric range constraints (inclusive)."""
    min_value: float | int | None = None
    max_value: float | int | None = None

    @property
    def constraint_name(self) -> str:
        parts = []
        if self.min_value is not None:
            parts.append(f">={self.min_value}")
        if self.max_value is not None:
            parts.append(f"<={self.max_value}")
        return f"range[{', '.join(parts)}]" if parts else "numeric"

    def validate(self, value: Any) -> ValidationResult:
        if not _is_number(value):
            return _type_mismatch("number", value)

        if self.min_value is not None and value < self.min_value:
            return ValidationResult.invalid(
                f"Value {value} must be at least {self.min_value}",
                ErrorCode.E2003_OUT_OF_RANGE,
                constraint=self.constraint_name,
                expected=f">= {self.min_value}",
                actual=value,
            )

        if self.max_value is not None and value > self.max_value:
            return ValidationResult.invalid(
                f"Value {value} must be at most {self.max_value}",
                ErrorCode.E2003_OUT_OF_RANGE,
                constraint=self.constraint_name,
                expected=f"<= {self.max_value}",
                actual=value,
            )

        return ValidationResult.valid()


# ============================================================================
# String Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class StringLength(AtomicValidator):
    """Validate string length constraints."""
    min_length: int | None = None
    max_length: int | None = None

    @property
    def constraint_name(self) -> str:
        if self.min_length is not None and self.max_length is not None:
            return f"length[{self.min_length},{self.max_length}]"
        if self.min_length is not None:
            return f"min_length[{self.min_length}]"
        if self.max_length is not None:
            return f"max_length[{self.max_length}]"
        return "string_length"

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, str):
            return _type_mismatch("string", value)

        length = len(value)

        if self.min_length is not None and length < self.min_length:
            return ValidationResult.invalid(
                f"String length {length} is less than minimum {self.min_length}",
                ErrorCode.E2003_OUT_OF_RANGE,
                constraint=self.constraint_name,
                expected=f">= {self.min_length} characters",
                actual=f"{length} characters",
            )

        if self.max_length is not None and length > self.max_length:
            return ValidationResult.invalid(
                f"String length {length} exceeds maximum {self.max_length}",
                ErrorCode.E2003_OUT_OF_RANGE,
                constraint=self.constraint_name,
                expected=f"<= {self.max_length} characters",
                actual=f"{length} characters",
            )

        return ValidationResult.valid()


@dataclass(frozen=True, slots=True)
class RegexPattern(AtomicValidator):
    """String contains a match for the pattern (``re.search`` semantics)."""
    pattern: str
    flags: int = 0

    @property
    def constraint_name(self) -> str:
        return f"pattern[{self.pattern}]"

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, str):
            return _type_mismatch("string", value)

        if not _compile(self.pattern, self.flags).search(value):
            return ValidationResult.invalid(
                f"Value does not match pattern: {self.pattern}",
                ErrorCode.E2002_INVALID_FORMAT,
                constraint=self.constraint_name,
                expected=f"match pattern '{self.pattern}'",
                actual=value[:50] + ("..." if len(value) > 50 else ""),
            )

        return ValidationResult.valid()


@dataclass(frozen=True, slots=True)
class Contains(AtomicValidator):
    """String contains (or, with ``absent``, does not contain) a seed substring."""
    seed: str
    absent: bool = False

    @property
    def constraint_name(self) -> str:
        return f"{'not_' if self.absent else ''}contains[{self.seed}]"

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, str):
            return _type_mismatch("string", value)
        if (self.seed in value) == self.absent:
            verb = "must not contain" if self.absent else "must contain"
            return ValidationResult.invalid(f"Value {verb} '{self.seed}'", ErrorCode.E2005_CONSTRAINT_VIOLATION,
                constraint=self.constraint_name, expected=self.seed, actual=value)
        return ValidationResult.valid()


@dataclass(frozen=True, slots=True)
class EmailValidator(AtomicValidator):
    """Validate email address format."""

    @property
    def constraint_name(self) -> str:
        return "email"

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, str):
            return _type_mismatch("string", value)

        # RFC 5322 simplified pattern
        if not EMAIL_PATTERN.match(value):
            return ValidationResult.invalid(
                f"Invalid email format: {value}",
                ErrorCode.E2010_INVALID_EMAIL,
                constraint=self.constraint_name,
                expected="valid email address",
                actual=value,
            )

        return ValidationResult.valid()


@dataclass(frozen=True, slots=True)
class UUIDValidator(AtomicValidator):
    """Validate UUID format."""
    version: int | None = None

    @property
    def constraint_name(self) -> str:
        return f"uuid{f'v{self.version}' if self.version else ''}"

    def validate(self, value: Any) -> ValidationResult:
        if isinstance(value, StdUUID):
            parsed = value
        elif isinstance(value, str):
            try:
                parsed = StdUUID(value)
            except ValueError:
                return ValidationResult.invalid(
                    f"Invalid UUID format: {value}",
                    ErrorCode.E2011_INVALID_UUID,
                    constraint=self.constraint_name,
                    expected="valid UUID",
                    actual=value[:50] if len(value) > 50 else value,
                )
        else:
            return _type_mismatch("uuid", value)

        if self.version and parsed.version != self.version:
            return ValidationResult.invalid(
                f"Expected UUID version {self.version}, got version {parsed.version}",
                ErrorCode.E2011_INVALID_UUID,
                constraint=self.constraint_name,
                expected=f"UUID v{self.version}",
                actual=f"UUID v{parsed.version}",
            )
        return ValidationResult.valid()


# ============================================================================
# Collection Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class ListLength(AtomicValidator):
    """Validate list/array length constraints."""
    min_length: int | None = None
    max_length: int | None = None

    @property
    def constraint_name(self) -> str:
        parts = []
        if self.min_length is not None:
            parts.append(f"min={self.min_length}")
        if self.max_length is not None:
            parts.append(f"max={self.max_length}")
        return f"list_length[{', '.join(parts)}]" if parts else "list"

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, SEQUENCE_TYPES):
            return _type_mismatch("list", value)

        length = len(value)

        if self.min_length is not None and length < self.min_length:
            return ValidationResult.invalid(
                f"List has {length} items, minimum is {self.min_length}",
                ErrorCode.E2003_OUT_OF_RANGE,
                constraint=self.constraint_name,
                expected=f">= {self.min_length} items",
                actual=f"{length} items",
            )

        if self.max_length is not None and length > self.max_length:
            return ValidationResult.invalid(
                f"List has {length} items, maximum is {self.max_length}",
                ErrorCode.E2003_OUT_OF_RANGE,
                constraint=self.constraint_name,
                expected=f"<= {self.max_length} items",
                actual=f"{length} items",
            )

        return ValidationResult.valid()


@dataclass(frozen=True, slots=True)
class UniqueItems(AtomicValidator):
    """Validate list contains unique items."""

    @property
    def constraint_name(self) -> str:
        return "unique_items"

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, SEQUENCE_TYPES):
            return _type_mismatch("list", value)

        seen: list = []
        duplicates = []
        for item in value:
            if any(item == s for s in seen):
                duplicates.append(item)
            else:
                seen.append(item)

        if duplicates:
            return ValidationResult.invalid(
                f"List contains duplicate items: {duplicates[:3]}",
                ErrorCode.E2005_CONSTRAINT_VIOLATION,
                constraint=self.constraint_name,
                expected="unique items",
                actual=f"duplicates: {duplicates[:3]}",
            )

        return ValidationResult.valid()


# ============================================================================
# Combinators
# ============================================================================

@dataclass(frozen=True, slots=True)
class Not(AtomicValidator):
    """NOT combinator: negates validator."""
    validator: AtomicValidator
    message: str | None = None

    @property
    def constraint_name(self) -> str:
        return f"NOT({self.validator.constraint_name})"

    def validate(self, value: Any) -> ValidationResult:
        if self.validator.validate(value).is_valid:
            return ValidationResult.invalid(self.message or f"Value should not satisfy: {self.validator.constraint_name}",
                ErrorCode.E2005_CONSTRAINT_VIOLATION, constraint=self.constraint_name, actual=value)
        return ValidationResult.valid()
