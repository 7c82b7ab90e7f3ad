"""Validator facade - public entry points and built-in predicate dispatch."""
from __future__ import annotations

import re
from typing import Any, Callable

from propcheck.core.errors import AppError, Err, Ok, Result, from_exception, unknown_constraint
from .container import Container, get_container
from .errors import ConstraintViolation, ValidationError
from .executor import ValidationExecutor
from .metadata import ValidationMetadata, ValidationType
from .options import ValidatorOptions
from .storage import MetadataStorage, get_metadata_storage
from .validators import (
    AtomicValidator,
    Contains,
    Defined,
    EmailValidator,
    EqualTo,
    ListLength,
    NotEmpty,
    NumericRange,
    OneOf,
    RegexPattern,
    StringLength,
    TypeCheck,
    UniqueItems,
    UUIDValidator,
    ValidationResult,
)


def _arg(constraints: tuple[Any, ...], index: int, default: Any = None) -> Any:
    return constraints[index] if len(constraints) > index else default


def _pattern(constraints: tuple[Any, ...]) -> RegexPattern:
    pattern = constraints[0]
    if isinstance(pattern, re.Pattern):
        return RegexPattern(pattern.pattern, pattern.flags)
    return RegexPattern(pattern, _arg(constraints, 1, 0))


BUILT_IN_PREDICATES: dict[ValidationType, Callable[[tuple[Any, ...]], AtomicValidator]] = {
    ValidationType.NOT_EMPTY: lambda c: NotEmpty(),
    ValidationType.IS_DEFINED: lambda c: Defined(),
    ValidationType.EQUALS: lambda c: EqualTo(c[0]),
    ValidationType.NOT_EQUALS: lambda c: ~EqualTo(c[0]),
    ValidationType.IS_EMPTY: lambda c: ~NotEmpty(),
    ValidationType.IS_IN: lambda c: OneOf(tuple(c[0])),
    ValidationType.IS_NOT_IN: lambda c: ~OneOf(tuple(c[0])),
    ValidationType.IS_BOOLEAN: lambda c: TypeCheck("boolean"),
    ValidationType.IS_STRING: lambda c: TypeCheck("string"),
    ValidationType.IS_NUMBER: lambda c: TypeCheck("number"),
    ValidationType.IS_INT: lambda c: TypeCheck("int"),
    ValidationType.MIN: lambda c: NumericRange(min_value=c[0]),
    ValidationType.MAX: lambda c: NumericRange(max_value=c[0]),
    ValidationType.MIN_LENGTH: lambda c: StringLength(min_length=c[0]),
    ValidationType.MAX_LENGTH: lambda c: StringLength(max_length=c[0]),
    ValidationType.LENGTH: lambda c: StringLength(min_length=c[0], max_length=_arg(c, 1)),
    ValidationType.MATCHES: _pattern,
    ValidationType.CONTAINS: lambda c: Contains(c[0]),
    ValidationType.NOT_CONTAINS: lambda c: Contains(c[0], absent=True),
    ValidationType.IS_EMAIL: lambda c: EmailValidator(),
    ValidationType.IS_UUID: lambda c: UUIDValidator(_arg(c, 0)),
    ValidationType.ARRAY_NOT_EMPTY: lambda c: ListLength(min_length=1),
    ValidationType.ARRAY_MIN_SIZE: lambda c: ListLength(min_length=c[0]),
    ValidationType.ARRAY_MAX_SIZE: lambda c: ListLength(max_length=c[0]),
    ValidationType.ARRAY_UNIQUE: lambda c: UniqueItems(),
}


class Validator:
    """Validates objects against the descriptors registered in a MetadataStorage.

    Usage:
        validator = Validator()
        violations = await validator.validate(user)
        await validator.validate_or_reject(user, ValidatorOptions.create(groups=["signup"]))
        result = await validator.check(payload, schema="user")
    """

    def __init__(self, storage: MetadataStorage | None = None, container: Container | None = None):
        self.storage = storage or get_metadata_storage()
        self._container = container

    @property
    def container(self) -> Container:
        return self._container or get_container()

    async def validate(
        self,
        obj: Any,
        options: ValidatorOptions | None = None,
        *,
        schema: str | None = None,
    ) -> list[ConstraintViolation]:
        """Validate ``obj`` (against ``schema`` if given) and return every violation found."""
        return await ValidationExecutor(self, options).execute(obj, schema)

    async def validate_or_reject(
        self,
        obj: Any,
        options: ValidatorOptions | None = None,
        *,
        schema: str | None = None,
        sensitive_fields: frozenset[str] | None = None,
    ) -> None:
        """Like ``validate`` but raises ValidationError when anything failed."""
        violations = await self.validate(obj, options, schema=schema)
        if violations:
            raise ValidationError(message="Validation failed", violations=violations,
                                  sensitive_fields=sensitive_fields)

    async def is_valid(self, obj: Any, options: ValidatorOptions | None = None, *,
                       schema: str | None = None) -> bool:
        return not await self.validate(obj, options, schema=schema)

    async def check(
        self,
        obj: Any,
        options: ValidatorOptions | None = None,
        *,
        schema: str | None = None,
        sensitive_fields: frozenset[str] | None = None,
    ) -> Result[Any, AppError]:
        """Result-returning variant: Ok(obj) when valid, Err(AppError) otherwise.

        Configuration problems (bad declarations, nested rules on primitives)
        are converted to Err as well instead of propagating.
        """
        try:
            await self.validate_or_reject(obj, options, schema=schema, sensitive_fields=sensitive_fields)
        except ValidationError as e:
            return Err(e.to_app_error())
        except Exception as e:
            return from_exception(e, origin="validator")
        return Ok(obj)

    def validate_value_by_metadata(self, value: Any, metadata: ValidationMetadata) -> bool:
        """Run the built-in predicate for the descriptor's kind against ``value``."""
        return self.evaluate(value, metadata).is_valid

    def evaluate(self, value: Any, metadata: ValidationMetadata) -> ValidationResult:
        """Like ``validate_value_by_metadata`` but returns the full ValidationResult."""
        factory = BUILT_IN_PREDICATES.get(metadata.type)
        if factory is None:
            raise unknown_constraint(metadata.type.value, metadata.target_name, metadata.property_name)
        return factory(metadata.constraints).validate(value)
