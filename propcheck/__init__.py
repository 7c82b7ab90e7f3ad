"""propcheck - declarative validation of object properties.

Module-level shortcuts run against a process-wide Validator bound to the
default metadata storage and container.
"""
from __future__ import annotations

from typing import Any

__version__ = "0.1.0"

from propcheck.core.errors import AppError, Err, Ok, Result
from propcheck.validation import *  # noqa: F401,F403
from propcheck.validation import __all__ as _validation_all
from propcheck.validation import ConstraintViolation, Validator, ValidatorOptions

_DEFAULT_VALIDATOR = Validator()


async def validate(obj: Any, options: ValidatorOptions | None = None, *,
                   schema: str | None = None) -> list[ConstraintViolation]:
    return await _DEFAULT_VALIDATOR.validate(obj, options, schema=schema)


async def validate_or_reject(obj: Any, options: ValidatorOptions | None = None, *, schema: str | None = None,
                             sensitive_fields: frozenset[str] | None = None) -> None:
    await _DEFAULT_VALIDATOR.validate_or_reject(obj, options, schema=schema, sensitive_fields=sensitive_fields)


async def is_valid(obj: Any, options: ValidatorOptions | None = None, *, schema: str | None = None) -> bool:
    return await _DEFAULT_VALIDATOR.is_valid(obj, options, schema=schema)


async def check(obj: Any, options: ValidatorOptions | None = None, *, schema: str | None = None,
                sensitive_fields: frozenset[str] | None = None) -> Result[Any, AppError]:
    return await _DEFAULT_VALIDATOR.check(obj, options, schema=schema, sensitive_fields=sensitive_fields)


__all__ = [
    "__version__",
    "AppError",
    "Ok",
    "Err",
    "Result",
    "validate",
    "validate_or_reject",
    "is_valid",
    "check",
    *_validation_all,
]
