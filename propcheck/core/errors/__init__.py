"""Monadic Error Handling System

Key components:
- Result[T, E]: Monadic container for success/failure
- AppError: Base error type with full context
- ErrorCode: Hierarchical error code taxonomy
- ConfigurationError: fatal declaration / data-shape problems
- Builder functions: Ergonomic error construction

Usage:
    from propcheck.core.errors import Ok, Err, AppError

    match await validator.check(payload):
        case Ok(obj):
            save(obj)
        case Err(error):
            log.warning(error.message, code=error.code.name)
"""
from .types import (
    # Core types
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
    # Exceptions
    AppErrorException,
    ConfigurationError,
    NestedValidationError,
    UnknownConstraintError,
    # Constructors
    ok,
    err,
    from_exception,
)

from .builders import (
    predicate_failed,
    nested_shape_mismatch,
    unknown_constraint,
    invalid_declaration,
)

__all__ = [
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
    "AppErrorException",
    "ConfigurationError",
    "NestedValidationError",
    "UnknownConstraintError",
    "ok",
    "err",
    "from_exception",
    "predicate_failed",
    "nested_shape_mismatch",
    "unknown_constraint",
    "invalid_declaration",
]
