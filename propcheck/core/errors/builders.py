"""Domain-Specific Error Builders

Ergonomic constructors for the errors raised or returned by the validator.
Builders return either a plain AppError (logged or wrapped into ``Err``) or an
exception carrying one, raised directly from the traversal.
"""
from typing import Any

from .types import (
    AppError,
    ConfigurationError,
    ErrorCode,
    ErrorContext,
    NestedValidationError,
    UnknownConstraintError,
)


# =============================================================================
# Validation Errors (E2xxx)
# =============================================================================

def predicate_failed(name: str, cause: Exception, origin: str = "") -> AppError:
    return AppError(
        code=ErrorCode.E2030_PREDICATE_FAILED,
        message=f"Constraint predicate '{name}' raised {type(cause).__name__}: {cause}",
        context=ErrorContext(origin=origin),
        metadata={"predicate": name},
        cause=cause,
    )


# =============================================================================
# Configuration Errors (E7xxx)
# =============================================================================

def nested_shape_mismatch(target: str, property_name: str, value: Any) -> NestedValidationError:
    return NestedValidationError(AppError(
        code=ErrorCode.E7001_NESTED_SHAPE_MISMATCH,
        message=(
            f"Cannot validate {target}.{property_name}: only objects and arrays "
            f"are supported to nested validation, got {type(value).__name__}"
        ),
        context=ErrorContext(origin="executor"),
        metadata={"target": target, "property": property_name, "value_type": type(value).__name__},
    ))


def unknown_constraint(kind: str, target: str, property_name: str) -> UnknownConstraintError:
    return UnknownConstraintError(AppError(
        code=ErrorCode.E7002_UNKNOWN_CONSTRAINT,
        message=f"No built-in predicate for constraint '{kind}' on {target}.{property_name}",
        context=ErrorContext(origin="validator"),
        metadata={"constraint": kind, "target": target, "property": property_name},
    ))


def invalid_declaration(message: str, **metadata) -> ConfigurationError:
    return ConfigurationError(AppError(
        code=ErrorCode.E7003_INVALID_DECLARATION,
        message=message,
        context=ErrorContext(origin="declarations"),
        metadata=metadata,
    ))
