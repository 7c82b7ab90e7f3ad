"""Declarative Property Validation

Rules are attached to classes (or named schemas) ahead of time; the
executor reads them back and validates instances, including arbitrarily
deep nested objects and sequences, with synchronous and asynchronous
custom predicates.

Usage:
    from propcheck.validation import rules, not_empty, nested, Validator

    @rules(zip=not_empty())
    class Address: ...

    @rules(addr=nested())
    class Profile: ...

    violations = await Validator().validate(profile)
"""

from .metadata import ValidationType, ValidationMetadata, ConstraintMetadata
from .storage import MetadataStorage, get_metadata_storage
from .container import Container, get_container, get_from_container, use_container
from .constraints import ValidatorConstraint, validator_constraint
from .errors import ConstraintViolation, ValidationError
from .messages import DEFAULT_MESSAGES, create_violation, render_template
from .options import ValidatorOptions
from .executor import ExecutionContext, ValidationExecutor
from .validator import BUILT_IN_PREDICATES, Validator
from .declarations import (
    Rule,
    register_rules,
    rules,
    schema,
    # Rule builders
    not_empty,
    is_defined,
    equals,
    not_equals,
    is_empty,
    is_in,
    is_not_in,
    is_boolean,
    is_string,
    is_number,
    is_int,
    min_value,
    max_value,
    min_length,
    max_length,
    length,
    matches,
    contains,
    not_contains,
    is_email,
    is_uuid,
    array_not_empty,
    array_min_size,
    array_max_size,
    array_unique,
    custom,
    nested,
)

__all__ = [
    # Descriptors and registry
    "ValidationType",
    "ValidationMetadata",
    "ConstraintMetadata",
    "MetadataStorage",
    "get_metadata_storage",
    "Container",
    "get_container",
    "get_from_container",
    "use_container",
    # Predicates
    "ValidatorConstraint",
    "validator_constraint",
    # Results
    "ConstraintViolation",
    "ValidationError",
    "DEFAULT_MESSAGES",
    "create_violation",
    "render_template",
    # Execution
    "ValidatorOptions",
    "ExecutionContext",
    "ValidationExecutor",
    "BUILT_IN_PREDICATES",
    "Validator",
    # Declarations
    "Rule",
    "register_rules",
    "rules",
    "schema",
    "not_empty",
    "is_defined",
    "equals",
    "not_equals",
    "is_empty",
    "is_in",
    "is_not_in",
    "is_boolean",
    "is_string",
    "is_number",
    "is_int",
    "min_value",
    "max_value",
    "min_length",
    "max_length",
    "length",
    "matches",
    "contains",
    "not_contains",
    "is_email",
    "is_uuid",
    "array_not_empty",
    "array_min_size",
    "array_max_size",
    "array_unique",
    "custom",
    "nested",
]
