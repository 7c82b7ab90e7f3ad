"""Violation rendering.

Builds ConstraintViolation records and fills message templates. Supported
tokens: ``$constraint0``, ``$constraint1``, ... (positional constraint
arguments), ``$value``, ``$property`` and ``$target``.
"""
from __future__ import annotations

from typing import Any

from .errors import ConstraintViolation
from .metadata import ConstraintMetadata, ValidationMetadata, ValidationType

DEFAULT_MESSAGES: dict[ValidationType, str] = {
    ValidationType.CUSTOM_VALIDATION: "$property is invalid",
    ValidationType.NOT_EMPTY: "$property should not be empty",
    ValidationType.IS_DEFINED: "$property should not be null or undefined",
    ValidationType.EQUALS: "$property must be equal to $constraint0",
    ValidationType.NOT_EQUALS: "$property should not be equal to $constraint0",
    ValidationType.IS_EMPTY: "$property must be empty",
    ValidationType.IS_IN: "$property must be one of the following values: $constraint0",
    ValidationType.IS_NOT_IN: "$property should not be one of the following values: $constraint0",
    ValidationType.IS_BOOLEAN: "$property must be a boolean value",
    ValidationType.IS_STRING: "$property must be a string",
    ValidationType.IS_NUMBER: "$property must be a number",
    ValidationType.IS_INT: "$property must be an integer number",
    ValidationType.MIN: "$property must be greater than or equal to $constraint0",
    ValidationType.MAX: "$property must be less than or equal to $constraint0",
    ValidationType.MIN_LENGTH: "$property must be longer than or equal to $constraint0 characters",
    ValidationType.MAX_LENGTH: "$property must be shorter than or equal to $constraint0 characters",
    ValidationType.LENGTH: "$property must be between $constraint0 and $constraint1 characters long",
    ValidationType.MATCHES: "$property must match $constraint0 regular expression",
    ValidationType.CONTAINS: "$property must contain a $constraint0 string",
    ValidationType.NOT_CONTAINS: "$property should not contain a $constraint0 string",
    ValidationType.IS_EMAIL: "$property must be an email",
    ValidationType.IS_UUID: "$property must be an UUID",
    ValidationType.ARRAY_NOT_EMPTY: "$property should not be empty",
    ValidationType.ARRAY_MIN_SIZE: "$property must contain at least $constraint0 elements",
    ValidationType.ARRAY_MAX_SIZE: "$property must contain not more than $constraint0 elements",
    ValidationType.ARRAY_UNIQUE: "All $property's elements must be unique",
}


def get_default_message(kind: ValidationType) -> str | None:
    return DEFAULT_MESSAGES.get(kind)


def render_template(message: str, constraints: tuple[Any, ...], value: Any,
                    property_name: str = "", target: str | None = None) -> str:
    """Substitute template tokens with their string forms.

    ``$value`` goes last so text inside the value is never treated as a token.
    """
    message = message.replace("$property", property_name)
    if target is not None:
        message = message.replace("$target", target)
    # highest index first so "$constraint1" never eats the prefix of "$constraint10"
    for index in reversed(range(len(constraints))):
        message = message.replace(f"$constraint{index}", str(constraints[index]))
    if value is not None:
        message = message.replace("$value", str(value))
    return message


def target_name(obj: Any) -> str | None:
    cls = getattr(obj, "__class__", None)
    return getattr(cls, "__name__", None)


def create_violation(
    obj: Any,
    value: Any,
    metadata: ValidationMetadata,
    constraint: ConstraintMetadata | None = None,
    *,
    dismiss_default_messages: bool = False,
    default_message: str | None = None,
) -> ConstraintViolation:
    """Build the violation record for a failed descriptor.

    Message resolution: callable message, then literal message, then (unless
    dismissed) ``default_message`` or the kind's default, else no message.
    """
    target = target_name(obj)
    message: str | None = None
    if callable(metadata.message):
        message = metadata.message(value, metadata.constraints)
    elif isinstance(metadata.message, str):
        message = metadata.message
    elif not dismiss_default_messages:
        message = default_message or get_default_message(metadata.type)

    if message:
        message = render_template(message, metadata.constraints, value, metadata.property_name, target)

    return ConstraintViolation(
        target=target,
        property=metadata.property_name,
        type=constraint.name if constraint and constraint.name else metadata.type.value,
        message=message,
        value=value,
    )
