"""Declaration API - attach rules to classes or named schemas.

Usage:
    @rules(
        name=[not_empty(), max_length(50)],
        tags=min_length(2, each=True),
        address=nested(),
        code=custom(IsUniqueCode, groups={"create"}),
    )
    class User:
        ...

    schema("signup", email=[not_empty(), is_email()], password=min_length(8))
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, TypeVar

from propcheck.core.errors import invalid_declaration
from .metadata import MessageSpec, ValidationMetadata, ValidationType
from .storage import MetadataStorage, get_metadata_storage

C = TypeVar("C", bound=type)


@dataclass(frozen=True, slots=True)
class Rule:
    """A descriptor not yet bound to a target and property."""
    type: ValidationType
    constraints: tuple[Any, ...] = ()
    each: bool = False
    groups: frozenset[str] = frozenset()
    message: MessageSpec = None
    constraint_cls: type | None = None

    def bind(self, target: type | str, property_name: str) -> ValidationMetadata:
        return ValidationMetadata(type=self.type, target=target, property_name=property_name,
            constraints=self.constraints, each=self.each, groups=self.groups, message=self.message,
            constraint_cls=self.constraint_cls)


def _rule(kind: ValidationType, *constraints: Any, each: bool = False, groups: Iterable[str] = (),
          message: MessageSpec = None, constraint_cls: type | None = None) -> Rule:
    return Rule(type=kind, constraints=constraints, each=each, groups=frozenset(groups),
                message=message, constraint_cls=constraint_cls)


# ============================================================================
# Rule builders
# ============================================================================

def not_empty(**options) -> Rule: return _rule(ValidationType.NOT_EMPTY, **options)
def is_defined(**options) -> Rule: return _rule(ValidationType.IS_DEFINED, **options)
def equals(comparison: Any, **options) -> Rule: return _rule(ValidationType.EQUALS, comparison, **options)
def not_equals(comparison: Any, **options) -> Rule: return _rule(ValidationType.NOT_EQUALS, comparison, **options)
def is_empty(**options) -> Rule: return _rule(ValidationType.IS_EMPTY, **options)
def is_in(values: Iterable[Any], **options) -> Rule: return _rule(ValidationType.IS_IN, list(values), **options)
def is_not_in(values: Iterable[Any], **options) -> Rule: return _rule(ValidationType.IS_NOT_IN, list(values), **options)
def is_boolean(**options) -> Rule: return _rule(ValidationType.IS_BOOLEAN, **options)
def is_string(**options) -> Rule: return _rule(ValidationType.IS_STRING, **options)
def is_number(**options) -> Rule: return _rule(ValidationType.IS_NUMBER, **options)
def is_int(**options) -> Rule: return _rule(ValidationType.IS_INT, **options)
def min_value(minimum: float, **options) -> Rule: return _rule(ValidationType.MIN, minimum, **options)
def max_value(maximum: float, **options) -> Rule: return _rule(ValidationType.MAX, maximum, **options)
def min_length(minimum: int, **options) -> Rule: return _rule(ValidationType.MIN_LENGTH, minimum, **options)
def max_length(maximum: int, **options) -> Rule: return _rule(ValidationType.MAX_LENGTH, maximum, **options)
def contains(seed: str, **options) -> Rule: return _rule(ValidationType.CONTAINS, seed, **options)
def not_contains(seed: str, **options) -> Rule: return _rule(ValidationType.NOT_CONTAINS, seed, **options)
def is_email(**options) -> Rule: return _rule(ValidationType.IS_EMAIL, **options)
def array_not_empty(**options) -> Rule: return _rule(ValidationType.ARRAY_NOT_EMPTY, **options)
def array_min_size(minimum: int, **options) -> Rule: return _rule(ValidationType.ARRAY_MIN_SIZE, minimum, **options)
def array_max_size(maximum: int, **options) -> Rule: return _rule(ValidationType.ARRAY_MAX_SIZE, maximum, **options)
def array_unique(**options) -> Rule: return _rule(ValidationType.ARRAY_UNIQUE, **options)


def length(minimum: int, maximum: int | None = None, **options) -> Rule:
    constraints = (minimum,) if maximum is None else (minimum, maximum)
    return _rule(ValidationType.LENGTH, *constraints, **options)


def matches(pattern: str, flags: int = 0, **options) -> Rule:
    return _rule(ValidationType.MATCHES, pattern, flags, **options)


def is_uuid(version: int | None = None, **options) -> Rule:
    return _rule(ValidationType.IS_UUID, *(() if version is None else (version,)), **options)


def custom(constraint_cls: type, *constraints: Any, **options) -> Rule:
    """Rule checked by a registered predicate class (see ``validator_constraint``)."""
    if not isinstance(constraint_cls, type):
        raise invalid_declaration("custom() expects a predicate class", given=repr(constraint_cls))
    return _rule(ValidationType.CUSTOM_VALIDATION, *constraints, constraint_cls=constraint_cls, **options)


def nested(*, schema: str | None = None, groups: Iterable[str] = (), message: MessageSpec = None) -> Rule:
    """Recurse into the property's object, or into every element of its sequence.

    Nested values are validated against ``schema`` when given, otherwise
    against the schema the rule itself was declared on (if any).
    """
    constraints = () if schema is None else (schema,)
    return _rule(ValidationType.NESTED_VALIDATION, *constraints, groups=groups, message=message)


# ============================================================================
# Registration
# ============================================================================

def register_rules(
    storage: MetadataStorage,
    target: type | str,
    properties: dict[str, Rule | Iterable[Rule]],
) -> None:
    """Bind rules to ``target`` (class or schema name) and store them, in declaration order."""
    for property_name, declared in properties.items():
        for rule in ([declared] if isinstance(declared, Rule) else list(declared)):
            if not isinstance(rule, Rule):
                raise invalid_declaration(f"Expected Rule for property '{property_name}', got {type(rule).__name__}",
                                          property=property_name)
            storage.add_validation_metadata(rule.bind(target, property_name))


def rules(**properties: Rule | Iterable[Rule]) -> Callable[[C], C]:
    """Class decorator registering rules with the process-wide storage."""
    def decorator(cls: C) -> C:
        register_rules(get_metadata_storage(), cls, properties)
        return cls
    return decorator


def schema(name: str, **properties: Rule | Iterable[Rule]) -> str:
    """Register rules under a schema name, usable for plain mappings. Returns the name."""
    register_rules(get_metadata_storage(), name, properties)
    return name
