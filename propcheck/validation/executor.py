"""Validation execution engine.

Walks one object graph: selects the applicable descriptors per property,
runs built-in checks inline, launches custom checks that may complete
later, recurses into nested values and joins all outstanding work once at
the top-level call.

Every executor spawned for a nested value shares the ExecutionContext of
the top-level call, so violations anywhere in the graph land in one list
and every pending check is awaited by the one join.
"""
from __future__ import annotations

import asyncio
import inspect
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Awaitable

from propcheck.core.errors import nested_shape_mismatch, predicate_failed
from propcheck.core.logging import executor_logger, generate_run_id
from .constraints import ValidatorConstraint
from .errors import ConstraintViolation
from .messages import create_violation, target_name
from .metadata import ConstraintMetadata, ValidationMetadata, ValidationType
from .options import ValidatorOptions
from .validators import SEQUENCE_TYPES

if TYPE_CHECKING:
    from .validator import Validator

log = executor_logger()

PRIMITIVE_TYPES = (str, bytes, bytearray, int, float, complex, Decimal)


def is_sequence(value: Any) -> bool:
    return isinstance(value, SEQUENCE_TYPES)


def is_missing(value: Any) -> bool:
    """None, empty string, zero and False count as missing; empty containers do not."""
    return value is None or (isinstance(value, (str, int, float)) and not value)


def read_property(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


@dataclass
class ExecutionContext:
    """State shared by every executor taking part in one top-level call."""
    errors: list[ConstraintViolation] = field(default_factory=list)
    pending: list[Awaitable[None]] = field(default_factory=list)
    launched: list[Awaitable[Any]] = field(default_factory=list)
    run_id: str = field(default_factory=generate_run_id)

    async def join(self) -> None:
        """Await all pending work, including work registered while waiting."""
        while self.pending:
            batch, self.pending = self.pending, []
            await asyncio.gather(*batch)
        self.launched.clear()

    def discard(self) -> None:
        """Drop pending work after a fatal error; results are ignored."""
        for awaitable in [*self.pending, *self.launched]:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            elif isinstance(awaitable, asyncio.Future):
                awaitable.cancel()
        self.pending.clear()
        self.launched.clear()


class ValidationExecutor:
    """Executes validation over one object, contributing to a shared context."""

    def __init__(
        self,
        validator: Validator,
        options: ValidatorOptions | None = None,
        context: ExecutionContext | None = None,
    ):
        self.validator = validator
        self.options = options or ValidatorOptions()
        self.context = context or ExecutionContext()
        self.storage = validator.storage

    async def execute(self, obj: Any, target_schema: str | None = None) -> list[ConstraintViolation]:
        """Validate ``obj`` and everything nested below it; resolves once all checks finished."""
        log.debug("validation_started", run_id=self.context.run_id, target=target_name(obj), schema=target_schema)
        try:
            self.collect(obj, target_schema)
        except Exception:
            self.context.discard()
            raise
        await self.context.join()
        log.debug("validation_finished", run_id=self.context.run_id, violations=len(self.context.errors))
        return self.context.errors

    def collect(self, obj: Any, target_schema: str | None = None) -> None:
        """Run the synchronous traversal; asynchronous checks are left in the context."""
        metadatas = self.storage.get_target_validation_metadatas(type(obj), target_schema, self.options.groups)
        grouped = self.storage.group_by_property_name(metadatas)

        for property_name, property_metadatas in grouped.items():
            value = read_property(obj, property_name)
            not_empty, default, custom, nested = [], [], [], []
            for metadata in property_metadatas:
                if metadata.type is ValidationType.NOT_EMPTY:
                    not_empty.append(metadata)
                elif metadata.type is ValidationType.CUSTOM_VALIDATION:
                    custom.append(metadata)
                elif metadata.type is ValidationType.NESTED_VALIDATION:
                    nested.append(metadata)
                else:
                    default.append(metadata)

            # "required" must be reported even when everything else is skipped
            self._default_validations(obj, value, not_empty)

            if self.options.skip_missing_properties and is_missing(value):
                continue

            self._default_validations(obj, value, default)
            self._custom_validations(obj, value, custom)
            self._nested_validations(obj, value, nested)

    # -------------------------------------------------------------------------
    # Built-in checks
    # -------------------------------------------------------------------------

    def _default_validations(self, obj: Any, value: Any, metadatas: list[ValidationMetadata]) -> None:
        for metadata in metadatas:
            if metadata.each and not is_sequence(value):
                self.context.errors.append(self._violation(obj, value, metadata))
                continue
            items = value if metadata.each else [value]
            results = (self.validator.evaluate(item, metadata) for item in items)
            failed = next((r for r in results if not r.is_valid), None)
            if failed is not None:
                log.debug("constraint_failed", run_id=self.context.run_id, target=metadata.target_name,
                          property=metadata.property_name, constraint=failed.constraint,
                          code=failed.error_code.name if failed.error_code else None, expected=failed.expected)
                self.context.errors.append(self._violation(obj, value, metadata))

    # -------------------------------------------------------------------------
    # Custom checks
    # -------------------------------------------------------------------------

    def _custom_validations(self, obj: Any, value: Any, metadatas: list[ValidationMetadata]) -> None:
        for metadata in metadatas:
            constraints = self.storage.get_target_validator_constraints(metadata.constraint_cls)
            if not constraints:
                log.warning("custom_constraint_unregistered", run_id=self.context.run_id,
                            target=metadata.target_name, property=metadata.property_name,
                            constraint_cls=getattr(metadata.constraint_cls, "__name__", None))

            for constraint in constraints:
                instance = self.validator.container.get(constraint.target)
                if metadata.each and not is_sequence(value):
                    self.context.errors.append(self._violation(obj, value, metadata, constraint, instance))
                    continue

                items = list(value) if metadata.each else [value]
                results = [self._invoke(instance, constraint, item, obj, metadata) for item in items]

                if not any(inspect.isawaitable(r) for r in results):
                    if not all(results):
                        self.context.errors.append(self._violation(obj, value, metadata, constraint, instance))
                    continue

                self.context.launched.extend(r for r in results if inspect.isawaitable(r))
                self.context.pending.append(self._settle(obj, value, metadata, constraint, instance, results))

    def _invoke(self, instance: ValidatorConstraint, constraint: ConstraintMetadata,
                item: Any, obj: Any, metadata: ValidationMetadata) -> bool | Awaitable[bool]:
        try:
            result = instance.validate(item, obj, metadata.constraints)
        except Exception as e:
            self._log_predicate_failure(constraint, metadata, e)
            return False
        return result if inspect.isawaitable(result) else bool(result)

    async def _settle(self, obj: Any, value: Any, metadata: ValidationMetadata, constraint: ConstraintMetadata,
                      instance: ValidatorConstraint, results: list[bool | Awaitable[bool]]) -> None:
        resolved = await asyncio.gather(
            *(r for r in results if inspect.isawaitable(r)), return_exceptions=True
        )
        passed = all(r for r in results if not inspect.isawaitable(r))
        for outcome in resolved:
            if isinstance(outcome, BaseException):
                self._log_predicate_failure(constraint, metadata, outcome)
                passed = False
            elif not outcome:
                passed = False
        if not passed:
            self.context.errors.append(self._violation(obj, value, metadata, constraint, instance))

    def _log_predicate_failure(self, constraint: ConstraintMetadata, metadata: ValidationMetadata,
                               exc: BaseException) -> None:
        error = predicate_failed(constraint.name or constraint.target.__name__, exc, origin="executor")
        log.warning("constraint_predicate_failed", run_id=self.context.run_id, code=error.code.name,
                    target=metadata.target_name, property=metadata.property_name, error=error.message)

    # -------------------------------------------------------------------------
    # Nested checks
    # -------------------------------------------------------------------------

    def _nested_validations(self, obj: Any, value: Any, metadatas: list[ValidationMetadata]) -> None:
        for metadata in metadatas:
            target_schema = metadata.target_schema
            if is_sequence(value):
                # primitive elements carry no properties to validate
                for item in value:
                    if item is not None and not isinstance(item, PRIMITIVE_TYPES):
                        self._spawn(item, target_schema)
            elif value is not None and not isinstance(value, PRIMITIVE_TYPES):
                self._spawn(value, target_schema)
            else:
                raise nested_shape_mismatch(target_name(obj) or metadata.target_name, metadata.property_name, value)

    def _spawn(self, value: Any, target_schema: str | None) -> None:
        ValidationExecutor(self.validator, self.options, self.context).collect(value, target_schema)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def _violation(self, obj: Any, value: Any, metadata: ValidationMetadata,
                   constraint: ConstraintMetadata | None = None,
                   instance: ValidatorConstraint | None = None) -> ConstraintViolation:
        default_message = None
        if instance is not None and not self.options.dismiss_default_messages:
            default_message = instance.default_message(value, metadata.constraints)
        return create_violation(obj, value, metadata, constraint,
                                dismiss_default_messages=self.options.dismiss_default_messages,
                                default_message=default_message)
