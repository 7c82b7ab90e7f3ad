"""Validation Error System

Violations are plain records collected into a list; they are never raised
one by one. ``ValidationError`` aggregates a finished run's violations for
callers that prefer an exception (``validate_or_reject``).

Error Format:
{
    "error": {
        "type": "validation_error",
        "message": "Validation failed",
        "error_count": 1,
        "errors": [
            {
                "target": "User",
                "property": "email",
                "type": "is_email",
                "message": "email must be an email",
                "value": "invalid-email"
            }
        ]
    }
}
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from propcheck.core.errors import AppError, ErrorCode, ErrorContext


@dataclass(frozen=True, slots=True)
class ConstraintViolation:
    """One failed rule instance.

    - target: runtime type name of the validated object
    - property: the failing property name
    - type: custom predicate name if one matched, else the constraint kind
    - message: rendered message, None when default messages are dismissed
    - value: the offending value, by reference
    """
    target: str | None
    property: str
    type: str
    message: str | None = None
    value: Any = None

    def redact_if_sensitive(self, sensitive_fields: frozenset[str] | None = None) -> ConstraintViolation:
        """Redact value if the property is sensitive."""
        if not sensitive_fields or self.property not in sensitive_fields: return self
        return ConstraintViolation(target=self.target, property=self.property, type=self.type,
            message=self.message, value="[REDACTED]")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for API responses."""
        result = {"target": self.target, "property": self.property, "type": self.type, "message": self.message}
        if self.value is not None: result["value"] = self.value
        return result


@dataclass
class ValidationError(Exception):
    """Raised by ``validate_or_reject`` when a run produced violations."""
    message: str
    violations: list[ConstraintViolation] = field(default_factory=list)
    sensitive_fields: frozenset[str] | None = None

    def __post_init__(self):
        super().__init__(self.message)

    def __str__(self) -> str:
        if not self.violations: return self.message
        if len(self.violations) == 1: return f"{(v := self.violations[0]).property}: {v.message}"
        return f"{self.message} ({len(self.violations)} errors)"

    @property
    def property_errors(self) -> dict[str, list[ConstraintViolation]]:
        """Group violations by property name."""
        result: dict[str, list[ConstraintViolation]] = {}
        for violation in self.violations: result.setdefault(violation.property, []).append(violation)
        return result

    @property
    def first_error(self) -> ConstraintViolation | None: return self.violations[0] if self.violations else None

    def _redacted(self) -> list[ConstraintViolation]:
        if not self.sensitive_fields: return self.violations
        return [v.redact_if_sensitive(self.sensitive_fields) for v in self.violations]

    def to_app_error(self) -> AppError:
        """Convert to AppError for Result-based callers."""
        violations = self._redacted()
        if len(violations) == 1:
            v = violations[0]
            return AppError(code=ErrorCode.E2005_CONSTRAINT_VIOLATION, message=f"{v.property}: {v.message}",
                context=ErrorContext(origin="validator"),
                metadata={"target": v.target, "property": v.property, "constraint": v.type, "value": v.value})
        return AppError(code=ErrorCode.E2000_VALIDATION_GENERIC, message=f"Validation failed: {len(violations)} errors",
            context=ErrorContext(origin="validator"),
            metadata={"error_count": len(violations), "errors": [v.to_dict() for v in violations]})

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for API responses."""
        violations = self._redacted()
        return {"error": {"type": "validation_error", "message": self.message,
            "error_count": len(violations), "errors": [v.to_dict() for v in violations]}}
