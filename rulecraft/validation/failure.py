"""Validation Failure System

Failures are data: each one carries the property path, the rendered message,
the attempted value (redacted if sensitive), the error code, severity, any
custom state and the placeholder values used to render the message.

Error Format:
{
    "error": {
        "type": "validation_error",
        "message": "Validation failed",
        "error_count": 1,
        "errors": [
            {
                "field": "customer.address.postcode",
                "code": "LengthValidator",
                "value": "AB",
                "message": "'Postcode' must be between 5 and 8 characters. You entered 2 characters.",
                "severity": "error"
            }
        ]
    }
}
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Sequence

from rulecraft.core.errors import AppError, Err, ErrorCode, Result, ok

from .enums import Severity

REDACTED = "[REDACTED]"


@dataclass(frozen=True, slots=True)
class ValidationFailure:
    """A single failed check against one property.

    - property_name: full path to the offending property (e.g. "orders[0].lines[2].sku")
    - error_message: message with placeholders already substituted
    - attempted_value: the value that failed
    - error_code: explicit or resolved code (defaults to the validator name)
    - placeholder_values: snapshot of the values used to render the message
    """
    property_name: str | None
    error_message: str
    attempted_value: Any = None
    error_code: str | None = None
    severity: Severity = Severity.ERROR
    custom_state: Any = None
    placeholder_values: dict[str, Any] = field(default_factory=dict)

    def redact_if_sensitive(self, sensitive_fields: frozenset[str] | set[str] | None = None) -> ValidationFailure:
        """Redact attempted value if any path segment is sensitive."""
        if not sensitive_fields or not self.property_name: return self
        path_parts = self.property_name.replace("[", ".").replace("]", "").split(".")
        if any(part in sensitive_fields for part in path_parts):
            return replace(self, attempted_value=REDACTED,
                placeholder_values={**self.placeholder_values, "PropertyValue": REDACTED}
                if "PropertyValue" in self.placeholder_values else self.placeholder_values)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for API responses."""
        result = {"field": self.property_name, "code": self.error_code, "message": self.error_message,
            "severity": self.severity.value}
        if self.attempted_value is not None: result["value"] = self.attempted_value
        if self.custom_state is not None: result["state"] = self.custom_state
        return result

    def __str__(self) -> str:
        return self.error_message


@dataclass(slots=True)
class ValidationResult:
    """Outcome of running a validator against one instance."""
    errors: list[ValidationFailure] = field(default_factory=list)
    rule_sets_executed: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool: return not self.errors

    def errors_for(self, property_name: str) -> list[ValidationFailure]:
        return [f for f in self.errors if f.property_name == property_name]

    def to_dictionary(self) -> dict[str, list[str]]:
        """Group messages by property path."""
        grouped: dict[str, list[str]] = {}
        for failure in self.errors: grouped.setdefault(failure.property_name or "", []).append(failure.error_message)
        return grouped

    def raise_if_invalid(self, message: str = "Validation failed", sensitive_fields: frozenset[str] | None = None) -> None:
        if self.errors:
            raise ValidationError(message=message, failures=list(self.errors), sensitive_fields=sensitive_fields)

    def to_result(self, value: Any, *, origin: str = "") -> Result[Any, AppError]:
        """Ok(value) when valid, Err(AppError) carrying the failures otherwise."""
        if self.is_valid: return ok(value)
        return Err(ValidationError(message="Validation failed", failures=list(self.errors)).to_app_error()
            .with_context(origin=origin))

    def __str__(self) -> str:
        return "\n".join(f.error_message for f in self.errors)


@dataclass
class ValidationError(Exception):
    """Raised by validate_and_throw when a run produced failures."""
    message: str
    failures: list[ValidationFailure]
    sensitive_fields: frozenset[str] | None = None

    def __post_init__(self):
        super().__init__(self.message)

    def __str__(self) -> str:
        if not self.failures: return self.message
        if len(self.failures) == 1: return f"{(f := self.failures[0]).property_name}: {f.error_message}"
        return f"{self.message} ({len(self.failures)} errors)"

    @property
    def field_errors(self) -> dict[str, list[ValidationFailure]]:
        """Group failures by property path."""
        result: dict[str, list[ValidationFailure]] = {}
        for failure in self.failures: result.setdefault(failure.property_name or "", []).append(failure)
        return result

    def _redacted(self, redact: bool = True) -> Sequence[ValidationFailure]:
        if redact and self.sensitive_fields:
            return [f.redact_if_sensitive(self.sensitive_fields) for f in self.failures]
        return self.failures

    def to_app_error(self) -> AppError:
        """Convert to AppError for the error handling system."""
        failures = self._redacted()
        if len(failures) == 1:
            f = failures[0]
            return AppError(code=ErrorCode.E2001_VALIDATION_FAILED, message=f"{f.property_name}: {f.error_message}",
                metadata={"field": f.property_name, "code": f.error_code, "value": f.attempted_value,
                    "severity": f.severity.value})
        return AppError(code=ErrorCode.E2001_VALIDATION_FAILED, message=f"Validation failed: {len(failures)} errors",
            metadata={"error_count": len(failures), "errors": [f.to_dict() for f in failures]})

    def to_dict(self, *, redact_sensitive: bool = True) -> dict[str, Any]:
        """Serialize to dictionary for API responses."""
        failures = self._redacted(redact_sensitive)
        return {"error": {"type": "validation_error", "message": self.message,
            "error_count": len(failures), "errors": [f.to_dict() for f in failures]}}
