"""Engine module - validation rules shared by manual edits and imports."""

from roster_manager.engine.validation_engine import (
    ValidationEngine,
    ValidationIssue,
    ValidationResult,
    ValidationSeverity,
    parse_age,
)

__all__ = [
    "ValidationEngine",
    "ValidationIssue",
    "ValidationResult",
    "ValidationSeverity",
    "parse_age",
]
