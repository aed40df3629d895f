"""Validation Engine - Enforces the profile rules.

The same rules apply to a form submission and to a CSV line:
- Name must not be empty
- Age must be a non-negative base-10 integer
- At least one role, every role from the fixed enumeration

Whole rosters are additionally checked for id uniqueness.
"""

import re
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from roster_manager.profiles.base import Profile, ProfileDraft, ROLE_NAMES

_AGE_PATTERN = re.compile(r"[0-9]+")
_NEGATIVE_AGE_PATTERN = re.compile(r"-[0-9]+")


class ValidationSeverity(str, Enum):
    """Severity levels for validation issues."""

    ERROR = "error"
    WARNING = "warning"


@dataclass
class ValidationIssue:
    """A single validation issue."""

    severity: ValidationSeverity
    message: str
    path: str = ""
    context: dict[str, Any] = field(default_factory=dict)


@dataclass
class ValidationResult:
    """Result of a validation operation."""

    valid: bool
    issues: list[ValidationIssue] = field(default_factory=list)
    validated_count: int = 0

    @property
    def error_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.WARNING)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    def add_issue(
        self,
        severity: ValidationSeverity,
        message: str,
        path: str = "",
        **context: Any,
    ) -> None:
        self.issues.append(
            ValidationIssue(
                severity=severity,
                message=message,
                path=path,
                context=context,
            )
        )
        if severity == ValidationSeverity.ERROR:
            self.valid = False

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Merge another validation result into this one."""
        return ValidationResult(
            valid=self.valid and other.valid,
            issues=self.issues + other.issues,
            validated_count=self.validated_count + other.validated_count,
        )


def parse_age(value: Any) -> int | None:
    """Parse an age given as int or text.

    Returns None unless the value is a non-negative base-10 integer.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str):
        text = value.strip()
        if _AGE_PATTERN.fullmatch(text):
            return int(text)
    return None


class ValidationEngine:
    """Engine for validating profile drafts and whole rosters."""

    def validate_draft(self, draft: ProfileDraft, path: str = "") -> ValidationResult:
        """Validate the fields of a profile that does not exist yet.

        Args:
            draft: Name, age and roles as submitted
            path: Prefix for issue paths, e.g. the CSV line

        Returns:
            Validation result; valid only when a Profile can be built from it
        """
        result = ValidationResult(valid=True, validated_count=1)
        prefix = f"{path}." if path else ""

        name = draft.name.strip() if isinstance(draft.name, str) else ""
        if not name:
            result.add_issue(
                ValidationSeverity.ERROR,
                "Name must not be empty",
                path=f"{prefix}name",
            )

        if parse_age(draft.age) is None:
            if isinstance(draft.age, str) and _NEGATIVE_AGE_PATTERN.fullmatch(draft.age.strip()):
                message = f"Age must not be negative: {draft.age.strip()}"
            elif isinstance(draft.age, int) and not isinstance(draft.age, bool) and draft.age < 0:
                message = f"Age must not be negative: {draft.age}"
            else:
                message = f"Age must be a whole number: {draft.age!r}"
            result.add_issue(
                ValidationSeverity.ERROR,
                message,
                path=f"{prefix}age",
                actual=draft.age,
            )

        if not draft.roles:
            result.add_issue(
                ValidationSeverity.ERROR,
                "At least one role is required",
                path=f"{prefix}roles",
            )

        for i, role in enumerate(draft.roles):
            if role not in ROLE_NAMES:
                result.add_issue(
                    ValidationSeverity.ERROR,
                    f"Unknown role: {role!r}",
                    path=f"{prefix}roles[{i}]",
                    allowed=list(ROLE_NAMES),
                )

        return result

    def validate_roster(self, profiles: Iterable[Profile]) -> ValidationResult:
        """Validate a whole collection.

        Checks:
        - No two profiles share an id
        - Repeated names are reported as warnings only
        """
        profiles = list(profiles)
        result = ValidationResult(valid=True, validated_count=len(profiles))

        id_counts = Counter(p.id for p in profiles)
        for profile_id, count in id_counts.items():
            if count > 1:
                result.add_issue(
                    ValidationSeverity.ERROR,
                    f"Duplicate profile id: {profile_id}",
                    path="id",
                    count=count,
                )

        name_counts = Counter(p.name for p in profiles)
        for name, count in name_counts.items():
            if count > 1:
                result.add_issue(
                    ValidationSeverity.WARNING,
                    f"Name appears {count} times: {name}",
                    path="name",
                )

        return result
