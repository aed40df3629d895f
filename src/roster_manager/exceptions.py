"""Exception hierarchy for the roster manager."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class RosterError(Exception):
    """Base class for roster errors with a structured payload."""

    error_code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        base = f"[{self.error_code}] {self.message}"
        if self.details:
            return f"{base} :: {self.details}"
        return base


class RosterStorageError(RosterError):
    """Raised when the roster cannot be loaded from or saved to storage."""


class DuplicateProfileIdError(RosterError):
    """Raised when a collection would hold two profiles with the same id."""


class ImportInProgressError(RosterError):
    """Raised when an import starts while another file read is pending."""
