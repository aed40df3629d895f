"""
Roster Manager - Keeps the roster of people assigned to event roles.

Profiles can be added, edited and removed by hand or imported in bulk from a
CSV file. Imports are all-or-nothing: a single bad line rejects the file.
"""

__version__ = "0.1.0"

from roster_manager.profiles.base import Profile, ProfileDraft, Role
from roster_manager.importer.csv_importer import (
    CSVImporter,
    FailureKind,
    ImportFailure,
    ImportSuccess,
)
from roster_manager.store.store import ProfileStore
from roster_manager.engine.validation_engine import ValidationEngine

__all__ = [
    "Profile",
    "ProfileDraft",
    "Role",
    "CSVImporter",
    "FailureKind",
    "ImportFailure",
    "ImportSuccess",
    "ProfileStore",
    "ValidationEngine",
]
