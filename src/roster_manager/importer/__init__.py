"""Importer module - bulk profile creation from CSV text."""

from roster_manager.importer.csv_importer import (
    CSVImporter,
    FailureKind,
    FORMAT_GUIDANCE,
    FORMAT_HELP,
    HEADER,
    ImportFailure,
    ImportResult,
    ImportSuccess,
    export_csv,
)
from roster_manager.importer.session import ImportSession

__all__ = [
    "CSVImporter",
    "FailureKind",
    "FORMAT_GUIDANCE",
    "FORMAT_HELP",
    "HEADER",
    "ImportFailure",
    "ImportResult",
    "ImportSuccess",
    "ImportSession",
    "export_csv",
]
