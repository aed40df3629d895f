"""CSV import pipeline.

Turns the text of an uploaded file into new profiles, or into a structured
failure the presentation layer can explain. The format is fixed::

    nombre,edad,roles
    Juan Pérez,25,Microfono;Audio

Imports are all-or-nothing: one bad line rejects the whole file.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from roster_manager.engine.validation_engine import (
    ValidationEngine,
    ValidationResult,
    ValidationSeverity,
    parse_age,
)
from roster_manager.profiles.base import Profile, ProfileDraft, Role, ROLE_NAMES
from roster_manager.profiles.ids import IdSequence, get_global_id_sequence

logger = logging.getLogger(__name__)

HEADER = "nombre,edad,roles"
FIELD_SEPARATOR = ","
ROLE_SEPARATOR = ";"
BYTE_ORDER_MARK = "\ufeff"

FORMAT_HELP = f"""{HEADER}
Juan Pérez,25,Microfono;Audio
María García,30,Video;Plataforma

Notas:
- La primera línea debe ser el encabezado exacto: {HEADER}
- Los roles deben estar separados por punto y coma (;)
- Los roles válidos son: {', '.join(ROLE_NAMES)}
- Cada línea debe tener todos los campos completos"""

FORMAT_GUIDANCE = (
    "El formato del archivo CSV es incorrecto.\n"
    "Por favor, use el siguiente formato:\n\n"
    + FORMAT_HELP
)


class FailureKind(str, Enum):
    """Why an import was rejected.

    INVALID_FIELD is the line-level refinement of MALFORMED_FILE; the user
    sees the same guidance for both.
    """

    MALFORMED_FILE = "malformed_file"
    INVALID_FIELD = "invalid_field"


@dataclass
class ImportSuccess:
    """Every line validated; the profiles are ready to merge."""

    profiles: tuple[Profile, ...]

    ok = True

    def __len__(self) -> int:
        return len(self.profiles)


@dataclass
class ImportFailure:
    """The file was rejected and nothing should be merged."""

    kind: FailureKind
    reason: str
    line: int | None = None
    validation: ValidationResult = field(
        default_factory=lambda: ValidationResult(valid=False)
    )

    ok = False

    @property
    def guidance(self) -> str:
        return FORMAT_GUIDANCE


ImportResult = ImportSuccess | ImportFailure


class CSVImporter:
    """Parses roster CSV text into profiles.

    Ids come from the shared session sequence unless another one is given.
    """

    def __init__(
        self,
        ids: IdSequence | None = None,
        validation_engine: ValidationEngine | None = None,
    ):
        self.ids = ids if ids is not None else get_global_id_sequence()
        self.validation_engine = validation_engine or ValidationEngine()

    def parse(self, raw_text: str) -> ImportResult:
        """Parse and validate the full text of a CSV file.

        Args:
            raw_text: File content

        Returns:
            ImportSuccess with one profile per data line, or ImportFailure
            describing the first offending line and every issue found
        """
        raw_text = raw_text.removeprefix(BYTE_ORDER_MARK)
        lines = [
            (number, line)
            for number, line in enumerate(raw_text.split("\n"), start=1)
            if line.strip()
        ]

        if len(lines) < 2:
            return self._fail(
                FailureKind.MALFORMED_FILE,
                "File needs a header line and at least one profile line",
                line=None,
            )

        header_number, header = lines[0]
        if header.strip().lower() != HEADER:
            return self._fail(
                FailureKind.MALFORMED_FILE,
                f"Header must be '{HEADER}', got '{header.strip()}'",
                line=header_number,
            )

        drafts: list[ProfileDraft] = []
        validation = ValidationResult(valid=True)
        first_failure: tuple[FailureKind, str, int] | None = None

        for number, line in lines[1:]:
            fields = [f.strip() for f in line.strip().split(FIELD_SEPARATOR)]
            path = f"line[{number}]"

            if len(fields) != 3:
                line_result = ValidationResult(valid=True, validated_count=1)
                line_result.add_issue(
                    ValidationSeverity.ERROR,
                    f"Expected 3 fields separated by '{FIELD_SEPARATOR}', got {len(fields)}",
                    path=path,
                )
                validation = validation.merge(line_result)
                if first_failure is None:
                    first_failure = (
                        FailureKind.MALFORMED_FILE,
                        line_result.issues[0].message,
                        number,
                    )
                continue

            name, age_text, roles_text = fields
            draft = ProfileDraft(
                name=name,
                age=age_text,
                roles=self._split_roles(roles_text),
            )
            line_result = self.validation_engine.validate_draft(draft, path=path)
            validation = validation.merge(line_result)

            if not line_result.valid:
                if first_failure is None:
                    first_failure = (
                        FailureKind.INVALID_FIELD,
                        line_result.errors[0].message,
                        number,
                    )
                continue

            drafts.append(draft)

        if first_failure is not None:
            kind, reason, number = first_failure
            return self._fail(kind, reason, line=number, validation=validation)

        profiles = tuple(
            Profile(
                id=self.ids.next_id(),
                name=draft.name,
                age=parse_age(draft.age),
                roles=tuple(Role(r) for r in draft.roles),
            )
            for draft in drafts
        )
        logger.info("Parsed %d profiles from CSV", len(profiles))
        return ImportSuccess(profiles=profiles)

    def _split_roles(self, roles_text: str) -> list[str]:
        if not roles_text:
            return []
        return [token.strip() for token in roles_text.split(ROLE_SEPARATOR)]

    def _fail(
        self,
        kind: FailureKind,
        reason: str,
        line: int | None,
        validation: ValidationResult | None = None,
    ) -> ImportFailure:
        if validation is None:
            validation = ValidationResult(valid=True)
            validation.add_issue(
                ValidationSeverity.ERROR,
                reason,
                path=f"line[{line}]" if line else "",
            )
        logger.debug("CSV import rejected (%s) at line %s: %s", kind.value, line, reason)
        return ImportFailure(kind=kind, reason=reason, line=line, validation=validation)


def export_csv(profiles: Iterable[Profile]) -> str:
    """Write profiles in the import format.

    Raises:
        ValueError: If a name contains a character the format cannot carry
    """
    rows = [HEADER]
    for profile in profiles:
        if any(ch in profile.name for ch in (FIELD_SEPARATOR, "\n", "\r")):
            raise ValueError(f"Name cannot be written to CSV: {profile.name!r}")
        rows.append(
            FIELD_SEPARATOR.join([
                profile.name,
                str(profile.age),
                ROLE_SEPARATOR.join(profile.role_names()),
            ])
        )
    return "\n".join(rows) + "\n"
