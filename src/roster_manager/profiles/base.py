"""Base classes for Profiles.

A profile is a person on the roster: a name, an age and the event roles the
person can be assigned to. Profiles are immutable values; edits produce a new
profile carrying the same id.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Tasks a person can perform at an event."""

    MICROFONO = "Microfono"
    AUDIO = "Audio"
    VIDEO = "Video"
    PLATAFORMA = "Plataforma"
    ACOMODADOR = "Acomodador"


ROLE_NAMES: tuple[str, ...] = tuple(role.value for role in Role)


class Profile(BaseModel):
    """A person on the roster.

    Only ``id`` has to be unique within a collection; names and ages may repeat.
    Roles keep their given order and duplicates are not collapsed.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: int = Field(..., description="Unique identifier within the session")
    name: str = Field(..., min_length=1, description="Display name")
    age: int = Field(..., ge=0, description="Age in years")
    roles: tuple[Role, ...] = Field(
        ...,
        min_length=1,
        description="Roles this person can be assigned to"
    )

    def role_names(self) -> list[str]:
        """Role labels as they appear in the CSV format."""
        return [role.value for role in self.roles]

    def has_role(self, role: Role | str) -> bool:
        return Role(role) in self.roles

    def with_fields(self, name: str, age: int, roles: list[Role]) -> "Profile":
        """Return a copy with new name, age and roles under the same id."""
        return Profile(id=self.id, name=name, age=age, roles=tuple(roles))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "age": self.age,
            "roles": self.role_names(),
        }


@dataclass
class ProfileDraft:
    """Unvalidated fields as submitted by a form or the command line.

    ``age`` may still be text; the validation engine decides whether the draft
    can become a Profile.
    """

    name: str
    age: int | str | None
    roles: list[str] = field(default_factory=list)
