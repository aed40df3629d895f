"""Storage collaborators for the roster.

The store only needs ``load`` and ``save``; where the snapshot ends up is up
to the implementation.
"""

import logging
from pathlib import Path
from typing import Any, Iterable, Protocol

import yaml
from pydantic import ValidationError

from roster_manager.exceptions import RosterStorageError
from roster_manager.profiles.base import Profile

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class RosterStorage(Protocol):
    """Loads and saves whole roster snapshots."""

    def load(self) -> tuple[Profile, ...]:
        ...

    def save(self, profiles: Iterable[Profile]) -> None:
        ...


class InMemoryStorage:
    """Keeps the last saved snapshot in memory."""

    def __init__(self, profiles: Iterable[Profile] = ()):
        self.snapshot: tuple[Profile, ...] = tuple(profiles)
        self.save_count = 0

    def load(self) -> tuple[Profile, ...]:
        return self.snapshot

    def save(self, profiles: Iterable[Profile]) -> None:
        self.snapshot = tuple(profiles)
        self.save_count += 1


class YamlRosterFile:
    """Persists the roster as a YAML document."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> tuple[Profile, ...]:
        """Load the roster from disk.

        A missing file is an empty roster.

        Raises:
            RosterStorageError: If the file is not valid YAML or does not
                describe valid profiles
        """
        if not self.path.exists():
            logger.debug("Roster file %s not found, starting empty", self.path)
            return ()

        try:
            with open(self.path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise RosterStorageError(
                "roster_unreadable",
                f"Cannot read roster file {self.path}",
                {"error": str(e)},
            ) from e

        return self._parse_roster(data)

    def save(self, profiles: Iterable[Profile]) -> None:
        """Write the full snapshot, replacing the previous file."""
        data = self._roster_to_dict(profiles)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
        except OSError as e:
            raise RosterStorageError(
                "roster_unwritable",
                f"Cannot write roster file {self.path}",
                {"error": str(e)},
            ) from e
        logger.debug("Saved %d profiles to %s", len(data["profiles"]), self.path)

    def _parse_roster(self, data: Any) -> tuple[Profile, ...]:
        if data is None:
            return ()
        if not isinstance(data, dict) or not isinstance(data.get("profiles", []), list):
            raise RosterStorageError(
                "roster_invalid",
                f"Roster file {self.path} must contain a 'profiles' list",
            )

        profiles = []
        for i, item in enumerate(data.get("profiles", [])):
            try:
                profiles.append(Profile.model_validate(item))
            except ValidationError as e:
                raise RosterStorageError(
                    "roster_invalid",
                    f"Invalid profile at position {i} in {self.path}",
                    {"errors": e.errors(include_url=False)},
                ) from e
        return tuple(profiles)

    def _roster_to_dict(self, profiles: Iterable[Profile]) -> dict[str, Any]:
        return {
            "version": FORMAT_VERSION,
            "profiles": [p.to_dict() for p in profiles],
        }
