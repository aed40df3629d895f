"""Profile store - owns the roster and every change made to it.

Each mutation builds a new snapshot, swaps it in through ``replace`` and asks
the storage collaborator to save it. Rejected operations leave the snapshot
untouched and save nothing.
"""

import logging
from typing import Iterable, Iterator

from roster_manager.engine.validation_engine import ValidationEngine, parse_age
from roster_manager.exceptions import DuplicateProfileIdError
from roster_manager.profiles.base import Profile, ProfileDraft, Role
from roster_manager.profiles.ids import IdSequence, get_global_id_sequence
from roster_manager.store.storage import InMemoryStorage, RosterStorage

logger = logging.getLogger(__name__)


class ProfileStore:
    """Ordered collection of profiles with value-semantics mutations.

    All mutating methods return the full snapshot after the operation.
    """

    def __init__(
        self,
        storage: RosterStorage | None = None,
        profiles: Iterable[Profile] = (),
        ids: IdSequence | None = None,
        validation_engine: ValidationEngine | None = None,
    ):
        self.storage = storage if storage is not None else InMemoryStorage()
        self.ids = ids if ids is not None else get_global_id_sequence()
        self.validation_engine = validation_engine or ValidationEngine()
        self._profiles: tuple[Profile, ...] = ()
        initial = tuple(profiles)
        self._check_ids(initial)
        self._set(initial)

    @classmethod
    def open(
        cls,
        storage: RosterStorage,
        ids: IdSequence | None = None,
    ) -> "ProfileStore":
        """Create a store from whatever the storage currently holds."""
        profiles = storage.load()
        logger.debug("Loaded roster with %d profiles", len(profiles))
        return cls(storage=storage, profiles=profiles, ids=ids)

    @property
    def profiles(self) -> tuple[Profile, ...]:
        return self._profiles

    def get(self, profile_id: int) -> Profile | None:
        for profile in self._profiles:
            if profile.id == profile_id:
                return profile
        return None

    def add(self, draft: ProfileDraft) -> tuple[Profile, ...]:
        """Append a new profile built from a draft.

        Invalid drafts are dropped without touching the roster.
        """
        if not self._accepts(draft):
            return self._profiles

        profile = self._build(self.ids.next_id(), draft)
        logger.info("Added profile %d (%s)", profile.id, profile.name)
        return self.replace(self._profiles + (profile,))

    def update(self, profile_id: int, draft: ProfileDraft) -> tuple[Profile, ...]:
        """Replace the profile with this id, keeping its id and position."""
        current = self.get(profile_id)
        if current is None:
            logger.debug("Update ignored, no profile with id %d", profile_id)
            return self._profiles
        if not self._accepts(draft):
            return self._profiles

        updated = current.with_fields(
            draft.name,
            parse_age(draft.age),
            [Role(r) for r in draft.roles],
        )
        logger.info("Updated profile %d", profile_id)
        return self.replace(
            tuple(updated if p.id == profile_id else p for p in self._profiles)
        )

    def remove(self, profile_id: int) -> tuple[Profile, ...]:
        """Delete the profile with this id. Unknown ids are ignored."""
        if self.get(profile_id) is None:
            logger.debug("Remove ignored, no profile with id %d", profile_id)
            return self._profiles

        logger.info("Removed profile %d", profile_id)
        return self.replace(tuple(p for p in self._profiles if p.id != profile_id))

    def import_many(self, profiles: Iterable[Profile]) -> tuple[Profile, ...]:
        """Append already-validated profiles, preserving their order.

        A batch that would repeat an id is rejected as a whole.
        """
        batch = tuple(profiles)
        if not batch:
            return self._profiles

        combined = self._profiles + batch
        if not self.validation_engine.validate_roster(combined).valid:
            logger.warning("Import of %d profiles rejected: duplicate ids", len(batch))
            return self._profiles

        logger.info("Imported %d profiles", len(batch))
        return self.replace(combined)

    def replace(self, profiles: Iterable[Profile]) -> tuple[Profile, ...]:
        """Persist a whole new collection and swap it in.

        The in-memory snapshot only changes once storage has saved it.

        Raises:
            DuplicateProfileIdError: If two profiles share an id
            RosterStorageError: If storage could not save; nothing changes
        """
        snapshot = tuple(profiles)
        self._check_ids(snapshot)
        self.storage.save(snapshot)
        self._set(snapshot)
        return self._profiles

    def _set(self, snapshot: tuple[Profile, ...]) -> None:
        for profile in snapshot:
            self.ids.observe(profile.id)
        self._profiles = snapshot

    def _check_ids(self, snapshot: tuple[Profile, ...]) -> None:
        result = self.validation_engine.validate_roster(snapshot)
        if not result.valid:
            raise DuplicateProfileIdError(
                "duplicate_profile_id",
                "Profile ids must be unique",
                {"issues": [i.message for i in result.errors]},
            )

    def _accepts(self, draft: ProfileDraft) -> bool:
        result = self.validation_engine.validate_draft(draft)
        if not result.valid:
            logger.debug(
                "Profile draft rejected: %s",
                "; ".join(i.message for i in result.errors),
            )
        return result.valid

    def _build(self, profile_id: int, draft: ProfileDraft) -> Profile:
        return Profile(
            id=profile_id,
            name=draft.name,
            age=parse_age(draft.age),
            roles=tuple(Role(r) for r in draft.roles),
        )

    def __len__(self) -> int:
        return len(self._profiles)

    def __iter__(self) -> Iterator[Profile]:
        return iter(self._profiles)

    def __contains__(self, profile_id: int) -> bool:
        return self.get(profile_id) is not None
