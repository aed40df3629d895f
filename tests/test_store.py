"""Tests for the ProfileStore."""

import pytest

from roster_manager.exceptions import DuplicateProfileIdError, RosterStorageError
from roster_manager.importer.csv_importer import CSVImporter
from roster_manager.profiles.base import Profile, ProfileDraft, Role
from roster_manager.profiles.ids import IdSequence
from roster_manager.store.storage import InMemoryStorage
from roster_manager.store.store import ProfileStore


class TestAdd:
    """Tests for adding profiles by hand."""

    def test_add_valid_draft(self, store, storage):
        snapshot = store.add(ProfileDraft(name="Ana", age=28, roles=["Audio", "Video"]))

        assert len(snapshot) == 1
        assert snapshot[0].id == 100
        assert snapshot[0].name == "Ana"
        assert snapshot[0].roles == (Role.AUDIO, Role.VIDEO)
        assert storage.snapshot == snapshot
        assert storage.save_count == 1

    def test_add_accepts_age_as_text(self, store):
        snapshot = store.add(ProfileDraft(name="Ana", age=" 28 ", roles=["Audio"]))

        assert snapshot[0].age == 28

    def test_add_appends_in_order(self, seeded_store):
        seeded_store.add(ProfileDraft(name="Luis", age=40, roles=["Acomodador"]))

        assert [p.name for p in seeded_store] == ["Juan Pérez", "María García", "Luis"]

    @pytest.mark.parametrize(
        "draft",
        [
            ProfileDraft(name="", age=20, roles=["Audio"]),
            ProfileDraft(name="   ", age=20, roles=["Audio"]),
            ProfileDraft(name="Ana", age="", roles=["Audio"]),
            ProfileDraft(name="Ana", age=None, roles=["Audio"]),
            ProfileDraft(name="Ana", age=-1, roles=["Audio"]),
            ProfileDraft(name="Ana", age="veinte", roles=["Audio"]),
            ProfileDraft(name="Ana", age=20, roles=[]),
            ProfileDraft(name="Ana", age=20, roles=["Catering"]),
        ],
    )
    def test_invalid_draft_is_rejected(self, seeded_store, storage, draft):
        before = seeded_store.profiles

        after = seeded_store.add(draft)

        assert after == before
        assert storage.save_count == 0

    def test_ids_never_repeat(self, store):
        for i in range(20):
            store.add(ProfileDraft(name=f"Persona {i}", age=i, roles=["Video"]))

        assert len({p.id for p in store}) == 20


class TestUpdate:
    """Tests for editing profiles."""

    def test_update_replaces_by_value(self, seeded_store, storage):
        original = seeded_store.get(1)

        snapshot = seeded_store.update(1, ProfileDraft(name="Juan P.", age="26", roles=["Video"]))

        assert snapshot[0] == Profile(id=1, name="Juan P.", age=26, roles=(Role.VIDEO,))
        assert snapshot[1].id == 2
        assert original.name == "Juan Pérez"
        assert storage.save_count == 1

    def test_update_unknown_id(self, seeded_store, storage):
        before = seeded_store.profiles

        after = seeded_store.update(9999, ProfileDraft(name="X", age=1, roles=["Audio"]))

        assert after == before
        assert storage.save_count == 0

    def test_update_with_invalid_draft(self, seeded_store, storage):
        before = seeded_store.profiles

        after = seeded_store.update(1, ProfileDraft(name="Juan", age=25, roles=[]))

        assert after == before
        assert storage.save_count == 0


class TestRemove:
    """Tests for deleting profiles."""

    def test_remove_existing(self, seeded_store, storage):
        snapshot = seeded_store.remove(1)

        assert [p.id for p in snapshot] == [2]
        assert 1 not in seeded_store
        assert storage.save_count == 1

    def test_remove_absent_is_noop(self, seeded_store, storage):
        before = seeded_store.profiles

        after = seeded_store.remove(9999)

        assert after == before
        assert storage.save_count == 0


class TestImportMany:
    """Tests for merging imported profiles."""

    def test_import_appends_after_existing(self, seeded_store):
        result = CSVImporter(ids=seeded_store.ids).parse(
            "nombre,edad,roles\nAna,28,Audio\nLuis,40,Video\n"
        )

        snapshot = seeded_store.import_many(result.profiles)

        assert [p.name for p in snapshot] == ["Juan Pérez", "María García", "Ana", "Luis"]

    def test_import_with_colliding_ids_is_rejected(self, seeded_store, storage):
        before = seeded_store.profiles
        clash = Profile(id=2, name="Otra", age=50, roles=(Role.AUDIO,))

        after = seeded_store.import_many([clash])

        assert after == before
        assert storage.save_count == 0

    def test_import_nothing(self, seeded_store, storage):
        assert seeded_store.import_many([]) == seeded_store.profiles
        assert storage.save_count == 0


class TestReplace:
    """Tests for whole-collection replacement."""

    def test_replace_persists_snapshot(self, store, storage):
        profiles = [Profile(id=7, name="Ana", age=28, roles=(Role.AUDIO,))]

        snapshot = store.replace(profiles)

        assert snapshot == tuple(profiles)
        assert storage.snapshot == snapshot

    def test_replace_rejects_duplicate_ids(self, seeded_store, storage):
        duplicate = [
            Profile(id=5, name="Ana", age=28, roles=(Role.AUDIO,)),
            Profile(id=5, name="Luis", age=40, roles=(Role.VIDEO,)),
        ]

        with pytest.raises(DuplicateProfileIdError):
            seeded_store.replace(duplicate)

        assert [p.id for p in seeded_store] == [1, 2]
        assert storage.save_count == 0

    def test_snapshots_are_not_aliased(self, store):
        first = store.add(ProfileDraft(name="Ana", age=28, roles=["Audio"]))
        second = store.add(ProfileDraft(name="Luis", age=40, roles=["Video"]))

        assert len(first) == 1
        assert len(second) == 2


class TestOpen:
    """Tests for building a store from storage."""

    def test_open_loads_profiles_and_advances_ids(self):
        storage = InMemoryStorage([Profile(id=50, name="Ana", age=28, roles=(Role.AUDIO,))])
        ids = IdSequence(start=1)

        store = ProfileStore.open(storage, ids=ids)
        store.add(ProfileDraft(name="Luis", age=40, roles=["Video"]))

        assert [p.id for p in store] == [50, 51]


class FailingStorage(InMemoryStorage):
    """Storage whose saves always fail."""

    def save(self, profiles):
        raise RosterStorageError("roster_unwritable", "disk full")


class TestSaveFailure:
    """Tests for mutations whose save fails."""

    @pytest.fixture
    def failing_store(self, ids):
        return ProfileStore(
            storage=FailingStorage(),
            ids=ids,
            profiles=[Profile(id=1, name="Juan Pérez", age=25, roles=(Role.AUDIO,))],
        )

    def test_add_keeps_previous_snapshot(self, failing_store):
        before = failing_store.profiles

        with pytest.raises(RosterStorageError):
            failing_store.add(ProfileDraft(name="Ana", age=28, roles=["Audio"]))

        assert failing_store.profiles == before

    def test_update_keeps_previous_snapshot(self, failing_store):
        with pytest.raises(RosterStorageError):
            failing_store.update(1, ProfileDraft(name="Juan", age=26, roles=["Video"]))

        assert failing_store.get(1).name == "Juan Pérez"

    def test_remove_keeps_previous_snapshot(self, failing_store):
        with pytest.raises(RosterStorageError):
            failing_store.remove(1)

        assert 1 in failing_store

    def test_import_keeps_previous_snapshot(self, failing_store):
        with pytest.raises(RosterStorageError):
            failing_store.import_many([Profile(id=9, name="Ana", age=28, roles=(Role.AUDIO,))])

        assert [p.id for p in failing_store] == [1]
