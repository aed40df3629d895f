"""Store module - the authoritative roster and where it is persisted."""

from roster_manager.store.store import ProfileStore
from roster_manager.store.storage import InMemoryStorage, RosterStorage, YamlRosterFile

__all__ = [
    "ProfileStore",
    "RosterStorage",
    "InMemoryStorage",
    "YamlRosterFile",
]
