"""Profiles module - the people on the roster and the roles they can take."""

from roster_manager.profiles.base import Profile, ProfileDraft, Role, ROLE_NAMES
from roster_manager.profiles.ids import IdSequence, get_global_id_sequence

__all__ = [
    "Profile",
    "ProfileDraft",
    "Role",
    "ROLE_NAMES",
    "IdSequence",
    "get_global_id_sequence",
]
