"""Profile id generation."""

import time


class IdSequence:
    """Strictly increasing integer ids.

    The counter starts at the current time in milliseconds so ids stay readable
    as creation stamps, but every call moves it forward by at least one, so
    profiles created within the same millisecond never share an id.
    """

    def __init__(self, start: int | None = None):
        self._next = start if start is not None else time.time_ns() // 1_000_000

    def next_id(self) -> int:
        value = self._next
        self._next += 1
        return value

    def observe(self, existing_id: int) -> None:
        """Make sure ids already in use are never handed out again."""
        if existing_id >= self._next:
            self._next = existing_id + 1


_global_sequence: IdSequence | None = None


def get_global_id_sequence() -> IdSequence:
    """Get the process-wide id sequence shared by importer and store."""
    global _global_sequence
    if _global_sequence is None:
        _global_sequence = IdSequence()
    return _global_sequence
