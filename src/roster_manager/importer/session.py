"""Asynchronous file import into a profile store."""

import asyncio
import logging
from pathlib import Path

from roster_manager.exceptions import ImportInProgressError
from roster_manager.importer.csv_importer import CSVImporter, ImportResult, ImportSuccess
from roster_manager.store.store import ProfileStore

logger = logging.getLogger(__name__)


class ImportSession:
    """Reads an uploaded file and merges it into the store.

    Only one import may be pending at a time. The file read runs off the
    event loop and has no timeout; while it is pending the roster is not
    touched.
    """

    def __init__(self, store: ProfileStore, importer: CSVImporter | None = None):
        self.store = store
        self.importer = importer or CSVImporter(ids=store.ids)
        self._pending = False

    @property
    def pending(self) -> bool:
        return self._pending

    async def import_file(self, path: Path | str, encoding: str = "utf-8-sig") -> ImportResult:
        """Import one CSV file.

        Bytes that do not decode are replaced with U+FFFD, so a file in the
        wrong encoding is rejected by validation instead of raising.

        Returns:
            The importer's result; on success the profiles are already merged

        Raises:
            ImportInProgressError: If another import has not finished reading
        """
        if self._pending:
            raise ImportInProgressError(
                "import_in_progress",
                "Another import is still reading its file",
                {"path": str(path)},
            )

        self._pending = True
        try:
            content = await asyncio.to_thread(
                Path(path).read_text, encoding=encoding, errors="replace"
            )
        finally:
            self._pending = False

        return self.import_text(content)

    def import_text(self, content: str) -> ImportResult:
        """Parse text and merge it if every line is valid."""
        result = self.importer.parse(content)
        if isinstance(result, ImportSuccess):
            self.store.import_many(result.profiles)
        else:
            logger.info("Import rejected: %s", result.reason)
        return result
