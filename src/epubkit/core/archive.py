"""Read entries out of an in-memory EPUB zip container."""

import io
import logging
import zipfile
from urllib.parse import unquote

from bs4 import UnicodeDammit

from epubkit.errors import ArchiveError, EntryNotFoundError

log = logging.getLogger(__name__)


class EpubArchive:
    """Zip container opened over raw bytes.

    Each parse owns its own instance; nothing is shared between archives.
    """

    def __init__(self, data: bytes):
        try:
            self._zip = zipfile.ZipFile(io.BytesIO(data))
        except zipfile.BadZipFile as e:
            raise ArchiveError(f"not a zip archive: {e}") from e
        self._names = set(self._zip.namelist())

    def __enter__(self) -> "EpubArchive":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._zip.close()

    def _resolve(self, path: str) -> str | None:
        """Map an href to the stored entry name, if any."""
        if path in self._names:
            return path
        # Manifest hrefs are URLs and may be percent-encoded
        unquoted = unquote(path)
        if unquoted in self._names:
            return unquoted
        return None

    def extract_text(self, path: str) -> str:
        """Return an entry decoded to text.

        Raises:
            EntryNotFoundError: If the archive has no such entry
        """
        name = self._resolve(path)
        if name is None:
            raise EntryNotFoundError(path)

        data = self._zip.read(name)
        # Honour BOMs and <?xml encoding="..."?> declarations
        dammit = UnicodeDammit(data, user_encodings=["utf-8"], is_html=False)
        if dammit.unicode_markup is None:
            log.warning("Could not detect encoding of %s, decoding as UTF-8", name)
            return data.decode("utf-8", errors="replace")
        return dammit.unicode_markup

    def extract_binary(self, path: str) -> bytes:
        """Return an entry's raw bytes, or ``b""`` if it does not exist."""
        name = self._resolve(path)
        if name is None:
            return b""
        return self._zip.read(name)
