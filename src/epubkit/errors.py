"""Exceptions raised while opening, parsing, or building EPUB archives."""


class EpubError(Exception):
    """Base class for all epubkit errors."""


class ConfigError(EpubError):
    """An EPUBKIT_* environment variable has an invalid value."""


class ArchiveError(EpubError):
    """The input is not a readable zip container."""


class EntryNotFoundError(EpubError, KeyError):
    """A required entry is missing from the archive."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"file {path} not found in zip")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class XmlParseError(EpubError):
    """An XML document inside the archive could not be parsed."""


class PackageStructureError(EpubError):
    """The container, package, or navigation structure is unusable."""


class SourceFetchError(EpubError):
    """The EPUB bytes could not be read from a file or URL."""
