"""Parse EPUB archives into a normalized description, and build new ones."""

from epubkit.config import ParserConfig
from epubkit.core.epub_builder import EpubBuilder
from epubkit.core.epub_parser import EpubParser, open_epub, parse_epub_bytes
from epubkit.errors import (
    ArchiveError,
    ConfigError,
    EntryNotFoundError,
    EpubError,
    PackageStructureError,
    SourceFetchError,
    XmlParseError,
)
from epubkit.models import EpubDescriptor, EpubOptions

__version__ = "0.1.0"

__all__ = [
    "open_epub",
    "parse_epub_bytes",
    "EpubParser",
    "EpubBuilder",
    "EpubDescriptor",
    "EpubOptions",
    "ParserConfig",
    "EpubError",
    "ArchiveError",
    "ConfigError",
    "EntryNotFoundError",
    "XmlParseError",
    "PackageStructureError",
    "SourceFetchError",
]
