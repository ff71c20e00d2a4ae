"""Data models."""

from epubkit.models.build import EpubContentOptions, EpubOptions
from epubkit.models.epub import (
    EasyData,
    EpubDescriptor,
    EpubPaths,
    GuideReference,
    ManifestItem,
    NamespacePrefixes,
    PrimaryIdentifier,
    RawData,
    RawJson,
    RawXml,
    SpineEntry,
)

__all__ = [
    # Parse result models
    "ManifestItem",
    "SpineEntry",
    "GuideReference",
    "PrimaryIdentifier",
    "EasyData",
    "EpubPaths",
    "NamespacePrefixes",
    "RawJson",
    "RawXml",
    "RawData",
    "EpubDescriptor",
    # Generation models
    "EpubContentOptions",
    "EpubOptions",
]
