"""Data models for a parsed EPUB archive."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ManifestItem(BaseModel):
    """Single resource declared in the OPF manifest."""

    model_config = ConfigDict(frozen=True)

    id: str
    href: str
    media_type: str | None = None
    properties: str | None = None
    attributes: dict[str, str] = Field(default_factory=dict)


class SpineEntry(BaseModel):
    """One ``itemref`` of the spine, in reading order."""

    model_config = ConfigDict(frozen=True)

    idref: str
    linear: str | None = None  # "yes" | "no" | None (absent = linear)
    item: ManifestItem | None = None  # only resolved for linear entries
    attributes: dict[str, str] = Field(default_factory=dict)

    @property
    def is_linear(self) -> bool:
        return self.linear is None or self.linear == "yes"


class GuideReference(BaseModel):
    """EPUB2 ``<guide>`` reference."""

    model_config = ConfigDict(frozen=True)

    type: str | None = None
    title: str | None = None
    href: str | None = None


class PrimaryIdentifier(BaseModel):
    """The identifier named by the package's ``unique-identifier``."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    value: str | None = None
    scheme: str | None = None


class EasyData(BaseModel):
    """Normalized, ready-to-use fields."""

    model_config = ConfigDict(frozen=True)

    primary_id: PrimaryIdentifier
    epub_version: str
    is_epub3: bool
    md5: str
    epub3_nav_html: str | None = None
    nav_map_html: str | None = None
    linear_spine: dict[str, SpineEntry] = Field(default_factory=dict)
    spine_order: list[SpineEntry] = Field(default_factory=list)
    item_hash_by_id: dict[str, ManifestItem] = Field(default_factory=dict)
    item_hash_by_href: dict[str, ManifestItem] = Field(default_factory=dict)
    simple_meta: list[dict[str, Any]] = Field(default_factory=list)
    epub3_cover_id: str | None = None
    epub3_nav_id: str | None = None
    epub2_cover_url: str | None = None
    guide: list[GuideReference] = Field(default_factory=list)


class EpubPaths(BaseModel):
    """Archive paths resolved while walking the container."""

    model_config = ConfigDict(frozen=True)

    opf_path: str
    ncx_path: str | None = None
    content_root: str = ""


class NamespacePrefixes(BaseModel):
    model_config = ConfigDict(frozen=True)

    opf: str = ""
    dc: str = ""
    ncx: str = ""


class RawJson(BaseModel):
    """Untouched structured-XML trees."""

    model_config = ConfigDict(frozen=True)

    prefixes: NamespacePrefixes
    container: dict[str, Any]
    opf: dict[str, Any]
    ncx: dict[str, Any] | None = None
    nav: dict[str, Any] | None = None


class RawXml(BaseModel):
    model_config = ConfigDict(frozen=True)

    opf_xml: str
    ncx_xml: str | None = None


class RawData(BaseModel):
    """Parsed trees and the original XML text, for lower-level access."""

    # "json" would shadow BaseModel.json()
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    json_: RawJson = Field(alias="json")
    xml: RawXml


class EpubDescriptor(BaseModel):
    """Complete result of opening an EPUB."""

    model_config = ConfigDict(frozen=True)

    easy: EasyData
    paths: EpubPaths
    raw: RawData
