"""Flatten OPF metadata into single-key entries."""

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from epubkit.core.package import PackageDocument
from epubkit.core.xml_reader import ATTR_KEY, TEXT_KEY
from epubkit.models.epub import ManifestItem, PrimaryIdentifier

log = logging.getLogger(__name__)

_IDENTIFIER_TAG = re.compile(r"identifier$", re.IGNORECASE)


@dataclass
class NormalizedMetadata:
    simple_meta: list[dict[str, Any]] = field(default_factory=list)
    primary_id: PrimaryIdentifier = field(default_factory=PrimaryIdentifier)
    epub2_cover_url: str | None = None


def _element_text(node: Any) -> str | None:
    """Text of a metadata element, or None if it has no scalar text.

    Elements carrying only attributes or child elements come back as
    None; the caller decides how to treat them.
    """
    if isinstance(node, str):
        return node
    if isinstance(node, dict):
        text = node.get(TEXT_KEY)
        if isinstance(text, str):
            return text
    return None


def _attribute(attrs: dict[str, str], name: str) -> str | None:
    """Look up an attribute with or without a namespace prefix."""
    if name in attrs:
        return attrs[name]
    for key, value in attrs.items():
        if key.endswith(":" + name):
            return value
    return None


def _normalize_meta(
    node: Any,
    result: NormalizedMetadata,
    items_by_id: dict[str, ManifestItem],
    content_root: str,
) -> None:
    if not isinstance(node, dict):
        return
    attrs = node.get(ATTR_KEY, {})
    name = attrs.get("name")
    prop = attrs.get("property")

    if name:
        result.simple_meta.append({name: attrs.get("content")})
    elif prop:
        result.simple_meta.append({prop: node.get(TEXT_KEY)})

    if name == "cover":
        cover_item = items_by_id.get(attrs.get("content", ""))
        if cover_item is not None:
            result.epub2_cover_url = content_root + cover_item.href


def normalize_metadata(
    package: PackageDocument,
    items_by_id: dict[str, ManifestItem],
    content_root: str,
) -> NormalizedMetadata:
    """Build ``simple_meta`` and resolve the primary identifier.

    Entries keep source order and duplicate keys are kept. ``<meta>``
    elements become ``{name: content}`` or ``{property: text}``; every
    other element becomes ``{tag: text}``.
    """
    result = NormalizedMetadata(
        primary_id=PrimaryIdentifier(name=package.unique_identifier_id)
    )
    if package.metadata is None:
        return result

    meta_tags = {"meta", package.opf_prefix + "meta"}
    identifier_value = None
    identifier_scheme = None

    for tag, nodes in package.metadata.items():
        if tag in (ATTR_KEY, TEXT_KEY):
            continue

        if tag in meta_tags:
            for node in nodes:
                _normalize_meta(node, result, items_by_id, content_root)
            continue

        for node in nodes:
            text = _element_text(node)
            result.simple_meta.append({tag: text if text is not None else ""})

            if not _IDENTIFIER_TAG.search(tag) or not isinstance(node, dict):
                continue
            attrs = node.get(ATTR_KEY, {})
            if not attrs.get("id") or attrs["id"] != package.unique_identifier_id:
                continue

            if text is None:
                log.warning(
                    "Identifier %r content not fully parsed, leaving it unset: %s",
                    attrs["id"],
                    node,
                )
                continue
            identifier_value = text
            identifier_scheme = _attribute(attrs, "scheme")

    if identifier_value is not None:
        result.primary_id = PrimaryIdentifier(
            name=package.unique_identifier_id,
            value=identifier_value,
            scheme=identifier_scheme,
        )
    return result
