"""Index manifest items by id and by href."""

import logging
from dataclasses import dataclass, field

from epubkit.core.archive import EpubArchive
from epubkit.core.package import PackageDocument
from epubkit.core.xml_reader import ATTR_KEY
from epubkit.models.epub import ManifestItem

log = logging.getLogger(__name__)


@dataclass
class ManifestIndex:
    """Two lookups over the same :class:`ManifestItem` instances."""

    by_id: dict[str, ManifestItem] = field(default_factory=dict)
    by_href: dict[str, ManifestItem] = field(default_factory=dict)
    cover_image_id: str | None = None
    nav_document_id: str | None = None
    nav_document_text: str | None = None


def build_manifest_index(
    archive: EpubArchive, package: PackageDocument, content_root: str
) -> ManifestIndex:
    """Walk the manifest's ``item`` entries in document order.

    The item whose ``properties`` is ``nav`` has its document read from
    the archive straight away.

    Raises:
        EntryNotFoundError: If the nav document is declared but missing
    """
    index = ManifestIndex()

    for node in package.children(package.manifest, "item"):
        if not isinstance(node, dict):
            continue
        attrs = node.get(ATTR_KEY, {})
        item_id = attrs.get("id")
        href = attrs.get("href")
        if item_id is None or href is None:
            log.warning("Skipping manifest item without id/href: %s", attrs)
            continue

        item = ManifestItem(
            id=item_id,
            href=href,
            media_type=attrs.get("media-type"),
            properties=attrs.get("properties"),
            attributes=dict(attrs),
        )

        # properties is a space-separated list, e.g. "nav scripted"
        properties = (item.properties or "").split()
        if "cover-image" in properties:
            index.cover_image_id = item.id
        elif "nav" in properties:
            index.nav_document_id = item.id
            index.nav_document_text = archive.extract_text(content_root + item.href)

        index.by_href[item.href] = item
        index.by_id[item.id] = item

    log.debug("indexed %d manifest items", len(index.by_id))
    return index
