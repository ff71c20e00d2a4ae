"""Parse the OPF package document."""

import logging
from dataclasses import dataclass, field
from typing import Any

from epubkit.core.archive import EpubArchive
from epubkit.core.namespaces import (
    DC_NAMESPACE,
    OPF_NAMESPACE,
    find_attribute_bag,
    resolve_prefix,
)
from epubkit.core.xml_reader import ATTR_KEY, parse_xml
from epubkit.errors import PackageStructureError
from epubkit.models.epub import GuideReference

log = logging.getLogger(__name__)


@dataclass
class PackageDocument:
    """The OPF root and the blocks the rest of the pipeline reads."""

    tree: dict[str, Any]
    xml: str
    unique_identifier_id: str | None
    version: str
    opf_prefix: str
    dc_prefix: str
    manifest: dict[str, Any]
    spine: dict[str, Any]
    metadata: dict[str, Any] | None = None
    guide: list[GuideReference] = field(default_factory=list)

    @property
    def is_epub3(self) -> bool:
        return self.version.startswith("3")

    def children(self, node: dict[str, Any] | None, tag: str) -> list[Any]:
        """Child elements of ``node`` named ``tag`` under the OPF prefix."""
        if not isinstance(node, dict):
            return []
        return node.get(self.opf_prefix + tag) or []


def _select_root(tree: dict[str, Any]) -> dict[str, Any]:
    for key in ("opf:package", "package"):
        if key in tree:
            root = tree[key]
            break
    else:
        root = next(
            (v for k, v in tree.items() if k.endswith(":package")), None
        )
    if not isinstance(root, dict):
        raise PackageStructureError("OPF document has no <package> root element")
    return root


def _element(root: dict[str, Any], tag: str) -> dict[str, Any] | None:
    """First ``tag`` child; an empty element counts as present."""
    nodes = root.get(tag)
    if not nodes:
        return None
    node = nodes[0]
    return node if isinstance(node, dict) else {}


def _guide_references(guide: dict[str, Any] | None, prefix: str) -> list[GuideReference]:
    if guide is None:
        return []
    references = []
    for ref in guide.get(prefix + "reference") or []:
        if isinstance(ref, dict):
            attrs = ref.get(ATTR_KEY, {})
            references.append(
                GuideReference(
                    type=attrs.get("type"),
                    title=attrs.get("title"),
                    href=attrs.get("href"),
                )
            )
    return references


def resolve_package(archive: EpubArchive, opf_path: str) -> PackageDocument:
    """Load and parse the OPF file at ``opf_path``.

    A missing ``<metadata>`` is tolerated; a missing ``<manifest>`` or
    ``<spine>`` makes the book unusable.

    Raises:
        EntryNotFoundError: If the OPF file is missing from the archive
        PackageStructureError: If the package, manifest or spine is missing
    """
    xml = archive.extract_text(opf_path.lstrip("/"))
    tree = parse_xml(xml)
    root = _select_root(tree)
    attrs = root.get(ATTR_KEY, {})

    namespace_attrs = find_attribute_bag(tree)
    opf_prefix = resolve_prefix(namespace_attrs, OPF_NAMESPACE)
    dc_prefix = resolve_prefix(namespace_attrs, DC_NAMESPACE)

    if opf_prefix and opf_prefix + "manifest" not in root:
        # Some producers (Project Gutenberg among them) declare the OPF
        # prefix but never use it on element names
        log.debug(
            "no %smanifest element, assuming unprefixed OPF tags", opf_prefix
        )
        opf_prefix = ""

    metadata = _element(root, opf_prefix + "metadata")
    if metadata is None:
        log.warning(
            "No %smetadata element in %s; continuing without metadata",
            opf_prefix,
            opf_path,
        )

    manifest = _element(root, opf_prefix + "manifest")
    if manifest is None:
        raise PackageStructureError(
            f"no {opf_prefix}manifest element in {opf_path}"
        )

    spine = _element(root, opf_prefix + "spine")
    if spine is None:
        raise PackageStructureError(f"no {opf_prefix}spine element in {opf_path}")

    return PackageDocument(
        tree=root,
        xml=xml,
        unique_identifier_id=attrs.get("unique-identifier"),
        version=attrs.get("version", ""),
        opf_prefix=opf_prefix,
        dc_prefix=dc_prefix,
        metadata=metadata,
        manifest=manifest,
        spine=spine,
        guide=_guide_references(_element(root, opf_prefix + "guide"), opf_prefix),
    )
