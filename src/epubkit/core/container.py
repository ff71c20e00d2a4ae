"""Locate the package document through META-INF/container.xml."""

import logging
import re
from dataclasses import dataclass
from typing import Any

from epubkit.core.archive import EpubArchive
from epubkit.core.namespaces import (
    CONTAINER_NAMESPACE,
    find_attribute_bag,
    resolve_prefix,
)
from epubkit.core.xml_reader import ATTR_KEY, parse_xml
from epubkit.errors import PackageStructureError

log = logging.getLogger(__name__)

CONTAINER_PATH = "META-INF/container.xml"


@dataclass(frozen=True)
class ContainerDescriptor:
    opf_path: str
    content_root: str
    tree: dict[str, Any]


def content_root_for(opf_path: str) -> str:
    """Directory prefix for package-relative hrefs.

    ``"OEBPS/content.opf"`` gives ``"OEBPS/"``; a package at the top of
    the archive gives ``""``.
    """
    if "/" not in opf_path:
        return ""
    root = re.sub(r"/([^/]+)\.opf", "", opf_path, count=1, flags=re.IGNORECASE)
    if not root.endswith("/"):
        root += "/"
    return re.sub(r"^/", "", root)


def _first(node: Any, key: str) -> Any:
    if isinstance(node, dict) and node.get(key):
        return node[key][0]
    return None


def resolve_container(archive: EpubArchive) -> ContainerDescriptor:
    """Read container.xml and return where the OPF lives.

    Only the first ``rootfile`` is used when several are declared.

    Raises:
        EntryNotFoundError: If the archive has no container.xml
        PackageStructureError: If no rootfile path is declared
    """
    tree = parse_xml(archive.extract_text(CONTAINER_PATH))
    prefix = resolve_prefix(find_attribute_bag(tree), CONTAINER_NAMESPACE)
    container = tree.get(prefix + "container")

    rootfiles = _first(container, prefix + "rootfiles")
    rootfile = _first(rootfiles, prefix + "rootfile")
    opf_path = None
    if isinstance(rootfile, dict):
        opf_path = rootfile.get(ATTR_KEY, {}).get("full-path")
    if not opf_path:
        raise PackageStructureError("container.xml declares no rootfile full-path")

    content_root = content_root_for(opf_path)
    log.debug("content root is %r (derived from %s)", content_root, opf_path)

    return ContainerDescriptor(
        opf_path=opf_path,
        content_root=content_root,
        tree=container if isinstance(container, dict) else {},
    )
