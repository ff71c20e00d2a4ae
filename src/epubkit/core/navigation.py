"""Table-of-contents handling for EPUB2 NCX and EPUB3 nav documents."""

import html
import logging
from dataclasses import dataclass
from typing import Any

from epubkit.core.archive import EpubArchive
from epubkit.core.manifest import ManifestIndex
from epubkit.core.namespaces import NCX_NAMESPACE, find_attribute_bag, resolve_prefix
from epubkit.core.xml_reader import ATTR_KEY, TEXT_KEY, parse_xml
from epubkit.errors import PackageStructureError

log = logging.getLogger(__name__)

DEFAULT_LABEL = "Untitled"
DEFAULT_HREF = "#"


@dataclass(frozen=True)
class NcxNavigation:
    path: str
    xml: str
    tree: dict[str, Any]
    prefix: str
    html: str


def _first(node: Any, key: str) -> Any:
    if isinstance(node, dict) and node.get(key):
        return node[key][0]
    return None


def _text(node: Any) -> str | None:
    if isinstance(node, str):
        return node
    if isinstance(node, dict) and isinstance(node.get(TEXT_KEY), str):
        return node[TEXT_KEY]
    return None


def render_nav_point(nav_point: dict[str, Any], prefix: str = "") -> str:
    """Render one navPoint, and its descendants, as an ``<li>``."""
    label = DEFAULT_LABEL
    label_node = _first(nav_point, prefix + "navLabel")
    if label_node is not None:
        label = _text(_first(label_node, prefix + "text")) or DEFAULT_LABEL

    src = DEFAULT_HREF
    content = _first(nav_point, prefix + "content")
    if isinstance(content, dict):
        src = content.get(ATTR_KEY, {}).get("src", DEFAULT_HREF)

    out = f'<li><a href="{html.escape(src)}">{html.escape(label, quote=False)}</a>'

    children = nav_point.get(prefix + "navPoint")
    if children:
        out += render_nav_points(children, prefix)
    return out + "</li>\n"


def render_nav_points(nav_points: list[Any], prefix: str = "") -> str:
    """Render a list of navPoints as a ``<ul>`` block."""
    # An empty <navPoint/> parses to "" and still gets a default entry
    items = "".join(
        render_nav_point(np if isinstance(np, dict) else {}, prefix)
        for np in nav_points
    )
    return f"<ul>{items}</ul>\n"


def build_ncx_navigation(
    archive: EpubArchive,
    manifest: ManifestIndex,
    ncx_id: str,
    content_root: str,
) -> NcxNavigation:
    """Fetch the NCX named by the spine and render its navMap to HTML.

    Raises:
        PackageStructureError: If no manifest item has id ``ncx_id``
        EntryNotFoundError: If the NCX file is missing from the archive
    """
    item = manifest.by_id.get(ncx_id)
    if item is None:
        raise PackageStructureError(f"ncx item {ncx_id!r} not found in manifest")

    path = content_root + item.href
    xml = archive.extract_text(path)
    tree = parse_xml(xml)

    prefix = resolve_prefix(find_attribute_bag(tree), NCX_NAMESPACE)
    ncx = tree.get(prefix + "ncx")
    if ncx is None and prefix:
        ncx = tree.get("ncx")
        prefix = ""
    if not isinstance(ncx, dict):
        raise PackageStructureError(f"{path} has no <ncx> root element")

    nav_map = _first(ncx, prefix + "navMap")
    nav_points = []
    if isinstance(nav_map, dict):
        nav_points = nav_map.get(prefix + "navPoint") or []
    else:
        log.warning("%s has no navMap, table of contents is empty", path)

    return NcxNavigation(
        path=path,
        xml=xml,
        tree=ncx,
        prefix=prefix,
        html=render_nav_points(nav_points, prefix),
    )


def parse_nav_document(nav_text: str | None, is_epub3: bool) -> dict[str, Any]:
    """Parse the EPUB3 nav document for books without an NCX.

    Raises:
        PackageStructureError: If the package is EPUB2 or has no nav document
    """
    if not is_epub3:
        raise PackageStructureError("ncx id not found but package indicates epub 2")
    if not nav_text:
        raise PackageStructureError("epub 3 with no nav html")
    return parse_xml(nav_text)
