"""Build the reading order from the spine."""

import logging
from dataclasses import dataclass, field

from epubkit.core.package import PackageDocument
from epubkit.core.xml_reader import ATTR_KEY
from epubkit.models.epub import ManifestItem, SpineEntry

log = logging.getLogger(__name__)


@dataclass
class Spine:
    order: list[SpineEntry] = field(default_factory=list)
    linear: dict[str, SpineEntry] = field(default_factory=dict)
    toc_id: str | None = None


def build_spine(
    package: PackageDocument, items_by_id: dict[str, ManifestItem]
) -> Spine:
    """Collect every itemref in order, plus the linear ones keyed by idref.

    An itemref without a ``linear`` attribute is linear. Linear entries
    carry their manifest item; an idref missing from the manifest leaves
    ``item`` as None. A repeated idref replaces the earlier linear entry.
    """
    spine = Spine(toc_id=package.spine.get(ATTR_KEY, {}).get("toc") or None)

    for node in package.children(package.spine, "itemref"):
        if not isinstance(node, dict):
            continue
        attrs = node.get(ATTR_KEY, {})
        idref = attrs.get("idref")
        if idref is None:
            log.warning("Skipping itemref without idref: %s", attrs)
            continue

        linear = attrs.get("linear")
        is_linear = linear is None or linear == "yes"

        item = None
        if is_linear:
            item = items_by_id.get(idref)
            if item is None:
                log.warning("Spine references unknown manifest id %r", idref)

        entry = SpineEntry(
            idref=idref, linear=linear, item=item, attributes=dict(attrs)
        )
        spine.order.append(entry)
        if is_linear:
            spine.linear[idref] = entry

    return spine
