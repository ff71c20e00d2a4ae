"""Find the prefix a document binds to a namespace URI."""

import re
from typing import Any

from epubkit.core.xml_reader import ATTR_KEY

OPF_NAMESPACE = "http://www.idpf.org/2007/opf"
DC_NAMESPACE = "http://purl.org/dc/elements/1.1/"
NCX_NAMESPACE = "http://www.daisy.org/z3986/2005/ncx/"
CONTAINER_NAMESPACE = "urn:oasis:names:tc:opendocument:xmlns:container"

_XMLNS_ATTR = re.compile(r"^xmlns:(.+)$")


def find_attribute_bag(tree: dict[str, Any]) -> dict[str, str] | None:
    """Locate the attributes that carry namespace declarations.

    The primary location is the ``$`` mapping of ``tree`` itself. When the
    tree is a whole parsed document the attributes live one level down,
    on the root element, so the fallback is the first child that has one.
    """
    bag = tree.get(ATTR_KEY)
    if isinstance(bag, dict):
        return bag

    for child in tree.values():
        if isinstance(child, dict) and isinstance(child.get(ATTR_KEY), dict):
            return child[ATTR_KEY]
    return None


def resolve_prefix(attrs: dict[str, str] | None, namespace: str) -> str:
    """Return ``"<prefix>:"`` bound to ``namespace``, or ``""`` if none is."""
    if not attrs:
        return ""
    for name, value in attrs.items():
        match = _XMLNS_ATTR.match(name)
        if match and value == namespace:
            return match.group(1) + ":"
    return ""
