"""Convert XML text into nested dicts and lists.

The shape matches what the rest of the pipeline expects:

* the document is ``{root_tag: node}``;
* an element with neither attributes nor child elements becomes its text
  (``""`` when empty);
* any other element becomes a dict holding its attributes under ``"$"``,
  its non-whitespace text under ``"_"`` and one list per child tag.

Tags and attribute names keep the prefix used in the source document
(``"dc:title"``, ``"opf:scheme"``), and namespace declarations show up as
``xmlns`` / ``xmlns:<prefix>`` attributes of the element that makes them.
"""

import logging
import re
from typing import Any

from bs4.dammit import EntitySubstitution
from lxml import etree

from epubkit.errors import XmlParseError

log = logging.getLogger(__name__)

ATTR_KEY = "$"
TEXT_KEY = "_"

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

_NAMED_ENTITY = re.compile(r"&([A-Za-z][A-Za-z0-9]*);")
_XML_ENTITIES = frozenset({"amp", "lt", "gt", "quot", "apos"})


def _decode_html_entities(xml: str) -> str:
    """Rewrite HTML named entities (``&nbsp;``) as character references.

    XHTML content documents use them without declaring a DTD, and the
    parser would otherwise drop them.
    """
    table = EntitySubstitution.HTML_ENTITY_TO_CHARACTER

    def replace(match: re.Match) -> str:
        name = match.group(1)
        if name in _XML_ENTITIES or name not in table:
            return match.group(0)
        return "".join(f"&#{ord(c)};" for c in table[name])

    return _NAMED_ENTITY.sub(replace, xml)


def _make_parser(encoding: str | None) -> etree.XMLParser:
    # Parsers are not thread-safe; build one per document
    return etree.XMLParser(
        encoding=encoding,
        resolve_entities=False,
        no_network=True,
        recover=True,
    )


def _qualify(name: str, nsmap: dict) -> str:
    """Turn lxml's ``{uri}local`` form back into ``prefix:local``."""
    if not name.startswith("{"):
        return name
    uri, local = name[1:].split("}", 1)
    if uri == XML_NAMESPACE:
        return f"xml:{local}"
    for prefix, ns_uri in nsmap.items():
        if ns_uri == uri and prefix is not None:
            return f"{prefix}:{local}"
    return local


def _tag_name(element: etree._Element) -> str:
    qname = etree.QName(element)
    if element.prefix:
        return f"{element.prefix}:{qname.localname}"
    return qname.localname


def _namespace_declarations(element: etree._Element) -> dict[str, str]:
    """Namespaces declared on this element (not inherited from the parent)."""
    parent = element.getparent()
    inherited = parent.nsmap if parent is not None else {}
    declared = {}
    for prefix, uri in element.nsmap.items():
        if inherited.get(prefix) != uri:
            declared["xmlns" if prefix is None else f"xmlns:{prefix}"] = uri
    return declared


def _convert(element: etree._Element) -> Any:
    attrs = _namespace_declarations(element)
    for name, value in element.attrib.items():
        attrs[_qualify(name, element.nsmap)] = value

    children: dict[str, list] = {}
    text_parts = [element.text or ""]
    for child in element:
        # Comments, PIs and unresolved entities have non-string tags
        if isinstance(child.tag, str):
            children.setdefault(_tag_name(child), []).append(_convert(child))
        text_parts.append(child.tail or "")

    text = "".join(text_parts)
    if not text.strip():
        text = ""

    if not attrs and not children:
        return text

    node: dict[str, Any] = {}
    if attrs:
        node[ATTR_KEY] = attrs
    if text:
        node[TEXT_KEY] = text
    node.update(children)
    return node


def parse_xml(xml: str | bytes) -> dict[str, Any]:
    """Parse an XML document into the nested mapping form.

    Raises:
        XmlParseError: If no document element could be recovered
    """
    encoding = None
    if isinstance(xml, str):
        # The declared encoding no longer applies to decoded text
        xml = _decode_html_entities(xml).encode("utf-8")
        encoding = "utf-8"

    parser = _make_parser(encoding)
    try:
        root = etree.fromstring(xml, parser)
    except etree.XMLSyntaxError as e:
        raise XmlParseError(f"malformed XML: {e}") from e

    if root is None:
        raise XmlParseError("document has no root element")

    for entry in parser.error_log:
        log.warning("Recovered from XML error: %s", entry.message)

    return {_tag_name(root): _convert(root)}
