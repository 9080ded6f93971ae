from typing import Optional
from xml.sax.saxutils import escape

from lxml import etree

# No DTD entity expansion and no network lookups for anything the server sends.
XML_PARSER = etree.XMLParser(resolve_entities=False, no_network=True)


def localname(el: etree._Element) -> Optional[str]:
    # comments and processing instructions have a non-string tag
    if not isinstance(el.tag, str):
        return None
    return etree.QName(el).localname


def find_child(el: etree._Element, name: str) -> Optional[etree._Element]:
    """Returns the first child whose local name matches, ignoring namespaces."""
    for child in el:
        if localname(child) == name:
            return child
    return None


def find_children(el: etree._Element, name: str) -> list[etree._Element]:
    return [child for child in el if localname(child) == name]


def first_element(el: etree._Element) -> Optional[etree._Element]:
    for child in el:
        if isinstance(child.tag, str):
            return child
    return None


def inner_xml(el: etree._Element) -> bytes:
    """
    Serializes the content of an element without the element itself.

    Every child carries the namespace declarations that were in scope for it, so the result can be parsed again on
    its own, detached from the original document.
    """
    parts = [escape(el.text)] if el.text else []
    for child in el:
        parts.append(etree.tostring(child, encoding="unicode", with_tail=True))
    return "".join(parts).encode("utf-8")
