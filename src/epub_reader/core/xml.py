"""Namespace-tolerant XML helpers shared by the package parsers."""

from lxml import etree

# Recovering parser: real-world packages often carry stray entities,
# unclosed tags or bad declarations.
_PARSER = etree.XMLParser(
    recover=True,
    resolve_entities=False,
    no_network=True,
    remove_comments=True,
    huge_tree=False,
)

DC_NS = "http://purl.org/dc/elements/1.1/"
OPS_NS = "http://www.idpf.org/2007/ops"


def parse_xml(data: bytes) -> etree._Element | None:
    """Parse ``data``; None when nothing usable could be recovered."""
    try:
        root = etree.fromstring(data, _PARSER)
    except etree.XMLSyntaxError:
        return None
    return root


def local_name(element: etree._Element) -> str:
    return etree.QName(element).localname


def first(element: etree._Element, name: str) -> etree._Element | None:
    """First descendant with the given local name, in any namespace."""
    return next(element.iter(f"{{*}}{name}"), None)


def children(element: etree._Element, name: str) -> list[etree._Element]:
    """Direct children with the given local name, in any namespace."""
    return list(element.iterchildren(f"{{*}}{name}"))


def text_of(element: etree._Element | None) -> str:
    if element is None:
        return ""
    return "".join(element.itertext()).strip()
