"""Table of contents from an NCX file or an EPUB 3 navigation document."""

import logging

from lxml import etree

from epub_reader.core.archive import ArchiveIndex
from epub_reader.core.xml import OPS_NS, children, first, local_name, parse_xml, text_of
from epub_reader.models.book import PackageDocument, TOCNode

log = logging.getLogger(__name__)

NCX_MEDIA_TYPE = "application/x-dtbncx+xml"


class TocResolver:
    """Locate the navigation source of a package and parse it into a tree."""

    def __init__(self) -> None:
        self.warnings: list[str] = []

    def resolve(self, archive: ArchiveIndex, package: PackageDocument) -> list[TOCNode]:
        for href in self._candidate_hrefs(package):
            path = package.resolve(href)
            data = archive.find(path)
            if data is None:
                log.debug(f"Navigation candidate {path} not in archive")
                continue

            root = parse_xml(data)
            if root is None:
                self._warn(f"Navigation source {path} is not parseable; trying the next source")
                continue

            if local_name(root) == "ncx":
                toc = self._parse_ncx(root)
            else:
                toc = self._parse_nav_document(root)
            log.debug(f"Parsed {len(toc)} top-level TOC entries from {path}")
            return toc

        self._warn("No navigation source found; table of contents is empty")
        return []

    def _candidate_hrefs(self, package: PackageDocument) -> list[str]:
        """Navigation hrefs in lookup order, without duplicates."""
        candidates: list[str] = []

        if package.toc_id and package.toc_id in package.manifest:
            candidates.append(package.manifest[package.toc_id])

        for item_id, media_type in package.media_types.items():
            if media_type == NCX_MEDIA_TYPE:
                candidates.append(package.manifest[item_id])
                break

        for item_id, props in package.properties.items():
            if "nav" in props:
                candidates.append(package.manifest[item_id])
                break

        return list(dict.fromkeys(candidates))

    # -------------------------------------------------------------------------
    # NCX
    # -------------------------------------------------------------------------

    def _parse_ncx(self, root: etree._Element) -> list[TOCNode]:
        nav_map = first(root, "navMap")
        if nav_map is None:
            self._warn("NCX has no navMap")
            return []
        return self._parse_nav_points(nav_map)

    def _parse_nav_points(self, parent: etree._Element) -> list[TOCNode]:
        """Recursively parse the navPoint children of ``parent``."""
        entries = []
        for nav_point in children(parent, "navPoint"):
            nav_label = next(iter(children(nav_point, "navLabel")), None)
            label = text_of(first(nav_label, "text")) if nav_label is not None else ""
            content = next(iter(children(nav_point, "content")), None)
            src = content.get("src", "") if content is not None else ""
            entries.append(
                TOCNode(
                    title=label,
                    href=src.strip(),
                    children=tuple(self._parse_nav_points(nav_point)),
                )
            )
        return entries

    # -------------------------------------------------------------------------
    # EPUB 3 navigation document
    # -------------------------------------------------------------------------

    def _parse_nav_document(self, root: etree._Element) -> list[TOCNode]:
        navs = list(root.iter("{*}nav"))
        toc_nav = next(
            (nav for nav in navs if "toc" in nav.get(f"{{{OPS_NS}}}type", "").split()),
            navs[0] if navs else None,
        )
        if toc_nav is None:
            self._warn("Navigation document has no nav element")
            return []

        ol = first(toc_nav, "ol")
        return self._parse_list(ol) if ol is not None else []

    def _parse_list(self, ol: etree._Element) -> list[TOCNode]:
        entries = []
        for li in children(ol, "li"):
            anchor = next(iter(children(li, "a") or children(li, "span")), None)
            if anchor is not None:
                title = text_of(anchor)
                href = anchor.get("href", "") if local_name(anchor) == "a" else ""
            else:
                title, href = "", ""

            nested = next(iter(children(li, "ol")), None)
            entries.append(
                TOCNode(
                    title=title,
                    href=href.strip(),
                    children=tuple(self._parse_list(nested)) if nested is not None else (),
                )
            )
        return entries

    def _warn(self, message: str) -> None:
        log.warning(message)
        self.warnings.append(message)
