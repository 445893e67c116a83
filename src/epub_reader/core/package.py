"""Parse the OPF package document: metadata, manifest and spine."""

import logging

from lxml import etree

from epub_reader.core.archive import ArchiveIndex
from epub_reader.core.container import opf_dir_of
from epub_reader.core.xml import DC_NS, first, parse_xml, text_of
from epub_reader.errors import MalformedPackage
from epub_reader.models.book import PackageDocument

log = logging.getLogger(__name__)


class PackageDocumentParser:
    """Build a PackageDocument from the OPF member of an archive."""

    def parse(self, archive: ArchiveIndex, package_path: str) -> PackageDocument:
        data = archive.find(package_path)
        if data is None:
            raise MalformedPackage(f"Invalid EPUB: missing package document at {package_path}")

        root = parse_xml(data)
        if root is None:
            raise MalformedPackage(f"Invalid EPUB: package document {package_path} is not parseable")

        metadata = first(root, "metadata")
        scope = metadata if metadata is not None else root

        manifest, media_types, properties = self._get_manifest(root)
        spine, toc_id = self._get_spine(root)

        package = PackageDocument(
            opf_path=package_path,
            opf_dir=opf_dir_of(package_path),
            title=self._get_metadata(scope, "title") or "Unknown",
            author=self._get_metadata(scope, "creator") or "Unknown",
            description=self._get_metadata(scope, "description"),
            language=self._get_metadata(scope, "language") or None,
            manifest=manifest,
            media_types=media_types,
            properties=properties,
            spine=spine,
            toc_id=toc_id,
            cover_id=self._get_cover_id(scope, manifest, properties),
        )
        log.info(
            f'Package "{package.title}": {len(manifest)} manifest items, '
            f"{len(spine)} spine entries"
        )
        return package

    def _get_metadata(self, scope: etree._Element, name: str) -> str:
        """Dublin Core element first, then any element with the same local name."""
        element = next(scope.iter(f"{{{DC_NS}}}{name}"), None)
        if element is None:
            element = first(scope, name)
        return text_of(element)

    def _get_manifest(
        self, root: etree._Element
    ) -> tuple[dict[str, str], dict[str, str], dict[str, list[str]]]:
        manifest: dict[str, str] = {}
        media_types: dict[str, str] = {}
        properties: dict[str, list[str]] = {}

        manifest_el = first(root, "manifest")
        if manifest_el is None:
            log.warning("Package document has no manifest")
            return manifest, media_types, properties

        for item in manifest_el.iter("{*}item"):
            item_id = item.get("id")
            href = item.get("href")
            if not item_id or not href:
                continue
            if item_id in manifest:
                # Ids must be unique; keep the first declaration.
                log.debug(f"Duplicate manifest id {item_id!r} ignored")
                continue
            manifest[item_id] = href
            media_types[item_id] = item.get("media-type", "")
            props = item.get("properties", "").split()
            if props:
                properties[item_id] = props

        return manifest, media_types, properties

    def _get_spine(self, root: etree._Element) -> tuple[list[str], str | None]:
        spine_el = first(root, "spine")
        if spine_el is None:
            log.warning("Package document has no spine")
            return [], None

        spine = [
            itemref.get("idref")
            for itemref in spine_el.iter("{*}itemref")
            if itemref.get("idref")
        ]
        return spine, spine_el.get("toc") or None

    def _get_cover_id(
        self,
        scope: etree._Element,
        manifest: dict[str, str],
        properties: dict[str, list[str]],
    ) -> str | None:
        for meta in scope.iter("{*}meta"):
            if meta.get("name") == "cover":
                cover_id = meta.get("content")
                if cover_id in manifest:
                    return cover_id
        for item_id, props in properties.items():
            if "cover-image" in props:
                return item_id
        return None
