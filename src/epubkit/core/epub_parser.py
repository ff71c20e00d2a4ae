"""Open an EPUB from a path, URL or buffer and describe its structure."""

import asyncio
import hashlib
import logging
import os
import re
from pathlib import Path

import httpx

from epubkit.config import ParserConfig
from epubkit.core.archive import EpubArchive
from epubkit.core.container import resolve_container
from epubkit.core.manifest import build_manifest_index
from epubkit.core.metadata import normalize_metadata
from epubkit.core.navigation import build_ncx_navigation, parse_nav_document
from epubkit.core.package import resolve_package
from epubkit.core.spine import build_spine
from epubkit.errors import SourceFetchError
from epubkit.models.epub import (
    EasyData,
    EpubDescriptor,
    EpubPaths,
    NamespacePrefixes,
    RawData,
    RawJson,
    RawXml,
)

log = logging.getLogger(__name__)

EpubSource = str | os.PathLike | bytes | bytearray | memoryview

_URL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)


class EpubParser:
    """Parse an in-memory EPUB archive.

    Every instance owns its archive handle, so separate parsers can run
    concurrently.
    """

    def __init__(self, data: bytes):
        self.data = bytes(data)
        self.md5 = hashlib.md5(self.data).hexdigest()

    def parse(self) -> EpubDescriptor:
        """Run the whole pipeline and return the descriptor.

        Any stage failing aborts the parse; no partial result is returned.
        """
        with EpubArchive(self.data) as archive:
            return self._parse(archive)

    def _parse(self, archive: EpubArchive) -> EpubDescriptor:
        container = resolve_container(archive)
        content_root = container.content_root

        package = resolve_package(archive, container.opf_path)
        manifest = build_manifest_index(archive, package, content_root)
        spine = build_spine(package, manifest.by_id)
        metadata = normalize_metadata(package, manifest.by_id, content_root)

        nav_html = None
        ncx_path = None
        ncx_xml = None
        ncx_tree = None
        ncx_prefix = ""
        nav_tree = None

        if spine.toc_id is None:
            nav_tree = parse_nav_document(manifest.nav_document_text, package.is_epub3)
        else:
            ncx = build_ncx_navigation(archive, manifest, spine.toc_id, content_root)
            nav_html = ncx.html
            ncx_path = ncx.path
            ncx_xml = ncx.xml
            ncx_tree = ncx.tree
            ncx_prefix = ncx.prefix

        log.debug(
            "parsed EPUB %s: %d manifest items, %d spine entries",
            package.version,
            len(manifest.by_id),
            len(spine.order),
        )

        return EpubDescriptor(
            easy=EasyData(
                primary_id=metadata.primary_id,
                epub_version=package.version,
                is_epub3=package.is_epub3,
                md5=self.md5,
                epub3_nav_html=manifest.nav_document_text,
                nav_map_html=nav_html,
                linear_spine=spine.linear,
                spine_order=spine.order,
                item_hash_by_id=manifest.by_id,
                item_hash_by_href=manifest.by_href,
                simple_meta=metadata.simple_meta,
                epub3_cover_id=manifest.cover_image_id,
                epub3_nav_id=manifest.nav_document_id,
                epub2_cover_url=metadata.epub2_cover_url,
                guide=package.guide,
            ),
            paths=EpubPaths(
                opf_path=container.opf_path,
                ncx_path=ncx_path,
                content_root=content_root,
            ),
            raw=RawData(
                json=RawJson(
                    prefixes=NamespacePrefixes(
                        opf=package.opf_prefix,
                        dc=package.dc_prefix,
                        ncx=ncx_prefix,
                    ),
                    container=container.tree,
                    opf=package.tree,
                    ncx=ncx_tree,
                    nav=nav_tree,
                ),
                xml=RawXml(opf_xml=package.xml, ncx_xml=ncx_xml),
            ),
        )


def parse_epub_bytes(data: bytes) -> EpubDescriptor:
    """Parse an EPUB already held in memory."""
    return EpubParser(data).parse()


def _check_size(size: int, config: ParserConfig, source: str) -> None:
    if config.max_archive_bytes is not None and size > config.max_archive_bytes:
        raise SourceFetchError(
            f"{source} is {size} bytes, over the {config.max_archive_bytes} byte limit"
        )


async def fetch_url(url: str, config: ParserConfig) -> bytes:
    """GET ``url`` and return the body; anything but a 200 is an error."""
    headers = {"User-Agent": config.user_agent}
    try:
        async with httpx.AsyncClient(
            timeout=config.http_timeout,
            follow_redirects=config.follow_redirects,
            headers=headers,
        ) as client:
            response = await client.get(url)
    except httpx.HTTPError as e:
        raise SourceFetchError(f"failed to fetch {url}: {e}") from e

    if response.status_code != 200:
        raise SourceFetchError(
            f"failed to fetch {url}: HTTP {response.status_code}"
        )
    return response.content


async def read_source(source: EpubSource, config: ParserConfig) -> bytes:
    """Normalize a path, URL or buffer to the archive's bytes."""
    if isinstance(source, (bytes, bytearray, memoryview)):
        log.debug("parsing from buffer, not file")
        data = bytes(source)
        _check_size(len(data), config, "buffer")
        return data

    if isinstance(source, str) and _URL_PATTERN.match(source):
        data = await fetch_url(source, config)
        _check_size(len(data), config, source)
        return data

    path = Path(source)
    try:
        _check_size(path.stat().st_size, config, str(path))
        return await asyncio.to_thread(path.read_bytes)
    except OSError as e:
        raise SourceFetchError(f"cannot read {path}: {e}") from e


async def open_epub(
    source: EpubSource, *, config: ParserConfig | None = None
) -> EpubDescriptor:
    """Open an EPUB from a local path, an http(s) URL, or raw bytes.

    Raises:
        SourceFetchError: If the bytes cannot be read or downloaded
        EpubError: If the archive or its documents are unusable
    """
    config = config or ParserConfig.from_env()
    data = await read_source(source, config)
    return EpubParser(data).parse()
