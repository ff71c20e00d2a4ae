"""Tests for metadata normalization."""

import logging

from epubkit.core.archive import EpubArchive
from epubkit.core.manifest import build_manifest_index
from epubkit.core.metadata import normalize_metadata
from epubkit.core.package import resolve_package
from tests.helpers import EPUB2_OPF, make_epub

OPF_TEMPLATE = """<?xml version="1.0"?>
<package xmlns="http://www.idpf.org/2007/opf" xmlns:dc="http://purl.org/dc/elements/1.1/"
         unique-identifier="pub-id" version="3.0">
  <metadata>{metadata}</metadata>
  <manifest>
    <item id="cover-img-id" href="images/cover.jpg" media-type="image/jpeg"/>
  </manifest>
  <spine/>
</package>
"""


def normalize(opf: str, content_root: str = "OEBPS/"):
    data = make_epub({"OEBPS/content.opf": opf})
    with EpubArchive(data) as archive:
        package = resolve_package(archive, "OEBPS/content.opf")
        manifest = build_manifest_index(archive, package, content_root)
    return normalize_metadata(package, manifest.by_id, content_root)


def with_metadata(metadata: str, **kwargs):
    return normalize(OPF_TEMPLATE.format(metadata=metadata), **kwargs)


class TestSimpleMeta:
    def test_epub2_sample(self):
        result = normalize(EPUB2_OPF)
        assert result.simple_meta == [
            {"dc:title": "Sample Book"},
            {"dc:creator": "Jane Doe"},
            {"dc:identifier": "978-0-00-000000-0"},
            {"dc:identifier": "urn:uuid:1234"},
            {"dc:language": "en"},
            {"cover": "cover-img"},
        ]

    def test_duplicate_keys_are_kept(self):
        result = with_metadata("<dc:creator>A</dc:creator><dc:creator>B</dc:creator>")
        assert result.simple_meta == [{"dc:creator": "A"}, {"dc:creator": "B"}]

    def test_meta_property_uses_text(self):
        result = with_metadata('<meta property="dcterms:modified">2021-05-01</meta>')
        assert result.simple_meta == [{"dcterms:modified": "2021-05-01"}]

    def test_meta_name_uses_content_attribute(self):
        result = with_metadata('<meta name="calibre:series" content="Saga"/>')
        assert result.simple_meta == [{"calibre:series": "Saga"}]

    def test_attribute_only_element_is_empty_string(self):
        result = with_metadata('<dc:rights xml:lang="en"/>')
        assert result.simple_meta == [{"dc:rights": ""}]

    def test_empty_element_is_empty_string(self):
        result = with_metadata("<dc:subject/>")
        assert result.simple_meta == [{"dc:subject": ""}]

    def test_missing_metadata_gives_empty_list(self):
        opf = OPF_TEMPLATE.replace("<metadata>{metadata}</metadata>", "")
        result = normalize(opf)
        assert result.simple_meta == []
        assert result.primary_id.name == "pub-id"
        assert result.primary_id.value is None


class TestCover:
    def test_epub2_cover_url_is_rooted(self):
        result = with_metadata('<meta name="cover" content="cover-img-id"/>')
        assert result.epub2_cover_url == "OEBPS/images/cover.jpg"

    def test_unknown_cover_id(self):
        result = with_metadata('<meta name="cover" content="nope"/>')
        assert result.epub2_cover_url is None
        assert result.simple_meta == [{"cover": "nope"}]


class TestPrimaryIdentifier:
    def test_epub2_identifier_with_scheme(self):
        result = normalize(EPUB2_OPF)
        assert result.primary_id.name == "BookId"
        assert result.primary_id.value == "urn:uuid:1234"
        assert result.primary_id.scheme == "UUID"

    def test_identifier_without_scheme(self):
        result = with_metadata('<dc:identifier id="pub-id">urn:isbn:1</dc:identifier>')
        assert result.primary_id.value == "urn:isbn:1"
        assert result.primary_id.scheme is None

    def test_other_identifiers_are_ignored(self):
        result = with_metadata('<dc:identifier id="other">x</dc:identifier>')
        assert result.primary_id.value is None

    def test_unresolved_content_is_left_unset(self, caplog):
        with caplog.at_level(logging.WARNING):
            result = with_metadata(
                '<dc:identifier id="pub-id"><span>x</span></dc:identifier>'
            )
        assert result.primary_id.value is None
        assert "not fully parsed" in caplog.text
        assert result.simple_meta == [{"dc:identifier": ""}]
