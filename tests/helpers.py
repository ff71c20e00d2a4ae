"""Builders for small in-memory EPUB archives used across the tests."""

import io
import zipfile

CONTAINER_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="{opf_path}" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""

EPUB2_OPF = """<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf"
         xmlns:dc="http://purl.org/dc/elements/1.1/"
         xmlns:opf="http://www.idpf.org/2007/opf"
         unique-identifier="BookId" version="2.0">
  <metadata>
    <dc:title>Sample Book</dc:title>
    <dc:creator opf:role="aut">Jane Doe</dc:creator>
    <dc:identifier id="isbn">978-0-00-000000-0</dc:identifier>
    <dc:identifier id="BookId" opf:scheme="UUID">urn:uuid:1234</dc:identifier>
    <dc:language>en</dc:language>
    <meta name="cover" content="cover-img"/>
  </metadata>
  <manifest>
    <item id="ncx" href="toc.ncx" media-type="application/x-dtbncx+xml"/>
    <item id="cover-img" href="images/cover.jpg" media-type="image/jpeg"/>
    <item id="ch1" href="ch1.xhtml" media-type="application/xhtml+xml"/>
    <item id="ch2" href="ch2.xhtml" media-type="application/xhtml+xml"/>
    <item id="notes" href="notes.xhtml" media-type="application/xhtml+xml"/>
  </manifest>
  <spine toc="ncx">
    <itemref idref="ch1"/>
    <itemref idref="ch2" linear="yes"/>
    <itemref idref="notes" linear="no"/>
  </spine>
  <guide>
    <reference type="text" title="Start" href="ch1.xhtml"/>
  </guide>
</package>
"""

EPUB2_NCX = """<?xml version="1.0" encoding="UTF-8"?>
<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1">
  <head/>
  <docTitle><text>Sample Book</text></docTitle>
  <navMap>
    <navPoint id="np1" playOrder="1">
      <navLabel><text>Chapter 1</text></navLabel>
      <content src="ch1.xhtml"/>
      <navPoint id="np1-1" playOrder="2">
        <navLabel><text>Section 1.1</text></navLabel>
        <content src="ch1.xhtml#s1"/>
        <navPoint id="np1-1-1" playOrder="3">
          <navLabel><text>Part 1.1.1</text></navLabel>
          <content src="ch1.xhtml#p1"/>
        </navPoint>
      </navPoint>
    </navPoint>
    <navPoint id="np2" playOrder="4">
      <content src="ch2.xhtml"/>
    </navPoint>
  </navMap>
</ncx>
"""

EPUB2_NAV_HTML = (
    '<ul><li><a href="ch1.xhtml">Chapter 1</a>'
    '<ul><li><a href="ch1.xhtml#s1">Section 1.1</a>'
    '<ul><li><a href="ch1.xhtml#p1">Part 1.1.1</a></li>\n</ul>\n'
    "</li>\n</ul>\n"
    "</li>\n"
    '<li><a href="ch2.xhtml">Untitled</a></li>\n'
    "</ul>\n"
)

EPUB3_OPF = """<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf" version="3.0" unique-identifier="uid">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">
    <dc:identifier id="uid">urn:isbn:9780000000001</dc:identifier>
    <dc:title>Modern Book</dc:title>
    <meta property="dcterms:modified">2020-01-01T00:00:00Z</meta>
  </metadata>
  <manifest>
    <item id="nav" href="nav.xhtml" media-type="application/xhtml+xml" properties="nav"/>
    <item id="cover" href="img/cover.png" media-type="image/png" properties="cover-image"/>
    <item id="c1" href="text/c1.xhtml" media-type="application/xhtml+xml"/>
  </manifest>
  <spine>
    <itemref idref="c1"/>
  </spine>
</package>
"""

EPUB3_NAV = """<?xml version="1.0" encoding="UTF-8"?>
<html xmlns="http://www.w3.org/1999/xhtml" xmlns:epub="http://www.idpf.org/2007/ops">
  <head><title>Contents</title></head>
  <body>
    <nav epub:type="toc" id="toc">
      <ol><li><a href="text/c1.xhtml">One</a></li></ol>
    </nav>
  </body>
</html>
"""

CHAPTER = """<?xml version="1.0" encoding="UTF-8"?>
<html xmlns="http://www.w3.org/1999/xhtml"><head><title>x</title></head>
<body><p>Text</p></body></html>
"""


def make_epub(
    files: dict[str, str | bytes],
    opf_path: str | None = "OEBPS/content.opf",
) -> bytes:
    """Zip ``files`` into an EPUB; a container.xml is added for ``opf_path``."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr("mimetype", "application/epub+zip", compress_type=zipfile.ZIP_STORED)
        if opf_path is not None:
            zf.writestr(
                "META-INF/container.xml", CONTAINER_TEMPLATE.format(opf_path=opf_path)
            )
        for name, content in files.items():
            zf.writestr(name, content, compress_type=zipfile.ZIP_DEFLATED)
    return buffer.getvalue()


def epub2_files(opf: str = EPUB2_OPF, ncx: str = EPUB2_NCX) -> dict[str, str | bytes]:
    return {
        "OEBPS/content.opf": opf,
        "OEBPS/toc.ncx": ncx,
        "OEBPS/ch1.xhtml": CHAPTER,
        "OEBPS/ch2.xhtml": CHAPTER,
        "OEBPS/notes.xhtml": CHAPTER,
        "OEBPS/images/cover.jpg": b"\xff\xd8\xff\xe0fakejpeg",
    }


def epub3_files(opf: str = EPUB3_OPF) -> dict[str, str | bytes]:
    return {
        "content.opf": opf,
        "nav.xhtml": EPUB3_NAV,
        "text/c1.xhtml": CHAPTER,
        "img/cover.png": b"\x89PNG\r\n\x1a\nfakepng",
    }


