"""Generate EPUB files from HTML fragments using ebooklib."""

import html
import logging
import mimetypes
import re
import unicodedata
import uuid
from dataclasses import dataclass
from pathlib import Path

from bs4 import BeautifulSoup
from ebooklib import epub

from epubkit.models.build import EpubContentOptions, EpubOptions

log = logging.getLogger(__name__)

DEFAULT_CSS = """\
.epub-author {
  color: #555;
}
.epub-link {
  margin-bottom: 30px;
}
.epub-link a {
  color: #666;
  font-size: 90%;
}
.toc-author {
  font-size: 90%;
  color: #555;
}
.toc-link {
  color: #999;
  font-size: 85%;
  display: block;
}
hr {
  border: 0;
  border-bottom: 1px solid #dedede;
  margin: 60px 10%;
}
"""

ALLOWED_ATTRIBUTES = frozenset(
    {
        "content", "alt", "id", "title", "src", "href", "about", "accesskey",
        "aria-activedescendant", "aria-atomic", "aria-autocomplete", "aria-busy",
        "aria-checked", "aria-controls", "aria-describedat", "aria-describedby",
        "aria-disabled", "aria-dropeffect", "aria-expanded", "aria-flowto",
        "aria-grabbed", "aria-haspopup", "aria-hidden", "aria-invalid",
        "aria-label", "aria-labelledby", "aria-level", "aria-live",
        "aria-multiline", "aria-multiselectable", "aria-orientation",
        "aria-owns", "aria-posinset", "aria-pressed", "aria-readonly",
        "aria-relevant", "aria-required", "aria-selected", "aria-setsize",
        "aria-sort", "aria-valuemax", "aria-valuemin", "aria-valuenow",
        "aria-valuetext", "class", "colspan", "contenteditable", "contextmenu",
        "datatype", "dir", "draggable", "dropzone", "hidden", "hreflang",
        "inlist", "itemid", "itemref", "itemscope", "itemtype", "lang",
        "media", "ns1:type", "prefix", "property", "rel", "resource", "rev",
        "role", "rowspan", "spellcheck", "style", "tabindex", "target",
        "translate", "typeof", "vocab", "width", "height", "xml:lang",
        "xmlns",
    }
)

# Elements permitted by the XHTML 1.1 DTD that EPUB 2 content must follow
XHTML11_TAGS = frozenset(
    {
        "div", "p", "h1", "h2", "h3", "h4", "h5", "h6", "ul", "ol", "li",
        "dl", "dt", "dd", "address", "hr", "pre", "blockquote", "center",
        "ins", "del", "a", "span", "bdo", "br", "em", "strong", "dfn", "code",
        "samp", "kbd", "cite", "abbr", "acronym", "q", "sub", "sup",
        "tt", "i", "b", "big", "small", "u", "s", "strike", "basefont",
        "font", "object", "param", "img", "table", "caption", "colgroup",
        "col", "thead", "tfoot", "tbody", "tr", "th", "td", "embed", "applet",
        "iframe", "map", "noscript", "script", "var",
    }
)

_SLUG_STRIP = re.compile(r"[^\w\s-]")
_SLUG_DASH = re.compile(r"[-\s]+")


def slugify(text: str) -> str:
    """ASCII slug for file names: "Chapter Ünö!" -> "chapter-uno"."""
    ascii_text = (
        unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    )
    cleaned = _SLUG_STRIP.sub("", ascii_text).strip().lower()
    return _SLUG_DASH.sub("-", cleaned)


class Epub2Writer(epub.EpubWriter):
    """EpubWriter that declares an EPUB 2.0 package.

    ebooklib always builds a 3.0 package root; EPUB 2 has no `prefix`
    attribute and no manifest `properties`, so both are removed.
    """

    def _write_opf_file(self, root):
        root.set("version", "2.0")
        root.attrib.pop("prefix", None)
        for item in root.iter("{%s}item" % epub.NAMESPACES["OPF"], "item"):
            item.attrib.pop("properties", None)
        super()._write_opf_file(root)


@dataclass
class PreparedChapter:
    id: str
    href: str
    title: str
    html: str
    options: EpubContentOptions


class EpubBuilder:
    """Assemble an EPUB from :class:`EpubOptions`."""

    def __init__(self, options: EpubOptions):
        self.options = options
        self.uuid = str(uuid.uuid4())
        self.css = options.css or DEFAULT_CSS

        if options.cover is not None:
            media_type, _ = mimetypes.guess_type(options.cover)
            if media_type is None or not media_type.startswith("image/"):
                raise ValueError(f"The cover image can't be processed : {options.cover}")
            if not Path(options.cover).is_file():
                raise FileNotFoundError(f"Cover image not found at {options.cover}.")

        for font in options.fonts:
            if not Path(font).is_file():
                raise FileNotFoundError(f"Custom font not found at {font}.")

        # The cover page takes the first content slot
        offset = 1 if options.cover else 0
        self.chapters = [
            self._prepare_chapter(content, offset + i)
            for i, content in enumerate(options.content)
        ]

    def _chapter_href(self, content: EpubContentOptions, index: int) -> str:
        if content.filename is None:
            return f"{index}_{slugify(content.title or 'no title')}.xhtml"
        if content.filename.endswith(".xhtml"):
            return content.filename
        return f"{content.filename}.xhtml"

    def sanitize(self, data: str, index: int) -> str:
        """Strip disallowed attributes and, for EPUB 2, non-XHTML 1.1 tags."""
        soup = BeautifulSoup(data, "lxml")
        root = soup.body or soup

        for tag in root.find_all(True):
            if tag.name == "img" and not tag.get("alt"):
                tag["alt"] = "image-placeholder"

            for attr in list(tag.attrs):
                if attr not in ALLOWED_ATTRIBUTES:
                    del tag[attr]

            if self.options.version == 2 and tag.name not in XHTML11_TAGS:
                log.warning(
                    "content[%d]: <%s> is not allowed by the EPUB 2/XHTML 1.1 DTD",
                    index,
                    tag.name,
                )
                tag.name = "div"

        return "".join(str(child) for child in root.contents)

    def _prepare_chapter(self, content: EpubContentOptions, index: int) -> PreparedChapter:
        body = []
        if self.options.append_chapter_titles:
            body.append(f"<h1>{html.escape(content.title)}</h1>")
        if content.author:
            authors = html.escape(", ".join(content.author))
            body.append(f'<p class="epub-author">{authors}</p>')
        if content.url:
            url = html.escape(content.url)
            body.append(f'<p class="epub-link"><a href="{url}">{url}</a></p>')
        body.append(self.sanitize(content.data, index))

        return PreparedChapter(
            id=f"item_{index}",
            href=self._chapter_href(content, index),
            title=content.title,
            html="\n".join(body),
            options=content,
        )

    def _toc_page(self, chapters: list[epub.EpubHtml]) -> epub.EpubHtml:
        """Standalone HTML table of contents for EPUB 2 readers."""
        links = "".join(
            f'<li><a href="{c.file_name}">{html.escape(c.title)}</a></li>'
            for c in chapters
        )
        page = epub.EpubHtml(
            uid="toc", title=self.options.toc_title, file_name="toc.xhtml",
            lang=self.options.lang,
        )
        page.content = (
            f"<h1>{html.escape(self.options.toc_title)}</h1><ol>{links}</ol>"
        )
        return page

    def build(self) -> epub.EpubBook:
        """Create the in-memory ebooklib book."""
        opts = self.options
        book = epub.EpubBook()
        book.set_identifier(self.uuid)
        book.set_title(opts.title)
        book.set_language(opts.lang)
        for i, author in enumerate(opts.author):
            book.add_author(author, uid=f"creator_{i}")
        book.add_metadata("DC", "description", opts.description)
        book.add_metadata("DC", "publisher", opts.publisher)
        book.add_metadata("DC", "date", opts.date)

        style = epub.EpubItem(
            uid="style", file_name="style.css", media_type="text/css",
            content=self.css.encode("utf-8"),
        )
        book.add_item(style)

        for i, font in enumerate(opts.fonts):
            font_path = Path(font)
            media_type, _ = mimetypes.guess_type(font_path.name)
            book.add_item(
                epub.EpubItem(
                    uid=f"font_{i}",
                    file_name=f"fonts/{font_path.name}",
                    media_type=media_type or "application/octet-stream",
                    content=font_path.read_bytes(),
                )
            )

        spine_head: list = []
        if opts.cover:
            cover_path = Path(opts.cover)
            book.set_cover(f"cover{cover_path.suffix.lower()}", cover_path.read_bytes())
            spine_head.append("cover")

        before_toc: list[epub.EpubHtml] = []
        after_toc: list[epub.EpubHtml] = []
        toc: list[epub.EpubHtml] = []
        for chapter in self.chapters:
            item = epub.EpubHtml(
                uid=chapter.id, title=chapter.title, file_name=chapter.href,
                lang=opts.lang,
            )
            item.content = chapter.html
            item.add_item(style)
            book.add_item(item)

            if chapter.options.before_toc:
                before_toc.append(item)
            else:
                after_toc.append(item)
            if not chapter.options.exclude_from_toc:
                toc.append(item)

        book.toc = toc
        book.add_item(epub.EpubNcx())
        if opts.version == 3:
            toc_item = epub.EpubNav()
        else:
            toc_item = self._toc_page(toc)
        toc_item.title = opts.toc_title
        book.add_item(toc_item)

        book.spine = spine_head + before_toc + [toc_item] + after_toc
        return book

    def write(self, output: Path) -> Path:
        """Write the EPUB to ``output`` and return the path."""
        log.info("Generating %s (%d chapters)", output, len(self.chapters))
        writer_class = epub.EpubWriter if self.options.version == 3 else Epub2Writer
        writer = writer_class(str(output), self.build(), {})
        writer.process()
        writer.write()
        return output
