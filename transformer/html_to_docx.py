"""Convert transformation output (styled HTML or plain prose) to a DOCX document.
Headings, quotes, code blocks and lists map back to the built-in Word styles."""

import re
from html.parser import HTMLParser
from io import BytesIO

from docx import Document
from docx.shared import Pt

from transformer.rendering import TransformResult

MONO_FONT_NAME = "Courier New"

# Characters python-docx refuses to write into document XML
_XML_UNSAFE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")

_HEADING_STYLES = {"h1": "Heading 1", "h2": "Heading 2", "h3": "Heading 3"}
_BLOCK_TAGS = ("p", "div", "h1", "h2", "h3", "h4", "h5", "h6", "pre", "li", "td", "th")


class _OutputHTMLParser(HTMLParser):
    """Parse HTML into blocks: {style, runs: [(text, bold, italic, underline)], mono}."""

    def __init__(self):
        super().__init__()
        self.blocks = []
        self._block = None
        self._lists = []  # stack of "ul" / "ol"
        self._quote_depth = 0
        self._bold = 0
        self._italic = 0
        self._underline = 0

    def _style_for(self, tag):
        if tag in _HEADING_STYLES:
            return _HEADING_STYLES[tag]
        if tag == "li":
            return "List Number" if self._lists and self._lists[-1] == "ol" else "List Bullet"
        if self._quote_depth:
            return "Quote"
        return "Normal"

    def _start_block(self, tag):
        self._end_block()
        self._block = {"style": self._style_for(tag), "runs": [], "mono": tag == "pre", "tag": tag}

    def _end_block(self):
        if self._block is None:
            return
        if any(text.strip() for text, *_ in self._block["runs"]):
            self.blocks.append(self._block)
        self._block = None

    def _add_run(self, text):
        if self._block is None:
            if not text.strip():
                return
            self._block = {"style": self._style_for("p"), "runs": [], "mono": False, "tag": "p"}
        self._block["runs"].append((text, self._bold > 0, self._italic > 0, self._underline > 0))

    def handle_starttag(self, tag, attrs):
        if tag in _BLOCK_TAGS:
            # a <p> nested in a list item or cell continues that block
            if tag in ("p", "div") and self._block is not None and self._block["tag"] in ("li", "td", "th"):
                return
            self._start_block(tag)
        elif tag in ("ul", "ol"):
            self._end_block()
            self._lists.append(tag)
        elif tag == "blockquote":
            self._end_block()
            self._quote_depth += 1
        elif tag in ("b", "strong"):
            self._bold += 1
        elif tag in ("i", "em"):
            self._italic += 1
        elif tag == "u":
            self._underline += 1
        elif tag == "br":
            self._add_run("\n")

    def handle_endtag(self, tag):
        if tag in _BLOCK_TAGS:
            if tag in ("p", "div") and self._block is not None and self._block["tag"] in ("li", "td", "th"):
                return
            self._end_block()
        elif tag in ("ul", "ol"):
            self._end_block()
            if self._lists:
                self._lists.pop()
        elif tag == "blockquote":
            self._end_block()
            self._quote_depth = max(0, self._quote_depth - 1)
        elif tag in ("b", "strong"):
            self._bold = max(0, self._bold - 1)
        elif tag in ("i", "em"):
            self._italic = max(0, self._italic - 1)
        elif tag == "u":
            self._underline = max(0, self._underline - 1)

    def handle_data(self, data):
        if not data:
            return
        if self._block is not None and self._block["mono"]:
            self._add_run(data)
        else:
            self._add_run(re.sub(r"\s+", " ", data))

    def close(self):
        super().close()
        self._end_block()


def _write_runs(paragraph, runs, mono=False):
    for text, bold, italic, underline in runs:
        lines = _XML_UNSAFE.sub(" ", text).split("\n")
        for i, line in enumerate(lines):
            if i:
                paragraph.add_run().add_break()
            if not line:
                continue
            run = paragraph.add_run(line)
            run.bold = bold or None
            run.italic = italic or None
            if underline:
                run.font.underline = True
            if mono:
                run.font.name = MONO_FONT_NAME
                run.font.size = Pt(10)


def html_to_docx_bytes(html: str) -> bytes:
    parser = _OutputHTMLParser()
    parser.feed(html or "")
    parser.close()

    doc = Document()
    for block in parser.blocks:
        runs = list(block["runs"])
        if not block["mono"]:
            # trim whitespace left over from source formatting at the block edges
            if runs:
                runs[0] = (runs[0][0].lstrip(),) + runs[0][1:]
                runs[-1] = (runs[-1][0].rstrip(),) + runs[-1][1:]
        p = doc.add_paragraph(style=block["style"])
        _write_runs(p, runs, mono=block["mono"])
    if not doc.paragraphs:
        doc.add_paragraph()

    out = BytesIO()
    doc.save(out)
    return out.getvalue()


def plain_text_to_docx_bytes(text: str) -> bytes:
    """One Normal paragraph per blank-line separated block; single newlines become line breaks."""
    doc = Document()
    for para in re.split(r"\n\s*\n", (text or "").strip()):
        if not para.strip():
            continue
        p = doc.add_paragraph()
        _write_runs(p, [(para.strip("\n"), False, False, False)])
    if not doc.paragraphs:
        doc.add_paragraph()

    out = BytesIO()
    doc.save(out)
    return out.getvalue()


def output_to_docx_bytes(result: TransformResult) -> bytes:
    if result.styled:
        return html_to_docx_bytes(result.text)
    return plain_text_to_docx_bytes(result.text)
