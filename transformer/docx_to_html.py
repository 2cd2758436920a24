"""Convert uploaded template documents to plain text and styled HTML.

Uses Mammoth to map named Word paragraph/run styles to semantic HTML tags that
carry Tailwind utility classes, then a BeautifulSoup pass to class structural
elements (tables, lists, unstyled paragraphs) that Mammoth emits bare.
Plain-text uploads are decoded as-is and carry no markup.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from io import BytesIO

import mammoth
from bs4 import BeautifulSoup

from transformer.errors import DocumentParseError, InvalidFileError

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_MEDIA_TYPE = "text/plain"


class DocumentKind(str, Enum):
    TEXT = "text"
    DOCX = "docx"


@dataclass(frozen=True)
class StyleMappingRule:
    """Maps a named Word style (or a structural element) to an HTML tag + classes.

    element is "p" for paragraph styles, "r" for run (character) styles and
    "structure" for tag-level rules applied after conversion.
    """

    selector: str
    tag: str
    classes: tuple[str, ...]
    element: str = "p"

    @property
    def class_attr(self) -> str:
        return " ".join(self.classes)

    def style_names(self) -> list[str]:
        # Word writes built-in heading names lower-case in styles.xml ("heading 1")
        names = [self.selector]
        if self.selector.startswith("Heading "):
            names.append(self.selector.lower())
        return names

    def to_mammoth(self) -> list[str]:
        """Render as Mammoth style-map lines (empty for structural rules)."""
        if self.element == "structure":
            return []
        target = self.tag + "".join("." + c for c in self.classes)
        if self.element == "p":
            if self.tag in ("ul", "ol"):
                target += " > li:fresh"
            else:
                target += ":fresh"
        return [f"{self.element}[style-name='{name}'] => {target}" for name in self.style_names()]


DEFAULT_STYLE_MAP: tuple[StyleMappingRule, ...] = (
    StyleMappingRule("Heading 1", "h1", ("text-3xl", "font-bold", "text-gray-900", "mb-4")),
    StyleMappingRule("Heading 2", "h2", ("text-2xl", "font-semibold", "text-gray-800", "mb-3")),
    StyleMappingRule("Heading 3", "h3", ("text-xl", "font-semibold", "text-gray-700", "mb-2")),
    StyleMappingRule("Normal", "p", ("text-base", "text-gray-700", "leading-relaxed", "mb-4")),
    StyleMappingRule("Quote", "blockquote", ("border-l-4", "border-gray-300", "pl-4", "italic", "text-gray-600", "mb-4")),
    StyleMappingRule("Code", "pre", ("bg-gray-100", "text-gray-800", "p-3", "rounded-md", "font-mono", "text-sm", "mb-4")),
    StyleMappingRule("Strong", "strong", ("font-semibold", "text-gray-900"), element="r"),
    StyleMappingRule("Emphasis", "em", ("italic", "text-gray-700"), element="r"),
    StyleMappingRule("Link", "a", ("text-blue-600", "underline"), element="r"),
    StyleMappingRule("Numbered List", "ol", ("list-decimal", "pl-6", "mb-4")),
    StyleMappingRule("table", "table", ("table-auto", "border-collapse", "w-full", "my-6"), element="structure"),
    StyleMappingRule("tr", "tr", ("border-b",), element="structure"),
    StyleMappingRule("td", "td", ("px-3", "py-2", "border"), element="structure"),
    StyleMappingRule("th", "th", ("px-3", "py-2", "border", "bg-gray-50", "font-semibold", "text-gray-700"), element="structure"),
    StyleMappingRule("list", "ul", ("list-disc", "pl-6", "mb-4"), element="structure"),
    StyleMappingRule("Numbered List", "ol", ("list-decimal", "pl-6", "mb-4"), element="structure"),
)


@dataclass
class ExtractedDocument:
    text: str
    markup: str | None = None
    messages: list[str] = field(default_factory=list)


def build_mammoth_style_map(rules=DEFAULT_STYLE_MAP) -> str:
    lines = []
    for rule in rules:
        lines.extend(rule.to_mammoth())
    return "\n".join(lines)


def apply_structural_classes(html: str, rules=DEFAULT_STYLE_MAP) -> str:
    """Give bare structural elements their classes.

    Tables, rows, cells and lists get the "structure" rules; a <p> with no class
    is a paragraph in the document's default style and gets the Normal classes.
    Elements that already carry a class (set by a named style) are left alone.
    """
    by_tag = {r.tag: r.classes for r in rules if r.element == "structure"}
    normal = next((r for r in rules if r.selector == "Normal" and r.element == "p"), None)
    if normal is not None:
        by_tag.setdefault("p", normal.classes)
    if not html or not by_tag:
        return html or ""

    soup = BeautifulSoup(html, "html.parser")
    for el in soup.find_all(list(by_tag)):
        if not el.get("class"):
            el["class"] = list(by_tag[el.name])
    return str(soup)


def _exact_style_names(rules, element: str) -> set[str]:
    return {name for rule in rules if rule.element == element for name in rule.style_names()}


def _keep_exact_match(names: set[str]):
    # Mammoth compares style names case-insensitively; a near miss ("quote" for
    # "Quote") loses its style name so it falls through to a plain element.
    folded = {name.lower() for name in names}

    def transform(element):
        name = element.style_name
        if name and name not in names and name.lower() in folded:
            return element.copy(style_name=None)
        return element

    return transform


def case_sensitive_styles(rules=DEFAULT_STYLE_MAP):
    """Mammoth document transform that restricts style matching to exact names."""
    paragraphs = mammoth.transforms.paragraph(_keep_exact_match(_exact_style_names(rules, "p")))
    runs = mammoth.transforms.run(_keep_exact_match(_exact_style_names(rules, "r")))
    return lambda document: runs(paragraphs(document))


def classify_upload(filename: str, media_type: str | None = None) -> DocumentKind:
    """Decide whether an upload is plain text or a .docx package, by extension or media type."""
    ext = os.path.splitext(filename or "")[1].lower()
    mt = (media_type or "").split(";")[0].strip().lower()
    # A recognised extension wins over the declared media type
    if ext == ".docx":
        return DocumentKind.DOCX
    if ext == ".txt":
        return DocumentKind.TEXT
    if mt == DOCX_MEDIA_TYPE:
        return DocumentKind.DOCX
    if mt == TEXT_MEDIA_TYPE:
        return DocumentKind.TEXT
    raise InvalidFileError(f"Invalid file {filename!r}: please upload a .txt or .docx file")


def docx_to_html(data: bytes, rules=DEFAULT_STYLE_MAP) -> tuple[str, list[str]]:
    """Convert DOCX bytes to styled HTML. Returns (html, converter warnings)."""
    try:
        result = mammoth.convert_to_html(
            BytesIO(data),
            style_map=build_mammoth_style_map(rules),
            transform_document=case_sensitive_styles(rules),
        )
    except Exception as e:
        raise DocumentParseError(f"Could not read document: {e}") from e
    messages = [m.message for m in result.messages]
    return apply_structural_classes(result.value or "", rules), messages


def docx_to_text(data: bytes) -> str:
    """Plain text of a DOCX: text and paragraph breaks only."""
    try:
        result = mammoth.extract_raw_text(BytesIO(data))
    except Exception as e:
        raise DocumentParseError(f"Could not read document: {e}") from e
    return result.value or ""


def extract_document(data: bytes, kind: DocumentKind, rules=DEFAULT_STYLE_MAP) -> ExtractedDocument:
    if kind == DocumentKind.TEXT:
        return ExtractedDocument(text=data.decode("utf-8-sig", errors="replace"))

    html, messages = docx_to_html(data, rules)
    text = docx_to_text(data)
    for msg in messages:
        logger.warning("docx conversion: %s", msg)
    return ExtractedDocument(text=text, markup=html, messages=messages)


def extract_upload(filename: str, data: bytes, media_type: str | None = None) -> ExtractedDocument:
    """Classify an upload and extract it. Raises InvalidFileError / DocumentParseError."""
    kind = classify_upload(filename, media_type)
    logger.info("Extracting %s upload %r (%d bytes)", kind.value, filename, len(data))
    return extract_document(data, kind)
