"""Decide how a transformation result is displayed, and make model HTML safe to render."""

from __future__ import annotations

import re
from dataclasses import dataclass

from bs4 import BeautifulSoup

from transformer.prompts import SEMANTIC_TAGS

# Tags the model is asked to produce, plus inline/structural helpers it commonly adds.
ALLOWED_TAGS = frozenset(
    [t.strip() for t in SEMANTIC_TAGS.split(",")]
    + ["span", "br", "u", "b", "i", "code", "div", "thead", "tbody"]
)
# Removed with their content; any other unknown tag is unwrapped and its text kept.
_DROPPED_TAGS = [
    "script", "style", "iframe", "frame", "frameset", "object", "embed", "applet",
    "link", "meta", "base", "form", "input", "button", "textarea", "select",
    "template", "noscript", "svg", "math", "canvas", "audio", "video",
]
_SAFE_SCHEMES = ("http:", "https:", "mailto:")


@dataclass(frozen=True)
class TransformResult:
    """Model output. One string serves both render paths; styled says which one applies."""

    text: str
    styled: bool = False


@dataclass(frozen=True)
class RenderedOutput:
    kind: str  # "markup" or "text"
    body: str


def _safe_href(value) -> bool:
    if not isinstance(value, str):
        return False
    compact = re.sub(r"[\s\x00-\x1f]", "", value).lower()
    return compact.startswith(_SAFE_SCHEMES) or compact.startswith("#")


def sanitize_markup(html: str) -> str:
    """Reduce model-authored HTML to an allowlist.

    Only ALLOWED_TAGS survive, carrying only a class attribute (and href on
    links, when it is an http/https/mailto URL or a fragment). Active or
    embedded content (scripts, frames, SVG, MathML, forms) is removed with
    its content; other unknown tags are unwrapped.
    """
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    for el in soup.find_all(_DROPPED_TAGS):
        if not el.decomposed:
            el.decompose()
    for el in soup.find_all(True):
        if el.name not in ALLOWED_TAGS:
            el.unwrap()
            continue
        for attr in list(el.attrs):
            if attr == "class":
                continue
            if attr == "href" and el.name == "a" and _safe_href(el.attrs[attr]):
                continue
            del el.attrs[attr]
    return str(soup)


def render_output(result: TransformResult) -> RenderedOutput:
    if result.styled:
        return RenderedOutput(kind="markup", body=sanitize_markup(result.text))
    return RenderedOutput(kind="text", body=result.text)
