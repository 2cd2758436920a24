"""Shared fixtures: in-memory .docx builders and fake model backends."""

from io import BytesIO

import pytest
from docx import Document
from docx.enum.style import WD_STYLE_TYPE

from backend import TemplateSession
from transformer.llm_client import TransformationClient


def ensure_style(doc, name, style_type=WD_STYLE_TYPE.PARAGRAPH):
    """Return the named style, adding it when the default template lacks it."""
    try:
        return doc.styles[name]
    except KeyError:
        return doc.styles.add_style(name, style_type)


@pytest.fixture
def make_docx():
    """Build a .docx in memory: make_docx(lambda doc: ...) -> bytes."""

    def _make(build):
        doc = Document()
        build(doc)
        buf = BytesIO()
        doc.save(buf)
        return buf.getvalue()

    return _make


class FakeGenerate:
    """Records prompts and replies with a fixed response (or raises)."""

    def __init__(self, response="<p>Transformed</p>", error=None):
        self.response = response
        self.error = error
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fake_generate():
    return FakeGenerate()


@pytest.fixture
def session(fake_generate):
    return TemplateSession(client=TransformationClient(fake_generate))
