"""Tests for the in-memory template store."""

import pytest

from transformer.errors import ConflictError, NotFoundError
from transformer.templates import Template, TemplateStore


@pytest.fixture
def store():
    return TemplateStore()


def _template(name="t.txt", content="text", template_id=None):
    if template_id is None:
        return Template(name=name, content=content)
    return Template(name=name, content=content, id=template_id)


def test_templates_get_unique_ids():
    assert _template().id != _template().id


def test_add_keeps_insertion_order(store):
    a, b, c = _template("a"), _template("b"), _template("c")
    for t in (a, b, c):
        store.add(t)
    assert [t.name for t in store.list()] == ["a", "b", "c"]
    assert len(store) == 3


def test_add_duplicate_id_conflicts(store):
    store.add(_template(template_id="same"))
    with pytest.raises(ConflictError):
        store.add(_template(name="other", template_id="same"))
    assert len(store) == 1


def test_select_returns_template(store):
    t = _template()
    store.add(t)
    assert store.select(t.id) == t
    assert store.selected == t


def test_select_unknown_id_raises(store):
    with pytest.raises(NotFoundError):
        store.select("missing")
    assert store.selected is None


def test_removing_selected_template_clears_selection(store):
    t = _template()
    store.add(t)
    store.select(t.id)
    store.remove(t.id)
    assert store.selected is None
    assert store.list() == []


def test_removing_other_template_keeps_selection(store):
    keep, drop = _template("keep"), _template("drop")
    store.add(keep)
    store.add(drop)
    store.select(keep.id)
    store.remove(drop.id)
    assert store.selected == keep


def test_remove_is_idempotent(store):
    t = _template()
    store.add(t)
    store.remove(t.id)
    store.remove(t.id)
    store.remove("never-existed")
    assert len(store) == 0


def test_list_returns_a_copy(store):
    store.add(_template())
    store.list().clear()
    assert len(store) == 1


def test_template_is_immutable():
    t = _template()
    with pytest.raises(AttributeError):
        t.id = "new"


def test_preview_truncates_and_collapses_whitespace():
    t = Template(name="t", content="word " * 30)
    preview = t.preview(20)
    assert preview.endswith("...")
    assert len(preview) == 23
    assert Template(name="t", content="short\n text").preview() == "short text"


def test_has_markup():
    assert Template(name="t", content="x", styled_markup="<p>x</p>").has_markup
    assert not Template(name="t", content="x").has_markup
