"""Tests for output rendering and markup sanitizing."""

from transformer.rendering import RenderedOutput, TransformResult, render_output, sanitize_markup


def test_styled_result_renders_as_markup():
    rendered = render_output(TransformResult(text='<h1 class="text-3xl">Hi</h1>', styled=True))
    assert rendered == RenderedOutput(kind="markup", body='<h1 class="text-3xl">Hi</h1>')


def test_plain_result_renders_as_text_verbatim():
    text = "Line one\n\n<not markup>"
    assert render_output(TransformResult(text=text)) == RenderedOutput(kind="text", body=text)


def test_sanitize_removes_scripts_and_handlers():
    html = '<p onclick="steal()">Hi<script>alert(1)</script></p><iframe src="x"></iframe>'
    out = sanitize_markup(html)
    assert "script" not in out
    assert "onclick" not in out
    assert "iframe" not in out
    assert "<p>Hi</p>" in out


def test_sanitize_removes_inline_styles_and_javascript_urls():
    html = '<a href=" javascript:alert(1)" class="underline" style="color:red">x</a><a href="https://ok.example">y</a>'
    out = sanitize_markup(html)
    assert "javascript" not in out
    assert "style=" not in out
    assert 'class="underline"' in out
    assert 'href="https://ok.example"' in out


def test_sanitize_keeps_tailwind_classes():
    html = '<ul class="list-disc pl-6 mb-4"><li>a</li></ul>'
    assert sanitize_markup(html) == html


def test_sanitize_empty():
    assert sanitize_markup("") == ""


def test_sanitize_drops_svg_animation_with_javascript_url():
    html = '<p>ok</p><svg><a><animate attributeName="href" values="javascript:alert(1)"/><text>x</text></a></svg>'
    out = sanitize_markup(html)
    assert "animate" not in out
    assert "javascript" not in out
    assert "svg" not in out
    assert out.startswith("<p>ok</p>")


def test_sanitize_keeps_only_class_and_safe_href():
    html = (
        '<a href="https://ok.example" title="t" data-x="1" class="underline">a</a>'
        '<a href="data:text/html,boom">b</a>'
        '<a href="mailto:me@example.com">c</a>'
    )
    out = sanitize_markup(html)
    assert '<a href="https://ok.example" class="underline">a</a>' in out
    assert "<a>b</a>" in out
    assert '<a href="mailto:me@example.com">c</a>' in out
    assert "title" not in out
    assert "data-x" not in out


def test_sanitize_unwraps_unknown_tags_and_keeps_text():
    out = sanitize_markup('<section><h2 class="text-2xl">Heading</h2><custom>kept</custom></section>')
    assert out == '<h2 class="text-2xl">Heading</h2>kept'
