from stele.renderers import Heading, MarkdownRenderer, _generate_heading_id, highlight_css


def test_markdown_renders_headings_with_ids_and_toc():
    html, headings = MarkdownRenderer().render(
        "# Title\n\n## Calling `foo()`\n\n## Intro\n\n### Intro\n"
    )
    assert '<h1 id="title">Title</h1>' in html
    assert '<h2 id="calling-foo">Calling <code>foo()</code></h2>' in html
    assert '<h2 id="intro">Intro</h2>' in html
    assert '<h3 id="intro-1">Intro</h3>' in html
    assert headings == [
        Heading(id="title", text="Title", level=1),
        Heading(id="calling-foo", text="Calling foo()", level=2),
        Heading(id="intro", text="Intro", level=2),
        Heading(id="intro-1", text="Intro", level=3),
    ]


def test_markdown_highlights_known_languages():
    html, _ = MarkdownRenderer().render("```python\nprint('hi')\n```\n")
    assert 'class="highlight"' in html
    assert "print" in html


def test_markdown_escapes_unknown_languages():
    html, _ = MarkdownRenderer().render("```not-a-language\n<b>&</b>\n```\n")
    assert '<pre><code class="language-not-a-language">&lt;b&gt;&amp;&lt;/b&gt;' in html


def test_markdown_plain_code_block_and_raw_html():
    html, _ = MarkdownRenderer().render('```\nx < y\n```\n\n<div class="note">kept</div>\n')
    assert "<pre><code>x &lt; y\n</code></pre>" in html
    assert '<div class="note">kept</div>' in html


def test_markdown_plugins_enabled():
    html, _ = MarkdownRenderer().render("~~gone~~\n\n| a | b |\n|---|---|\n| 1 | 2 |\n")
    assert "<del>gone</del>" in html
    assert "<table>" in html


def test_rendering_is_deterministic():
    source = "# A\n\nSome *text* and `code`.\n\n```python\nx = 1\n```\n"
    renderer = MarkdownRenderer()
    assert renderer.render(source) == renderer.render(source)


def test_generate_heading_id_fallback():
    assert _generate_heading_id("!!!") == "section"
    assert _generate_heading_id("Hello,  World") == "hello-world"


def test_highlight_css():
    assert ".highlight" in highlight_css()
