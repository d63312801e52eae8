"""Tests for the content line parser and HTML renderer."""

from portfolio.notion.tables import render_html_table
from portfolio.render.content import (
    parse_attachment_label,
    parse_content,
    parse_url_line,
    render_content_html,
)


class TestParseUrlLine:
    def test_plain(self):
        assert parse_url_line("URL: https://example.com/a?b=1") == "https://example.com/a?b=1"

    def test_indented(self):
        assert parse_url_line("    URL: https://example.com") == "https://example.com"

    def test_anchor(self):
        line = 'URL: <a href="https://example.com/x" target="_blank">x</a>'
        assert parse_url_line(line) == "https://example.com/x"

    def test_not_a_url_line(self):
        assert parse_url_line("URL: not-a-link") is None
        assert parse_url_line("see https://example.com") is None
        assert parse_url_line(None) is None


class TestParseAttachmentLabel:
    def test_strips_short_url(self):
        assert parse_attachment_label("📎 spec.pdf (s3.example.com/spec.pdf)") == ("📎", "spec.pdf")

    def test_image_with_variation_selector(self):
        assert parse_attachment_label("🖼️ Image (cdn.example.com/a.png)") == ("🖼️", "Image")

    def test_caption_is_kept(self):
        icon, label = parse_attachment_label("🔖 Bookmark (github.com/repo) — my repo")
        assert icon == "🔖"
        assert label == "Bookmark (github.com/repo) — my repo"

    def test_long_label_truncated(self):
        icon, label = parse_attachment_label("📄 " + "n" * 200)
        assert len(label) == 120
        assert label.endswith("…")

    def test_plain_text(self):
        assert parse_attachment_label("Just text") is None
        assert parse_attachment_label("💡 a callout") is None


class TestParseContent:
    def test_attachment_and_url_merge_into_one_item(self):
        items = parse_content(["📎 spec.pdf (s3.example.com/spec.pdf)", "URL: https://s3.example.com/x/spec.pdf"])

        assert len(items) == 1
        assert items[0].kind == "attachment"
        assert items[0].icon == "📎"
        assert items[0].text == "spec.pdf"
        assert items[0].url == "https://s3.example.com/x/spec.pdf"

    def test_attachment_without_url_is_text(self):
        items = parse_content(["🎞️ Video", "Next paragraph"])

        assert [item.kind for item in items] == ["text", "text"]

    def test_standalone_url_is_link(self):
        items = parse_content(["Intro", "URL: https://example.com"])

        assert [item.kind for item in items] == ["text", "link"]
        assert items[1].url == "https://example.com"

    def test_html_sentinel(self):
        line = render_html_table([["a", "b"]])
        items = parse_content([line])

        assert items[0].kind == "html"
        assert items[0].text.startswith('<div class="notion-table-wrap">')

    def test_html_sentinel_with_bom_and_indent(self):
        items = parse_content(["\ufeff  __HTML__:<b>x</b>"])

        assert items[0].kind == "html"
        assert items[0].text == "<b>x</b>"

    def test_raw_table_wrap_without_sentinel(self):
        items = parse_content(['<div class="notion-table-wrap"><table></table></div>'])

        assert items[0].kind == "html"

    def test_order_preserved(self):
        lines = ["# Title", "🔗 Embed (codepen.io/abc)", "URL: https://codepen.io/me/pen/abc", "", "• item"]
        items = parse_content(lines)

        assert [item.kind for item in items] == ["text", "attachment", "text", "text"]
        assert items[0].text == "# Title"
        assert items[3].text == "• item"


class TestRenderContentHtml:
    def test_attachment_renders_single_link(self):
        html_out = render_content_html(["🖼️ Image (cdn.example.com/a.png)", "URL: https://cdn.example.com/a.png"])

        assert html_out.count("<a ") == 1
        assert 'href="https://cdn.example.com/a.png"' in html_out
        assert "URL:" not in html_out

    def test_text_is_escaped(self):
        html_out = render_content_html(["<script>alert(1)</script>"])

        assert "<script>" not in html_out
        assert "&lt;script&gt;" in html_out

    def test_table_markup_injected_verbatim(self):
        html_out = render_content_html([render_html_table([["x"]])])

        assert '<div class="popup-line popup-table"><div class="notion-table-wrap">' in html_out

    def test_empty_content(self):
        assert render_content_html([]) == '<p class="popup-desc">No content.</p>'
