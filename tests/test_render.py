from __future__ import annotations

import pytest

from vault_markdown.constants import EMPTY_DOCUMENT_HTML
from vault_markdown.renderer import render_markdown

FENCE = "```"


@pytest.mark.parametrize("content", ["", "   \n  ", "\n\n\n", "\t", None])
def test_empty_documents_render_placeholder(content):
    assert render_markdown(content) == EMPTY_DOCUMENT_HTML


def test_headings_levels_one_to_four():
    html = render_markdown("# One\n## Two\n### Three\n#### Four")

    assert html == "<h1>One</h1><h2>Two</h2><h3>Three</h3><h4>Four</h4>"


def test_five_hashes_is_not_a_heading():
    html = render_markdown("##### Too deep")

    assert html == "<p>##### Too deep</p>"
    assert "<h" not in html


def test_heading_requires_whitespace_after_hashes():
    html = render_markdown("#tag at line start")

    assert html == '<p><span class="tag" data-tag="tag">#tag</span> at line start</p>'


def test_paragraph_lines_are_joined_with_a_space():
    assert render_markdown("first line\n  second line  ") == "<p>first line second line</p>"


def test_blank_line_separates_paragraphs():
    assert render_markdown("one\n\ntwo") == "<p>one</p><p>two</p>"


def test_carriage_returns_are_normalized():
    assert render_markdown("a\r\nb\rc") == "<p>a b c</p>"


def test_fenced_code_is_not_interpreted():
    html = render_markdown(f"{FENCE}\n# not a heading\n- not a list\n{FENCE}")

    assert html == "<pre><code># not a heading\n- not a list\n</code></pre>"
    assert "<h1>" not in html
    assert "<li>" not in html


def test_fenced_code_escapes_html_and_keeps_language():
    html = render_markdown(f"{FENCE}python\nif a < b:\n    pass\n{FENCE}")

    assert html == '<pre><code class="language-python">if a &lt; b:\n    pass\n</code></pre>'


def test_fenced_code_hides_table_syntax():
    html = render_markdown(f"{FENCE}\n| a | b |\n|---|---|\n{FENCE}")

    assert "<table>" not in html
    assert "| a | b |\n|---|---|\n" in html


def test_unterminated_fence_is_closed_at_end():
    assert render_markdown(f"{FENCE}\ncode") == "<pre><code>code\n</code></pre>"


def test_fence_closes_open_paragraph_and_list():
    html = render_markdown(f"text\n{FENCE}\nx\n{FENCE}\n- item\n{FENCE}\ny\n{FENCE}")

    assert html == (
        "<p>text</p><pre><code>x\n</code></pre>"
        "<ul><li>item</li></ul><pre><code>y\n</code></pre>"
    )


@pytest.mark.parametrize("rule", ["---", "***", "  ---  ", "***\t"])
def test_horizontal_rules(rule: str):
    assert render_markdown(f"above\n{rule}\nbelow") == "<p>above</p><hr /><p>below</p>"


def test_consecutive_quote_lines_share_one_blockquote():
    html = render_markdown("> first\n>second\ntext")

    assert html == "<blockquote><p>first</p><p>second</p></blockquote><p>text</p>"


def test_blank_line_closes_blockquote():
    html = render_markdown("> one\n\n> two")

    assert html == "<blockquote><p>one</p></blockquote><blockquote><p>two</p></blockquote>"


def test_blockquote_closes_list_and_paragraph():
    html = render_markdown("- item\n> quote\ntext\n> again")

    assert html == (
        "<ul><li>item</li></ul><blockquote><p>quote</p></blockquote>"
        "<p>text</p><blockquote><p>again</p></blockquote>"
    )


def test_unordered_list_with_both_markers():
    assert render_markdown("- one\n* two") == "<ul><li>one</li><li>two</li></ul>"


def test_ordered_list_accepts_any_digits():
    assert render_markdown("1. one\n7. two\n10. three") == (
        "<ol><li>one</li><li>two</li><li>three</li></ol>"
    )


def test_switching_list_kind_closes_previous_list():
    html = render_markdown("1. first\n- second\n2. third")

    assert html == "<ol><li>first</li></ol><ul><li>second</li></ul><ol><li>third</li></ol>"


def test_indented_items_stay_flat():
    assert render_markdown("- top\n    - nested") == "<ul><li>top</li><li>nested</li></ul>"


def test_paragraph_line_closes_list():
    assert render_markdown("- item\ntext") == "<ul><li>item</li></ul><p>text</p>"


def test_list_item_flushes_paragraph():
    assert render_markdown("text\n- item") == "<p>text</p><ul><li>item</li></ul>"


def test_heading_closes_list():
    assert render_markdown("- item\n## Next") == "<ul><li>item</li></ul><h2>Next</h2>"


def test_list_item_text_is_inline_rendered():
    html = render_markdown("- **bold** [[Note]]")

    assert html == '<ul><li><strong>bold</strong> <a href="#" data-wikilink="Note">Note</a></li></ul>'


def test_table_column_count_follows_header_and_separator():
    html = render_markdown("A | B\n--|--\n1 | 2 | 3")

    assert html == (
        "<table><thead><tr><th>A</th><th>B</th></tr></thead>"
        "<tbody><tr><td>1</td><td>2</td></tr></tbody></table>"
    )
    assert html.count("<th>") == 2
    assert html.count("<td>") == 2


def test_table_pads_missing_header_and_body_cells():
    html = render_markdown("| A |\n|---|:---:|\n| 1 |")

    assert html == (
        "<table><thead><tr><th>A</th><th></th></tr></thead>"
        "<tbody><tr><td>1</td><td></td></tr></tbody></table>"
    )


def test_table_body_stops_at_blank_line():
    html = render_markdown("A|B\n-|-\n1|2\n\nafter")

    assert html == (
        "<table><thead><tr><th>A</th><th>B</th></tr></thead>"
        "<tbody><tr><td>1</td><td>2</td></tr></tbody></table><p>after</p>"
    )


def test_table_body_stops_at_line_without_pipe():
    html = render_markdown("A|B\n-|-\n1|2\nplain")

    assert html.endswith("</tbody></table><p>plain</p>")


def test_table_body_stops_at_second_separator():
    html = render_markdown("A|B\n-|-\n1|2\n-|-")

    assert html == (
        "<table><thead><tr><th>A</th><th>B</th></tr></thead>"
        "<tbody><tr><td>1</td><td>2</td></tr></tbody></table><p>-|-</p>"
    )
    assert html.count("<tr>") == 2


def test_table_flushes_preceding_paragraph():
    html = render_markdown("intro\nA | B\n--|--")

    assert html == (
        "<p>intro</p><table><thead><tr><th>A</th><th>B</th></tr></thead>"
        "<tbody></tbody></table>"
    )


def test_table_cells_are_inline_rendered():
    html = render_markdown("Name | Link\n--- | ---\n*x* | [[Note\\|Alias]]")

    assert '<td><em>x</em></td>' in html
    assert '<td><a href="#" data-wikilink="Note">Alias</a></td>' in html


def test_pipe_line_without_separator_is_paragraph():
    assert render_markdown("a | b\nc | d") == "<p>a | b c | d</p>"


def test_separator_requires_a_dash():
    assert render_markdown("a | b\n:|:") == "<p>a | b :|:</p>"


def test_mixed_document():
    source = "\n".join(
        [
            "# Weekly notes",
            "",
            "Met with the team about [[Roadmap|the roadmap]] #planning",
            "and agreed on dates.",
            "",
            "1. Draft",
            "2. Review",
            "",
            "> Ship it",
            "",
            "---",
        ]
    )

    assert render_markdown(source) == (
        "<h1>Weekly notes</h1>"
        '<p>Met with the team about <a href="#" data-wikilink="Roadmap">the roadmap</a> '
        '<span class="tag" data-tag="planning">#planning</span> and agreed on dates.</p>'
        "<ol><li>Draft</li><li>Review</li></ol>"
        "<blockquote><p>Ship it</p></blockquote>"
        "<hr />"
    )


def test_render_is_idempotent():
    source = "`a` [[b]] #c [d](e) ![f](g)\n\n- `h` [[i]]"

    assert render_markdown(source) == render_markdown(source)
