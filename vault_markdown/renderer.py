"""Block-level Markdown rendering."""

from __future__ import annotations

from .constants import (
    BLANK_LINE_PATTERN,
    BLOCKQUOTE_PATTERN,
    CODE_FENCE_PATTERN,
    EMPTY_DOCUMENT_HTML,
    HEADING_PATTERN,
    HORIZONTAL_RULE_PATTERN,
    ORDERED_ITEM_PATTERN,
    TABLE_CELL_SPLIT_PATTERN,
    TABLE_SEPARATOR_PATTERN,
    UNORDERED_ITEM_PATTERN,
)
from .inline import escape_html, render_inline
from .models import BlockKind, RenderContext

_OPEN_TAGS = {
    BlockKind.ORDERED_LIST: "<ol>",
    BlockKind.UNORDERED_LIST: "<ul>",
    BlockKind.BLOCKQUOTE: "<blockquote>",
}

_CLOSE_TAGS = {
    BlockKind.ORDERED_LIST: "</ol>",
    BlockKind.UNORDERED_LIST: "</ul>",
    BlockKind.BLOCKQUOTE: "</blockquote>",
    BlockKind.CODE_FENCE: "</code></pre>",
}


def split_lines(text: str | None) -> list[str]:
    """Split a document into lines, normalizing ``\\r\\n`` and ``\\r``.

    Examples:
        split_lines("a\\r\\nb")  # ["a", "b"]
    """
    content = "" if text is None else str(text)
    return content.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def _flush_paragraph(ctx: RenderContext) -> None:
    if ctx.paragraph:
        # Soft-wrapped lines merge into one paragraph separated by spaces.
        ctx.emit(f"<p>{render_inline(' '.join(ctx.paragraph))}</p>")
    ctx.paragraph = []


def _close_block(ctx: RenderContext) -> None:
    """Close whatever block is open and reset the context to ``NONE``.

    Args:
        ctx: Render context to update.

    Examples:
        ctx = RenderContext(block=BlockKind.UNORDERED_LIST)
        _close_block(ctx)  # emits "</ul>"
    """
    if ctx.block is BlockKind.PARAGRAPH:
        _flush_paragraph(ctx)
    elif ctx.block in _CLOSE_TAGS:
        ctx.emit(_CLOSE_TAGS[ctx.block])

    ctx.block = BlockKind.NONE
    ctx.fence_info = ""


def _open_block(ctx: RenderContext, kind: BlockKind, fence_info: str = "") -> bool:
    """Make `kind` the open block, closing a different open block first.

    Args:
        ctx: Render context to update.
        kind: Block kind to open.
        fence_info: Info string when opening a code fence.

    Returns:
        bool: True when a new block was opened; False when `kind` was
            already open and the context is left untouched.

    Examples:
        ctx = RenderContext()
        _open_block(ctx, BlockKind.ORDERED_LIST)  # True, emits "<ol>"
        _open_block(ctx, BlockKind.ORDERED_LIST)  # False
    """
    if ctx.block is kind:
        return False

    _close_block(ctx)
    ctx.block = kind

    if kind is BlockKind.CODE_FENCE:
        ctx.fence_info = fence_info.strip()
        language = ctx.fence_info.split(maxsplit=1)[0] if ctx.fence_info else ""
        if language:
            ctx.emit(f'<pre><code class="language-{escape_html(language)}">')
        else:
            ctx.emit("<pre><code>")
    elif kind in _OPEN_TAGS:
        ctx.emit(_OPEN_TAGS[kind])

    return True


def _try_fence(ctx: RenderContext, line: str) -> bool:
    """Open or close a fenced code block on a fence line.

    Returns:
        bool: True when the line is a fence and was consumed.

    Examples:
        _try_fence(RenderContext(), "```python")  # True
    """
    fence_match = CODE_FENCE_PATTERN.match(line)
    if not fence_match:
        return False

    if ctx.block is BlockKind.CODE_FENCE:
        _close_block(ctx)
    else:
        _open_block(ctx, BlockKind.CODE_FENCE, fence_match.group("info"))
    return True


def _try_blank(ctx: RenderContext, line: str) -> bool:
    if not BLANK_LINE_PATTERN.match(line):
        return False
    _close_block(ctx)
    return True


def _try_horizontal_rule(ctx: RenderContext, line: str) -> bool:
    if not HORIZONTAL_RULE_PATTERN.match(line):
        return False
    _close_block(ctx)
    ctx.emit("<hr />")
    return True


def _try_blockquote(ctx: RenderContext, line: str) -> bool:
    """Append a ``>`` line to the open blockquote, opening one if needed.

    Each quoted line becomes its own paragraph inside the same blockquote.
    """
    quote_match = BLOCKQUOTE_PATTERN.match(line)
    if not quote_match:
        return False

    _open_block(ctx, BlockKind.BLOCKQUOTE)
    ctx.emit(f"<p>{render_inline(quote_match.group('text'))}</p>")
    return True


def _try_heading(ctx: RenderContext, line: str) -> bool:
    heading_match = HEADING_PATTERN.match(line)
    if not heading_match:
        return False

    _close_block(ctx)
    level = len(heading_match.group("hashes"))
    ctx.emit(f"<h{level}>{render_inline(heading_match.group('text').strip())}</h{level}>")
    return True


def is_table_separator(line: str) -> bool:
    """Check whether a line is a table separator row such as ``--|:--:``.

    Args:
        line: Line to inspect.

    Returns:
        bool: True when the trimmed line contains a pipe, only pipes,
            dashes, colons, dots and whitespace, and at least one dash.

    Examples:
        is_table_separator("| --- | :-: |")  # True
        is_table_separator("---")  # False, no pipe
    """
    stripped = line.strip()
    if "|" not in stripped:
        return False
    compact = "".join(stripped.split())
    if not TABLE_SEPARATOR_PATTERN.match(compact):
        return False
    return "-" in compact


def parse_table_row(line: str) -> list[str]:
    r"""Split a table row into trimmed cells.

    Outer pipes are optional. ``\|`` is kept as a literal pipe inside a cell.

    Examples:
        parse_table_row("| a | b |")  # ["a", "b"]
        parse_table_row(r"[[Note\|Alias]] | x")  # ["[[Note|Alias]]", "x"]
    """
    row = line.strip()
    if row.startswith("|"):
        row = row[1:]
    if row.endswith("|") and not row.endswith("\\|"):
        row = row[:-1]
    return [cell.strip().replace("\\|", "|") for cell in TABLE_CELL_SPLIT_PATTERN.split(row)]


def _is_table_body_row(line: str) -> bool:
    if BLANK_LINE_PATTERN.match(line) or "|" not in line:
        return False
    return not is_table_separator(line)


def _render_table(ctx: RenderContext, lines: list[str], index: int) -> int:
    """Emit a table whose header is at `index` and separator at `index + 1`.

    Args:
        ctx: Render context to update.
        lines: All document lines.
        index: Zero-based index of the header line.

    Returns:
        int: Index of the first line after the table.
    """
    _close_block(ctx)

    header_cells = parse_table_row(lines[index])
    separator_cells = parse_table_row(lines[index + 1])
    column_count = max(len(header_cells), len(separator_cells))
    header_cells += [""] * (column_count - len(header_cells))

    ctx.emit("<table><thead><tr>")
    for cell in header_cells:
        ctx.emit(f"<th>{render_inline(cell)}</th>")
    ctx.emit("</tr></thead><tbody>")

    index += 2
    while index < len(lines) and _is_table_body_row(lines[index]):
        row_cells = parse_table_row(lines[index])[:column_count]
        row_cells += [""] * (column_count - len(row_cells))
        ctx.emit("<tr>")
        for cell in row_cells:
            ctx.emit(f"<td>{render_inline(cell)}</td>")
        ctx.emit("</tr>")
        index += 1

    ctx.emit("</tbody></table>")
    return index


def _try_list_item(ctx: RenderContext, line: str) -> bool:
    """Emit a flat list item, switching list kind when needed.

    Indentation before the marker is ignored; items never nest.
    """
    ordered_match = ORDERED_ITEM_PATTERN.match(line)
    if ordered_match:
        _open_block(ctx, BlockKind.ORDERED_LIST)
        ctx.emit(f"<li>{render_inline(ordered_match.group('text'))}</li>")
        return True

    unordered_match = UNORDERED_ITEM_PATTERN.match(line)
    if unordered_match:
        _open_block(ctx, BlockKind.UNORDERED_LIST)
        ctx.emit(f"<li>{render_inline(unordered_match.group('text'))}</li>")
        return True

    return False


def _append_paragraph_line(ctx: RenderContext, line: str) -> None:
    _open_block(ctx, BlockKind.PARAGRAPH)
    ctx.paragraph.append(line.strip())


def render_markdown(text: str | None) -> str:
    """Render a Markdown note to an HTML fragment.

    Walks the lines once, dispatching each to the first matching block rule:
    fenced code, blank line, horizontal rule, blockquote, heading, table,
    list item, then paragraph text. Blocks never nest and opening one block
    closes the previous one. Inline text goes through `render_inline`.

    Args:
        text: The Markdown source; None is treated as an empty document.

    Returns:
        str: HTML fragment ready to inject into a container element, or the
            muted empty-document placeholder when nothing is emitted.

    Examples:
        render_markdown("# Title\\n\\nSee [[Other note]] #todo")
        render_markdown("   \\n")  # empty-document placeholder
    """
    lines = split_lines(text)
    ctx = RenderContext()

    index = 0
    while index < len(lines):
        line = lines[index]

        if _try_fence(ctx, line):
            index += 1
            continue

        # Verbatim inside fences
        if ctx.block is BlockKind.CODE_FENCE:
            ctx.emit(f"{escape_html(line)}\n")
            index += 1
            continue

        if (
            _try_blank(ctx, line)
            or _try_horizontal_rule(ctx, line)
            or _try_blockquote(ctx, line)
            or _try_heading(ctx, line)
        ):
            index += 1
            continue

        # Tables need one line of lookahead for the separator row
        if "|" in line and index + 1 < len(lines) and is_table_separator(lines[index + 1]):
            index = _render_table(ctx, lines, index)
            continue

        if not _try_list_item(ctx, line):
            _append_paragraph_line(ctx, line)
        index += 1

    _close_block(ctx)

    return ctx.html() or EMPTY_DOCUMENT_HTML
