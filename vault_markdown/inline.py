"""Inline Markdown rendering utilities."""

from __future__ import annotations

import html
from collections.abc import Callable
from re import Match
from urllib.parse import quote

from .constants import (
    BOLD_PATTERN,
    EXTERNAL_LINK_ATTRIBUTES,
    IMAGE_PATTERN,
    INLINE_CODE_PATTERN,
    ITALIC_PATTERN,
    LINK_PATTERN,
    PLACEHOLDER_DELIMITER,
    TAG_PATTERN,
    UNSAFE_URL_SCHEMES,
    URL_IGNORED_CHARACTERS,
    URL_TRIM_PATTERN,
    WIKILINK_PATTERN,
)

_HTML_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#39;",
    }
)

# Characters left alone by JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"

_URL_IGNORED = str.maketrans("", "", URL_IGNORED_CHARACTERS)


def escape_html(text: str | None) -> str:
    """Escape the five HTML-significant characters.

    Args:
        text: Text to escape; None is treated as an empty string.

    Returns:
        str: Text with ``& < > " '`` replaced by entities.

    Examples:
        escape_html("<b>&</b>")  # "&lt;b&gt;&amp;&lt;/b&gt;"
    """
    return ("" if text is None else str(text)).translate(_HTML_ESCAPES)


def safe_href(href: str | None) -> str:
    """Filter a link target through the URL safety check.

    Args:
        href: Raw link target.

    The href is normalized the way browsers read URLs before the scheme is
    checked: tabs and newlines are removed and control characters and
    whitespace are trimmed from both ends.

    Returns:
        str: The normalized href, or an empty string when it is empty or uses
            a ``javascript:``, ``data:`` or ``vbscript:`` scheme.

    Examples:
        safe_href(" https://example.com ")  # "https://example.com"
        safe_href("JavaScript:alert(1)")  # ""
        safe_href("java\\tscript:alert(1)")  # ""
    """
    raw = URL_TRIM_PATTERN.sub("", (href or "").translate(_URL_IGNORED))
    if raw.lower().startswith(UNSAFE_URL_SCHEMES):
        return ""
    return raw


def encode_uri_component(value: str) -> str:
    """Percent-encode a value the way browsers' ``encodeURIComponent`` does.

    Lone surrogates are encoded as their raw UTF-8 bytes instead of raising.
    """
    return quote(value.encode("utf-8", "surrogatepass"), safe=_URI_COMPONENT_SAFE)


class TokenBuffer:
    """Protect finished HTML fragments from later inline passes.

    Each fragment is swapped for a placeholder made of a NUL-delimited index.
    The buffer also keeps the Markdown source a fragment came from, so text
    that must stay raw (link targets, image alt text) can get it back.
    """

    def __init__(self) -> None:
        self._fragments: list[str] = []
        self._sources: list[str] = []

    def protect(self, fragment: str, source: str) -> str:
        placeholder = f"{PLACEHOLDER_DELIMITER}{len(self._fragments)}{PLACEHOLDER_DELIMITER}"
        self._fragments.append(fragment)
        self._sources.append(source)
        return placeholder

    def restore(self, text: str) -> str:
        # Later fragments may embed earlier placeholders, so walk backwards.
        for index in range(len(self._fragments) - 1, -1, -1):
            placeholder = f"{PLACEHOLDER_DELIMITER}{index}{PLACEHOLDER_DELIMITER}"
            text = text.replace(placeholder, self._fragments[index])
        return text

    def restore_source(self, text: str) -> str:
        for index in range(len(self._sources) - 1, -1, -1):
            placeholder = f"{PLACEHOLDER_DELIMITER}{index}{PLACEHOLDER_DELIMITER}"
            text = text.replace(placeholder, self._sources[index])
        return text


def _raw_attribute(tokens: TokenBuffer, escaped: str) -> str:
    """Recover the raw text of a value captured after escaping."""
    return tokens.restore_source(html.unescape(escaped))


def _render_code(tokens: TokenBuffer) -> Callable[[Match[str]], str]:
    def replace(match: Match[str]) -> str:
        return tokens.protect(f"<code>{escape_html(match.group(1))}</code>", match.group(0))

    return replace


def _render_wikilink(tokens: TokenBuffer) -> Callable[[Match[str]], str]:
    def replace(match: Match[str]) -> str:
        target_raw, pipe, label_raw = match.group(1).partition("|")
        target_raw = target_raw.strip()
        label_raw = (label_raw if pipe else target_raw).strip()
        file_target = target_raw.split("#", 1)[0].strip()
        label = escape_html(label_raw or target_raw)

        if not file_target:
            return tokens.protect(label, match.group(0))

        data = escape_html(encode_uri_component(tokens.restore_source(file_target)))
        return tokens.protect(f'<a href="#" data-wikilink="{data}">{label}</a>', match.group(0))

    return replace


def _render_tag(tokens: TokenBuffer) -> Callable[[Match[str]], str]:
    def replace(match: Match[str]) -> str:
        name = escape_html(match.group(1))
        return tokens.protect(f'<span class="tag" data-tag="{name}">#{name}</span>', match.group(0))

    return replace


def _render_image(tokens: TokenBuffer) -> Callable[[Match[str]], str]:
    def replace(match: Match[str]) -> str:
        alt = escape_html(_raw_attribute(tokens, match.group(1)))
        href = safe_href(_raw_attribute(tokens, match.group(2)))
        if not href:
            return alt
        fragment = f'<img src="{escape_html(href)}" alt="{alt}" />'
        return tokens.protect(fragment, html.unescape(match.group(0)))

    return replace


def _render_link(tokens: TokenBuffer) -> Callable[[Match[str]], str]:
    def replace(match: Match[str]) -> str:
        label = match.group(1)
        href = safe_href(_raw_attribute(tokens, match.group(2)))
        if not href:
            return label
        attributes = "" if href.startswith("#") else EXTERNAL_LINK_ATTRIBUTES
        fragment = f'<a href="{escape_html(href)}"{attributes}>{label}</a>'
        return tokens.protect(fragment, html.unescape(match.group(0)))

    return replace


def render_inline(text: str | None) -> str:
    """Render inline Markdown to an HTML fragment.

    Runs the inline passes in a fixed order: code spans, wikilinks, tags,
    escaping, bold, italic, images, links. Fragments produced before escaping
    are protected by placeholders and restored verbatim at the end.

    Args:
        text: Inline Markdown text; None is treated as an empty string.

    Returns:
        str: HTML fragment. Never raises; unrecognized syntax stays as
            escaped text.

    Examples:
        render_inline("**bold** and [[Note|alias]]")
        render_inline("[x](javascript:alert(1))")  # "x"
    """
    tokens = TokenBuffer()
    s = "" if text is None else str(text)
    s = s.replace(PLACEHOLDER_DELIMITER, "\ufffd")

    s = INLINE_CODE_PATTERN.sub(_render_code(tokens), s)
    s = WIKILINK_PATTERN.sub(_render_wikilink(tokens), s)
    s = TAG_PATTERN.sub(_render_tag(tokens), s)

    s = escape_html(s)

    s = BOLD_PATTERN.sub(r"<strong>\1</strong>", s)
    s = ITALIC_PATTERN.sub(r"<em>\1</em>", s)
    s = IMAGE_PATTERN.sub(_render_image(tokens), s)
    s = LINK_PATTERN.sub(_render_link(tokens), s)

    return tokens.restore(s)
