"""Constants used across the vault-markdown package."""

from __future__ import annotations

import re

EMPTY_DOCUMENT_HTML = '<div class="muted">Empty document. Click to edit…</div>'

# Block patterns
CODE_FENCE_PATTERN = re.compile(r"^```(?P<info>.*)$")
BLANK_LINE_PATTERN = re.compile(r"^\s*$")
HORIZONTAL_RULE_PATTERN = re.compile(r"^\s*(?:---|\*\*\*)\s*$")
BLOCKQUOTE_PATTERN = re.compile(r"^>\s?(?P<text>.*)$")
HEADING_PATTERN = re.compile(r"^(?P<hashes>#{1,4})\s+(?P<text>.*)$")
ORDERED_ITEM_PATTERN = re.compile(r"^\s*\d+\.\s+(?P<text>.*)$")
UNORDERED_ITEM_PATTERN = re.compile(r"^\s*[-*]\s+(?P<text>.*)$")
TABLE_SEPARATOR_PATTERN = re.compile(r"^[|\-:.]+$")
TABLE_CELL_SPLIT_PATTERN = re.compile(r"(?<!\\)\|")

# Inline patterns
INLINE_CODE_PATTERN = re.compile(r"`([^`]+)`")
WIKILINK_PATTERN = re.compile(r"\[\[([^\]]+)\]\]")
TAG_PATTERN = re.compile(r"(?<![\w/])#([\w/-]+)")
BOLD_PATTERN = re.compile(r"\*\*([^*]+)\*\*")
ITALIC_PATTERN = re.compile(r"\*([^*]+)\*")
IMAGE_PATTERN = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")
LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")

# Placeholders wrap a token index in NUL characters; NULs in input become U+FFFD.
PLACEHOLDER_DELIMITER = "\x00"

UNSAFE_URL_SCHEMES = ("javascript:", "data:", "vbscript:")
# Browsers drop these anywhere in a URL and trim C0 controls and spaces at both ends
URL_IGNORED_CHARACTERS = "\t\n\r"
URL_TRIM_PATTERN = re.compile(r"^[\x00-\x20\s]+|[\x00-\x20\s]+$")
EXTERNAL_LINK_ATTRIBUTES = ' rel="noreferrer noopener" target="_blank"'

# Vault defaults
DEFAULT_IGNORED_NAMES = (".obsidian", ".git", "node_modules", ".trash", ".DS_Store")
DEFAULT_NOTE_EXTENSION = ".md"
DEFAULT_MAX_FILE_SIZE = 5 * 1024 * 1024
DEFAULT_AUTOSAVE_DELAY_MS = 1200
