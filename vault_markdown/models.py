"""Data models for vault-markdown."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class BlockKind(Enum):
    """Block kinds the renderer can hold open while scanning lines.

    Only one block is open at a time; opening a different kind closes the
    current one first.

    Attributes:
        NONE: No block is open.
        PARAGRAPH: Lines are being buffered into a paragraph.
        ORDERED_LIST: An ``<ol>`` is open.
        UNORDERED_LIST: A ``<ul>`` is open.
        BLOCKQUOTE: A ``<blockquote>`` is open.
        CODE_FENCE: Inside a fenced code block.
    """

    NONE = auto()
    PARAGRAPH = auto()
    ORDERED_LIST = auto()
    UNORDERED_LIST = auto()
    BLOCKQUOTE = auto()
    CODE_FENCE = auto()


@dataclass
class RenderContext:
    """Encapsulate renderer state while walking Markdown lines.

    Attributes:
        block: Kind of the currently open block.
        paragraph: Trimmed lines buffered for the pending paragraph.
        fence_info: Info string of the open code fence, if any.
        parts: HTML fragments emitted so far, joined once rendering ends.
    """

    block: BlockKind = BlockKind.NONE
    paragraph: list[str] = field(default_factory=list)
    fence_info: str = ""
    parts: list[str] = field(default_factory=list)

    def emit(self, fragment: str) -> None:
        self.parts.append(fragment)

    def html(self) -> str:
        return "".join(self.parts)


class EntryType(str, Enum):
    """Type of a vault listing entry."""

    FILE = "file"
    DIR = "dir"


@dataclass(frozen=True)
class VaultEntry:
    """A single child returned by a directory listing.

    Attributes:
        name: Base name of the entry.
        path: Vault-relative POSIX path of the entry.
        type: Whether the entry is a file or a directory.
    """

    name: str
    path: str
    type: EntryType

    @property
    def is_dir(self) -> bool:
        return self.type is EntryType.DIR


class ViewMode(Enum):
    """Which surface of the editor session is showing."""

    EDIT = auto()
    PREVIEW = auto()
