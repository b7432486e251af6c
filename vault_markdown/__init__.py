"""
vault-markdown: render and edit a vault of Markdown notes.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    vault-markdown --vault ~/notes render Inbox/idea.md

Library Usage:
    from pathlib import Path
    from vault_markdown import LocalVaultStore, render_markdown

    store = LocalVaultStore(Path("~/notes").expanduser())
    html = render_markdown(store.read_file("Inbox/idea.md"))
"""

from .config import ConfigError, VaultConfig, build_config
from .exceptions import (
    DestinationExistsError,
    FileTooLargeError,
    MissingParentError,
    NotAFileError,
    PathOutsideVaultError,
    UnsavedChangesError,
    VaultError,
)
from .filesystem import LocalVaultStore
from .inline import escape_html, render_inline, safe_href
from .models import EntryType, VaultEntry, ViewMode
from .renderer import render_markdown
from .session import EditorSession
from .wikilinks import build_note_index, resolve_wikilink

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "render_markdown",
    "render_inline",
    "escape_html",
    "safe_href",
    # Vault access
    "LocalVaultStore",
    "EditorSession",
    "build_note_index",
    "resolve_wikilink",
    # Data models
    "EntryType",
    "VaultEntry",
    "ViewMode",
    # Configuration
    "VaultConfig",
    "build_config",
    # Exceptions
    "ConfigError",
    "DestinationExistsError",
    "FileTooLargeError",
    "MissingParentError",
    "NotAFileError",
    "PathOutsideVaultError",
    "UnsavedChangesError",
    "VaultError",
    # Version
    "__version__",
]
