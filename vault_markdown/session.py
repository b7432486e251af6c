"""Editor session state for the edit/preview loop."""

from __future__ import annotations

import time

from .exceptions import DestinationExistsError, UnsavedChangesError
from .filesystem import LocalVaultStore, normalize_dir
from .models import ViewMode
from .renderer import render_markdown
from .wikilinks import build_note_index, decode_wikilink, resolve_wikilink

NO_FILE_HTML = '<div class="muted">Select a file on the left…</div>'


class EditorSession:
    """Single owner of the editor state for one vault.

    All state changes go through the methods below; hosts read the
    attributes but never assign them.

    Attributes:
        store: Vault backing the session.
        active_path: Vault path of the open note, or None.
        content: Current editor text.
        saved_content: Text as last read from or written to the vault.
        mode: Whether the editor or the rendered preview is showing.
        last_edit_at: Monotonic time of the last unsaved edit, or None.

    Examples:
        session = EditorSession(store)
        session.open("Inbox/idea.md")
        session.edit("# Idea\\n\\nSee [[Plan]]")
        html = session.preview()
    """

    def __init__(self, store: LocalVaultStore):
        self.store = store
        self.active_path: str | None = None
        self.content = ""
        self.saved_content = ""
        self.mode = ViewMode.PREVIEW
        self.last_edit_at: float | None = None
        self._note_index: dict[str, list[str]] | None = None

    @property
    def dirty(self) -> bool:
        return self.active_path is not None and self.content != self.saved_content

    @property
    def autosave_delay(self) -> float:
        return self.store.config.autosave_delay_ms / 1000

    def open(self, path: str, discard_changes: bool = False) -> str:
        """Load a note and show its preview.

        Args:
            path: Vault-relative path of the note.
            discard_changes: Drop unsaved edits of the current note instead
                of refusing.

        Returns:
            str: Rendered preview of the opened note.

        Raises:
            UnsavedChangesError: If the current note is dirty and
                `discard_changes` is False.
            VaultError: If the note cannot be read.
        """
        if self.dirty and not discard_changes:
            raise UnsavedChangesError(self.active_path)

        content = self.store.read_file(path)
        self.active_path = normalize_dir(path)
        self.content = content
        self.saved_content = content
        self.last_edit_at = None
        return self.preview()

    def edit(self, text: str, now: float | None = None) -> None:
        if self.active_path is None:
            return
        self.content = text
        self.mode = ViewMode.EDIT
        self.last_edit_at = time.monotonic() if now is None else now

    def preview(self) -> str:
        self.mode = ViewMode.PREVIEW
        if self.active_path is None:
            return NO_FILE_HTML
        return render_markdown(self.content)

    def show_editor(self) -> None:
        if self.active_path is not None:
            self.mode = ViewMode.EDIT

    def save(self) -> None:
        """Write the editor text back to the vault and switch to preview."""
        self._write()
        self.mode = ViewMode.PREVIEW

    def _write(self) -> None:
        if self.active_path is None:
            return
        self.store.write_file(self.active_path, self.content)
        self.saved_content = self.content
        self.last_edit_at = None

    def autosave_deadline(self) -> float | None:
        """Monotonic time at which unsaved edits become due for autosave."""
        if not self.dirty or self.last_edit_at is None:
            return None
        return self.last_edit_at + self.autosave_delay

    def autosave(self, now: float | None = None) -> bool:
        """Save when the autosave deadline has passed.

        The view mode is left alone so autosave never interrupts typing.

        Returns:
            bool: True when the note was written.
        """
        deadline = self.autosave_deadline()
        current = time.monotonic() if now is None else now
        if deadline is None or current < deadline:
            return False
        self._write()
        return True

    def follow_wikilink(self, data: str, discard_changes: bool = False) -> str | None:
        """Open the note behind a clicked ``data-wikilink`` value.

        Args:
            data: URL-encoded target from the rendered anchor.
            discard_changes: Passed through to `open`.

        Returns:
            str | None: Path of the opened note, or None when the link does
                not resolve (the current note stays open).
        """
        if self.active_path is None:
            return None
        if self._note_index is None:
            self._note_index = build_note_index(self.store)

        path = resolve_wikilink(
            self.store, decode_wikilink(data), from_path=self.active_path, index=self._note_index
        )
        if path is None:
            return None
        self.open(path, discard_changes=discard_changes)
        return path

    def create_note(self, path: str, discard_changes: bool = False) -> str:
        """Create an empty note and open it.

        Returns:
            str: Rendered preview of the new note.

        Raises:
            UnsavedChangesError: If the current note is dirty and
                `discard_changes` is False.
            DestinationExistsError: If something already exists at `path`.
        """
        if self.dirty and not discard_changes:
            raise UnsavedChangesError(self.active_path)
        if self.store.exists(path):
            raise DestinationExistsError(path)
        self.store.write_file(path, "")
        self._note_index = None
        return self.open(path, discard_changes=True)

    def create_folder(self, path: str) -> None:
        self.store.mkdir(path)
        self._note_index = None

    def delete_note(self, path: str) -> None:
        """Delete a note, closing it when it is the active one."""
        self.store.delete_file(path)
        self._note_index = None
        if normalize_dir(path) == self.active_path:
            self._close()

    def move_note(self, source: str, destination: str) -> None:
        """Move a note, following it when it is the active one."""
        self.store.move_file(source, destination)
        self._note_index = None
        if normalize_dir(source) == self.active_path:
            self.active_path = normalize_dir(destination)

    def _close(self) -> None:
        self.active_path = None
        self.content = ""
        self.saved_content = ""
        self.last_edit_at = None
        self.mode = ViewMode.PREVIEW
