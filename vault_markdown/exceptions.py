"""Package-specific exception types."""

from __future__ import annotations


class VaultError(OSError):
    """Base class for vault storage errors.

    Represents errors encountered while accessing files inside a vault.
    """


class PathOutsideVaultError(VaultError):
    """Raised when a relative path escapes the vault root.

    Args:
        path: The offending vault-relative path.
    """

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Path escapes vault: {path!r}")


class NotAFileError(VaultError):
    """Raised when an operation expects a regular file.

    Args:
        path: Vault-relative path that is missing or not a regular file.
    """

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Not a file: {path}")


class MissingParentError(VaultError):
    """Raised when the parent directory of a target does not exist.

    Args:
        path: Vault-relative path whose parent directory is missing.
    """

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Parent directory not found for {path}")


class DestinationExistsError(VaultError):
    """Raised when a move would overwrite an existing entry.

    Args:
        path: Vault-relative destination path.
    """

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Destination already exists: {path}")


class FileTooLargeError(VaultError):
    """Raised when a note exceeds the configured maximum size.

    Args:
        path: Vault-relative path of the note.
        max_size: Maximum allowed size in bytes.
    """

    def __init__(self, path: str, max_size: int):
        self.path = path
        self.max_size = max_size
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return f"{self.path} exceeds the maximum allowed size of {self.max_size} bytes."


class UnsavedChangesError(RuntimeError):
    """Raised when switching notes would discard unsaved edits.

    Args:
        path: Vault-relative path of the note with unsaved edits.
    """

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{path} has unsaved changes")
