"""Filesystem-backed vault storage."""

from __future__ import annotations

import os
import stat
import tempfile
from collections.abc import Callable
from pathlib import Path, PurePosixPath

from .config import VaultConfig
from .exceptions import (
    DestinationExistsError,
    FileTooLargeError,
    MissingParentError,
    NotAFileError,
    PathOutsideVaultError,
    VaultError,
)
from .models import EntryType, VaultEntry


def normalize_dir(dir_path: str | None) -> str:
    """Normalize a vault-relative directory path; the root is ``""``.

    Examples:
        normalize_dir("/")  # ""
        normalize_dir("Notes/Projects//")  # "Notes/Projects"
    """
    if not dir_path or dir_path == "/":
        return ""
    return dir_path.replace("\\", "/").rstrip("/")


def parent_dir(rel_path: str) -> str:
    """Return the vault-relative parent directory of a path.

    Examples:
        parent_dir("Notes/today.md")  # "Notes"
        parent_dir("today.md")  # ""
    """
    parent = str(PurePosixPath(normalize_dir(rel_path)).parent)
    return "" if parent == "." else parent


def join_path(dir_path: str, name: str) -> str:
    directory = normalize_dir(dir_path)
    return f"{directory}/{name}" if directory else name


def basename(rel_path: str) -> str:
    return PurePosixPath(normalize_dir(rel_path)).name


def has_extension(rel_path: str) -> bool:
    """Check whether the last path component has a file extension.

    Dotfiles such as ``.hidden`` do not count as having an extension.
    """
    name = basename(rel_path)
    return "." in name and not name.startswith(".")


class LocalVaultStore:
    """CRUD primitives for a vault rooted in a local directory.

    Every operation takes vault-relative POSIX paths and refuses paths that
    resolve outside the root.

    Args:
        root: Vault root directory.
        config: Vault settings; defaults to a new `VaultConfig`.
        warn: Optional callback for non-fatal warnings.

    Raises:
        VaultError: If `root` is not an existing directory.

    Examples:
        store = LocalVaultStore(Path("~/notes").expanduser())
        store.write_file("Inbox/idea.md", "# Idea\\n")
        [entry.name for entry in store.list_dir("Inbox")]
    """

    def __init__(
        self,
        root: Path,
        config: VaultConfig | None = None,
        warn: Callable[[str], None] | None = None,
    ):
        try:
            self.root = Path(root).expanduser().resolve(strict=True)
        except OSError as error:
            raise VaultError(f"Vault root {root} does not exist.") from error
        if not self.root.is_dir():
            raise VaultError(f"Vault root {self.root} is not a directory.")

        self.config = config or VaultConfig()
        self.warn = warn
        self._ignored = set(self.config.ignored_names)

    def resolve(self, rel_path: str | None) -> Path:
        """Map a vault-relative path to an absolute path inside the root.

        Args:
            rel_path: Vault-relative path; backslashes are treated as slashes.

        Returns:
            Path: Absolute path under the vault root.

        Raises:
            PathOutsideVaultError: If the path contains NUL characters or
                resolves outside the vault.

        Examples:
            store.resolve("Notes/today.md")
            store.resolve("../secrets.md")  # raises PathOutsideVaultError
        """
        rel = (rel_path or "").replace("\\", "/")
        if "\0" in rel:
            raise PathOutsideVaultError(rel)

        resolved = (self.root / rel).resolve()
        try:
            resolved.relative_to(self.root)
        except ValueError as error:
            raise PathOutsideVaultError(rel) from error
        return resolved

    def exists(self, rel_path: str) -> bool:
        return self.resolve(rel_path).exists()

    def is_ignored(self, name: str) -> bool:
        return not name or name in self._ignored

    def list_dir(self, dir_path: str = "") -> list[VaultEntry]:
        """List the files and directories directly inside a vault directory.

        Ignored names, symlinks and special files are skipped. Directories
        come first, then files, each group sorted by name.

        Args:
            dir_path: Vault-relative directory; ``""`` is the root.

        Returns:
            list[VaultEntry]: Sorted entries.

        Raises:
            PathOutsideVaultError: If `dir_path` escapes the vault.
            VaultError: If the directory cannot be read.
        """
        directory = normalize_dir(dir_path)
        absolute = self.resolve(directory)

        entries: list[VaultEntry] = []
        try:
            with os.scandir(absolute) as iterator:
                for item in iterator:
                    if self.is_ignored(item.name):
                        continue
                    if item.is_dir(follow_symlinks=False):
                        entry_type = EntryType.DIR
                    elif item.is_file(follow_symlinks=False):
                        entry_type = EntryType.FILE
                    else:
                        continue
                    entries.append(
                        VaultEntry(name=item.name, path=join_path(directory, item.name), type=entry_type)
                    )
        except OSError as error:
            raise VaultError(f"Error listing {directory or '/'}: {error}") from error

        entries.sort(key=lambda entry: (not entry.is_dir, entry.name.casefold(), entry.name))
        return entries

    def _require_file(self, rel_path: str) -> tuple[Path, os.stat_result]:
        absolute = self.resolve(rel_path)
        try:
            stat_result = os.stat(absolute, follow_symlinks=False)
        except OSError as error:
            raise NotAFileError(rel_path) from error
        if not stat.S_ISREG(stat_result.st_mode):
            raise NotAFileError(rel_path)
        return absolute, stat_result

    def read_file(self, rel_path: str) -> str:
        """Read a note as UTF-8 text.

        Raises:
            NotAFileError: If the path is missing or not a regular file.
            FileTooLargeError: If the file exceeds ``config.max_file_size``.
            VaultError: If the file cannot be read or decoded.
        """
        absolute, stat_result = self._require_file(rel_path)
        if stat_result.st_size > self.config.max_file_size:
            raise FileTooLargeError(rel_path, self.config.max_file_size)

        try:
            return absolute.read_text(encoding="UTF-8")
        except UnicodeDecodeError as error:
            raise VaultError(f"Invalid UTF-8 sequence in {rel_path}: {error}") from error
        except OSError as error:
            raise VaultError(f"Error accessing {rel_path}: {error}") from error

    def write_file(self, rel_path: str, content: str) -> None:
        """Atomically replace (or create) a note with `content`.

        The new text goes to a temporary file in the same directory, which is
        then swapped in with `os.replace`. Permissions of an existing file are
        kept; ownership is kept when the platform and privileges allow it.

        Raises:
            MissingParentError: If the parent directory does not exist.
            NotAFileError: If the target exists but is not a regular file.
            VaultError: If writing fails.
        """
        absolute = self.resolve(rel_path)
        if absolute == self.root:
            raise NotAFileError(rel_path)
        if not absolute.parent.is_dir():
            raise MissingParentError(rel_path)

        existing: os.stat_result | None = None
        if absolute.exists():
            _, existing = self._require_file(rel_path)

        temp_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w", encoding="UTF-8", newline="", delete=False, dir=absolute.parent
            ) as tmp_file:
                temp_path = Path(tmp_file.name)
                tmp_file.write(content)
                tmp_file.flush()
                os.fsync(tmp_file.fileno())

                if existing is not None:
                    os.chmod(tmp_file.name, stat.S_IMODE(existing.st_mode))
                    self._preserve_ownership(tmp_file.name, existing, rel_path)
                else:
                    os.chmod(tmp_file.name, 0o666 & ~_current_umask())

            os.replace(temp_path, absolute)
        except OSError as error:
            raise VaultError(f"Error writing {rel_path}: {error}") from error
        finally:
            if temp_path is not None:
                try:
                    temp_path.unlink(missing_ok=True)
                except OSError:
                    pass

    def _preserve_ownership(self, temp_name: str, existing: os.stat_result, rel_path: str) -> None:
        uid = getattr(existing, "st_uid", None)
        gid = getattr(existing, "st_gid", None)
        if uid is None or gid is None or not hasattr(os, "chown"):
            return
        try:
            os.chown(temp_name, uid, gid)
        except PermissionError:
            if self.warn is not None:
                self.warn(
                    f"Warning: Could not preserve file ownership for {rel_path} "
                    "(requires elevated privileges)"
                )

    def mkdir(self, rel_path: str) -> None:
        """Create a directory and any missing parents."""
        absolute = self.resolve(normalize_dir(rel_path))
        try:
            absolute.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise VaultError(f"Error creating {rel_path}: {error}") from error

    def delete_file(self, rel_path: str) -> None:
        """Delete a note.

        Raises:
            NotAFileError: If the path is missing or not a regular file.
        """
        absolute, _ = self._require_file(rel_path)
        try:
            absolute.unlink()
        except OSError as error:
            raise VaultError(f"Error deleting {rel_path}: {error}") from error

    def move_file(self, source: str, destination: str) -> None:
        """Move or rename a note without overwriting anything.

        Moving a file onto itself is a no-op.

        Raises:
            NotAFileError: If `source` is missing or not a regular file.
            MissingParentError: If the destination directory does not exist.
            DestinationExistsError: If `destination` already exists.
        """
        if normalize_dir(source) == normalize_dir(destination):
            return

        source_path, _ = self._require_file(source)
        destination_path = self.resolve(destination)
        if not destination_path.parent.is_dir():
            raise MissingParentError(destination)
        if destination_path.exists():
            raise DestinationExistsError(destination)

        try:
            os.rename(source_path, destination_path)
        except OSError as error:
            raise VaultError(f"Error moving {source} to {destination}: {error}") from error


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask
