"""Resolution of wikilink targets to vault paths."""

from __future__ import annotations

from urllib.parse import unquote

from .filesystem import (
    LocalVaultStore,
    basename,
    has_extension,
    join_path,
    normalize_dir,
    parent_dir,
)


def decode_wikilink(data: str) -> str:
    """Decode the value of a rendered ``data-wikilink`` attribute.

    Examples:
        decode_wikilink("Note%20Name")  # "Note Name"
    """
    return unquote(data)


def strip_note_extension(name: str, extension: str) -> str:
    if name.lower().endswith(extension.lower()):
        return name[: -len(extension)]
    return name


def build_note_index(store: LocalVaultStore) -> dict[str, list[str]]:
    """Map lowercase note names (without extension) to their vault paths.

    Walks the whole vault depth-first in listing order, so the paths for a
    name are ordered deterministically.

    Args:
        store: Vault to index.

    Returns:
        dict[str, list[str]]: Note name keys mapped to every matching path.

    Examples:
        build_note_index(store)  # {"today": ["Journal/today.md"], ...}
    """
    extension = store.config.note_extension
    index: dict[str, list[str]] = {}
    pending = [""]

    while pending:
        directory = pending.pop()
        subdirectories = []
        for entry in store.list_dir(directory):
            if entry.is_dir:
                subdirectories.append(entry.path)
                continue
            if not entry.name.lower().endswith(extension.lower()):
                continue
            key = strip_note_extension(entry.name, extension).lower()
            index.setdefault(key, []).append(entry.path)
        # Reverse so the first subdirectory is walked next
        pending.extend(reversed(subdirectories))

    return index


def resolve_wikilink(
    store: LocalVaultStore,
    target: str,
    from_path: str | None = None,
    index: dict[str, list[str]] | None = None,
) -> str | None:
    """Find the note a wikilink target points to.

    The ``#anchor`` suffix is dropped and the configured note extension is
    appended when the target has none. A bare name is looked up next to
    `from_path` first, then anywhere in the vault by case-insensitive name.
    A target containing ``/`` is taken as a vault-relative path.

    Args:
        store: Vault to search.
        target: Decoded wikilink target, e.g. ``"Projects/Plan#Goals"``.
        from_path: Vault path of the note containing the link.
        index: Prebuilt result of `build_note_index`; built on demand when
            omitted.

    Returns:
        str | None: Vault-relative path of the note, or None when nothing
            matches.

    Raises:
        PathOutsideVaultError: If the target points outside the vault.

    Examples:
        resolve_wikilink(store, "Plan", from_path="Projects/index.md")
    """
    name = (target or "").strip().replace("\\", "/").lstrip("/")
    name = name.split("#", 1)[0].strip()
    if not name:
        return None

    if not has_extension(name):
        name += store.config.note_extension

    if "/" in name:
        candidate = normalize_dir(name)
        return candidate if store.resolve(candidate).is_file() else None

    same_dir_candidate = join_path(parent_dir(from_path or ""), name)
    if store.resolve(same_dir_candidate).is_file():
        return same_dir_candidate

    if index is None:
        index = build_note_index(store)
    key = strip_note_extension(basename(name), store.config.note_extension).lower()
    matches = index.get(key)
    return matches[0] if matches else None
