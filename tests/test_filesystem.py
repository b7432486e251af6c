from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from vault_markdown.config import VaultConfig
from vault_markdown.exceptions import (
    DestinationExistsError,
    FileTooLargeError,
    MissingParentError,
    NotAFileError,
    VaultError,
)
from vault_markdown.filesystem import (
    LocalVaultStore,
    basename,
    has_extension,
    join_path,
    normalize_dir,
    parent_dir,
)
from vault_markdown.models import EntryType


@pytest.mark.parametrize(
    "value, expected",
    [("", ""), (None, ""), ("/", ""), ("Notes/", "Notes"), ("Notes\\Sub//", "Notes/Sub")],
)
def test_normalize_dir(value, expected):
    assert normalize_dir(value) == expected


def test_path_helpers():
    assert parent_dir("Notes/Sub/a.md") == "Notes/Sub"
    assert parent_dir("a.md") == ""
    assert join_path("", "a.md") == "a.md"
    assert join_path("Notes/", "a.md") == "Notes/a.md"
    assert basename("Notes/a.md") == "a.md"
    assert has_extension("Notes/a.md")
    assert not has_extension("Notes/a")
    assert not has_extension(".hidden")


def test_missing_root_raises(tmp_path: Path):
    with pytest.raises(VaultError):
        LocalVaultStore(tmp_path / "missing")


def test_root_must_be_a_directory(tmp_path: Path):
    file_path = tmp_path / "file.md"
    file_path.write_text("x", encoding="utf-8")

    with pytest.raises(VaultError):
        LocalVaultStore(file_path)


def test_list_dir_orders_directories_first_and_hides_ignored(store: LocalVaultStore):
    entries = store.list_dir("")

    assert [(entry.name, entry.type) for entry in entries] == [
        ("Inbox", EntryType.DIR),
        ("Journal", EntryType.DIR),
        ("Projects", EntryType.DIR),
        ("readme.md", EntryType.FILE),
    ]
    assert [entry.path for entry in entries] == ["Inbox", "Journal", "Projects", "readme.md"]


def test_list_dir_sorts_names_case_insensitively(store: LocalVaultStore, vault: Path):
    (vault / "Projects" / "alpha.md").write_text("", encoding="utf-8")

    names = [entry.name for entry in store.list_dir("Projects/")]

    assert names == ["alpha.md", "index.md", "Plan.md"]


def test_list_dir_uses_relative_paths(store: LocalVaultStore):
    entries = store.list_dir("Journal")

    assert [entry.path for entry in entries] == ["Journal/2024"]
    assert entries[0].is_dir


def test_list_dir_respects_configured_ignores(vault: Path):
    store = LocalVaultStore(vault, VaultConfig(ignored_names=["Journal"]))

    names = [entry.name for entry in store.list_dir("")]

    assert "Journal" not in names
    assert ".obsidian" in names


def test_list_missing_directory_raises(store: LocalVaultStore):
    with pytest.raises(VaultError):
        store.list_dir("Nope")


def test_read_file(store: LocalVaultStore):
    assert store.read_file("Projects/Plan.md") == "# Plan\n\n- step one\n"


def test_read_directory_raises(store: LocalVaultStore):
    with pytest.raises(NotAFileError):
        store.read_file("Projects")


def test_read_missing_file_raises(store: LocalVaultStore):
    with pytest.raises(NotAFileError):
        store.read_file("Projects/missing.md")


def test_read_file_too_large(vault: Path):
    store = LocalVaultStore(vault, VaultConfig(max_file_size=4))

    with pytest.raises(FileTooLargeError) as exc_info:
        store.read_file("readme.md")

    assert exc_info.value.max_size == 4
    assert "readme.md" in str(exc_info.value)


def test_read_invalid_utf8_raises(store: LocalVaultStore, vault: Path):
    (vault / "binary.md").write_bytes(b"\xff\xfe\x00")

    with pytest.raises(VaultError, match="Invalid UTF-8"):
        store.read_file("binary.md")


def test_write_file_creates_and_replaces(store: LocalVaultStore, vault: Path):
    store.write_file("Inbox/new.md", "first")
    store.write_file("Inbox/new.md", "second")

    assert (vault / "Inbox" / "new.md").read_text(encoding="utf-8") == "second"
    assert sorted(path.name for path in (vault / "Inbox").iterdir()) == ["idea.md", "new.md"]


def test_write_file_keeps_line_endings(store: LocalVaultStore, vault: Path):
    store.write_file("crlf.md", "a\r\nb\n")

    assert (vault / "crlf.md").read_bytes() == b"a\r\nb\n"


def test_write_file_requires_parent(store: LocalVaultStore):
    with pytest.raises(MissingParentError):
        store.write_file("Missing/new.md", "x")


def test_write_file_refuses_directories(store: LocalVaultStore):
    with pytest.raises(NotAFileError):
        store.write_file("Projects", "x")
    with pytest.raises(NotAFileError):
        store.write_file("", "x")


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions required")
def test_write_file_preserves_permissions(store: LocalVaultStore, vault: Path):
    target = vault / "readme.md"
    target.chmod(0o600)

    store.write_file("readme.md", "# Changed\n")

    assert stat.S_IMODE(target.stat().st_mode) == 0o600
    assert target.read_text(encoding="utf-8") == "# Changed\n"


def test_write_file_warns_when_ownership_cannot_be_kept(
    vault: Path, monkeypatch: pytest.MonkeyPatch
):
    warnings: list[str] = []
    store = LocalVaultStore(vault, warn=warnings.append)

    def deny(*args, **kwargs):
        raise PermissionError("denied")

    monkeypatch.setattr(os, "chown", deny, raising=False)

    store.write_file("readme.md", "x")

    assert (vault / "readme.md").read_text(encoding="utf-8") == "x"
    assert len(warnings) == 1
    assert "ownership" in warnings[0]


def test_mkdir_creates_parents(store: LocalVaultStore, vault: Path):
    store.mkdir("Archive/2023/Q1/")
    store.mkdir("Archive/2023")

    assert (vault / "Archive" / "2023" / "Q1").is_dir()


def test_mkdir_over_file_raises(store: LocalVaultStore):
    with pytest.raises(VaultError):
        store.mkdir("readme.md")


def test_delete_file(store: LocalVaultStore, vault: Path):
    store.delete_file("Inbox/idea.md")

    assert not (vault / "Inbox" / "idea.md").exists()
    assert (vault / "Inbox").is_dir()


def test_delete_directory_raises(store: LocalVaultStore):
    with pytest.raises(NotAFileError):
        store.delete_file("Inbox")


def test_move_file(store: LocalVaultStore, vault: Path):
    store.move_file("Inbox/idea.md", "Projects/idea.md")

    assert not (vault / "Inbox" / "idea.md").exists()
    assert (vault / "Projects" / "idea.md").read_text(encoding="utf-8") == "# Idea\n\nSee [[Plan]].\n"


def test_move_onto_itself_is_noop(store: LocalVaultStore, vault: Path):
    store.move_file("readme.md", "readme.md")

    assert (vault / "readme.md").exists()


def test_move_never_overwrites(store: LocalVaultStore, vault: Path):
    with pytest.raises(DestinationExistsError):
        store.move_file("readme.md", "Projects/Plan.md")

    assert (vault / "Projects" / "Plan.md").read_text(encoding="utf-8") == "# Plan\n\n- step one\n"


def test_move_requires_destination_parent(store: LocalVaultStore):
    with pytest.raises(MissingParentError):
        store.move_file("readme.md", "Archive/readme.md")


def test_move_missing_source_raises(store: LocalVaultStore):
    with pytest.raises(NotAFileError):
        store.move_file("missing.md", "other.md")


def test_exists(store: LocalVaultStore):
    assert store.exists("Projects/Plan.md")
    assert store.exists("Projects")
    assert not store.exists("Projects/missing.md")


def test_is_ignored(store: LocalVaultStore):
    assert store.is_ignored(".git")
    assert store.is_ignored("")
    assert not store.is_ignored("Inbox")
