from pathlib import Path

import pytest
from click.testing import CliRunner

from vault_markdown.filesystem import LocalVaultStore


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture()
def vault(tmp_path: Path) -> Path:
    """Provides a small vault with nested notes and an ignored folder."""
    root = tmp_path / "vault"
    files = {
        "readme.md": "# Readme\n",
        "Inbox/idea.md": "# Idea\n\nSee [[Plan]].\n",
        "Projects/Plan.md": "# Plan\n\n- step one\n",
        "Projects/index.md": "See [[Plan|the plan]] #project\n",
        "Journal/2024/today.md": "Today\n",
        ".obsidian/app.json": "{}\n",
    }
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture()
def store(vault: Path) -> LocalVaultStore:
    return LocalVaultStore(vault)
