"""
Browse, edit and render the Markdown notes of a vault.
Every command works on paths relative to the vault root.
"""

from __future__ import annotations

from pathlib import Path

import click

from .config import ConfigError, build_config
from .exceptions import VaultError
from .filesystem import LocalVaultStore
from .renderer import render_markdown
from .wikilinks import resolve_wikilink

__all__ = ["cli"]


def _warn(message: str) -> None:
    click.echo(message, err=True)


def _store(ctx: click.Context) -> LocalVaultStore:
    return ctx.obj


@click.group()
@click.version_option(package_name="vault-markdown")
@click.option(
    "--vault",
    "vault_path",
    envvar="OBSIDIAN_VAULT",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    show_default=True,
    help="Vault root directory",
)
@click.option("--max-file-size", type=int, help="Maximum note size in bytes")
@click.pass_context
def cli(ctx: click.Context, vault_path: str, max_file_size: int | None = None):
    """
    Entry point for the vault-markdown commands.

    Args:
        vault_path: Vault root directory (``OBSIDIAN_VAULT`` when unset).
        max_file_size: Override for the maximum note size.

    Raises:
        click.BadParameter: If the configuration is invalid.
        click.ClickException: If the vault root cannot be opened.

    Examples:
        vault-markdown --vault ~/notes render Inbox/idea.md
    """
    root = Path(vault_path).expanduser()
    try:
        config = build_config(root, max_file_size=max_file_size)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        ctx.obj = LocalVaultStore(root, config, warn=_warn)
    except VaultError as error:
        raise click.ClickException(str(error)) from error


@cli.command()
@click.argument("note")
@click.pass_context
def render(ctx: click.Context, note: str):
    """Print NOTE rendered as an HTML fragment."""
    try:
        content = _store(ctx).read_file(note)
    except VaultError as error:
        raise click.ClickException(str(error)) from error
    click.echo(render_markdown(content))


@cli.command(name="ls")
@click.argument("directory", default="")
@click.option("--filter", "query", help="Only show entries whose path contains this text")
@click.pass_context
def list_command(ctx: click.Context, directory: str, query: str | None = None):
    """List DIRECTORY, folders first; folders end with a slash."""
    try:
        entries = _store(ctx).list_dir(directory)
    except VaultError as error:
        raise click.ClickException(str(error)) from error

    needle = (query or "").strip().lower()
    for entry in entries:
        if needle and needle not in entry.path.lower():
            continue
        click.echo(f"{entry.path}/" if entry.is_dir else entry.path)


@cli.command()
@click.argument("note")
@click.pass_context
def cat(ctx: click.Context, note: str):
    """Print the raw Markdown of NOTE."""
    try:
        content = _store(ctx).read_file(note)
    except VaultError as error:
        raise click.ClickException(str(error)) from error
    click.echo(content, nl=False)


@cli.command()
@click.argument("note")
@click.pass_context
def write(ctx: click.Context, note: str):
    """Replace NOTE with text read from standard input."""
    content = click.get_text_stream("stdin").read()
    try:
        _store(ctx).write_file(note, content)
    except VaultError as error:
        raise click.ClickException(str(error)) from error


@cli.command()
@click.argument("directory")
@click.pass_context
def mkdir(ctx: click.Context, directory: str):
    """Create DIRECTORY and any missing parents."""
    try:
        _store(ctx).mkdir(directory)
    except VaultError as error:
        raise click.ClickException(str(error)) from error


@cli.command()
@click.argument("note")
@click.pass_context
def rm(ctx: click.Context, note: str):
    """Delete NOTE."""
    try:
        _store(ctx).delete_file(note)
    except VaultError as error:
        raise click.ClickException(str(error)) from error


@cli.command()
@click.argument("source")
@click.argument("destination")
@click.pass_context
def mv(ctx: click.Context, source: str, destination: str):
    """Move SOURCE to DESTINATION without overwriting."""
    try:
        _store(ctx).move_file(source, destination)
    except VaultError as error:
        raise click.ClickException(str(error)) from error


@cli.command()
@click.argument("target")
@click.option("--from", "from_path", help="Note that contains the link")
@click.pass_context
def resolve(ctx: click.Context, target: str, from_path: str | None = None):
    """Print the vault path a [[TARGET]] wikilink opens."""
    try:
        path = resolve_wikilink(_store(ctx), target, from_path=from_path)
    except VaultError as error:
        raise click.ClickException(str(error)) from error

    if path is None:
        _warn(f"Link not found: [[{target}]]")
        ctx.exit(1)
    click.echo(path)


if __name__ == "__main__":
    cli()
