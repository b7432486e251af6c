"""Configuration loading and management."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from .constants import (
    DEFAULT_AUTOSAVE_DELAY_MS,
    DEFAULT_IGNORED_NAMES,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_NOTE_EXTENSION,
)

MAX_FILE_SIZE_ENV_VAR = "VAULT_MARKDOWN_MAX_FILE_SIZE"


@dataclass
class VaultConfig:
    """Settings for browsing and editing a vault.

    Attributes:
        ignored_names: Entry names hidden from directory listings.
        note_extension: Extension appended to wikilink targets that have none.
        max_file_size: Maximum size in bytes of a note that will be read.
        autosave_delay_ms: Quiet period after the last edit before an
            editor session is due for autosave.

    Examples:
        VaultConfig(ignored_names=[".git"], autosave_delay_ms=500)
    """

    ignored_names: list[str] = field(default_factory=lambda: list(DEFAULT_IGNORED_NAMES))
    note_extension: str = DEFAULT_NOTE_EXTENSION
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    autosave_delay_ms: int = DEFAULT_AUTOSAVE_DELAY_MS


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`max_file_size` must be a positive integer")
    """


def load_config(search_path: Path) -> VaultConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.vault-markdown]`` table from `pyproject.toml` and the
    ``[vault-markdown]`` or ``[tool.vault-markdown]`` table from
    `.vault-markdown.toml` when present. TOML files that cannot be read or
    decoded are skipped.

    Args:
        search_path: Directory used as the starting point for lookup,
            usually the vault root.

    Returns:
        VaultConfig: Loaded configuration, or defaults when nothing is found.

    Raises:
        ConfigError: If a matching table is not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("~/notes").expanduser())
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "vault-markdown")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".vault-markdown.toml",
            table_paths=[("vault-markdown",), ("tool", "vault-markdown")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return VaultConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> VaultConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> VaultConfig:
    table_display = ".".join(table_path)

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    try:
        return VaultConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def validate_config(config: VaultConfig) -> None:
    """Validate a `VaultConfig` instance.

    Args:
        config: Configuration to validate.

    Raises:
        ConfigError: If numeric settings are not positive integers, the note
            extension is malformed, or ignored names are not strings.

    Examples:
        validate_config(VaultConfig(max_file_size=1024))
    """
    _ensure_integers(
        {
            "max_file_size": config.max_file_size,
            "autosave_delay_ms": config.autosave_delay_ms,
        }
    )
    _ensure_positive(
        {
            "max_file_size": config.max_file_size,
            "autosave_delay_ms": config.autosave_delay_ms,
        }
    )

    if not isinstance(config.note_extension, str) or len(config.note_extension) < 2:
        raise ConfigError("`note_extension` must be a non-empty extension such as `.md`")
    if not config.note_extension.startswith("."):
        raise ConfigError("`note_extension` must start with a dot")

    if not isinstance(config.ignored_names, (list, tuple)) or not all(
        isinstance(name, str) for name in config.ignored_names
    ):
        raise ConfigError("`ignored_names` must be a list of strings")


def apply_overrides(config: VaultConfig, **overrides: object) -> VaultConfig:
    """Apply override values to a `VaultConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by field name; None values are ignored.

    Returns:
        VaultConfig: Updated configuration, or `config` itself when nothing
            changes.

    Raises:
        TypeError: If an override name is not defined on `VaultConfig`.

    Examples:
        apply_overrides(config, max_file_size=2048)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Resolve the maximum note size, honoring the environment override.

    Args:
        default: Fallback value in bytes when the environment variable is unset.

    Returns:
        int: Maximum allowed file size in bytes.

    Raises:
        ConfigError: If the environment value is not a positive integer.

    Examples:
        os.environ["VAULT_MARKDOWN_MAX_FILE_SIZE"] = "204800"
        limit = get_max_file_size(default=102400)
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return default

    try:
        max_size = int(env_value)
    except ValueError as error:
        error_message = (
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {env_value} (expected positive integer)"
        )
        raise ConfigError(error_message) from error

    if max_size <= 0:
        raise ConfigError(f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {max_size}.")

    return max_size


def build_config(search_path: Path, **overrides: object) -> VaultConfig:
    """Load, override, and validate configuration.

    The ``VAULT_MARKDOWN_MAX_FILE_SIZE`` environment variable takes precedence
    over the file value; explicit overrides take precedence over both.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by field name; None values are ignored.

    Returns:
        VaultConfig: Validated configuration.

    Raises:
        ConfigError: If loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), autosave_delay_ms=500)
    """
    config = load_config(search_path)
    validate_config(config)
    config = replace(config, max_file_size=get_max_file_size(default=config.max_file_size))
    try:
        config = apply_overrides(config, **overrides)
    except TypeError as error:
        raise ConfigError(str(error)) from error
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
