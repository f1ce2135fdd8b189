"""Configuration loading and management."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
import tomllib

logger = logging.getLogger(__name__)

# Files searched in each directory, with the tables read from them in priority order.
CONFIG_SOURCES = (
    ("pyproject.toml", ("tool.htmlplusplus",)),
    (".htmlplusplus.toml", ("htmlplusplus", "tool.htmlplusplus")),
)

BOOLEAN_SETTINGS = ("backticks_enabled", "require_closed_tags")
COUNT_SETTINGS = ("tab_size", "context_radius", "max_file_size")


@dataclass
class HtmlPlusPlusConfig:
    """Configuration for compiling HTML++ documents.

    Attributes:
        backticks_enabled: Whether bare backticks start inline code before any
            ``<enablebackticks>`` or ``<disablebackticks>`` tag is seen.
        default_language: Highlighter language for ``<code>`` tags that carry no
            ``language`` attribute.
        tab_size: Number of spaces a tab expands to inside code blocks. When
            None, each language's own tab width is used.
        require_closed_tags: Whether tags left open at the end of the input are
            an error instead of being ignored.
        context_radius: Characters shown on each side of a failure in error
            messages.
        max_file_size: Maximum input file size in bytes accepted by the CLI.

    Examples:
        HtmlPlusPlusConfig(backticks_enabled=True, default_language="python")
    """

    # Parsing
    backticks_enabled: bool = False
    require_closed_tags: bool = False

    # Highlighting
    default_language: str = "none"
    tab_size: int | None = None

    # Diagnostics and limits
    context_radius: int = 30
    max_file_size: int = 10 * 1024 * 1024


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`tab_size` must be a positive integer")
    """


def load_config(search_path: Path) -> HtmlPlusPlusConfig:
    """Load settings from the closest directory that configures htmlplusplus.

    Each directory from `search_path` up to the root is checked for a
    ``[tool.htmlplusplus]`` table in `pyproject.toml`, then for an
    ``[htmlplusplus]`` or ``[tool.htmlplusplus]`` table in `.htmlplusplus.toml`.
    Files that cannot be read or are not valid TOML are skipped.

    Args:
        search_path: Directory where the search starts, usually the one
            holding the document being compiled.

    Returns:
        HtmlPlusPlusConfig: The first configuration found, or the defaults.

    Raises:
        ConfigError: If a matching table is not a table or names unknown settings.

    Examples:
        load_config(Path("posts"))
    """
    start = search_path.resolve()
    for directory in (start, *start.parents):
        for filename, tables in CONFIG_SOURCES:
            config = _read_config_file(directory / filename, tables)
            if config is not None:
                return config
    return HtmlPlusPlusConfig()


def _read_config_file(config_file: Path, tables: tuple[str, ...]) -> HtmlPlusPlusConfig | None:
    if not config_file.is_file():
        return None
    try:
        with open(config_file, "rb") as stream:
            document = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError) as error:
        logger.debug("Skipping config file %s: %s", config_file, error)
        return None

    for table in tables:
        parent, _, name = table.rpartition(".")
        container = document.get(parent) if parent else document
        if isinstance(container, dict) and name in container:
            logger.debug("Using [%s] from %s", table, config_file)
            return _config_from_table(container[name], config_file, table)
    return None


def _config_from_table(settings: object, config_file: Path, table: str) -> HtmlPlusPlusConfig:
    if not isinstance(settings, dict):
        raise ConfigError(f"Invalid `[{table}]` settings in {config_file}: expected a table")

    known = {field.name for field in fields(HtmlPlusPlusConfig)}
    unknown = sorted(set(settings) - known)
    if unknown:
        raise ConfigError(
            f"Invalid `[{table}]` settings in {config_file}: unknown key(s) {', '.join(unknown)}"
        )
    return HtmlPlusPlusConfig(**settings)


def validate_config(config: HtmlPlusPlusConfig) -> None:
    """Check that every setting has a usable value.

    Raises:
        ConfigError: If a flag is not a boolean, a size or width is not a
            positive integer, or the default language has no highlighter.

    Examples:
        validate_config(HtmlPlusPlusConfig(tab_size=4))
    """
    # Imported here to keep config free of a module-level dependency on the highlighter.
    from .highlighter import SUPPORTED_LANGUAGES

    for name in BOOLEAN_SETTINGS:
        if not isinstance(getattr(config, name), bool):
            raise ConfigError(f"`{name}` must be a boolean")

    for name in COUNT_SETTINGS:
        value = getattr(config, name)
        if name == "tab_size" and value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{name}` must be an integer")
        if value <= 0:
            raise ConfigError(f"`{name}` must be a positive integer")

    language = config.default_language
    if not isinstance(language, str):
        raise ConfigError("`default_language` must be a string")
    if language.strip().lower() not in SUPPORTED_LANGUAGES:
        raise ConfigError(
            "`default_language` must be one of: " + ", ".join(sorted(SUPPORTED_LANGUAGES))
        )


def build_config(search_path: Path, **overrides: object) -> HtmlPlusPlusConfig:
    """Load configuration, apply command-line overrides, and validate the result.

    Args:
        search_path: Directory where the configuration search starts.
        overrides: Settings that replace loaded values; None means "not given".

    Returns:
        HtmlPlusPlusConfig: Validated configuration ready for compiling.

    Raises:
        ConfigError: If loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), default_language="python")
    """
    config = load_config(search_path)
    changes = {name: value for name, value in overrides.items() if value is not None}
    if changes:
        config = replace(config, **changes)
    validate_config(config)
    return config
