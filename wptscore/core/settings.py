"""wptscore configuration management.

Configuration is loaded from multiple sources with the following priority
(highest to lowest):
1. Explicit overrides (CLI arguments, keyword arguments)
2. Environment variables (with WPTSCORE_ prefix)
3. Configuration file (wptscore.config.yaml)
4. Default values

Example usage:
    from wptscore.core.settings import get_settings

    settings = get_settings()
    print(settings.css2_focus_folders)

Environment variable support:
    WPTSCORE_LOGGING__LEVEL=DEBUG
    WPTSCORE_CSS2_FOCUS_FOLDERS='["floats", "linebox"]'
    WPTSCORE_LOGGING__JSON_OUTPUT=true
"""

import logging
from contextvars import ContextVar
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

logger = logging.getLogger(__name__)

# Default config file names to search for
CONFIG_FILE_NAMES = ["wptscore.config.yaml", "wptscore.config.yml"]

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_CSS2_FOCUS_FOLDERS = (
    "abspos",
    "box-display",
    "floats",
    "floats-clear",
    "linebox",
    "margin-padding-clear",
    "normal-flow",
    "positioning",
)

# YAML file consulted while a settings instance is being built
_config_file: ContextVar[Path | None] = ContextVar("config_file", default=None)


def _find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find configuration file by searching current directory and parents.

    Args:
        start_dir: Directory to start search from.
            Defaults to current working directory.

    Returns:
        Path to config file if found, None otherwise.
    """
    search_dir = start_dir or Path.cwd()

    for _ in range(10):
        for filename in CONFIG_FILE_NAMES:
            config_path = search_dir / filename
            if config_path.exists():
                return config_path

        parent = search_dir.parent
        if parent == search_dir:
            break
        search_dir = parent

    return None


def _validate_log_level(value: str) -> str:
    upper_v = value.upper()
    if upper_v not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level: {value}. Must be one of {sorted(VALID_LOG_LEVELS)}"
        )
    return upper_v


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_output: bool | None = Field(
        default=None,
        description="Output logs in JSON format. Auto-detected from the TTY if unset",
    )
    file: str | None = Field(
        default=None,
        description="Log file path (optional)",
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        return _validate_log_level(v)


class WPTScoreSettings(BaseSettings):
    """Main wptscore configuration settings.

    Example:
        settings = WPTScoreSettings()
        print(settings.logging.level)

        settings = WPTScoreSettings(css2_focus_folders=["floats"])
        print(settings.logging.json_output)
    """

    model_config = SettingsConfigDict(
        env_prefix="WPTSCORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    css2_focus_folders: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CSS2_FOCUS_FOLDERS),
        description="Folders under /css/CSS2/ that form the CSS2 focus area",
    )
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("css2_focus_folders")
    @classmethod
    def validate_css2_focus_folders(cls, v: list[str]) -> list[str]:
        """Folders must be single, non-empty, unique path segments."""
        if not v:
            raise ValueError("css2_focus_folders must not be empty")
        for folder in v:
            if not folder or "/" in folder:
                raise ValueError(
                    f"Invalid CSS2 focus folder {folder!r}: "
                    "expected a single path segment"
                )
        if len(set(v)) != len(v):
            raise ValueError("css2_focus_folders must not contain duplicates")
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Slot the YAML config file between the environment and defaults."""
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
        ]
        config_file = _config_file.get()
        if config_file is not None:
            sources.append(
                YamlConfigSettingsSource(settings_cls, yaml_file=config_file)
            )
        sources.append(file_secret_settings)
        return tuple(sources)


def get_settings(
    config_file: Path | None = None,
    discover: bool = True,
    **overrides: Any,
) -> WPTScoreSettings:
    """Get wptscore settings instance.

    Args:
        config_file: Optional explicit path to a YAML configuration file.
        discover: Search the working directory and its parents for
            wptscore.config.yaml when no config_file is given.
        **overrides: Explicit configuration overrides.

    Returns:
        Configured WPTScoreSettings instance.

    Raises:
        FileNotFoundError: If config_file is given but does not exist.
    """
    if config_file is not None and not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_file}")

    if config_file is None and discover:
        config_file = _find_config_file()

    token = _config_file.set(config_file)
    try:
        settings = WPTScoreSettings(**overrides)
    finally:
        _config_file.reset(token)

    if config_file is not None:
        logger.debug("Loaded configuration from %s", config_file)
    return settings


@lru_cache
def get_cached_settings() -> WPTScoreSettings:
    """Get cached settings instance.

    The cache can be cleared with get_cached_settings.cache_clear() if needed.
    """
    return get_settings()


def generate_example_config(output_path: Path | None = None) -> str:
    """Generate example configuration file.

    Args:
        output_path: Optional path to write example config file.

    Returns:
        Example configuration as YAML string.
    """
    folders = "\n".join(f"  - {folder}" for folder in DEFAULT_CSS2_FOCUS_FOLDERS)
    example = f"""\
# wptscore configuration
# Environment variables can override these values with WPTSCORE_ prefix
# Example: WPTSCORE_LOGGING__LEVEL=DEBUG

# Folders under /css/CSS2/ scored together as the "css2" focus area.
# Each folder also gets its own focus area.
css2_focus_folders:
{folders}

# logging:
#   level: INFO
#   json_output: false
#   file: null  # Optional log file path
"""

    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(example, encoding="utf-8")
        logger.info("Generated example config at %s", output_path)

    return example
