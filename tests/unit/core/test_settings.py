"""Tests for wptscore configuration management."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from wptscore.core.settings import (
    DEFAULT_CSS2_FOCUS_FOLDERS,
    LoggingSettings,
    WPTScoreSettings,
    _find_config_file,
    generate_example_config,
    get_cached_settings,
    get_settings,
)


@pytest.fixture
def in_tmp_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestLoggingSettings:
    """Tests for LoggingSettings."""

    def test_defaults(self) -> None:
        """Test default logging settings."""
        settings = LoggingSettings()
        assert settings.level == "INFO"
        assert settings.json_output is None
        assert settings.file is None

    def test_level_normalized(self) -> None:
        """Test that log levels are upper-cased."""
        assert LoggingSettings(level="debug").level == "DEBUG"

    def test_invalid_level(self) -> None:
        """Test that unknown log levels are rejected."""
        with pytest.raises(ValidationError, match="Invalid log level"):
            LoggingSettings(level="VERBOSE")


class TestWPTScoreSettings:
    """Tests for WPTScoreSettings."""

    def test_defaults(self, in_tmp_dir: Path) -> None:
        """Test default settings."""
        settings = WPTScoreSettings()
        assert settings.css2_focus_folders == list(DEFAULT_CSS2_FOCUS_FOLDERS)
        assert settings.logging.level == "INFO"

    @pytest.mark.parametrize(
        "folders",
        [[], ["floats", "floats"], ["css/floats"], [""]],
    )
    def test_invalid_folders(self, in_tmp_dir: Path, folders: list[str]) -> None:
        """Test that folder lists are validated."""
        with pytest.raises(ValidationError):
            WPTScoreSettings(css2_focus_folders=folders)

    def test_env_vars(
        self, in_tmp_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test loading from environment variables."""
        monkeypatch.setenv("WPTSCORE_CSS2_FOCUS_FOLDERS", '["floats", "linebox"]')
        monkeypatch.setenv("WPTSCORE_LOGGING__LEVEL", "warning")

        settings = WPTScoreSettings()
        assert settings.css2_focus_folders == ["floats", "linebox"]
        assert settings.logging.level == "WARNING"


class TestGetSettings:
    """Tests for get_settings()."""

    def test_overrides(self, in_tmp_dir: Path) -> None:
        """Test keyword overrides."""
        settings = get_settings(css2_focus_folders=["tables"])
        assert settings.css2_focus_folders == ["tables"]

    def test_config_file(self, in_tmp_dir: Path) -> None:
        """Test loading an explicit YAML file."""
        config = in_tmp_dir / "custom.yaml"
        config.write_text(
            "css2_focus_folders:\n  - floats\nlogging:\n  level: DEBUG\n"
        )

        settings = get_settings(config_file=config)
        assert settings.css2_focus_folders == ["floats"]
        assert settings.logging.level == "DEBUG"

    def test_env_overrides_file(
        self, in_tmp_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that environment variables win over the config file."""
        config = in_tmp_dir / "custom.yaml"
        config.write_text("logging:\n  level: DEBUG\n")
        monkeypatch.setenv("WPTSCORE_LOGGING__LEVEL", "ERROR")

        settings = get_settings(config_file=config)
        assert settings.logging.level == "ERROR"

    def test_overrides_win_over_file(self, in_tmp_dir: Path) -> None:
        """Test that keyword overrides win over the config file."""
        config = in_tmp_dir / "custom.yaml"
        config.write_text("css2_focus_folders:\n  - floats\n")

        settings = get_settings(config_file=config, css2_focus_folders=["linebox"])
        assert settings.css2_focus_folders == ["linebox"]

    def test_missing_config_file(self, in_tmp_dir: Path) -> None:
        """Test that a missing explicit file raises."""
        with pytest.raises(FileNotFoundError):
            get_settings(config_file=in_tmp_dir / "missing.yaml")

    def test_discovers_config_file(self, in_tmp_dir: Path) -> None:
        """Test discovery of wptscore.config.yaml in the working directory."""
        (in_tmp_dir / "wptscore.config.yaml").write_text(
            "css2_focus_folders:\n  - abspos\n"
        )

        assert get_settings().css2_focus_folders == ["abspos"]
        assert get_settings(discover=False).css2_focus_folders == list(
            DEFAULT_CSS2_FOCUS_FOLDERS
        )

    def test_cached(self, in_tmp_dir: Path) -> None:
        """Test that cached settings are reused."""
        assert get_cached_settings() is get_cached_settings()


class TestFindConfigFile:
    """Tests for _find_config_file()."""

    def test_searches_parents(self, tmp_path: Path) -> None:
        """Test that parent directories are searched."""
        config = tmp_path / "wptscore.config.yml"
        config.write_text("{}\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert _find_config_file(nested) == config


class TestGenerateExampleConfig:
    """Tests for generate_example_config()."""

    def test_writes_loadable_config(self, tmp_path: Path) -> None:
        """Test that the example config round-trips through get_settings."""
        path = tmp_path / "conf" / "wptscore.config.yaml"
        example = generate_example_config(path)

        assert path.read_text() == example
        settings = get_settings(config_file=path)
        assert settings.css2_focus_folders == list(DEFAULT_CSS2_FOCUS_FOLDERS)
