"""Unit tests for configuration management."""

import json
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import patch

import pytest

from httpbin_action.config import (
    ActionConfig,
    GithubConfig,
    OutputFormat,
    create_default_config,
    find_config_file,
    load_config,
)


class TestActionConfig:
    """Test complete ActionConfig model."""

    def test_defaults(self):
        """Test zero-config defaults."""
        config = ActionConfig()
        assert config.validation.report_all is False
        assert config.output.format == "table"
        assert config.github.annotations is True
        assert config.github.output_name == "docker-run-args"
        assert config.environment.required_tools == ["docker", "curl"]
        assert config.logging.level == "warn"

    def test_config_from_dict(self):
        """Test config creation from dictionary with camelCase aliases."""
        config_data = {
            "validation": {"reportAll": True},
            "output": {"format": "json"},
            "github": {"annotations": False, "outputName": "extra-args"},
            "environment": {"requiredTools": ["podman"], "optionalTools": []},
            "logging": {"level": "debug"}
        }

        config = ActionConfig(**config_data)
        assert config.validation.report_all is True
        assert config.output.format == OutputFormat.JSON.value
        assert config.github.annotations is False
        assert config.github.output_name == "extra-args"
        assert config.environment.required_tools == ["podman"]
        assert config.logging.level == "debug"

    def test_unknown_section_rejected(self):
        """Test extra top-level keys are forbidden."""
        with pytest.raises(ValueError):
            ActionConfig(**{"scan": {}})

    def test_invalid_output_name(self):
        with pytest.raises(ValueError):
            GithubConfig(output_name="bad=name")


class TestConfigLoading:
    """Test configuration file discovery and loading."""

    def test_load_config_from_file(self):
        with TemporaryDirectory() as temp_dir:
            config_file = Path(temp_dir) / ".httpbin-action.json"
            config_file.write_text(json.dumps({"validation": {"reportAll": True}}))

            config = load_config(config_file)
            assert config.validation.report_all is True

    def test_load_config_missing_file_returns_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.json")
        assert config == create_default_config()

    def test_load_config_invalid_json(self, tmp_path):
        config_file = tmp_path / ".httpbin-action.json"
        config_file.write_text("{ invalid json")

        with pytest.raises(ValueError, match="Invalid JSON"):
            load_config(config_file)

    def test_load_config_invalid_values(self, tmp_path):
        config_file = tmp_path / ".httpbin-action.json"
        config_file.write_text(json.dumps({"output": {"format": "xml"}}))

        with pytest.raises(ValueError, match="Failed to load config"):
            load_config(config_file)

    def test_find_config_file_in_parent(self, tmp_path):
        config_file = tmp_path / ".httpbin-action.json"
        config_file.write_text("{}")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config_file(nested) == config_file.resolve()

    def test_find_config_file_none(self, tmp_path):
        with patch("httpbin_action.config.CONFIG_FILE_NAME", ".does-not-exist-anywhere.json"):
            assert find_config_file(tmp_path) is None

    def test_load_config_searches_cwd(self, tmp_path, monkeypatch):
        (tmp_path / ".httpbin-action.json").write_text(json.dumps({"logging": {"level": "info"}}))
        monkeypatch.chdir(tmp_path)

        assert load_config().logging.level == "info"
