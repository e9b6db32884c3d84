"""Tests for configuration file handling."""
import pytest
import yaml

from unpivoter.config import (
    apply_config,
    get_config_params,
    load_config,
    normalize_keys,
    save_config,
)


class TestLoadConfig:
    """Test configuration loading."""

    def test_load_config_success(self, temp_dir):
        """Test loading a valid config file."""
        config_file = temp_dir / "config.yaml"
        config_data = {
            "keys": "id,name",
            "mode": "tsv",
            "has_headers": True,
        }

        with open(config_file, "w") as f:
            yaml.dump(config_data, f)

        result = load_config(config_file)

        assert result == config_data

    def test_load_config_file_not_found(self, temp_dir):
        """Test loading a non-existent config file."""
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            load_config(temp_dir / "nonexistent.yaml")

    def test_load_config_invalid_yaml(self, temp_dir):
        """Test loading an invalid YAML file."""
        config_file = temp_dir / "invalid.yaml"

        with open(config_file, "w") as f:
            f.write("invalid: yaml: content: [")

        with pytest.raises(yaml.YAMLError):
            load_config(config_file)

    def test_load_config_empty_file(self, temp_dir):
        """Test loading an empty config file."""
        config_file = temp_dir / "empty.yaml"
        config_file.touch()

        assert load_config(config_file) == {}


class TestSaveConfig:
    """Test configuration saving."""

    def test_save_config_success(self, temp_dir):
        """Test saving a config file."""
        config_file = temp_dir / "config.yaml"
        config_data = {"keys": "id", "var_name": "Month"}

        save_config(config_file, config_data)

        with open(config_file, "r") as f:
            assert yaml.safe_load(f) == config_data

    def test_save_config_creates_parent_dirs(self, temp_dir):
        """Test that save_config creates parent directories."""
        config_file = temp_dir / "subdir" / "config.yaml"

        save_config(config_file, {"keys": "id"})

        assert config_file.exists()

    def test_save_config_keeps_key_order(self, temp_dir):
        """Test keys are written in insertion order."""
        config_file = temp_dir / "config.yaml"

        save_config(config_file, {"var_name": "Month", "keys": "id"})

        assert config_file.read_text().splitlines()[0].startswith("var_name")


class TestGetConfigParams:
    """Test extracting saveable parameters."""

    def test_get_config_params_basic(self):
        """Test extracting basic parameters."""
        options = {
            "keys": ["id", "name"],
            "mode": "tsv",
            "var_name": "Month",
            "file": "data.tsv",  # Should be excluded
            "verbose": True,  # Should be excluded
        }

        result = get_config_params(options)

        assert result == {"keys": "id,name", "mode": "tsv", "var_name": "Month"}

    def test_get_config_params_excludes_defaults(self):
        """Test that default values are excluded."""
        options = {
            "keys": ["id"],
            "has_headers": False,
            "inline": False,
            "var_name": "key",
            "value_name": "value",
            "strict": False,
        }

        assert get_config_params(options) == {"keys": "id"}

    def test_get_config_params_excludes_none_and_empty(self):
        """Test that None values and empty lists are excluded."""
        assert get_config_params({"keys": [], "mode": None}) == {}

    def test_get_config_params_non_default_flags(self):
        """Test flags set to True are saved."""
        result = get_config_params({"has_headers": True, "inline": True, "strict": True})

        assert result == {"has_headers": True, "inline": True, "strict": True}


class TestApplyConfig:
    """Test merging config with CLI options."""

    def test_cli_overrides_config(self):
        """Test CLI values win."""
        merged = apply_config({"keys": "a", "mode": "csv"}, {"mode": "tsv"})

        assert merged == {"keys": ["a"], "mode": "tsv"}

    def test_none_does_not_override(self):
        """Test None CLI values keep the config value."""
        merged = apply_config({"var_name": "Month"}, {"var_name": None})

        assert merged["var_name"] == "Month"

    def test_config_not_modified(self):
        """Test the config dictionary is copied."""
        config = {"mode": "csv"}

        apply_config(config, {"mode": "tsv"})

        assert config == {"mode": "csv"}


class TestNormalizeKeys:
    """Test key normalization."""

    def test_string(self):
        """Test comma-separated strings."""
        assert normalize_keys("id, name") == ["id", "name"]

    def test_list(self):
        """Test lists, including numbers from YAML."""
        assert normalize_keys(["id", 0, " "]) == ["id", "0"]

    def test_none(self):
        """Test missing keys."""
        assert normalize_keys(None) == []
