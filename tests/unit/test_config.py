"""Unit tests for configuration management."""

import pytest

from propkit.config import CONFIG_FILENAME, ConfigManager, PropkitConfig
from propkit.exceptions import ConfigError


class TestPropkitConfig:
    """Test the configuration dataclass."""

    def test_defaults(self):
        config = PropkitConfig()
        assert config.source_dir == "src"
        assert config.props_heading == "Props"
        assert config.keys_filename == "__keys.ts"
        assert config.tsconfig == "tsconfig.json"
        assert config.line_width == 80
        assert config.keys_packages == []
        assert config.playground_dir == ""

    def test_from_dict(self):
        config = PropkitConfig.from_dict({"line_width": 100, "keys_packages": ["reakit"]})
        assert config.line_width == 100
        assert config.keys_packages == ["reakit"]
        assert config.source_dir == "src"

    def test_unknown_key(self):
        with pytest.raises(ConfigError, match="Unknown configuration keys: colour"):
            PropkitConfig.from_dict({"colour": "red"})

    @pytest.mark.parametrize(
        "data",
        [
            {"line_width": "80"},
            {"line_width": True},
            {"line_width": 0},
            {"source_dir": 1},
            {"keys_packages": "reakit"},
            {"keys_packages": [1]},
            {"playground_dir": ["../playground"]},
        ],
    )
    def test_invalid_values(self, data):
        with pytest.raises(ConfigError):
            PropkitConfig.from_dict(data)

    def test_allows_keys(self):
        assert PropkitConfig().allows_keys("anything")
        config = PropkitConfig(keys_packages=["reakit"])
        assert config.allows_keys("reakit")
        assert not config.allows_keys("reakit-utils")


class TestConfigManager:
    """Test loading and saving propkit.toml."""

    def test_load_defaults_without_file(self, tmp_path):
        assert ConfigManager.load_config(tmp_path) == PropkitConfig()

    def test_load_file(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text('props_heading = "API"\nkeys_packages = ["reakit"]\n')
        config = ConfigManager.load_config(tmp_path)
        assert config.props_heading == "API"
        assert config.keys_packages == ["reakit"]

    def test_load_invalid_toml(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text("props_heading = \n")
        with pytest.raises(ConfigError, match="Failed to parse"):
            ConfigManager.load_config(tmp_path)

    def test_custom_path_must_exist(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            ConfigManager.load_config(tmp_path, str(tmp_path / "missing.toml"))

    def test_custom_path(self, tmp_path):
        custom = tmp_path / "custom.toml"
        custom.write_text("line_width = 120\n")
        assert ConfigManager.load_config(tmp_path / "elsewhere", str(custom)).line_width == 120

    def test_save_and_load(self, tmp_path):
        config = PropkitConfig(line_width=100, keys_packages=["reakit"])
        path = ConfigManager.save_config(config, tmp_path)
        assert path == tmp_path / CONFIG_FILENAME
        assert path.read_text().startswith("# propkit build settings")
        assert ConfigManager.load_config(tmp_path) == config
        assert not (tmp_path / "propkit.tmp").exists()

    def test_save_preserves_comments(self, tmp_path):
        path = tmp_path / CONFIG_FILENAME
        path.write_text("# keep me\nline_width = 90\n")
        ConfigManager.save_config(PropkitConfig(line_width=100), tmp_path)
        contents = path.read_text()
        assert "# keep me" in contents
        assert "line_width = 100" in contents

    def test_dumps(self):
        assert 'keys_filename = "__keys.ts"' in ConfigManager.dumps(PropkitConfig())
