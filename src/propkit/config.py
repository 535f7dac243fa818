"""Configuration management module.

Per-package settings live in an optional ``propkit.toml`` next to
``package.json``. Every setting has a default, so a package without the file
builds the same way as one with an empty file.
"""

import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomli  # type: ignore[import]
except ImportError:
    # Fallback for newer Python versions
    try:
        import tomllib as tomli  # type: ignore[import]
    except ImportError as e:
        raise ImportError("toml library not available. Install with: pip install tomli") from e

try:
    import tomlkit
except ImportError as e:
    raise ImportError("tomlkit library not available. Install with: pip install tomlkit") from e

from propkit.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "propkit.toml"


@dataclass
class PropkitConfig:
    """Propkit configuration data.

    Attributes:
        source_dir: Source directory relative to the package root
        props_heading: README heading whose section receives the prop tables
        keys_filename: File written into each module directory with its keys
        tsconfig: TypeScript project file, relative to the package root
        line_width: Column limit of generated TypeScript
        keys_packages: Package names allowed to generate keys (empty: all)
        playground_dir: Playground package receiving a dependency map,
            relative to the package root (empty: no map)
    """

    source_dir: str = "src"
    props_heading: str = "Props"
    keys_filename: str = "__keys.ts"
    tsconfig: str = "tsconfig.json"
    line_width: int = 80
    keys_packages: list[str] = field(default_factory=list)
    playground_dir: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PropkitConfig":
        """Create from dictionary, rejecting unknown keys and wrong types."""
        defaults = cls()
        known = set(defaults.to_dict())
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

        for key, value in data.items():
            expected = type(getattr(defaults, key))
            if expected is int and isinstance(value, bool):
                raise ConfigError(f"'{key}' must be an integer")
            if not isinstance(value, expected):
                raise ConfigError(f"'{key}' must be of type {expected.__name__}")

        if data.get("line_width", defaults.line_width) <= 0:
            raise ConfigError("'line_width' must be positive")
        if not all(isinstance(name, str) for name in data.get("keys_packages", [])):
            raise ConfigError("'keys_packages' must be a list of package names")

        return cls(
            source_dir=data.get("source_dir", defaults.source_dir),
            props_heading=data.get("props_heading", defaults.props_heading),
            keys_filename=data.get("keys_filename", defaults.keys_filename),
            tsconfig=data.get("tsconfig", defaults.tsconfig),
            line_width=data.get("line_width", defaults.line_width),
            keys_packages=list(data.get("keys_packages", [])),
            playground_dir=data.get("playground_dir", defaults.playground_dir),
        )

    def allows_keys(self, package_name: str) -> bool:
        return not self.keys_packages or package_name in self.keys_packages


class ConfigManager:
    """Load and save ``propkit.toml`` files."""

    @classmethod
    def get_config_path(cls, root: Path, custom_path: str | None = None) -> Path:
        if custom_path:
            return Path(custom_path).expanduser().resolve()
        return Path(root) / CONFIG_FILENAME

    @classmethod
    def load_config(cls, root: Path, custom_path: str | None = None) -> PropkitConfig:
        """Load configuration, falling back to defaults when no file exists.

        Args:
            root: Package root
            custom_path: Explicit config file (must exist)

        Returns:
            PropkitConfig object

        Raises:
            ConfigError: If the file cannot be parsed or holds invalid values
        """
        config_path = cls.get_config_path(root, custom_path)

        if not config_path.exists():
            if custom_path:
                raise ConfigError(f"Config file not found: {config_path}")
            logger.debug(f"No config file at {config_path}, using defaults")
            return PropkitConfig()

        try:
            with open(config_path, "rb") as f:
                data = tomli.load(f)
        except Exception as e:
            raise ConfigError(f"Failed to parse config file {config_path}: {e}") from e

        logger.debug(f"Loaded config from {config_path}")
        return PropkitConfig.from_dict(data)

    @classmethod
    def save_config(cls, config: PropkitConfig, root: Path, custom_path: str | None = None) -> Path:
        """Save configuration, keeping comments of an existing file.

        Raises:
            ConfigError: If saving fails
        """
        config_path = cls.get_config_path(root, custom_path)
        temp_path = config_path.with_suffix(".tmp")
        try:
            if config_path.exists():
                with open(config_path, encoding="utf-8") as f:
                    doc = tomlkit.load(f)
            else:
                doc = tomlkit.document()
                doc.add(tomlkit.comment("propkit build settings"))
            for key, value in config.to_dict().items():
                doc[key] = value

            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_path, "w", encoding="utf-8") as f:
                tomlkit.dump(doc, f)
            os.replace(temp_path, config_path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            raise ConfigError(f"Failed to save config to {config_path}: {e}") from e

        logger.debug(f"Saved config to {config_path}")
        return config_path

    @classmethod
    def dumps(cls, config: PropkitConfig) -> str:
        return tomlkit.dumps(config.to_dict())


__all__ = ["CONFIG_FILENAME", "ConfigManager", "PropkitConfig"]
