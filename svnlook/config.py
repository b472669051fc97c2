"""
Configuration — How svnlook gets invoked

Config hierarchy (highest to lowest priority):
  1. Environment variables (SVNLOOK_BINARY, SVNLOOK_PATH, ...)
  2. Project config (.svnlook/config.yaml)
  3. User config (~/.svnlook/config.yaml)
  4. Defaults

The invocation environment (locale, PATH) is carried explicitly in
LookConfig and handed to the child process. The current process's
environment is never mutated.
"""

import logging
import os
import re
import yaml
from pathlib import Path
from dataclasses import dataclass
from typing import Optional, Dict, Any, Mapping, Tuple

logger = logging.getLogger(__name__)


DEFAULT_BINARY = "svnlook"
DEFAULT_LOCALE = "C"
DEFAULT_ENCODING = "utf-8"
MIN_VERSION: Tuple[int, int, int] = (1, 4, 0)

# Environment overrides: variable -> LookConfig field
ENV_OVERRIDES = {
    "SVNLOOK_BINARY": "binary",
    "SVNLOOK_PATH": "search_path",
    "SVNLOOK_LOCALE": "locale",
    "SVNLOOK_ENCODING": "encoding",
}

_VERSION_RE = re.compile(r"^\d+\.\d+\.\d+$")


def _parse_version_setting(value: Any) -> Tuple[int, int, int]:
    """
    Accept "1.4.0" or [1, 4, 0].

    Raises:
        ValueError: anything else, including YAML numbers such as 1.4
    """
    if isinstance(value, str):
        if not _VERSION_RE.match(value.strip()):
            raise ValueError(f"Invalid version '{value}'. Use MAJOR.MINOR.PATCH")
        parts = value.strip().split(".")
    elif isinstance(value, (list, tuple)):
        parts = list(value)
        if len(parts) != 3 or not all(
            isinstance(part, int) and not isinstance(part, bool) and part >= 0
            for part in parts
        ):
            raise ValueError(f"Invalid version {value!r}. Use MAJOR.MINOR.PATCH")
    else:
        raise ValueError(f"Invalid version {value!r}. Use MAJOR.MINOR.PATCH")
    major, minor, patch = (int(part) for part in parts)
    return major, minor, patch


@dataclass
class LookConfig:
    """Invocation settings for the svnlook executable."""
    binary: str = DEFAULT_BINARY
    search_path: Optional[str] = None  # None = inherit PATH
    locale: Optional[str] = DEFAULT_LOCALE  # exported as LC_MESSAGES; None = inherit
    encoding: str = DEFAULT_ENCODING
    min_version: Tuple[int, int, int] = MIN_VERSION

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if not self.binary:
            return "svnlook binary must not be empty"

        try:
            "".encode(self.encoding)
        except LookupError:
            return f"Unknown encoding '{self.encoding}'"

        if len(self.min_version) != 3 or any(part < 0 for part in self.min_version):
            return f"Invalid minimum version {self.min_version!r}"

        return None

    def environment(self, base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """
        Build the child process environment.

        Args:
            base: Environment to start from. Defaults to os.environ.

        Returns:
            A new dict; base is left untouched.
        """
        env = dict(os.environ if base is None else base)
        if self.locale:
            env["LC_MESSAGES"] = self.locale
        if self.search_path:
            env["PATH"] = self.search_path
        return env

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "look": {
                "binary": self.binary,
                "search_path": self.search_path,
                "locale": self.locale,
                "encoding": self.encoding,
                "min_version": ".".join(str(part) for part in self.min_version),
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LookConfig':
        """Create from dictionary."""
        look_data = data.get("look") or {}
        if not isinstance(look_data, dict):
            raise ValueError("'look' section must be a mapping")

        min_version = look_data.get("min_version")
        return cls(
            binary=look_data.get("binary", DEFAULT_BINARY),
            search_path=look_data.get("search_path"),
            locale=look_data.get("locale", DEFAULT_LOCALE),
            encoding=look_data.get("encoding", DEFAULT_ENCODING),
            min_version=MIN_VERSION if min_version is None else _parse_version_setting(min_version),
        )


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Environment variables
      2. Project config (.svnlook/config.yaml)
      3. User config (~/.svnlook/config.yaml)
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".svnlook"
    USER_CONFIG_FILE = USER_CONFIG_DIR / "config.yaml"
    PROJECT_CONFIG_DIR = ".svnlook"
    PROJECT_CONFIG_FILE = "config.yaml"

    SETTINGS = ("binary", "search_path", "locale", "encoding", "min_version")

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self._config: Optional[LookConfig] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.PROJECT_CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.USER_CONFIG_FILE

    def load(self) -> LookConfig:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        config_data: Dict[str, Any] = {}

        # Layer 1: User config, then project config on top
        for path in (self.user_config_path, self.project_config_path):
            config_data = self._merge(config_data, self._checked(path, self._read(path)))

        # Layer 2: Environment overrides
        for env_key, setting in ENV_OVERRIDES.items():
            if os.environ.get(env_key):
                config_data.setdefault("look", {})[setting] = os.environ[env_key]

        self._config = LookConfig.from_dict(config_data)
        return self._config

    def _read(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Ignoring unreadable config %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed config %s: expected a mapping", path)
            return {}
        return data

    def _checked(self, path: Path, data: Dict[str, Any]) -> Dict[str, Any]:
        """Drop settings of one layer that cannot be loaded."""
        look_data = data.get("look")
        if look_data is None:
            return data
        if not isinstance(look_data, dict):
            logger.warning("Ignoring 'look' section of %s: expected a mapping", path)
            return {key: value for key, value in data.items() if key != "look"}

        if look_data.get("min_version") is not None:
            try:
                _parse_version_setting(look_data["min_version"])
            except ValueError as e:
                logger.warning("Ignoring min_version in %s: %s", path, e)
                look_data = {key: value for key, value in look_data.items() if key != "min_version"}
                return {**data, "look": look_data}
        return data

    def save_project(self, config: LookConfig):
        """Save configuration to project config file."""
        self.project_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.project_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def save_user(self, config: LookConfig):
        """Save configuration to user config file."""
        self.user_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.user_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def set(self, key: str, value: str, scope: str = "project") -> Optional[str]:
        """
        Set a configuration value.

        Args:
            key: Dot-separated key (e.g., "look.binary")
            value: Value to set
            scope: "project" or "user"

        Returns:
            Error message or None if successful
        """
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'look.binary')"

        section, setting = parts
        if section != "look":
            return f"Unknown section: {section}. Valid: look"
        if setting not in self.SETTINGS:
            return f"Unknown look setting: {setting}. Valid: {', '.join(self.SETTINGS)}"

        if setting == "min_version":
            try:
                config.min_version = _parse_version_setting(value)
            except ValueError as e:
                return str(e)
        elif setting in ("search_path", "locale"):
            setattr(config, setting, value or None)
        else:
            setattr(config, setting, value)

        error = config.validate()
        if error:
            return error

        if scope == "project":
            self.save_project(config)
        else:
            self.save_user(config)

        return None

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value."""
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2 or parts[0] != "look" or parts[1] not in self.SETTINGS:
            return None

        return config.to_dict()["look"][parts[1]]

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def display(self) -> str:
        """Format config for display."""
        config = self.load()
        version = ".".join(str(part) for part in config.min_version)

        lines = [
            "Configuration:",
            "",
            "svnlook:",
            f"  Binary: {config.binary}",
            f"  PATH: {config.search_path or '(inherited)'}",
            f"  Locale: {config.locale or '(inherited)'}",
            f"  Encoding: {config.encoding}",
            f"  Minimum version: {version}",
            "",
            "Config files:",
            f"  User: {self.user_config_path}",
            f"  Project: {self.project_config_path}",
        ]

        return "\n".join(lines)


def get_config(project_dir: Optional[Path] = None) -> LookConfig:
    """Convenience function to load config."""
    return ConfigManager(project_dir).load()
