"""
rulescout User Configuration

Hierarchical config system with global defaults + local overrides:
- Global: ~/.rulescout/config.json (cross-project settings)
- Local: .rulescout/config.json (project-specific overrides)

Config structure:
{
  "discovery": {
    "extensions": [".py", ".pyi"],   // Files picked up when a pattern is a directory
    "respect_gitignore": true,        // Prune .gitignore matches while walking
    "max_bytes": 1048576,             // Skip files larger than this
    "extend_recommended": true,       // Collapse results onto rulescout:recommended
    "timeout": null                   // Seconds before discovery is cancelled
  }
}
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional

from rulescout.corpus.config import validate_extensions, validate_max_bytes
from rulescout.logging_config import logger
from rulescout.paths import get_paths


DEFAULT_CONFIG = {
    "discovery": {
        "extensions": [".py", ".pyi"],
        "respect_gitignore": True,
        "max_bytes": 1024 * 1024,
        "extend_recommended": True,
        "timeout": None,
    }
}


class UserConfig:
    """
    Manages hierarchical user configuration.

    Load order (with override):
    1. Default config (hardcoded)
    2. Global config (~/.rulescout/config.json)
    3. Local config (.rulescout/config.json)
    """

    def __init__(self, project_root: Optional[Path] = None, global_config_path: Optional[Path] = None):
        """
        Initialize config manager.

        Args:
            project_root: Project root directory (defaults to CWD)
            global_config_path: Override for the global config file (tests)
        """
        paths = get_paths(project_root)
        self.project_root = paths.project_root
        self.global_config_path = global_config_path or paths.global_config
        self.local_config_path = paths.local_config

        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """
        Load configuration with hierarchical override.

        Returns:
            Merged configuration dictionary
        """
        config = copy.deepcopy(DEFAULT_CONFIG)

        for label, path in (("global", self.global_config_path), ("local", self.local_config_path)):
            if not path.exists():
                continue
            try:
                with open(path, 'r') as f:
                    loaded = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Failed to load {label} config from {path}: {e}")
                continue
            if not isinstance(loaded, dict):
                logger.warning(f"Ignoring {label} config at {path}: top level must be an object")
                continue
            config = self._deep_merge(config, loaded)
            logger.debug(f"Loaded {label} config from {path}")

        return config

    def _deep_merge(self, base: Dict, override: Dict) -> Dict:
        """
        Deep merge two dictionaries, with override taking precedence.
        """
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a config value by dot-separated key.

        Examples:
            config.get("discovery.extensions")  # [".py", ".pyi"]
            config.get("discovery.timeout")     # None
        """
        value = self._config

        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def discovery_settings(self) -> Dict[str, Any]:
        """
        Loader/runner keyword arguments for discover().

        Raises:
            ConfigError: If the configured values have the wrong shape.
        """
        extensions = self.get("discovery.extensions", [])
        max_bytes = self.get("discovery.max_bytes")
        validate_extensions(extensions)
        validate_max_bytes(max_bytes)
        return {
            "extensions": list(extensions),
            "respect_gitignore": bool(self.get("discovery.respect_gitignore", True)),
            "max_bytes": max_bytes,
        }

    def get_all(self) -> Dict[str, Any]:
        """Get the entire merged configuration."""
        return copy.deepcopy(self._config)

    def reload(self) -> None:
        """Reload configuration from disk."""
        self._config = self._load_config()


_config: Optional[UserConfig] = None


def get_user_config(project_root: Optional[Path] = None) -> UserConfig:
    """
    Get the user configuration singleton.

    Args:
        project_root: Optional project root override

    Returns:
        UserConfig instance
    """
    global _config
    if project_root is not None:
        return UserConfig(project_root)
    if _config is None:
        _config = UserConfig()
    return _config


def reset_user_config() -> None:
    """Reset the global config singleton (for testing)."""
    global _config
    _config = None
