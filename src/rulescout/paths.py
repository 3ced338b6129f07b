"""
rulescout Path Configuration

Centralized path management for rulescout data files.
All paths are relative to the project root (current working directory).

Directory Structure:
.rulescout/
├── config.json          # Local user configuration (see user_config)
└── logs/                # Log files (opt-in, RULESCOUT_FILE_LOGGING=1)
"""

from pathlib import Path
from typing import Optional


class RulescoutPaths:
    """
    Centralized path configuration for rulescout.

    All paths are lazily resolved relative to project_root.
    Default project_root is current working directory.
    """

    RULESCOUT_DIR = ".rulescout"
    GLOBAL_DIR = Path.home() / ".rulescout"

    CONFIG_NAME = "config.json"
    LOGS_DIR = "logs"

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize paths configuration.

        Args:
            project_root: Root directory for the project. Defaults to CWD.
        """
        self._project_root = project_root

    @property
    def project_root(self) -> Path:
        """Get the project root directory."""
        if self._project_root is None:
            return Path.cwd()
        return self._project_root

    @property
    def rulescout_dir(self) -> Path:
        """Get the .rulescout directory path."""
        return self.project_root / self.RULESCOUT_DIR

    @property
    def local_config(self) -> Path:
        return self.rulescout_dir / self.CONFIG_NAME

    @property
    def global_config(self) -> Path:
        return self.GLOBAL_DIR / self.CONFIG_NAME

    @property
    def logs_dir(self) -> Path:
        """Get the logs directory path."""
        return self.rulescout_dir / self.LOGS_DIR

    def ensure_dirs(self) -> None:
        """Create all necessary directories if they don't exist."""
        self.rulescout_dir.mkdir(parents=True, exist_ok=True)
        self.logs_dir.mkdir(exist_ok=True)


# Global instance for convenience
_default_paths: Optional[RulescoutPaths] = None


def get_paths(project_root: Optional[Path] = None) -> RulescoutPaths:
    """
    Get the paths configuration.

    Args:
        project_root: Optional project root override

    Returns:
        RulescoutPaths instance
    """
    global _default_paths
    if project_root is not None:
        return RulescoutPaths(project_root)
    if _default_paths is None:
        _default_paths = RulescoutPaths()
    return _default_paths


def reset_paths() -> None:
    """Reset the global paths instance (useful for testing)."""
    global _default_paths
    _default_paths = None
