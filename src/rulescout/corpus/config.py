from typing import List, Optional
from rulescout.exceptions import ConfigError

# Default patterns to ignore, mimicking common global gitignore settings
DEFAULT_IGNORE_PATTERNS = [
    ".git/",
    "__pycache__/",
    ".pytest_cache/",
    ".mypy_cache/",
    ".tox/",
    ".rulescout/",
    "build/",
    "dist/",
    "*.egg-info/",
    ".venv/",
    "venv/",
    "node_modules/",
    "*.pyc",
    "*.pyo",
]

DEFAULT_EXTENSIONS = [".py", ".pyi"]

DEFAULT_MAX_BYTES = 1024 * 1024


def validate_extensions(extensions: List[str]) -> None:
    """
    Validate file extension filters.

    Args:
        extensions: List of file extensions (e.g., ['.py', '.pyi'])

    Raises:
        ConfigError: If extensions are invalid.
    """
    if not isinstance(extensions, list):
        raise ConfigError("Extensions must be a list of strings")

    for ext in extensions:
        if not isinstance(ext, str):
            raise ConfigError(f"Invalid extension: {ext} (must be a string)")
        if not ext.startswith('.'):
            raise ConfigError(f"Extension '{ext}' must start with a dot (e.g., '.py')")
        if len(ext) < 2:
            raise ConfigError(f"Extension '{ext}' is too short (minimum: 2 characters)")


def validate_max_bytes(max_bytes: Optional[int]) -> None:
    """
    Validate max_bytes configuration for file size filtering.

    Args:
        max_bytes: Maximum file size in bytes, or None for no limit.

    Raises:
        ConfigError: If max_bytes is invalid.
    """
    if max_bytes is None:
        return
    if isinstance(max_bytes, bool) or not isinstance(max_bytes, int):
        raise ConfigError(f"max_bytes must be an integer, got {type(max_bytes).__name__}")
    if max_bytes <= 0:
        raise ConfigError(f"max_bytes must be positive, got {max_bytes}")


def validate_feature_version(feature_version) -> None:
    """
    Validate parserOptions.feature_version (a [major, minor] pair).

    Raises:
        ConfigError: If the value is not a pair of integers targeting Python 3.
    """
    if feature_version is None:
        return
    if (
        not isinstance(feature_version, (list, tuple))
        or len(feature_version) != 2
        or not all(isinstance(part, int) and not isinstance(part, bool) for part in feature_version)
    ):
        raise ConfigError(
            f"parserOptions.feature_version must be a [major, minor] pair, got {feature_version!r}"
        )
    if feature_version[0] != 3:
        raise ConfigError(f"parserOptions.feature_version must target Python 3, got {feature_version!r}")
