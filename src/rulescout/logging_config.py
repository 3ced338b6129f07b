"""
Logging setup for rulescout.

Two loguru sinks:
- console (stderr), off in machine mode so stdout stays pure JSON
- discovery log file under .rulescout/logs/, opt-in, always at DEBUG so a
  run's per-trial outcomes can be inspected after the fact

Console level comes from, in order: --verbose (DEBUG), the explicit level,
RULESCOUT_LOG_LEVEL, INFO.
"""

import os
import sys

from loguru import logger

from rulescout.exceptions import ConfigError

LOG_LEVEL_ENV = "RULESCOUT_LOG_LEVEL"
DEFAULT_LEVEL = "INFO"
LOG_FILE_NAME = "discovery.log"

CONSOLE_FORMAT = "<level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>"
VERBOSE_CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:{line} - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"

_logging_configured = False


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes")


def _known_level(name: str) -> bool:
    try:
        logger.level(name)
    except ValueError:
        return False
    return True


def resolve_level(level=None, verbose=False) -> str:
    """
    Pick the console level.

    An unknown RULESCOUT_LOG_LEVEL falls back to INFO.

    Raises:
        ConfigError: For an unknown explicit level name.
    """
    if verbose:
        return "DEBUG"
    if level is not None:
        if not _known_level(level.upper()):
            raise ConfigError(f"Unknown log level '{level}'")
        return level.upper()
    env_level = os.getenv(LOG_LEVEL_ENV, "").upper()
    if env_level and _known_level(env_level):
        return env_level
    return DEFAULT_LEVEL


def setup_logging(level=None, suppress_console=None, enable_file_logging=None, verbose=False):
    """
    Configure the global logger once; later calls are no-ops until reset_logging().

    Args:
        level: Console level name; see resolve_level() for the fallbacks.
        suppress_console: Drop the console sink. None reads RULESCOUT_MACHINE_MODE.
        enable_file_logging: Add the discovery log file. None reads RULESCOUT_FILE_LOGGING.
        verbose: Console at DEBUG with timestamps and line numbers.
    """
    global _logging_configured

    if _logging_configured:
        return
    _logging_configured = True

    logger.remove()

    if suppress_console is None:
        suppress_console = _env_flag("RULESCOUT_MACHINE_MODE")
    if enable_file_logging is None:
        enable_file_logging = _env_flag("RULESCOUT_FILE_LOGGING")

    if not suppress_console:
        logger.add(
            sys.stderr,
            level=resolve_level(level, verbose),
            format=VERBOSE_CONSOLE_FORMAT if verbose else CONSOLE_FORMAT,
            colorize=True,
        )

    if enable_file_logging:
        from rulescout.paths import get_paths
        paths = get_paths()
        paths.ensure_dirs()

        logger.add(
            paths.logs_dir / LOG_FILE_NAME,
            level="DEBUG",
            format=FILE_FORMAT,
            filter="rulescout",
            rotation="5 MB",
            retention=5,
            catch=True,
        )


def reset_logging() -> None:
    """Allow setup_logging() to reconfigure sinks (used by the CLI and tests)."""
    global _logging_configured
    _logging_configured = False


# Configure on import (honours RULESCOUT_MACHINE_MODE)
setup_logging()
