"""
CLI Configuration

Centralized configuration for the rulescout CLI.
"""

import os
from typing import Optional


class CLIConfig:
    """Configuration for CLI commands"""

    # Machine mode (plain JSON output, no presentation)
    _machine_mode: Optional[bool] = None

    @classmethod
    def set_machine_mode(cls, enabled: Optional[bool]) -> None:
        """Set machine mode; None defers to the environment."""
        cls._machine_mode = enabled

    @classmethod
    def is_machine_mode(cls) -> bool:
        """
        Check if machine mode is active.

        Machine mode is the default. It is off only when human mode is
        requested with --human or RULESCOUT_HUMAN_MODE.
        """
        if cls._machine_mode is not None:
            return cls._machine_mode
        if os.getenv("RULESCOUT_HUMAN_MODE", "").lower() in ("1", "true", "yes"):
            return False
        return True
