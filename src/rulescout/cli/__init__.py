"""
CLI support modules: machine-mode configuration and output helpers.
Commands themselves live in rulescout.main.
"""

from rulescout.cli.config import CLIConfig

__all__ = ['CLIConfig']
