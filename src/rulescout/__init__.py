"""
rulescout - bootstrap a lint configuration from the code you already have.

Trial-lints a corpus against every candidate configuration of every rule and
keeps, per rule, the most expressive configuration that reports nothing.
"""

__version__ = "0.1.0"

from rulescout.autoconfig import discover, extend_from_recommended, run_discovery
from rulescout.cancellation import CancellationToken
from rulescout.corpus import SourceUnit, load_corpus
from rulescout.exceptions import (
    ConfigError,
    DiscoveryCancelled,
    EmptyCorpusError,
    ParseError,
    RulescoutError,
)
from rulescout.linter import Linter, RuleCatalog
from rulescout.progress import NullProgressSink, ProgressSink
from rulescout.schemas import LintConfig, LintMessage

__all__ = [
    "__version__",
    "CancellationToken",
    "ConfigError",
    "DiscoveryCancelled",
    "EmptyCorpusError",
    "LintConfig",
    "LintMessage",
    "Linter",
    "NullProgressSink",
    "ParseError",
    "ProgressSink",
    "RuleCatalog",
    "RulescoutError",
    "SourceUnit",
    "discover",
    "extend_from_recommended",
    "load_corpus",
    "run_discovery",
]
