"""
Lint engine: the rule catalog and the linter that applies a configuration
to parsed source files.
"""

from .catalog import RECOMMENDED_CONFIG_NAME, RuleCatalog
from .engine import Linter
from .rules import EnumOption, Finding, ObjectOption, OptionSpec, Rule

__all__ = [
    "RECOMMENDED_CONFIG_NAME",
    "EnumOption",
    "Finding",
    "Linter",
    "ObjectOption",
    "OptionSpec",
    "Rule",
    "RuleCatalog",
]
