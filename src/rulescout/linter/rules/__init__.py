"""
Built-in lint rules.

BUILTIN_RULES is the registration order of the bundled catalog; candidate
enumeration and the final configuration both follow it.
"""

from .base import EnumOption, Finding, ObjectOption, OptionSpec, Rule
from .layout import (
    EolLastRule,
    IndentRule,
    LinebreakStyleRule,
    MaxLenRule,
    NoMultipleEmptyLinesRule,
    NoTrailingSpacesRule,
    QuotesRule,
    SemiRule,
)
from .practices import (
    MaxParamsRule,
    NoBareExceptRule,
    NoDupeKeysRule,
    NoMutableDefaultArgsRule,
    NoPrintRule,
    NoUnusedVarsRule,
    SortImportsRule,
)

BUILTIN_RULES = (
    SemiRule,
    QuotesRule,
    IndentRule,
    MaxLenRule,
    LinebreakStyleRule,
    EolLastRule,
    NoTrailingSpacesRule,
    NoMultipleEmptyLinesRule,
    SortImportsRule,
    MaxParamsRule,
    NoPrintRule,
    NoUnusedVarsRule,
    NoBareExceptRule,
    NoMutableDefaultArgsRule,
    NoDupeKeysRule,
)

__all__ = [
    "BUILTIN_RULES",
    "EnumOption",
    "Finding",
    "ObjectOption",
    "OptionSpec",
    "Rule",
]
