"""
This facade exposes the public API for the corpus module.
Other parts of the application should only import from here,
not from internal modules.
"""
from .loader import SourceUnit, load_corpus, parse_source, resolve_patterns, split_patterns

__all__ = ["SourceUnit", "load_corpus", "parse_source", "resolve_patterns", "split_patterns"]
