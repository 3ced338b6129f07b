"""
Automatic rule-configuration discovery.

Pipeline: build_registry -> TrialRunner.run -> classify -> merge, wrapped by
discover() / run_discovery().
"""

from .classifier import classify
from .facade import DiscoveryResult, discover, run_discovery
from .merger import extend_from_recommended, merge, resolution_layers, summarize
from .registry import CandidateConfig, RuleEntry, build_registry, generate_candidates, tier_for
from .trials import SurvivorSet, TrialResult, TrialRunner

__all__ = [
    "CandidateConfig",
    "DiscoveryResult",
    "RuleEntry",
    "SurvivorSet",
    "TrialResult",
    "TrialRunner",
    "build_registry",
    "classify",
    "discover",
    "extend_from_recommended",
    "generate_candidates",
    "merge",
    "resolution_layers",
    "run_discovery",
    "summarize",
    "tier_for",
]
