"""
Candidate registry: the small, exhaustive set of configurations tried for
every rule in the catalog.

Candidates are tagged with a specificity tier:
    1 - severity only (the rule's defaults)
    2 - severity plus one option
    3 - severity plus two options

Enumeration order is part of the contract. It is tier 1, then every tier-2
candidate, then every tier-3 candidate, each in schema declaration order,
and it breaks ties when several candidates of one tier survive.
"""

import copy
import json
from dataclasses import dataclass
from typing import Any, List, Tuple

from rulescout.linter import Rule, RuleCatalog
from rulescout.logging_config import logger
from rulescout.severity import ERROR

# Severity + two options = three setting positions
MAX_OPTION_POSITIONS = 2


def tier_for(options: Tuple[Any, ...]) -> int:
    """Specificity tier of an option tuple; richer tuples collapse into tier 3."""
    return min(1 + len(options), 3)


@dataclass(frozen=True)
class CandidateConfig:
    """One concrete (severity, options) setting proposed for a rule."""
    rule_id: str
    options: Tuple[Any, ...]
    specificity: int
    severity: int = ERROR

    @property
    def setting(self) -> Any:
        """The setting as it appears in a config: ``2`` or ``[2, *options]``."""
        if not self.options:
            return self.severity
        return [self.severity, *copy.deepcopy(list(self.options))]

    def describe(self) -> str:
        return f"{self.rule_id}={json.dumps(self.setting)}"


@dataclass(frozen=True)
class RuleEntry:
    """A rule id and its candidates in canonical order."""
    rule_id: str
    candidates: Tuple[CandidateConfig, ...]

    @property
    def default(self) -> CandidateConfig:
        return self.candidates[0]

    def by_specificity(self, tier: int) -> Tuple[CandidateConfig, ...]:
        return tuple(c for c in self.candidates if c.specificity == tier)


def generate_candidates(rule: Rule) -> Tuple[CandidateConfig, ...]:
    """
    Enumerate the candidates for one rule.

    Every value of the first option position yields a tier-2 candidate; every
    pairing with a value of the second position yields a tier-3 candidate.
    Positions past the second are left at their defaults.
    """
    candidates: List[CandidateConfig] = [CandidateConfig(rule.rule_id, (), 1)]

    combos: List[Tuple[Any, ...]] = [()]
    for spec in rule.schema[:MAX_OPTION_POSITIONS]:
        values = spec.candidate_values()
        if not values:
            break
        combos = [combo + (copy.deepcopy(value),) for combo in combos for value in values]
        candidates.extend(
            CandidateConfig(rule.rule_id, combo, tier_for(combo)) for combo in combos
        )

    return tuple(candidates)


def build_registry(catalog: RuleCatalog) -> Tuple[RuleEntry, ...]:
    """
    Build the candidate registry for every rule in ``catalog``, in catalog order.
    """
    registry = tuple(
        RuleEntry(rule.rule_id, generate_candidates(rule)) for rule in catalog
    )
    total = sum(len(entry.candidates) for entry in registry)
    logger.debug(f"Registry built: {len(registry)} rules, {total} candidate configurations")
    return registry
