from typing import FrozenSet, Sequence

from rulescout.logging_config import logger
from .registry import RuleEntry
from .trials import SurvivorSet


def classify(survivors: SurvivorSet, registry: Sequence[RuleEntry]) -> FrozenSet[str]:
    """
    Return the ids of failing rules: those for which no candidate survived.

    Failing rules go to the disablement policy; every other rule goes to the
    specificity resolver.
    """
    failing = frozenset(
        entry.rule_id for entry in registry if not survivors.for_rule(entry.rule_id)
    )
    if failing:
        logger.debug(f"Rules without a clean configuration: {', '.join(sorted(failing))}")
    return failing
