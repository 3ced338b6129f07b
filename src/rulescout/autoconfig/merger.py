"""
Specificity resolver and merger.

Every rule ends up with exactly one setting. For rules with survivors the
first matching policy wins:

    1. unambiguous - the only surviving candidate, whatever its tier
    2. tier 2      - first surviving severity + one option candidate
    3. tier 3      - first surviving richer candidate
    4. tier 1      - the severity-only default

Severity plus one option is the preferred shape: expressive enough to capture
a project's convention, while tier-3 combinations tend to encode exceptions
the sample corpus happened to need.

Rules without survivors are kept at error when recommended and switched off
otherwise.

The policy is applied as layers merged lowest priority first (disablement,
tier 1, tier 3, tier 2, unambiguous), so a later layer overrides any rule an
earlier layer set.
"""

from typing import AbstractSet, Any, Dict, List, Sequence

from rulescout.linter import RECOMMENDED_CONFIG_NAME, RuleCatalog
from rulescout.schemas import DiscoverySummary, LintConfig
from rulescout.severity import ERROR, OFF, is_enabled, split_setting
from .registry import RuleEntry
from .trials import SurvivorSet


def disablement_layer(
    registry: Sequence[RuleEntry],
    failing: AbstractSet[str],
    recommended: AbstractSet[str],
) -> Dict[str, int]:
    """Error for recommended failing rules, off for the rest."""
    return {
        entry.rule_id: ERROR if entry.rule_id in recommended else OFF
        for entry in registry
        if entry.rule_id in failing
    }


def tier_layer(
    registry: Sequence[RuleEntry],
    survivors: SurvivorSet,
    failing: AbstractSet[str],
    tier: int,
) -> Dict[str, Any]:
    """First surviving candidate of ``tier`` for every rule that has one."""
    layer: Dict[str, Any] = {}
    for entry in registry:
        if entry.rule_id in failing:
            continue
        for candidate in survivors.for_rule(entry.rule_id):
            if candidate.specificity == tier:
                layer[entry.rule_id] = candidate.setting
                break
    return layer


def unambiguous_layer(
    registry: Sequence[RuleEntry],
    survivors: SurvivorSet,
    failing: AbstractSet[str],
) -> Dict[str, Any]:
    """The surviving candidate of every rule with exactly one survivor."""
    layer: Dict[str, Any] = {}
    for entry in registry:
        if entry.rule_id in failing:
            continue
        clean = survivors.for_rule(entry.rule_id)
        if len(clean) == 1:
            layer[entry.rule_id] = clean[0].setting
    return layer


def resolution_layers(
    registry: Sequence[RuleEntry],
    survivors: SurvivorSet,
    failing: AbstractSet[str],
    recommended: AbstractSet[str],
) -> List[Dict[str, Any]]:
    """Layers in merge order, lowest priority first."""
    return [
        disablement_layer(registry, failing, recommended),
        tier_layer(registry, survivors, failing, 1),
        tier_layer(registry, survivors, failing, 3),
        tier_layer(registry, survivors, failing, 2),
        unambiguous_layer(registry, survivors, failing),
    ]


def merge(
    registry: Sequence[RuleEntry],
    survivors: SurvivorSet,
    failing: AbstractSet[str],
    recommended: AbstractSet[str],
    base_config: LintConfig,
) -> LintConfig:
    """
    Build the final configuration.

    Non-rule fields of ``base_config`` are carried over and its ``rules`` are
    replaced. Rules appear in registry order.
    """
    combined: Dict[str, Any] = {}
    for layer in resolution_layers(registry, survivors, failing, recommended):
        combined.update(layer)

    ordered = {entry.rule_id: combined[entry.rule_id] for entry in registry if entry.rule_id in combined}
    return base_config.with_rules(ordered)


def _same_setting(left: Any, right: Any) -> bool:
    return split_setting(left) == split_setting(right)


def extend_from_recommended(config: LintConfig, catalog: RuleCatalog) -> LintConfig:
    """
    Point ``config`` at rulescout:recommended and drop the rules whose setting
    the preset already provides.
    """
    preset = catalog.recommended_config()
    rules = {
        rule_id: setting
        for rule_id, setting in config.rules.items()
        if not (rule_id in preset and _same_setting(setting, preset[rule_id]))
    }
    return config.with_rules(rules, extends=RECOMMENDED_CONFIG_NAME)


def summarize(config: LintConfig, file_count: int) -> DiscoverySummary:
    enabled = sum(1 for setting in config.rules.values() if is_enabled(setting))
    return DiscoverySummary(
        enabled_rules=enabled,
        total_rules=len(config.rules),
        file_count=file_count,
    )
