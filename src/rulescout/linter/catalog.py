"""
The rule catalog: every rule the linter knows, in registration order, plus
the recommended preset derived from it.
"""

from typing import Any, Dict, FrozenSet, Iterable, Iterator, Tuple

from rulescout.exceptions import ConfigError
from rulescout.severity import ERROR
from .rules import BUILTIN_RULES, Rule

RECOMMENDED_CONFIG_NAME = "rulescout:recommended"


class RuleCatalog:
    """
    Ordered, read-only collection of rules keyed by rule id.

    Raises:
        ConfigError: On a rule without an id or a duplicate id.
    """

    def __init__(self, rules: Iterable[Rule]):
        self._rules: Dict[str, Rule] = {}
        for rule in rules:
            if not rule.rule_id:
                raise ConfigError(f"Rule {rule!r} has no rule_id")
            if rule.rule_id in self._rules:
                raise ConfigError(f"Duplicate rule id '{rule.rule_id}' in catalog")
            self._rules[rule.rule_id] = rule

    @classmethod
    def builtin(cls) -> "RuleCatalog":
        """Catalog of the bundled rules."""
        return cls(rule_cls() for rule_cls in BUILTIN_RULES)

    def get(self, rule_id: str) -> Rule:
        try:
            return self._rules[rule_id]
        except KeyError:
            raise ConfigError(f"Definition for rule '{rule_id}' was not found") from None

    @property
    def rule_ids(self) -> Tuple[str, ...]:
        return tuple(self._rules)

    def recommended_ids(self) -> FrozenSet[str]:
        return frozenset(rule_id for rule_id, rule in self._rules.items() if rule.recommended)

    def recommended_config(self) -> Dict[str, Any]:
        """Settings of the rulescout:recommended preset (every recommended rule at error)."""
        return {rule_id: ERROR for rule_id, rule in self._rules.items() if rule.recommended}

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)
