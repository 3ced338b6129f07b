"""
Base classes for lint rules and their option schemas.

A rule's schema is a tuple of positional option specs. Each spec serves two
purposes: it validates what users put in a configuration, and it lists the
meaningful values the autoconfig registry turns into candidates.
"""

import copy
import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Sequence, Tuple

from rulescout.exceptions import ConfigError

if TYPE_CHECKING:
    from rulescout.corpus import SourceUnit


@dataclass(frozen=True)
class Finding:
    """A rule violation at a position in a file (1-based line, 0-based column)."""
    line: int
    column: int
    message: str


class OptionSpec(ABC):
    """One positional option of a rule schema."""

    @abstractmethod
    def candidate_values(self) -> List[Any]:
        """Meaningful values, in declaration order, for candidate generation."""

    @abstractmethod
    def validate(self, rule_id: str, value: Any) -> None:
        """Raise ConfigError if ``value`` is not acceptable for this position."""


class EnumOption(OptionSpec):
    """A scalar option restricted to a fixed set of values."""

    def __init__(self, *values: Any):
        if not values:
            raise ValueError("EnumOption needs at least one value")
        self.values = tuple(values)

    def candidate_values(self) -> List[Any]:
        return list(self.values)

    def validate(self, rule_id: str, value: Any) -> None:
        # bool is an int subclass; keep True from matching 1
        if any(value == v and type(value) is type(v) for v in self.values):
            return
        allowed = ", ".join(repr(v) for v in self.values)
        raise ConfigError(f"Rule '{rule_id}': invalid option {value!r} (expected one of {allowed})")

    def __repr__(self) -> str:
        return f"EnumOption{self.values!r}"


class ObjectOption(OptionSpec):
    """
    A mapping option. ``properties`` maps each known key to the values worth
    trying for it.

    Candidates are every single-property object in declaration order, then
    the full cartesian combination when there is more than one property.
    """

    def __init__(self, **properties: Sequence[Any]):
        if not properties:
            raise ValueError("ObjectOption needs at least one property")
        self.properties: Dict[str, Tuple[Any, ...]] = {
            name: tuple(values) for name, values in properties.items()
        }

    def candidate_values(self) -> List[Dict[str, Any]]:
        values: List[Dict[str, Any]] = []
        for name, options in self.properties.items():
            for option in options:
                values.append({name: copy.deepcopy(option)})

        if len(self.properties) > 1:
            names = list(self.properties)
            for combo in itertools.product(*(self.properties[n] for n in names)):
                values.append({n: copy.deepcopy(v) for n, v in zip(names, combo)})

        return values

    def validate(self, rule_id: str, value: Any) -> None:
        if not isinstance(value, dict):
            raise ConfigError(f"Rule '{rule_id}': expected an object option, got {value!r}")
        unknown = sorted(set(value) - set(self.properties))
        if unknown:
            raise ConfigError(f"Rule '{rule_id}': unknown option key(s) {', '.join(unknown)}")

    def __repr__(self) -> str:
        return f"ObjectOption({self.properties!r})"


class Rule(ABC):
    """
    Abstract base class for lint rules.

    Subclasses define:
    - rule_id: unique kebab-case identifier (e.g. "quotes")
    - description: one-line summary
    - schema: positional option specs (empty for severity-only rules)
    - defaults: values used for positions the setting leaves out
    - recommended: whether the rule is part of rulescout:recommended
    - check(unit, options): yield a Finding per violation
    """

    rule_id: str = ""
    description: str = ""
    schema: Tuple[OptionSpec, ...] = ()
    defaults: Tuple[Any, ...] = ()
    recommended: bool = False

    def resolve_options(self, options: Sequence[Any]) -> Tuple[Any, ...]:
        """
        Validate user options against the schema and fill in defaults.

        Raises:
            ConfigError: On too many options or an invalid value.
        """
        if len(options) > len(self.schema):
            raise ConfigError(
                f"Rule '{self.rule_id}' accepts at most {len(self.schema)} option(s), got {len(options)}"
            )
        for spec, value in zip(self.schema, options):
            spec.validate(self.rule_id, value)
        return tuple(options) + tuple(copy.deepcopy(self.defaults[len(options):]))

    @abstractmethod
    def check(self, unit: "SourceUnit", options: Tuple[Any, ...]) -> Iterator[Finding]:
        """
        Inspect one file.

        Args:
            unit: The parsed file.
            options: Resolved options (see resolve_options).

        Yields:
            A Finding for every violation.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.rule_id}>"
