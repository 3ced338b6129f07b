from typing import List

from rulescout.exceptions import ConfigError
from rulescout.logging_config import logger
from rulescout.schemas import LintConfig, LintMessage
from rulescout.severity import OFF, split_setting
from .catalog import RuleCatalog


class Linter:
    """
    Applies a LintConfig to parsed source files.

    The linter holds no per-run state; the same instance can verify any number
    of (unit, config) pairs.
    """

    def __init__(self, catalog: RuleCatalog):
        self.catalog = catalog
        logger.debug(f"Linter initialized with {len(catalog)} rules")

    def verify(self, unit, config: LintConfig) -> List[LintMessage]:
        """
        Lint one file.

        Args:
            unit: SourceUnit to inspect
            config: Configuration naming the active rules

        Returns:
            Messages sorted by line then column

        Raises:
            ConfigError: For an unknown rule or invalid rule options
        """
        messages: List[LintMessage] = []

        for rule_id, setting in config.rules.items():
            try:
                severity, options = split_setting(setting)
            except ValueError as e:
                raise ConfigError(f"Rule '{rule_id}': {e}") from e
            if severity == OFF:
                continue

            rule = self.catalog.get(rule_id)
            resolved = rule.resolve_options(options)
            for finding in rule.check(unit, resolved):
                messages.append(LintMessage(
                    rule_id=rule_id,
                    severity=severity,
                    path=unit.path,
                    line=finding.line,
                    column=finding.column,
                    message=finding.message,
                ))

        messages.sort(key=lambda m: (m.line, m.column, m.rule_id))
        return messages

    def count_findings(self, unit, config: LintConfig, rule_id: str) -> int:
        """Number of messages in ``unit`` attributed to ``rule_id``."""
        return sum(1 for message in self.verify(unit, config) if message.rule_id == rule_id)
