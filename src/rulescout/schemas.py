import copy
import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from rulescout.exceptions import ConfigError
from rulescout.severity import split_setting


class LintConfig(BaseModel):
    """
    A lint configuration: the base configuration handed to discovery and the
    final configuration it returns share this shape.

    Field names follow the on-disk JSON layout (``parserOptions`` is accepted
    both by alias and by field name).
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    rules: Dict[str, Any] = Field(default_factory=dict)
    env: Dict[str, bool] = Field(default_factory=dict)
    parser_options: Optional[Dict[str, Any]] = Field(default=None, alias="parserOptions")
    extends: Optional[str] = None
    plugins: Optional[List[str]] = None

    @field_validator("rules")
    @classmethod
    def _check_rule_settings(cls, rules: Dict[str, Any]) -> Dict[str, Any]:
        for rule_id, setting in rules.items():
            try:
                split_setting(setting)
            except ValueError as e:
                raise ValueError(f"rule '{rule_id}': {e}") from e
        return rules

    def with_rules(self, rules: Mapping[str, Any], **updates: Any) -> "LintConfig":
        """Return a deep copy of this config whose rules are replaced by ``rules``."""
        changes = {"rules": copy.deepcopy(dict(rules))}
        changes.update(copy.deepcopy(updates))
        return self.model_copy(update=changes, deep=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON layout (aliases, no unset optionals)."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LintConfig":
        """
        Validate a raw mapping into a LintConfig.

        Raises:
            ConfigError: If the mapping does not describe a valid config.
        """
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise ConfigError(f"Invalid lint configuration: {e}") from e

    @classmethod
    def from_file(cls, path: Path) -> "LintConfig":
        """Load and validate a JSON lint configuration file."""
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Could not read lint configuration {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Lint configuration {path} must contain a JSON object")
        return cls.from_dict(data)


class LintMessage(BaseModel):
    """
    A single finding reported by the linter for one file.
    """
    model_config = ConfigDict(frozen=True)

    rule_id: str
    severity: int
    path: str
    line: int
    column: int = 0
    message: str


class DiscoverySummary(BaseModel):
    """
    Outcome statistics of one discovery run.
    """
    enabled_rules: int
    total_rules: int
    file_count: int

    @property
    def message(self) -> str:
        noun = "file." if self.file_count == 1 else "files."
        return (
            f"Enabled {self.enabled_rules} out of {self.total_rules} "
            f"rules based on {self.file_count} {noun}"
        )
