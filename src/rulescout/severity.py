"""
Rule severities and setting helpers.

A rule setting is either a bare severity or a list whose first element is
the severity and whose remaining elements are the rule's positional options:

    "quotes": 2
    "quotes": ["error", "double"]
    "indent": [2, 4]
"""

import copy
from typing import Any, Tuple

OFF = 0
WARN = 1
ERROR = 2

SEVERITY_NAMES = {"off": OFF, "warn": WARN, "error": ERROR}


def normalize_severity(value: Any) -> int:
    """
    Convert a severity given as 0/1/2 or "off"/"warn"/"error" to its number.

    Raises:
        ValueError: If the value is not a recognised severity.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid severity: {value!r}")
    if isinstance(value, int) and value in (OFF, WARN, ERROR):
        return value
    if isinstance(value, str) and value.lower() in SEVERITY_NAMES:
        return SEVERITY_NAMES[value.lower()]
    raise ValueError(f"Invalid severity: {value!r} (expected 0, 1, 2, 'off', 'warn' or 'error')")


def split_setting(setting: Any) -> Tuple[int, Tuple[Any, ...]]:
    """
    Split a rule setting into (severity, options).

    Options are deep-copied so callers can never reach back into the
    configuration they came from.
    """
    if isinstance(setting, (list, tuple)):
        if not setting:
            raise ValueError("A rule setting list must start with a severity")
        return normalize_severity(setting[0]), tuple(copy.deepcopy(list(setting[1:])))
    return normalize_severity(setting), ()


def is_enabled(setting: Any) -> bool:
    severity, _ = split_setting(setting)
    return severity != OFF
