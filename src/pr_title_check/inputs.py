"""Parsing helpers for the raw string inputs handed to the action."""

from __future__ import annotations

import json
from typing import Any, Optional

from pr_title_check.errors import InvalidConfigError


def as_bool(value: Any, *, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "t", "yes", "y", "on"}:
            return True
        if normalized in {"0", "false", "f", "no", "n", "off"}:
            return False
    return default


def parse_json_array(raw: Optional[str], input_name: str) -> list[str]:
    """Decode ``raw`` as a JSON array of strings, raising InvalidConfigError otherwise."""
    try:
        value = json.loads(raw or "")
    except json.JSONDecodeError as exc:
        raise InvalidConfigError(input_name, "Expecting a JSON array.") from exc
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise InvalidConfigError(input_name, "Expecting a JSON array.")
    return value
