"""Conventional Commits classification of pull request titles.

Subject grammar::

    type(scope)!: description

``scope`` and ``!`` are optional. Only the ``!`` marker flags a breaking change;
the description is never scanned for ``BREAKING CHANGE`` text.
"""

from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict

from pr_title_check.errors import MissingInputError, NonConformingTitleError
from pr_title_check.inputs import parse_json_array

TITLE_PATTERN: re.Pattern[str] = re.compile(
    r"^(?P<type>[^\s()!:]+)"  # type
    r"(?:\((?P<scope>[^)]*)\))?"  # optional scope, may be empty
    r"(?P<breaking>!)?"  # breaking marker, outside the parens
    r": (?P<description>.+)$",
    re.DOTALL,
)


class CommitDetail(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: str
    scope: Optional[str] = None
    """``None`` when the title has no parentheses, ``""`` for ``type(): ...``."""
    breaking: bool = False


def parse_task_types(raw: Optional[str]) -> list[str]:
    if not raw or not raw.strip():
        raise MissingInputError("task_types")
    return parse_json_array(raw, "task_types")


def classify(title: str, allowed_types: list[str]) -> CommitDetail:
    match = TITLE_PATTERN.match(title or "")
    if not match or match.group("type") not in allowed_types:
        raise NonConformingTitleError(title, allowed_types)

    return CommitDetail(
        type=match.group("type"),
        scope=match.group("scope"),
        breaking=match.group("breaking") is not None,
    )


def check_conventional_commits(title: str, raw_task_types: Optional[str]) -> CommitDetail:
    """Validate ``title`` against the ``task_types`` input as configured."""
    allowed_types = parse_task_types(raw_task_types)
    return classify(title, allowed_types)
