from __future__ import annotations

from typing import Optional

from pr_title_check.classifier import CommitDetail
from pr_title_check.errors import ScopeNotAllowedError
from pr_title_check.inputs import parse_json_array


def parse_scope_types(raw: Optional[str]) -> Optional[list[str]]:
    """Return the allowed scopes, or None when scope checking is not configured."""
    if not raw or not raw.strip():
        return None
    return parse_json_array(raw, "scope_types")


def validate_scope(detail: Optional[CommitDetail], scope_types: Optional[list[str]]) -> None:
    if detail is None or scope_types is None:
        return

    # An empty allow-list matches nothing; [""] is how "no scope" is permitted.
    scope = detail.scope or ""
    if scope not in scope_types:
        raise ScopeNotAllowedError(scope, scope_types)


def check_scope(detail: Optional[CommitDetail], raw_scope_types: Optional[str]) -> None:
    if detail is None:
        return
    validate_scope(detail, parse_scope_types(raw_scope_types))
