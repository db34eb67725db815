from __future__ import annotations

import re

from pr_title_check.errors import InvalidConfigError, PatternMismatchError


def check_text_matches(pattern: str, text: str) -> None:
    """Fail unless ``pattern`` matches somewhere in ``text``."""
    try:
        compiled = re.compile(pattern)
    except re.error as exc:
        raise InvalidConfigError("text_pattern", str(exc)) from exc

    if compiled.search(text or "") is None:
        raise PatternMismatchError(text, pattern)
