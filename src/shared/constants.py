"""Shared constants used by the action entrypoint and its helpers."""

from __future__ import annotations

DEFAULT_GITHUB_API_BASE = "https://api.github.com"

# Per-request timeout for GitHub REST calls
HTTP_TIMEOUT_SECONDS = 20

# Label attached when the title carries the "!" marker
BREAKING_CHANGE_LABEL = "breaking change"
