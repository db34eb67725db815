"""Failure types raised by the title checks and label sync.

Every failure carries the exact human-readable message that is reported to the
workflow run, so callers only ever need ``str(exc)``.
"""

from __future__ import annotations


class TitleCheckError(ValueError):
    pass


class MissingInputError(TitleCheckError):
    def __init__(self, input_name: str) -> None:
        self.input_name = input_name
        super().__init__(f"Missing required input: {input_name}")


class InvalidConfigError(TitleCheckError):
    def __init__(self, input_name: str, detail: str) -> None:
        self.input_name = input_name
        super().__init__(f"Invalid {input_name} input. {detail}")


class NonConformingTitleError(TitleCheckError):
    def __init__(self, title: str, allowed_types: list[str]) -> None:
        self.title = title
        self.allowed_types = list(allowed_types)
        super().__init__(
            "Pull request title does not follow the Conventional Commits specification: "
            f"'{title}'. Allowed types: {', '.join(self.allowed_types)}"
        )


class ScopeNotAllowedError(TitleCheckError):
    def __init__(self, scope: str, allowed_scopes: list[str]) -> None:
        self.scope = scope
        self.allowed_scopes = list(allowed_scopes)
        super().__init__(
            f"Invalid or missing scope: '{scope}'. Must be one of: {', '.join(self.allowed_scopes)}"
        )


class PatternMismatchError(TitleCheckError):
    def __init__(self, text: str, pattern: str) -> None:
        self.text = text
        self.pattern = pattern
        super().__init__(
            "The text is not compliant with the specified regex...\n"
            f'  \U0001F892 Actual text: "{text}"\n'
            f'  \U0001F892 Must match: "{pattern}"'
        )


class LabelSyncError(TitleCheckError):
    """One or more label calls failed; every planned call was still attempted."""

    def __init__(self, failures: list[str]) -> None:
        self.failures = list(failures)
        super().__init__("Failed to update pull request labels: " + "; ".join(self.failures))
