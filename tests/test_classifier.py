"""Tests for Conventional Commits title classification."""

from __future__ import annotations

import json

import pytest

from pr_title_check.classifier import CommitDetail, check_conventional_commits, classify, parse_task_types
from pr_title_check.errors import InvalidConfigError, MissingInputError, NonConformingTitleError

TASK_TYPES = json.dumps(["feat", "fix"])


class TestCheckConventionalCommits:
    def test_valid_type_with_scope(self) -> None:
        detail = check_conventional_commits("feat(login): add new login feature", TASK_TYPES)
        assert detail == CommitDetail(type="feat", scope="login", breaking=False)

    def test_valid_type_with_scope_and_breaking(self) -> None:
        detail = check_conventional_commits("feat(login)!: add new login feature", TASK_TYPES)
        assert detail == CommitDetail(type="feat", scope="login", breaking=True)

    def test_missing_task_types(self) -> None:
        with pytest.raises(MissingInputError) as exc_info:
            check_conventional_commits("feat: x", "")
        assert str(exc_info.value) == "Missing required input: task_types"

    def test_missing_task_types_when_none(self) -> None:
        with pytest.raises(MissingInputError):
            check_conventional_commits("feat: x", None)

    def test_invalid_json_task_types(self) -> None:
        with pytest.raises(InvalidConfigError) as exc_info:
            check_conventional_commits("feat: x", "invalid JSON")
        assert str(exc_info.value) == "Invalid task_types input. Expecting a JSON array."

    def test_task_types_not_an_array(self) -> None:
        with pytest.raises(InvalidConfigError) as exc_info:
            check_conventional_commits("feat: x", '{"feat": true}')
        assert str(exc_info.value) == "Invalid task_types input. Expecting a JSON array."

    @pytest.mark.parametrize("raw", ["[1]", "[null]", '["feat", 2]', '[["feat"]]'])
    def test_task_types_with_non_string_entries(self, raw: str) -> None:
        with pytest.raises(InvalidConfigError) as exc_info:
            check_conventional_commits("1: x", raw)
        assert str(exc_info.value) == "Invalid task_types input. Expecting a JSON array."


class TestClassify:
    def test_no_scope_is_none(self) -> None:
        detail = classify("fix: handle null", ["fix"])
        assert detail.scope is None
        assert detail.breaking is False

    def test_empty_scope_is_empty_string(self) -> None:
        detail = classify("fix()!: drop legacy flag", ["fix"])
        assert detail.scope == ""
        assert detail.breaking is True

    def test_breaking_without_scope(self) -> None:
        assert classify("feat!: new api", ["feat"]) == CommitDetail(type="feat", scope=None, breaking=True)

    def test_breaking_ignores_description_text(self) -> None:
        detail = classify("feat: BREAKING CHANGE: removed endpoint", ["feat"])
        assert detail.breaking is False

    def test_bang_inside_scope_is_not_breaking(self) -> None:
        detail = classify("feat(api!): tweak", ["feat"])
        assert detail.scope == "api!"
        assert detail.breaking is False

    def test_type_not_allowed(self) -> None:
        with pytest.raises(NonConformingTitleError) as exc_info:
            classify("docs: update readme", ["feat", "fix"])
        assert exc_info.value.title == "docs: update readme"
        assert "'docs: update readme'" in str(exc_info.value)
        assert "feat, fix" in str(exc_info.value)

    @pytest.mark.parametrize(
        "title",
        [
            "add new login feature",
            "feat add login",
            "feat:missing space",
            "feat: ",
            "feat(login: unclosed scope",
            " feat: leading space",
            "",
        ],
    )
    def test_grammar_violations(self, title: str) -> None:
        with pytest.raises(NonConformingTitleError):
            classify(title, ["feat"])

    def test_empty_allow_list_rejects_everything(self) -> None:
        with pytest.raises(NonConformingTitleError):
            classify("feat: x", [])

    def test_detail_is_immutable(self) -> None:
        detail = classify("feat: x", ["feat"])
        with pytest.raises(Exception):
            detail.type = "fix"  # type: ignore[misc]


def test_parse_task_types_returns_list() -> None:
    assert parse_task_types(' ["feat", "fix", "chore"] ') == ["feat", "fix", "chore"]
