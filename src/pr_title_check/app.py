"""Pull request title check action.

Runs once per ``pull_request`` / ``pull_request_target`` event:

1. classify the title against ``task_types``;
2. check its scope against ``scope_types`` (when configured);
3. match ``text`` (defaults to the title) against ``text_pattern`` (when configured);
4. sync the type/breaking labels on the pull request (unless ``add_label`` is false).

Each failed step is reported as an ``::error::`` workflow command and the run
exits non-zero. Steps that need a classification are skipped when it failed.
"""

from __future__ import annotations

import json
import os
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from pr_title_check.classifier import CommitDetail, check_conventional_commits, parse_task_types
from pr_title_check.errors import TitleCheckError
from pr_title_check.inputs import as_bool
from pr_title_check.labels import PullRequestRef, apply_labels
from pr_title_check.pattern import check_text_matches
from pr_title_check.scope import check_scope
from shared.constants import DEFAULT_GITHUB_API_BASE
from shared.github_client import GitHubClient
from shared.logging import get_logger

logger = get_logger("pr_title_check")


class ActionInputs(BaseModel):
    model_config = ConfigDict(frozen=True)

    task_types: str = ""
    scope_types: str = ""
    add_label: str = "true"
    custom_labels: str = ""
    token: str = ""
    text_pattern: str = ""
    text: str = ""
    dry_run: str = "false"
    api_base: str = DEFAULT_GITHUB_API_BASE


def _input(environ: Mapping[str, str], name: str, default: str = "") -> str:
    # The runner exposes `with:` inputs as INPUT_<NAME>, upper-cased.
    value = environ.get(f"INPUT_{name.upper()}")
    if value is None:
        return default
    return value.strip()


def load_inputs(environ: Mapping[str, str]) -> ActionInputs:
    return ActionInputs(
        task_types=_input(environ, "task_types"),
        scope_types=_input(environ, "scope_types"),
        add_label=_input(environ, "add_label", "true"),
        custom_labels=_input(environ, "custom_labels"),
        token=_input(environ, "token") or environ.get("GITHUB_TOKEN", ""),
        text_pattern=_input(environ, "text_pattern"),
        text=_input(environ, "text"),
        dry_run=_input(environ, "dry_run", "false"),
        api_base=environ.get("GITHUB_API_URL") or DEFAULT_GITHUB_API_BASE,
    )


def load_pull_request(environ: Mapping[str, str]) -> Optional[PullRequestRef]:
    """Read the pull request from the event payload, or None for other events."""
    event_path = environ.get("GITHUB_EVENT_PATH", "")
    if not event_path or not os.path.exists(event_path):
        return None
    with open(event_path, encoding="utf-8") as handle:
        event: dict[str, Any] = json.load(handle)

    pr = event.get("pull_request")
    if not pr:
        return None

    repo_full = environ.get("GITHUB_REPOSITORY") or ((event.get("repository") or {}).get("full_name") or "")
    if "/" not in repo_full:
        raise ValueError(f"Cannot determine repository from GITHUB_REPOSITORY={repo_full!r}")
    owner, repo = repo_full.split("/", maxsplit=1)
    return PullRequestRef(owner=owner, repo=repo, number=int(pr["number"]), title=pr.get("title") or "")


def _escape_command_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def set_failed(message: str) -> None:
    """Report ``message`` to the workflow run as an error annotation."""
    logger.error("check_failed", extra={"extra": {"reason": message}})
    print(f"::error::{_escape_command_data(message)}", flush=True)


def run(inputs: ActionInputs, pr: PullRequestRef, gh: GitHubClient) -> list[str]:
    """Run every configured check for ``pr`` and return the failure messages."""
    failures: list[str] = []

    def _step(name: str, fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except TitleCheckError as exc:
            failures.append(str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.exception("step_crashed", extra={"extra": {"step": name}})
            failures.append(f"Unexpected error: {exc}")
        return None

    detail: Optional[CommitDetail] = _step("classify", check_conventional_commits, pr.title, inputs.task_types)
    if detail is not None:
        logger.info(
            "title_classified",
            extra={"pr_number": pr.number, "extra": detail.model_dump()},
        )

    _step("scope", check_scope, detail, inputs.scope_types)

    if inputs.text_pattern:
        _step("text_pattern", check_text_matches, inputs.text_pattern, inputs.text or pr.title)

    if detail is not None:
        _step(
            "labels",
            apply_labels,
            gh,
            pr,
            detail,
            parse_task_types(inputs.task_types),
            add_label=inputs.add_label,
            raw_custom_labels=inputs.custom_labels,
            dry_run=as_bool(inputs.dry_run),
        )

    return failures


def main(environ: Optional[Mapping[str, str]] = None) -> int:
    env = os.environ if environ is None else environ
    inputs = load_inputs(env)

    try:
        pr = load_pull_request(env)
    except (OSError, ValueError, KeyError) as exc:
        set_failed(f"Unable to read pull request event: {exc}")
        return 1
    if pr is None:
        print("::warning::No pull request found in the event payload; skipping title check.")
        return 0

    logger.info("pr_title_check_started", extra={"repo": f"{pr.owner}/{pr.repo}", "pr_number": pr.number})
    gh = GitHubClient(token_provider=lambda: inputs.token, api_base=inputs.api_base)

    failures = run(inputs, pr, gh)
    for message in failures:
        set_failed(message)
    if failures:
        return 1

    print(f"Pull request title is valid: {pr.title}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
