"""Keep the pull request's type/breaking labels in sync with its title.

Only labels this action could have created (every allowed type plus
``breaking change``) are ever removed; anything a human attached outside that
set is left alone. Custom labels are added but never removed.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict

from pr_title_check.classifier import CommitDetail
from pr_title_check.colors import generate_color
from pr_title_check.errors import InvalidConfigError, LabelSyncError
from pr_title_check.inputs import as_bool
from shared.constants import BREAKING_CHANGE_LABEL
from shared.github_client import GitHubClient
from shared.logging import get_logger

logger = get_logger("labels")


class PullRequestRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    number: int
    title: str = ""


@dataclass(frozen=True)
class LabelPlan:
    to_add: list[str] = field(default_factory=list)
    to_remove: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove


# ---- Pure helpers ------------------------------------------------------------


def parse_custom_labels(raw: Optional[str]) -> dict[str, list[str]]:
    """Decode the ``custom_labels`` input; values may be a string or a list."""
    if not raw or not raw.strip():
        return {}
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidConfigError("custom_labels", "Unable to parse JSON.") from exc
    if not isinstance(value, dict):
        raise InvalidConfigError("custom_labels", "Expecting a JSON object.")

    mapping: dict[str, list[str]] = {}
    for key, labels in value.items():
        if isinstance(labels, str):
            labels = [labels]
        if not isinstance(labels, list) or not all(isinstance(label, str) for label in labels):
            raise InvalidConfigError("custom_labels", f"Labels for '{key}' must be a string or a list of strings.")
        mapping[key] = [label for label in labels if label.strip()]
    return mapping


def managed_label_universe(task_types: Iterable[str]) -> set[str]:
    return set(task_types) | {BREAKING_CHANGE_LABEL}


def desired_labels(detail: CommitDetail, custom_labels: Optional[dict[str, list[str]]] = None) -> set[str]:
    custom = custom_labels or {}
    desired = {detail.type}
    desired.update(custom.get(detail.type, []))
    if detail.breaking:
        desired.add(BREAKING_CHANGE_LABEL)
        desired.update(custom.get(BREAKING_CHANGE_LABEL, []))
    return desired


def plan_label_changes(current: set[str], desired: set[str], managed: set[str]) -> LabelPlan:
    return LabelPlan(
        to_add=sorted(desired - current),
        to_remove=sorted((current & managed) - desired),
    )


# ---- GitHub side effects -----------------------------------------------------


def _create_missing_labels(gh: GitHubClient, pr: PullRequestRef, names: list[str]) -> None:
    """Create repository labels that do not exist yet, colored by name.

    Failures only cost the color: add_labels still creates the label with
    GitHub's default color.
    """
    try:
        existing = {label.get("name", "") for label in gh.list_repository_labels(pr.owner, pr.repo)}
    except Exception as exc:  # noqa: BLE001
        logger.warning("label_list_failed", extra={"extra": {"error": str(exc)}})
        return

    for name in names:
        if name in existing:
            continue
        try:
            gh.create_label(pr.owner, pr.repo, name, generate_color(name))
            logger.info("label_created", extra={"label": name})
        except Exception as exc:  # noqa: BLE001
            logger.warning("label_create_failed", extra={"label": name, "extra": {"error": str(exc)}})


def update_labels(
    gh: GitHubClient,
    pr: PullRequestRef,
    detail: CommitDetail,
    custom_labels: dict[str, list[str]],
    task_types: list[str],
    *,
    dry_run: bool = False,
) -> LabelPlan:
    """Converge the PR's labels to those implied by ``detail``.

    Every planned call is attempted even if an earlier one fails; failures are
    raised together as LabelSyncError once the batch is done.
    """
    current = {label.get("name", "") for label in gh.list_labels_on_issue(pr.owner, pr.repo, pr.number)}
    desired = desired_labels(detail, custom_labels)
    plan = plan_label_changes(current, desired, managed_label_universe(task_types))

    logger.info(
        "labels_planned",
        extra={"pr_number": pr.number, "extra": {"to_add": plan.to_add, "to_remove": plan.to_remove}},
    )
    if plan.is_empty or dry_run:
        return plan

    failures: list[str] = []

    for name in plan.to_remove:
        try:
            gh.remove_label(pr.owner, pr.repo, pr.number, name)
        except Exception as exc:  # noqa: BLE001
            status = getattr(getattr(exc, "response", None), "status_code", None)
            if status == 404:
                logger.info("label_already_removed", extra={"label": name})
                continue
            logger.warning("label_remove_failed", extra={"label": name, "extra": {"error": str(exc)}})
            failures.append(f"remove '{name}': {exc}")

    if plan.to_add:
        _create_missing_labels(gh, pr, plan.to_add)
        try:
            gh.add_labels(pr.owner, pr.repo, pr.number, plan.to_add)
        except Exception as exc:  # noqa: BLE001
            logger.warning("label_add_failed", extra={"extra": {"labels": plan.to_add, "error": str(exc)}})
            failures.append(f"add {', '.join(plan.to_add)}: {exc}")

    if failures:
        raise LabelSyncError(failures)
    return plan


def apply_labels(
    gh: GitHubClient,
    pr: PullRequestRef,
    detail: Optional[CommitDetail],
    task_types: list[str],
    *,
    add_label: Optional[str],
    raw_custom_labels: Optional[str],
    dry_run: bool = False,
) -> Optional[LabelPlan]:
    """Run label sync as configured by the ``add_label`` and ``custom_labels`` inputs."""
    if not as_bool(add_label, default=True):
        logger.info("labels_disabled")
        return None

    custom_labels = parse_custom_labels(raw_custom_labels)
    if detail is None:
        return None
    return update_labels(gh, pr, detail, custom_labels, task_types, dry_run=dry_run)
