"""Validate a parsed roadmap tree and turn it into a :class:`Roadmap`."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from roadmapsync.markup.nodes import MappingNode, Node, NodeKind, ScalarNode, SequenceNode
from roadmapsync.schema.models import ROADMAP_VERSION, Issue, Label, Milestone, Roadmap

LOG = logging.getLogger(__name__)


class RoadmapSchemaError(ValueError):
    """Raised when a required field is missing or has the wrong kind."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"{path} {message}")


class FieldKind(str, Enum):
    STRING = "string"
    MAPPING = "mapping"
    SEQUENCE = "sequence"


class Policy(str, Enum):
    REQUIRED = "required"  # absent or empty -> error
    OPTIONAL = "optional"  # absent -> left unset
    DEFAULT = "default"  # absent -> default, wrong kind -> error
    COERCE = "coerce"  # absent or wrong kind -> default


@dataclass(frozen=True)
class FieldRule:
    """How one source key maps onto one model field."""

    key: str
    field: str
    kind: FieldKind
    policy: Policy
    default: Optional[Callable[[], Any]] = None


ROOT_RULES: tuple[FieldRule, ...] = (
    FieldRule("OWNER", "default_owner", FieldKind.STRING, Policy.REQUIRED),
    FieldRule("REPOS", "repos", FieldKind.MAPPING, Policy.REQUIRED),
    FieldRule("LABELS", "labels", FieldKind.SEQUENCE, Policy.DEFAULT, SequenceNode),
    FieldRule("MILESTONES", "milestones", FieldKind.SEQUENCE, Policy.DEFAULT, SequenceNode),
)

LABEL_RULES: tuple[FieldRule, ...] = (
    FieldRule("name", "name", FieldKind.STRING, Policy.REQUIRED),
    FieldRule("color", "color", FieldKind.STRING, Policy.OPTIONAL),
    FieldRule("description", "description", FieldKind.STRING, Policy.DEFAULT, str),
)

MILESTONE_RULES: tuple[FieldRule, ...] = (
    FieldRule("repoKey", "repo_key", FieldKind.STRING, Policy.REQUIRED),
    FieldRule("title", "title", FieldKind.STRING, Policy.REQUIRED),
    FieldRule("description", "description", FieldKind.STRING, Policy.DEFAULT, str),
    FieldRule("dueOn", "due_on", FieldKind.STRING, Policy.OPTIONAL),
    FieldRule("issues", "issues", FieldKind.SEQUENCE, Policy.COERCE, SequenceNode),
)

ISSUE_RULES: tuple[FieldRule, ...] = (
    FieldRule("title", "title", FieldKind.STRING, Policy.REQUIRED),
    FieldRule("body", "body", FieldKind.STRING, Policy.DEFAULT, str),
    FieldRule("labels", "labels", FieldKind.SEQUENCE, Policy.COERCE, SequenceNode),
)


def normalize_roadmap(
    root: MappingNode,
    check_repo_keys: bool = True,
    version: str = ROADMAP_VERSION,
) -> Roadmap:
    """Apply the field rules to ``root`` and build the canonical roadmap.

    Missing required fields fail with a :class:`RoadmapSchemaError` naming the
    offending path. Unknown keys are ignored.
    """
    fields = _apply_rules(root, ROOT_RULES, "")

    repos = _normalize_repos(fields["repos"])
    labels = [
        Label(**_apply_rules(_expect_mapping(node, f"LABELS[{idx}]"), LABEL_RULES, f"LABELS[{idx}]."))
        for idx, node in enumerate(fields["labels"])
    ]
    milestones = [
        _normalize_milestone(node, f"MILESTONES[{idx}]")
        for idx, node in enumerate(fields["milestones"])
    ]

    if check_repo_keys:
        for idx, milestone in enumerate(milestones):
            if milestone.repo_key not in repos:
                raise RoadmapSchemaError(
                    f"MILESTONES[{idx}].repoKey",
                    f"references unknown repo '{milestone.repo_key}' (known: {', '.join(repos) or 'none'})",
                )

    LOG.debug("Normalized %d labels and %d milestones", len(labels), len(milestones))
    return Roadmap(
        version=version,
        default_owner=fields["default_owner"],
        repos=repos,
        labels=labels,
        milestones=milestones,
    )


def _normalize_milestone(node: Node, path: str) -> Milestone:
    fields = _apply_rules(_expect_mapping(node, path), MILESTONE_RULES, f"{path}.")
    fields["issues"] = [
        _normalize_issue(issue, f"{path}.issues[{idx}]") for idx, issue in enumerate(fields["issues"])
    ]
    return Milestone(**fields)


def _normalize_issue(node: Node, path: str) -> Issue:
    fields = _apply_rules(_expect_mapping(node, path), ISSUE_RULES, f"{path}.")
    labels: list[str] = []
    for idx, label in enumerate(fields["labels"]):
        if not isinstance(label, ScalarNode):
            raise RoadmapSchemaError(f"{path}.labels[{idx}]", "must be a plain value")
        if label.value is None:
            continue
        text = str(label.value).strip()
        if text:
            labels.append(text)
    fields["labels"] = labels
    return Issue(**fields)


def _normalize_repos(node: MappingNode) -> Dict[str, str]:
    repos: Dict[str, str] = {}
    for key, value in node.items():
        if not (isinstance(value, ScalarNode) and isinstance(value.value, str)):
            raise RoadmapSchemaError(f"REPOS.{key}", "must be a repository name string")
        repos[key] = value.value
    return repos


def _apply_rules(node: MappingNode, rules: Sequence[FieldRule], prefix: str) -> Dict[str, Any]:
    """Resolve every rule against ``node``.

    String fields come back as ``str``; mapping and sequence fields stay nodes so
    callers can descend into them.
    """
    fields: Dict[str, Any] = {}
    for rule in rules:
        path = f"{prefix}{rule.key}"
        value = node.get(rule.key)
        if _is_absent(value):
            if rule.policy is Policy.REQUIRED:
                raise RoadmapSchemaError(path, "is required")
            if rule.policy is not Policy.OPTIONAL:
                fields[rule.field] = _default(rule)
            continue
        if not _matches(value, rule.kind):
            if rule.policy is Policy.COERCE:
                fields[rule.field] = _default(rule)
                continue
            raise RoadmapSchemaError(path, f"must be a {rule.kind.value}")
        if isinstance(value, ScalarNode):
            if rule.policy is Policy.REQUIRED and not value.value:
                raise RoadmapSchemaError(path, "must not be empty")
            fields[rule.field] = value.value
        else:
            fields[rule.field] = value
    unknown = [key for key in node.keys() if key not in {rule.key for rule in rules}]
    if unknown:
        LOG.debug("Ignoring unknown keys at %s: %s", prefix.rstrip(".") or "root", ", ".join(unknown))
    return fields


def _default(rule: FieldRule) -> Any:
    return rule.default() if rule.default is not None else None


def _is_absent(node: Optional[Node]) -> bool:
    if node is None:
        return True
    if isinstance(node, ScalarNode):
        return node.value is None
    # a bare "key:" with nothing nested parses as an empty mapping
    return isinstance(node, MappingNode) and len(node) == 0


def _matches(node: Node, kind: FieldKind) -> bool:
    if kind is FieldKind.STRING:
        return node.kind is NodeKind.SCALAR and isinstance(node.value, str)
    if kind is FieldKind.MAPPING:
        return node.kind is NodeKind.MAPPING
    return node.kind is NodeKind.SEQUENCE


def _expect_mapping(node: Node, path: str) -> MappingNode:
    if not isinstance(node, MappingNode):
        raise RoadmapSchemaError(path, "must be a mapping of fields")
    return node
