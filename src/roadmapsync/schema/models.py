"""Canonical roadmap document models."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

ROADMAP_VERSION = "1.0"


class _Document(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Label(_Document):
    """Repository label kept in sync across every referenced repo."""

    name: str
    color: Optional[str] = Field(default=None, description="Hex colour without the leading '#'.")
    description: str = Field(default="")


class Issue(_Document):
    """Work item filed under a milestone."""

    title: str
    body: str = Field(default="")
    labels: List[str] = Field(default_factory=list)


class Milestone(_Document):
    """Milestone in one repository with its ordered issues."""

    repo_key: str = Field(alias="repoKey", description="Key into ``Roadmap.repos``.")
    title: str
    description: str = Field(default="")
    due_on: Optional[str] = Field(default=None, alias="dueOn")
    issues: List[Issue] = Field(default_factory=list)


class Roadmap(_Document):
    """Top-level document handed to the sync step."""

    version: str = Field(default=ROADMAP_VERSION)
    default_owner: str = Field(alias="defaultOwner")
    repos: Dict[str, str]
    labels: List[Label] = Field(default_factory=list)
    milestones: List[Milestone] = Field(default_factory=list)

    def to_json_dict(self) -> Dict[str, Any]:
        """Plain JSON-compatible dict with camelCase keys; unset optionals are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
