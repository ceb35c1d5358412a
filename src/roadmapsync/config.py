"""Configuration models and helpers for roadmapsync."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from roadmapsync.data.extract import BEGIN_MARKER, END_MARKER
from roadmapsync.schema.models import ROADMAP_VERSION

PROJECT_ROOT = Path(__file__).resolve().parents[2]

DEFAULT_NOTES_PATH = Path("docs/roadmap-notes.md")
DEFAULT_OUT_PATH = Path("roadmap.json")


class RoadmapSettings(BaseModel):
    """Settings for one notes-to-roadmap conversion."""

    notes_path: Path = Field(default=DEFAULT_NOTES_PATH, description="Markdown file holding the fragment.")
    out_path: Path = Field(default=DEFAULT_OUT_PATH, description="Where the roadmap JSON is written.")
    begin_marker: str = Field(default=BEGIN_MARKER, min_length=1)
    end_marker: str = Field(default=END_MARKER, min_length=1)
    version: str = Field(default=ROADMAP_VERSION, description="Version tag written into the document.")
    check_repo_keys: bool = Field(
        default=True, description="Reject milestones whose repoKey is not listed under REPOS."
    )
    rich_summary: bool = Field(default=True)

    @field_validator("end_marker")
    @classmethod
    def validate_markers_differ(cls, value: str, info: ValidationInfo) -> str:
        """A fragment cannot be delimited by the same string twice."""
        if value == info.data.get("begin_marker"):
            raise ValueError("end_marker must differ from begin_marker")
        return value


def load_settings(
    config_values: Optional[Dict[str, Any]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> RoadmapSettings:
    """
    Build RoadmapSettings from a config mapping and keyword overrides.

    ``config_values`` is typically a config file already loaded into plain
    containers. Overrides are field names (e.g. ``check_repo_keys=False``) and
    win over file values; ``None`` overrides are skipped.
    """
    merged: Dict[str, Any] = RoadmapSettings().model_dump()

    if config_values:
        merged.update(config_values)

    if overrides:
        merged.update({key: value for key, value in overrides.items() if value is not None})

    settings = RoadmapSettings.model_validate(merged)
    return _resolve_relative_paths(settings)


def _resolve_relative_paths(settings: RoadmapSettings) -> RoadmapSettings:
    base = Path(os.environ.get("ROADMAP_ROOT", os.getcwd()))
    updates: Dict[str, Path] = {}
    if not settings.notes_path.is_absolute():
        updates["notes_path"] = base / settings.notes_path
    if not settings.out_path.is_absolute():
        updates["out_path"] = base / settings.out_path
    if not updates:
        return settings
    return settings.model_copy(update=updates)
