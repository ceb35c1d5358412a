"""High-level orchestration: notes file in, roadmap JSON out."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from roadmapsync.config import RoadmapSettings
from roadmapsync.data.extract import extract_block, read_notes
from roadmapsync.markup.nodes import MappingNode
from roadmapsync.markup.parser import parse_markup
from roadmapsync.reporting.report import write_roadmap
from roadmapsync.schema.models import Roadmap
from roadmapsync.schema.normalize import normalize_roadmap

LOG = logging.getLogger(__name__)


@dataclass
class PipelineOutput:
    """Artifacts produced by the pipeline."""

    tree: MappingNode
    roadmap: Roadmap
    out_path: Path | None


def convert_fragment(fragment: str, settings: RoadmapSettings) -> tuple[MappingNode, Roadmap]:
    """Parse an already extracted fragment and normalize it."""
    tree = parse_markup(fragment)
    roadmap = normalize_roadmap(
        tree,
        check_repo_keys=settings.check_repo_keys,
        version=settings.version,
    )
    return tree, roadmap


def convert_notes(markdown: str, settings: RoadmapSettings) -> Roadmap:
    """Extract, parse and normalize the roadmap fragment of a notes document."""
    fragment = extract_block(markdown, settings.begin_marker, settings.end_marker)
    _, roadmap = convert_fragment(fragment, settings)
    return roadmap


def run_pipeline(settings: RoadmapSettings, write: bool = True) -> PipelineOutput:
    """Execute the conversion end-to-end.

    Nothing is written unless every stage succeeds.
    """
    fragment = read_notes(settings.notes_path, settings.begin_marker, settings.end_marker)
    LOG.info("Parsing %d-line roadmap fragment", fragment.count("\n") + 1)
    tree, roadmap = convert_fragment(fragment, settings)
    LOG.info(
        "Roadmap has %d repos, %d labels and %d milestones",
        len(roadmap.repos),
        len(roadmap.labels),
        len(roadmap.milestones),
    )

    out_path = None
    if write:
        out_path = write_roadmap(roadmap, settings.out_path)
    return PipelineOutput(tree=tree, roadmap=roadmap, out_path=out_path)
