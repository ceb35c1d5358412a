"""Result presentation and serialization."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from roadmapsync.schema.models import Roadmap

LOG = logging.getLogger(__name__)


def write_roadmap(roadmap: Roadmap, path: Path) -> Path:
    """Write ``roadmap`` as 2-space indented JSON with a trailing newline."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(roadmap.to_json_dict(), handle, indent=2, ensure_ascii=False)
        handle.write("\n")
    LOG.info("Roadmap JSON exported to %s", path)
    return path


def emit_report(roadmap: Roadmap, rich_summary: bool = True, console: Console | None = None) -> None:
    """Summarize the roadmap on the console, or through logging when rich output is off."""
    if rich_summary:
        _render_rich_panels(roadmap, console or Console())
    else:
        _render_plain(roadmap)


def _render_rich_panels(roadmap: Roadmap, console: Console) -> None:
    repos = ", ".join(f"{key}={name}" for key, name in roadmap.repos.items()) or "n/a"
    labels = ", ".join(label.name for label in roadmap.labels) or "n/a"
    console.print(
        Panel(
            Text("\n".join([f"Owner: {roadmap.default_owner}", f"Repos: {repos}", f"Labels: {labels}"])),
            title=f"Roadmap v{roadmap.version}",
            border_style="cyan",
            expand=False,
        ),
    )

    if not roadmap.milestones:
        console.print(Text("No milestones defined.", style="yellow"))
        return

    for idx, milestone in enumerate(roadmap.milestones, start=1):
        lines = [f"Repo: {milestone.repo_key}"]
        if milestone.due_on:
            lines.append(f"Due: {milestone.due_on}")
        for issue in milestone.issues:
            tags = f" [{', '.join(issue.labels)}]" if issue.labels else ""
            lines.append(f"- {issue.title}{tags}")
        if not milestone.issues:
            lines.append("(no issues)")
        console.print(
            Panel(
                Text("\n".join(lines)),
                title=f"{idx}. {milestone.title}",
                subtitle=f"{len(milestone.issues)} issue(s)",
                expand=False,
            ),
        )


def _render_plain(roadmap: Roadmap) -> None:
    LOG.info(
        "owner=%s repos=%d labels=%d milestones=%d",
        roadmap.default_owner,
        len(roadmap.repos),
        len(roadmap.labels),
        len(roadmap.milestones),
    )
    for idx, milestone in enumerate(roadmap.milestones, start=1):
        LOG.info(
            "[%d] repo=%s title=%s issues=%d",
            idx,
            milestone.repo_key,
            milestone.title,
            len(milestone.issues),
        )
