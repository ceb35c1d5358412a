"""Command-line entry point for roadmapsync."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, cast

import typer
from omegaconf import DictConfig, OmegaConf
from pydantic import ValidationError

from roadmapsync.config import load_settings
from roadmapsync.data.extract import MarkerNotFoundError
from roadmapsync.markup.parser import MarkupSyntaxError
from roadmapsync.pipeline import run_pipeline
from roadmapsync.reporting.report import emit_report
from roadmapsync.schema.normalize import RoadmapSchemaError

app = typer.Typer(help="roadmapsync: turn the ROADMAP_UPDATE block of a notes file into roadmap JSON.")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s :: %(message)s",
    )


@app.command()
def main(
    notes_path: Path | None = typer.Argument(
        None,
        envvar="NOTES_PATH",
        help="Markdown notes file containing the ROADMAP_UPDATE block.",
    ),
    out_path: Path | None = typer.Option(
        None,
        "--out",
        "-o",
        envvar="OUT_PATH",
        help="Destination for the roadmap JSON.",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Optional OmegaConf YAML configuration to load before applying CLI overrides.",
    ),
    no_check_repos: bool = typer.Option(
        False,
        "--no-check-repos",
        help="Allow milestone repoKeys that are not listed under REPOS.",
    ),
    no_rich: bool = typer.Option(
        False,
        "--no-rich",
        help="Log a plain summary instead of printing rich panels.",
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Validate the notes without writing JSON."),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level (DEBUG, INFO, ...)."),
) -> None:
    """Convert roadmap notes into roadmap JSON."""
    _configure_logging(log_level)

    file_values: Dict[str, Any] | None = None
    if config_file:
        try:
            file_config = cast(DictConfig, OmegaConf.load(config_file))
        except FileNotFoundError as exc:
            typer.secho(f"Config file not found: {config_file}", fg=typer.colors.RED)
            raise typer.Exit(code=1) from exc
        file_values = cast(Dict[str, Any], OmegaConf.to_container(file_config, resolve=True))

    overrides_raw = {
        "notes_path": notes_path,
        "out_path": out_path,
        "check_repo_keys": False if no_check_repos else None,
        "rich_summary": False if no_rich else None,
    }
    overrides = {
        key: (str(value) if isinstance(value, Path) else value)
        for key, value in overrides_raw.items()
        if value is not None
    }
    try:
        settings = load_settings(config_values=file_values, overrides=overrides)
    except ValidationError as exc:
        typer.secho(f"Invalid settings: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc

    logging.getLogger(__name__).info("Converting %s", settings.notes_path)
    try:
        output = run_pipeline(settings, write=not dry_run)
    except FileNotFoundError as exc:
        typer.secho(f"Notes file not found: {exc.filename}", fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc
    except (MarkerNotFoundError, MarkupSyntaxError, RoadmapSchemaError) as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc

    emit_report(output.roadmap, rich_summary=settings.rich_summary)
    if output.out_path is not None:
        typer.echo(f"Wrote {output.out_path} from {settings.notes_path}")


if __name__ == "__main__":  # pragma: no cover
    app()
