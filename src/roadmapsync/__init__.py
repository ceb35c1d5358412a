"""
roadmapsync package initialisation.

Converts the ROADMAP_UPDATE block of a Markdown notes file into the roadmap JSON
document consumed by the issue-tracker sync job.
"""

from importlib import metadata


def get_version() -> str:
    """Return the installed package version, falling back to source version during development."""
    try:
        return metadata.version("roadmapsync")
    except metadata.PackageNotFoundError:  # pragma: no cover - only occurs during dev
        return "0.1.0"


__all__ = ["get_version"]
