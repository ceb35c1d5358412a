"""Locate the roadmap fragment inside a Markdown notes file."""

from __future__ import annotations

import logging
from pathlib import Path

LOG = logging.getLogger(__name__)

BEGIN_MARKER = "<!-- ROADMAP_UPDATE:BEGIN -->"
END_MARKER = "<!-- ROADMAP_UPDATE:END -->"


class MarkerNotFoundError(ValueError):
    """Raised when the sentinel markers are missing or out of order."""

    def __init__(self, begin: str, end: str) -> None:
        self.begin = begin
        self.end = end
        super().__init__(f"Could not find block markers {begin!r} ... {end!r}.")


def extract_block(markdown: str, begin: str = BEGIN_MARKER, end: str = END_MARKER) -> str:
    """Return the stripped text strictly between the first ``begin`` and ``end`` markers."""
    start = markdown.find(begin)
    stop = markdown.find(end)
    if start == -1 or stop == -1 or stop <= start:
        raise MarkerNotFoundError(begin, end)
    return markdown[start + len(begin) : stop].strip()


def read_notes(path: Path, begin: str = BEGIN_MARKER, end: str = END_MARKER) -> str:
    LOG.info("Reading roadmap notes from %s", path)
    return extract_block(path.read_text(encoding="utf-8"), begin, end)
