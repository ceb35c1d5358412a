"""Line preprocessing and the cursor shared by the recursive-descent parser."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

TAB_WIDTH = 2
LIST_MARKER = "- "

_TRAILING_COMMENT = re.compile(r"\s+#.*$")
_LEADING_WS = re.compile(r"^[ \t]*")


@dataclass(frozen=True)
class Line:
    """One physical line of the fragment with its structural view precomputed."""

    number: int
    raw: str
    text: str
    indent: int

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()

    @property
    def is_list_marker(self) -> bool:
        return self.text.strip().startswith(LIST_MARKER)

    @property
    def content(self) -> str:
        return self.text.strip()


def split_lines(text: str) -> list[str]:
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def expand_indent(line: str) -> str:
    """Replace leading tabs with ``TAB_WIDTH`` spaces, leaving the rest untouched."""
    leading = _LEADING_WS.match(line).group(0)
    return leading.replace("\t", " " * TAB_WIDTH) + line[len(leading) :]


def count_indent(line: str) -> int:
    expanded = expand_indent(line)
    return len(expanded) - len(expanded.lstrip(" "))


def strip_comment(line: str) -> str:
    if line.lstrip().startswith("#"):
        return ""
    return _TRAILING_COMMENT.sub("", line)


def preprocess(text: str) -> list[Line]:
    """Split ``text`` into :class:`Line` records.

    Blank and comment-only lines are kept so literal blocks can reproduce them;
    the cursor skips them when reading structurally.
    """
    lines: list[Line] = []
    for number, raw in enumerate(split_lines(text), start=1):
        raw = expand_indent(raw)
        structural = strip_comment(raw).rstrip()
        lines.append(Line(number=number, raw=raw, text=structural, indent=count_indent(raw)))
    return lines


@dataclass
class LineCursor:
    """Position over preprocessed lines, owned by a single parse call."""

    lines: list[Line]
    index: int = field(default=0)

    @classmethod
    def from_text(cls, text: str) -> "LineCursor":
        return cls(preprocess(text))

    def _skip_blank(self) -> None:
        while self.index < len(self.lines) and self.lines[self.index].is_blank:
            self.index += 1

    def peek(self) -> Line | None:
        self._skip_blank()
        if self.index >= len(self.lines):
            return None
        return self.lines[self.index]

    def consume(self) -> Line:
        line = self.peek()
        if line is None:
            raise IndexError("cursor exhausted")
        self.index += 1
        return line

    def at_end(self) -> bool:
        return self.peek() is None

    def peek_raw(self) -> Line | None:
        """Return the next physical line without skipping blanks or comments."""
        if self.index >= len(self.lines):
            return None
        return self.lines[self.index]

    def consume_raw(self) -> Line:
        line = self.peek_raw()
        if line is None:
            raise IndexError("cursor exhausted")
        self.index += 1
        return line
