"""Recursive-descent parser for the indentation-based roadmap markup.

The markup is a small YAML-like subset:

- ``key: value`` scalars, ``key: [a, b]`` inline arrays and ``key: |`` literal blocks
- ``key:`` followed by a nested mapping or list one indentation step deeper
- ``- value`` list items and ``- key: value`` object items whose further fields
  follow on the next lines without repeating the marker
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from roadmapsync.markup.lines import LIST_MARKER, Line, LineCursor
from roadmapsync.markup.nodes import MappingNode, Node, ScalarNode, SequenceNode
from roadmapsync.markup.scalars import parse_inline_array, parse_scalar

LOG = logging.getLogger(__name__)

INDENT_STEP = 2

_KEY_VALUE = re.compile(r"^\s*([^:]+):\s*(.*?)\s*$")


class MarkupSyntaxError(ValueError):
    """Raised when the fragment's structure cannot be parsed."""

    def __init__(self, reason: str, line: Line | None = None) -> None:
        self.reason = reason
        self.line_number = line.number if line is not None else None
        self.line = line.raw if line is not None else None
        if line is None:
            message = reason
        else:
            message = f"line {line.number}: {reason}: '{line.raw.strip()}'"
        super().__init__(message)


def parse_markup(text: str) -> MappingNode:
    """Parse a whole fragment into its root mapping."""
    cursor = LineCursor.from_text(text)
    root = parse_block(cursor, 0)
    leftover = cursor.peek()
    if leftover is not None:
        # the root frame only stops early on a list marker at column 0
        raise MarkupSyntaxError("List item outside of a list", leftover)
    LOG.debug("Parsed %d top-level keys from %d lines", len(root), len(cursor.lines))
    return root


def load_markup(path: Path | str) -> MappingNode:
    return parse_markup(Path(path).read_text(encoding="utf-8"))


def parse_block(cursor: LineCursor, indent: int) -> MappingNode:
    """Consume key lines at exactly ``indent`` into a mapping."""
    values: dict[str, Node] = {}
    while True:
        line = cursor.peek()
        if line is None or line.indent < indent:
            break
        if line.indent > indent:
            raise MarkupSyntaxError("Unexpected indent", line)
        if line.is_list_marker:
            break
        key, rest = _split_key_value(line.content, line)
        cursor.consume()
        values[key] = parse_value(cursor, rest, indent)
    return MappingNode.from_dict(values)


def parse_list(cursor: LineCursor, indent: int) -> SequenceNode:
    """Consume ``- `` lines at exactly ``indent`` into a sequence."""
    items: list[Node] = []
    while True:
        line = cursor.peek()
        if line is None or line.indent < indent:
            break
        if line.indent > indent:
            raise MarkupSyntaxError("Unexpected indent in list", line)
        if not line.is_list_marker:
            break
        cursor.consume()
        content = line.content[len(LIST_MARKER) :]
        if ":" not in content:
            items.append(parse_scalar(content))
            continue
        items.append(_parse_list_object(cursor, content, line, indent))
    return SequenceNode(tuple(items))


def _parse_list_object(cursor: LineCursor, content: str, marker: Line, indent: int) -> MappingNode:
    field_indent = indent + INDENT_STEP
    key, rest = _split_key_value(content, marker, reason="Invalid list object item")
    # block text is measured from the field column, nested values from the marker
    owner_indent = field_indent if rest == "|" else indent
    values: dict[str, Node] = {key: parse_value(cursor, rest, owner_indent)}

    while True:
        line = cursor.peek()
        if line is None or line.indent <= indent or line.is_list_marker:
            break
        if line.indent != field_indent:
            raise MarkupSyntaxError("Unexpected indent in list object", line)
        key, rest = _split_key_value(line.content, line, reason="Invalid nested key in list object")
        cursor.consume()
        values[key] = parse_value(cursor, rest, field_indent)

    return MappingNode.from_dict(values)


def parse_value(cursor: LineCursor, rest: str, key_indent: int) -> Node:
    """Interpret what follows ``key:`` for a key sitting at ``key_indent``."""
    if rest == "|":
        return ScalarNode(_read_literal_block(cursor, key_indent))

    array = parse_inline_array(rest)
    if array is not None:
        return array

    if rest:
        return parse_scalar(rest)

    child = cursor.peek()
    if child is None or child.indent <= key_indent:
        return MappingNode()
    if child.indent != key_indent + INDENT_STEP:
        raise MarkupSyntaxError(
            f"Unexpected indent (expected {key_indent + INDENT_STEP} columns, got {child.indent})",
            child,
        )
    if child.is_list_marker:
        return parse_list(cursor, child.indent)
    return parse_block(cursor, child.indent)


def _read_literal_block(cursor: LineCursor, key_indent: int) -> str:
    strip = key_indent + INDENT_STEP
    out: list[str] = []
    while True:
        line = cursor.peek_raw()
        if line is None:
            break
        if line.raw.strip() and line.indent <= key_indent:
            break
        cursor.consume_raw()
        text = line.raw
        out.append(text[min(strip, line.indent) :] if text.strip() else "")
    return "\n".join(out).rstrip()


def _split_key_value(text: str, line: Line, reason: str = "Invalid line") -> tuple[str, str]:
    match = _KEY_VALUE.match(text)
    if not match or not match.group(1).strip():
        raise MarkupSyntaxError(reason, line)
    return match.group(1).strip(), match.group(2)
