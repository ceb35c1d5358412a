"""Scalar and inline-array interpretation for the roadmap markup."""

from __future__ import annotations

import re

from roadmapsync.markup.nodes import ScalarNode, SequenceNode

_NUMBER = re.compile(r"-?[0-9]+(\.[0-9]+)?")
_DOUBLE_QUOTED = re.compile(r'"(.*)"', re.DOTALL)
_SINGLE_QUOTED = re.compile(r"'(.*)'", re.DOTALL)


def parse_scalar(token: str) -> ScalarNode:
    """Classify a raw token as null, boolean, number or string.

    Quoted tokens lose their enclosing quotes and nothing else; there is no
    escape processing. Every token has an interpretation, so this never raises.
    """
    value = token.strip()
    if value == "null":
        return ScalarNode(None)
    if value == "true":
        return ScalarNode(True)
    if value == "false":
        return ScalarNode(False)
    number = _NUMBER.fullmatch(value)
    if number:
        return ScalarNode(float(value) if number.group(1) else int(value))
    quoted = _DOUBLE_QUOTED.fullmatch(value) or _SINGLE_QUOTED.fullmatch(value)
    if quoted:
        return ScalarNode(quoted.group(1))
    return ScalarNode(value)


def parse_inline_array(text: str) -> SequenceNode | None:
    """Decode ``[a, b, c]``; return ``None`` when ``text`` is not bracketed.

    Items are split on every comma, so quoted items cannot contain commas and
    arrays do not nest.
    """
    value = text.strip()
    if not (value.startswith("[") and value.endswith("]")):
        return None
    inner = value[1:-1].strip()
    if not inner:
        return SequenceNode(())
    return SequenceNode(tuple(parse_scalar(part.strip()) for part in inner.split(",")))
