"""Immutable value tree produced by the markup parser."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

ScalarValue = Union[None, bool, int, float, str]


class NodeKind(str, Enum):
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


@dataclass(frozen=True)
class ScalarNode:
    """Leaf value: ``None``, a boolean, a number or a string."""

    value: ScalarValue

    kind = NodeKind.SCALAR

    def to_python(self) -> ScalarValue:
        return self.value


@dataclass(frozen=True)
class SequenceNode:
    """Ordered list of nodes."""

    items: tuple["Node", ...] = ()

    kind = NodeKind.SEQUENCE

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator["Node"]:
        return iter(self.items)

    def __getitem__(self, index: int) -> "Node":
        return self.items[index]

    def to_python(self) -> list[Any]:
        return [item.to_python() for item in self.items]


@dataclass(frozen=True)
class MappingNode:
    """Ordered ``(key, node)`` pairs with unique keys."""

    entries: tuple[tuple[str, "Node"], ...] = ()

    kind = NodeKind.MAPPING

    @classmethod
    def from_dict(cls, values: dict[str, "Node"]) -> "MappingNode":
        return cls(tuple(values.items()))

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return any(name == key for name, _ in self.entries)

    def __getitem__(self, key: str) -> "Node":
        for name, node in self.entries:
            if name == key:
                return node
        raise KeyError(key)

    def get(self, key: str, default: "Node | None" = None) -> "Node | None":
        try:
            return self[key]
        except KeyError:
            return default

    def keys(self) -> list[str]:
        return [name for name, _ in self.entries]

    def items(self) -> list[tuple[str, "Node"]]:
        return list(self.entries)

    def to_python(self) -> dict[str, Any]:
        return {name: node.to_python() for name, node in self.entries}


Node = Union[ScalarNode, SequenceNode, MappingNode]
