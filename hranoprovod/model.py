"""Core data types: elements, nodes, accumulators and balance trees."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from operator import attrgetter
from typing import Iterable, Optional

NEGATIVE = 0
POSITIVE = 1
DEFAULT_CATEGORY_SEPARATOR = "/"


class Accumulator(dict):
    """Sums values by name, keeping negative and positive parts apart.

    Every value is a two item list indexed by NEGATIVE and POSITIVE.
    """

    def add(self, name: str, value: float) -> None:
        sign = NEGATIVE if value < 0 else POSITIVE
        registers = self.setdefault(name, [0.0, 0.0])
        registers[sign] += value


@dataclass
class Element:
    """A named quantity."""

    name: str
    value: float


class Elements(list):
    """An ordered list of elements."""

    def add(self, name: str, value: float) -> None:
        self.append(Element(name, value))

    def index(self, name: str) -> Optional[int]:
        """Return the position of the first element called name, or None."""
        return next((pos for pos, el in enumerate(self) if el.name == name), None)

    def sum_merge(self, other: Iterable[Element], mult: float) -> None:
        """Add every element of other, multiplied by mult, into this list."""
        for element in other:
            pos = self.index(element.name)
            if pos is None:
                self.add(element.name, element.value * mult)
            else:
                self[pos].value += element.value * mult

    def sort(self) -> None:
        """Sort the elements by name."""
        super().sort(key=attrgetter("name"))


@dataclass
class MetadataPair:
    name: str
    value: str


@dataclass
class ParserNode:
    """A node as it comes out of the parser."""

    header: str
    elements: Elements = field(default_factory=Elements)
    metadata: Optional[list[MetadataPair]] = None


@dataclass
class DBNode:
    """A food database entry."""

    header: str
    elements: Elements = field(default_factory=Elements)
    metadata: Optional[list[MetadataPair]] = None

    @classmethod
    def from_parser_node(cls, node: ParserNode) -> "DBNode":
        return cls(node.header, node.elements, node.metadata)


class DBNodeMap(dict):
    """Database nodes keyed by header."""

    def push(self, node: DBNode) -> None:
        self[node.header] = node


@dataclass
class LogNode:
    """A dated log entry."""

    time: datetime
    elements: Elements = field(default_factory=Elements)
    metadata: Optional[list[MetadataPair]] = None

    @classmethod
    def from_elements(
        cls,
        time: datetime,
        elements: Iterable[Element],
        metadata: Optional[list[MetadataPair]] = None,
    ) -> "LogNode":
        """Build a log node, summing elements that share a name."""
        merged = Elements()
        for element in elements:
            pos = merged.index(element.name)
            if pos is None:
                merged.add(element.name, element.value)
            else:
                merged[pos].value += element.value
        return cls(time, merged, metadata)


@dataclass
class TreeNode:
    """A node of a balance tree."""

    name: str
    total: float = 0.0
    children: dict[str, "TreeNode"] = field(default_factory=dict)

    def add(self, child: "TreeNode") -> "TreeNode":
        """Attach child, or add its total to an existing child of the same name."""
        existing = self.children.get(child.name)
        if existing is None:
            self.children[child.name] = child
            return child
        existing.total += child.total
        return existing

    def add_deep(self, element: Element, separator: str = DEFAULT_CATEGORY_SEPARATOR) -> None:
        """Add the element's value along every category of its name."""
        parent = self
        for name in element.name.split(separator):
            parent = parent.add(TreeNode(name, element.value))

    def keys(self) -> list[str]:
        return sorted(self.children)

    def first_child(self) -> Optional["TreeNode"]:
        if not self.children:
            return None
        return self.children[self.keys()[0]]