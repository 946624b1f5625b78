"""Resolution of nested food database entries into base elements."""

from __future__ import annotations

from dataclasses import dataclass

from .model import DBNodeMap, Element, Elements

DEFAULT_MAX_DEPTH = 10


@dataclass
class ResolverConfig:
    max_depth: int = DEFAULT_MAX_DEPTH


class ResolutionDepthError(Exception):
    """Raised when nesting goes deeper than the configured maximum."""

    def __init__(self) -> None:
        super().__init__("maximum resolution depth reached")


def _resolve_node(max_depth: int, db: DBNodeMap, name: str, level: int) -> None:
    if level >= max_depth:
        raise ResolutionDepthError()
    node = db.get(name)
    if node is None:
        return
    resolved = Elements()
    for element in node.elements:
        _resolve_node(max_depth, db, element.name, level + 1)
        found = db.get(element.name)
        if found is not None:
            resolved.sum_merge(found.elements, element.value)
        else:
            resolved.sum_merge([Element(element.name, element.value)], 1)
    resolved.sort()
    node.elements = resolved


def resolve(config: ResolverConfig, db: DBNodeMap) -> DBNodeMap:
    """Replace each node's elements with their resolved base elements, in place."""
    for name in list(db):
        _resolve_node(config.max_depth, db, name, 0)
    return db