"""Balance report: logged elements summed into a category tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TextIO

from .dates import DEFAULT_DATE_FORMAT
from .filter import FilterConfig
from .model import DEFAULT_CATEGORY_SEPARATOR, DBNodeMap, Element, LogNode, TreeNode
from .parser import ParserConfig
from .reporter import Reporter, ReporterConfig
from .resolver import ResolverConfig
from .walk import walk_with_reporter

_SEPARATOR_LINE = "-" * 11 + "|\n"


@dataclass
class BalanceConfig:
    date_format: str = DEFAULT_DATE_FORMAT
    parser_config: ParserConfig = field(default_factory=ParserConfig)
    resolver_config: ResolverConfig = field(default_factory=ResolverConfig)
    reporter_config: ReporterConfig = field(default_factory=ReporterConfig)
    filter_config: FilterConfig = field(default_factory=FilterConfig)


def _line(total: float, level: int, name: str) -> str:
    return f"{total:10.2f} | {'  ' * level}{name}\n"


def print_node(node: TreeNode, level: int, output: TextIO, collapse_last: bool = False) -> None:
    """Write the children of node as an indented tree.

    With collapse_last, a branch whose only child is a leaf is written on one line.
    """
    for key in node.keys():
        child = node.children[key]
        if collapse_last and len(child.children) == 1:
            only = child.first_child()
            if only is not None and not only.children:
                output.write(_line(child.total, level, f"{child.name}/{only.name}"))
                continue
        output.write(_line(child.total, level, child.name))
        print_node(child, level + 1, output, collapse_last)


def _jump(node: TreeNode) -> list[str]:
    if not node.children:
        return [node.name]
    if len(node.children) == 1:
        only = node.first_child()
        return [node.name, *_jump(only)] if only is not None else [node.name]
    return []


def print_node_collapsed(node: TreeNode, level: int, output: TextIO) -> None:
    """Write the children of node as a tree, joining chains of sole branches."""
    for key in node.keys():
        child = node.children[key]
        jump = _jump(child)
        if jump:
            output.write(_line(child.total, level, "/".join(jump)))
            continue
        output.write(_line(child.total, level, child.name))
        print_node_collapsed(child, level + 1, output)


class BalanceReporter(Reporter):
    """Sums logged elements into a tree and prints it."""

    def __init__(self, config: ReporterConfig, db: DBNodeMap) -> None:
        self.db = db
        self.output = config.output
        self.root = TreeNode("", 0)
        self.collapse_last = config.collapse_last

    def process(self, log_node: LogNode) -> None:
        for element in log_node.elements:
            self.root.add_deep(element, DEFAULT_CATEGORY_SEPARATOR)

    def flush(self) -> None:
        print_node(self.root, 0, self.output, self.collapse_last)


class CollapsedBalanceReporter(Reporter):
    """Sums logged elements into a tree and prints it with sole branches joined."""

    def __init__(self, config: ReporterConfig, db: DBNodeMap) -> None:
        self.db = db
        self.output = config.output
        self.root = TreeNode("", 0)

    def process(self, log_node: LogNode) -> None:
        for element in log_node.elements:
            self.root.add_deep(element, DEFAULT_CATEGORY_SEPARATOR)

    def flush(self) -> None:
        print_node_collapsed(self.root, 0, self.output)


class SingleBalanceReporter(Reporter):
    """Tree of the amount of one element contributed by each logged food."""

    def __init__(self, config: ReporterConfig, db: DBNodeMap) -> None:
        self.db = db
        self.output = config.output
        self.root = TreeNode("", 0)
        self.total = 0.0
        self.single_element = config.single_element
        self.collapse = config.collapse
        self.collapse_last = config.collapse_last

    def process(self, log_node: LogNode) -> None:
        for element in log_node.elements:
            node = self.db.get(element.name)
            if node is None:
                if element.name == self.single_element:
                    self.root.add_deep(Element(element.name, 0), DEFAULT_CATEGORY_SEPARATOR)
                continue
            for ingredient in node.elements:
                if ingredient.name == self.single_element:
                    amount = ingredient.value * element.value
                    self.root.add_deep(Element(element.name, amount), DEFAULT_CATEGORY_SEPARATOR)
                    self.total += amount

    def flush(self) -> None:
        if self.collapse:
            print_node_collapsed(self.root, 0, self.output)
        else:
            print_node(self.root, 0, self.output, self.collapse_last)
        self.output.write(_SEPARATOR_LINE)
        self.output.write(f"{self.total:10.2f} | {self.single_element}\n")


def make_balance_reporter(config: ReporterConfig, db: DBNodeMap) -> Reporter:
    """Pick the balance reporter that the configuration asks for."""
    if config.single_element:
        return SingleBalanceReporter(config, db)
    if config.collapse:
        return CollapsedBalanceReporter(config, db)
    return BalanceReporter(config, db)


def balance(log_stream: TextIO, db_stream: TextIO, config: BalanceConfig) -> None:
    """Write the balance report for the log against the food database."""
    walk_with_reporter(
        log_stream,
        db_stream,
        config.date_format,
        config.parser_config,
        config.resolver_config,
        config.reporter_config,
        config.filter_config,
        make_balance_reporter,
    )