"""Assorted reports: element totals, unresolved foods, quantities and totals."""

from __future__ import annotations

from dataclasses import dataclass, field
from operator import attrgetter, itemgetter
from typing import Iterable, TextIO

from .dates import DEFAULT_DATE_FORMAT
from .filter import FilterConfig, interval_node_filter
from .model import NEGATIVE, POSITIVE, Accumulator, DBNodeMap, Element, LogNode
from .parser import ParserConfig
from .reporter import Reporter, ReporterConfig
from .resolver import ResolverConfig
from .walk import resolved_database, walk_nodes, walk_with_reporter


@dataclass
class ReportElementConfig:
    element_name: str = ""
    descending: bool = False
    parser_config: ParserConfig = field(default_factory=ParserConfig)
    resolver_config: ResolverConfig = field(default_factory=ResolverConfig)
    reporter_config: ReporterConfig = field(default_factory=ReporterConfig)


@dataclass
class ReportUnresolvedConfig:
    date_format: str = DEFAULT_DATE_FORMAT
    parser_config: ParserConfig = field(default_factory=ParserConfig)
    resolver_config: ResolverConfig = field(default_factory=ResolverConfig)
    reporter_config: ReporterConfig = field(default_factory=ReporterConfig)
    filter_config: FilterConfig = field(default_factory=FilterConfig)


@dataclass
class ReportQuantityConfig:
    date_format: str = DEFAULT_DATE_FORMAT
    descending: bool = False
    parser_config: ParserConfig = field(default_factory=ParserConfig)
    reporter_config: ReporterConfig = field(default_factory=ReporterConfig)
    filter_config: FilterConfig = field(default_factory=FilterConfig)


@dataclass
class ReportTotalsConfig:
    date_format: str = DEFAULT_DATE_FORMAT
    parser_config: ParserConfig = field(default_factory=ParserConfig)
    resolver_config: ResolverConfig = field(default_factory=ResolverConfig)
    reporter_config: ReporterConfig = field(default_factory=ReporterConfig)
    filter_config: FilterConfig = field(default_factory=FilterConfig)


class ElementReporter(Reporter):
    """Writes a prepared list of elements, one per line."""

    def __init__(self, config: ReporterConfig, elements: Iterable[Element]) -> None:
        self.output = config.output
        self.elements = list(elements)

    def process(self, log_node: LogNode) -> None:
        """Log nodes are not used by this reporter."""

    def flush(self) -> None:
        for element in self.elements:
            self.output.write(f"{element.value:0.2f}\t{element.name}\n")
        self.output.flush()


class QuantityReporter(Reporter):
    """Sums the logged quantity of every food and lists them sorted by total."""

    def __init__(self, config: ReporterConfig, descending: bool = False) -> None:
        self.output = config.output
        self.descending = descending
        self.accumulator: dict[str, float] = {}

    def process(self, log_node: LogNode) -> None:
        for element in log_node.elements:
            self.accumulator[element.name] = self.accumulator.get(element.name, 0.0) + element.value

    def flush(self) -> None:
        ordered = sorted(self.accumulator.items(), key=itemgetter(1), reverse=self.descending)
        for name, value in ordered:
            self.output.write(f"{value:0.2f}\t{name}\n")
        self.output.flush()


class TotalReporter(Reporter):
    """Totals of every resolved element over the whole log."""

    def __init__(self, config: ReporterConfig, db: DBNodeMap) -> None:
        self.output = config.output
        self.db = db
        self.acc = Accumulator()

    def process(self, log_node: LogNode) -> None:
        for element in log_node.elements:
            node = self.db.get(element.name)
            if node is None:
                self.acc.add(element.name, element.value)
                continue
            for ingredient in node.elements:
                self.acc.add(ingredient.name, ingredient.value * element.value)

    def flush(self) -> None:
        if self.acc:
            self.output.write(f"{'positive':>12}  {'negative':>12}  {'sum':>12}  element\n")
            for name in sorted(self.acc):
                positive = self.acc[name][POSITIVE]
                negative = self.acc[name][NEGATIVE]
                self.output.write(
                    f"{positive:12.2f}  {negative:12.2f}  {positive + negative:12.2f}  {name}\n"
                )
        self.output.flush()


class UnresolvedReporter(Reporter):
    """Lists logged names that have no database entry."""

    def __init__(self, config: ReporterConfig, db: DBNodeMap) -> None:
        self.output = config.output
        self.db = db
        self.names: dict[str, None] = {}

    def process(self, log_node: LogNode) -> None:
        for element in log_node.elements:
            if element.name not in self.db:
                self.names.setdefault(element.name, None)

    def flush(self) -> None:
        for name in self.names:
            self.output.write(f"{name}\n")
        self.output.flush()


def report_element(db_stream: TextIO, config: ReportElementConfig) -> None:
    """List every food of the resolved database containing the element, sorted by amount."""
    db = resolved_database(db_stream, config.parser_config, config.resolver_config)
    found = [
        Element(name, element.value)
        for name, node in db.items()
        for element in node.elements
        if element.name == config.element_name
    ]
    found.sort(key=attrgetter("value"), reverse=config.descending)
    ElementReporter(config.reporter_config, found).flush()


def report_unresolved(log_stream: TextIO, db_stream: TextIO, config: ReportUnresolvedConfig) -> None:
    """Write the logged names missing from the database."""
    walk_with_reporter(
        log_stream,
        db_stream,
        config.date_format,
        config.parser_config,
        config.resolver_config,
        config.reporter_config,
        config.filter_config,
        UnresolvedReporter,
    )


def report_quantity(log_stream: TextIO, config: ReportQuantityConfig) -> None:
    """Write the total logged quantity of every food."""
    reporter = QuantityReporter(config.reporter_config, config.descending)
    try:
        walk_nodes(
            log_stream,
            config.date_format,
            config.parser_config,
            interval_node_filter(config.filter_config),
            reporter,
        )
    finally:
        reporter.flush()


def report_totals(log_stream: TextIO, db_stream: TextIO, config: ReportTotalsConfig) -> None:
    """Write the totals of every resolved element over the log."""
    walk_with_reporter(
        log_stream,
        db_stream,
        config.date_format,
        config.parser_config,
        config.resolver_config,
        config.reporter_config,
        config.filter_config,
        TotalReporter,
    )