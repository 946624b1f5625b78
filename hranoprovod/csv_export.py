"""CSV exports of the log, the database and the resolved database."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Iterable, TextIO

from .dates import DEFAULT_DATE_FORMAT, format_date
from .filter import FilterConfig, interval_node_filter
from .model import DBNode, LogNode
from .parser import ParserConfig, parse_stream
from .reporter import Reporter, ReporterConfig
from .resolver import ResolverConfig
from .walk import load_database, walk_nodes
from .resolver import resolve

DEFAULT_OUTPUT_TIME_FORMAT = "2006-01-02"
DEFAULT_CSV_SEPARATOR = ","


@dataclass
class CSVConfig:
    """Options of the CSV log export."""

    output: TextIO = field(default_factory=lambda: sys.stdout)
    color: bool = True
    csv_separator: str = DEFAULT_CSV_SEPARATOR
    output_time_format: str = DEFAULT_OUTPUT_TIME_FORMAT


@dataclass
class CSVLogConfig:
    date_format: str = DEFAULT_DATE_FORMAT
    parser_config: ParserConfig = field(default_factory=ParserConfig)
    filter_config: FilterConfig = field(default_factory=FilterConfig)
    reporter_config: CSVConfig = field(default_factory=CSVConfig)


@dataclass
class CSVDatabaseConfig:
    parser_config: ParserConfig = field(default_factory=ParserConfig)
    reporter_config: ReporterConfig = field(default_factory=ReporterConfig)


@dataclass
class CSVDatabaseResolvedConfig:
    parser_config: ParserConfig = field(default_factory=ParserConfig)
    reporter_config: ReporterConfig = field(default_factory=ReporterConfig)
    resolver_config: ResolverConfig = field(default_factory=ResolverConfig)


class _RowWriter:
    """Writes CSV records with minimal quoting and newline line endings."""

    def __init__(self, output: TextIO, separator: str) -> None:
        if (
            len(separator) != 1
            or separator in '"\r\n'
            or separator == "\ufffd"
            or 0xD800 <= ord(separator) <= 0xDFFF
        ):
            raise ValueError("csv: invalid field or comment delimiter")
        self.output = output
        self.separator = separator

    def _needs_quotes(self, text: str) -> bool:
        if text == "":
            return False
        if text == "\\.":
            return True
        if self.separator in text or any(char in text for char in '"\r\n'):
            return True
        return text[0].isspace()

    def _field(self, text: str) -> str:
        if self._needs_quotes(text):
            return '"' + text.replace('"', '""') + '"'
        return text

    def write(self, fields: Iterable[str]) -> None:
        self.output.write(self.separator.join(self._field(text) for text in fields) + "\n")


class CSVReporter(Reporter):
    """Writes one CSV row per logged element: date, name, value."""

    def __init__(self, config: CSVConfig) -> None:
        self.output = config.output
        self.output_time_format = config.output_time_format
        self._writer = _RowWriter(config.output, config.csv_separator)

    def process(self, log_node: LogNode) -> None:
        date = format_date(log_node.time, self.output_time_format)
        for element in log_node.elements:
            self._writer.write((date, element.name, f"{element.value:0.3f}"))

    def flush(self) -> None:
        self.output.flush()


class CSVDatabaseReporter:
    """Writes one CSV row per database element: food, element, value."""

    def __init__(self, config: ReporterConfig) -> None:
        self.output = config.output
        self._writer = _RowWriter(config.output, config.csv_separator)

    def process(self, node: DBNode) -> None:
        for element in node.elements:
            self._writer.write((node.header, element.name, f"{element.value:0.2f}"))

    def flush(self) -> None:
        self.output.flush()


def csv_log(log_stream: TextIO, config: CSVLogConfig) -> None:
    """Export the log as CSV."""
    reporter = CSVReporter(config.reporter_config)
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


def csv_database(db_stream: TextIO, config: CSVDatabaseConfig) -> None:
    """Export the database, as written, as CSV."""
    reporter = CSVDatabaseReporter(config.reporter_config)
    try:
        for node in parse_stream(db_stream, config.parser_config):
            reporter.process(DBNode.from_parser_node(node))
    finally:
        reporter.flush()


def csv_database_resolved(db_stream: TextIO, config: CSVDatabaseResolvedConfig) -> None:
    """Export the resolved database as CSV, foods in name order."""
    db = resolve(config.resolver_config, load_database(db_stream, config.parser_config))
    reporter = CSVDatabaseReporter(config.reporter_config)
    for name in sorted(db):
        reporter.process(db[name])
    reporter.flush()