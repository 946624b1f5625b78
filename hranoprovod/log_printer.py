"""Printing the log back out in its own format."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TextIO

from .dates import DEFAULT_DATE_FORMAT, format_date
from .filter import FilterConfig, interval_node_filter
from .model import LogNode
from .parser import ParserConfig
from .reporter import Reporter, ReporterConfig
from .walk import walk_nodes


@dataclass
class PrintConfig:
    date_format: str = DEFAULT_DATE_FORMAT
    parser_config: ParserConfig = field(default_factory=ParserConfig)
    reporter_config: ReporterConfig = field(default_factory=ReporterConfig)
    filter_config: FilterConfig = field(default_factory=FilterConfig)


class PrintReporter(Reporter):
    """Writes each log node with its metadata and merged elements."""

    def __init__(self, config: ReporterConfig) -> None:
        self.output = config.output
        self.date_format = config.date_format

    def process(self, log_node: LogNode) -> None:
        lines = [f"{format_date(log_node.time, self.date_format)}:"]
        for pair in log_node.metadata or ():
            if pair.name:
                lines.append(f"  # {pair.name}: {pair.value}")
            else:
                lines.append(f"  # {pair.value}")
        lines.extend(f"  - {el.name}: {el.value:0.2f}" for el in log_node.elements)
        lines.append("")
        self.output.write("\n".join(lines) + "\n")

    def flush(self) -> None:
        self.output.flush()


def print_log(log_stream: TextIO, config: PrintConfig) -> None:
    """Read the log and write it back out."""
    reporter = PrintReporter(config.reporter_config)
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