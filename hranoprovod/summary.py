"""Summary report: totals and logged foods for a day."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TextIO

from .dates import DEFAULT_DATE_FORMAT, format_date
from .filter import FilterConfig
from .model import DBNodeMap, LogNode
from .parser import ParserConfig
from .reporter import Reporter, ReporterConfig, format_value, get_report_item
from .resolver import ResolverConfig
from .walk import walk_with_reporter


@dataclass
class SummaryConfig:
    date_format: str = DEFAULT_DATE_FORMAT
    parser_config: ParserConfig = field(default_factory=ParserConfig)
    resolver_config: ResolverConfig = field(default_factory=ResolverConfig)
    reporter_config: ReporterConfig = field(default_factory=ReporterConfig)
    filter_config: FilterConfig = field(default_factory=FilterConfig)


class SummaryReporter(Reporter):
    """Writes the positive totals and the logged foods of each day."""

    def __init__(self, config: ReporterConfig, db: DBNodeMap) -> None:
        self.config = config
        self.db = db
        self.output = config.output

    def process(self, log_node: LogNode) -> None:
        item = get_report_item(log_node, self.db, self.config)
        color = self.config.color
        parts = [f"{format_date(item.time, self.config.date_format)} :"]
        parts.extend(
            f"\n{format_value(total.positive, color)} : {total.name}"
            for total in item.totals or ()
        )
        parts.append("\n------------")
        parts.extend(
            f"\n{format_value(element.value, color)} : {element.name}"
            for element in item.elements
        )
        parts.append("\n")
        self.output.write("".join(parts))

    def flush(self) -> None:
        self.output.flush()


def day_interval(moment: datetime) -> tuple[datetime, datetime]:
    """Return the first and the last instant of the day of moment."""
    begin = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    return begin, begin + timedelta(days=1) - timedelta(microseconds=1)


def summary(log_stream: TextIO, db_stream: TextIO, config: SummaryConfig) -> None:
    """Write the summary report for the log against the food database."""
    walk_with_reporter(
        log_stream,
        db_stream,
        config.date_format,
        config.parser_config,
        config.resolver_config,
        config.reporter_config,
        config.filter_config,
        SummaryReporter,
    )