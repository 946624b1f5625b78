"""Statistics about the database and log files."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .dates import format_date, parse_date
from .model import LogNode
from .parser import ParserConfig, ParserError, parse_file
from .reporter import Reporter, ReporterConfig

ZERO_TIME = datetime.min

_MAX_NANOSECONDS = 2**63 - 1
_MIN_NANOSECONDS = -(2**63)
_NANOSECONDS_PER_HOUR = 3.6e12


@dataclass
class StatsConfig:
    now: datetime = field(default_factory=datetime.now)
    parser_config: ParserConfig = field(default_factory=ParserConfig)
    reporter_config: ReporterConfig = field(default_factory=ReporterConfig)


@dataclass
class StatsData:
    db_file_name: str
    log_file_name: str
    db_records_count: int
    log_records_count: int
    now: datetime
    log_first_record: datetime = ZERO_TIME
    log_last_record: datetime = ZERO_TIME


def _days_between(now: datetime, then: datetime) -> int:
    """Whole days from then to now, with the span capped as a signed 64-bit nanosecond count."""
    delta = now - then
    nanoseconds = (delta.days * 86400 + delta.seconds) * 10**9 + delta.microseconds * 1000
    nanoseconds = max(_MIN_NANOSECONDS, min(_MAX_NANOSECONDS, nanoseconds))
    return int(nanoseconds / _NANOSECONDS_PER_HOUR / 24)


class StatsReporter(Reporter):
    """Writes the collected statistics."""

    def __init__(self, config: ReporterConfig, data: StatsData) -> None:
        self.stats = data
        self.output = config.output
        self.date_format = config.date_format

    def process(self, log_node: LogNode) -> None:
        """Log nodes are not used by this reporter."""

    def _date(self, moment: datetime) -> str:
        return format_date(moment, self.date_format)

    def flush(self) -> None:
        data = self.stats
        first_days = _days_between(data.now, data.log_first_record)
        last_days = _days_between(data.now, data.log_last_record)
        self.output.write(
            f"  Database file:      {data.db_file_name}\n"
            f"  Database records:   {data.db_records_count}\n"
            "\n"
            f"  Log file:           {data.log_file_name}\n"
            f"  Log records:        {data.log_records_count}\n"
            f"  Today:              {self._date(data.now)}\n"
            f"  First record:       {self._date(data.log_first_record)} ({first_days} days ago)\n"
            f"  Last record:        {self._date(data.log_last_record)} ({last_days} days ago)\n"
        )
        self.output.flush()


def stats(log_file_name: str, db_file_name: str, config: StatsConfig) -> None:
    """Count the records of both files and write the statistics."""
    date_format = config.reporter_config.date_format
    # Parse errors do not stop the counting; they are set aside and not reported.
    skipped: list[ParserError] = []
    first: Optional[datetime] = None
    last = ZERO_TIME
    log_count = 0
    for node in parse_file(log_file_name, config.parser_config, on_error=skipped.append):
        try:
            last = parse_date(node.header, date_format)
        except ValueError:
            last = ZERO_TIME
        else:
            if first is None:
                first = last
        log_count += 1

    db_count = sum(
        1 for _ in parse_file(db_file_name, config.parser_config, on_error=skipped.append)
    )

    StatsReporter(
        config.reporter_config,
        StatsData(
            db_file_name=db_file_name,
            log_file_name=log_file_name,
            db_records_count=db_count,
            log_records_count=log_count,
            now=config.now,
            log_first_record=first if first is not None else ZERO_TIME,
            log_last_record=last,
        ),
    ).flush()