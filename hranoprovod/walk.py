"""Loading databases and walking log files through reporters."""

from __future__ import annotations

from contextlib import ExitStack, contextmanager
from typing import Callable, Iterable, Iterator, Optional, TextIO

from .dates import parse_date
from .filter import FilterConfig, LogNodeFilter, interval_node_filter
from .model import DBNode, DBNodeMap, LogNode
from .parser import ParserConfig, parse_stream
from .reporter import Reporter, ReporterConfig
from .resolver import ResolverConfig, resolve

ReporterFactory = Callable[[ReporterConfig, DBNodeMap], Reporter]


def load_database(stream: TextIO, parser_config: Optional[ParserConfig] = None) -> DBNodeMap:
    """Read a food database; parse errors are raised."""
    db = DBNodeMap()
    for node in parse_stream(stream, parser_config):
        db.push(DBNode.from_parser_node(node))
    return db


def resolved_database(
    stream: TextIO,
    parser_config: Optional[ParserConfig] = None,
    resolver_config: Optional[ResolverConfig] = None,
) -> DBNodeMap:
    """Read a food database and resolve it."""
    return resolve(resolver_config or ResolverConfig(), load_database(stream, parser_config))


def walk_nodes(
    log_stream: TextIO,
    date_format: str,
    parser_config: Optional[ParserConfig],
    node_filter: Optional[LogNodeFilter],
    reporter: Reporter,
) -> None:
    """Feed every log node that passes the filter to the reporter."""
    for node in parse_stream(log_stream, parser_config):
        moment = parse_date(node.header, date_format)
        if node_filter is not None and not node_filter(moment, node):
            continue
        reporter.process(LogNode.from_elements(moment, node.elements, node.metadata))


def walk_with_reporter(
    log_stream: TextIO,
    db_stream: TextIO,
    date_format: str,
    parser_config: Optional[ParserConfig],
    resolver_config: Optional[ResolverConfig],
    reporter_config: ReporterConfig,
    filter_config: FilterConfig,
    make_reporter: ReporterFactory,
) -> None:
    """Resolve the database, build a reporter for it and walk the log."""
    db = resolved_database(db_stream, parser_config, resolver_config)
    reporter = make_reporter(reporter_config, db)
    try:
        walk_nodes(
            log_stream,
            date_format,
            parser_config,
            interval_node_filter(filter_config),
            reporter,
        )
    finally:
        reporter.flush()


@contextmanager
def open_files(file_names: Iterable[str]) -> Iterator[list[TextIO]]:
    """Open every file for reading and close them all on exit."""
    with ExitStack() as stack:
        yield [
            stack.enter_context(open(name, encoding="utf-8", newline=""))
            for name in file_names
        ]