"""Linting of hranoprovod files for parse errors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TextIO

from .parser import ParserConfig, ParserError, parse_stream
from .reporter import ReporterConfig


@dataclass
class LintConfig:
    silent: bool = False
    parser_config: ParserConfig = field(default_factory=ParserConfig)
    reporter_config: ReporterConfig = field(default_factory=ReporterConfig)


def lint(stream: TextIO, config: LintConfig) -> None:
    """Write every parse error in the stream, then a closing note unless silent."""
    output = config.reporter_config.output

    def report(error: ParserError) -> None:
        print(error, file=output)

    for _ in parse_stream(stream, config.parser_config, on_error=report):
        pass
    if not config.silent:
        print("No errors found", file=output)