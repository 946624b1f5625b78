"""Parser for hranoprovod formatted food databases and logs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Optional, TextIO

from .dates import DEFAULT_DATE_FORMAT
from .model import MetadataPair, ParserNode

__all__ = [
    "DEFAULT_COMMENT_CHAR",
    "DEFAULT_DATE_FORMAT",
    "ErrorBadSyntax",
    "ErrorConversion",
    "ErrorIO",
    "ParserConfig",
    "ParserError",
    "parse_file",
    "parse_stream",
]

DEFAULT_COMMENT_CHAR = "#"

_TRIM_TEXT = "\t \n:\"-"
_TRIM_QTY = "\t \n:\""
_READ_SIZE = 65536


class ParserError(Exception):
    """Base class for parsing errors."""


class ErrorIO(ParserError):
    """A file could not be read."""

    def __init__(self, cause: BaseException, file_name: str) -> None:
        super().__init__(str(cause))
        self.cause = cause
        self.file_name = file_name


class ErrorBadSyntax(ParserError):
    """A line has no value separator."""

    def __init__(self, line_number: int, line: str) -> None:
        super().__init__(f'bad syntax on line {line_number}, "{line}".')
        self.line_number = line_number
        self.line = line


class ErrorConversion(ParserError):
    """An element value is not a number."""

    def __init__(self, text: str, line_number: int, line: str) -> None:
        super().__init__(
            f'error converting "{text}" to float on line {line_number} "{line}".'
        )
        self.text = text
        self.line_number = line_number
        self.line = line


@dataclass
class ParserConfig:
    comment_char: str = DEFAULT_COMMENT_CHAR

    def __post_init__(self) -> None:
        if len(self.comment_char) != 1:
            raise ValueError("comment_char must be a single character")


ErrorHandler = Callable[[ParserError], None]


def _lines(stream: TextIO) -> Iterator[str]:
    """Yield lines split on newline, without a trailing carriage return."""
    pending = ""
    while True:
        chunk = stream.read(_READ_SIZE)
        if not chunk:
            break
        pending += chunk
        *complete, pending = pending.split("\n")
        for line in complete:
            yield line.removesuffix("\r")
    if pending:
        yield pending.removesuffix("\r")


def _parse_float(text: str) -> float:
    if "_" in text or not text.isascii():
        raise ValueError(f"invalid number: {text!r}")
    return float(text)


def _metadata_pair(line: str) -> MetadataPair:
    trimmed = line.strip("#").strip()
    name, separator, value = trimmed.partition(":")
    if separator:
        return MetadataPair(name.strip("# \t"), value.strip())
    return MetadataPair("", trimmed)


def _report(error: ParserError, on_error: Optional[ErrorHandler]) -> None:
    if on_error is None:
        raise error
    on_error(error)


def parse_stream(
    stream: TextIO,
    config: Optional[ParserConfig] = None,
    on_error: Optional[ErrorHandler] = None,
) -> Iterator[ParserNode]:
    """Yield the nodes of a text stream.

    Line errors are raised unless on_error is given, in which case it is
    called with each error and parsing goes on.
    """
    comment = (config or ParserConfig()).comment_char
    node: Optional[ParserNode] = None
    for line_number, line in enumerate(_lines(stream), start=1):
        trimmed = line.strip(_TRIM_TEXT)
        if not trimmed or line[0] == comment:
            continue

        if line[0] not in " \t-":
            if node is not None:
                yield node
            node = ParserNode(trimmed)
            continue

        if node is None:
            continue

        if trimmed[0] == comment:
            if node.metadata is None:
                node.metadata = []
            node.metadata.append(_metadata_pair(trimmed))
            continue

        separator = max(trimmed.rfind("\t"), trimmed.rfind(" "))
        if separator == -1:
            _report(ErrorBadSyntax(line_number, line), on_error)
            continue

        title = trimmed[:separator].strip(_TRIM_TEXT)
        quantity = trimmed[separator:].strip(_TRIM_QTY)
        try:
            value = _parse_float(quantity)
        except ValueError as exc:
            error = ErrorConversion(quantity, line_number, line)
            error.__cause__ = exc
            _report(error, on_error)
            continue
        node.elements.add(title, value)

    if node is not None:
        yield node


def parse_file(
    file_name: str,
    config: Optional[ParserConfig] = None,
    on_error: Optional[ErrorHandler] = None,
) -> Iterator[ParserNode]:
    """Yield the nodes of a file; raise ErrorIO if it cannot be opened."""
    try:
        stream = open(file_name, encoding="utf-8", newline="")
    except OSError as exc:
        raise ErrorIO(exc, file_name) from exc
    with stream:
        yield from parse_stream(stream, config, on_error)