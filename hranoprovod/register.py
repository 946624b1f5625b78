"""Register report: each log day with its elements, ingredients and totals."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, TextIO

from .dates import DEFAULT_DATE_FORMAT, format_date
from .filter import FilterConfig
from .model import NEGATIVE, POSITIVE, Accumulator, DBNodeMap, LogNode
from .parser import ParserConfig
from .reporter import (
    Reporter,
    ReporterConfig,
    ReportItem,
    format_value,
    get_report_item,
    shorten,
)
from .resolver import ResolverConfig
from .walk import walk_with_reporter

_TOTAL_HEADER = "\t-- TOTAL  " + "-" * 52
_LEFT_ALIGNED_TOTAL_HEADER = "-" * 55 + " TOTAL --"


@dataclass
class RegisterConfig:
    date_format: str = DEFAULT_DATE_FORMAT
    parser_config: ParserConfig = field(default_factory=ParserConfig)
    resolver_config: ResolverConfig = field(default_factory=ResolverConfig)
    reporter_config: ReporterConfig = field(default_factory=ReporterConfig)
    filter_config: FilterConfig = field(default_factory=FilterConfig)


class RegReporter(Reporter):
    """Register report written line by line, without templates."""

    def __init__(self, config: ReporterConfig, db: DBNodeMap) -> None:
        self.config = config
        self.db = db
        self.output = config.output

    def _num(self, value: float) -> str:
        return format_value(value, self.config.color)

    def process(self, log_node: LogNode) -> None:
        config = self.config
        acc = Accumulator()
        out = self.output
        out.write(f"{format_date(log_node.time, config.date_format)}\n")
        for element in log_node.elements:
            if not config.totals_only:
                out.write(f"\t{element.name:<27} :{self._num(element.value)}\n")
            node = self.db.get(element.name)
            if node is None:
                if not config.totals_only:
                    out.write(f"\t\t{element.name:>20} {self._num(element.value)}\n")
                acc.add(element.name, element.value)
                continue
            for ingredient in node.elements:
                amount = ingredient.value * element.value
                if not config.totals_only:
                    out.write(f"\t\t{ingredient.name:>20} {self._num(amount)}\n")
                acc.add(ingredient.name, amount)
        if config.totals and acc:
            out.write(_TOTAL_HEADER + "\n")
            for name in sorted(acc):
                pos, neg = acc[name][POSITIVE], acc[name][NEGATIVE]
                out.write(
                    f"\t\t{name:>20} {self._num(pos)} {self._num(neg)} ={self._num(pos + neg)}\n"
                )

    def flush(self) -> None:
        self.output.flush()


class RegTemplateReporter(Reporter):
    """Register report rendered with one of the built-in layouts."""

    def __init__(self, config: ReporterConfig, db: DBNodeMap) -> None:
        self.config = config
        self.db = db
        self.output = config.output
        self._render: Callable[[ReportItem], str] = (
            self._render_left_aligned
            if config.internal_template_name == "left-aligned"
            else self._render_default
        )

    def _value(self, value: float) -> str:
        return format_value(value, self.config.color)

    def _short(self, text: str, max_length: int) -> str:
        return shorten(text, max_length) if self.config.shorten_strings else text

    def _date(self, item: ReportItem) -> str:
        return format_date(item.time, self.config.date_format)

    def _render_default(self, item: ReportItem) -> str:
        parts = [self._date(item)]
        for element in item.elements:
            parts.append(f"\n\t{self._short(element.name, 27):<27} :{self._value(element.value)}")
            parts.extend(
                f"\n\t\t{self._short(ing.name, 20):>20} {self._value(ing.value)}"
                for ing in element.ingredients
            )
        if item.totals is not None:
            parts.append("\n" + _TOTAL_HEADER)
            parts.extend(
                f"\n\t\t{self._short(total.name, 20):>20} {self._value(total.positive)} "
                f"{self._value(total.negative)} ={self._value(total.sum)}"
                for total in item.totals
            )
        parts.append("\n")
        return "".join(parts)

    def _render_left_aligned(self, item: ReportItem) -> str:
        parts = [self._date(item)]
        for element in item.elements:
            parts.append(f"\n  {self._value(element.value)}  {element.name}")
            parts.extend(
                f"\n  {self._value(ing.value)}    {ing.name}" for ing in element.ingredients
            )
        if item.totals is not None:
            parts.append("\n" + _LEFT_ALIGNED_TOTAL_HEADER)
            parts.extend(
                f"\n  {self._value(total.positive)} {self._value(total.negative)} = "
                f"{self._value(total.sum)}  {total.name}"
                for total in item.totals
            )
        parts.append("\n")
        return "".join(parts)

    def process(self, log_node: LogNode) -> None:
        self.output.write(self._render(get_report_item(log_node, self.db, self.config)))

    def flush(self) -> None:
        self.output.flush()


class SingleReporter(Reporter):
    """One line per day with the amount of a single element."""

    def __init__(self, config: ReporterConfig, db: DBNodeMap) -> None:
        self.config = config
        self.db = db
        self.output = config.output

    def process(self, log_node: LogNode) -> None:
        single = self.config.single_element
        acc = Accumulator()
        for element in log_node.elements:
            node = self.db.get(element.name)
            if node is None:
                if element.name == single:
                    acc.add(element.name, element.value)
                continue
            for ingredient in node.elements:
                if ingredient.name == single:
                    acc.add(ingredient.name, ingredient.value * element.value)
        if not acc:
            return
        pos, neg = acc[single][POSITIVE], acc[single][NEGATIVE]
        date = format_date(log_node.time, self.config.date_format)
        if self.config.csv:
            line = f'{date};"{single}";{pos:0.2f};{-1 * neg:0.2f};{pos + neg:0.2f}\n'
        else:
            line = f"{date} {single:>20} {pos:10.2f} {-1 * neg:10.2f} ={pos + neg:10.2f}\n"
        self.output.write(line)

    def flush(self) -> None:
        self.output.flush()


class SingleFoodReporter(Reporter):
    """Lists logged foods whose name matches a regular expression."""

    def __init__(self, config: ReporterConfig, db: DBNodeMap) -> None:
        self.config = config
        self.db = db
        self.output = config.output
        self._pattern = re.compile(config.single_food)

    def process(self, log_node: LogNode) -> None:
        date = format_date(log_node.time, self.config.date_format)
        for element in log_node.elements:
            if self._pattern.search(element.name):
                self.output.write(f"{date}\t{element.name}\t{element.value:0.2f}\n")

    def flush(self) -> None:
        self.output.flush()


class ElementByFoodReporter(Reporter):
    """Totals of a single element grouped by the food it came from."""

    def __init__(self, config: ReporterConfig, db: DBNodeMap) -> None:
        self.config = config
        self.db = db
        self.output = config.output
        self.acc = Accumulator()

    def process(self, log_node: LogNode) -> None:
        single = self.config.single_element
        for element in log_node.elements:
            node = self.db.get(element.name)
            if node is None:
                continue
            for ingredient in node.elements:
                if ingredient.name == single:
                    self.acc.add(node.header, ingredient.value * element.value)

    def flush(self) -> None:
        for name in sorted(self.acc):
            registers = self.acc[name]
            self.output.write(f"{registers[POSITIVE] + registers[NEGATIVE]:10.2f}\t{name}\n")
        self.output.flush()


def new_reg_reporter(config: ReporterConfig, db: DBNodeMap) -> Reporter:
    """Pick the register reporter that the configuration asks for."""
    if config.single_element:
        if config.element_group_by_food:
            return ElementByFoodReporter(config, db)
        return SingleReporter(config, db)
    if config.single_food:
        return SingleFoodReporter(config, db)
    if config.use_old_reg_reporter:
        return RegReporter(config, db)
    return RegTemplateReporter(config, db)


def register(log_stream: TextIO, db_stream: TextIO, config: RegisterConfig) -> None:
    """Write the register report for the log against the food database."""
    walk_with_reporter(
        log_stream,
        db_stream,
        config.date_format,
        config.parser_config,
        config.resolver_config,
        config.reporter_config,
        config.filter_config,
        new_reg_reporter,
    )