"""Reporter configuration, the reporter interface and shared report helpers."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, TextIO

from .dates import DEFAULT_DATE_FORMAT
from .model import NEGATIVE, POSITIVE, Accumulator, DBNodeMap, Elements, LogNode

RESET = "\x1b[0m"
RED = "\x1b[31m"
GREEN = "\x1b[32m"
OMISSION = "…"


@dataclass
class ReporterConfig:
    """Options shared by all reporters."""

    output: TextIO = field(default_factory=lambda: sys.stdout)
    csv: bool = False
    color: bool = True
    totals_only: bool = False
    totals: bool = True
    date_format: str = DEFAULT_DATE_FORMAT
    unresolved: bool = False
    single_element: str = ""
    single_food: str = ""
    collapse_last: bool = False
    collapse: bool = False
    element_group_by_food: bool = False
    shorten_strings: bool = False
    use_old_reg_reporter: bool = False
    internal_template_name: str = "default"
    csv_separator: str = ","


class Reporter(ABC):
    """Receives log nodes one by one and writes its report on flush."""

    @abstractmethod
    def process(self, log_node: LogNode) -> None:
        """Handle a single log node."""

    @abstractmethod
    def flush(self) -> None:
        """Write out whatever is pending."""


@dataclass
class ReportElement:
    """A logged element together with what it resolves to."""

    name: str
    value: float
    ingredients: Elements = field(default_factory=Elements)


@dataclass
class Total:
    name: str
    positive: float
    negative: float
    sum: float


@dataclass
class ReportItem:
    """Everything a per-day report needs to render one log node."""

    time: datetime
    elements: list[ReportElement]
    totals: Optional[list[Total]] = None


def _totals(acc: Accumulator) -> list[Total]:
    return [
        Total(
            name,
            acc[name][POSITIVE],
            acc[name][NEGATIVE],
            acc[name][POSITIVE] + acc[name][NEGATIVE],
        )
        for name in sorted(acc)
    ]


def get_report_item(log_node: LogNode, db: DBNodeMap, config: ReporterConfig) -> ReportItem:
    """Expand a log node against the database into a report item."""
    acc = Accumulator()
    elements: list[ReportElement] = []
    for element in log_node.elements:
        item = ReportElement(element.name, element.value)
        node = db.get(element.name)
        if node is None:
            item.ingredients.add(element.name, element.value)
            acc.add(element.name, element.value)
        else:
            for ingredient in node.elements:
                amount = ingredient.value * element.value
                item.ingredients.add(ingredient.name, amount)
                acc.add(ingredient.name, amount)
        elements.append(item)
    return ReportItem(
        log_node.time,
        [] if config.totals_only else elements,
        _totals(acc) if config.totals else None,
    )


def shorten(text: str, max_length: int) -> str:
    """Cut text to max_length characters, putting an ellipsis in the middle."""
    if len(text) <= max_length:
        return text
    if max_length <= len(OMISSION):
        return OMISSION[: max(max_length, 0)]
    kept = max_length - len(OMISSION)
    left = kept // 2
    right = kept - left
    return text[:left] + OMISSION + text[len(text) - right:]


def format_value(value: float, color: bool = False) -> str:
    """Format a number ten characters wide, coloured by sign when asked."""
    text = f"{value:10.2f}"
    if color:
        if value > 0:
            return RED + text + RESET
        if value < 0:
            return GREEN + text + RESET
    return text