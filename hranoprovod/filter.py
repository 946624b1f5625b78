"""Filtering of log nodes by date interval."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .model import ParserNode

LogNodeFilter = Callable[[datetime, ParserNode], bool]


@dataclass
class FilterConfig:
    beginning_time: Optional[datetime] = None
    end_time: Optional[datetime] = None


def interval_node_filter(config: FilterConfig) -> Optional[LogNodeFilter]:
    """Return a filter keeping nodes within the inclusive interval, or None if unbounded."""
    begin, end = config.beginning_time, config.end_time
    if begin is None and end is None:
        return None

    def node_filter(moment: datetime, node: ParserNode) -> bool:
        if begin is not None and moment < begin:
            return False
        if end is not None and moment > end:
            return False
        return True

    return node_filter