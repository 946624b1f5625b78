"""Date handling using reference-time layouts such as "2006/01/02"."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterator

DEFAULT_DATE_FORMAT = "2006/01/02"

_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
_DAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

_TOKENS = (
    "January", "Monday", "Jan", "Mon", "MST", "2006",
    "-07:00", "-0700", "Z07:00", "Z0700", "PM", "pm", "_2",
    "15", "01", "02", "03", "04", "05", "06",
    "1", "2", "3", "4", "5",
)

_STRFTIME = {
    "January": "%B", "Monday": "%A", "Jan": "%b", "Mon": "%a", "MST": "%Z",
    "2006": "%Y", "-07:00": "%z", "-0700": "%z", "Z07:00": "%z", "Z0700": "%z",
    "PM": "%p", "pm": "%p", "_2": "%d", "15": "%H",
    "01": "%m", "02": "%d", "03": "%I", "04": "%M", "05": "%S", "06": "%y",
    "1": "%m", "2": "%d", "3": "%I", "4": "%M", "5": "%S",
}


def _hour12(moment: datetime) -> int:
    return moment.hour % 12 or 12


def _offset_minutes(moment: datetime) -> int:
    offset = moment.utcoffset()
    return 0 if offset is None else int(offset.total_seconds() // 60)


def _numeric_zone(moment: datetime, colon: bool, zulu: bool) -> str:
    minutes = _offset_minutes(moment)
    if zulu and minutes == 0:
        return "Z"
    sign = "-" if minutes < 0 else "+"
    hours, mins = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}{':' if colon else ''}{mins:02d}"


_FORMATTERS: dict[str, Callable[[datetime], str]] = {
    "January": lambda m: _MONTHS[m.month - 1],
    "Monday": lambda m: _DAYS[m.weekday()],
    "Jan": lambda m: _MONTHS[m.month - 1][:3],
    "Mon": lambda m: _DAYS[m.weekday()][:3],
    "MST": lambda m: m.tzname() or "UTC",
    "2006": lambda m: f"{m.year:04d}",
    "-07:00": lambda m: _numeric_zone(m, True, False),
    "-0700": lambda m: _numeric_zone(m, False, False),
    "Z07:00": lambda m: _numeric_zone(m, True, True),
    "Z0700": lambda m: _numeric_zone(m, False, True),
    "PM": lambda m: "PM" if m.hour >= 12 else "AM",
    "pm": lambda m: "pm" if m.hour >= 12 else "am",
    "_2": lambda m: f"{m.day:>2d}",
    "15": lambda m: f"{m.hour:02d}",
    "01": lambda m: f"{m.month:02d}",
    "02": lambda m: f"{m.day:02d}",
    "03": lambda m: f"{_hour12(m):02d}",
    "04": lambda m: f"{m.minute:02d}",
    "05": lambda m: f"{m.second:02d}",
    "06": lambda m: f"{m.year % 100:02d}",
    "1": lambda m: str(m.month),
    "2": lambda m: str(m.day),
    "3": lambda m: str(_hour12(m)),
    "4": lambda m: str(m.minute),
    "5": lambda m: str(m.second),
}


def _match_token(layout: str, pos: int) -> str | None:
    for token in _TOKENS:
        if layout.startswith(token, pos):
            following = layout[pos + len(token):pos + len(token) + 1]
            if token in ("Mon", "MST") and following.islower():
                continue
            return token
    return None


def _chunks(layout: str) -> Iterator[tuple[bool, str]]:
    """Yield (is_token, text) pieces of a layout."""
    literal: list[str] = []
    pos = 0
    while pos < len(layout):
        token = _match_token(layout, pos)
        if token is None:
            literal.append(layout[pos])
            pos += 1
            continue
        if literal:
            yield False, "".join(literal)
            literal = []
        yield True, token
        pos += len(token)
    if literal:
        yield False, "".join(literal)


def layout_to_strftime(layout: str) -> str:
    """Convert a reference-time layout into a strptime/strftime pattern."""
    return "".join(
        _STRFTIME[text] if is_token else text.replace("%", "%%")
        for is_token, text in _chunks(layout)
    )


def parse_date(text: str, layout: str) -> datetime:
    """Parse text with the given layout; raise ValueError when it does not match."""
    return datetime.strptime(text, layout_to_strftime(layout))


def format_date(moment: datetime, layout: str) -> str:
    """Format a datetime with the given layout."""
    return "".join(
        _FORMATTERS[text](moment) if is_token else text
        for is_token, text in _chunks(layout)
    )