"""Option loading from a configuration file and command line settings."""

from __future__ import annotations

import configparser
import os
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, TextIO

from dateutil import parser as dateutil_parser
from dateutil.relativedelta import relativedelta

from .dates import DEFAULT_DATE_FORMAT, parse_date
from .filter import FilterConfig
from .parser import ParserConfig
from .reporter import ReporterConfig
from .resolver import DEFAULT_MAX_DEPTH, ResolverConfig

CONFIG_FILE_NAME = "/.hranoprovod/config"
DEFAULT_DB_FILENAME = "food.yaml"
DEFAULT_LOG_FILENAME = "log.yaml"

_SHORTCUT_DAYS = {"today": 0, "yesterday": 1, "last7": 7, "last30": 30}

_RELATIVE = re.compile(
    r"(?P<amount>\d+|an?|one)\s+"
    r"(?P<unit>minute|hour|day|week|month|year)s?\s+"
    r"(?P<direction>ago|from now)"
)
_LAST_NEXT = re.compile(r"(?P<direction>last|next)\s+(?P<unit>day|week|month|year)")


def _naive_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def _parse_timestamp(text: str) -> datetime:
    text = text.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return _naive_utc(datetime.fromisoformat(text))


@dataclass
class GlobalConfig:
    now: datetime = field(default_factory=datetime.now)
    db_file_name: str = DEFAULT_DB_FILENAME
    log_file_name: str = DEFAULT_LOG_FILENAME
    date_format: str = DEFAULT_DATE_FORMAT


_CONFIG_KEYS: dict[str, dict[str, tuple[str, str, Callable[[str], Any]]]] = {
    "global": {
        "now": ("global_config", "now", _parse_timestamp),
        "dbfilename": ("global_config", "db_file_name", str),
        "logfilename": ("global_config", "log_file_name", str),
        "dateformat": ("global_config", "date_format", str),
    },
    "resolver": {
        "maxdepth": ("resolver_config", "max_depth", int),
    },
}


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def _is_set(settings: Mapping[str, Any], name: str) -> bool:
    value = settings.get(name)
    return value is not None and value is not False


def default_config_path() -> str:
    """Return the configuration file path in the user's home, or "" if unknown."""
    try:
        return str(Path.home()) + CONFIG_FILE_NAME
    except (RuntimeError, KeyError):
        return ""


def _relative_delta(unit: str, amount: int) -> relativedelta:
    return relativedelta(**{unit + "s": amount})


def _natural_date(text: str, reference: datetime) -> datetime:
    cleaned = " ".join(text.lower().split())
    if cleaned in ("", "now"):
        return reference
    if cleaned == "tomorrow":
        return reference + timedelta(days=1)
    match = _RELATIVE.fullmatch(cleaned)
    if match:
        raw = match["amount"]
        amount = int(raw) if raw.isdigit() else 1
        if match["direction"] == "ago":
            amount = -amount
        return reference + _relative_delta(match["unit"], amount)
    match = _LAST_NEXT.fullmatch(cleaned)
    if match:
        amount = -1 if match["direction"] == "last" else 1
        return reference + _relative_delta(match["unit"], amount)
    midnight = reference.replace(hour=0, minute=0, second=0, microsecond=0)
    try:
        return _naive_utc(dateutil_parser.parse(text, default=midnight))
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"cannot parse date {text!r}") from exc


def time_from_string(now: datetime, date_format: str, text: str) -> datetime:
    """Turn a shortcut, a formatted date or a natural language date into a datetime."""
    if text in _SHORTCUT_DAYS:
        return now - timedelta(days=_SHORTCUT_DAYS[text])
    try:
        return parse_date(text, date_format)
    except ValueError:
        pass
    return _natural_date(text, datetime.now())


@dataclass
class Options:
    """All configuration the commands need."""

    global_config: GlobalConfig = field(default_factory=GlobalConfig)
    resolver_config: ResolverConfig = field(default_factory=ResolverConfig)
    parser_config: ParserConfig = field(default_factory=ParserConfig)
    reporter_config: ReporterConfig = field(default_factory=ReporterConfig)
    filter_config: FilterConfig = field(default_factory=FilterConfig)

    def load_config_file(self, stream: TextIO) -> None:
        """Read [Global] and [Resolver] settings from an ini style stream."""
        config = configparser.ConfigParser(
            interpolation=None,
            strict=False,
            comment_prefixes=("#", ";"),
            inline_comment_prefixes=("#", ";"),
        )
        try:
            config.read_file(stream)
        except configparser.Error as exc:
            raise ValueError(f"invalid configuration: {exc}") from exc
        for section in config.sections():
            keys = _CONFIG_KEYS.get(section.lower())
            if keys is None:
                raise ValueError(f"invalid section {section!r}")
            for key, raw in config.items(section):
                target = keys.get(key.lower())
                if target is None:
                    raise ValueError(f"invalid variable {key!r} in section {section!r}")
                holder, attribute, convert = target
                setattr(getattr(self, holder), attribute, convert(_unquote(raw)))

    def load(self, settings: Optional[Mapping[str, Any]] = None, use_config_file: bool = True) -> None:
        """Apply the configuration file and then the explicitly set command line settings.

        settings maps option names such as "database" or "date-format" to values;
        an option counts as set when present with a value other than None or False.
        """
        settings = settings or {}
        if use_config_file:
            self._load_config(settings)
        self._populate_globals(settings)
        self._populate_resolver(settings)
        self._populate_reporter(settings)
        self._populate_filter(settings)

    def _load_config(self, settings: Mapping[str, Any]) -> None:
        file_name = settings.get("config") or default_config_path()
        exists = bool(file_name) and os.path.isfile(file_name)
        if not exists and _is_set(settings, "config"):
            raise FileNotFoundError(f"File {file_name} not found")
        if exists:
            with open(file_name, encoding="utf-8") as stream:
                self.load_config_file(stream)

    def _populate_globals(self, settings: Mapping[str, Any]) -> None:
        config = self.global_config
        if not _is_set(settings, "no-database") and (
            _is_set(settings, "database") or not config.db_file_name
        ):
            config.db_file_name = settings.get("database") or DEFAULT_DB_FILENAME
        if _is_set(settings, "logfile") or not config.log_file_name:
            config.log_file_name = settings.get("logfile") or DEFAULT_LOG_FILENAME
        if _is_set(settings, "date-format") or not config.date_format:
            config.date_format = settings.get("date-format") or DEFAULT_DATE_FORMAT
        if _is_set(settings, "today"):
            config.now = parse_date(settings["today"], config.date_format)

    def _populate_resolver(self, settings: Mapping[str, Any]) -> None:
        if _is_set(settings, "maxdepth") or self.resolver_config.max_depth == 0:
            self.resolver_config.max_depth = int(settings.get("maxdepth") or DEFAULT_MAX_DEPTH)

    def _populate_reporter(self, settings: Mapping[str, Any]) -> None:
        config = self.reporter_config
        if _is_set(settings, "csv"):
            config.csv = True
        if _is_set(settings, "no-color"):
            config.color = False
        if _is_set(settings, "collapse-last"):
            config.collapse_last = True
        if _is_set(settings, "collapse"):
            config.collapse = True
        if _is_set(settings, "no-totals"):
            config.totals = False
        if _is_set(settings, "totals-only"):
            config.totals_only = True
        if _is_set(settings, "shorten"):
            config.shorten_strings = True
        if _is_set(settings, "use-old-reg-reporter"):
            config.use_old_reg_reporter = True
        if _is_set(settings, "internal-template-name"):
            config.internal_template_name = settings["internal-template-name"]
        config.single_food = settings.get("single-food") or ""
        config.element_group_by_food = bool(settings.get("group-food"))
        config.single_element = settings.get("single-element") or ""

    def _populate_filter(self, settings: Mapping[str, Any]) -> None:
        now = self.global_config.now
        date_format = self.global_config.date_format
        if _is_set(settings, "begin"):
            self.filter_config.beginning_time = time_from_string(now, date_format, settings["begin"])
        if _is_set(settings, "end"):
            self.filter_config.end_time = time_from_string(now, date_format, settings["end"])