"""Command line interface."""

from __future__ import annotations

import argparse
import functools
import os
import re
import sys
from typing import Any, Callable, Iterator, Optional, Sequence

from .balance import BalanceConfig, balance
from .csv_export import (
    CSVConfig,
    CSVDatabaseConfig,
    CSVDatabaseResolvedConfig,
    CSVLogConfig,
    csv_database,
    csv_database_resolved,
    csv_log,
)
from .lint import LintConfig, lint
from .log_printer import PrintConfig, print_log
from .options import Options, time_from_string
from .parser import ParserError
from .register import RegisterConfig, register
from .report import (
    ReportElementConfig,
    ReportQuantityConfig,
    ReportTotalsConfig,
    ReportUnresolvedConfig,
    report_element,
    report_quantity,
    report_totals,
    report_unresolved,
)
from .resolver import ResolutionDepthError
from .stats import StatsConfig, stats
from .summary import SummaryConfig, day_interval, summary
from .walk import open_files

PROG = "hranoprovod-cli"
USAGE = "Diet tracker for the command line"
DESCRIPTION = "A command line tool to keep log of diet and exercise in text files"
VERSION = "dev, commit none, built at unknown"

Handler = Callable[[dict, Options], None]


class CommandError(Exception):
    """Raised when a command is called with missing arguments."""


def _env(name: str) -> Optional[str]:
    return os.environ.get(name) or None


def _env_int(name: str) -> Optional[int]:
    value = _env(name)
    return int(value) if value is not None else None


def _period(sub: argparse.ArgumentParser) -> None:
    sub.add_argument("-b", "--begin", metavar="DATE", help="Beginning of period DATE")
    sub.add_argument("-e", "--end", metavar="DATE", help="End of period DATE")


def _run_register(args: dict, o: Options) -> None:
    g = o.global_config
    with open_files([g.db_file_name, g.log_file_name]) as (db, log):
        register(log, db, RegisterConfig(
            g.date_format, o.parser_config, o.resolver_config, o.reporter_config, o.filter_config,
        ))


def _run_balance(args: dict, o: Options) -> None:
    g = o.global_config
    with open_files([g.db_file_name, g.log_file_name]) as (db, log):
        balance(log, db, BalanceConfig(
            g.date_format, o.parser_config, o.resolver_config, o.reporter_config, o.filter_config,
        ))


def _run_lint(args: dict, o: Options) -> None:
    file_name = args.get("file") or ""
    if not file_name:
        raise CommandError("no file provided")
    with open_files([file_name]) as (stream,):
        lint(stream, LintConfig(
            silent=bool(args.get("silent")),
            parser_config=o.parser_config,
            reporter_config=o.reporter_config,
        ))


def _run_report_element(args: dict, o: Options) -> None:
    element = args.get("element") or ""
    if not element:
        raise CommandError("no element name")
    with open_files([o.global_config.db_file_name]) as (db,):
        report_element(db, ReportElementConfig(
            element_name=element,
            descending=bool(args.get("desc")),
            parser_config=o.parser_config,
            resolver_config=o.resolver_config,
            reporter_config=o.reporter_config,
        ))


def _run_report_unresolved(args: dict, o: Options) -> None:
    g = o.global_config
    with open_files([g.db_file_name, g.log_file_name]) as (db, log):
        report_unresolved(log, db, ReportUnresolvedConfig(
            g.date_format, o.parser_config, o.resolver_config, o.reporter_config, o.filter_config,
        ))


def _run_report_quantity(args: dict, o: Options) -> None:
    g = o.global_config
    with open_files([g.log_file_name]) as (log,):
        report_quantity(log, ReportQuantityConfig(
            date_format=g.date_format,
            descending=bool(args.get("desc")),
            parser_config=o.parser_config,
            reporter_config=o.reporter_config,
            filter_config=o.filter_config,
        ))


def _run_report_totals(args: dict, o: Options) -> None:
    g = o.global_config
    with open_files([g.db_file_name, g.log_file_name]) as (db, log):
        report_totals(log, db, ReportTotalsConfig(
            g.date_format, o.parser_config, o.resolver_config, o.reporter_config, o.filter_config,
        ))


def _run_csv_log(args: dict, o: Options) -> None:
    g = o.global_config
    config = CSVLogConfig(
        date_format=g.date_format,
        parser_config=o.parser_config,
        filter_config=o.filter_config,
        reporter_config=CSVConfig(output=o.reporter_config.output, color=o.reporter_config.color),
    )
    with open_files([g.log_file_name]) as (log,):
        csv_log(log, config)


def _run_csv_database(args: dict, o: Options) -> None:
    with open_files([o.global_config.db_file_name]) as (db,):
        csv_database(db, CSVDatabaseConfig(o.parser_config, o.reporter_config))


def _run_csv_database_resolved(args: dict, o: Options) -> None:
    with open_files([o.global_config.db_file_name]) as (db,):
        csv_database_resolved(db, CSVDatabaseResolvedConfig(
            o.parser_config, o.reporter_config, o.resolver_config,
        ))


def _run_stats(args: dict, o: Options) -> None:
    g = o.global_config
    stats(g.log_file_name, g.db_file_name, StatsConfig(
        now=g.now, parser_config=o.parser_config, reporter_config=o.reporter_config,
    ))


def _run_summary(args: dict, o: Options) -> None:
    g = o.global_config
    moment = time_from_string(g.now, g.date_format, args.get("date") or "")
    with open_files([g.db_file_name, g.log_file_name]) as (db, log):
        begin, end = day_interval(moment)
        o.filter_config.beginning_time = begin
        o.filter_config.end_time = end
        summary(log, db, SummaryConfig(
            g.date_format, o.parser_config, o.resolver_config, o.reporter_config, o.filter_config,
        ))


def _run_print(args: dict, o: Options) -> None:
    g = o.global_config
    with open_files([g.log_file_name]) as (log,):
        print_log(log, PrintConfig(g.date_format, o.parser_config, o.reporter_config, o.filter_config))


def _show_help(parser: argparse.ArgumentParser, args: dict, o: Options) -> None:
    parser.print_help(o.reporter_config.output)


def _write_doc(render: Callable[[argparse.ArgumentParser], str],
               parser: argparse.ArgumentParser, args: dict, o: Options) -> None:
    o.reporter_config.output.write(render(parser))


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with every command."""
    parser = argparse.ArgumentParser(prog=PROG, description=DESCRIPTION)
    parser.add_argument("--version", action="version", version=f"%(prog)s version {VERSION}")
    _period(parser)
    parser.add_argument("--today", metavar="DATE", help="Overwrite today's date DATE")
    parser.add_argument("-d", "--database", metavar="FILE", default=_env("HR_DATABASE"),
                        help="optional database file name FILE")
    parser.add_argument("-l", "--logfile", metavar="FILE", default=_env("HR_LOGFILE"),
                        help="log file name FILE")
    parser.add_argument("-c", "--config", metavar="FILE", default=_env("HR_CONFIG"),
                        help="Configuration file FILE")
    parser.add_argument("--date-format", metavar="DATE_FORMAT", default=_env("HR_DATE_FORMAT"),
                        help="Date format for parsing and printing dates DATE_FORMAT")
    parser.add_argument("--maxdepth", metavar="DEPTH", type=int, default=_env_int("HR_MAXDEPTH"),
                        help="Resolve depth DEPTH")
    parser.add_argument("--no-color", action="store_true", help="Disable color output")
    parser.add_argument("--no-database", action="store_true",
                        help="Disables loading the database (even if database filename is set)")

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    def add(group, name: str, text: str, handler, aliases: Sequence[str] = ()):
        sub = group.add_parser(name, aliases=list(aliases), help=text, description=text,
                               argument_default=argparse.SUPPRESS)
        sub.set_defaults(handler=handler)
        return sub

    reg = add(commands, "register", "Shows the log register report", _run_register, ["reg"])
    _period(reg)
    reg.add_argument("-f", "--single-food", help="Show only single food")
    reg.add_argument("-s", "--single-element", help="Show only single element")
    reg.add_argument("-g", "--group-food", action="store_true", help="Single element grouped by food")
    reg.add_argument("--csv", action="store_true", help="Export as CSV")
    reg.add_argument("--no-color", action="store_true", help="Disable color output")
    reg.add_argument("--no-totals", action="store_true", help="Disable totals")
    reg.add_argument("--totals-only", action="store_true", help="Show only totals")
    reg.add_argument("--shorten", action="store_true", help="Shorten longer strings")
    reg.add_argument("--use-old-reg-reporter", action="store_true", help="Use the old reg reporter")
    reg.add_argument("--internal-template-name", default="default",
                     help="Name of the internal template to use: [default, left-aligned]")

    bal = add(commands, "balance", "Shows food balance as tree", _run_balance, ["bal"])
    _period(bal)
    bal.add_argument("--collapse-last", action="store_true", help="Collapses last dimension")
    bal.add_argument("-c", "--collapse", action="store_true", help="Collapses sole branches")
    bal.add_argument("-s", "--single-element", help="Show only single element")

    lint_cmd = add(commands, "lint", "Lints file for parsing errors", _run_lint)
    lint_cmd.add_argument("-s", "--silent", action="store_true",
                          help="stay silent if no errors are found")
    lint_cmd.add_argument("file", nargs="?", metavar="FILE", help="file to lint")

    report = add(commands, "report", "Generates various reports", None)
    report.set_defaults(handler=functools.partial(_show_help, report))
    report_commands = report.add_subparsers(dest="subcommand", metavar="COMMAND")
    element_total = add(report_commands, "element-total",
                        "Generates total sum for element grouped by food", _run_report_element)
    element_total.add_argument("--desc", action="store_true", help="Descending order")
    element_total.add_argument("element", nargs="?", metavar="element-name", help="element name")
    add(report_commands, "unresolved", "Print list of unresolved elements", _run_report_unresolved)
    quantity = add(report_commands, "quantity", "Total quantities per food", _run_report_quantity)
    quantity.add_argument("--desc", action="store_true", help="Descending order")
    add(report_commands, "totals", "Generates totals by element report", _run_report_totals)

    csv_cmd = add(commands, "csv", "Generates csv exports", None)
    csv_cmd.set_defaults(handler=functools.partial(_show_help, csv_cmd))
    csv_commands = csv_cmd.add_subparsers(dest="subcommand", metavar="COMMAND")
    csv_log_cmd = add(csv_commands, "log", "Exports the log file as CSV", _run_csv_log)
    _period(csv_log_cmd)
    add(csv_commands, "database", "Exports the database file as CSV", _run_csv_database)
    add(csv_commands, "database-resolved", "Exports the resolved database as CSV",
        _run_csv_database_resolved)

    add(commands, "stats", "Provide stats information", _run_stats)

    summary_cmd = add(commands, "summary", "Show summary for date", _run_summary)
    summary_cmd.add_argument("date", nargs="?", metavar="DATE", help="date to summarize")

    print_cmd = add(commands, "print", "Print log", _run_print)
    _period(print_cmd)

    gen = add(commands, "gen", "Generate documentation", None)
    gen.set_defaults(handler=functools.partial(_show_help, gen))
    gen_commands = gen.add_subparsers(dest="subcommand", metavar="COMMAND")
    add(gen_commands, "man", "Generate man page",
        functools.partial(_write_doc, generate_man, parser))
    add(gen_commands, "markdown", "Generate markdown page",
        functools.partial(_write_doc, generate_markdown, parser))
    return parser


def _options_of(parser: argparse.ArgumentParser) -> Iterator[argparse.Action]:
    skipped = (argparse._HelpAction, argparse._VersionAction, argparse._SubParsersAction)
    for action in parser._actions:
        if action.option_strings and not isinstance(action, skipped):
            yield action


def _commands_of(parser: argparse.ArgumentParser) -> Iterator[tuple[list[str], argparse.ArgumentParser]]:
    for action in parser._actions:
        if isinstance(action, argparse._SubParsersAction):
            grouped: dict[int, tuple[argparse.ArgumentParser, list[str]]] = {}
            for name, sub in action.choices.items():
                grouped.setdefault(id(sub), (sub, []))[1].append(name)
            for sub, names in grouped.values():
                yield names, sub


def _flag_label(action: argparse.Action) -> str:
    return ", ".join(sorted(action.option_strings, key=len, reverse=True))


def _default_text(action: argparse.Action) -> Optional[str]:
    if action.nargs == 0:
        return None
    default = action.default
    if default is None or default is argparse.SUPPRESS:
        return ""
    return str(default)


def _md_option(action: argparse.Action) -> str:
    default = _default_text(action)
    value = "" if default is None else f'="{default}"'
    return f"**{_flag_label(action)}**{value}: {action.help or ''}"


def _md_commands(parser: argparse.ArgumentParser, level: int, lines: list[str]) -> None:
    for names, sub in _commands_of(parser):
        lines += ["#" * level + " " + ", ".join(names), "", sub.description or "", ""]
        for action in _options_of(sub):
            lines += [_md_option(action), ""]
        _md_commands(sub, level + 1, lines)


def generate_markdown(parser: argparse.ArgumentParser) -> str:
    """Render the command reference as Markdown."""
    lines = [
        "# NAME", "", f"{parser.prog} - {USAGE}", "",
        "# SYNOPSIS", "",
        f"{parser.prog} [GLOBAL OPTIONS] command [COMMAND OPTIONS] [ARGUMENTS...]", "",
        "# DESCRIPTION", "", parser.description or "", "",
        "# GLOBAL OPTIONS", "",
    ]
    for action in _options_of(parser):
        lines += [_md_option(action), ""]
    lines += ["# COMMANDS", ""]
    _md_commands(parser, 2, lines)
    return "\n".join(lines).rstrip("\n") + "\n"


def _roff(text: str) -> str:
    text = text.replace("\\", "\\\\").replace("-", "\\-")
    return "\\&" + text if text.startswith((".", "'")) else text


def _man_option(action: argparse.Action) -> list[str]:
    default = _default_text(action)
    value = "" if default is None else f'="{default}"'
    return [".TP", f"\\fB{_roff(_flag_label(action))}\\fP{_roff(value)}", _roff(action.help or "")]


def _man_commands(parser: argparse.ArgumentParser, prefix: str, lines: list[str]) -> None:
    for names, sub in _commands_of(parser):
        title = (prefix + " " if prefix else "") + ", ".join(names)
        lines += [f".SS {_roff(title)}", _roff(sub.description or "")]
        for action in _options_of(sub):
            lines += _man_option(action)
        _man_commands(sub, names[0] if not prefix else f"{prefix} {names[0]}", lines)


def generate_man(parser: argparse.ArgumentParser) -> str:
    """Render the command reference as a roff man page."""
    lines = [
        f".TH {parser.prog} 8",
        ".SH NAME",
        f"{_roff(parser.prog)} \\- {_roff(USAGE)}",
        ".SH SYNOPSIS",
        f"{_roff(parser.prog)} [GLOBAL OPTIONS] command [COMMAND OPTIONS] [ARGUMENTS...]",
        ".SH DESCRIPTION",
        _roff(parser.description or ""),
        ".SH GLOBAL OPTIONS",
    ]
    for action in _options_of(parser):
        lines += _man_option(action)
    lines.append(".SH COMMANDS")
    _man_commands(parser, "", lines)
    return "\n".join(lines) + "\n"


_ERRORS = (CommandError, ParserError, ResolutionDepthError, OSError, ValueError, re.error)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line tool and return the exit status."""
    parser = build_parser()
    namespace = vars(parser.parse_args(argv))
    handler = namespace.pop("handler", None)
    namespace.pop("command", None)
    namespace.pop("subcommand", None)
    settings: dict[str, Any] = {key.replace("_", "-"): value for key, value in namespace.items()}
    if handler is None:
        parser.print_help()
        return 0
    try:
        options = Options()
        options.load(settings, True)
        handler(settings, options)
    except _ERRORS as exc:
        print(f"{PROG}: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())