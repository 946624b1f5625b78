# hranoprovod

A command line tool for keeping a log of diet and exercise in plain text
files. It supports nested recipes and elements you define yourself, so it
can track calories, nutrients, exercise or any other value that adds up.

## Installation

```
pip install .
```

This installs the `hranoprovod-cli` command.

## The two files

Hranoprovod reads two files in the same simple, YAML-like format.

The **database** (`food.yaml` by default) describes what each food or
activity is made of. An entry may refer to other entries; those are
resolved recursively, up to a maximum depth (10 by default). Going deeper
is an error ("maximum resolution depth reached").

```
# basic foods
egg:
  calories: 78
  protein: 6.3

bread/slice:
  calories: 80
  protein: 3

# a recipe made of other entries
sandwich/egg:
  egg: 2
  bread/slice: 2
```

The **log** (`log.yaml` by default) records what happened on each day. Each
entry starts at the beginning of a line with a date in the configured date
format, followed by indented element/quantity pairs. Lines starting with
`#` are comments; an indented `# name: value` (or just `# text`) line inside
an entry is kept as metadata and shown by the `print` command. Entries that
name the same element twice on a day are summed.

```
2021/01/24:
  # place: home
  sandwich/egg: 1
  egg: 1

2021/01/25:
  bread/slice: 3
```

Entry lines may also be written as YAML list items (`- egg: 1`).
Categories inside names are separated by `/`, which the balance report
uses to build a tree.

A line inside an entry with no value, or with a value that is not a
number, is a parse error; reports stop on it, `lint` lists them all.

### Date format

Date formats are written as a layout of the reference date
`2006-01-02 15:04:05`: `2006` is the year, `01` the month, `02` the day,
`15` the hour, `04` the minute, `05` the second, `Jan`/`January` the month
name and `Mon`/`Monday` the weekday name. The default is `2006/01/02`.

## Usage

```
hranoprovod-cli [global options] COMMAND [command options]
```

Global options:

| Option | Meaning |
| --- | --- |
| `-b`, `--begin DATE` | beginning of the period (inclusive) |
| `-e`, `--end DATE` | end of the period (inclusive) |
| `--today DATE` | use this date as today |
| `-d`, `--database FILE` | database file (env `HR_DATABASE`) |
| `-l`, `--logfile FILE` | log file (env `HR_LOGFILE`) |
| `-c`, `--config FILE` | configuration file (env `HR_CONFIG`) |
| `--date-format FORMAT` | date format (env `HR_DATE_FORMAT`) |
| `--maxdepth DEPTH` | recipe resolution depth (env `HR_MAXDEPTH`) |
| `--no-color` | plain output without colours |
| `--no-database` | ignore `--database` and keep the database file name from the configuration file or the default |

Dates for `--begin` and `--end` may be given in the date format, as
`today`, `yesterday`, `last7` or `last30`, or in simple natural language
such as `3 days ago`, `last week` or `tomorrow`.

Commands:

- `register` (`reg`): the day-by-day register with ingredients and totals.
  Options: `-b`/`--begin`, `-e`/`--end`, `-f`/`--single-food REGEX`,
  `-s`/`--single-element NAME`, `-g`/`--group-food` (with
  `--single-element`), `--csv` (with `--single-element`), `--no-color`,
  `--no-totals`, `--totals-only`, `--shorten`, `--use-old-reg-reporter`
  and `--internal-template-name` (`default` or `left-aligned`).
- `balance` (`bal`): totals shown as a category tree. Options:
  `-b`/`--begin`, `-e`/`--end`, `-c`/`--collapse` (join chains of sole
  branches), `--collapse-last` (join a last single leaf onto its parent)
  and `-s`/`--single-element NAME`.
- `summary [DATE]`: totals and logged items for a single day.
- `report`: with the subcommands `element-total NAME [--desc]`,
  `unresolved`, `quantity [--desc]` and `totals`.
- `csv`: with the subcommands `log` (accepts `-b`/`-e`), `database` and
  `database-resolved`.
- `print`: prints the log back out in normalised form (accepts `-b`/`-e`).
- `lint FILE`: writes every parse error in a file; `-s`/`--silent` stays
  quiet when there are none.
- `stats`: record counts and first and last dates of the files.
- `gen`: with the subcommands `man` and `markdown`, writes the command
  reference as a roff man page or as Markdown.

On an error the command writes `hranoprovod-cli: <message>` to standard
error and exits with status 1.

Examples:

```
hranoprovod-cli reg -b yesterday
hranoprovod-cli bal --collapse
hranoprovod-cli summary today
hranoprovod-cli report element-total calories --desc
hranoprovod-cli csv log > log.csv
hranoprovod-cli lint food.yaml
```

## Configuration file

Defaults can be kept in `~/.hranoprovod/config` (or the file given with
`--config`):

```
[Global]
DbFileName=/home/me/diet/food.yaml
LogFileName=/home/me/diet/log.yaml
DateFormat=2006/01/02

[Resolver]
MaxDepth=10
```

`[Global]` also accepts `Now=` with an ISO 8601 timestamp. Unknown sections
or keys are an error, as is a `--config` file that does not exist. Command
line options and environment variables take precedence over the file.

## Using it as a library

The building blocks are importable:

- `hranoprovod.model`: `Element`, `Elements`, `Accumulator`, `ParserNode`,
  `DBNode`, `DBNodeMap`, `LogNode` and `TreeNode`.
- `hranoprovod.parser`: `parse_stream` and `parse_file` yield nodes;
  errors are `ErrorBadSyntax`, `ErrorConversion` and `ErrorIO`, all
  subclasses of `ParserError`. Pass `on_error` to collect errors instead of
  raising them.
- `hranoprovod.resolver`: `resolve(ResolverConfig(), db)` resolves recipes
  in place and raises `ResolutionDepthError` when nesting is too deep.
- `hranoprovod.filter`: `interval_node_filter(FilterConfig(...))`.
- `hranoprovod.dates`: `parse_date`, `format_date` and
  `layout_to_strftime` for reference-date layouts.
- `hranoprovod.walk`: `load_database`, `resolved_database`, `walk_nodes`
  and `walk_with_reporter`.
- The report modules `hranoprovod.register`, `hranoprovod.balance`,
  `hranoprovod.summary`, `hranoprovod.report`, `hranoprovod.stats`,
  `hranoprovod.log_printer`, `hranoprovod.lint` and
  `hranoprovod.csv_export` produce the outputs the commands print; their
  reporters write to `ReporterConfig.output`.

```python
import io
from hranoprovod.reporter import ReporterConfig
from hranoprovod.summary import SummaryConfig, summary

db = io.StringIO("egg:\n  calories: 78\n")
log = io.StringIO("2021/01/24:\n  egg: 2\n")
out = io.StringIO()
summary(log, db, SummaryConfig(reporter_config=ReporterConfig(output=out, color=False)))
print(out.getvalue())
```

## Tests

```
pip install .[test]
pytest
```