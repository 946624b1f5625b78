import io
from datetime import datetime, timezone

from hranoprovod.filter import FilterConfig
from hranoprovod.model import DBNode, DBNodeMap, Element, Elements, LogNode
from hranoprovod.reporter import ReporterConfig
from hranoprovod.summary import SummaryConfig, SummaryReporter, day_interval, summary


def test_summary_reporter_generates_report():
    db = DBNodeMap(
        {
            "test1": DBNode("test1", Elements([Element("energy", 10), Element("protein", 20)])),
            "test2": DBNode("test2", Elements([Element("energy", 20), Element("protein", 30)])),
        }
    )
    log_node = LogNode(
        datetime(2019, 10, 10, tzinfo=timezone.utc),
        Elements([Element("test1", 10), Element("test2", 20)]),
        None,
    )
    out = io.StringIO()
    reporter = SummaryReporter(ReporterConfig(output=out, color=False), db)
    reporter.process(log_node)
    reporter.flush()
    assert out.getvalue() == (
        "2019/10/10 :\n"
        "    500.00 : energy\n"
        "    800.00 : protein\n"
        "------------\n"
        "     10.00 : test1\n"
        "     20.00 : test2\n"
    )


def test_summary_reporter_totals_only():
    out = io.StringIO()
    reporter = SummaryReporter(
        ReporterConfig(output=out, color=False, totals_only=True), DBNodeMap()
    )
    reporter.process(LogNode(datetime(2019, 10, 10), Elements([Element("a", 1)]), None))
    assert out.getvalue() == "2019/10/10 :\n      1.00 : a\n------------\n"


def test_day_interval_covers_whole_day():
    begin, end = day_interval(datetime(2021, 1, 24, 15, 30, 12))
    assert begin == datetime(2021, 1, 24)
    assert end == datetime(2021, 1, 24, 23, 59, 59, 999999)


def test_summary_selects_single_day():
    log = "2021/01/23:\n  apple: 1\n\n2021/01/24:\n  apple: 2\n  water: 1\n"
    db = "apple:\n  kcal: 50\n"
    begin, end = day_interval(datetime(2021, 1, 24))
    out = io.StringIO()
    summary(
        io.StringIO(log),
        io.StringIO(db),
        SummaryConfig(
            reporter_config=ReporterConfig(output=out, color=False),
            filter_config=FilterConfig(beginning_time=begin, end_time=end),
        ),
    )
    assert out.getvalue() == (
        "2021/01/24 :\n"
        "    100.00 : kcal\n"
        "      1.00 : water\n"
        "------------\n"
        "      2.00 : apple\n"
        "      1.00 : water\n"
    )