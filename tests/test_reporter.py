from datetime import datetime

import pytest

from hranoprovod.model import DBNode, DBNodeMap, Element, Elements, LogNode
from hranoprovod.reporter import (
    GREEN,
    RED,
    RESET,
    Reporter,
    ReporterConfig,
    Total,
    format_value,
    get_report_item,
    shorten,
)


@pytest.mark.parametrize(
    "text, max_length, expected",
    [
        ("this is a long string", 50, "this is a long string"),
        ("0123456789", 7, "012…789"),
        ("sweets/pasencia white/sm bonus/100g", 20, "sweets/pa…bonus/100g"),
        ("test3/test3/test3/test3/test3/test3/test3/test3/test3", 27, "test3/test3/t…3/test3/test3"),
        ("test3/test3/test3/test3/test3/test3/test3/test3/test3", 20, "test3/tes…est3/test3"),
    ],
)
def test_shorten(text, max_length, expected):
    got = shorten(text, max_length)
    assert got == expected
    assert len(got) <= max_length


def test_format_value_without_color():
    assert format_value(3.1, False) == "      3.10"
    assert format_value(-3.1, False) == "     -3.10"


def test_format_value_with_color():
    assert format_value(3.1, True) == RED + "      3.10" + RESET
    assert format_value(-3.1, True) == GREEN + "     -3.10" + RESET
    assert format_value(0, True) == "      0.00"


def _summary_db():
    return DBNodeMap(
        {
            "test1": DBNode("test1", Elements([Element("energy", 10), Element("protein", 20)])),
            "test2": DBNode("test2", Elements([Element("energy", 20), Element("protein", 30)])),
        }
    )


def _log_node():
    return LogNode(
        datetime(2019, 10, 10),
        Elements([Element("test1", 10), Element("test2", 20)]),
    )


def test_get_report_item_totals():
    item = get_report_item(_log_node(), _summary_db(), ReporterConfig(color=False))
    assert item.time == datetime(2019, 10, 10)
    assert item.totals == [
        Total("energy", 500, 0, 500),
        Total("protein", 800, 0, 800),
    ]
    assert [(e.name, e.value) for e in item.elements] == [("test1", 10), ("test2", 20)]


def test_get_report_item_ingredients_for_unknown_food():
    db = DBNodeMap()
    db.push(DBNode("test2", Elements([Element("el1", 1.1), Element("el2", 1.2), Element("el3", 1.3)])))
    node = LogNode(datetime(2019, 10, 10), Elements([Element("test1", 3.1), Element("test2", 3.2)]))
    item = get_report_item(node, db, ReporterConfig())
    assert item.elements[0].ingredients == [Element("test1", 3.1)]
    assert [i.name for i in item.elements[1].ingredients] == ["el1", "el2", "el3"]
    assert item.elements[1].ingredients[0].value == pytest.approx(3.52)
    assert [t.name for t in item.totals] == ["el1", "el2", "el3", "test1"]


def test_get_report_item_totals_only_and_no_totals():
    only = get_report_item(_log_node(), _summary_db(), ReporterConfig(totals_only=True))
    assert only.elements == []
    assert len(only.totals) == 2
    none = get_report_item(_log_node(), _summary_db(), ReporterConfig(totals=False))
    assert none.totals is None
    assert len(none.elements) == 2


def test_reporter_is_abstract():
    with pytest.raises(TypeError):
        Reporter()