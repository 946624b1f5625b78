import io
from datetime import datetime, timedelta

import pytest

from hranoprovod.options import (
    CONFIG_FILE_NAME,
    Options,
    default_config_path,
    time_from_string,
)

CONFIG_TEXT = """
[Global]
Now=2020-01-01T01:00:00Z
DbFileName=/tmp/db.yaml
LogFileName=/tmp/log.yaml
DateFormat=2006-01-02
[Resolver]
MaxDepth=10
"""

NOW = datetime(2021, 1, 25, 12, 0)


def test_new_options():
    o = Options()
    assert o.reporter_config.color is True
    assert o.parser_config.comment_char == "#"
    assert o.global_config.db_file_name == "food.yaml"
    assert o.global_config.log_file_name == "log.yaml"


def test_load_config_file():
    o = Options()
    o.load_config_file(io.StringIO(CONFIG_TEXT))
    assert o.global_config.now == datetime(2020, 1, 1, 1, 0, 0)
    assert o.global_config.db_file_name == "/tmp/db.yaml"
    assert o.global_config.log_file_name == "/tmp/log.yaml"
    assert o.global_config.date_format == "2006-01-02"
    assert o.resolver_config.max_depth == 10


def test_load_config_file_rejects_unknown_section():
    with pytest.raises(ValueError):
        Options().load_config_file(io.StringIO("[Other]\nkey=1\n"))


def test_load_config_file_rejects_bad_number():
    with pytest.raises(ValueError):
        Options().load_config_file(io.StringIO("[Resolver]\nMaxDepth=abc\n"))


def test_load_missing_config_raises(tmp_path):
    missing = str(tmp_path / "file_does_not_exist")
    with pytest.raises(FileNotFoundError, match="not found"):
        Options().load({"config": missing}, True)


def test_load_reads_config_then_settings(tmp_path):
    path = tmp_path / "config"
    path.write_text(CONFIG_TEXT, encoding="utf-8")
    o = Options()
    o.load({"config": str(path), "logfile": "other.yaml"}, True)
    assert o.global_config.db_file_name == "/tmp/db.yaml"
    assert o.global_config.log_file_name == "other.yaml"
    assert o.global_config.date_format == "2006-01-02"


def test_load_settings():
    o = Options()
    o.load(
        {
            "database": "db.yaml",
            "logfile": "log.txt",
            "today": "2021/01/25",
            "begin": "yesterday",
            "end": "2021/01/30",
        },
        False,
    )
    assert o.global_config.db_file_name == "db.yaml"
    assert o.global_config.log_file_name == "log.txt"
    assert o.global_config.now == datetime(2021, 1, 25)
    assert o.filter_config.beginning_time == datetime(2021, 1, 24)
    assert o.filter_config.end_time == datetime(2021, 1, 30)


def test_load_no_database_keeps_database_name():
    o = Options()
    o.load({"no-database": True, "database": "other.yaml"}, False)
    assert o.global_config.db_file_name == "food.yaml"


def test_load_reporter_flags():
    o = Options()
    o.load(
        {
            "no-color": True,
            "collapse": True,
            "no-totals": True,
            "single-element": "protein",
            "group-food": True,
            "internal-template-name": "left-aligned",
            "csv": False,
        },
        False,
    )
    config = o.reporter_config
    assert config.color is False
    assert config.collapse is True
    assert config.totals is False
    assert config.single_element == "protein"
    assert config.element_group_by_food is True
    assert config.internal_template_name == "left-aligned"
    assert config.csv is False


def test_load_maxdepth():
    o = Options()
    o.load({"maxdepth": 3}, False)
    assert o.resolver_config.max_depth == 3


def test_load_bad_today():
    with pytest.raises(ValueError):
        Options().load({"today": "garbage"}, False)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("today", NOW),
        ("yesterday", datetime(2021, 1, 24, 12, 0)),
        ("last7", datetime(2021, 1, 18, 12, 0)),
        ("last30", datetime(2020, 12, 26, 12, 0)),
        ("2021/01/25", datetime(2021, 1, 25)),
        ("2021-01-24", datetime(2021, 1, 24)),
    ],
)
def test_time_from_string(text, expected):
    assert time_from_string(NOW, "2006/01/02", text) == expected


def test_time_from_string_relative():
    result = time_from_string(NOW, "2006/01/02", "3 days ago")
    assert abs(datetime.now() - timedelta(days=3) - result) < timedelta(minutes=1)


def test_time_from_string_invalid():
    with pytest.raises(ValueError):
        time_from_string(NOW, "2006/01/02", "zzzz qqqq")


def test_default_config_path():
    assert default_config_path().endswith(CONFIG_FILE_NAME)