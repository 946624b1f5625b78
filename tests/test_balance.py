import io
from datetime import datetime

import pytest

from hranoprovod.balance import (
    BalanceConfig,
    BalanceReporter,
    CollapsedBalanceReporter,
    SingleBalanceReporter,
    balance,
    make_balance_reporter,
    print_node,
    print_node_collapsed,
)
from hranoprovod.filter import FilterConfig
from hranoprovod.model import DBNodeMap, Elements, LogNode, TreeNode
from hranoprovod.reporter import ReporterConfig
from hranoprovod.resolver import ResolutionDepthError


def simple_tree():
    root = TreeNode("test", 10.0)
    root.add(TreeNode("child1", 10.0))
    child2 = root.add(TreeNode("child2", 10.0))
    child2.add(TreeNode("child2.1", 10.0)).add(TreeNode("child2.1.1", 10.0))
    return root


def test_print_node_collapsed_simple_tree():
    out = io.StringIO()
    print_node_collapsed(simple_tree(), 0, out)
    assert out.getvalue() == (
        "     10.00 | child1\n"
        "     10.00 | child2/child2.1/child2.1.1\n"
    )


def test_print_node_full_tree():
    out = io.StringIO()
    print_node(simple_tree(), 0, out, False)
    assert out.getvalue() == (
        "     10.00 | child1\n"
        "     10.00 | child2\n"
        "     10.00 |   child2.1\n"
        "     10.00 |     child2.1.1\n"
    )


def test_print_node_collapse_last():
    out = io.StringIO()
    print_node(simple_tree(), 0, out, True)
    assert out.getvalue() == (
        "     10.00 | child1\n"
        "     10.00 | child2\n"
        "     10.00 |   child2.1/child2.1.1\n"
    )


DB = """fruit/apple:
  calories: 50
  fat: 1
"""

LOG = """2021/01/24:
  fruit/apple: 2
  drink/water: 1
2021/01/25:
  fruit/pear: 1
"""


def run_balance(log=LOG, db=DB, **reporter_options):
    out = io.StringIO()
    config = BalanceConfig(
        reporter_config=ReporterConfig(output=out, color=False, **reporter_options)
    )
    balance(io.StringIO(log), io.StringIO(db), config)
    return out.getvalue()


def test_balance_plain():
    assert run_balance() == (
        "      1.00 | drink\n"
        "      1.00 |   water\n"
        "      3.00 | fruit\n"
        "      2.00 |   apple\n"
        "      1.00 |   pear\n"
    )


def test_balance_collapsed():
    assert run_balance(collapse=True) == (
        "      1.00 | drink/water\n"
        "      3.00 | fruit\n"
        "      2.00 |   apple\n"
        "      1.00 |   pear\n"
    )


def test_balance_single_element():
    assert run_balance(single_element="calories") == (
        "    100.00 | fruit\n"
        "    100.00 |   apple\n"
        "-----------|\n"
        "    100.00 | calories\n"
    )


def test_balance_begin_date_filters_nodes():
    out = io.StringIO()
    config = BalanceConfig(
        reporter_config=ReporterConfig(output=out, color=False),
        filter_config=FilterConfig(beginning_time=datetime(2021, 1, 25)),
    )
    balance(io.StringIO(LOG), io.StringIO(DB), config)
    assert out.getvalue() == (
        "      1.00 | fruit\n"
        "      1.00 |   pear\n"
    )


def test_balance_bad_date_raises():
    with pytest.raises(ValueError):
        run_balance(log="not-a-date:\n  apple: 1\n")


def test_balance_too_deep_database_raises():
    db = "a:\n  a: 1\n"
    with pytest.raises(ResolutionDepthError):
        run_balance(db=db)


def test_single_reporter_counts_unresolved_matching_element_as_zero():
    out = io.StringIO()
    reporter = SingleBalanceReporter(
        ReporterConfig(output=out, single_element="protein"), DBNodeMap()
    )
    elements = Elements()
    elements.add("protein", 5)
    reporter.process(LogNode(datetime(2021, 1, 1), elements))
    reporter.flush()
    assert reporter.total == 0
    assert reporter.root.children["protein"].total == 0


def test_make_balance_reporter_dispatch_output():
    out = io.StringIO()
    reporter = make_balance_reporter(ReporterConfig(output=out, collapse=True), DBNodeMap())
    elements = Elements()
    elements.add("a/b", 2)
    reporter.process(LogNode(datetime(2021, 1, 1), elements))
    reporter.flush()
    assert out.getvalue() == "      2.00 | a/b\n"


def test_reporters_accumulate_same_tree():
    plain_out, collapsed_out = io.StringIO(), io.StringIO()
    plain = BalanceReporter(ReporterConfig(output=plain_out), DBNodeMap())
    collapsed = CollapsedBalanceReporter(ReporterConfig(output=collapsed_out), DBNodeMap())
    elements = Elements()
    elements.add("x/y", 1)
    elements.add("x/z", 2)
    node = LogNode(datetime(2021, 1, 1), elements)
    plain.process(node)
    collapsed.process(node)
    assert plain.root == collapsed.root
    assert plain.root.children["x"].total == 3