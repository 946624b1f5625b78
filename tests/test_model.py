from datetime import datetime

import pytest

from hranoprovod.model import (
    DEFAULT_CATEGORY_SEPARATOR,
    Accumulator,
    DBNode,
    DBNodeMap,
    Element,
    Elements,
    LogNode,
    ParserNode,
    TreeNode,
)


@pytest.mark.parametrize(
    "operations, expected",
    [
        ([("test", 2.22)], {"test": [0, 2.22]}),
        ([("test", 2.0), ("test", 3.0)], {"test": [0, 5.0]}),
        ([("test", -3.0), ("test", 2.0)], {"test": [-3.0, 2.0]}),
        (
            [
                ("test", 1.0),
                ("test", -1.0),
                ("test2", 2.0),
                ("test2", 2.0),
                ("test2", -2.0),
                ("test2", -2.0),
                ("test3", 0),
            ],
            {"test": [-1.0, 1.0], "test2": [-4.0, 4.0], "test3": [0, 0]},
        ),
    ],
)
def test_accumulator_add(operations, expected):
    acc = Accumulator()
    for name, value in operations:
        acc.add(name, value)
    assert acc == expected


def test_new_element():
    el = Element("test", 10)
    assert el.name == "test"
    assert el.value == 10.0


@pytest.fixture
def elements():
    el = Elements()
    el.add("test", 10)
    el.add("test3", 13)
    el.add("test2", 12)
    el.add("test1", 11)
    return el


def test_elements_add():
    el = Elements()
    el.add("test", 10)
    assert len(el) == 1


def test_elements_index(elements):
    assert elements.index("test2") == 2
    assert elements.index("test111") is None


def test_elements_sort(elements):
    elements.sort()
    assert elements.index("test3") == 3
    assert elements.index("test1") == 1


def test_elements_sum_merge(elements):
    elements.sort()
    other = Elements()
    other.add("test3", 113)
    other.add("test2", 112)
    other.add("test1", 111)
    other.add("test4", 444)
    elements.sum_merge(other, 2)
    index = elements.index("test1")
    assert index == 1
    assert elements[index].value == 233.0
    index = elements.index("test4")
    assert index is not None
    assert elements[index].value == 888.0


def test_db_node_map_push():
    nodes = DBNodeMap()
    nodes.push(DBNode.from_parser_node(ParserNode("test")))
    assert len(nodes) == 1
    assert nodes["test"].header == "test"


def test_new_log_node():
    now = datetime.now()
    elements = Elements()
    elements.add("test", 1.22)
    log_node = LogNode(now, elements, None)
    assert log_node.time == now
    assert log_node.elements[0].name == "test"
    assert log_node.elements[0].value == 1.22


def test_log_node_from_empty_parser_node():
    node = ParserNode("2006/01/02")
    log_node = LogNode.from_elements(datetime(2006, 1, 2), node.elements, None)
    assert log_node.elements == []
    assert log_node.time == datetime(2006, 1, 2)


def test_log_node_from_elements_merges_duplicates():
    elements = Elements([Element("a", 1.5), Element("b", 1.0), Element("a", 2.5)])
    log_node = LogNode.from_elements(datetime(2020, 1, 1), elements)
    assert log_node.elements == [Element("a", 4.0), Element("b", 1.0)]
    assert elements[0].value == 1.5


def test_tree_add_deep_spreads_values():
    tn = TreeNode("root", 0)
    tn.add_deep(Element("one/two", 10), DEFAULT_CATEGORY_SEPARATOR)
    assert tn == TreeNode(
        "root", 0, {"one": TreeNode("one", 10, {"two": TreeNode("two", 10, {})})}
    )


def test_tree_add_deep_accumulates_values():
    tn = TreeNode("root", 0)
    tn.add_deep(Element("one", 10), DEFAULT_CATEGORY_SEPARATOR)
    tn.add_deep(Element("one/two", 20), DEFAULT_CATEGORY_SEPARATOR)
    assert tn == TreeNode(
        "root", 0, {"one": TreeNode("one", 30, {"two": TreeNode("two", 20, {})})}
    )


def test_tree_keys_sorted():
    tn = TreeNode(
        "root",
        0,
        {
            "999": TreeNode("999"),
            "zzzz": TreeNode("zzzz"),
            "a999": TreeNode("a999"),
        },
    )
    assert tn.keys() == ["999", "a999", "zzzz"]
    assert tn.first_child().name == "999"


def test_tree_first_child_empty():
    assert TreeNode("leaf").first_child() is None


def test_tree_add_returns_existing_child():
    root = TreeNode("root")
    first = root.add(TreeNode("child", 10.0))
    second = root.add(TreeNode("child", 5.0))
    assert first is second
    assert root.children["child"].total == 15.0