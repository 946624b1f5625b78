import pytest

from hranoprovod.model import DBNode, DBNodeMap, Element, Elements
from hranoprovod.resolver import ResolutionDepthError, ResolverConfig, resolve


def make_db():
    return DBNodeMap(
        {
            "node1": DBNode(
                "node1", Elements([Element("element1", 100), Element("element2", 200)])
            ),
            "node2": DBNode("node2", Elements([Element("node1", 2)])),
        }
    )


def test_resolve_resolves_database():
    db = resolve(ResolverConfig(10), make_db())
    n1 = db["node1"]
    assert n1.elements[0].name == "element1"
    assert n1.elements[0].value == 100.0
    assert n1.elements[1].name == "element2"
    assert n1.elements[1].value == 200.0
    n2 = db["node2"]
    assert n2.elements[0].name == "element1"
    assert n2.elements[0].value == 200.0
    assert n2.elements[1].name == "element2"
    assert n2.elements[1].value == 400.0


def test_resolve_mutates_in_place():
    db = make_db()
    result = resolve(ResolverConfig(), db)
    assert result is db
    assert db["node2"].elements == [Element("element1", 200), Element("element2", 400)]


def test_resolve_sorts_elements():
    db = DBNodeMap({"x": DBNode("x", Elements([Element("zinc", 2), Element("apple", 3)]))})
    resolve(ResolverConfig(), db)
    assert [e.name for e in db["x"].elements] == ["apple", "zinc"]


def test_resolve_merges_shared_ingredients():
    db = make_db()
    db.push(DBNode("mix", Elements([Element("node1", 1), Element("element1", 5)])))
    resolve(ResolverConfig(), db)
    assert db["mix"].elements == [Element("element1", 105), Element("element2", 200)]


def test_resolve_cycle_raises():
    db = DBNodeMap(
        {
            "a": DBNode("a", Elements([Element("b", 1)])),
            "b": DBNode("b", Elements([Element("a", 1)])),
        }
    )
    with pytest.raises(ResolutionDepthError, match="maximum resolution depth reached"):
        resolve(ResolverConfig(10), db)


def test_resolve_depth_limit():
    with pytest.raises(ResolutionDepthError):
        resolve(ResolverConfig(1), make_db())