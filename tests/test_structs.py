import pytest

from depsolver import Constraint, DependencyGraph, Package, Repository, Version


@pytest.fixture()
def graph():
    return DependencyGraph()


def test_graph(graph):
    """Test integrity of a simple graph.

    a -> b -> c
    |         ^
    +---------+
    """
    graph.add("a")
    graph.add("b")
    graph.add("c")
    graph.connect("a", "b")
    graph.connect("b", "c")
    graph.connect("a", "c")
    assert set(graph) == {"a", "b", "c"}
    assert set(graph.iter_edges()) == {("a", "b"), ("a", "c"), ("b", "c")}
    assert set(graph.iter_parents("c")) == {"a", "b"}
    assert set(graph.iter_children("a")) == {"b", "c"}
    assert graph.topological_order() == ["c", "b", "a"]


def test_graph_rejects_unknown_and_duplicate(graph):
    graph.add("a")
    with pytest.raises(ValueError):
        graph.add("a")
    with pytest.raises(KeyError):
        graph.connect("a", "missing")


def test_topological_order_with_cycle(graph):
    """
    root -> a -> b -> c
                ^    |
                +----+
    """
    for key in (None, "a", "b", "c"):
        graph.add(key)
    graph.connect(None, "a")
    graph.connect("a", "b")
    graph.connect("b", "c")
    graph.connect("c", "b")
    assert graph.topological_order() == ["b", "c", "a"]


def test_package_dependencies_are_read_only():
    deps = {"b": Constraint.parse("*")}
    package = Package("a", Version.parse("1.0.0"), deps)
    deps["c"] = Constraint.parse("*")
    assert list(package.dependencies) == ["b"]
    with pytest.raises(TypeError):
        package.dependencies["c"] = Constraint.parse("*")
    assert repr(package) == "<a==1.0.0>"


def test_package_platform_support():
    package = Package(
        "a", Version.parse("1.0.0"), platform=Constraint.parse("0.19.0 <= v < 0.20.0")
    )
    assert package.supports(None)
    assert package.supports(Version.parse("0.19.1"))
    assert not package.supports(Version.parse("0.18.0"))
    assert Package("b", Version.parse("1.0.0")).supports(Version.parse("0.18.0"))


def test_repository_lookup():
    a1 = Package("a", Version.parse("1.0.0"))
    a2 = Package("a", Version.parse("2.0.0"))
    b1 = Package("b", Version.parse("1.0.0"))
    repo = Repository.from_packages(a1, b1, a2)

    assert set(repo) == {"a", "b"}
    assert len(repo) == 2
    assert "a" in repo
    assert "c" not in repo
    assert repo.lookup("a") == [a1, a2]
    assert repo.lookup("c") == []

    repo.lookup("a").clear()
    assert repo.lookup("a") == [a1, a2]


def test_repository_from_mapping():
    a1 = Package("a", Version.parse("1.0.0"))
    packages = {"a": [a1]}
    repo = Repository(packages)
    packages["a"].append(Package("a", Version.parse("2.0.0")))
    assert repo.lookup("a") == [a1]
