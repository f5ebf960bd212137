"""Tests for target dependency resolution."""

import pytest

from antler.engine import resolve
from antler.errors import CircularDependencyError, UnknownTargetError
from antler.model.project import ProjectDefinition, TargetDefinition, split_depends


def definition(**depends):
    """Build a project from ``name="dep1, dep2"`` keyword pairs."""
    targets = {
        name: TargetDefinition(name=name, depends=split_depends(deps))
        for name, deps in depends.items()
    }
    return ProjectDefinition(name="graph", targets=targets)


class TestSplitDepends:
    def test_commas_and_spaces(self):
        assert split_depends("a, b  c,,d") == ["a", "b", "c", "d"]

    def test_empty(self):
        assert split_depends("  ") == []


class TestResolve:
    def test_dependencies_come_first(self):
        project = definition(init="", compile="init", test="compile")
        assert resolve(project, ["test"]) == ["init", "compile", "test"]

    def test_declaration_order_among_independent_targets(self):
        project = definition(a="", b="", c="", all="b, a, c")
        assert resolve(project, ["all"]) == ["b", "a", "c", "all"]

    def test_shared_dependency_runs_once(self):
        project = definition(init="", x="init", y="init", all="x, y")
        order = resolve(project, ["all"])
        assert order == ["init", "x", "y", "all"]

    def test_several_requested_targets(self):
        project = definition(init="", x="init", y="init")
        assert resolve(project, ["y", "x"]) == ["init", "y", "x"]

    def test_repeated_dependency(self):
        project = definition(a="", b="a, a")
        assert resolve(project, ["b"]) == ["a", "b"]

    def test_nothing_requested(self):
        assert resolve(definition(a=""), []) == []


class TestErrors:
    def test_cycle_path(self):
        project = definition(a="b", b="a")
        with pytest.raises(CircularDependencyError) as info:
            resolve(project, ["a"])
        assert info.value.path == ["a", "b", "a"]
        assert "a -> b -> a" in str(info.value)

    def test_cycle_below_entry_point(self):
        project = definition(top="a", a="b", b="c", c="a")
        with pytest.raises(CircularDependencyError) as info:
            resolve(project, ["top"])
        assert info.value.path == ["a", "b", "c", "a"]

    def test_self_dependency(self):
        with pytest.raises(CircularDependencyError) as info:
            resolve(definition(a="a"), ["a"])
        assert info.value.path == ["a", "a"]

    def test_unknown_requested_target(self):
        with pytest.raises(UnknownTargetError) as info:
            resolve(definition(a=""), ["b"])
        assert info.value.referrer is None
        assert "does not exist" in str(info.value)

    def test_unknown_dependency(self):
        with pytest.raises(UnknownTargetError) as info:
            resolve(definition(a="missing"), ["a"])
        assert info.value.name == "missing"
        assert info.value.referrer == "a"

    def test_unreachable_cycle_is_ignored(self):
        project = definition(ok="", x="y", y="x")
        assert resolve(project, ["ok"]) == ["ok"]
