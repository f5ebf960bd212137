"""Tests for the built-in expression functions."""

import os
import sys

import pytest

from antler.errors import ExpressionEvaluationError, FunctionArgumentError
from conftest import make_project


@pytest.fixture
def evaluate(project):
    """Evaluate an expression against an empty project."""
    return project.properties.evaluate


# ---------------------------------------------------------------------------
# string::
# ---------------------------------------------------------------------------

class TestStringFunctions:
    @pytest.mark.parametrize(
        "expression, expected",
        [
            ("string::get-length('hello')", 5),
            ("string::substring('hello', 1, 3)", "ell"),
            ("string::substring('hello', 5, 0)", ""),
            ("string::starts-with('hello', 'he')", True),
            ("string::ends-with('hello', 'lo')", True),
            ("string::to-upper('MiXed')", "MIXED"),
            ("string::to-lower('MiXed')", "mixed"),
            ("string::contains('hello', 'ell')", True),
            ("string::index-of('hello', 'l')", 2),
            ("string::index-of('hello', 'z')", -1),
            ("string::last-index-of('hello', 'l')", 3),
            ("string::pad-left('7', 3, '0')", "007"),
            ("string::pad-right('7', 3, '.')", "7.."),
            ("string::trim('  x  ')", "x"),
            ("string::trim-start('  x  ')", "x  "),
            ("string::trim-end('  x  ')", "  x"),
            ("string::replace('a-b-c', '-', '+')", "a+b+c"),
        ],
    )
    def test_evaluate(self, evaluate, expression, expected):
        assert evaluate(expression) == expected

    def test_substring_out_of_range(self, evaluate):
        with pytest.raises(ExpressionEvaluationError, match="exceeds the length"):
            evaluate("string::substring('abc', 2, 5)")

    def test_negative_index(self, evaluate):
        with pytest.raises(ExpressionEvaluationError, match="cannot be negative"):
            evaluate("string::substring('abc', -1, 1)")

    def test_padding_must_be_one_character(self, evaluate):
        with pytest.raises(ExpressionEvaluationError, match="single character"):
            evaluate("string::pad-left('x', 3, 'ab')")

    def test_argument_count(self, evaluate):
        with pytest.raises(FunctionArgumentError):
            evaluate("string::to-upper('a', 'b')")

    def test_argument_is_converted_from_string(self, evaluate):
        assert evaluate("string::pad-left('x', '3', '-')") == "--x"


# ---------------------------------------------------------------------------
# Conversions and math
# ---------------------------------------------------------------------------

class TestConversionFunctions:
    @pytest.mark.parametrize(
        "expression, expected",
        [
            ("int::parse('42')", 42),
            ("int::to-string(42)", "42"),
            ("double::parse('2.5')", 2.5),
            ("double::to-string(4.0)", "4"),
            ("bool::parse('True')", True),
            ("bool::to-string(false)", "false"),
            ("convert::to-int('7')", 7),
            ("convert::to-double(3)", 3.0),
            ("convert::to-string(1 == 1)", "true"),
            ("convert::to-boolean('false')", False),
        ],
    )
    def test_evaluate(self, evaluate, expression, expected):
        assert evaluate(expression) == expected

    def test_parse_failure(self, evaluate):
        with pytest.raises(ExpressionEvaluationError, match="int::parse"):
            evaluate("int::parse('many')")


class TestMathFunctions:
    @pytest.mark.parametrize(
        "expression, expected",
        [
            ("math::round(2.5)", 2.0),
            ("math::round(3.5)", 4.0),
            ("math::floor(2.7)", 2.0),
            ("math::ceiling(2.1)", 3.0),
            ("math::abs(-3)", 3.0),
        ],
    )
    def test_evaluate(self, evaluate, expression, expected):
        value = evaluate(expression)
        assert value == expected
        assert isinstance(value, float)


# ---------------------------------------------------------------------------
# path::
# ---------------------------------------------------------------------------

class TestPathFunctions:
    @pytest.mark.parametrize(
        "expression, expected",
        [
            ("path::combine('a', 'b.txt')", os.path.join("a", "b.txt")),
            ("path::get-file-name('dir/file.tar.gz')", "file.tar.gz"),
            ("path::get-file-name-without-extension('dir/file.txt')", "file"),
            ("path::get-extension('file.txt')", ".txt"),
            ("path::get-extension('README')", ""),
            ("path::get-directory-name('dir/file.txt')", "dir"),
            ("path::change-extension('a/b.txt', 'md')", "a/b.md"),
            ("path::change-extension('a/b.txt', '')", "a/b"),
            ("path::has-extension('b.txt')", True),
            ("path::is-path-rooted('/abs')", True),
            ("path::is-path-rooted('rel')", False),
        ],
    )
    def test_evaluate(self, evaluate, expression, expected):
        assert evaluate(expression) == expected

    def test_full_path_uses_base_directory(self, tmp_path):
        project, _ = make_project(f'<project name="p" basedir="{tmp_path}"/>')
        result = project.properties.evaluate("path::get-full-path('out/../bin')")
        assert result == str(tmp_path / "bin")


# ---------------------------------------------------------------------------
# environment:: and platform::
# ---------------------------------------------------------------------------

class TestEnvironmentFunctions:
    def test_variable(self, evaluate, monkeypatch):
        monkeypatch.setenv("ANTLER_FN_VAR", "value")
        assert evaluate("environment::get-variable('ANTLER_FN_VAR')") == "value"
        assert evaluate("environment::variable-exists('ANTLER_FN_VAR')") is True

    def test_missing_variable(self, evaluate, monkeypatch):
        monkeypatch.delenv("ANTLER_FN_MISSING", raising=False)
        assert evaluate("environment::variable-exists('ANTLER_FN_MISSING')") is False
        with pytest.raises(ExpressionEvaluationError, match="does not exist"):
            evaluate("environment::get-variable('ANTLER_FN_MISSING')")

    def test_machine_and_user_name(self, evaluate):
        assert isinstance(evaluate("environment::get-machine-name()"), str)
        assert isinstance(evaluate("environment::get-user-name()"), str)

    def test_platform(self, evaluate):
        assert evaluate("platform::get-name()") == sys.platform
        assert evaluate("platform::is-unix()") is (os.name == "posix")
        assert evaluate("platform::is-windows()") is (os.name == "nt")


# ---------------------------------------------------------------------------
# property::, target:: and project::
# ---------------------------------------------------------------------------

class TestBuildFunctions:
    def test_property_functions(self):
        project, _ = make_project('<project name="p"/>', properties={"cli": "1"})
        project.properties.set("dyn", "${cli}", dynamic=True)
        evaluate = project.properties.evaluate
        assert evaluate("property::exists('cli')") is True
        assert evaluate("property::exists('nope')") is False
        assert evaluate("property::is-readonly('cli')") is True
        assert evaluate("property::is-dynamic('dyn')") is True
        assert evaluate("property::get-value('dyn')") == "1"

    def test_missing_property(self, evaluate):
        with pytest.raises(ExpressionEvaluationError, match="has not been set"):
            evaluate("property::get-value('nope')")

    def test_target_functions(self):
        project, listener = make_project("""
            <project name="p" default="b">
                <target name="a"/>
                <target name="b" depends="a">
                    <echo message="${target::has-executed('a')} ${target::exists('zzz')}"/>
                </target>
            </project>
        """)
        project.execute()
        assert listener.echoed == ["true false"]

    def test_unknown_target(self, evaluate):
        with pytest.raises(ExpressionEvaluationError, match="does not exist"):
            evaluate("target::has-executed('nope')")

    def test_no_current_target(self, evaluate):
        with pytest.raises(ExpressionEvaluationError, match="No target"):
            evaluate("target::get-current-target()")

    def test_project_functions(self, tmp_path):
        project, _ = make_project(f'<project name="p" default="t" basedir="{tmp_path}"><target name="t"/></project>')
        evaluate = project.properties.evaluate
        assert evaluate("project::get-name()") == "p"
        assert evaluate("project::get-default-target()") == "t"
        assert evaluate("project::get-base-directory()") == os.path.normpath(tmp_path)

    def test_no_default_target(self, evaluate):
        with pytest.raises(ExpressionEvaluationError, match="no default target"):
            evaluate("project::get-default-target()")
