"""Tests for the built-in tasks."""

import os
import time

import pytest

from antler.errors import (
    BindingError,
    PropertyNotFoundError,
    RequiredAttributeMissingError,
    TaskFailedError,
    ValidationError,
)
from antler.listeners import Level
from antler.tasks import ForEachTask, ItemType, SleepTask, TrimType
from conftest import make_project, run_build


def target(body, **kwargs):
    """Run *body* as the only target of a project; return the listener."""
    return run_build(f'<project name="demo" default="t"><target name="t">{body}</target></project>', **kwargs)


def failing(body, error=BindingError, match=None):
    project, _ = make_project(f'<project name="demo" default="t"><target name="t">{body}</target></project>')
    with pytest.raises(error, match=match):
        project.execute()


# ---------------------------------------------------------------------------
# <property>
# ---------------------------------------------------------------------------

class TestProperty:
    def test_value_is_expanded(self):
        project, _ = make_project("""
            <project name="demo">
                <property name="a" value="1"/>
                <property name="b" value="${a}+${a}"/>
            </project>
        """)
        project.execute()
        assert project.properties.get("b") == "1+1"

    def test_overwrite_false_keeps_first_value(self):
        project, _ = make_project("""
            <project name="demo">
                <property name="a" value="1"/>
                <property name="a" value="2" overwrite="false"/>
            </project>
        """)
        project.execute()
        assert project.properties.get("a") == "1"

    def test_later_value_replaces_earlier(self):
        project, _ = make_project("""
            <project name="demo">
                <property name="a" value="1"/>
                <property name="a" value="2"/>
            </project>
        """)
        project.execute()
        assert project.properties.get("a") == "2"

    def test_readonly_property_is_kept(self):
        project, listener = make_project("""
            <project name="demo">
                <property name="a" value="1" readonly="true"/>
                <property name="a" value="2"/>
            </project>
        """)
        project.execute()
        assert project.properties.get("a") == "1"
        assert "Read-only property 'a' cannot be overwritten." in listener.texts(Level.VERBOSE)

    def test_dynamic_property(self):
        listener = target("""
            <property name="greeting" value="hello ${who}" dynamic="true"/>
            <property name="who" value="one"/>
            <echo message="${greeting}"/>
            <property name="who" value="two"/>
            <echo message="${greeting}"/>
        """)
        assert listener.echoed == ["hello one", "hello two"]

    def test_missing_property_in_value(self):
        failing('<property name="a" value="${nope}"/>', error=PropertyNotFoundError, match="nope")

    def test_name_required(self):
        failing('<property value="1"/>', error=RequiredAttributeMissingError)

    def test_empty_name(self):
        failing('<property name=" " value="1"/>', error=ValidationError)

    def test_empty_value(self):
        assert target('<property name="empty" value=""/><echo message="[${empty}]"/>').echoed == ["[]"]


# ---------------------------------------------------------------------------
# <echo> and <fail>
# ---------------------------------------------------------------------------

class TestEcho:
    def test_message_attribute(self):
        assert target('<echo message="hi"/>').echoed == ["hi"]

    def test_inline_text_is_dedented(self):
        listener = target("""<echo>
            line one
              line two
        </echo>""")
        assert listener.echoed == ["line one\n  line two"]

    def test_level(self):
        listener = target('<echo message="careful" level="Warning"/>')
        assert listener.texts(Level.WARNING) == ["careful"]

    def test_bad_level(self):
        failing('<echo message="x" level="loud"/>', match="Valid values are: debug, verbose, info, warning, error")

    def test_message_and_text_conflict(self):
        failing('<echo message="a">b</echo>', match="cannot both be set")


class TestFail:
    def test_message(self):
        failing('<fail message="stop"/>', error=TaskFailedError, match="stop")

    def test_inline_text(self):
        failing("<fail>stopped here</fail>", error=TaskFailedError, match="stopped here")

    def test_default_message(self):
        failing("<fail/>", error=TaskFailedError, match="No message.")

    def test_unless(self):
        listener = target('<fail unless="true"/><echo message="ok"/>')
        assert listener.echoed == ["ok"]


# ---------------------------------------------------------------------------
# <mkdir>
# ---------------------------------------------------------------------------

class TestMkdir:
    def test_creates_parents(self, tmp_path):
        run_build(f'<project name="demo" basedir="{tmp_path}"><mkdir dir="a/b/c"/></project>')
        assert (tmp_path / "a" / "b" / "c").is_dir()

    def test_existing_directory(self, tmp_path):
        (tmp_path / "out").mkdir()
        listener = run_build(f'<project name="demo" basedir="{tmp_path}"><mkdir dir="out"/></project>')
        assert any("already exists" in text for text in listener.texts(Level.VERBOSE))

    def test_file_in_the_way(self, tmp_path):
        (tmp_path / "out").write_text("")
        project, _ = make_project(f'<project name="demo" basedir="{tmp_path}"><mkdir dir="out"/></project>')
        with pytest.raises(TaskFailedError, match="a file with that name exists"):
            project.execute()

    def test_dir_required(self):
        failing("<mkdir/>", error=RequiredAttributeMissingError)


# ---------------------------------------------------------------------------
# <setenv>
# ---------------------------------------------------------------------------

class TestSetEnv:
    def test_single_variable(self, monkeypatch):
        monkeypatch.setenv("ANTLER_TEST_VAR", "old")
        target('<setenv name="ANTLER_TEST_VAR" value="1"/>')
        assert os.environ["ANTLER_TEST_VAR"] == "1"

    def test_nested_variables(self, monkeypatch):
        monkeypatch.setenv("ANTLER_TEST_GONE", "x")
        monkeypatch.setenv("ANTLER_TEST_A", "old")
        monkeypatch.delenv("ANTLER_TEST_B", raising=False)
        target("""
            <setenv>
                <variable name="ANTLER_TEST_A" value="a"/>
                <variable name="ANTLER_TEST_B" value="b" if="false"/>
                <variable name="ANTLER_TEST_GONE"/>
            </setenv>
        """)
        assert os.environ["ANTLER_TEST_A"] == "a"
        assert "ANTLER_TEST_B" not in os.environ
        assert "ANTLER_TEST_GONE" not in os.environ

    def test_requires_a_variable(self):
        failing("<setenv/>", match="nested <variable>")

    def test_environment_function_sees_value(self, monkeypatch):
        monkeypatch.setenv("ANTLER_TEST_SEEN", "old")
        listener = target("""
            <setenv name="ANTLER_TEST_SEEN" value="yes"/>
            <echo message="${environment::get-variable('ANTLER_TEST_SEEN')}"/>
        """)
        assert listener.echoed == ["yes"]


# ---------------------------------------------------------------------------
# <sleep>
# ---------------------------------------------------------------------------

class TestSleep:
    def test_durations_add_up(self, monkeypatch):
        calls = []
        monkeypatch.setattr(time, "sleep", calls.append)
        target('<sleep minutes="1" seconds="2" milliseconds="500"/>')
        assert calls == [62.5]

    def test_total_seconds(self):
        sleep = SleepTask(project=None)
        sleep.hours = 1
        assert sleep.total_seconds == 3600

    def test_negative_rejected(self):
        failing('<sleep seconds="-1"/>', error=ValidationError, match="minimum")


# ---------------------------------------------------------------------------
# <if>
# ---------------------------------------------------------------------------

class TestIf:
    def test_true(self):
        listener = target('<if test="${1 == 1}"><echo message="yes"/></if>')
        assert listener.echoed == ["yes"]

    def test_false(self):
        listener = target('<if test="false"><echo message="yes"/></if>')
        assert listener.echoed == []

    def test_propertyexists(self):
        listener = target("""
            <if propertyexists="p"><echo message="before"/></if>
            <property name="p" value="1"/>
            <if propertyexists="p"><echo message="after"/></if>
        """)
        assert listener.echoed == ["after"]

    def test_targetexists(self):
        listener = target('<if targetexists="t"><echo message="t"/></if><if targetexists="x"><echo message="x"/></if>')
        assert listener.echoed == ["t"]

    def test_all_conditions_must_hold(self):
        listener = target('<if test="true" propertyexists="nope"><echo message="x"/></if>')
        assert listener.echoed == []

    def test_requires_a_condition(self):
        failing('<if><echo message="x"/></if>', match="At least one")

    def test_nested_tasks_are_bound_only_when_run(self):
        listener = target('<if test="false"><bogus/></if><echo message="ok"/>')
        assert listener.echoed == ["ok"]


# ---------------------------------------------------------------------------
# <foreach>
# ---------------------------------------------------------------------------

class TestForEach:
    def test_string_items(self):
        listener = target("""
            <foreach item="String" in="debug, release,," property="config" trim="Both">
                <echo message="building ${config}"/>
            </foreach>
        """)
        assert listener.echoed == ["building debug", "building release"]

    def test_multiple_delimiter_characters(self):
        listener = target("""
            <foreach item="String" in="a;b,c" delimiter=";," property="x">
                <echo message="${x}"/>
            </foreach>
        """)
        assert listener.echoed == ["a", "b", "c"]

    def test_lines(self, tmp_path):
        (tmp_path / "list.txt").write_text("one\ntwo\n")
        listener = run_build(f"""
            <project name="demo" basedir="{tmp_path}">
                <foreach item="Line" in="list.txt" property="x"><echo message="${{x}}"/></foreach>
            </project>
        """)
        assert listener.echoed == ["one", "two"]

    def test_files_and_folders(self, tmp_path):
        (tmp_path / "b.txt").write_text("")
        (tmp_path / "a.txt").write_text("")
        (tmp_path / "sub").mkdir()
        listener = run_build(f"""
            <project name="demo">
                <foreach item="File" in="{tmp_path}" property="f">
                    <echo message="${{path::get-file-name(f)}}"/>
                </foreach>
                <foreach item="Folder" in="{tmp_path}" property="d">
                    <echo message="${{path::get-file-name(d)}}"/>
                </foreach>
            </project>
        """)
        assert listener.echoed == ["a.txt", "b.txt", "sub"]

    def test_missing_directory(self, tmp_path):
        project, _ = make_project(
            f'<project name="demo"><foreach item="Folder" in="{tmp_path / "nope"}" property="d"/></project>'
        )
        with pytest.raises(TaskFailedError, match="does not exist"):
            project.execute()

    def test_loop_property_must_not_be_read_only(self):
        project, _ = make_project(
            """
            <project name="demo">
                <foreach item="String" in="a" property="locked"><echo message="x"/></foreach>
            </project>
            """,
            properties={"locked": "1"},
        )
        with pytest.raises(BindingError, match="read-only"):
            project.execute()

    def test_bad_item_type(self):
        failing('<foreach item="Thing" in="a" property="x"/>', match="Valid values are: String, Line, File, Folder")

    def test_trim_modes(self):
        task_ = ForEachTask(project=None)
        task_.item = ItemType.STRING
        task_.in_ = " a , b "
        task_.delimiter = ","
        task_.trim = TrimType.START
        assert task_.items() == ["a ", "b "]
        task_.trim = TrimType.NONE
        assert task_.items() == [" a ", " b "]
