"""Shared test helpers for the antler test suite."""

import textwrap

import pytest

from antler.engine import Project
from antler.framework import Registry
from antler.loader import load_project_string
from antler.model.document import ElementNode, Location
from antler.properties import PropertyStore

_DEFAULT_REGISTRY = None


def default_registry() -> Registry:
    """The built-in registry, scanned once per test session."""
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = Registry.default()
    return _DEFAULT_REGISTRY


class RecordingListener:
    """Collects build events as ``(event, *args)`` tuples."""

    def __init__(self):
        self.events = []
        self.messages = []

    def build_started(self, project):
        self.events.append(("build_started", project))

    def build_finished(self, project, error):
        self.events.append(("build_finished", project, error))

    def target_started(self, target):
        self.events.append(("target_started", target))

    def target_finished(self, target, error):
        self.events.append(("target_finished", target, error))

    def task_started(self, task, location):
        self.events.append(("task_started", task))

    def task_finished(self, task, error):
        self.events.append(("task_finished", task, error))

    def message_logged(self, level, message, task, location):
        self.messages.append((level, message, task))

    # -- queries ------------------------------------------------------------

    @property
    def targets(self):
        """Names of the targets that started, in order."""
        return [e[1] for e in self.events if e[0] == "target_started"]

    def texts(self, level=None):
        """Message texts, optionally filtered by level."""
        return [m for lvl, m, _task in self.messages if level is None or lvl is level]

    @property
    def echoed(self):
        return [m for lvl, m, task in self.messages if task == "echo"]


def node(tag, *children, text="", **attributes):
    """Build an ElementNode; ``if_``-style keys lose their trailing underscore."""
    attrs = {key.rstrip("_"): value for key, value in attributes.items()}
    return ElementNode(
        tag=tag,
        attributes=attrs,
        children=list(children),
        text=text,
        location=Location(file="test.build", line=1, column=1),
    )


def store(**values) -> PropertyStore:
    """A property store seeded with *values* (dots spelled as ``__``)."""
    properties = PropertyStore()
    for name, value in values.items():
        properties.set(name.replace("__", "."), value)
    return properties


def make_project(xml, *, properties=None, registry=None, source="test.build"):
    """Parse *xml* and return ``(project, listener)``."""
    definition = load_project_string(textwrap.dedent(xml).strip(), source=source)
    listener = RecordingListener()
    project = Project(
        definition,
        registry=registry if registry is not None else default_registry(),
        properties=properties,
        listeners=[listener],
    )
    return project, listener


def run_build(xml, *targets, **kwargs):
    """Execute a build and return its listener."""
    project, listener = make_project(xml, **kwargs)
    project.execute(list(targets))
    return listener


@pytest.fixture
def recorder():
    return RecordingListener()


@pytest.fixture
def project():
    """An empty project with the built-in registry."""
    built, _listener = make_project('<project name="empty"/>')
    return built

