"""Re-exports and abstract bases: nothing here is registered."""

from abc import abstractmethod

from antler.framework import Task

from . import GreetTask


class BaseHelperTask(Task):
    @abstractmethod
    def prepare(self):
        ...


__all__ = ["BaseHelperTask", "GreetTask"]
