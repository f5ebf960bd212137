"""Sample extension package: a task in the package root."""

from antler.framework import Task, attribute, task


@task("greet")
class GreetTask(Task):
    who = attribute(str, default="world")

    def execute(self):
        self.log(f"Hello, {self.who}!")
