"""Built-in tasks.

Every module of this package is scanned by ``Registry.default()``.
"""

from ._call import CallTask
from ._control import ForEachTask, IfTask, ItemType, TrimType
from ._echo import EchoTask, FailTask
from ._env import EnvironmentVariable, SetEnvTask
from ._fs import MkdirTask
from ._property import PropertyTask
from ._sleep import SleepTask

__all__ = [
    "CallTask",
    "EchoTask",
    "EnvironmentVariable",
    "FailTask",
    "ForEachTask",
    "IfTask",
    "ItemType",
    "MkdirTask",
    "PropertyTask",
    "SetEnvTask",
    "SleepTask",
    "TrimType",
]
