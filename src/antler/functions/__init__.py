"""Built-in expression functions, grouped by namespace prefix.

Every module of this package is scanned by ``Registry.default()``.
"""

from ._build import ProjectFunctions, PropertyFunctions, TargetFunctions
from ._conversion import BoolFunctions, ConversionFunctions, DoubleFunctions, IntFunctions
from ._environment import EnvironmentFunctions, PlatformFunctions
from ._math import MathFunctions
from ._path import PathFunctions
from ._string import StringFunctions

__all__ = [
    "BoolFunctions",
    "ConversionFunctions",
    "DoubleFunctions",
    "EnvironmentFunctions",
    "IntFunctions",
    "MathFunctions",
    "PathFunctions",
    "PlatformFunctions",
    "ProjectFunctions",
    "PropertyFunctions",
    "StringFunctions",
    "TargetFunctions",
]
