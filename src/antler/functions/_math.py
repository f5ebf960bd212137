from __future__ import annotations

import math

from antler.framework import FunctionSet, function, function_set


@function_set("math")
class MathFunctions(FunctionSet):
    """Rounding and absolute value.  Results are doubles."""

    @function("round")
    def round(self, value: float) -> float:
        """Round to the nearest integer, ties to even."""
        return float(round(value))

    @function("floor")
    def floor(self, value: float) -> float:
        return float(math.floor(value))

    @function("ceiling")
    def ceiling(self, value: float) -> float:
        return float(math.ceil(value))

    @function("abs")
    def abs(self, value: float) -> float:
        return math.fabs(value)
