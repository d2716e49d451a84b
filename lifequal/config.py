"""
Defaults shared by the lifespan-equality functions.

The open age interval of a life-table (e.g. "110+") has no upper bound, so
there is no "next" life expectancy to interpolate towards. `TerminalInterval`
names the two ways of closing it.
"""

from enum import Enum


# assumed life expectancy contribution beyond the last tabulated age
OPEN_INTERVAL_EX = 1.4

# deaths are spread uniformly within an interval unless ax is given
DEFAULT_AX_FRACTION = 0.5

DEFAULT_RADIX = 1

DEFAULT_BY = ("period", "sex")


class TerminalInterval(Enum):
    # exdagger(omega) = (e(omega) + OPEN_INTERVAL_EX) / 2
    FIXED = "fixed"

    # width 1, e(omega) reused as its own successor, so exdagger(omega) = e(omega)
    CARRY_FORWARD = "carry_forward"
