"""
Lifespan equality measures for a single life-table.

1) `ex_dagger(x, ex, wx, ax)`
   Life expectancy lost by those who die in age interval [x, x+wx)

2) `e_dagger(dx, exdagger, radix)`
   Total life expectancy lost due to death

3) `keyfitz_entropy(edagger, e0)`
   Keyfitz's entropy

```python
exdagger = ex_dagger(x=swe["x"], ex=swe["ex"], ax=swe["ax"])
edagger = e_dagger(dx=swe["dx"], exdagger=exdagger, radix=100_000)
keyfz = keyfitz_entropy(edagger=edagger, e0=swe["ex"][0])
```
"""

import math
from typing import Optional, Union

import polars as pl

from lifequal.config import DEFAULT_RADIX, OPEN_INTERVAL_EX, TerminalInterval
from lifequal.errors import InvalidInput
from lifequal.expressions import e_dagger_expr
from lifequal.life_table import (
    Column,
    LifeTableGroup,
    as_column,
    as_scalar,
    check_finite,
    check_lengths,
    check_non_negative,
)


def ex_dagger(
    x: Column,
    ex: Column,
    wx: Optional[Union[Column, float]] = None,
    ax: Optional[Union[Column, float]] = None,
    *,
    terminal=TerminalInterval.FIXED,
    open_interval_ex: float = OPEN_INTERVAL_EX,
) -> pl.Series:
    """
    Life expectancy lost by those who die in age interval [x, x+wx).

    The age interval widths default to the difference between the starting
    points of subsequent age intervals, and `ax` defaults to half the width.
    For the last (open) age interval omega, `terminal` decides:

        TerminalInterval.FIXED          edagger(omega) = [e(omega) + 1.4] / 2
        TerminalInterval.CARRY_FORWARD  edagger(omega) = e(omega)
    """
    group = LifeTableGroup(x=x, ex=ex, wx=wx, ax=ax)
    return group.ex_dagger(terminal=terminal, open_interval_ex=open_interval_ex)


def e_dagger(dx: Column, exdagger: Column, radix: float = DEFAULT_RADIX) -> float:
    """
    Total life expectancy lost due to death.

    `radix` is the initial life-table population, so deaths given as counts
    out of a cohort of 100,000 are scaled back to a per-capita figure.
    """
    dx, exdagger = as_column("dx", dx), as_column("exdagger", exdagger)
    if check_lengths(dx, exdagger) == 0:
        raise InvalidInput("a life-table group needs at least one age interval")
    check_non_negative(dx)
    check_finite(exdagger)
    radix = as_scalar("radix", radix, positive=True)

    return pl.DataFrame([dx, exdagger]).select(e_dagger_expr(radix=radix)).item()


def keyfitz_entropy(edagger: float, e0: float) -> float:
    """Keyfitz's entropy, a measure of the variability in age at death."""
    edagger = as_scalar("edagger", edagger)
    e0 = as_scalar("e0", e0, positive=True)
    return edagger / e0


def lifespan_equality(keyfz: float) -> float:
    """
    Lifespan equality as -log(keyfz); higher values mean more equal
    lifespans.
    """
    keyfz = as_scalar("keyfz", keyfz, positive=True)
    return -math.log(keyfz)
