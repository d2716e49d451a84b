"""
Lifespan-equality measures as polars expressions.

Expects one row per age interval, ordered (increasing) by age within each
group, with at least the columns "x" (start of the age interval) and "ex"
(life expectancy at age x), for example
```python
┌─────┬───────┬──────┬─────────┐
│ x   ┆ ax    ┆ ex   ┆ dx      │
│ --- ┆ ---   ┆ ---  ┆ ---     │
│ i64 ┆ f64   ┆ f64  ┆ f64     │
╞═════╪═══════╪══════╪═════════╡
│ 0   ┆ 0.25  ┆ 38.9 ┆ 21303.0 │
│ 1   ┆ 0.5   ┆ 48.4 ┆ 5318.0  │
│ 2   ┆ 0.5   ┆ 49.6 ┆ 3307.0  │
│ …   ┆ …     ┆ …    ┆ …       │
│ 110 ┆ 1.0   ┆ 1.0  ┆ 0.0     │
└─────┴───────┴──────┴─────────┘
```
The last age interval is open to the right (e.g. 110+).

The expressions evaluate over a whole frame; use `.over(by)` (or a group_by
aggregation) when the frame holds several life-tables.
"""

import math
from numbers import Real
from typing import Optional, Union

import polars as pl

from lifequal.config import (
    DEFAULT_AX_FRACTION,
    DEFAULT_RADIX,
    OPEN_INTERVAL_EX,
    TerminalInterval,
)
from lifequal.errors import InvalidInput


IntoExpr = Union[pl.Expr, str, float]


def _as_expr(value: IntoExpr) -> pl.Expr:
    if isinstance(value, pl.Expr):
        return value
    if isinstance(value, str):
        return pl.col(value)
    return pl.lit(float(value))


def terminal_policy(terminal) -> TerminalInterval:
    try:
        return TerminalInterval(terminal)
    except ValueError as e:
        choices = ", ".join(repr(t.value) for t in TerminalInterval)
        raise InvalidInput(
            f"unknown terminal interval policy {terminal!r}, expected one of {choices}"
        ) from e


def ex_dagger_expr(
    x: IntoExpr = pl.col("x"),
    ex: IntoExpr = pl.col("ex"),
    *,
    wx: Optional[IntoExpr] = None,
    ax: Optional[IntoExpr] = None,
    terminal=TerminalInterval.FIXED,
    open_interval_ex: float = OPEN_INTERVAL_EX,
) -> pl.Expr:
    """
    Life expectancy lost by those who die in age interval [x, x+wx).

    `wx` and `ax` take a column (name or expression) or a scalar. Without
    `wx` the widths are the differences between subsequent ages `x`; without
    `ax` deaths fall on average halfway through the interval.
    """
    x, ex = _as_expr(x), _as_expr(ex)
    terminal = terminal_policy(terminal)

    # width of age interval (next age - current age), null for the open interval
    wx = x.shift(-1) - x if wx is None else _as_expr(wx)

    # time spent in the interval by those dying in it
    ax = DEFAULT_AX_FRACTION * wx if ax is None else _as_expr(ax)

    # fraction of the interval lived before death
    A = ax / wx

    exdagger = A * ex.shift(-1) + (1 - A) * ex

    if terminal is TerminalInterval.FIXED:
        if (
            isinstance(open_interval_ex, bool)
            or not isinstance(open_interval_ex, Real)
            or not math.isfinite(open_interval_ex)
            or open_interval_ex < 0
        ):
            raise InvalidInput(
                f"open_interval_ex must be finite and non-negative, got {open_interval_ex}"
            )
        last = (ex + open_interval_ex) / 2
    else:
        # A * e(omega) + (1 - A) * e(omega)
        last = ex

    return pl.when(x == x.max()).then(last).otherwise(exdagger).alias("exdagger")


def e_dagger_expr(
    dx: IntoExpr = pl.col("dx"),
    exdagger: IntoExpr = pl.col("exdagger"),
    *,
    radix: float = DEFAULT_RADIX,
) -> pl.Expr:
    """Total life expectancy lost due to death."""
    return ((_as_expr(dx) * _as_expr(exdagger)).sum() / radix).alias("edagger")


def keyfitz_entropy_expr(
    edagger: IntoExpr = pl.col("edagger"),
    e0: IntoExpr = pl.col("e0"),
) -> pl.Expr:
    """Keyfitz's entropy, edagger relative to life expectancy at birth."""
    return (_as_expr(edagger) / _as_expr(e0)).alias("keyfz")
