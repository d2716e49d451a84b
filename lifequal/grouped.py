"""
Lifespan equality for frames holding many life-tables, e.g. one per period
and sex as in the Human Mortality Database period life-tables.

Rows must be ordered by increasing age within each group; the groups
themselves may come in any order.
"""

import logging
from typing import Iterable, Optional, Union

import polars as pl

from lifequal.config import (
    DEFAULT_BY,
    DEFAULT_RADIX,
    OPEN_INTERVAL_EX,
    TerminalInterval,
)
from lifequal.errors import InvalidInput
from lifequal.expressions import (
    e_dagger_expr,
    ex_dagger_expr,
    keyfitz_entropy_expr,
    terminal_policy,
)
from lifequal.life_table import as_scalar


logger = logging.getLogger(__name__)

Frame = Union[pl.DataFrame, pl.LazyFrame]
ColumnOrScalar = Optional[Union[str, float]]


def _over(expr: pl.Expr, by: list) -> pl.Expr:
    return expr.over(by) if by else expr


def _column_or_scalar(name: str, value: ColumnOrScalar, *, positive: bool = False):
    if value is None or isinstance(value, str):
        return value
    return as_scalar(name, value, positive=positive)


def validate_frame(
    df: Frame,
    *,
    by: Iterable[str] = DEFAULT_BY,
    x: str = "x",
    ex: str = "ex",
    dx: Optional[str] = None,
    wx: Optional[str] = None,
    ax: Optional[str] = None,
) -> None:
    """Raise `InvalidInput` naming the groups that break a life-table invariant."""
    by = list(by)
    lf = df.lazy()

    columns = [*by, x, ex, *(c for c in (dx, wx, ax) if c is not None)]
    schema = lf.collect_schema()
    missing = [c for c in columns if c not in schema]
    if missing:
        raise InvalidInput(f"life-table is missing columns {missing}")

    def col(name):
        return pl.col(name).cast(pl.Float64)

    # the open interval may leave wx and ax undefined
    open_interval = _over(col(x) == col(x).max(), by)

    valid = {
        f"`{x}` must be finite and strictly increasing": col(x).is_finite()
        & (_over(col(x).diff(), by).fill_null(1.0) > 0),
        f"`{ex}` must be finite and strictly positive": col(ex).is_finite()
        & (col(ex) > 0),
    }
    if dx is not None:
        valid[f"`{dx}` must be finite and non-negative"] = col(dx).is_finite() & (
            col(dx) >= 0
        )
    if wx is not None:
        valid[f"`{wx}` must be finite and strictly positive"] = open_interval | (
            col(wx).is_finite() & (col(wx) > 0)
        )
    if ax is not None:
        valid[f"`{ax}` must be finite and non-negative"] = open_interval | (
            col(ax).is_finite() & (col(ax) >= 0)
        )

    flagged = (
        lf.select(*by, *((~v.fill_null(False)).alias(msg) for msg, v in valid.items()))
        .filter(pl.any_horizontal(list(valid)))
        .collect()
    )
    for message in valid:
        bad = flagged.filter(pl.col(message))
        if bad.is_empty():
            continue
        if by:
            groups = bad.select(by).unique(maintain_order=True).rows()
            message = f"{message} in groups {groups}"
        raise InvalidInput(message)


def with_ex_dagger(
    df: Frame,
    *,
    by: Iterable[str] = DEFAULT_BY,
    x: str = "x",
    ex: str = "ex",
    wx: ColumnOrScalar = None,
    ax: ColumnOrScalar = None,
    terminal=TerminalInterval.FIXED,
    open_interval_ex: float = OPEN_INTERVAL_EX,
) -> Frame:
    """Add the life expectancy lost in each age interval as column "exdagger"."""
    by = list(by)
    terminal = terminal_policy(terminal)
    wx = _column_or_scalar("wx", wx, positive=True)
    ax = _column_or_scalar("ax", ax)

    validate_frame(
        df,
        by=by,
        x=x,
        ex=ex,
        wx=wx if isinstance(wx, str) else None,
        ax=ax if isinstance(ax, str) else None,
    )
    logger.debug("computing exdagger over %s with %s open interval", by, terminal.value)

    exdagger = ex_dagger_expr(
        x, ex, wx=wx, ax=ax, terminal=terminal, open_interval_ex=open_interval_ex
    )
    return df.with_columns(_over(exdagger, by))


def lifespan_equality_table(
    df: Frame,
    *,
    by: Iterable[str] = DEFAULT_BY,
    x: str = "x",
    ex: str = "ex",
    dx: str = "dx",
    wx: ColumnOrScalar = None,
    ax: ColumnOrScalar = None,
    radix: float = DEFAULT_RADIX,
    terminal=TerminalInterval.FIXED,
    open_interval_ex: float = OPEN_INTERVAL_EX,
) -> Frame:
    """
    One row per life-table with life expectancy at birth ("e0"), the total
    life expectancy lost due to death ("edagger") and Keyfitz's entropy
    ("keyfz").
    """
    by = list(by)
    terminal = terminal_policy(terminal)
    radix = as_scalar("radix", radix, positive=True)
    wx = _column_or_scalar("wx", wx, positive=True)
    ax = _column_or_scalar("ax", ax)

    validate_frame(
        df,
        by=by,
        x=x,
        ex=ex,
        dx=dx,
        wx=wx if isinstance(wx, str) else None,
        ax=ax if isinstance(ax, str) else None,
    )

    exdagger = ex_dagger_expr(
        x, ex, wx=wx, ax=ax, terminal=terminal, open_interval_ex=open_interval_ex
    )
    measures = [
        pl.col(ex).first().cast(pl.Float64).alias("e0"),
        e_dagger_expr(dx, exdagger, radix=radix),
    ]

    lf = df.lazy()
    if by:
        lf = lf.group_by(by, maintain_order=True).agg(measures)
    else:
        lf = lf.select(measures)
    lf = lf.with_columns(keyfitz_entropy_expr())

    if isinstance(df, pl.LazyFrame):
        return lf

    result = lf.collect()
    logger.debug("computed lifespan equality for %d life-tables", result.height)
    return result
