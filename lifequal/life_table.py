"""
A single life-table group: one population subset (e.g. one period and one
sex) with one row per age interval.

Columns follow the Human Mortality Database naming:

    x   start of the age interval
    ex  life expectancy at age x
    dx  deaths in the age interval [x, x+wx)
    wx  width of the age interval, undefined for the last (open) interval
    ax  time spent in [x, x+wx) by those dying in that interval

Ages must be ordered from low to high without gaps between subsequent
intervals, and the last interval is open to the right (e.g. 110+).
"""

import math
from dataclasses import dataclass
from numbers import Real
from typing import Optional, Sequence, Union

import polars as pl

from lifequal.config import DEFAULT_RADIX, OPEN_INTERVAL_EX, TerminalInterval
from lifequal.errors import InvalidInput
from lifequal.expressions import e_dagger_expr, ex_dagger_expr


Column = Union[Sequence[float], pl.Series]


def as_column(name: str, values: Column) -> pl.Series:
    """Copy `values` into a new Float64 series called `name`."""
    if isinstance(values, pl.Series):
        return values.cast(pl.Float64, strict=False).rename(name)
    if isinstance(values, (str, bytes)) or not hasattr(values, "__len__"):
        raise InvalidInput(f"`{name}` must be a sequence of numbers, got {values!r}")
    try:
        return pl.Series(name, values, dtype=pl.Float64, strict=False)
    except (TypeError, ValueError, pl.exceptions.PolarsError) as e:
        raise InvalidInput(f"`{name}` must be a sequence of numbers") from e


def as_scalar(name: str, value, *, positive: bool = False) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInput(f"`{name}` must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidInput(f"`{name}` must be finite, got {value}")
    if positive and value <= 0:
        raise InvalidInput(f"`{name}` must be strictly positive, got {value}")
    return value


def check_lengths(*columns: pl.Series) -> int:
    lengths = {s.name: len(s) for s in columns}
    if len(set(lengths.values())) > 1:
        raise InvalidInput(f"columns have mismatched lengths: {lengths}")
    return len(columns[0])


def check_finite(s: pl.Series, *, open_last: bool = False) -> None:
    # the open interval may leave wx and ax undefined
    body = s.head(len(s) - 1) if open_last else s
    if body.null_count() or not body.is_finite().all():
        where = " for closed age intervals" if open_last else ""
        raise InvalidInput(f"`{s.name}` must be defined and finite{where}")


def check_increasing(x: pl.Series) -> None:
    check_finite(x)
    if (x.diff().drop_nulls() <= 0).any():
        raise InvalidInput(f"`{x.name}` must be strictly increasing")


def check_positive(s: pl.Series, *, open_last: bool = False) -> None:
    check_finite(s, open_last=open_last)
    body = s.head(len(s) - 1) if open_last else s
    if (body <= 0).any():
        raise InvalidInput(f"`{s.name}` must be strictly positive")


def check_non_negative(s: pl.Series, *, open_last: bool = False) -> None:
    check_finite(s, open_last=open_last)
    body = s.head(len(s) - 1) if open_last else s
    if (body < 0).any():
        raise InvalidInput(f"`{s.name}` must be non-negative")


@dataclass(frozen=True, eq=False)
class LifeTableGroup:
    """
    Validated columns of one life-table group.

    `wx` and `ax` are optional: `None` selects the default (widths from the
    differences of `x`, deaths halfway through the interval) and a scalar is
    used for every interval. `dx` is only needed for `e_dagger` and
    `keyfitz_entropy`.
    """

    x: Column
    ex: Column
    dx: Optional[Column] = None
    wx: Optional[Union[Column, float]] = None
    ax: Optional[Union[Column, float]] = None

    def __post_init__(self) -> None:
        x = as_column("x", self.x)
        if len(x) == 0:
            raise InvalidInput("a life-table group needs at least one age interval")

        columns = {"x": x, "ex": as_column("ex", self.ex)}
        if self.dx is not None:
            columns["dx"] = as_column("dx", self.dx)
        for name in ("wx", "ax"):
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, Real):
                columns[name] = pl.repeat(
                    as_scalar(name, value), len(x), dtype=pl.Float64, eager=True
                ).rename(name)
            else:
                columns[name] = as_column(name, value)

        check_lengths(*columns.values())
        check_increasing(columns["x"])
        check_positive(columns["ex"])
        if "dx" in columns:
            check_non_negative(columns["dx"])
        if "wx" in columns:
            check_positive(columns["wx"], open_last=True)
        if "ax" in columns:
            check_non_negative(columns["ax"], open_last=True)

        # frozen dataclass, store the validated copies
        for name in ("x", "ex", "dx", "wx", "ax"):
            object.__setattr__(self, name, columns.get(name))

    @classmethod
    def from_frame(
        cls,
        df: Union[pl.DataFrame, pl.LazyFrame],
        *,
        x: str = "x",
        ex: str = "ex",
        dx: Optional[str] = "dx",
        wx: Optional[str] = None,
        ax: Optional[str] = None,
    ) -> "LifeTableGroup":
        """Build a group from a frame holding a single life-table."""
        if isinstance(df, pl.LazyFrame):
            df = df.collect()

        names = {"x": x, "ex": ex, "dx": dx, "wx": wx, "ax": ax}
        missing = [c for c in names.values() if c is not None and c not in df.columns]
        if missing:
            raise InvalidInput(f"life-table is missing columns {missing}")

        return cls(**{k: df.get_column(c) for k, c in names.items() if c is not None})

    def __len__(self) -> int:
        return len(self.x)

    @property
    def n(self) -> int:
        """Number of age intervals."""
        return len(self.x)

    @property
    def e0(self) -> float:
        """Life expectancy at the start of the first age interval."""
        return self.ex[0]

    def widths(self) -> pl.Series:
        if self.wx is not None:
            return self.wx
        return (self.x.shift(-1) - self.x).rename("wx")

    def to_frame(self) -> pl.DataFrame:
        return pl.DataFrame(
            [s for s in (self.x, self.ex, self.dx, self.wx, self.ax) if s is not None]
        )

    def ex_dagger(
        self,
        *,
        terminal=TerminalInterval.FIXED,
        open_interval_ex: float = OPEN_INTERVAL_EX,
    ) -> pl.Series:
        return self.to_frame().select(
            self._ex_dagger_expr(terminal, open_interval_ex)
        ).to_series()

    def e_dagger(
        self,
        radix: float = DEFAULT_RADIX,
        *,
        terminal=TerminalInterval.FIXED,
        open_interval_ex: float = OPEN_INTERVAL_EX,
    ) -> float:
        if self.dx is None:
            raise InvalidInput("`dx` is required to aggregate life expectancy lost")
        radix = as_scalar("radix", radix, positive=True)

        return self.to_frame().select(
            e_dagger_expr(
                pl.col("dx"),
                self._ex_dagger_expr(terminal, open_interval_ex),
                radix=radix,
            )
        ).item()

    def keyfitz_entropy(
        self,
        radix: float = DEFAULT_RADIX,
        *,
        terminal=TerminalInterval.FIXED,
        open_interval_ex: float = OPEN_INTERVAL_EX,
    ) -> float:
        edagger = self.e_dagger(
            radix, terminal=terminal, open_interval_ex=open_interval_ex
        )
        return edagger / self.e0

    def _ex_dagger_expr(self, terminal, open_interval_ex) -> pl.Expr:
        return ex_dagger_expr(
            pl.col("x"),
            pl.col("ex"),
            wx=None if self.wx is None else pl.col("wx"),
            ax=None if self.ax is None else pl.col("ax"),
            terminal=terminal,
            open_interval_ex=open_interval_ex,
        )
