"""Shared life-table fixtures."""

import polars as pl
import pytest


# abridged table: intervals [0,1), [1,5), [5,10), 10+ and deaths out of 1,000
FEMALE = {
    "x": [0, 1, 5, 10],
    "ax": [0.3, 1.5, 2.5, 5.0],
    "ex": [40.0, 45.0, 44.0, 40.0],
    "dx": [200.0, 150.0, 50.0, 600.0],
}

MALE = {
    "x": [0, 1, 5, 10],
    "ax": [0.25, 1.6, 2.5, 4.0],
    "ex": [36.0, 42.0, 41.5, 37.0],
    "dx": [240.0, 160.0, 60.0, 540.0],
}


@pytest.fixture
def female():
    return dict(FEMALE)


@pytest.fixture
def male():
    return dict(MALE)


@pytest.fixture
def sweden5x5():
    """Two life-tables of one period, male rows first."""
    frames = [
        pl.DataFrame(table).with_columns(
            pl.lit(sex).alias("sex"), pl.lit("1755-1759").alias("period")
        )
        for sex, table in (("male", MALE), ("female", FEMALE))
    ]
    return pl.concat(frames).select("sex", "period", "x", "ax", "ex", "dx")
