"""
lifequal: lifespan equality from life-tables.

    ex_dagger(x, ex, wx, ax)         life expectancy lost in age interval [x, x+wx)
    e_dagger(dx, exdagger, radix)    total life expectancy lost due to death
    keyfitz_entropy(edagger, e0)     Keyfitz's entropy
"""

from lifequal.config import OPEN_INTERVAL_EX, TerminalInterval
from lifequal.dagger import e_dagger, ex_dagger, keyfitz_entropy, lifespan_equality
from lifequal.errors import InvalidInput
from lifequal.expressions import e_dagger_expr, ex_dagger_expr, keyfitz_entropy_expr
from lifequal.grouped import lifespan_equality_table, validate_frame, with_ex_dagger
from lifequal.life_table import LifeTableGroup

__all__ = [
    "InvalidInput",
    "LifeTableGroup",
    "OPEN_INTERVAL_EX",
    "TerminalInterval",
    "e_dagger",
    "e_dagger_expr",
    "ex_dagger",
    "ex_dagger_expr",
    "keyfitz_entropy",
    "keyfitz_entropy_expr",
    "lifespan_equality",
    "lifespan_equality_table",
    "validate_frame",
    "with_ex_dagger",
]
