import polars as pl
import pytest

from lifequal import InvalidInput, LifeTableGroup, TerminalInterval, e_dagger, ex_dagger


class TestLifeTableGroup:
    """Construction and validation of a single life-table group."""

    def test_columns_are_float_series(self, female):
        group = LifeTableGroup(**female)

        for name in ("x", "ex", "dx", "ax"):
            column = getattr(group, name)
            assert isinstance(column, pl.Series)
            assert column.name == name
            assert column.dtype == pl.Float64
        assert group.wx is None

    def test_len_and_e0(self, female):
        group = LifeTableGroup(**female)

        assert len(group) == 4
        assert group.n == 4
        assert group.e0 == 40.0

    def test_n_single_interval(self):
        assert LifeTableGroup(x=[0], ex=[30.0]).n == 1

    def test_widths_inferred(self, female):
        widths = LifeTableGroup(**female).widths()
        assert widths.to_list() == [1.0, 4.0, 5.0, None]

    def test_scalar_width_broadcast(self):
        group = LifeTableGroup(x=[0, 5, 10], ex=[40.0, 30.0, 20.0], wx=5)
        assert group.widths().to_list() == [5.0, 5.0, 5.0]

    def test_to_frame(self, female):
        frame = LifeTableGroup(**female).to_frame()
        assert frame.columns == ["x", "ex", "dx", "ax"]
        assert frame.height == 4

    def test_non_increasing_ages(self):
        with pytest.raises(InvalidInput, match="strictly increasing"):
            LifeTableGroup(x=[0, 2, 1], ex=[40.0, 39.0, 38.0])

    def test_infinite_age(self):
        with pytest.raises(InvalidInput, match="finite"):
            LifeTableGroup(x=[0, 1, float("inf")], ex=[40.0, 39.0, 38.0])

    def test_negative_deaths(self, female):
        female["dx"] = [200.0, -1.0, 50.0, 600.0]
        with pytest.raises(InvalidInput, match="`dx` must be non-negative"):
            LifeTableGroup(**female)

    def test_negative_ax(self, female):
        female["ax"] = [-0.3, 1.5, 2.5, 5.0]
        with pytest.raises(InvalidInput, match="`ax` must be non-negative"):
            LifeTableGroup(**female)

    def test_undefined_ax_in_open_interval(self, female):
        female["ax"] = [0.3, 1.5, 2.5, None]
        group = LifeTableGroup(**female)
        assert group.ex_dagger()[-1] == pytest.approx(20.7)

    def test_string_column(self):
        with pytest.raises(InvalidInput, match="sequence of numbers"):
            LifeTableGroup(x="0,1,2", ex=[40.0, 39.0, 38.0])

    def test_frozen(self, female):
        group = LifeTableGroup(**female)
        with pytest.raises(AttributeError):
            group.x = [0, 1]


class TestLifeTableGroupMeasures:
    """The three measures evaluated on a group."""

    def test_matches_functions(self, female):
        group = LifeTableGroup(**female)

        exdagger = ex_dagger(x=female["x"], ex=female["ex"], ax=female["ax"])
        assert group.ex_dagger().to_list() == pytest.approx(exdagger.to_list())
        assert group.e_dagger(radix=1000) == pytest.approx(
            e_dagger(dx=female["dx"], exdagger=exdagger, radix=1000)
        )

    def test_keyfitz_entropy(self, female):
        group = LifeTableGroup(**female)
        assert group.keyfitz_entropy(radix=1000) == pytest.approx(29.51375 / 40.0)

    def test_carry_forward(self, female):
        group = LifeTableGroup(**female)

        result = group.e_dagger(radix=1000, terminal=TerminalInterval.CARRY_FORWARD)

        # open interval loses e(omega) = 40 instead of 20.7
        assert result == pytest.approx(29.51375 + 600 * (40.0 - 20.7) / 1000)

    def test_e_dagger_needs_deaths(self):
        group = LifeTableGroup(x=[0, 1], ex=[40.0, 39.0])
        with pytest.raises(InvalidInput, match="`dx` is required"):
            group.e_dagger()

    def test_invalid_radix(self, female):
        with pytest.raises(InvalidInput, match="radix"):
            LifeTableGroup(**female).keyfitz_entropy(radix=0)


class TestFromFrame:
    """Building a group from a polars frame."""

    def test_data_frame(self, female):
        df = pl.DataFrame(female)

        group = LifeTableGroup.from_frame(df, ax="ax")

        assert group.ex_dagger().to_list() == pytest.approx([41.5, 44.625, 42.0, 20.7])

    def test_lazy_frame(self, female):
        group = LifeTableGroup.from_frame(pl.LazyFrame(female))
        assert group.ax is None
        assert group.e0 == 40.0

    def test_renamed_columns(self, female):
        df = pl.DataFrame(female).rename({"x": "age", "ex": "e"})
        group = LifeTableGroup.from_frame(df, x="age", ex="e", dx=None)
        assert group.dx is None
        assert group.x.to_list() == [0.0, 1.0, 5.0, 10.0]

    def test_missing_column(self, female):
        df = pl.DataFrame(female).drop("dx")
        with pytest.raises(InvalidInput, match="missing columns"):
            LifeTableGroup.from_frame(df)

    def test_unsorted_frame(self, female):
        df = pl.DataFrame(female).reverse()
        with pytest.raises(InvalidInput, match="strictly increasing"):
            LifeTableGroup.from_frame(df)
