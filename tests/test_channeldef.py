"""
Tests for channel definitions: field naming and band lookups.
"""

from chartcompile.channel import Channel
from chartcompile.channeldef import (
    BINNED,
    Bin,
    DatumDef,
    FieldDef,
    FieldType,
    ValueDef,
    bin_requires_range,
    bin_to_string,
    get_band,
    is_binned,
    is_binning,
    is_counting_aggregate_op,
    is_field_or_datum_def,
    vg_field,
)
from chartcompile.config import Config, MarkConfig
from chartcompile.mark import MarkDef, MarkType

Q = FieldType.QUANTITATIVE
T = FieldType.TEMPORAL


class TestBinPredicates:

    def test_binning_vs_binned(self):
        assert is_binning(True)
        assert is_binning(Bin(maxbins=5))
        assert not is_binning(BINNED)
        assert not is_binning(None)
        assert is_binned(BINNED)
        assert not is_binned(True)
        assert not is_binned(Bin())

    def test_bin_to_string(self):
        """Bin names list the set parameters in declaration order."""
        assert bin_to_string(True) == "bin_maxbins_10"
        assert bin_to_string(Bin(maxbins=20, extent=(0, 100))) == "bin_extent_0_100_maxbins_20"
        assert bin_to_string(Bin(step=0.5)) == "bin_step_0_5"
        assert bin_to_string(Bin()) == "bin"

    def test_counting_ops(self):
        for op in ("count", "valid", "missing", "distinct"):
            assert is_counting_aggregate_op(op)
        assert not is_counting_aggregate_op("mean")
        assert not is_counting_aggregate_op(None)

    def test_field_or_datum_def(self):
        assert is_field_or_datum_def(FieldDef("a", Q))
        assert is_field_or_datum_def(DatumDef(3))
        assert not is_field_or_datum_def(ValueDef(3))
        assert not is_field_or_datum_def(None)


class TestVgField:
    """Test transformed field naming."""

    def test_plain_field(self):
        assert vg_field(FieldDef("price", Q)) == "price"

    def test_binned_field_suffixes(self):
        fd = FieldDef("price", Q, bin=True)
        assert vg_field(fd) == "bin_maxbins_10_price"
        assert vg_field(fd, bin_suffix="range") == "bin_maxbins_10_price_range"
        assert vg_field(fd, bin_suffix="mid") == "bin_maxbins_10_price_mid"
        assert vg_field(fd, suffix="end") == "bin_maxbins_10_price_end"

    def test_bin_suffix_ignored_without_binning(self):
        """Pre-binned and plain fields keep their own name."""
        assert vg_field(FieldDef("start", Q, bin=BINNED), bin_suffix="range") == "start"
        assert vg_field(FieldDef("c", FieldType.NOMINAL), bin_suffix="range") == "c"

    def test_aggregate_and_time_unit(self):
        assert vg_field(FieldDef("price", Q, aggregate="mean")) == "mean_price"
        assert vg_field(FieldDef("date", T, time_unit="month")) == "month_date"
        assert vg_field(FieldDef(None, Q, aggregate="count")) == "__count"

    def test_datum_expression(self):
        assert vg_field(FieldDef("price", Q), expr="datum") == 'datum["price"]'
        assert vg_field(FieldDef("a.b", Q), expr="datum") == 'datum["a.b"]'

    def test_nested_field_is_flattened(self):
        assert vg_field(FieldDef("a.b", Q)) == "a\\.b"


class TestBinRequiresRange:

    def test_discrete_binned_field_on_scale_channel(self):
        assert bin_requires_range(FieldDef("f", FieldType.ORDINAL, bin=True), Channel.COLOR)
        assert bin_requires_range(FieldDef("f", FieldType.NOMINAL, bin=True), Channel.X)

    def test_quantitative_or_unscaled(self):
        assert not bin_requires_range(FieldDef("f", Q, bin=True), Channel.COLOR)
        assert not bin_requires_range(FieldDef("f", FieldType.ORDINAL, bin=True), Channel.TEXT)
        assert not bin_requires_range(FieldDef("f", FieldType.ORDINAL), Channel.COLOR)


class TestGetBand:
    """Test band position lookups."""

    def setup_method(self):
        self.config = Config()
        self.point = MarkDef(type=MarkType.POINT)
        self.bar = MarkDef(type=MarkType.BAR)

    def test_explicit_band_wins(self):
        fd = FieldDef("f", Q, bin=True, band=0.2)
        assert get_band(Channel.X, fd, None, self.point, self.config, is_mid_point=True) == 0.2

    def test_only_x_and_y(self):
        fd = FieldDef("f", Q, bin=True, band=0.2)
        assert get_band(Channel.COLOR, fd, None, self.point, self.config) is None

    def test_binning_mid_point(self):
        fd = FieldDef("f", Q, bin=True)
        assert get_band(Channel.X, fd, None, self.bar, self.config, is_mid_point=True) == 0.5
        assert get_band(Channel.X, fd, None, self.bar, self.config) == 1
        assert get_band(Channel.X, fd, None, self.point, self.config) == 0.5

    def test_time_unit_band_position(self):
        fd = FieldDef("d", T, time_unit="month")
        assert get_band(Channel.X, fd, None, self.point, self.config, is_mid_point=True) is None

        config = Config(mark=MarkConfig(time_unit_band_position=0.5))
        assert get_band(Channel.X, fd, None, self.point, config, is_mid_point=True) == 0.5

    def test_time_unit_band_for_rect_marks(self):
        fd = FieldDef("d", T, time_unit="month")
        config = Config(mark_types={MarkType.BAR: MarkConfig(time_unit_band=1)})
        assert get_band(Channel.X, fd, None, self.bar, config) == 1
        assert get_band(Channel.X, fd, None, self.point, config) == 0

    def test_time_unit_with_secondary_field(self):
        fd = FieldDef("d", T, time_unit="month")
        assert get_band(Channel.X, fd, FieldDef("d2", T), self.point, self.config, is_mid_point=True) is None

    def test_datum_band(self):
        assert get_band(Channel.Y, DatumDef(3, band=0.7), None, self.point, self.config) == 0.7
        assert get_band(Channel.Y, DatumDef(3), None, self.point, self.config) is None
