#!/usr/bin/env python3
"""Tests for cross-source reading validation."""
from datetime import datetime, timedelta

import pytest

from maintrecon import (
    CorroboratedCleaner,
    Reading,
    ReportConfig,
    UncorroboratedCleaner,
    clean_series,
    select_cleaner,
    validate_fuel_readings,
)
from maintrecon.normalizer import ReadingSeries

T0 = datetime(2025, 1, 2)


def day(n, value):
    return Reading(T0 + timedelta(days=n), value)


@pytest.fixture
def config():
    return ReportConfig.for_dates("2025-01-01", "2025-01-31")


class TestValidateFuelReadings:
    """Tests for validate_fuel_readings."""

    def test_plausible_sequence_kept(self):
        readings = [day(0, 1000), day(1, 1010), day(2, 1030)]
        assert validate_fuel_readings(readings, 24, 60) == readings

    def test_first_reading_always_kept(self):
        assert validate_fuel_readings([day(0, 1000)], 24, 60) == [day(0, 1000)]
        assert validate_fuel_readings([], 24, 60) == []

    def test_backwards_reading_rejected(self):
        readings = [day(0, 1000), day(1, 1010), day(2, 990), day(3, 1005)]
        # 1005 is judged against the raw predecessor 990, not the last kept reading
        assert validate_fuel_readings(readings, 24, 60) == [day(0, 1000), day(1, 1010), day(3, 1005)]

    def test_fast_rate_rejected(self):
        readings = [day(0, 1000), day(1, 1100)]
        assert validate_fuel_readings(readings, 24, 60) == [day(0, 1000)]

    def test_fast_rate_after_long_gap_kept(self):
        readings = [day(0, 1000), day(90, 4000)]
        assert validate_fuel_readings(readings, 24, 60) == readings

    def test_unsorted_input(self):
        readings = [day(1, 1010), day(0, 1000)]
        assert validate_fuel_readings(readings, 24, 60) == [day(0, 1000), day(1, 1010)]


class TestCorroboratedCleaner:
    """Tests for the corridor policy."""

    def test_corridor_bounds(self):
        cleaner = CorroboratedCleaner([3210, 3440], 2)
        assert cleaner.allowed_min == 3210 - 460
        assert cleaner.allowed_max == 3440 + 460

    def test_accepts_inside_corridor(self):
        cleaner = CorroboratedCleaner([3210, 3440], 2)
        assert cleaner.accepts(Reading(T0, 3450))
        assert cleaner.accepts(Reading(T0, 3900))
        assert not cleaner.accepts(Reading(T0, 9999))
        assert not cleaner.accepts(Reading(T0, 12))

    def test_filter_drops_outliers(self):
        cleaner = CorroboratedCleaner([3210, 3440], 2)
        kept = cleaner.filter([day(0, 3300), day(1, 9999), day(2, 3320)])
        assert kept == [day(0, 3300), day(2, 3320)]

    def test_single_reference_value(self):
        """Zero spread collapses the corridor onto the reference value."""
        cleaner = CorroboratedCleaner([18600], 2)
        assert cleaner.accepts(Reading(T0, 18600))
        assert not cleaner.accepts(Reading(T0, 18880))

    def test_requires_reference_values(self):
        with pytest.raises(ValueError):
            CorroboratedCleaner([], 2)


class TestSelectCleaner:
    """Tests for select_cleaner."""

    def test_no_fuel_means_uncorroborated(self):
        assert isinstance(select_cleaner([], None), UncorroboratedCleaner)
        assert isinstance(select_cleaner([], []), UncorroboratedCleaner)

    def test_fuel_means_corroborated(self):
        cleaner = select_cleaner([day(0, 100), day(1, 110)], None)
        assert isinstance(cleaner, CorroboratedCleaner)
        assert cleaner.allowed_min == 80
        assert cleaner.allowed_max == 130

    def test_validation_set_preferred(self):
        cleaner = select_cleaner([day(0, 100), day(1, 110)], [100, 200])
        assert cleaner.allowed_max == 400

    def test_uncorroborated_keeps_everything(self):
        readings = [day(0, 100), day(1, 99999)]
        assert UncorroboratedCleaner().filter(readings) == readings


class TestCleanSeries:
    """Tests for clean_series."""

    def test_merges_validated_sources(self, config):
        series = ReadingSeries(
            "a1",
            fuel=[day(0, 3210), day(5, 3260), day(10, 3310)],
            checklist=[day(3, 3235), day(7, 9999), day(12, 3330)],
        )
        cleaned = clean_series(series, config)
        assert [r.value for r in cleaned] == [3210, 3235, 3260, 3310, 3330]

    def test_checklist_only_kept_as_is(self, config):
        series = ReadingSeries("a1", fuel=[], checklist=[day(0, 100), day(1, 110)])
        assert clean_series(series, config) == [day(0, 100), day(1, 110)]

    def test_rejected_fuel_readings_do_not_widen_corridor(self, config):
        series = ReadingSeries(
            "a1",
            fuel=[day(0, 100), day(1, 110), day(2, 5000)],
            checklist=[day(3, 4000)],
        )
        assert [r.value for r in clean_series(series, config)] == [100, 110]

    def test_explicit_validation_values(self, config):
        series = ReadingSeries("a1", fuel=[day(0, 100)], checklist=[day(1, 150)])
        cleaned = clean_series(series, config, validation_values=[100, 140])
        assert [r.value for r in cleaned] == [100, 150]
