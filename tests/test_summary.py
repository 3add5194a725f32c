#!/usr/bin/env python3
"""Tests for report assembly against the sample snapshot."""
import logging
from pathlib import Path
from unittest import mock

import pytest

from maintrecon import (
    Asset,
    CostFigures,
    IntervalState,
    MaintenanceInterval,
    MaintenanceUnit,
    ReportConfig,
    build_report,
    load_snapshot,
    resolve_maintenance,
)
from maintrecon.selector import MaintenanceSelection
from maintrecon.summary import format_interval_name

SAMPLE = Path(__file__).parent.parent / "snapshots" / "sample.yaml"


@pytest.fixture
def store():
    return load_snapshot(SAMPLE)


@pytest.fixture
def config():
    return ReportConfig.for_dates("2025-01-01", "2025-01-31")


@pytest.fixture
def report(store, config):
    return {s.asset_id: s for s in build_report(store, config)}


class TestFormatIntervalName:
    """Tests for format_interval_name."""

    def test_first_cycle_plain_label(self):
        selection = MaintenanceSelection(
            interval_label="Service 300 h", interval_value=300, due_value=300,
            state=IntervalState.OVERDUE,
        )
        assert format_interval_name(selection, MaintenanceUnit.HOURS) == "Service 300 h"

    def test_overdue_annotation(self):
        selection = MaintenanceSelection(
            interval_label="Service 300 h", interval_value=300, due_value=3300,
            state=IntervalState.OVERDUE,
        )
        assert (
            format_interval_name(selection, MaintenanceUnit.HOURS)
            == "Service 300 h (overdue at 3,300 h)"
        )

    def test_due_annotation(self):
        selection = MaintenanceSelection(
            interval_label="Service 40,000 km", interval_value=40000, due_value=80000,
            state=IntervalState.SCHEDULED,
        )
        assert (
            format_interval_name(selection, MaintenanceUnit.KILOMETERS)
            == "Service 40,000 km (due at 80,000 km)"
        )

    def test_no_selection(self):
        assert format_interval_name(MaintenanceSelection(), MaintenanceUnit.HOURS) is None


class TestResolveMaintenance:
    """Tests for resolve_maintenance."""

    def test_no_intervals(self, config):
        resolution, selection = resolve_maintenance(Asset("a1", "X", current_hours=10), [], [], config)
        assert resolution is None
        assert selection.interval_id is None

    def test_uses_config_thresholds(self):
        config = ReportConfig.for_dates("2025-01-01", "2025-01-31", near_due_threshold=150)
        intervals = [MaintenanceInterval("i300", 300), MaintenanceInterval("i600", 600), MaintenanceInterval("i3000", 3000)]
        asset = Asset("a1", "X", current_hours=3450)
        resolution, _ = resolve_maintenance(asset, intervals, [], config)
        assert resolution.by_state(IntervalState.UPCOMING)[0].interval.id == "i600"


class TestBuildReport:
    """Tests for build_report over the sample snapshot."""

    def test_in_scope_assets_in_store_order(self, store, config):
        summaries = build_report(store, config)
        assert [s.asset_id for s in summaries] == ["a-cr12", "a-gen03", "a-mx21", "a-tk07"]

    def test_unattributed_asset_excluded_with_warning(self, store, config, caplog):
        with caplog.at_level(logging.WARNING):
            summaries = build_report(store, config)
        assert "a-old01" not in [s.asset_id for s in summaries]
        assert "no plant attribution" in caplog.text

    def test_excavator_overdue_300(self, report):
        s = report["a-cr12"]
        assert s.plant_id == "p-north"
        assert s.plant_name == "North Quarry"
        assert s.current_value == 3450
        assert s.interval_id == "i-exc-300"
        assert s.interval_name == "Service 300 h (overdue at 3,300 h)"
        assert s.interval_value == 300
        assert s.interval_state == IntervalState.OVERDUE
        assert s.due_value == 3300
        assert s.overdue == 150
        assert s.remaining is None

    def test_excavator_last_service_fallback(self, report):
        """The 300 h record is older than the overall latest, so the fallback stands."""
        s = report["a-cr12"]
        assert s.last_service_date == "2024-06-10"
        assert s.last_service_value == 2995
        assert s.last_service_interval_value == 3000

    def test_excavator_usage_from_cleaned_readings(self, report):
        """Baseline 3235 (12-28) to 3450 (01-30); the 9999 typo is outside the corridor."""
        assert report["a-cr12"].usage == pytest.approx(215)

    def test_excavator_costs(self, report):
        s = report["a-cr12"]
        assert s.fuel_liters == 850
        assert s.fuel_cost == pytest.approx(630 * 1.35 + 220 * 1.40)
        assert s.preventive_cost == 1200.5
        assert s.corrective_cost == 340
        assert s.maintenance_cost == 1540.5

    def test_generator_break_in_overdue(self, report):
        s = report["a-gen03"]
        assert s.interval_id == "i-gen-50"
        assert s.interval_name == "Break-in inspection"
        assert s.overdue == 430
        assert s.usage == 0.0
        assert s.last_service_date is None

    def test_truck_scheduled_next_major(self, report):
        s = report["a-tk07"]
        assert s.maintenance_unit == MaintenanceUnit.KILOMETERS
        assert s.interval_id == "i-trk-40k"
        assert s.interval_name == "Service 40,000 km (due at 80,000 km)"
        assert s.remaining == 27700
        assert s.overdue is None
        assert s.last_service_date == "2024-11-02"
        assert s.last_service_interval_value == 20000

    def test_truck_usage_and_local_fuel(self, report):
        s = report["a-tk07"]
        assert s.usage == pytest.approx(650)
        assert s.fuel_liters == 195
        assert s.fuel_cost == pytest.approx(195 * 1.35)
        assert s.preventive_cost == 0

    def test_mixer_attributed_to_historical_plant(self, report):
        s = report["a-mx21"]
        assert s.plant_id == "p-south"
        assert s.plant_name == "South Batching Plant"
        assert s.delivery_count == 42
        assert s.delivered_volume == 315
        assert s.fuel_cost == 162
        assert s.fuel_liters == 120

    def test_plant_filter_uses_historical_plant(self, store, config):
        summaries = build_report(store, config, plant_id="p-south")
        assert [s.asset_id for s in summaries] == ["a-mx21", "a-tk07"]

    def test_business_unit_filter(self, store, config):
        assert len(build_report(store, config, business_unit_id="bu-central")) == 4
        assert build_report(store, config, business_unit_id="bu-other") == []

    def test_collaborator_failure_leaves_costs_at_zero(self, store, config):
        source = mock.Mock()
        source.fetch.return_value = {}
        summaries = {s.asset_id: s for s in build_report(store, config, cost_source=source)}
        source.fetch.assert_called_once_with(config, None, None)
        assert summaries["a-cr12"].preventive_cost == 0
        assert summaries["a-cr12"].fuel_liters == 850
        assert summaries["a-cr12"].interval_id == "i-exc-300"

    def test_custom_cost_source(self, store, config):
        source = mock.Mock()
        source.fetch.return_value = {"a-gen03": CostFigures(corrective_cost=75)}
        summaries = {s.asset_id: s for s in build_report(store, config, cost_source=source)}
        assert summaries["a-gen03"].maintenance_cost == 75

    def test_single_worker_same_result(self, store):
        config = ReportConfig.for_dates("2025-01-01", "2025-01-31", max_workers=1)
        summaries = build_report(store, config)
        assert [s.asset_id for s in summaries] == ["a-cr12", "a-gen03", "a-mx21", "a-tk07"]

    def test_to_dict(self, report):
        data = report["a-cr12"].to_dict()
        assert data["asset_code"] == "CR-12"
        assert data["maintenance_unit"] == "hours"
        assert data["interval_state"] == "overdue"
        assert data["maintenance_cost"] == 1540.5
        assert report["a-gen03"].to_dict()["last_service_date"] is None
