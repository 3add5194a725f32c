#!/usr/bin/env python3
"""Tests for reading parsing and source rows."""
from datetime import date, datetime

from maintrecon import (
    ChecklistReading,
    FuelTransaction,
    MaintenanceUnit,
    Reading,
    ReadingSource,
)
from maintrecon.reading import make_event, parse_timestamp, parse_value


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    def test_iso_datetime(self):
        assert parse_timestamp("2025-01-10T08:30:00") == datetime(2025, 1, 10, 8, 30)

    def test_date_only(self):
        assert parse_timestamp("2025-01-10") == datetime(2025, 1, 10)

    def test_timezone_converted_to_naive_utc(self):
        assert parse_timestamp("2025-01-10T08:00:00-06:00") == datetime(2025, 1, 10, 14, 0)

    def test_date_object(self):
        assert parse_timestamp(date(2025, 1, 10)) == datetime(2025, 1, 10)

    def test_invalid_returns_none(self):
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp("") is None
        assert parse_timestamp(None) is None


class TestParseValue:
    """Tests for parse_value."""

    def test_numbers(self):
        assert parse_value(3450) == 3450.0
        assert parse_value("3450.5") == 3450.5

    def test_invalid_returns_none(self):
        assert parse_value("n/a") is None
        assert parse_value(None) is None
        assert parse_value(True) is None
        assert parse_value(float("nan")) is None


class TestMakeEvent:
    """Tests for make_event."""

    def test_valid_event(self):
        event = make_event("a1", "2025-01-10", "100", ReadingSource.FUEL_TRANSACTION)
        assert event.asset_id == "a1"
        assert event.reading == Reading(datetime(2025, 1, 10), 100.0)

    def test_malformed_dropped(self):
        assert make_event("a1", "bad", 100, ReadingSource.FUEL_TRANSACTION) is None
        assert make_event("a1", "2025-01-10", "bad", ReadingSource.FUEL_TRANSACTION) is None
        assert make_event(None, "2025-01-10", 100, ReadingSource.FUEL_TRANSACTION) is None


class TestFuelTransaction:
    """Tests for FuelTransaction."""

    def test_event_uses_unit_specific_reading(self):
        tx = FuelTransaction("a1", "2025-01-10T07:00:00", hours_reading=3260, kilometers_reading=81000)
        assert tx.to_event(MaintenanceUnit.HOURS).value == 3260
        assert tx.to_event(MaintenanceUnit.KILOMETERS).value == 81000
        assert tx.to_event(MaintenanceUnit.HOURS).source == ReadingSource.FUEL_TRANSACTION

    def test_transfer_is_not_consumption(self):
        tx = FuelTransaction("a1", "2025-01-10", is_transfer=True, hours_reading=3260)
        assert not tx.is_consumption
        assert tx.to_event(MaintenanceUnit.HOURS) is None

    def test_entry_type_is_not_consumption(self):
        tx = FuelTransaction("a1", "2025-01-10", transaction_type="entry", hours_reading=3260)
        assert tx.to_event(MaintenanceUnit.HOURS) is None

    def test_no_reading_no_event(self):
        tx = FuelTransaction("a1", "2025-01-10", quantity_liters=100)
        assert tx.to_event(MaintenanceUnit.HOURS) is None


class TestChecklistReading:
    """Tests for ChecklistReading."""

    def test_timestamp_prefers_reading_timestamp(self):
        reading = ChecklistReading("a1", "2025-01-15T16:00:00", "2025-01-16", hours_reading=3330)
        assert reading.timestamp == datetime(2025, 1, 15, 16, 0)

    def test_timestamp_falls_back_to_completion_date(self):
        reading = ChecklistReading("a1", None, "2025-01-30", hours_reading=3450)
        assert reading.timestamp == datetime(2025, 1, 30)
        event = reading.to_event(MaintenanceUnit.HOURS)
        assert event.source == ReadingSource.INSPECTION_CHECKLIST
        assert event.ts == datetime(2025, 1, 30)

    def test_missing_unit_reading_no_event(self):
        reading = ChecklistReading("a1", "2025-01-15", hours_reading=3330)
        assert reading.to_event(MaintenanceUnit.KILOMETERS) is None
