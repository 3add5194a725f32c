#!/usr/bin/env python3
"""Tests for ServiceRecord and ServiceType."""
from datetime import date, datetime

import pytest

from maintrecon import MaintenanceUnit, ServiceRecord, ServiceType


class TestServiceTypeParse:
    """Tests for ServiceType.parse."""

    @pytest.mark.parametrize("value", ["preventive", "Preventivo", "PREVENTIVA", "preventative", " preventive "])
    def test_preventive_spellings(self, value):
        assert ServiceType.parse(value) == ServiceType.PREVENTIVE

    @pytest.mark.parametrize("value", ["corrective", "Correctivo", "correctiva"])
    def test_corrective_spellings(self, value):
        assert ServiceType.parse(value) == ServiceType.CORRECTIVE

    def test_unknown_is_other(self):
        assert ServiceType.parse("inspection") == ServiceType.OTHER
        assert ServiceType.parse(None) == ServiceType.OTHER


class TestServiceRecord:
    """Tests for ServiceRecord class."""

    def test_date_object_stored_as_iso_string(self):
        record = ServiceRecord("a1", "i1", date(2024, 6, 10), hours=2995)
        assert record.date == "2024-06-10"

    def test_performed_at_is_naive_utc(self):
        record = ServiceRecord("a1", "i1", "2024-06-10T23:00:00-06:00")
        assert record.performed_at == datetime(2024, 6, 11, 5, 0)
        assert record.date == "2024-06-10T23:00:00-06:00"

    def test_unparseable_date_sorts_first(self):
        record = ServiceRecord("a1", "i1", "someday")
        assert record.performed_at == datetime.min

    def test_type_string_normalized(self):
        record = ServiceRecord("a1", "i1", "2024-06-10", type="Preventivo")
        assert record.type == ServiceType.PREVENTIVE
        assert record.is_preventive

    def test_corrective_not_preventive(self):
        record = ServiceRecord("a1", "i1", "2024-06-10", type="correctivo")
        assert not record.is_preventive

    def test_usage_value_by_unit(self):
        record = ServiceRecord("a1", "i1", "2024-06-10", hours=2995, kilometers=81000)
        assert record.usage_value(MaintenanceUnit.HOURS) == 2995
        assert record.usage_value(MaintenanceUnit.KILOMETERS) == 81000

    def test_missing_usage_value_is_zero(self):
        record = ServiceRecord("a1", "i1", "2024-06-10", hours=2995)
        assert record.usage_value(MaintenanceUnit.KILOMETERS) == 0.0
