"""
Tests for fleet data models
Row conversion, cost invariant and enum helpers
"""

import logging
from datetime import date, datetime, timezone

import pytest

from fleet_maintenance.models.fleet_models import (
    AlertSeverity,
    MaintenanceRecord,
    Priority,
    PredictionType,
    RiskLevel,
    SensorReading,
    SensorType,
    Truck,
    TruckStatus,
    as_utc,
)


class TestAsUtc:
    def test_naive_datetime_is_treated_as_utc(self):
        result = as_utc(datetime(2026, 1, 2, 3, 4))
        assert result.tzinfo == timezone.utc
        assert result.hour == 3

    def test_date_becomes_midnight(self):
        assert as_utc(date(2026, 5, 1)) == datetime(2026, 5, 1, tzinfo=timezone.utc)

    def test_iso_string(self):
        assert as_utc("2026-05-01T10:00:00").day == 1

    def test_none_passthrough(self):
        assert as_utc(None) is None


class TestMaintenanceRecord:
    """Maintenance record conversion"""

    def test_from_row(self, sample_maintenance_row):
        record = MaintenanceRecord.from_row(sample_maintenance_row)

        assert record.id == "501"
        assert record.total_cost == 600.0
        assert record.was_predicted is True
        assert record.downtime_hours == 3.5
        assert record.date_performed.tzinfo is not None

    def test_total_cost_mismatch_uses_derived_total(self, sample_maintenance_row, caplog):
        sample_maintenance_row["total_cost"] = 999.0

        with caplog.at_level(logging.WARNING, logger="fleet_maintenance.models.fleet_models"):
            record = MaintenanceRecord.from_row(sample_maintenance_row)

        assert record.total_cost == 600.0
        assert "total_cost 999.0" in caplog.text

    def test_missing_total_is_derived(self, sample_maintenance_row):
        sample_maintenance_row["total_cost"] = None
        assert MaintenanceRecord.from_row(sample_maintenance_row).total_cost == 600.0

    def test_matches_is_case_insensitive(self, sample_maintenance_row):
        record = MaintenanceRecord.from_row(sample_maintenance_row)
        assert record.matches("BRAKE")
        assert record.matches("tire", "pad")
        assert not record.matches("oil")


class TestTruck:
    def test_from_row(self, sample_truck_row):
        truck = Truck.from_row(sample_truck_row)

        assert truck.id == "TRK-001"
        assert truck.status == TruckStatus.ACTIVE
        assert truck.risk_level == RiskLevel.MEDIUM
        assert truck.last_inspection is None
        assert truck.maintenance_records == []

    def test_zero_fuel_efficiency_is_missing(self, sample_truck_row):
        sample_truck_row["fuel_efficiency"] = 0
        truck = Truck.from_row(sample_truck_row)
        assert truck.fuel_efficiency is None
        assert truck.to_dict()["fuel_efficiency"] is None

    def test_age_never_negative(self, sample_truck_row):
        sample_truck_row["year"] = 2030
        truck = Truck.from_row(sample_truck_row)
        assert truck.age_years(datetime(2026, 1, 1, tzinfo=timezone.utc)) == 0

    def test_to_dict_serializes_enums(self, sample_truck_row):
        data = Truck.from_row(sample_truck_row).to_dict()
        assert data["status"] == "ACTIVE"
        assert data["risk_level"] == "MEDIUM"
        assert data["last_oil_change"].startswith("2026-03-01")


class TestSensorReading:
    def test_from_row(self, sample_sensor_row):
        reading = SensorReading.from_row(sample_sensor_row)
        assert reading.sensor_type == SensorType.ENGINE_TEMPERATURE
        assert reading.is_anomaly is False
        assert reading.confidence is None
        assert reading.id == "9001"


class TestEnums:
    @pytest.mark.parametrize(
        "probability, expected",
        [
            (0.95, AlertSeverity.CRITICAL),
            (0.81, AlertSeverity.CRITICAL),
            (0.80, AlertSeverity.HIGH),
            (0.71, AlertSeverity.HIGH),
            (0.70, AlertSeverity.MEDIUM),
            (0.61, AlertSeverity.MEDIUM),
        ],
    )
    def test_alert_severity_from_probability(self, probability, expected):
        assert AlertSeverity.from_probability(probability) == expected

    def test_priority_rank_order(self):
        ranks = [p.rank for p in (Priority.CRITICAL, Priority.HIGH, Priority.MEDIUM, Priority.LOW)]
        assert ranks == [4, 3, 2, 1]

    def test_prediction_type_label(self):
        assert PredictionType.ENGINE_FAILURE.label == "ENGINE FAILURE"
