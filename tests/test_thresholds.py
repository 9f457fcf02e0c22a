"""
tests/test_thresholds.py
─────────────────────────
Tests for the service-status bands.
"""
from config.calibration import SoftenerCalibration, TankCalibration
from config.verdicts import ServiceStatus
from src.analytics.thresholds import (
    ThresholdBand,
    evaluate_current_value,
    odometer_band,
    resin_band,
    scale_band,
    sediment_band,
    worst_status,
)

SEDIMENT_BAND = sediment_band()
SCALE_BAND = scale_band()
RESIN_BAND = resin_band()
ODOMETER_BAND = odometer_band()


class TestBandBuilders:
    def test_sediment_band(self):
        assert SEDIMENT_BAND.advisory == 2.0
        assert SEDIMENT_BAND.due == 5.0
        assert SEDIMENT_BAND.critical == 10.0
        assert SEDIMENT_BAND.lockout == 15.0

    def test_resin_band_descends(self):
        assert RESIN_BAND.descending
        assert RESIN_BAND.lockout == 40.0

    def test_sediment_band_follows_calibration(self):
        band = sediment_band(TankCalibration(sediment_flush=3.0))
        assert band.due == 3.0
        assert evaluate_current_value(4.0, band) == ServiceStatus.DUE
        assert evaluate_current_value(4.0, SEDIMENT_BAND) == ServiceStatus.ADVISORY

    def test_odometer_band_follows_seal_limit(self):
        band = odometer_band(SoftenerCalibration(seal_limit=100.0))
        assert evaluate_current_value(214.0, band) == ServiceStatus.DUE
        assert evaluate_current_value(214.0, ODOMETER_BAND) == ServiceStatus.OPTIMAL


class TestEvaluateCurrentValue:
    def test_sediment_ladder(self):
        assert evaluate_current_value(1.0, SEDIMENT_BAND) == ServiceStatus.OPTIMAL
        assert evaluate_current_value(2.0, SEDIMENT_BAND) == ServiceStatus.ADVISORY
        assert evaluate_current_value(5.0, SEDIMENT_BAND) == ServiceStatus.DUE
        assert evaluate_current_value(12.0, SEDIMENT_BAND) == ServiceStatus.CRITICAL

    def test_lockout_bound_is_exclusive(self):
        assert evaluate_current_value(15.0, SEDIMENT_BAND) == ServiceStatus.CRITICAL
        assert evaluate_current_value(15.1, SEDIMENT_BAND) == ServiceStatus.LOCKOUT

    def test_strict_band_keeps_bound_in_lower_status(self):
        assert evaluate_current_value(10.0, SCALE_BAND) == ServiceStatus.OPTIMAL
        assert evaluate_current_value(10.5, SCALE_BAND) == ServiceStatus.DUE
        assert evaluate_current_value(61.0, SCALE_BAND) == ServiceStatus.LOCKOUT

    def test_descending_resin(self):
        assert evaluate_current_value(80.0, RESIN_BAND) == ServiceStatus.OPTIMAL
        assert evaluate_current_value(75.0, RESIN_BAND) == ServiceStatus.OPTIMAL
        assert evaluate_current_value(60.0, RESIN_BAND) == ServiceStatus.DUE
        assert evaluate_current_value(45.0, RESIN_BAND) == ServiceStatus.CRITICAL
        assert evaluate_current_value(39.0, RESIN_BAND) == ServiceStatus.LOCKOUT

    def test_odometer(self):
        assert evaluate_current_value(600.0, ODOMETER_BAND) == ServiceStatus.OPTIMAL
        assert evaluate_current_value(642.0, ODOMETER_BAND) == ServiceStatus.DUE
        assert evaluate_current_value(1_600.0, ODOMETER_BAND) == ServiceStatus.LOCKOUT

    def test_empty_band_is_always_optimal(self):
        band = ThresholdBand("x", None, None, None, None)
        assert evaluate_current_value(1e9, band) == ServiceStatus.OPTIMAL


class TestWorstStatus:
    def test_picks_most_severe(self):
        assert worst_status(ServiceStatus.DUE, ServiceStatus.OPTIMAL) == ServiceStatus.DUE
        assert worst_status(ServiceStatus.CRITICAL, ServiceStatus.LOCKOUT) == ServiceStatus.LOCKOUT
