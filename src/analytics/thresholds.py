"""
src/analytics/thresholds.py
────────────────────────────
Service-status bands.

Each wear axis has a band, built from its calibration, that maps a current
value onto the status ladder optimal → advisory → due → critical → lockout.
Accumulation axes (sediment, scale, odometer) worsen upward; depletion axes
(resin health) worsen downward.
"""
from __future__ import annotations

from dataclasses import dataclass

from config.calibration import (
    SOFTENER,
    TANK,
    TANKLESS,
    SoftenerCalibration,
    TankCalibration,
    TanklessCalibration,
)
from config.verdicts import STATUS_ORDER, ServiceStatus


@dataclass(frozen=True)
class ThresholdBand:
    variable: str
    advisory: float | None
    due: float | None
    critical: float | None
    lockout: float | None
    descending: bool = False   # lower values are worse
    strict: bool = False       # a value equal to a bound stays in the lower band


def _past(value: float, bound: float | None, band: ThresholdBand, strict: bool) -> bool:
    if bound is None:
        return False
    if band.descending:
        return value < bound if strict else value <= bound
    return value > bound if strict else value >= bound


def evaluate_current_value(value: float, band: ThresholdBand) -> ServiceStatus:
    """
    Classify a current value against a ThresholdBand.

    The lockout bound is always exclusive: the value must pass it.
    """
    if _past(value, band.lockout, band, strict=True):
        return ServiceStatus.LOCKOUT
    if _past(value, band.critical, band, band.strict):
        return ServiceStatus.CRITICAL
    if _past(value, band.due, band, band.strict):
        return ServiceStatus.DUE
    if _past(value, band.advisory, band, band.strict):
        return ServiceStatus.ADVISORY
    return ServiceStatus.OPTIMAL


def worst_status(*statuses: ServiceStatus) -> ServiceStatus:
    return max(statuses, key=lambda s: STATUS_ORDER[s])


# ── Bands per wear axis ───────────────────────────────────────────────────────

def sediment_band(cal: TankCalibration = TANK) -> ThresholdBand:
    return ThresholdBand(
        variable="sediment_lbs",
        advisory=cal.sediment_advisory,
        due=cal.sediment_flush,
        critical=cal.sediment_critical,
        lockout=cal.sediment_lockout,
    )


def scale_band(cal: TanklessCalibration = TANKLESS) -> ThresholdBand:
    return ThresholdBand(
        variable="scale_buildup",
        advisory=None,
        due=cal.scale_due,
        critical=cal.scale_critical,
        lockout=cal.scale_lockout,
        strict=True,
    )


def resin_band(cal: SoftenerCalibration = SOFTENER) -> ThresholdBand:
    return ThresholdBand(
        variable="resin_health",
        advisory=None,
        due=cal.resin_degraded_pct,
        critical=cal.resin_rebed_pct,
        lockout=cal.resin_failure_pct,
        descending=True,
        strict=True,
    )


def odometer_band(cal: SoftenerCalibration = SOFTENER) -> ThresholdBand:
    return ThresholdBand(
        variable="odometer",
        advisory=None,
        due=cal.seal_limit,
        critical=None,
        lockout=cal.motor_limit,
        strict=True,
    )
