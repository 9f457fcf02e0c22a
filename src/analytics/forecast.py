"""
src/analytics/forecast.py
──────────────────────────
Forward projections from current wear rates.

  - months until an axis reaches a service or lockout line
  - flush (tank), descale (tankless) and softener service status
  - remaining life at current and optimized aging-rates
  - salt refill schedule

All projections are linear in the current per-year rate.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta

import numpy as np

from config.calibration import SOFTENER, TANK, TANKLESS, SoftenerCalibration, TankCalibration, TanklessCalibration, WeibullCurve
from config.verdicts import ServiceStatus
from src.analytics.aging import failure_probability, health_score
from src.analytics.thresholds import (
    evaluate_current_value,
    odometer_band,
    resin_band,
    scale_band,
    sediment_band,
    worst_status,
)
from src.data.models import SaltSchedule

_NEEDS_SERVICE = (ServiceStatus.DUE, ServiceStatus.CRITICAL)


@dataclass(frozen=True)
class ServiceForecast:
    status: ServiceStatus
    months_to_service: int | None
    months_to_lockout: int | None


def months_until(current: float, limit: float, rate_per_year: float, descending: bool = False) -> int | None:
    """
    Months (rounded up) until `current` reaches `limit` at `rate_per_year`.

    Returns None when the limit is already reached or the axis is not moving.
    """
    gap = current - limit if descending else limit - current
    if gap <= 0 or rate_per_year <= 1e-6:
        return None
    return int(math.ceil(gap / rate_per_year * 12.0))


def _earliest(*months: int | None) -> int | None:
    known = [m for m in months if m is not None]
    return min(known) if known else None


# ── Tank flush ────────────────────────────────────────────────────────────────

def flush_forecast(sediment_lbs: float, rate_per_year: float, cal: TankCalibration = TANK) -> ServiceForecast:
    """
    Flush status from sediment mass.

    The next flush is never more than one annual interval away.
    """
    status = evaluate_current_value(sediment_lbs, sediment_band(cal))
    to_lockout = months_until(sediment_lbs, cal.sediment_lockout, rate_per_year)
    if status == ServiceStatus.LOCKOUT:
        return ServiceForecast(status, None, None)
    if status in _NEEDS_SERVICE:
        return ServiceForecast(status, 0, to_lockout)

    to_flush = months_until(sediment_lbs, cal.sediment_flush, rate_per_year)
    if to_flush is None:
        to_flush = cal.flush_interval_months
    return ServiceForecast(status, min(to_flush, cal.flush_interval_months), to_lockout)


# ── Tankless descale ──────────────────────────────────────────────────────────

def descale_forecast(
    scale: float,
    rate_per_year: float,
    effective_hardness: float,
    age_years: float,
    never_descaled: bool,
    has_isolation_valves: bool,
    cal: TanklessCalibration = TANKLESS,
) -> ServiceForecast:
    """
    Descale status for a tankless heat exchanger.

    Hard water that has never been descaled is judged by age alone: past the
    run-to-failure age the unit is too calcified to flush safely. A descale
    that is needed but has no isolation valves to connect the pump to is
    impossible.
    """
    hard = effective_hardness > cal.hard_water_gpg
    to_lockout = months_until(scale, cal.scale_lockout, rate_per_year)

    if hard and never_descaled and age_years > cal.run_to_failure_age:
        status = ServiceStatus.RUN_TO_FAILURE
    elif hard and never_descaled and age_years > cal.descale_due_age:
        status = ServiceStatus.DUE
    else:
        status = evaluate_current_value(scale, scale_band(cal))

    if status in _NEEDS_SERVICE and not has_isolation_valves:
        status = ServiceStatus.IMPOSSIBLE

    if status in (ServiceStatus.LOCKOUT, ServiceStatus.RUN_TO_FAILURE):
        return ServiceForecast(status, None, None)
    if status in _NEEDS_SERVICE or status == ServiceStatus.IMPOSSIBLE:
        return ServiceForecast(status, 0, to_lockout)
    return ServiceForecast(status, months_until(scale, cal.scale_due, rate_per_year), to_lockout)


# ── Softener ──────────────────────────────────────────────────────────────────

def softener_forecast(
    resin_health: float,
    resin_decay_rate: float,
    odometer: float,
    regens_per_year: float,
    cal: SoftenerCalibration = SOFTENER,
) -> ServiceForecast:
    """Service when resin or seals cross their wear lines; lockout at the failure lines."""
    status = worst_status(
        evaluate_current_value(resin_health, resin_band(cal)),
        evaluate_current_value(odometer, odometer_band(cal)),
    )
    to_lockout = _earliest(
        months_until(resin_health, cal.resin_failure_pct, resin_decay_rate, descending=True),
        months_until(odometer, cal.motor_limit, regens_per_year),
    )
    if status == ServiceStatus.LOCKOUT:
        return ServiceForecast(status, None, None)
    if status != ServiceStatus.OPTIMAL:
        return ServiceForecast(status, 0, to_lockout)
    to_service = _earliest(
        months_until(resin_health, cal.resin_degraded_pct, resin_decay_rate, descending=True),
        months_until(odometer, cal.seal_limit, regens_per_year),
    )
    return ServiceForecast(status, to_service, to_lockout)


@dataclass(frozen=True)
class SoftenerLifespan:
    resin_death_years: float
    mechanical_death_years: float
    effective_death_years: float
    remaining_years: float


def softener_lifespan(
    age_years: float,
    resin_decay_rate: float,
    odometer: float,
    regens_per_year: float,
    cal: SoftenerCalibration = SOFTENER,
) -> SoftenerLifespan:
    """Calendar age at which the first of resin or valve wears out."""
    resin_death = (100.0 - cal.resin_failure_pct) / max(resin_decay_rate, 1e-6)
    cycles_left = max(0.0, cal.motor_limit - odometer)
    mechanical_death = age_years + cycles_left / max(regens_per_year, 1e-6)
    effective = min(resin_death, mechanical_death)
    return SoftenerLifespan(resin_death, mechanical_death, effective, max(0.0, effective - age_years))


# ── Life projection ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class LifeProjection:
    years_left_current: float
    years_left_optimized: float
    life_extension: float


def project_life(
    bio_age: float,
    end_of_life_bio_age: float,
    current_rate: float,
    optimized_rate: float,
) -> LifeProjection:
    """
    Years until biological age reaches the end-of-life line.

    The optimized rate is the aging-rate with correctable stressors removed;
    the difference is the life a fix buys.
    """
    remaining = max(0.0, end_of_life_bio_age - bio_age)
    current = remaining / max(current_rate, 1e-6)
    optimized = remaining / max(min(optimized_rate, current_rate), 1e-6)
    return LifeProjection(current, optimized, max(0.0, optimized - current))


def project_future_health(
    bio_age: float,
    aging_rate: float,
    months: int,
    typical_lifespan: float,
    curve: WeibullCurve = TANK.curve,
) -> float:
    """Health score `months` from now if the aging-rate holds."""
    future_bio = bio_age + max(aging_rate, 0.0) * max(months, 0) / 12.0
    return health_score(failure_probability(future_bio, typical_lifespan, curve))


# ── Salt ──────────────────────────────────────────────────────────────────────

def salt_schedule(burn_lbs_per_month: float, as_of: date, cal: SoftenerCalibration = SOFTENER) -> SaltSchedule:
    burn = max(float(np.nan_to_num(burn_lbs_per_month)), 1e-6)
    days = int(round(min(cal.brine_tank_lbs / burn * 30.0, cal.max_refill_days)))
    return SaltSchedule(
        burn_rate_lbs_per_month=round(burn, 1),
        days_until_refill=days,
        next_refill_date=as_of + timedelta(days=days),
        monthly_bags=int(math.ceil(burn / cal.salt_bag_lbs)),
    )
