"""
src/engine/softener.py
──────────────────────
Ion-exchange water softener engine.

Softeners wear like cars, not like tanks. Three independent clocks:
  A  odometer — regeneration cycles wear the valve seals and motor
  B  resin    — chlorine (city) or iron (well) decays the resin bed
  C  salt     — brine consumption, a running cost rather than a wear axis

The aggregate aging-rate is the dominant clock relative to a reference
household; the verdict ladder checks resin before mechanics because a dead
bed makes valve work pointless.
"""
from __future__ import annotations

from datetime import date

from config.calibration import SOFTENER, SoftenerCalibration
from config.verdicts import SOFTENER_ACTION_CATEGORY, SoftenerAction, SoftenerBadge
from src.analytics.aging import (
    apply_breach,
    dominant_stressor,
    failure_probability,
    health_score,
    is_breach,
    location_risk,
)
from src.analytics.forecast import project_future_health, salt_schedule, softener_forecast, softener_lifespan
from src.data.degradation import (
    odometer,
    regeneration_cycle,
    resin_decay_rate,
    resin_health,
    salt_usage_lbs_per_month,
)
from src.data.models import (
    DegradationMetrics,
    EquipmentProfile,
    SaltSchedule,
    ServiceMenuItem,
    StressFactors,
    Verdict,
    WaterSource,
)
from src.engine.base import EquipmentEngine
from src.engine.ladder import LadderContext, Outcome, Rule, RuleLadder, always
from src.engine.service_menu import softener_menu


# ── Metrics ───────────────────────────────────────────────────────────────────

def measure_softener(profile: EquipmentProfile, cal: SoftenerCalibration = SOFTENER) -> DegradationMetrics:
    age = profile.age_years
    cycle = regeneration_cycle(profile.people_count, profile.hardness_gpg, profile.softener_capacity_grains, cal)
    reading = float(round(odometer(age, cycle.regens_per_year)))
    decay = resin_decay_rate(profile.water_source, profile.has_carbon_filter, cal)
    resin = resin_health(age, decay)

    reference = regeneration_cycle(
        cal.reference_people, cal.reference_hardness_gpg, cal.reference_capacity_grains, cal
    )
    mechanical = max(1.0, cycle.regens_per_year / reference.regens_per_year)
    chemical = decay / cal.city_carbon_decay
    aging_rate, primary = dominant_stressor({"mechanical": mechanical, "chemical": chemical}, cap=cal.max_stress)

    bio_age = min(age * aging_rate, cal.max_bio_age)
    breach = is_breach(profile)
    probability = apply_breach(
        failure_probability(bio_age, cal.typical_lifespan, cal.curve), breach, cal.curve
    )

    forecast = softener_forecast(resin, decay, reading, cycle.regens_per_year, cal)
    life = softener_lifespan(age, decay, reading, cycle.regens_per_year, cal)
    optimized = life
    if profile.water_source == WaterSource.CITY and not profile.has_carbon_filter:
        optimized = softener_lifespan(age, cal.city_carbon_decay, reading, cycle.regens_per_year, cal)
    years_left = 0.0 if breach else life.remaining_years
    years_left_optimized = 0.0 if breach else max(optimized.remaining_years, years_left)
    next_year = (
        health_score(probability) if breach
        else project_future_health(bio_age, aging_rate, 12, cal.typical_lifespan, cal.curve)
    )

    return DegradationMetrics(
        bio_age=round(bio_age, 2),
        aging_rate=round(aging_rate, 3),
        failure_probability=round(probability, 1),
        health_score=round(health_score(probability), 1),
        health_next_year=round(next_year, 1),
        typical_lifespan=cal.typical_lifespan,
        breach=breach,
        risk_level=location_risk(profile.location, profile.is_finished_area),
        primary_stressor=primary,
        stress_factors=StressFactors(total=aging_rate, mechanical=mechanical, chemical=chemical),
        service_status=forecast.status,
        months_to_service=forecast.months_to_service,
        months_to_lockout=forecast.months_to_lockout,
        years_left_current=round(years_left, 1),
        years_left_optimized=round(years_left_optimized, 1),
        life_extension=round(years_left_optimized - years_left, 1),
        odometer=reading,
        regens_per_year=round(cycle.regens_per_year, 2),
        regen_interval_days=round(cycle.days_per_cycle, 1),
        daily_load_grains=round(cycle.daily_load),
        resin_health=resin,
        salt_lbs_per_month=round(salt_usage_lbs_per_month(cycle.days_per_cycle, cal), 1),
    )


# ── Verdict ladder ────────────────────────────────────────────────────────────

def _outcome(action: SoftenerAction, badge: SoftenerBadge, title: str, reason: str, urgent: bool = False) -> Outcome:
    return Outcome(
        action=action.value,
        category=SOFTENER_ACTION_CATEGORY[action],
        badge=badge.value,
        title=title,
        reason=reason,
        urgent=urgent,
    )


def _resin(ctx: LadderContext) -> float:
    return ctx.metrics.resin_health if ctx.metrics.resin_health is not None else 100.0


def _odometer(ctx: LadderContext) -> float:
    return ctx.metrics.odometer or 0.0


def _breach(ctx: LadderContext) -> Outcome:
    return _outcome(
        SoftenerAction.REPLACE_UNIT, SoftenerBadge.CRITICAL, "Containment Breach",
        f"Visible corrosion or an active leak at the softener. Failure probability forced to "
        f"{ctx.metrics.failure_probability:.1f}%.",
        urgent=True,
    )


def _resin_failure(ctx: LadderContext) -> Outcome:
    resin = _resin(ctx)
    if ctx.profile.water_source == WaterSource.CITY and not ctx.profile.has_carbon_filter:
        reason = (
            f"Resin health is {resin:.0f}%. Chlorine oxidation with no carbon pre-filter has "
            f"destroyed the resin beads. Capacity lost."
        )
    else:
        reason = f"Resin health is {resin:.0f}%. Resin bed life exceeded; salt is being wasted."
    return _outcome(SoftenerAction.REBED_OR_REPLACE, SoftenerBadge.RESIN_FAILURE, "Resin Failure", reason)


def _mechanical_failure(ctx: LadderContext) -> Outcome:
    return _outcome(
        SoftenerAction.REPLACE_UNIT, SoftenerBadge.MECHANICAL_FAILURE, "Mechanical Failure",
        f"Odometer reads {_odometer(ctx):.0f} cycles (motor limit {ctx.cal.motor_limit:.0f}). "
        f"Valve motor and body wear exceed cost-to-repair.",
    )


def _seal_wear(ctx: LadderContext) -> Outcome:
    return _outcome(
        SoftenerAction.VALVE_REBUILD, SoftenerBadge.SEAL_WEAR, "Seal Wear",
        f"Odometer reads {_odometer(ctx):.0f} cycles. Piston seals likely leaking.",
    )


def _resin_degraded(ctx: LadderContext) -> Outcome:
    return _outcome(
        SoftenerAction.RESIN_DETOX, SoftenerBadge.RESIN_DEGRADED, "Resin Degraded",
        f"Resin health is {_resin(ctx):.0f}%. Beads are coated in mineral buildup; "
        f"a chemical detox can restore flow.",
    )


def _high_waste(ctx: LadderContext) -> Outcome:
    return _outcome(
        SoftenerAction.UPGRADE_EFFICIENCY, SoftenerBadge.HIGH_WASTE, "High Waste",
        f"Unit regenerating every {ctx.metrics.regen_interval_days:.1f} days. Wasting water and salt.",
    )


def _healthy(ctx: LadderContext) -> Outcome:
    return _outcome(
        SoftenerAction.MONITOR, SoftenerBadge.HEALTHY, "System Healthy",
        f"System cycling normally: {_odometer(ctx):.0f} cycles, resin health {_resin(ctx):.0f}%.",
    )


SOFTENER_LADDER: RuleLadder[LadderContext] = RuleLadder("softener", [
    Rule("containment_breach", lambda c: c.metrics.breach, _breach),
    Rule("resin_failure", lambda c: _resin(c) < c.cal.resin_failure_pct, _resin_failure),
    Rule("mechanical_failure", lambda c: _odometer(c) > c.cal.motor_limit, _mechanical_failure),
    Rule("seal_wear", lambda c: _odometer(c) > c.cal.seal_limit, _seal_wear),
    Rule(
        "resin_degraded",
        lambda c: c.cal.resin_failure_pct <= _resin(c) < c.cal.resin_degraded_pct,
        _resin_degraded,
    ),
    Rule(
        "high_waste",
        lambda c: (c.metrics.regen_interval_days or 0.0) < c.cal.min_regen_interval_days,
        _high_waste,
    ),
    Rule("healthy", always, _healthy),
])


# ── Engine ────────────────────────────────────────────────────────────────────

class SoftenerEngine(EquipmentEngine):
    ladder = SOFTENER_LADDER

    def __init__(self, cal: SoftenerCalibration = SOFTENER):
        self.cal = cal

    def measure(self, profile: EquipmentProfile) -> DegradationMetrics:
        return measure_softener(profile, self.cal)

    def replacement_cost(self, profile: EquipmentProfile) -> float:
        return self.cal.replacement_cost

    def horizon_years(self, profile: EquipmentProfile, metrics: DegradationMetrics) -> float:
        return metrics.years_left_current

    def service_items(
        self,
        profile: EquipmentProfile,
        metrics: DegradationMetrics,
        verdict: Verdict,
    ) -> list[ServiceMenuItem]:
        return softener_menu(profile, metrics, verdict, cal=self.cal)

    def salt_schedule(self, metrics: DegradationMetrics, as_of: date) -> SaltSchedule | None:
        return salt_schedule(metrics.salt_lbs_per_month or 0.0, as_of, self.cal)
