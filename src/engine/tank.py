"""
src/engine/tank.py
──────────────────
Storage-tank water heater engine (gas and electric).

Stress is split in two:
  fatigue   — pressure × thermal cycling; the anode cannot prevent it
  corrosion — temperature × recirculation × expansion × sediment; the anode
              suppresses it until the rod is spent

Verdict tiers, highest first:
  1. safety and physical lockout      (must replace)
  2. economic replacement              (risk exceeds value)
  3. service zone                      (repairs, upgrades)
  4. maintenance zone                  (flush, anode)
  5. pass
"""
from __future__ import annotations

from config.calibration import TANK, TankCalibration
from config.equipment import tier_for_warranty
from config.verdicts import ActionCategory, BadgeColor, HeaterBadge
from src.analytics.aging import (
    apply_breach,
    bio_age_at_probability,
    combine_stressors,
    failure_probability,
    health_score,
    is_breach,
    location_risk,
    tank_biological_age,
)
from src.analytics.forecast import flush_forecast, project_future_health, project_life
from src.data.degradation import (
    anode_shield,
    daily_hot_water_demand,
    resolve_hardness,
    sediment_lbs,
    sediment_rate,
    thermal_cycles,
)
from src.data.models import (
    DegradationMetrics,
    EquipmentProfile,
    ExpansionTankStatus,
    LeakSource,
    ServiceMenuItem,
    StressFactors,
    Verdict,
)
from src.data.stress import (
    circulation_stress,
    expansion_tank_status,
    is_closed_system,
    is_transient_pressure,
    loop_stress,
    pressure_stress,
    prv_failed,
    sediment_stress,
    temperature_stress,
    usage_stress,
)
from src.engine.base import EquipmentEngine
from src.engine.ladder import LadderContext, Outcome, Rule, RuleLadder, always
from src.engine.service_menu import infrastructure_issues, tank_maintenance


# ── Metrics ───────────────────────────────────────────────────────────────────

def measure_tank(profile: EquipmentProfile, cal: TankCalibration = TANK) -> DegradationMetrics:
    """Every tank clock, the two-phase biological age and the flush forecast."""
    age = profile.age_years
    hardness = resolve_hardness(profile, cal)
    demand = daily_hot_water_demand(profile, cal)
    cycles_per_day, cycles = thermal_cycles(age, demand, profile.tank_capacity_gal)
    shield = anode_shield(profile, cal)

    rate = sediment_rate(profile.variant, hardness.effective, demand, cal)
    lbs = sediment_lbs(age, rate, profile.last_flush_years_ago, cal)

    stressors = {
        "pressure": pressure_stress(profile.house_psi, cal),
        "temp": temperature_stress(profile.temp_setting, cal),
        "sediment": sediment_stress(lbs, cal),
        "loop": loop_stress(profile, cal),
        "circ": circulation_stress(profile, cal),
        "usage": usage_stress(cycles_per_day, cal),
    }
    total, primary = combine_stressors(stressors, cal.max_stress)
    mechanical = stressors["pressure"] * stressors["usage"]
    corrosion = stressors["temp"] * stressors["circ"] * stressors["loop"] * stressors["sediment"]

    anode_age = age
    if profile.last_anode_replace_years_ago is not None:
        anode_age = min(age, profile.last_anode_replace_years_ago)
    aging = tank_biological_age(age, anode_age, shield.duration, mechanical, corrosion, cal)

    # With pressure regulated and expansion absorbed
    optimized = tank_biological_age(
        age, anode_age, shield.duration, stressors["usage"], corrosion / stressors["loop"], cal
    )

    lifespan = tier_for_warranty(profile.warranty_years).expected_life
    breach = is_breach(profile)
    probability = apply_breach(failure_probability(aging.bio_age, lifespan, cal.curve), breach, cal.curve)

    end_of_life = bio_age_at_probability(cal.end_of_life_probability, lifespan, cal.curve)
    life = project_life(aging.bio_age, end_of_life, aging.current_rate, optimized.current_rate)
    years_left = 0.0 if breach else life.years_left_current
    years_left_optimized = 0.0 if breach else life.years_left_optimized
    next_year = (
        health_score(probability) if breach
        else project_future_health(aging.bio_age, aging.current_rate, 12, lifespan, cal.curve)
    )

    forecast = flush_forecast(lbs, rate, cal)

    return DegradationMetrics(
        bio_age=round(aging.bio_age, 2),
        aging_rate=round(aging.aging_rate, 3),
        failure_probability=round(probability, 1),
        health_score=round(health_score(probability), 1),
        health_next_year=round(next_year, 1),
        typical_lifespan=lifespan,
        breach=breach,
        risk_level=location_risk(profile.location, profile.is_finished_area),
        primary_stressor=primary,
        stress_factors=StressFactors(total=total, mechanical=mechanical, chemical=corrosion, **stressors),
        service_status=forecast.status,
        months_to_service=forecast.months_to_service,
        months_to_lockout=forecast.months_to_lockout,
        years_left_current=round(years_left, 1),
        years_left_optimized=round(years_left_optimized, 1),
        life_extension=round(years_left_optimized - years_left, 1),
        sediment_lbs=round(lbs, 2),
        sediment_rate=round(rate, 3),
        shield_life=round(shield.shield_life, 2),
        anode_depletion_percent=round(shield.depletion_percent, 1),
        anode_status=shield.status,
        anode_burn_rate=round(shield.burn.rate, 3),
        effective_psi=profile.house_psi,
        is_transient_pressure=is_transient_pressure(profile),
        prv_failed=prv_failed(profile, cal),
        thermal_cycles=round(cycles),
    )


# ── Verdict ladder ────────────────────────────────────────────────────────────

def _heater(
    category: ActionCategory,
    badge: HeaterBadge,
    title: str,
    reason: str,
    urgent: bool = False,
    color: BadgeColor | None = None,
    note: str | None = None,
) -> Outcome:
    return Outcome(
        action=category.value,
        category=category,
        badge=badge.value,
        title=title,
        reason=reason,
        urgent=urgent,
        color=color,
        note=note,
    )


def _lbs(ctx: LadderContext) -> float:
    return ctx.metrics.sediment_lbs or 0.0


def _psi(ctx: LadderContext) -> float:
    return ctx.profile.house_psi


def breach_outcome(ctx: LadderContext) -> Outcome:
    evidence = []
    if ctx.profile.visual_rust:
        evidence.append("visible rust")
    if ctx.profile.is_leaking:
        source = ctx.profile.leak_source or LeakSource.TANK_BODY
        evidence.append(f"active leak ({source.value.lower().replace('_', ' ')})")
    return _heater(
        ActionCategory.REPLACE, HeaterBadge.CRITICAL, "Containment Breach",
        f"Visual evidence of failure: {', '.join(evidence)}. Failure probability forced to "
        f"{ctx.metrics.failure_probability:.1f}%.",
        urgent=True,
    )


def _sediment_lockout(ctx: LadderContext) -> Outcome:
    return _heater(
        ActionCategory.REPLACE, HeaterBadge.REPLACE, "Sediment Lockout",
        f"Extreme buildup ({_lbs(ctx):.1f} lbs) detected. Flushing is no longer possible without "
        f"risking drain valve failure.",
    )


def _vessel_fatigue(ctx: LadderContext) -> Outcome:
    return _heater(
        ActionCategory.REPLACE, HeaterBadge.CRITICAL, "Vessel Fatigue",
        f"{ctx.profile.age_years:.0f} years at {_psi(ctx):.0f} PSI (critical > {ctx.cal.psi_critical:.0f}) "
        f"has compromised the steel tank structure.",
        urgent=True,
    )


def _statistical_eol(ctx: LadderContext) -> Outcome:
    return _heater(
        ActionCategory.REPLACE, HeaterBadge.REPLACE, "Statistical End-of-Life",
        f"Failure probability is {ctx.metrics.failure_probability:.0f}%. Repair costs are not justifiable.",
    )


def _liability(ctx: LadderContext) -> Outcome:
    return _heater(
        ActionCategory.REPLACE, HeaterBadge.REPLACE, "Liability Hazard",
        f"Unit is in a high-damage zone (risk level {ctx.metrics.risk_level}). Failure risk "
        f"({ctx.metrics.failure_probability:.0f}%) exceeds the {ctx.cal.liability_probability:.0f}% "
        f"threshold for finished areas.",
        color=BadgeColor.ORANGE,
    )


def _failed_prv(ctx: LadderContext) -> Outcome:
    return _heater(
        ActionCategory.REPAIR, HeaterBadge.SERVICE, "Failed PRV Detected",
        f"System pressure is {_psi(ctx):.0f} PSI despite having a PRV. The valve has failed and "
        f"needs replacement.",
        urgent=True,
    )


def _failed_expansion(ctx: LadderContext) -> Outcome:
    return _heater(
        ActionCategory.REPAIR, HeaterBadge.SERVICE, "Expansion Tank Failure",
        f"Expansion tank is waterlogged on a closed system; thermal expansion adds "
        f"{(ctx.cal.loop_penalty - 1) * 100:.0f}% corrosion stress. Bladder likely ruptured.",
        urgent=True,
    )


def _missing_expansion(ctx: LadderContext) -> Outcome:
    return _heater(
        ActionCategory.UPGRADE, HeaterBadge.SERVICE, "Missing Thermal Expansion",
        "Closed-loop system detected without an expansion tank. This voids manufacturer warranty "
        f"and adds {(ctx.cal.loop_penalty - 1) * 100:.0f}% corrosion stress.",
        urgent=True,
    )


def _critical_pressure(ctx: LadderContext) -> Outcome:
    return _heater(
        ActionCategory.UPGRADE, HeaterBadge.SERVICE, "Critical Pressure Violation",
        f"Water pressure is {_psi(ctx):.0f} PSI (Code Max: {ctx.cal.psi_safe:.0f}). Install PRV and "
        f"Expansion Tank immediately.",
        urgent=True,
    )


def _accelerated_aging(ctx: LadderContext) -> Outcome:
    m = ctx.metrics
    return _heater(
        ActionCategory.MAINTAIN, HeaterBadge.SERVICE, "Accelerated Aging",
        f"Unit is aging {m.aging_rate:.1f}x faster than normal. Primary stressor: {m.primary_stressor}.",
        note=f"Correcting the stressor adds about {m.life_extension:.1f} years of life.",
    )


def _pressure_optimization(ctx: LadderContext) -> Outcome:
    improvement = round((ctx.metrics.stress_factors.pressure - 1) * 100)
    return _heater(
        ActionCategory.UPGRADE, HeaterBadge.SERVICE, "Pressure Optimization",
        f"Pressure is {_psi(ctx):.0f} PSI. Installing a PRV will reduce tank stress by ~{improvement}% "
        f"and extend life.",
        color=BadgeColor.YELLOW,
        note=f"Adds about {ctx.metrics.life_extension:.1f} years of life.",
    )


def _drain_pan(ctx: LadderContext) -> Outcome:
    return _heater(
        ActionCategory.UPGRADE, HeaterBadge.SERVICE, "Drain Pan Required",
        f"Unit sits in the {ctx.profile.location.value.lower().replace('_', ' ')} (risk level "
        f"{ctx.metrics.risk_level}) with no drain pan. A tank failure here floods living space.",
        color=BadgeColor.YELLOW,
    )


def _maintenance_risk(ctx: LadderContext) -> Outcome:
    return _heater(
        ActionCategory.PASS, HeaterBadge.MONITOR, "Maintenance Risk",
        f"Sediment present ({_lbs(ctx):.1f} lbs), but unit age ({ctx.profile.age_years:.0f} yrs) "
        f"makes flushing risky. Disturbance may cause leaks.",
    )


def _performance_flush(ctx: LadderContext) -> Outcome:
    return _heater(
        ActionCategory.MAINTAIN, HeaterBadge.SERVICE, "Performance Flush",
        f"Estimated {_lbs(ctx):.1f} lbs of sediment. Flushing now will restore efficiency and "
        f"prevent element burnout.",
        color=BadgeColor.GREEN,
    )


def _anode_refresh(ctx: LadderContext) -> Outcome:
    return _heater(
        ActionCategory.MAINTAIN, HeaterBadge.MONITOR, "Anode Refresh",
        f"Cathodic protection {ctx.metrics.anode_depletion_percent:.0f}% depleted "
        f"({ctx.metrics.shield_life:.1f} years left). Replace anode to extend warranty life.",
        color=BadgeColor.GREEN,
    )


def _monitor(ctx: LadderContext) -> Outcome:
    return _heater(
        ActionCategory.PASS, HeaterBadge.MONITOR, "Monitor",
        f"Failure probability is {ctx.metrics.failure_probability:.0f}% at "
        f"{ctx.profile.age_years:.0f} years. About {ctx.metrics.years_left_current:.1f} years of "
        f"service remain; plan for replacement.",
    )


def _optimal(ctx: LadderContext) -> Outcome:
    return _heater(
        ActionCategory.PASS, HeaterBadge.OPTIMAL, "System Healthy",
        f"Unit is operating within safe parameters (failure probability "
        f"{ctx.metrics.failure_probability:.0f}%).",
    )


# ── Predicates ────────────────────────────────────────────────────────────────

def _is_fragile(ctx: LadderContext) -> bool:
    return (
        ctx.metrics.failure_probability > ctx.cal.fragile_probability
        or ctx.profile.age_years > ctx.cal.fragile_age
    )


def _is_serviceable(ctx: LadderContext) -> bool:
    return ctx.cal.sediment_flush <= _lbs(ctx) <= ctx.cal.sediment_lockout


def _expansion_is(ctx: LadderContext, status: ExpansionTankStatus) -> bool:
    return is_closed_system(ctx.profile) and expansion_tank_status(ctx.profile) == status


TANK_REPLACE_RULES: list[Rule[LadderContext]] = [
    Rule("containment_breach", lambda c: c.metrics.breach, breach_outcome),
    Rule("sediment_lockout", lambda c: _lbs(c) > c.cal.sediment_lockout, _sediment_lockout),
    Rule(
        "vessel_fatigue",
        lambda c: _psi(c) > c.cal.psi_critical and c.profile.age_years > c.cal.fatigue_min_age,
        _vessel_fatigue,
    ),
    Rule(
        "statistical_end_of_life",
        lambda c: c.metrics.failure_probability > c.cal.end_of_life_probability,
        _statistical_eol,
    ),
    Rule(
        "liability_hazard",
        lambda c: c.metrics.risk_level >= c.cal.liability_risk_level
        and c.metrics.failure_probability > c.cal.liability_probability,
        _liability,
    ),
]

TANK_SERVICE_RULES: list[Rule[LadderContext]] = [
    Rule("failed_prv", lambda c: c.metrics.prv_failed, _failed_prv),
    Rule(
        "failed_expansion_tank",
        lambda c: _expansion_is(c, ExpansionTankStatus.WATERLOGGED),
        _failed_expansion,
    ),
    Rule(
        "missing_thermal_expansion",
        lambda c: _expansion_is(c, ExpansionTankStatus.MISSING),
        _missing_expansion,
    ),
    Rule("critical_pressure", lambda c: _psi(c) > c.cal.psi_safe, _critical_pressure),
    Rule(
        "accelerated_aging",
        lambda c: c.metrics.aging_rate >= c.cal.accelerated_aging_rate,
        _accelerated_aging,
    ),
    Rule(
        "pressure_optimization",
        lambda c: not c.profile.has_prv
        and c.cal.psi_optimize <= _psi(c) <= c.cal.psi_safe
        and c.profile.age_years < c.cal.optimize_max_age,
        _pressure_optimization,
    ),
    Rule(
        "drain_pan",
        lambda c: c.metrics.risk_level >= 4 and c.profile.has_drain_pan is not True,
        _drain_pan,
    ),
    Rule("maintenance_risk", lambda c: _is_fragile(c) and _is_serviceable(c), _maintenance_risk),
    Rule("performance_flush", _is_serviceable, _performance_flush),
    Rule(
        "anode_refresh",
        lambda c: (c.metrics.shield_life or 0.0) < 1.0 and c.profile.age_years < c.cal.anode_refresh_max_age,
        _anode_refresh,
    ),
    Rule(
        "monitor",
        lambda c: c.metrics.failure_probability >= c.cal.monitor_probability
        or c.profile.age_years >= c.profile.warranty_years,
        _monitor,
    ),
    Rule("optimal", always, _optimal),
]

TANK_LADDER: RuleLadder[LadderContext] = RuleLadder("tank", TANK_REPLACE_RULES + TANK_SERVICE_RULES)


# ── Engine ────────────────────────────────────────────────────────────────────

class TankEngine(EquipmentEngine):
    ladder = TANK_LADDER

    def __init__(self, cal: TankCalibration = TANK):
        self.cal = cal

    def measure(self, profile: EquipmentProfile) -> DegradationMetrics:
        return measure_tank(profile, self.cal)

    def replacement_cost(self, profile: EquipmentProfile) -> float:
        return tier_for_warranty(profile.warranty_years).replacement_cost(profile.variant)

    def horizon_years(self, profile: EquipmentProfile, metrics: DegradationMetrics) -> float:
        return metrics.years_left_current

    def service_items(
        self,
        profile: EquipmentProfile,
        metrics: DegradationMetrics,
        verdict: Verdict,
    ) -> list[ServiceMenuItem]:
        effective = resolve_hardness(profile, self.cal).effective
        return (
            infrastructure_issues(profile, effective, cal=self.cal)
            + tank_maintenance(profile, metrics, cal=self.cal)
        )
