"""
src/engine/tankless.py
──────────────────────
Tankless (on-demand) water heater engine, gas and electric.

No tank, no anode, no sediment bed. The dominant wear axis is scale on the
heat exchanger, which is removed by descaling through isolation valves.
Components (igniter, flame rod, elements, inlet filter, venting) are judged
from direct observation.
"""
from __future__ import annotations

from config.calibration import TANK, TANKLESS, TankCalibration, TanklessCalibration
from config.equipment import HeaterVariant, tier_for_warranty
from config.verdicts import ActionCategory, BadgeColor, HeaterBadge, ServiceStatus
from src.analytics.aging import (
    apply_breach,
    bio_age_at_probability,
    combine_stressors,
    failure_probability,
    health_score,
    is_breach,
    location_risk,
)
from src.analytics.forecast import descale_forecast, project_future_health, project_life
from src.data.degradation import (
    daily_hot_water_demand,
    flow_degradation,
    resolve_hardness,
    scale_buildup,
    scale_rate,
)
from src.data.models import (
    DegradationMetrics,
    EquipmentProfile,
    FilterStatus,
    FlameRodStatus,
    GasLineSize,
    ServiceMenuItem,
    StressFactors,
    Verdict,
    VentStatus,
)
from src.data.stress import pressure_stress, recirculation_loop_stress, scale_stress
from src.engine.base import EquipmentEngine
from src.engine.ladder import LadderContext, Outcome, Rule, RuleLadder, always
from src.engine.service_menu import infrastructure_issues, tankless_maintenance
from src.engine.tank import breach_outcome


# ── Metrics ───────────────────────────────────────────────────────────────────

def measure_tankless(
    profile: EquipmentProfile,
    cal: TanklessCalibration = TANKLESS,
    tank_cal: TankCalibration = TANK,
) -> DegradationMetrics:
    age = profile.age_years
    hardness = resolve_hardness(profile, tank_cal)
    never_descaled = profile.last_descale_years_ago is None
    since_descale = age if never_descaled else min(age, profile.last_descale_years_ago)

    rate = scale_rate(hardness.effective, cal)
    scale = scale_buildup(hardness.effective, since_descale, cal)
    flow_loss = flow_degradation(profile.flow_rate_gpm, profile.rated_flow_gpm)

    demand = daily_hot_water_demand(profile, tank_cal)
    stressors = {
        "pressure": pressure_stress(profile.house_psi, tank_cal),
        "scale": scale_stress(scale, cal),
        "recirc": recirculation_loop_stress(profile, cal),
        "usage": max(1.0, demand / tank_cal.reference_daily_demand),
    }
    aging_rate, primary = combine_stressors(stressors, cal.max_stress)
    bio_age = min(age * aging_rate, cal.max_bio_age)

    lifespan = tier_for_warranty(profile.warranty_years, tankless=True).expected_life
    breach = is_breach(profile)
    probability = apply_breach(failure_probability(bio_age, lifespan, cal.curve), breach, cal.curve)

    # Descaled and regulated
    optimized_rate = stressors["recirc"] * stressors["usage"]
    end_of_life = bio_age_at_probability(cal.end_of_life_probability, lifespan, cal.curve)
    life = project_life(bio_age, end_of_life, aging_rate, optimized_rate)
    years_left = 0.0 if breach else life.years_left_current
    years_left_optimized = 0.0 if breach else life.years_left_optimized
    next_year = (
        health_score(probability) if breach
        else project_future_health(bio_age, aging_rate, 12, lifespan, cal.curve)
    )

    forecast = descale_forecast(
        scale, rate, hardness.effective, age, never_descaled, profile.has_isolation_valves, cal
    )

    return DegradationMetrics(
        bio_age=round(bio_age, 2),
        aging_rate=round(aging_rate, 3),
        failure_probability=round(probability, 1),
        health_score=round(health_score(probability), 1),
        health_next_year=round(next_year, 1),
        typical_lifespan=lifespan,
        breach=breach,
        risk_level=location_risk(profile.location, profile.is_finished_area),
        primary_stressor=primary,
        stress_factors=StressFactors(
            total=aging_rate,
            mechanical=stressors["pressure"] * stressors["usage"],
            pressure=stressors["pressure"],
            scale=stressors["scale"],
            circ=stressors["recirc"],
            usage=stressors["usage"],
        ),
        service_status=forecast.status,
        months_to_service=forecast.months_to_service,
        months_to_lockout=forecast.months_to_lockout,
        years_left_current=round(years_left, 1),
        years_left_optimized=round(years_left_optimized, 1),
        life_extension=round(years_left_optimized - years_left, 1),
        effective_psi=profile.house_psi,
        scale_buildup=round(scale, 1),
        flow_degradation=None if flow_loss is None else round(flow_loss, 1),
    )


# ── Verdict ladder ────────────────────────────────────────────────────────────

def _tankless(
    category: ActionCategory,
    badge: HeaterBadge,
    title: str,
    reason: str,
    urgent: bool = False,
    color: BadgeColor | None = None,
) -> Outcome:
    return Outcome(
        action=category.value,
        category=category,
        badge=badge.value,
        title=title,
        reason=reason,
        urgent=urgent,
        color=color,
    )


def _scale(ctx: LadderContext) -> float:
    return ctx.metrics.scale_buildup or 0.0


def _is_gas(ctx: LadderContext) -> bool:
    return ctx.profile.variant == HeaterVariant.TANKLESS_GAS.value


def _vent_obstruction(ctx: LadderContext) -> Outcome:
    return _tankless(
        ActionCategory.REPAIR, HeaterBadge.CRITICAL, "Vent Obstruction",
        "Exhaust vent is blocked. Combustion gases cannot clear the unit; shut down until the vent is cleared.",
        urgent=True,
    )


def _chronic_errors(ctx: LadderContext) -> Outcome:
    return _tankless(
        ActionCategory.REPLACE, HeaterBadge.CRITICAL, "Chronic System Errors",
        f"Unit is displaying {ctx.profile.error_code_count} error codes. System reliability is compromised.",
        urgent=True,
    )


def _error_codes(ctx: LadderContext) -> Outcome:
    return _tankless(
        ActionCategory.REPAIR, HeaterBadge.SERVICE, "System Error Codes",
        f"Unit is displaying {ctx.profile.error_code_count} error codes. Diagnostics required.",
        urgent=True,
    )


def _end_of_service(ctx: LadderContext) -> Outcome:
    return _tankless(
        ActionCategory.REPLACE, HeaterBadge.REPLACE, "End of Service Life",
        f"Unit is {ctx.profile.age_years:.0f} years old and has exceeded statistical life expectancy "
        f"({ctx.cal.max_service_age:.0f} years).",
        color=BadgeColor.ORANGE,
    )


def _statistical_eol(ctx: LadderContext) -> Outcome:
    return _tankless(
        ActionCategory.REPLACE, HeaterBadge.REPLACE, "Statistical End-of-Life",
        f"Failure probability is {ctx.metrics.failure_probability:.0f}%. Repair costs are not justifiable.",
        color=BadgeColor.ORANGE,
    )


def _run_to_failure(ctx: LadderContext) -> Outcome:
    return _tankless(
        ActionCategory.PASS, HeaterBadge.MONITOR, "Run to Failure",
        f"{ctx.profile.age_years:.0f} years of hard water without a descale. Unit is functioning but too "
        f"calcified to safely flush. Monitor for leaks.",
        color=BadgeColor.ORANGE,
    )


def _scale_lockout(ctx: LadderContext) -> Outcome:
    return _tankless(
        ActionCategory.REPLACE, HeaterBadge.REPLACE, "Scale Lockout",
        f"Scale score {_scale(ctx):.0f} exceeds the serviceable limit ({ctx.cal.scale_lockout:.0f}). "
        f"Descaling risks revealing pinhole leaks.",
        color=BadgeColor.ORANGE,
    )


def _descale_impossible(ctx: LadderContext) -> Outcome:
    return _tankless(
        ActionCategory.UPGRADE, HeaterBadge.SERVICE, "Descale Blocked",
        f"Scale score {_scale(ctx):.0f} needs a descale, but the unit has no isolation valves to "
        f"connect the pump. Install valves, then descale.",
    )


def _descale_critical(ctx: LadderContext) -> Outcome:
    return _tankless(
        ActionCategory.MAINTAIN, HeaterBadge.SERVICE, "Descale Critical",
        f"Heavy scale accumulation (score {_scale(ctx):.0f}). Immediate descaling recommended.",
        urgent=True,
    )


def _descale_due(ctx: LadderContext) -> Outcome:
    return _tankless(
        ActionCategory.MAINTAIN, HeaterBadge.SERVICE, "Descale Required",
        f"Scale score {_scale(ctx):.0f} after {ctx.profile.age_years:.0f} years of hard water exposure "
        f"without recent maintenance.",
        color=BadgeColor.YELLOW,
    )


def _gas_starvation(ctx: LadderContext) -> Outcome:
    return _tankless(
        ActionCategory.UPGRADE, HeaterBadge.CRITICAL, "Gas Supply Starvation",
        f'1/2" gas line cannot feed {ctx.profile.btu_rating:,.0f} BTU. System is running lean.',
        urgent=True,
    )


def _component_failing(ctx: LadderContext) -> Outcome:
    p = ctx.profile
    if _is_gas(ctx):
        detail = (
            f"igniter health {p.igniter_health:.0f}%" if p.igniter_health is not None
            else "igniter health unknown"
        )
        if p.flame_rod_status is not None:
            detail += f", flame rod {p.flame_rod_status.value.lower()}"
        title = "Ignition Failing"
    else:
        detail = f"heating element health {p.element_health:.0f}%"
        title = "Element Failing"
    return _tankless(
        ActionCategory.REPAIR, HeaterBadge.SERVICE, title,
        f"Components near end of life ({detail}). Expect no-heat calls until repaired.",
    )


def _flow_restriction(ctx: LadderContext) -> Outcome:
    m, p = ctx.metrics, ctx.profile
    if m.flow_degradation is not None and m.flow_degradation >= ctx.cal.flow_restriction_pct:
        evidence = f"Flow is {m.flow_degradation:.0f}% below rated"
    else:
        evidence = "Inlet filter is clogged"
    return _tankless(
        ActionCategory.MAINTAIN, HeaterBadge.SERVICE, "Flow Restriction",
        f"{evidence}. Clean the inlet screen and check for scale restriction.",
        color=BadgeColor.YELLOW,
    )


def _isolation_valves(ctx: LadderContext) -> Outcome:
    return _tankless(
        ActionCategory.UPGRADE, HeaterBadge.SERVICE, "Install Isolation Valves",
        f"Unit is {ctx.profile.age_years:.0f} years old and cannot be descaled without isolation valves. "
        f"Install to enable maintenance.",
        color=BadgeColor.YELLOW,
    )


def _monitor(ctx: LadderContext) -> Outcome:
    return _tankless(
        ActionCategory.PASS, HeaterBadge.MONITOR, "Monitor",
        f"Failure probability is {ctx.metrics.failure_probability:.0f}%. About "
        f"{ctx.metrics.years_left_current:.1f} years of service remain.",
    )


def _optimal(ctx: LadderContext) -> Outcome:
    return _tankless(
        ActionCategory.PASS, HeaterBadge.OPTIMAL, "System Healthy",
        f"No critical issues or maintenance needs detected (scale score {_scale(ctx):.0f}).",
    )


def _component_failing_when(ctx: LadderContext) -> bool:
    p = ctx.profile
    if _is_gas(ctx):
        return (
            (p.igniter_health is not None and p.igniter_health < ctx.cal.igniter_limit)
            or p.flame_rod_status == FlameRodStatus.FAILING
        )
    return p.element_health is not None and p.element_health < ctx.cal.element_limit


def _flow_restricted(ctx: LadderContext) -> bool:
    loss = ctx.metrics.flow_degradation
    return (
        (loss is not None and loss >= ctx.cal.flow_restriction_pct)
        or ctx.profile.inlet_filter_status == FilterStatus.CLOGGED
    )


def _status(status: ServiceStatus):
    return lambda c: c.metrics.service_status == status


TANKLESS_LADDER: RuleLadder[LadderContext] = RuleLadder("tankless", [
    Rule("vent_obstruction", lambda c: c.profile.vent_status == VentStatus.BLOCKED, _vent_obstruction),
    Rule("heat_exchanger_breach", lambda c: c.metrics.breach, breach_outcome),
    Rule(
        "chronic_errors",
        lambda c: c.profile.error_code_count > c.cal.chronic_error_count,
        _chronic_errors,
    ),
    Rule("error_codes", lambda c: c.profile.error_code_count > 0, _error_codes),
    Rule("end_of_service_life", lambda c: c.profile.age_years > c.cal.max_service_age, _end_of_service),
    Rule(
        "statistical_end_of_life",
        lambda c: c.metrics.failure_probability > c.cal.end_of_life_probability,
        _statistical_eol,
    ),
    Rule("run_to_failure", _status(ServiceStatus.RUN_TO_FAILURE), _run_to_failure),
    Rule("scale_lockout", _status(ServiceStatus.LOCKOUT), _scale_lockout),
    Rule("descale_impossible", _status(ServiceStatus.IMPOSSIBLE), _descale_impossible),
    Rule("descale_critical", _status(ServiceStatus.CRITICAL), _descale_critical),
    Rule("descale_due", _status(ServiceStatus.DUE), _descale_due),
    Rule(
        "gas_starvation",
        lambda c: _is_gas(c)
        and (c.profile.btu_rating or 0.0) > c.cal.gas_starvation_btu
        and c.profile.gas_line_size == GasLineSize.HALF,
        _gas_starvation,
    ),
    Rule("component_failing", _component_failing_when, _component_failing),
    Rule("flow_restriction", _flow_restricted, _flow_restriction),
    Rule(
        "isolation_valves",
        lambda c: not c.profile.has_isolation_valves and c.profile.age_years > c.cal.isolation_valve_min_age,
        _isolation_valves,
    ),
    Rule("monitor", lambda c: c.metrics.failure_probability >= c.cal.monitor_probability, _monitor),
    Rule("optimal", always, _optimal),
])


# ── Engine ────────────────────────────────────────────────────────────────────

class TanklessEngine(EquipmentEngine):
    ladder = TANKLESS_LADDER

    def __init__(self, cal: TanklessCalibration = TANKLESS, tank_cal: TankCalibration = TANK):
        self.cal = cal
        self.tank_cal = tank_cal

    def measure(self, profile: EquipmentProfile) -> DegradationMetrics:
        return measure_tankless(profile, self.cal, self.tank_cal)

    def replacement_cost(self, profile: EquipmentProfile) -> float:
        return tier_for_warranty(profile.warranty_years, tankless=True).replacement_cost(profile.variant)

    def horizon_years(self, profile: EquipmentProfile, metrics: DegradationMetrics) -> float:
        return metrics.years_left_current

    def service_items(
        self,
        profile: EquipmentProfile,
        metrics: DegradationMetrics,
        verdict: Verdict,
    ) -> list[ServiceMenuItem]:
        effective = resolve_hardness(profile, self.tank_cal).effective
        return (
            infrastructure_issues(profile, effective, include_expansion=False, cal=self.tank_cal)
            + tankless_maintenance(profile, metrics, cal=self.cal)
        )
