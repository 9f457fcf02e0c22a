"""
src/engine/service_menu.py
──────────────────────────
Priced service line items.

Unlike the verdict ladder, every trigger is checked independently and any
number of items may fire. The final menu is de-duplicated by id and sorted
critical → recommended → optional.

Infrastructure issues protect the plumbing around the unit:
  VIOLATION       → critical      (code-required)
  INFRASTRUCTURE  → recommended   (protective)
  OPTIMIZATION    → optional      (premium)
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from config.calibration import (
    HYBRID,
    PRICES,
    SOFTENER,
    TANK,
    TANKLESS,
    HybridCalibration,
    ServicePrices,
    SoftenerCalibration,
    TankCalibration,
    TanklessCalibration,
)
from config.equipment import HeaterVariant
from config.verdicts import PRIORITY_ORDER, AnodeStatus, ServicePriority, ServiceStatus, SoftenerAction
from src.data.models import (
    DegradationMetrics,
    EquipmentProfile,
    ExpansionTankStatus,
    FilterStatus,
    FlameRodStatus,
    ServiceMenuItem,
    Verdict,
    WaterSource,
)
from src.data.stress import expansion_tank_status


class IssueCategory(str, Enum):
    VIOLATION = "VIOLATION"
    INFRASTRUCTURE = "INFRASTRUCTURE"
    OPTIMIZATION = "OPTIMIZATION"


CATEGORY_PRIORITY: dict[IssueCategory, ServicePriority] = {
    IssueCategory.VIOLATION: ServicePriority.CRITICAL,
    IssueCategory.INFRASTRUCTURE: ServicePriority.RECOMMENDED,
    IssueCategory.OPTIMIZATION: ServicePriority.OPTIONAL,
}


@dataclass(frozen=True)
class InfrastructureIssue:
    id: str
    name: str
    category: IssueCategory
    cost_min: float
    cost_max: float
    description: str

    def to_item(self, trigger: str) -> ServiceMenuItem:
        return ServiceMenuItem(
            id=self.id,
            name=self.name,
            trigger=trigger,
            price=self.cost_min,
            price_max=self.cost_max,
            pitch=self.description,
            priority=CATEGORY_PRIORITY[self.category],
        )


# ── Infrastructure catalogue ──────────────────────────────────────────────────
ISSUES: dict[str, InfrastructureIssue] = {
    issue.id: issue
    for issue in (
        InfrastructureIssue(
            "exp_tank_required", "Expansion Tank Install", IssueCategory.VIOLATION, 250, 400,
            "Required in closed loop systems to prevent thermal expansion damage.",
        ),
        InfrastructureIssue(
            "prv_failed", "PRV Replacement", IssueCategory.VIOLATION, 350, 550,
            "Existing PRV has failed; pressure exceeds safe limits.",
        ),
        InfrastructureIssue(
            "prv_critical", "PRV Installation (Critical)", IssueCategory.VIOLATION, 350, 550,
            "Water pressure exceeds safe limits; a PRV is required.",
        ),
        InfrastructureIssue(
            "prv_recommended", "PRV Installation", IssueCategory.INFRASTRUCTURE, 350, 550,
            "Pressure is technically safe but high. A PRV reduces stress on the unit.",
        ),
        InfrastructureIssue(
            "softener_service", "Water Softener Service", IssueCategory.INFRASTRUCTURE, 200, 350,
            "Softener is not working effectively. Service restores protection.",
        ),
        InfrastructureIssue(
            "exp_tank_replace", "Expansion Tank Replacement", IssueCategory.INFRASTRUCTURE, 250, 400,
            "Existing expansion tank is waterlogged and no longer absorbs expansion.",
        ),
        InfrastructureIssue(
            "softener_replace", "Water Softener Replacement", IssueCategory.OPTIMIZATION, 2_200, 3_000,
            "Softener is no longer effective. Replacement provides full protection.",
        ),
        InfrastructureIssue(
            "prv_longevity", "PRV for Extended Life", IssueCategory.OPTIMIZATION, 350, 550,
            "Proactive PRV installation reduces wear and extends unit lifespan.",
        ),
        InfrastructureIssue(
            "softener_new", "Water Softener Installation", IssueCategory.OPTIMIZATION, 2_400, 3_200,
            "Hard water detected. A softener protects the unit from scale buildup.",
        ),
    )
}


def infrastructure_issues(
    profile: EquipmentProfile,
    effective_hardness: float,
    include_expansion: bool = True,
    cal: TankCalibration = TANK,
) -> list[ServiceMenuItem]:
    """Infrastructure around a water heater that needs work, as menu items."""
    items: list[ServiceMenuItem] = []
    psi = profile.house_psi
    closed = profile.is_closed_loop or profile.has_prv or profile.has_circ_pump
    tank_state = expansion_tank_status(profile)

    if include_expansion and closed and tank_state == ExpansionTankStatus.MISSING:
        items.append(ISSUES["exp_tank_required"].to_item("Closed loop without expansion tank"))
    if profile.has_prv and psi > cal.psi_safe:
        items.append(ISSUES["prv_failed"].to_item(f"{psi:.0f} PSI with PRV installed"))
    if not profile.has_prv and psi > cal.psi_safe:
        items.append(ISSUES["prv_critical"].to_item(f"{psi:.0f} PSI > {cal.psi_safe:.0f} PSI"))
    if not profile.has_prv and cal.psi_recommend <= psi <= cal.psi_safe:
        items.append(ISSUES["prv_recommended"].to_item(f"{psi:.0f} PSI ({cal.psi_recommend:.0f}-{cal.psi_safe:.0f})"))

    if profile.has_softener and effective_hardness > cal.very_hard_water_gpg:
        items.append(ISSUES["softener_replace"].to_item(f"{effective_hardness:.1f} GPG at the heater"))
    elif profile.has_softener and effective_hardness > cal.hard_water_gpg:
        items.append(ISSUES["softener_service"].to_item(f"{effective_hardness:.1f} GPG at the heater"))

    if include_expansion and tank_state == ExpansionTankStatus.WATERLOGGED:
        items.append(ISSUES["exp_tank_replace"].to_item("Expansion tank waterlogged"))

    if not profile.has_prv and cal.design_psi <= psi < cal.psi_recommend:
        items.append(ISSUES["prv_longevity"].to_item(f"{psi:.0f} PSI ({cal.design_psi:.0f}-{cal.psi_recommend:.0f})"))
    if not profile.has_softener and effective_hardness > cal.hard_water_gpg:
        items.append(ISSUES["softener_new"].to_item(f"{effective_hardness:.1f} GPG without softener"))
    return items


# ── Maintenance items ─────────────────────────────────────────────────────────

def _item(id_: str, name: str, trigger: str, price: float, pitch: str, priority: ServicePriority) -> ServiceMenuItem:
    return ServiceMenuItem(id=id_, name=name, trigger=trigger, price=price, pitch=pitch, priority=priority)


def tank_maintenance(
    profile: EquipmentProfile,
    metrics: DegradationMetrics,
    prices: ServicePrices = PRICES,
    cal: TankCalibration = TANK,
) -> list[ServiceMenuItem]:
    items: list[ServiceMenuItem] = []
    lbs = metrics.sediment_lbs or 0.0

    if metrics.service_status in (ServiceStatus.DUE, ServiceStatus.CRITICAL):
        items.append(_item(
            "flush", "Tank Flush", f"Sediment {lbs:.1f} lbs", prices.flush,
            f"About {lbs:.1f} lbs of sediment is insulating the burner and hot-spotting the tank floor.",
            ServicePriority.CRITICAL if metrics.service_status == ServiceStatus.CRITICAL else ServicePriority.RECOMMENDED,
        ))
    elif metrics.service_status == ServiceStatus.ADVISORY:
        items.append(_item(
            "flush", "Tank Flush", f"Sediment {lbs:.1f} lbs", prices.flush,
            "An annual flush keeps sediment from hardening into a bed that cannot be removed.",
            ServicePriority.OPTIONAL,
        ))

    if profile.age_years < cal.anode_service_max_age:
        if metrics.anode_status in (AnodeStatus.REPLACE, AnodeStatus.NAKED):
            items.append(_item(
                "anode", "Anode Replacement", f"Anode {metrics.anode_depletion_percent:.0f}% depleted", prices.anode,
                "The sacrificial anode is nearly spent. Once it is gone the tank itself starts to rust.",
                ServicePriority.RECOMMENDED,
            ))
        elif metrics.anode_status == AnodeStatus.INSPECT:
            items.append(_item(
                "anode", "Anode Inspection", f"Anode {metrics.anode_depletion_percent:.0f}% depleted", prices.anode,
                "Pull and inspect the anode before protection runs out.",
                ServicePriority.OPTIONAL,
            ))

    if metrics.risk_level >= cal.liability_risk_level and profile.has_drain_pan is not True:
        items.append(_item(
            "drain_pan", "Drain Pan Install", f"{profile.location.value} install without drain pan", prices.drain_pan,
            "A drain pan piped to a drain turns a tank failure into a cleanup instead of a ceiling repair.",
            ServicePriority.RECOMMENDED if metrics.risk_level >= 4 else ServicePriority.OPTIONAL,
        ))
    return items


def hybrid_maintenance(
    profile: EquipmentProfile,
    prices: ServicePrices = PRICES,
    cal: HybridCalibration = HYBRID,
) -> list[ServiceMenuItem]:
    items: list[ServiceMenuItem] = []
    if profile.air_filter_status in (FilterStatus.DIRTY, FilterStatus.CLOGGED):
        clogged = profile.air_filter_status == FilterStatus.CLOGGED
        items.append(_item(
            "air_filter", "Air Filter Cleaning", f"Air filter {profile.air_filter_status.value.lower()}",
            prices.air_filter,
            "A dirty filter starves the heat pump of air and pushes the unit onto its resistance elements.",
            ServicePriority.CRITICAL if clogged else ServicePriority.OPTIONAL,
        ))
    if not profile.is_condensate_clear:
        items.append(_item(
            "condensate", "Condensate Line Clearing", "Condensate drain blocked", prices.condensate,
            "Backed-up condensate can reach the control board.",
            ServicePriority.CRITICAL,
        ))
    if profile.compressor_health < cal.compressor_wear_limit:
        items.append(_item(
            "compressor_service", "Compressor Diagnostic", f"Compressor health {profile.compressor_health:.0f}%",
            prices.compressor_diagnostic,
            "Compressor output is falling. A diagnostic confirms refrigerant charge and start components.",
            ServicePriority.RECOMMENDED,
        ))
    return items


def tankless_maintenance(
    profile: EquipmentProfile,
    metrics: DegradationMetrics,
    prices: ServicePrices = PRICES,
    cal: TanklessCalibration = TANKLESS,
) -> list[ServiceMenuItem]:
    items: list[ServiceMenuItem] = []
    scale = metrics.scale_buildup or 0.0
    status = metrics.service_status

    if status in (ServiceStatus.DUE, ServiceStatus.CRITICAL):
        items.append(_item(
            "descale", "Heat Exchanger Descale", f"Scale score {scale:.0f}", prices.descale,
            "Scale on the heat exchanger forces longer burns and trips overheat limits.",
            ServicePriority.CRITICAL if status == ServiceStatus.CRITICAL else ServicePriority.RECOMMENDED,
        ))

    if not profile.has_isolation_valves and profile.age_years > cal.isolation_valve_min_age:
        items.append(_item(
            "isolation_valves", "Isolation Valve Kit", "No service valves", prices.isolation_valves,
            "Without isolation valves the unit cannot be descaled.",
            ServicePriority.CRITICAL if status == ServiceStatus.IMPOSSIBLE else ServicePriority.RECOMMENDED,
        ))

    if profile.inlet_filter_status in (FilterStatus.DIRTY, FilterStatus.CLOGGED):
        clogged = profile.inlet_filter_status == FilterStatus.CLOGGED
        items.append(_item(
            "inlet_filter", "Inlet Filter Cleaning", f"Inlet filter {profile.inlet_filter_status.value.lower()}",
            prices.inlet_filter,
            "A blocked inlet screen cuts flow and causes temperature swings.",
            ServicePriority.RECOMMENDED if clogged else ServicePriority.OPTIONAL,
        ))

    if profile.variant == HeaterVariant.TANKLESS_GAS.value:
        weak_igniter = profile.igniter_health is not None and profile.igniter_health < cal.igniter_limit
        if weak_igniter or profile.flame_rod_status == FlameRodStatus.FAILING:
            items.append(_item(
                "igniter", "Ignition Service", "Igniter or flame rod failing", prices.igniter,
                "Ignition components are near the end of their life and cause no-heat calls.",
                ServicePriority.RECOMMENDED,
            ))
        elif profile.flame_rod_status == FlameRodStatus.WORN:
            items.append(_item(
                "igniter", "Ignition Service", "Flame rod worn", prices.igniter,
                "Clean or replace the flame rod before it causes intermittent lockouts.",
                ServicePriority.OPTIONAL,
            ))
    return items


# ── Softener ──────────────────────────────────────────────────────────────────

def softener_menu(
    profile: EquipmentProfile,
    metrics: DegradationMetrics,
    verdict: Verdict,
    prices: ServicePrices = PRICES,
    cal: SoftenerCalibration = SOFTENER,
) -> list[ServiceMenuItem]:
    """Softener line items; the item matching the verdict is promoted to critical."""
    items: list[ServiceMenuItem] = []
    odometer = metrics.odometer or 0.0
    resin = metrics.resin_health if metrics.resin_health is not None else 100.0

    def _promoted(action: SoftenerAction) -> ServicePriority:
        return ServicePriority.CRITICAL if verdict.action == action.value else ServicePriority.RECOMMENDED

    if cal.seal_limit < odometer < cal.motor_limit:
        items.append(_item(
            "valve-rebuild", "Valve Rebuild", f"Odometer > {cal.seal_limit:.0f} cycles", prices.valve_rebuild,
            f"Your softener valve has shifted {odometer:.0f} times. The rubber seals are rated for "
            f"{cal.seal_limit:.0f}. It is likely leaking water down the drain.",
            _promoted(SoftenerAction.VALVE_REBUILD),
        ))
    if cal.resin_failure_pct <= resin < cal.resin_degraded_pct:
        items.append(_item(
            "resin-detox", "Resin Detox",
            f"Resin Health {cal.resin_failure_pct:.0f}-{cal.resin_degraded_pct:.0f}%", prices.resin_detox,
            "Your resin beads are coated in grime. A chemical detox restores factory flow rates.",
            _promoted(SoftenerAction.RESIN_DETOX),
        ))
    if resin < cal.resin_rebed_pct:
        items.append(_item(
            "resin-rebed", "Resin Re-Bed", f"Resin Health < {cal.resin_rebed_pct:.0f}%", prices.resin_rebed,
            "Your resin has lost over half its capacity. The unit burns salt but does not soften water.",
            _promoted(SoftenerAction.REBED_OR_REPLACE),
        ))
    if profile.water_source == WaterSource.CITY and not profile.has_carbon_filter:
        items.append(_item(
            "carbon-filter", "Carbon Pre-Filter", "City water without chlorine protection", prices.carbon_filter,
            "City chlorine is cutting your resin life in half. A carbon filter doubles softener lifespan.",
            ServicePriority.CRITICAL if resin < cal.carbon_critical_pct else ServicePriority.OPTIONAL,
        ))
    if odometer > cal.motor_limit or resin < cal.resin_replace_pct:
        items.append(_item(
            "replacement", "Unit Replacement", "End of serviceable life", prices.softener_replacement,
            "Repair costs exceed replacement value. A new high-efficiency unit pays for itself in salt and water.",
            ServicePriority.CRITICAL,
        ))
    return items


# ── Ranking ───────────────────────────────────────────────────────────────────

def rank_menu(items: list[ServiceMenuItem]) -> list[ServiceMenuItem]:
    """De-duplicate by id, keeping the most urgent copy, then sort by priority."""
    best: dict[str, ServiceMenuItem] = {}
    for item in items:
        current = best.get(item.id)
        if current is None or PRIORITY_ORDER[item.priority] < PRIORITY_ORDER[current.priority]:
            best[item.id] = item
    return sorted(best.values(), key=lambda i: PRIORITY_ORDER[i.priority])
