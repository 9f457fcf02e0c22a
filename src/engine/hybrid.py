"""
src/engine/hybrid.py
────────────────────
Hybrid (heat-pump) water heater engine.

A hybrid is a storage tank with a heat pump on top: it carries every tank
failure mode plus air-side and condensate problems. Tank metrics are reused
as-is with the hybrid sediment factor; heat-pump checks sit between the tank
replacement tier and the tank service tier.
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from config.calibration import HYBRID, TANK, HybridCalibration, TankCalibration
from config.verdicts import ActionCategory, BadgeColor, HeaterBadge
from src.data.degradation import resolve_hardness
from src.data.models import (
    DegradationMetrics,
    EquipmentProfile,
    FilterStatus,
    RoomVolumeType,
    ServiceMenuItem,
    Verdict,
)
from src.engine.base import EquipmentEngine
from src.engine.ladder import LadderContext, Outcome, Rule, RuleLadder
from src.engine.service_menu import hybrid_maintenance, infrastructure_issues, tank_maintenance
from src.engine.tank import TANK_REPLACE_RULES, TANK_SERVICE_RULES, TankEngine, measure_tank


def hybrid_efficiency(profile: EquipmentProfile, cal: HybridCalibration = HYBRID) -> float:
    """Heat-pump efficiency in % of rated, from air supply, compressor and drain condition."""
    efficiency = 100.0
    if profile.air_filter_status == FilterStatus.DIRTY:
        efficiency -= cal.dirty_filter_penalty
    elif profile.air_filter_status == FilterStatus.CLOGGED:
        efficiency -= cal.clogged_filter_penalty

    if profile.room_volume_type == RoomVolumeType.CLOSET_LOUVERED:
        efficiency -= cal.louvered_closet_penalty
    elif profile.room_volume_type == RoomVolumeType.CLOSET_SEALED:
        efficiency -= cal.sealed_closet_penalty

    efficiency *= profile.compressor_health / 100.0
    if not profile.is_condensate_clear:
        efficiency -= cal.condensate_penalty
    return float(np.clip(efficiency, 0.0, 100.0))


def measure_hybrid(
    profile: EquipmentProfile,
    cal: TankCalibration = TANK,
    hybrid_cal: HybridCalibration = HYBRID,
) -> DegradationMetrics:
    metrics = measure_tank(profile, cal)
    return metrics.model_copy(update={"hybrid_efficiency": round(hybrid_efficiency(profile, hybrid_cal), 1)})


# ── Heat-pump rungs ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class HybridContext(LadderContext):
    hybrid_cal: HybridCalibration = HYBRID


def _filter_clog(ctx: LadderContext) -> Outcome:
    return Outcome(
        action=ActionCategory.REPAIR.value,
        category=ActionCategory.REPAIR,
        badge=HeaterBadge.SERVICE.value,
        title="Filter Clog",
        reason=(
            f"Clogged air filter is starving the heat pump compressor (efficiency "
            f"{ctx.metrics.hybrid_efficiency:.0f}%). Immediate cleaning required to prevent compressor failure."
        ),
        urgent=True,
    )


def _condensate_blockage(ctx: LadderContext) -> Outcome:
    return Outcome(
        action=ActionCategory.REPAIR.value,
        category=ActionCategory.REPAIR,
        badge=HeaterBadge.SERVICE.value,
        title="Condensate Blockage",
        reason=(
            "Condensate drain is blocked. Water backup can damage the control board and create mold. "
            "Clear drain immediately."
        ),
        urgent=True,
    )


def _compressor_wear(ctx: HybridContext) -> Outcome:
    return Outcome(
        action=ActionCategory.REPAIR.value,
        category=ActionCategory.REPAIR,
        badge=HeaterBadge.SERVICE.value,
        title="Compressor Wear",
        reason=(
            f"Compressor health is {ctx.profile.compressor_health:.0f}% (limit "
            f"{ctx.hybrid_cal.compressor_wear_limit:.0f}%). The unit is falling back to resistance heat."
        ),
    )


def _insufficient_airflow(ctx: HybridContext) -> Outcome:
    return Outcome(
        action=ActionCategory.UPGRADE.value,
        category=ActionCategory.UPGRADE,
        badge=HeaterBadge.SERVICE.value,
        title="Insufficient Airflow",
        reason=(
            f"Heat pump installed in a sealed closet costs {ctx.hybrid_cal.sealed_closet_penalty:.0f}% efficiency. "
            "The unit needs ~700 cubic feet of air. Add a louvered door or ductwork."
        ),
        color=BadgeColor.YELLOW,
    )


HYBRID_RULES: list[Rule[HybridContext]] = [
    Rule("filter_clog", lambda c: c.profile.air_filter_status == FilterStatus.CLOGGED, _filter_clog),
    Rule("condensate_blockage", lambda c: not c.profile.is_condensate_clear, _condensate_blockage),
    Rule(
        "compressor_wear",
        lambda c: c.profile.compressor_health < c.hybrid_cal.compressor_wear_limit,
        _compressor_wear,
    ),
    Rule(
        "insufficient_airflow",
        lambda c: c.profile.room_volume_type == RoomVolumeType.CLOSET_SEALED,
        _insufficient_airflow,
    ),
]

HYBRID_LADDER: RuleLadder[HybridContext] = RuleLadder(
    "hybrid", TANK_REPLACE_RULES + HYBRID_RULES + TANK_SERVICE_RULES
)


class HybridEngine(TankEngine):
    ladder = HYBRID_LADDER

    def __init__(self, cal: TankCalibration = TANK, hybrid_cal: HybridCalibration = HYBRID):
        super().__init__(cal)
        self.hybrid_cal = hybrid_cal

    def measure(self, profile: EquipmentProfile) -> DegradationMetrics:
        return measure_hybrid(profile, self.cal, self.hybrid_cal)

    def context(self, profile: EquipmentProfile, metrics: DegradationMetrics) -> HybridContext:
        return HybridContext(profile, metrics, self.cal, self.hybrid_cal)

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
            + hybrid_maintenance(profile, cal=self.hybrid_cal)
        )
