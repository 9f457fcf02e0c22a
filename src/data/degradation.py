"""
src/data/degradation.py
───────────────────────
Physical degradation clocks. Each clock turns raw profile inputs into one
wear value; none of them knows about verdicts.

Clocks implemented:
  odometer      — softener regeneration cycles (mechanical, valve seals)
  resin         — ion-exchange resin health (chemical)
  salt          — brine consumption (softener fuel)
  thermal cycle — water-heater heat-up cycles (mechanical analogue)
  anode         — sacrificial anode shield life (chemical)
  sediment      — tank-bottom mineral mass (accumulation)
  scale         — tankless heat-exchanger scale (accumulation)
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from config.calibration import SOFTENER, TANK, TANKLESS, SoftenerCalibration, TankCalibration, TanklessCalibration
from config.equipment import HeaterVariant
from config.verdicts import AnodeStatus
from src.data.models import (
    ConnectionType,
    EquipmentProfile,
    SaltStatus,
    SanitizerType,
    UsageType,
    WaterSource,
)

DAYS_PER_YEAR = 365.0


def _finite(value: float, fallback: float = 0.0) -> float:
    return float(np.nan_to_num(value, nan=fallback, posinf=fallback, neginf=fallback))


# ── Hardness ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ResolvedHardness:
    street: float
    effective: float
    source: str        # "MEASURED" | "INFERRED" | "REPORTED"
    confidence: str    # "HIGH" | "MEDIUM" | "LOW"


def resolve_hardness(profile: EquipmentProfile, cal: TankCalibration = TANK) -> ResolvedHardness:
    """
    Hardness the equipment actually sees.

    A measured value always wins. Otherwise a softener with salt is assumed
    to work, an empty brine tank passes street hardness through, and an
    uninspected softener gets a partial credit.
    """
    street = profile.hardness_gpg
    if profile.measured_hardness_gpg is not None:
        return ResolvedHardness(street, profile.measured_hardness_gpg, "MEASURED", "HIGH")
    if profile.has_softener:
        if profile.softener_salt_status == SaltStatus.EMPTY:
            return ResolvedHardness(street, street, "INFERRED", "MEDIUM")
        if profile.softener_salt_status == SaltStatus.OK:
            return ResolvedHardness(street, min(street, cal.softened_hardness), "INFERRED", "MEDIUM")
        return ResolvedHardness(street, min(street, cal.unverified_softened_hardness), "INFERRED", "LOW")
    return ResolvedHardness(street, street, "REPORTED", "MEDIUM")


def softener_is_working(profile: EquipmentProfile) -> bool:
    return profile.has_softener and profile.softener_salt_status != SaltStatus.EMPTY


# ── Clock A: odometer (softener) ──────────────────────────────────────────────

@dataclass(frozen=True)
class RegenerationCycle:
    daily_load: float
    days_per_cycle: float
    regens_per_year: float


def regeneration_cycle(
    people: int,
    hardness_gpg: float,
    capacity_grains: float,
    cal: SoftenerCalibration = SOFTENER,
) -> RegenerationCycle:
    """
    Regeneration cadence from household grain load.

    daily_load     = people × gallons/person/day × hardness
    days_per_cycle = capacity × safety factor / daily_load
    regens_per_year = 365 / days_per_cycle

    The load and capacity are floored at 1 so an empty house or a zero
    capacity reading cannot divide by zero.
    """
    daily_load = _finite(people * cal.gallons_per_person_per_day * hardness_gpg)
    safe_load = max(daily_load, 1.0)
    usable = max(_finite(capacity_grains, 1.0), 1.0) * cal.capacity_safety_factor
    days_per_cycle = usable / safe_load
    return RegenerationCycle(
        daily_load=daily_load,
        days_per_cycle=days_per_cycle,
        regens_per_year=DAYS_PER_YEAR / days_per_cycle,
    )


def odometer(age_years: float, regens_per_year: float) -> float:
    """Total regeneration cycles since install."""
    return max(0.0, _finite(age_years * regens_per_year))


# ── Clock B: resin (softener) ─────────────────────────────────────────────────

def resin_decay_rate(
    source: WaterSource,
    has_carbon_filter: bool,
    cal: SoftenerCalibration = SOFTENER,
) -> float:
    """Resin loss in % per year. Chlorine oxidises resin; carbon blocks chlorine."""
    if source == WaterSource.CITY:
        return cal.city_carbon_decay if has_carbon_filter else cal.city_decay
    return cal.well_decay


def resin_health(age_years: float, decay_rate: float) -> float:
    return float(np.clip(100.0 - age_years * decay_rate, 0.0, 100.0))


# ── Clock C: salt (softener) ──────────────────────────────────────────────────

def salt_usage_lbs_per_month(days_per_cycle: float, cal: SoftenerCalibration = SOFTENER) -> float:
    regens_per_month = 30.0 / max(days_per_cycle, 1e-6)
    return regens_per_month * cal.salt_per_regen_lbs


# ── Thermal cycling (water heater) ────────────────────────────────────────────

_USAGE_MULTIPLIER = {
    UsageType.LIGHT: "usage_light",
    UsageType.NORMAL: "usage_normal",
    UsageType.HEAVY: "usage_heavy",
}


def daily_hot_water_demand(profile: EquipmentProfile, cal: TankCalibration = TANK) -> float:
    """Gallons of hot water drawn per day."""
    multiplier = getattr(cal, _USAGE_MULTIPLIER[profile.usage_type])
    return profile.people_count * cal.hot_gallons_per_person * multiplier


def thermal_cycles(age_years: float, daily_demand: float, tank_capacity_gal: float) -> tuple[float, float]:
    """
    Heat-up cycles since install.

    Returns:
        (cycles_per_day, total_cycles)
    """
    per_day = daily_demand / max(tank_capacity_gal, 1.0)
    return per_day, max(0.0, age_years * DAYS_PER_YEAR * per_day)


# ── Anode shield (tank / hybrid) ──────────────────────────────────────────────

@dataclass(frozen=True)
class AnodeBurn:
    rate: float
    softener: bool
    galvanic: bool
    recirc: bool
    chloramine: bool


@dataclass(frozen=True)
class AnodeShield:
    duration: float          # years of protection a fresh rod gives
    shield_life: float       # years of protection left
    depletion_percent: float
    status: AnodeStatus
    burn: AnodeBurn


def anode_burn(profile: EquipmentProfile, cal: TankCalibration = TANK) -> AnodeBurn:
    """Combined anode consumption multiplier and the factors behind it."""
    softener = softener_is_working(profile)
    galvanic = profile.connection_type == ConnectionType.DIRECT_COPPER
    recirc = profile.has_circ_pump
    chloramine = profile.sanitizer_type == SanitizerType.CHLORAMINE

    rate = 1.0
    if softener:
        rate *= cal.burn_softener     # softened water is more conductive
    if galvanic:
        rate *= cal.burn_galvanic
    if recirc:
        rate *= cal.burn_recirc
    if chloramine:
        rate *= cal.burn_chloramine
    return AnodeBurn(rate, softener, galvanic, recirc, chloramine)


def classify_anode(depletion_percent: float, cal: TankCalibration = TANK) -> AnodeStatus:
    if depletion_percent >= 100.0:
        return AnodeStatus.NAKED
    if depletion_percent >= cal.anode_replace_pct:
        return AnodeStatus.REPLACE
    if depletion_percent >= cal.anode_inspect_pct:
        return AnodeStatus.INSPECT
    return AnodeStatus.PROTECTED


def anode_shield(profile: EquipmentProfile, cal: TankCalibration = TANK) -> AnodeShield:
    """
    Sacrificial anode protection.

    Base life is the warranty length (a 12-year tank ships roughly twice the
    anode mass of a 6-year tank). The rod's own age restarts on replacement.
    """
    burn = anode_burn(profile, cal)
    base_life = profile.warranty_years if profile.warranty_years > 0 else cal.default_anode_years
    duration = base_life / burn.rate

    anode_age = profile.age_years
    if profile.last_anode_replace_years_ago is not None:
        anode_age = min(profile.age_years, profile.last_anode_replace_years_ago)

    depletion = float(np.clip(anode_age / max(duration, 1e-6) * 100.0, 0.0, 100.0))
    return AnodeShield(
        duration=duration,
        shield_life=max(0.0, duration - anode_age),
        depletion_percent=depletion,
        status=classify_anode(depletion, cal),
        burn=burn,
    )


# ── Sediment (tank / hybrid) ──────────────────────────────────────────────────

_SEDIMENT_FACTOR = {
    HeaterVariant.GAS.value: "sediment_gas",
    HeaterVariant.ELECTRIC.value: "sediment_electric",
    HeaterVariant.HYBRID.value: "sediment_hybrid",
}


def sediment_rate(
    variant: str,
    effective_hardness: float,
    daily_demand: float,
    cal: TankCalibration = TANK,
) -> float:
    """Sediment accumulation in lbs per year."""
    factor = getattr(cal, _SEDIMENT_FACTOR.get(variant, "sediment_gas"))
    demand_scale = daily_demand / cal.reference_daily_demand
    return max(0.0, effective_hardness * factor * demand_scale)


def sediment_lbs(
    age_years: float,
    rate: float,
    last_flush_years_ago: float | None,
    cal: TankCalibration = TANK,
) -> float:
    """
    Sediment currently in the tank.

    A flush removes only part of the bed, so deposits laid down before the
    last flush are carried forward at (1 - flush efficiency).
    """
    if last_flush_years_ago is None:
        return max(0.0, age_years * rate)
    since_flush = min(age_years, last_flush_years_ago)
    before_flush = age_years - since_flush
    return max(0.0, since_flush * rate + before_flush * rate * (1.0 - cal.flush_efficiency))


# ── Scale (tankless) ──────────────────────────────────────────────────────────

def scale_rate(effective_hardness: float, cal: TanklessCalibration = TANKLESS) -> float:
    """Scale score points per year."""
    return max(0.0, effective_hardness * cal.scale_per_gpg_year)


def scale_buildup(
    effective_hardness: float,
    years_since_descale: float,
    cal: TanklessCalibration = TANKLESS,
) -> float:
    return float(np.clip(scale_rate(effective_hardness, cal) * years_since_descale, 0.0, 100.0))


def flow_degradation(flow_gpm: float | None, rated_gpm: float | None) -> float | None:
    """Percent of rated flow lost, or None when either reading is missing."""
    if flow_gpm is None or rated_gpm is None or rated_gpm <= 0:
        return None
    return float(np.clip((rated_gpm - flow_gpm) / rated_gpm * 100.0, 0.0, 100.0))
