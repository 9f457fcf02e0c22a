"""
src/data/stress.py
──────────────────
Pressure and thermal stress multipliers for water heaters.

Every multiplier is 1.0 at baseline. Pressure, thermal expansion and
recirculation never go below 1.0; temperature may reward an eco setting.

  pressure  — Basquin fatigue law, (psi / design psi) ** exponent
  loop      — closed system without a working expansion tank
  circ      — continuous duty from a recirculation pump
  temp      — Arrhenius-style corrosion acceleration
  sediment  — under-deposit corrosion and hot-spotting
  scale     — heat-exchanger insulation by scale (tankless)
"""
from __future__ import annotations

from config.calibration import TANK, TANKLESS, TankCalibration, TanklessCalibration
from src.data.models import EquipmentProfile, ExpansionTankStatus, TempSetting


def pressure_stress(psi: float, cal: TankCalibration = TANK) -> float:
    effective = max(psi, cal.design_psi)
    return (effective / cal.design_psi) ** cal.fatigue_exp


def prv_failed(profile: EquipmentProfile, cal: TankCalibration = TANK) -> bool:
    """A PRV is installed yet the house still sees high pressure."""
    return profile.has_prv and profile.house_psi > cal.psi_prv_fail


def is_closed_system(profile: EquipmentProfile) -> bool:
    """A check valve, backflow preventer or PRV traps thermal expansion."""
    return profile.is_closed_loop or profile.has_prv


def expansion_tank_status(profile: EquipmentProfile) -> ExpansionTankStatus:
    if profile.exp_tank_status is not None:
        return profile.exp_tank_status
    return ExpansionTankStatus.FUNCTIONAL if profile.has_exp_tank else ExpansionTankStatus.MISSING


def has_functional_expansion(profile: EquipmentProfile) -> bool:
    """A waterlogged tank absorbs nothing and counts as missing."""
    return expansion_tank_status(profile) == ExpansionTankStatus.FUNCTIONAL


def is_transient_pressure(profile: EquipmentProfile) -> bool:
    return is_closed_system(profile) and not has_functional_expansion(profile)


def loop_stress(profile: EquipmentProfile, cal: TankCalibration = TANK) -> float:
    return cal.loop_penalty if is_transient_pressure(profile) else 1.0


def circulation_stress(profile: EquipmentProfile, cal: TankCalibration = TANK) -> float:
    return cal.circ_stress if profile.has_circ_pump else 1.0


def temperature_stress(setting: TempSetting, cal: TankCalibration = TANK) -> float:
    if setting == TempSetting.HOT:
        return cal.temp_hot
    if setting == TempSetting.LOW:
        return cal.temp_low
    return cal.temp_normal


def sediment_stress(lbs: float, cal: TankCalibration = TANK) -> float:
    return 1.0 + max(0.0, lbs) * cal.sediment_stress_per_lb


def usage_stress(cycles_per_day: float, cal: TankCalibration = TANK) -> float:
    return max(1.0, cycles_per_day / cal.reference_cycles_per_day)


def recirculation_loop_stress(profile: EquipmentProfile, cal: TanklessCalibration = TANKLESS) -> float:
    return cal.recirc_stress if (profile.has_recirculation_loop or profile.has_circ_pump) else 1.0


def scale_stress(scale_score: float, cal: TanklessCalibration = TANKLESS) -> float:
    return 1.0 + max(0.0, scale_score) * cal.scale_stress_per_point
